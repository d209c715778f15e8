"""
Password hashing and signed access tokens.

Both collaborators are built once by create_app() from Settings and kept on
``app.state``; nothing here reads configuration on its own.
"""
import logging
from datetime import datetime, timedelta, timezone

import jwt
from fastapi.concurrency import run_in_threadpool
from passlib.context import CryptContext

from j_user_svc.errors import AuthenticationRequired


class PasswordHasher:
    """
    bcrypt hashing through passlib. Hashing is CPU bound, so every call runs in
    the threadpool instead of on the event loop.
    """

    def __init__(self, rounds: int = 10):
        self.pwd_context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
        )

    async def hash(self, password: str) -> str:
        return await run_in_threadpool(self.pwd_context.hash, password)

    async def verify(self, plain_password: str, hashed_password: str) -> bool:
        """
        Verify a plain password against its hashed version.

        A stored value that is not a recognised hash verifies as False.
        """
        try:
            return await run_in_threadpool(self.pwd_context.verify, plain_password, hashed_password)
        except ValueError as e:
            logging.warning("Unreadable password hash: %s", e)
            return False

    async def dummy_verify(self) -> None:
        """Spend the time of a real verification. Used when no account matched."""
        await run_in_threadpool(self.pwd_context.dummy_verify)


class TokenService:
    """
    Issues and verifies HS256 JWTs whose subject is the user id.
    """

    def __init__(self, secret: str, algorithm: str = "HS256", expires_minutes: int = 60):
        self.secret = secret
        self.algorithm = algorithm
        self.expires_minutes = expires_minutes

    def issue(self, user_id: int) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "sub": str(user_id),
            "iat": now,
            "exp": now + timedelta(minutes=self.expires_minutes),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> int:
        """
        Return the user id carried by ``token``.

        Raises AuthenticationRequired for a bad signature, an expired token, a
        malformed token or a missing/non-numeric subject alike.
        """
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "sub"]},
            )
            return int(payload["sub"])
        except (jwt.PyJWTError, ValueError) as e:
            logging.info("Rejected access token: %s", e.__class__.__name__)
            raise AuthenticationRequired() from e
