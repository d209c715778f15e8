import logging

from fastapi.concurrency import run_in_threadpool
from sqlalchemy import select
from sqlalchemy.orm import Session

from j_user_svc.errors import InvalidCredentials
from j_user_svc.models.user import User
from j_user_svc.schemas import TokenResponse
from j_user_svc.security import PasswordHasher, TokenService


class AuthService:
    """
    Verifies email/password pairs and issues access tokens.
    """

    def __init__(self, db: Session, hasher: PasswordHasher, tokens: TokenService):
        self.db = db
        self.hasher = hasher
        self.tokens = tokens

    def _find_by_email(self, email: str):
        stmt = select(User).filter(User.email == email)
        return self.db.execute(stmt).scalars().first()

    async def sign_in(self, email: str, password: str) -> TokenResponse:
        """
        Authenticate a user with email and password.

        Raises InvalidCredentials both for an unknown email and for a wrong
        password, so callers cannot tell which emails are registered.
        """
        user = await run_in_threadpool(self._find_by_email, email)

        if user is None:
            await self.hasher.dummy_verify()
            logging.warning("Failed login attempt")
            raise InvalidCredentials()

        if not await self.hasher.verify(password, user.password_hash):
            logging.warning("Failed login attempt for user %s", user.id)
            raise InvalidCredentials()

        logging.info("User %s logged in", user.id)
        return TokenResponse(access_token=self.tokens.issue(user.id))
