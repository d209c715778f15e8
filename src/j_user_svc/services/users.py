from typing import Any, Dict, List

from fastapi.concurrency import run_in_threadpool
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from j_user_svc.models.user import User
from j_user_svc.schemas import CreateUser, UpdateUser, UserOut
from j_user_svc.security import PasswordHasher


class UserService:
    """
    CRUD on user records.

    The session is synchronous; every database round trip runs in the
    threadpool so a slow query does not hold up the event loop.

    ORM errors are left to propagate: a duplicate email surfaces as
    IntegrityError and a missing row as NoResultFound, both translated to HTTP
    responses by the handlers in j_user_svc.errors.
    """

    def __init__(self, db: Session, hasher: PasswordHasher):
        self.db = db
        self.hasher = hasher

    def _get(self, user_id: int) -> User:
        return self.db.execute(select(User).where(User.id == user_id)).scalar_one()

    def _commit(self) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

    def _save(self, user: User, changes: Dict[str, Any]) -> UserOut:
        for field, value in changes.items():
            setattr(user, field, value)
        self.db.add(user)
        self._commit()
        self.db.refresh(user)
        return UserOut.model_validate(user)

    def _list(self) -> List[UserOut]:
        users = self.db.execute(select(User).order_by(User.id)).scalars().all()
        return [UserOut.model_validate(user) for user in users]

    def _delete(self, user_id: int) -> UserOut:
        user = self._get(user_id)
        removed = UserOut.model_validate(user)
        self.db.delete(user)
        self._commit()
        return removed

    async def create(self, data: CreateUser) -> UserOut:
        user = User(
            name=data.name,
            email=data.email,
            password_hash=await self.hasher.hash(data.password),
        )
        return await run_in_threadpool(self._save, user, {})

    async def find_all(self) -> List[UserOut]:
        return await run_in_threadpool(self._list)

    async def find_one(self, user_id: int) -> UserOut:
        user = await run_in_threadpool(self._get, user_id)
        return UserOut.model_validate(user)

    async def find_self(self, user_id: int) -> UserOut:
        """Return the record of the authenticated caller."""
        return await self.find_one(user_id)

    async def update(self, user_id: int, data: UpdateUser) -> UserOut:
        """
        Apply the supplied fields only. A new password is hashed before it is
        stored.
        """
        user = await run_in_threadpool(self._get, user_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)

        password = changes.pop("password", None)
        if password is not None:
            changes["password_hash"] = await self.hasher.hash(password)

        return await run_in_threadpool(self._save, user, changes)

    async def remove(self, user_id: int) -> UserOut:
        return await run_in_threadpool(self._delete, user_id)
