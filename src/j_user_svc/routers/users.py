from typing import List

from fastapi import APIRouter, Depends, status

from j_user_svc.dependencies import current_user_id, get_user_service, public
from j_user_svc.schemas import CreateUser, UpdateUser, UserOut
from j_user_svc.services.users import UserService
from j_user_svc.validation import validated_body

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=UserOut, status_code=status.HTTP_201_CREATED)
@public
async def create_user(
    payload: CreateUser = Depends(validated_body(CreateUser)),
    users: UserService = Depends(get_user_service),
):
    """Sign up. Answers 409 when the email is already registered."""
    return await users.create(payload)


@router.get("", response_model=List[UserOut])
async def list_users(users: UserService = Depends(get_user_service)):
    return await users.find_all()


@router.get("/me", response_model=UserOut)
async def read_me(
    user_id: int = Depends(current_user_id),
    users: UserService = Depends(get_user_service),
):
    return await users.find_self(user_id)


@router.patch("", response_model=UserOut)
async def update_me(
    payload: UpdateUser = Depends(validated_body(UpdateUser)),
    user_id: int = Depends(current_user_id),
    users: UserService = Depends(get_user_service),
):
    """Partially update the caller's own record."""
    return await users.update(user_id, payload)


@router.delete("", response_model=UserOut)
async def delete_me(
    user_id: int = Depends(current_user_id),
    users: UserService = Depends(get_user_service),
):
    """Delete the caller's own record and return it."""
    return await users.remove(user_id)
