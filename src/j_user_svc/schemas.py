from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class SignInRequest(BaseModel):
    """
    Pydantic model for login request containing email and password.
    """
    email: EmailStr
    password: str = Field(min_length=1)


class TokenResponse(BaseModel):
    """
    Pydantic model for login response containing the signed access token.
    """
    access_token: str


class CreateUser(BaseModel):
    name: str = Field(min_length=2, max_length=100)
    email: EmailStr
    password: str = Field(min_length=6, max_length=50)


class UpdateUser(BaseModel):
    """
    Partial update of the caller's own record. Fields left out, or sent as
    null, are not touched.
    """
    name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(default=None, min_length=6, max_length=50)


class UserOut(BaseModel):
    """
    Output shape of a user. Built from the ORM object; has no password field.
    """
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
