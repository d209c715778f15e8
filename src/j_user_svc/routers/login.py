from fastapi import APIRouter, Depends, status

from j_user_svc.dependencies import get_auth_service, public
from j_user_svc.schemas import SignInRequest, TokenResponse
from j_user_svc.services.auth import AuthService
from j_user_svc.validation import validated_body

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=TokenResponse, status_code=status.HTTP_200_OK)
@public
async def login(
    request: SignInRequest = Depends(validated_body(SignInRequest)),
    auth: AuthService = Depends(get_auth_service),
):
    """
    Login endpoint to authenticate a user with email and password.

    On success returns a signed access token to be sent back as
    ``Authorization: Bearer <token>``. Unknown email and wrong password both
    answer 401 with the same body.
    """
    return await auth.sign_in(request.email, request.password)
