"""
Request-scoped dependencies: authentication and service construction.

``authenticate`` is installed on the application itself (see app.create_app),
so FastAPI resolves it before any route-level dependency, including body
validation, for every route. Endpoints opt out with ``@public``.
"""
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from j_user_svc.errors import AuthenticationRequired
from j_user_svc.models.base import get_db
from j_user_svc.services.auth import AuthService
from j_user_svc.services.users import UserService

bearer_scheme = HTTPBearer(auto_error=False)


def public(endpoint):
    """
    Mark an endpoint as reachable without a token.

    Apply it below the router decorator so the flag is set before the function
    is registered::

        @router.post("/login")
        @public
        async def login(...): ...
    """
    endpoint.is_public = True
    return endpoint


def is_public(request: Request) -> bool:
    route = request.scope.get("route")
    endpoint = getattr(route, "endpoint", None) or request.scope.get("endpoint")
    return getattr(endpoint, "is_public", False)


async def authenticate(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> None:
    if is_public(request):
        return
    if credentials is None:
        raise AuthenticationRequired()
    request.state.user_id = request.app.state.tokens.verify(credentials.credentials)


def current_user_id(request: Request) -> int:
    user_id = getattr(request.state, "user_id", None)
    if user_id is None:
        raise AuthenticationRequired()
    return user_id


def get_user_service(request: Request, db: Session = Depends(get_db)) -> UserService:
    return UserService(db, request.app.state.hasher)


def get_auth_service(request: Request, db: Session = Depends(get_db)) -> AuthService:
    return AuthService(db, request.app.state.hasher, request.app.state.tokens)
