import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import Depends, FastAPI

from j_user_svc.config import Settings, get_settings
from j_user_svc.dependencies import authenticate
from j_user_svc.errors import register_exception_handlers
from j_user_svc.logging_config import setup_logging
from j_user_svc.models.base import Base, create_db_engine, create_session_factory
from j_user_svc.routers.login import router as login_router
from j_user_svc.routers.users import router as users_router
from j_user_svc.security import PasswordHasher, TokenService


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application.

    Settings are read once here and handed to the collaborators that need
    them; request handlers reach those collaborators through ``app.state``.
    """
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    engine = create_db_engine(settings.database_url)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        Base.metadata.create_all(bind=engine)
        logging.info("%s started", settings.project_name)
        yield
        engine.dispose()

    app = FastAPI(
        title=settings.project_name,
        debug=settings.debug,
        lifespan=lifespan,
        # Runs before every route's own dependencies
        dependencies=[Depends(authenticate)],
    )

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    app.state.hasher = PasswordHasher(settings.bcrypt_rounds)
    app.state.tokens = TokenService(
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        expires_minutes=settings.access_token_expire_minutes,
    )

    register_exception_handlers(app)

    app.include_router(login_router)
    app.include_router(users_router)

    return app


def main() -> None:
    settings = get_settings()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
