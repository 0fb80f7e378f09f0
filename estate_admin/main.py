import logging
from contextlib import asynccontextmanager
from typing import Optional

import requests
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .core.auth import clear_access_token
from .core.config import Settings, settings
from .core.context import DashboardContext
from .core.errors import ApiError, ConfirmationRequired, FormValidationError, UnauthorizedError
from .routers import auth, dashboard, developers, employees, images, offices, projects, wizard
from .services.auth_service import LOGIN_PATH

log = logging.getLogger(__name__)

# Local frontend dev servers
DEFAULT_CORS_ORIGINS = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]


def _register_error_handlers(app: FastAPI, config: Settings) -> None:
    @app.exception_handler(FormValidationError)
    async def form_validation_error(request: Request, exc: FormValidationError):
        return JSONResponse(status_code=422, content={"errors": exc.errors})

    @app.exception_handler(UnauthorizedError)
    async def unauthorized(request: Request, exc: UnauthorizedError):
        response = JSONResponse(status_code=401, content={"detail": exc.message, "redirect": LOGIN_PATH})
        clear_access_token(response, config)
        return response

    @app.exception_handler(ConfirmationRequired)
    async def confirmation_required(request: Request, exc: ConfirmationRequired):
        return JSONResponse(status_code=409, content={"detail": exc.prompt, "confirm": True})

    @app.exception_handler(ApiError)
    async def api_error(request: Request, exc: ApiError):
        log.error("Unhandled backend error on %s %s: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=502, content={"detail": exc.message})


def create_app(config: Optional[Settings] = None, http_session: Optional[requests.Session] = None) -> FastAPI:
    config = config or settings
    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    context = DashboardContext(config, http=http_session)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        context.close()

    app = FastAPI(
        title="Estate Admin Dashboard",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.context = context

    # Merge configured origins with the local defaults and de-dupe
    configured_origins = config.cors_origins or []
    if "*" in configured_origins:
        allowed_origins = ["*"]
    else:
        allowed_origins = list(dict.fromkeys(configured_origins + DEFAULT_CORS_ORIGINS))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_error_handlers(app, config)

    app.include_router(auth.router, prefix=config.api_prefix, tags=["auth"])
    app.include_router(dashboard.router, prefix=config.api_prefix, tags=["dashboard"])
    app.include_router(developers.router, prefix=config.api_prefix, tags=["developers"])
    app.include_router(offices.router, prefix=config.api_prefix, tags=["offices"])
    app.include_router(employees.router, prefix=config.api_prefix, tags=["employees"])
    app.include_router(projects.router, prefix=config.api_prefix, tags=["projects"])
    app.include_router(wizard.router, prefix=config.api_prefix, tags=["wizard"])
    app.include_router(images.router, prefix=config.api_prefix, tags=["images"])

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


app = create_app()
