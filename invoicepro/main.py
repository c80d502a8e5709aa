import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from invoicepro.api.router import api_router
from invoicepro.core.config import settings
from invoicepro.repositories.registry import Repositories, build_repositories
from invoicepro.services.auth_service import AuthService

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def bootstrap(repos: Repositories) -> None:
    auth = AuthService(repos)
    auth.rehash_plaintext_passwords()
    auth.ensure_default_admin()


def create_app(repos: Optional[Repositories] = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if getattr(app.state, "repos", None) is None:
            app.state.repos = build_repositories()
            bootstrap(app.state.repos)
        yield

    app = FastAPI(title="InvoicePro Backend", lifespan=lifespan)
    app.state.repos = repos
    if repos is not None:
        bootstrap(repos)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"detail": "Invalid request", "errors": jsonable_encoder(exc.errors())},
        )

    app.include_router(api_router, prefix="/api")

    @app.get("/")
    def read_root():
        return {"message": "Welcome to InvoicePro Backend API"}

    @app.get("/health")
    def health(request: Request):
        state = request.app.state.repos
        return {"status": "ok", "storage": state.backend if state else "not initialized"}

    return app


app = create_app()


if __name__ == "__main__":
    import os

    import uvicorn
    port = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)
