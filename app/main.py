from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.v1.imports.router import router as imports_router
from app.core.config import settings
from app.core.logging import configure_logging
from app.db.session import create_tables


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.db_auto_create:
        await create_tables()
    yield


def create_app() -> FastAPI:
    configure_logging(settings.log_level)

    app = FastAPI(title="School Import Backend", lifespan=lifespan)

    # the back-office frontend is served from its own origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routers
    app.include_router(imports_router)

    return app


app = create_app()
