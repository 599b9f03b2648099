import uvicorn
from fastapi import FastAPI

from app.api.routes.health import router as health_router
from app.api.routes.invites import router as invites_router
from app.api.routes.leaderboard import router as leaderboard_router
from app.api.routes.sessions import router as sessions_router
from app.core.config import get_settings
from app.core.logging import configure_logging
from app.db.session import SessionFactory, SessionLocal


def create_app(session_factory: SessionFactory | None = None) -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level, json_logs=settings.log_json)

    docs_enabled = bool(settings.enable_openapi_docs)
    app = FastAPI(
        title="Pi & Rho's Games API",
        version="0.1.0",
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None,
    )
    app.state.session_factory = session_factory or SessionLocal
    app.include_router(health_router)
    app.include_router(sessions_router)
    app.include_router(invites_router)
    app.include_router(leaderboard_router)
    return app


app = create_app()


def run() -> None:
    settings = get_settings()
    uvicorn.run(
        "app.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.app_env == "dev",
    )


if __name__ == "__main__":
    run()
