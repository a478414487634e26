from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import logging

from database import Base, Settings, create_session_factory, get_settings
from core.exceptions import RajaMantriException
from api import rooms, roles, results

logger = logging.getLogger(__name__)


def create_app(settings: Settings = None) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup: 建立 Engine / Session factory，並建立資料庫表
        logging.basicConfig(level=settings.log_level)
        session_factory = create_session_factory(settings.database_url)
        engine = session_factory.kw["bind"]
        Base.metadata.create_all(bind=engine)
        app.state.session_factory = session_factory
        logger.info("Database ready")
        yield
        # Shutdown: 釋放連線池
        engine.dispose()

    app = FastAPI(
        title="Raja Mantri Chor Sipahi API",
        description="Backend API for the four-player Raja Mantri Chor Sipahi party game",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.settings = settings

    # CORS configuration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RajaMantriException)
    async def game_exception_handler(request: Request, exc: RajaMantriException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.kind, "detail": str(exc)}
        )

    # Include routers
    app.include_router(rooms.router)
    app.include_router(roles.router)
    app.include_router(results.router)

    @app.get("/")
    def root():
        return {"message": "Raja Mantri Chor Sipahi API", "status": "ok"}

    @app.get("/health")
    def health():
        return {"status": "healthy"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=3000)
