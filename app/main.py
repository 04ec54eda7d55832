from fastapi import FastAPI, Request, WebSocket, WebSocketDisconnect, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from sqlalchemy.exc import SQLAlchemyError
from typing import Any, Optional
import asyncio
import logging
from datetime import datetime, timezone

from app.config import Settings, settings as default_settings
from app.database import Database
from app.api import auth, family, location, safe_zones, emergency, insights
from app.core.exceptions import SafeNestError
from app.core.realtime import ConnectionManager

logger = logging.getLogger(__name__)

SERVICE_NAME = "SafeNest API"

# Lifespan manager for startup/shutdown events
@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup; a store that cannot be opened aborts the process here
    settings: Settings = app.state.settings
    database = Database(settings.DATABASE_URL, echo=settings.SQL_ECHO)
    await database.create_db_and_tables()
    app.state.db = database
    app.state.websocket_manager = ConnectionManager()
    logger.info("Application starting up")
    yield
    # Shutdown
    await app.state.websocket_manager.close_all()
    await database.dispose()
    logger.info("Application shutting down")

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings
    logging.basicConfig(level=settings.LOG_LEVEL)

    app = FastAPI(
        title=SERVICE_NAME,
        description="Family location sharing, safe zones and emergency alerts",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.settings = settings

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_timeout(request: Request, call_next):
        try:
            return await asyncio.wait_for(call_next(request), timeout=settings.REQUEST_TIMEOUT_SECONDS)
        except asyncio.TimeoutError:
            logger.warning(f"Request timed out: {request.method} {request.url.path}")
            return JSONResponse(
                status_code=status.HTTP_504_GATEWAY_TIMEOUT,
                content={"detail": "Request timed out"}
            )

    @app.exception_handler(SafeNestError)
    async def safenest_exception_handler(request: Request, exc: SafeNestError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.detail}", exc_info=exc)
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

    @app.exception_handler(SQLAlchemyError)
    async def database_exception_handler(request: Request, exc: SQLAlchemyError):
        logger.error(f"Database error on {request.method} {request.url.path}", exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Database error"}
        )

    # Include routers
    app.include_router(auth.router, prefix="/api/auth", tags=["Authentication"])
    app.include_router(family.router, prefix="/api/family", tags=["Family"])
    app.include_router(location.router, prefix="/api/location", tags=["Location"])
    app.include_router(safe_zones.router, prefix="/api/safezones", tags=["Safe Zones"])
    app.include_router(emergency.router, prefix="/api", tags=["Emergency"])
    app.include_router(insights.router, prefix="/api/insights", tags=["Insights"])

    @app.websocket("/ws/{session_id}")
    async def websocket_endpoint(websocket: WebSocket, session_id: str):
        manager: ConnectionManager = websocket.app.state.websocket_manager
        await manager.connect(websocket, session_id)
        try:
            while True:
                data = await websocket.receive_text()
                await manager.handle_message(session_id, data)
        except WebSocketDisconnect:
            manager.disconnect(session_id, websocket)
        except Exception as e:
            logger.warning(f"WebSocket error for {session_id}: {e}")
            manager.disconnect(session_id, websocket)

    @app.get("/")
    async def root():
        return {
            "message": SERVICE_NAME,
            "status": "active",
            "version": "1.0.0",
            "timestamp": datetime.now(timezone.utc).isoformat()
        }

    # Health check endpoint
    @app.get("/health")
    async def health_check(request: Request) -> dict[str, Any]:
        manager: ConnectionManager = request.app.state.websocket_manager
        return {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "service": SERVICE_NAME,
            "active_connections": len(manager.active_connections)
        }

    return app

app = create_app()
