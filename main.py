"""
Campus Pulse - campus events and club management backend
Main application entry point
"""

import logging
from contextlib import asynccontextmanager
from typing import Callable

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session
import uvicorn

from campus_pulse.core.config import settings
from campus_pulse.core.db import engine, Base, SessionLocal
from campus_pulse.api import routes_admin, routes_public, ws
from campus_pulse.api.ws import WebSocketManager
from campus_pulse.services.channels import CrossTabChannel, InProcessChannel, SameTabChannel
from campus_pulse.services.data_store import DataStore
from campus_pulse.services.session import TabSessions
from campus_pulse.services.storage import SqlKeyValueStorage

# Configure logging
logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

def create_app(session_factory: Callable[[], Session] = SessionLocal, bind=None) -> FastAPI:
    """Build the application; the store lives exactly as long as the app does"""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        Base.metadata.create_all(bind=bind or engine)

        websocket_manager = WebSocketManager()
        storage_channel = InProcessChannel(settings.STORAGE_CHANGE_EVENT)
        login_channel = SameTabChannel(websocket_manager, settings.LOGIN_CHANGE_EVENT)
        cross_tab_channel = CrossTabChannel(websocket_manager)

        store = DataStore(
            SqlKeyValueStorage(session_factory),
            channels=[storage_channel, cross_tab_channel],
        )
        store.open()
        logger.info(f"Store loaded: {len(store.clubs)} clubs, {len(store.events)} events")

        app.state.websocket_manager = websocket_manager
        app.state.cross_tab_channel = cross_tab_channel
        app.state.store = store
        app.state.tab_sessions = TabSessions(store, channel=login_channel)
        yield

        store.close()
        for channel in (storage_channel, login_channel, cross_tab_channel):
            channel.close()
        logger.info("Application shutdown")

    app = FastAPI(
        title="Campus Pulse",
        description="Campus events directory and club management",
        version="1.0.0",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOW_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(routes_public.router, tags=["public"])
    app.include_router(routes_admin.router, prefix="/admin", tags=["admin"])
    app.include_router(ws.router, prefix="/ws", tags=["websocket"])

    @app.get("/")
    async def root():
        """Root endpoint with basic info"""
        return {"name": "Campus Pulse", "docs": f"{settings.BASE_URL}/docs"}

    return app

app = create_app()

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="127.0.0.1",
        port=8000,
        reload=True
    )
