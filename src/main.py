"""
Production FastAPI Application

Ticket pool, participant runners and the HTTP API in one process.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from src.platform.app_factory import create_app
from src.platform.config.core_setting import settings
from src.platform.config.di import container
from src.platform.config.wire_modules import WIRE_MODULES
from src.platform.database.orm_db_setting import create_db_and_tables, dispose_engine
from src.platform.logging.loguru_io import Logger


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifespan: startup and shutdown."""
    Logger.base.info('🚀 [Marketplace] Starting up...')

    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Marketplace] Dependency injection wired')

    await create_db_and_tables()
    Logger.base.info('🗄️  [Marketplace] Database tables ready')

    controller = container.ticket_pool_controller()
    registry = container.participant_registry()

    await controller.load_configuration()

    try:
        async with registry.running(resume_active=settings.RESUME_PARTICIPANTS_ON_STARTUP):
            Logger.base.info('✅ [Marketplace] Ready to serve requests')
            yield
            Logger.base.info('🛑 [Marketplace] Shutting down...')
    finally:
        # Runners are stopped and awaited by now; persist what the pool still knows
        await controller.shutdown()
        await dispose_engine()
        Logger.base.info('🗄️  [Marketplace] Database engine disposed')
        container.unwire()

    Logger.base.info('👋 [Marketplace] Shutdown complete')


app = create_app(lifespan=lifespan)


@app.get('/')
async def root() -> RedirectResponse:
    """Root endpoint - redirect to docs."""
    return RedirectResponse(url='/docs')
