"""
Main Application Entry Point.

This module initializes the FastAPI application, configures middleware
(CORS, sessions, CSRF and request logging), and includes all API routers.
When a Discord bot token is configured, the lifespan also runs the Warden
bot and its daily prompt scheduler inside the server process.
"""

import asyncio
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware

from warden.core.database import init_db
from warden.core.logging_config import get_logger, setup_logging
from warden.core.monitoring import initialize_logfire

from .api.v1 import (
    admin,
    auth,
    bot_settings,
    characters,
    csrf,
    discord,
    documents,
    files,
    health,
    knowledge_base,
    lore,
    prompts,
    public,
    stats,
    system,
    tropes,
)
from .core import constant
from .core.config import settings
from .exception_handlers import setup_exception_handlers
from .middleware import CSRFMiddleware, LogfireMiddleware

# Initialize logging
setup_logging()
logger = get_logger(__name__)


async def start_bot(app: FastAPI) -> None:
    """Start the Discord bot in the background when a token is configured."""
    token = settings.bot.token
    if not token:
        logger.info("WARDEN_BOT_TOKEN not set; Discord bot disabled")
        return

    from warden.bot.client import create_bot

    bot = create_bot()
    app.state.bot = bot
    app.state.bot_task = asyncio.create_task(bot.start(token))
    logger.info("Discord bot starting")


async def stop_bot(app: FastAPI) -> None:
    bot = app.state.bot
    if bot is None:
        return
    await bot.close()
    task = app.state.bot_task
    if task is not None and not task.done():
        task.cancel()
    app.state.bot = None
    app.state.bot_task = None
    logger.info("Discord bot stopped")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events.

    Handles startup and shutdown events for the FastAPI application.
    """
    # Startup
    try:
        logger.info("Starting up Warden Server...")
        await init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)

    try:
        await start_bot(app)
    except Exception as e:
        logger.error(f"Discord bot failed to start: {e}", exc_info=True)

    yield

    # Shutdown
    logger.info("Shutting down Warden Server...")
    await stop_bot(app)


app = FastAPI(
    title=constant.PROJECT_NAME,
    description="""
    Warden Server API

    This API provides the backend services for Warden, a tabletop roleplaying companion.
    It supports managing character sheets, guild lore, roleplay prompts, character stats,
    documents and the Discord bot's per-guild settings.
    """,
    version=constant.VERSION,
    openapi_url=f"{constant.API_PREFIX}/openapi.json",
    docs_url=f"{constant.API_PREFIX}/docs",
    redoc_url=f"{constant.API_PREFIX}/redoc",
    lifespan=lifespan,
)
app.state.bot = None
app.state.bot_task = None

# Middleware added last runs first: CORS, then sessions, then CSRF
app.add_middleware(LogfireMiddleware)
app.add_middleware(CSRFMiddleware, enabled=settings.csrf_enabled)
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.session.secret,
    session_cookie=settings.session.cookie_name,
    max_age=settings.session.max_age,
    same_site="lax",
    https_only=settings.is_production,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors.origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

setup_exception_handlers(app)
initialize_logfire(app)


app.include_router(health.router, prefix=constant.API_PREFIX, tags=["health"])
app.include_router(csrf.router, prefix=constant.API_PREFIX)
app.include_router(auth.router, prefix=f"{constant.API_PREFIX}/auth")
app.include_router(characters.router, prefix=f"{constant.API_PREFIX}/characters")
app.include_router(public.router, prefix=f"{constant.API_PREFIX}/public")
app.include_router(lore.router, prefix=f"{constant.API_PREFIX}/lore")
app.include_router(prompts.router, prefix=f"{constant.API_PREFIX}/prompts")
app.include_router(tropes.router, prefix=f"{constant.API_PREFIX}/tropes")
app.include_router(bot_settings.router, prefix=f"{constant.API_PREFIX}/bot-settings")
app.include_router(discord.router, prefix=f"{constant.API_PREFIX}/discord")
app.include_router(stats.router, prefix=f"{constant.API_PREFIX}/stats")
app.include_router(knowledge_base.router, prefix=f"{constant.API_PREFIX}/knowledge-base")
app.include_router(documents.router, prefix=f"{constant.API_PREFIX}/documents")
app.include_router(files.router, prefix=f"{constant.API_PREFIX}/files")
app.include_router(admin.router, prefix=f"{constant.API_PREFIX}/admin")
app.include_router(system.router, prefix=f"{constant.API_PREFIX}/system")
