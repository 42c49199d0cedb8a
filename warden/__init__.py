"""Warden.

Character management for tabletop roleplaying games.

Core subpackages
----------------

- ``warden.core``: logging, monitoring, the SQLModel database layer
  (entities, repositories) and the API I/O schemas.
- ``warden.server``: the FastAPI application, its routers, middleware and
  settings.
- ``warden.bot``: the Discord bot commands and the daily prompt scheduler.

The API and the bot share one event loop when the bot token is configured:
the server lifespan starts the bot, and the bot starts the prompt scheduler
once it is connected.
"""
