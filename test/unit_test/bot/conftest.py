from unittest.mock import AsyncMock, MagicMock

import pytest


@pytest.fixture
def ctx():
    """Command context in a guild channel, recording replies."""
    context = MagicMock()
    context.guild.id = 1111
    context.channel.id = 2222
    context.author.id = 3333
    context.reply = AsyncMock()
    return context


@pytest.fixture
def last_reply(ctx):
    """Return a callable giving ``(text, embed)`` of the last ``ctx.reply`` call."""

    def _last_reply():
        call = ctx.reply.call_args
        text = call.args[0] if call.args else None
        return text, call.kwargs.get("embed")

    return _last_reply
