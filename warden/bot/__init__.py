"""
Warden Discord bot.

The bot serves the prompt, trope and lore commands and runs the daily
prompt scheduler. It runs inside the API process when ``WARDEN_BOT_TOKEN``
is set, or on its own through the ``warden-bot`` script.
"""
