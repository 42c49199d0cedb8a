"""
Application constants shared by the server and its routers.
"""

PROJECT_NAME = "Warden"
VERSION = "0.1.0"
SCHEMA_VERSION = "v1"

API_PREFIX = "/api"

# Mutating requests under these prefixes must carry the CSRF token header.
CSRF_PROTECTED_PREFIXES = (
    f"{API_PREFIX}/characters",
    f"{API_PREFIX}/lore",
    f"{API_PREFIX}/prompts",
    f"{API_PREFIX}/tropes",
    f"{API_PREFIX}/stats",
    f"{API_PREFIX}/knowledge-base",
    f"{API_PREFIX}/documents",
    f"{API_PREFIX}/files",
    f"{API_PREFIX}/admin",
    f"{API_PREFIX}/system",
    f"{API_PREFIX}/bot-settings",
)
CSRF_HEADER_NAME = "x-csrf-token"
CSRF_SESSION_KEY = "csrf_token"
SESSION_USER_KEY = "user_id"
