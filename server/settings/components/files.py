"""Settings for file listing and access tokens."""

from server.settings.components import config

# Records per listing page
FILES_PAGE_SIZE = config('FILES_PAGE_SIZE', cast=int, default=20)

# Seconds an issued access token stays valid
AUTH_TOKEN_TTL = config('AUTH_TOKEN_TTL', cast=int, default=86400)
