"""Background job queue settings."""

from server.settings.components import config

# Seconds the worker sleeps when no job is available
JOB_POLL_INTERVAL = config('JOB_POLL_INTERVAL', cast=float, default=1.0)

# Attempts per job before it is marked failed
JOB_MAX_ATTEMPTS = config('JOB_MAX_ATTEMPTS', cast=int, default=3)

# Base delay (seconds) before a failed job is retried
JOB_RETRY_DELAY = config('JOB_RETRY_DELAY', cast=int, default=5)

# Jobs running longer than this are failed on worker startup
JOB_STALE_MINUTES = config('JOB_STALE_MINUTES', cast=int, default=15)
