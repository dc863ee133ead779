"""Django settings entry point.

Settings are split into components and combined with django-split-settings.
Environment-specific values are read with python-decouple from ``config/.env``
or the process environment.
"""

from split_settings.tools import include

include(
    'components/common.py',
    'components/logging.py',
    'components/storages.py',
    'components/files.py',
    'components/jobs.py',
)
