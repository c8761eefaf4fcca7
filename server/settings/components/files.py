"""Settings for the files app."""

from server.settings.components import config

# Thread pool size for per-file metadata lookups during catalog refresh
FILES_CATALOG_MAX_WORKERS = config(
    'FILES_CATALOG_MAX_WORKERS',
    cast=int,
    default=8,
)
