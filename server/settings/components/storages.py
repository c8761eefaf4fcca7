"""Django storage configuration for the user file bucket.

Files live in an S3-compatible bucket:
- MinIO for local development
- Cloudflare R2 or AWS S3 for production

Every user's files sit under a single namespace prefix and are
addressed by a stable, unsigned download URL.
"""

from typing import Any, Final

from server.settings.components import config

STORAGES: Final[dict[str, dict[str, Any]]] = {
    'default': {
        'BACKEND': 'server.apps.files.infrastructure.storage.FileStorage',
        'OPTIONS': {
            'bucket_name': config(
                'AWS_STORAGE_BUCKET_NAME',
                default='savespace',
            ),
            # `None` falls back to the boto3 credential chain
            'access_key': config('AWS_ACCESS_KEY_ID', default=None),
            'secret_key': config('AWS_SECRET_ACCESS_KEY', default=None),
            'endpoint_url': config(
                'AWS_S3_ENDPOINT_URL',
                default=None,
            ),
            'region_name': config(
                'AWS_S3_REGION_NAME',
                default='us-east-1',
            ),
            # Re-uploading a file with the same name replaces it
            'file_overwrite': True,
            # Download URLs double as file identity, they must not expire
            'querystring_auth': False,
            'default_acl': None,  # Inherit bucket ACL
        },
    },
    'staticfiles': {
        'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage',
    },
}
