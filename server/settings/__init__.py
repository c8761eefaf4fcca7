"""Main settings file composed with django-split-settings.

Components are loaded in order, later files may override earlier ones.
To change settings file:
`DJANGO_ENV=production python manage.py runserver`
"""

from os import environ

from split_settings.tools import include, optional

# Managing environment via `DJANGO_ENV` variable:
environ.setdefault('DJANGO_ENV', 'development')
_ENV = environ['DJANGO_ENV']

_base_settings = (
    'components/common.py',
    'components/logging.py',
    'components/storages.py',
    'components/files.py',
    # Select the right env:
    optional('environments/{0}.py'.format(_ENV)),
)

# Include settings:
include(*_base_settings)
