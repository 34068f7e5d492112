"""
Settings module initialization.
Automatically selects settings based on DJANGO_ENV environment variable.

When DJANGO_SETTINGS_MODULE already names a submodule (for example
`config.settings.test` under pytest), that submodule decides and the
package loads nothing else.
"""

import os

_module = os.environ.get('DJANGO_SETTINGS_MODULE', '')
env = os.environ.get('DJANGO_ENV', 'dev')
if _module.startswith(__name__ + '.'):
    env = _module.rsplit('.', 1)[-1]

if env == 'prod':
    from .prod import *
elif env == 'test':
    from .test import *
elif env == 'base':
    from .base import *
else:
    from .dev import *
