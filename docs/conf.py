import os
import sys
import django

# Autodoc imports the models, so Django must be configured
sys.path.insert(0, os.path.abspath('..'))
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "tests.settings")
django.setup()

project = 'django-storefront-tenancy'
copyright = '2026, django-storefront-tenancy contributors'
author = 'django-storefront-tenancy contributors'
release = '0.1.0'

extensions = [
    'sphinx.ext.autodoc',
    'sphinx.ext.viewcode',
    'sphinx.ext.napoleon',
    'myst_parser',
]

autodoc_member_order = 'bysource'

templates_path = ['_templates']
exclude_patterns = ['_build', 'Thumbs.db', '.DS_Store']

html_theme = 'sphinx_rtd_theme'
html_static_path = []

# MyST settings
myst_enable_extensions = [
    "colon_fence",
    "deflist",
]
