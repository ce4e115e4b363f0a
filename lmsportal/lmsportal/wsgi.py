"""
WSGI config for lmsportal project.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'lmsportal.settings')

application = get_wsgi_application()
