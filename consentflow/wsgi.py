"""
WSGI config for consentflow project.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'consentflow.settings')

application = get_wsgi_application()
