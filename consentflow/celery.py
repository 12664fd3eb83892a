# consentflow/celery.py
import os

from celery import Celery

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'consentflow.settings')

app = Celery('consentflow')

# Read CELERY_* keys from the Django settings
app.config_from_object('django.conf:settings', namespace='CELERY')
app.autodiscover_tasks()
