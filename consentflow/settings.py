"""
Django settings for consentflow project.
"""

from pathlib import Path
from datetime import timedelta
import os
from dotenv import load_dotenv

# Load environment variables before using them
load_dotenv()

# Build paths inside the project like this: BASE_DIR / 'subdir'.
BASE_DIR = Path(__file__).resolve().parent.parent

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = os.getenv('SECRET_KEY', 'django-insecure-consentflow-dev-key')

# SECURITY WARNING: don't run with debug turned on in production!
DEBUG = os.getenv('DEBUG', 'False').lower() == 'true'

ALLOWED_HOSTS = os.getenv('ALLOWED_HOSTS', 'localhost,127.0.0.1,testserver').split(',')

# Application definition
INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',

    # Third-party apps
    'rest_framework',
    'drf_yasg',

    # Project apps
    'communication',
    'consent',
    'healthcare',
    'users',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
    'healthcare.middleware.PatientDataAccessMiddleware',
]

# Patient data access log
log_path = os.getenv('PATIENT_ACCESS_LOG_PATH', 'logs/patient_access.log')
# Strip any comments if present
if '#' in log_path:
    log_path = log_path.split('#')[0].strip()
# Convert to absolute path if it's relative
if not os.path.isabs(log_path):
    log_path = os.path.join(BASE_DIR, log_path)
# Ensure directory exists
os.makedirs(os.path.dirname(log_path), exist_ok=True)

LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'access': {
            'format': '{asctime} {message}',
            'style': '{',
        },
        'verbose': {
            'format': '{asctime} {levelname} {name}: {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
        },
        'access_file': {
            'level': 'INFO',
            'class': 'logging.handlers.RotatingFileHandler',
            'filename': log_path,
            'formatter': 'access',
            'maxBytes': 10485760,  # 10MB
            'backupCount': 10,
        },
    },
    'loggers': {
        'patient_access': {
            'handlers': ['access_file'],
            'level': 'INFO',
            'propagate': False,
        },
        'communication': {'handlers': ['console'], 'level': LOG_LEVEL},
        'consent': {'handlers': ['console'], 'level': LOG_LEVEL},
        'consentflow': {'handlers': ['console'], 'level': LOG_LEVEL},
        'healthcare': {'handlers': ['console'], 'level': LOG_LEVEL},
        'users': {'handlers': ['console'], 'level': LOG_LEVEL},
    },
}

ROOT_URLCONF = 'consentflow.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

WSGI_APPLICATION = 'consentflow.wsgi.application'

# Database configuration
if os.getenv('DB_ENGINE') == 'django.db.backends.postgresql':
    DATABASES = {
        'default': {
            'ENGINE': os.getenv('DB_ENGINE', 'django.db.backends.postgresql'),
            'NAME': os.getenv('DB_NAME', 'consentflow_db'),
            'USER': os.getenv('DB_USER', 'consentflow_user'),
            'PASSWORD': os.getenv('DB_PASSWORD', ''),
            'HOST': os.getenv('DB_HOST', 'localhost'),
            'PORT': os.getenv('DB_PORT', '5432'),
        }
    }
else:
    # SQLite for development
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.sqlite3',
            'NAME': BASE_DIR / 'db.sqlite3',
        }
    }

# Django REST Framework settings
# Every login returns a token sent back as `Authorization: Token <key>`
REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': [
        'users.authentication.AccessTokenAuthentication',
    ],
    'DEFAULT_PERMISSION_CLASSES': [
        'rest_framework.permissions.IsAuthenticated',
    ],
    'EXCEPTION_HANDLER': 'consentflow.exceptions.api_exception_handler',
}

# Password hashing for professionals and administrators
PASSWORD_VERIFIER = os.getenv('PASSWORD_VERIFIER', 'users.auth.DjangoPasswordVerifier')

# Lifetime of the tokens issued at login
ACCESS_TOKEN_TTL_HOURS = int(os.getenv('ACCESS_TOKEN_TTL_HOURS', '12'))

# Swagger settings
SWAGGER_SETTINGS = {
    'DEFAULT_INFO': 'consentflow.urls.api_info',
    'DEFAULT_AUTO_SCHEMA_CLASS': 'drf_yasg.inspectors.SwaggerAutoSchema',
    'SECURITY_DEFINITIONS': {
        'Token': {
            'type': 'apiKey',
            'name': 'Authorization',
            'in': 'header'
        }
    },
    'USE_SESSION_AUTH': False,
    'PERSIST_AUTH': True,
    'DEFAULT_MODEL_RENDERING': 'model',
    'TAGS_SORTER': 'alpha',
    'OPERATIONS_SORTER': 'alpha',
    'DEFAULT_GENERATOR_CLASS': 'drf_yasg.generators.OpenAPISchemaGenerator',
}

LANGUAGE_CODE = 'es'
TIME_ZONE = 'UTC'
USE_I18N = True
USE_TZ = True

# Static files and media
STATIC_URL = 'static/'
STATIC_ROOT = os.getenv('STATIC_ROOT', BASE_DIR / 'staticfiles')

MEDIA_URL = '/media/'
MEDIA_ROOT = os.getenv('MEDIA_ROOT', BASE_DIR / 'media')

# Folder with the consent PDFs loaded by `seed_demo_data`
CONSENT_UPLOADS_DIR = os.getenv('CONSENT_UPLOADS_DIR', BASE_DIR / 'uploads')

# Signature images arrive as base64 data URLs
DATA_UPLOAD_MAX_MEMORY_SIZE = 10 * 1024 * 1024

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# Security settings
SECURE_SSL_REDIRECT = os.getenv('SECURE_SSL_REDIRECT', 'False').lower() == 'true'
SESSION_COOKIE_SECURE = os.getenv('SESSION_COOKIE_SECURE', 'False').lower() == 'true'
CSRF_COOKIE_SECURE = os.getenv('CSRF_COOKIE_SECURE', 'False').lower() == 'true'
SECURE_CONTENT_TYPE_NOSNIFF = True
X_FRAME_OPTIONS = 'DENY'

# Email settings
EMAIL_BACKEND = os.getenv('EMAIL_BACKEND', 'django.core.mail.backends.smtp.EmailBackend')
EMAIL_HOST = os.getenv('EMAIL_HOST', '')
EMAIL_PORT = int(os.getenv('EMAIL_PORT', '587'))
EMAIL_USE_TLS = os.getenv('EMAIL_USE_TLS', 'True').lower() == 'true'
EMAIL_HOST_USER = os.getenv('EMAIL_HOST_USER', '')
EMAIL_HOST_PASSWORD = os.getenv('EMAIL_HOST_PASSWORD', '')
DEFAULT_FROM_EMAIL = os.getenv('DEFAULT_FROM_EMAIL', 'no-reply@localhost')
EMAIL_FROM_NAME = os.getenv('EMAIL_FROM_NAME', 'Gestor de Consentimientos')

# Base URL of the patient portal, used in emails and QR codes
PUBLIC_BASE_URL = os.getenv('PUBLIC_BASE_URL', '')

# Gemini configuration
GEMINI_API_KEY = os.getenv('GEMINI_API_KEY')
GEMINI_MODEL = os.getenv('GEMINI_MODEL', 'gemini-2.5-flash')

# Patient status flags
ACTION_REQUIRED_WINDOW_DAYS = int(os.getenv('ACTION_REQUIRED_WINDOW_DAYS', '2'))
ACTION_REQUIRED_WHEN_ANESTHESIA_MISSING = (
    os.getenv('ACTION_REQUIRED_WHEN_ANESTHESIA_MISSING', 'False').lower() == 'true'
)

# Celery
CELERY_BROKER_URL = os.getenv('CELERY_BROKER_URL', 'redis://localhost:6379/0')
CELERY_TIMEZONE = TIME_ZONE
CELERY_BEAT_SCHEDULE = {
    'dispatch-due-patient-notifications': {
        'task': 'communication.tasks.dispatch_due_notifications',
        'schedule': timedelta(minutes=1),
    },
}
