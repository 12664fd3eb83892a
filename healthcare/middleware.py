# healthcare/middleware.py
import json
import logging
import re

from django.utils import timezone

logger = logging.getLogger('patient_access')

PATIENT_PATH = re.compile(r'^/api/patients/(?:(?P<patient_id>[0-9a-fA-F-]{36})/(?P<resource>[\w-]*))?')
PATIENT_LOGIN_PATH = '/api/login/'


class PatientDataAccessMiddleware:
    """
    Middleware to record every successful access to patient data in the
    ``patient_access`` log, one JSON object per line.

    Covers the ``/api/patients/`` routes and the patient portal login, which
    returns the full patient record.
    """
    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        response = self.get_response(request)

        if not 200 <= response.status_code < 400:
            return response

        match = PATIENT_PATH.match(request.path)
        if match:
            self.log_access(
                request, response,
                patient_id=match.group('patient_id'),
                resource=match.group('resource') or 'patient'
            )
        elif request.path == PATIENT_LOGIN_PATH and request.method == 'POST':
            self.log_access(
                request, response,
                patient_id=self.get_logged_in_patient_id(response),
                resource='login',
                event_type='login'
            )

        return response

    def log_access(self, request, response, patient_id, resource, event_type=None):
        event_type_map = {
            'GET': 'view',
            'POST': 'create',
            'PUT': 'update',
            'PATCH': 'update',
            'DELETE': 'delete'
        }

        log_data = {
            'timestamp': timezone.now().isoformat(),
            'event_type': event_type or event_type_map.get(request.method, 'other'),
            'patient_id': patient_id,
            'resource': resource,
            'actor': self.get_actor(request),
            'method': request.method,
            'path': request.path,
            'ip': self.get_client_ip(request),
            'user_agent': request.META.get('HTTP_USER_AGENT', ''),
            'status_code': response.status_code
        }
        logger.info(f"PATIENT_ACCESS: {json.dumps(log_data)}")

    def get_logged_in_patient_id(self, response):
        data = getattr(response, 'data', None) or {}
        return (data.get('user') or {}).get('id')

    def get_actor(self, request):
        """``role:id`` of the token owner, as set on the request by DRF"""
        user = getattr(request, 'user', None)
        if user is None or not user.is_authenticated:
            return 'anonymous'
        return str(user)

    def get_client_ip(self, request):
        """Get the client IP address from the request"""
        x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
        if x_forwarded_for:
            return x_forwarded_for.split(',')[0].strip()
        return request.META.get('REMOTE_ADDR')
