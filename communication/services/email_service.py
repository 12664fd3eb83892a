# communication/services/email_service.py
import logging
from email.utils import formataddr
from urllib.parse import quote

from django.conf import settings
from django.core.mail import EmailMultiAlternatives

from consentflow.exceptions import MailerUnavailable, PreconditionError, UpstreamError, ValidationError

logger = logging.getLogger(__name__)

# Backends that need no SMTP host
LOCAL_EMAIL_BACKENDS = (
    'django.core.mail.backends.console.EmailBackend',
    'django.core.mail.backends.locmem.EmailBackend',
    'django.core.mail.backends.filebased.EmailBackend',
    'django.core.mail.backends.dummy.EmailBackend',
)


def build_portal_url(email, request=None):
    """
    Link to the patient portal with the email prefilled

    Uses PUBLIC_BASE_URL, falling back to the host of the current request.
    """
    base_url = settings.PUBLIC_BASE_URL
    if not base_url and request is not None:
        base_url = request.build_absolute_uri('/')
    base_url = (base_url or '').rstrip('/')
    return f"{base_url}/#patient?email={quote(email, safe='')}"


class EmailService:
    """Service for sending emails"""

    @staticmethod
    def is_configured():
        """Whether outgoing mail can be delivered with the current settings"""
        if settings.EMAIL_BACKEND in LOCAL_EMAIL_BACKENDS:
            return True
        return bool(settings.EMAIL_HOST)

    @staticmethod
    def get_from_address():
        return formataddr((settings.EMAIL_FROM_NAME, settings.DEFAULT_FROM_EMAIL))

    @staticmethod
    def send_email(recipient_email, subject, html_content, text_content=None):
        """
        Send an email through the configured Django backend

        Args:
            recipient_email: Email address of the recipient
            subject: Email subject
            html_content: HTML content of the email
            text_content: Plain text alternative (optional)

        Returns:
            bool: True if the email was sent successfully, False otherwise
        """
        if not EmailService.is_configured():
            logger.warning(f"Email to {recipient_email} not sent: mail is not configured")
            return False

        if text_content is None:
            text_content = "Por favor abra este correo en un cliente compatible con HTML."

        try:
            msg = EmailMultiAlternatives(
                subject=subject,
                body=text_content,
                from_email=EmailService.get_from_address(),
                to=[recipient_email]
            )
            msg.attach_alternative(html_content, 'text/html')
            msg.send()
        except Exception as e:
            logger.error(f"Failed to send email to {recipient_email}: {str(e)}")
            return False

        logger.info(f"Email sent successfully to {recipient_email}")
        return True

    @staticmethod
    def send_consent_email(patient, portal_url):
        """
        Email the patient their consent PDFs and the portal link

        Args:
            patient: The patient, with its consent forms loaded
            portal_url: Link to the patient portal

        Raises:
            MailerUnavailable: If outgoing mail is not configured
            ValidationError: If the patient has no email
            PreconditionError: If no consent is associated yet
            UpstreamError: If the mail server rejects the message
        """
        if not EmailService.is_configured():
            raise MailerUnavailable()

        if not patient.email:
            raise ValidationError(f"Patient {patient.id} has no email address.")

        forms = patient.get_consent_forms()
        if not forms:
            raise PreconditionError('The patient has no consent forms to send.')

        html_content = f"""
        <html>
        <body>
            <p>Hola <b>{patient.first_name}</b>, adjuntamos tus consentimientos.</p>
            <p>Accede al portal: <a href="{portal_url}">{portal_url}</a> (contraseña = cédula).</p>
        </body>
        </html>
        """
        text_content = (
            f"Hola {patient.first_name}, adjuntamos tus consentimientos.\n\n"
            f"Accede al portal: {portal_url} (contraseña = cédula)."
        )

        msg = EmailMultiAlternatives(
            subject='Consentimientos y próximos pasos',
            body=text_content,
            from_email=EmailService.get_from_address(),
            to=[patient.email]
        )
        msg.attach_alternative(html_content, 'text/html')

        try:
            for form in forms:
                with form.file.open('rb') as pdf:
                    msg.attach(form.file_name, pdf.read(), 'application/pdf')
            msg.send()
        except Exception as e:
            logger.error(f"Failed to send consent email to patient {patient.id}: {str(e)}")
            raise UpstreamError('The consent email could not be sent.')

        logger.info(f"Consent email with {len(forms)} attachments sent to patient {patient.id}")
