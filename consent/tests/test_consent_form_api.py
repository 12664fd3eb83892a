# consent/tests/test_consent_form_api.py
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from consent.models import ANESTHESIA, SURGICAL
from healthcare.tests.utils import PDF_BYTES, client_for, make_consent_form, make_patient, make_surgeon


class ConsentFormAPITest(TestCase):
    """Test suite for the consent form catalogue"""

    def setUp(self):
        self.client = client_for(make_surgeon())
        self.surgical = make_consent_form(SURGICAL, 'cirugia.pdf')
        self.anesthesia = make_consent_form(ANESTHESIA, 'anestesia.pdf')

    def test_list_all(self):
        response = self.client.get(reverse('consentform-list'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 2)

    def test_filter_by_type(self):
        response = self.client.get(reverse('consentform-list'), {'type': 'anesthesia'})

        self.assertEqual([f['id'] for f in response.data], [str(self.anesthesia.id)])
        self.assertEqual(response.data[0]['pdf_url'], f"/api/consent-forms/{self.anesthesia.id}/pdf/")
        self.assertEqual(response.data[0]['file_size'], len(PDF_BYTES))

    def test_unknown_type(self):
        response = self.client.get(reverse('consentform-list'), {'type': 'dental'})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('error', response.data)

    def test_download_pdf(self):
        response = self.client.get(reverse('consentform-pdf', args=[self.surgical.id]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response['Content-Type'], 'application/pdf')
        self.assertEqual(b''.join(response.streaming_content), PDF_BYTES)

    def test_download_missing_file(self):
        self.surgical.file.delete(save=False)

        response = self.client.get(reverse('consentform-pdf', args=[self.surgical.id]))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_forms_are_read_only(self):
        response = self.client.post(reverse('consentform-list'), {'type': SURGICAL}, format='json')
        self.assertEqual(response.status_code, status.HTTP_405_METHOD_NOT_ALLOWED)

    def test_anonymous(self):
        response = APIClient().get(reverse('consentform-list'))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_patient_downloads_pdf(self):
        response = client_for(make_patient()).get(reverse('consentform-pdf', args=[self.surgical.id]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
