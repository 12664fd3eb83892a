# consent/tests/test_seed_command.py
from io import StringIO

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError

from consent.models import ANESTHESIA, SURGICAL, ConsentForm
from healthcare.tests.utils import PDF_BYTES
from users.models import Administrator, Anesthesiologist, Surgeon


@pytest.fixture
def uploads_dir(tmp_path):
    root = tmp_path / 'uploads'
    (root / 'surgical').mkdir(parents=True)
    (root / 'anesthesia').mkdir()
    (root / 'surgical' / 'colecistectomia.pdf').write_bytes(PDF_BYTES)
    (root / 'surgical' / 'hernia.pdf').write_bytes(PDF_BYTES)
    (root / 'surgical' / 'notas.txt').write_text('not a consent')
    (root / 'anesthesia' / 'general.pdf').write_bytes(PDF_BYTES)
    return root


def run_seed(*args):
    out = StringIO()
    call_command('seed_demo_data', *args, stdout=out)
    return out.getvalue()


@pytest.mark.django_db
def test_seed_loads_forms_and_accounts(uploads_dir):
    output = run_seed('--uploads-dir', str(uploads_dir))

    assert 'Seeding finished: 3 consent forms loaded' in output
    assert ConsentForm.objects.filter(type=SURGICAL).count() == 2
    assert ConsentForm.objects.get(type=ANESTHESIA).file_size == len(PDF_BYTES)

    surgeon = Surgeon.objects.get(professional_license_number='S-12345')
    assert surgeon.password != 'password123'
    assert surgeon.check_password('password123')
    assert Anesthesiologist.objects.get(professional_license_number='A-54321').check_password('password123')
    assert Administrator.objects.get(email='admin@demo.com').check_password('admin123')


@pytest.mark.django_db
def test_seed_is_idempotent(uploads_dir):
    run_seed('--uploads-dir', str(uploads_dir))
    first_ids = set(ConsentForm.objects.values_list('id', flat=True))

    run_seed('--uploads-dir', str(uploads_dir))

    assert set(ConsentForm.objects.values_list('id', flat=True)) == first_ids
    assert Surgeon.objects.count() == 1
    assert Administrator.objects.count() == 1


@pytest.mark.django_db
def test_skip_accounts(uploads_dir):
    run_seed('--uploads-dir', str(uploads_dir), '--skip-accounts')

    assert ConsentForm.objects.count() == 3
    assert not Surgeon.objects.exists()


@pytest.mark.django_db
def test_missing_folder(tmp_path):
    with pytest.raises(CommandError):
        run_seed('--uploads-dir', str(tmp_path / 'nowhere'), '--skip-accounts')


@pytest.mark.django_db
def test_empty_folder_is_skipped(uploads_dir):
    (uploads_dir / 'anesthesia' / 'general.pdf').unlink()

    output = run_seed('--uploads-dir', str(uploads_dir), '--skip-accounts')

    assert 'No PDFs' in output
    assert not ConsentForm.objects.filter(type=ANESTHESIA).exists()
