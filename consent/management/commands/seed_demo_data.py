# consent/management/commands/seed_demo_data.py
import os

from django.conf import settings
from django.core.files import File
from django.core.management.base import BaseCommand, CommandError

from consent.models import ANESTHESIA, SURGICAL, ConsentForm
from users.models import Administrator, Anesthesiologist, Surgeon

DEMO_SURGEON = {
    'professional_license_number': 'S-12345',
    'first_name': 'María',
    'last_name': 'García',
    'specialty': 'Cirugía General',
}
DEMO_ANESTHESIOLOGIST = {
    'professional_license_number': 'A-54321',
    'first_name': 'Juan',
    'last_name': 'Pérez',
}
DEMO_ADMIN = {
    'email': 'admin@demo.com',
    'first_name': 'Admin',
    'last_name': 'Demo',
}


class Command(BaseCommand):
    """Django management command to load consent PDFs and demo accounts"""

    help = 'Load consent PDFs from CONSENT_UPLOADS_DIR and create the demo accounts'

    def add_arguments(self, parser):
        parser.add_argument(
            '--uploads-dir',
            default=None,
            help='Directory holding surgical/ and anesthesia/ PDF folders (defaults to CONSENT_UPLOADS_DIR)'
        )
        parser.add_argument(
            '--skip-accounts',
            action='store_true',
            help='Only load the consent forms'
        )

    def handle(self, *args, **options):
        uploads_dir = options['uploads_dir'] or settings.CONSENT_UPLOADS_DIR

        if not options['skip_accounts']:
            self.seed_accounts()

        loaded = 0
        for consent_type in (SURGICAL, ANESTHESIA):
            loaded += self.seed_consent_forms(uploads_dir, consent_type)

        self.stdout.write(self.style.SUCCESS(f"Seeding finished: {loaded} consent forms loaded"))

    def seed_accounts(self):
        surgeon = self.get_or_create_account(Surgeon, 'professional_license_number', DEMO_SURGEON, 'password123')
        self.stdout.write(f"Demo surgeon: S-12345 / password123 (id {surgeon.id})")

        anesthesiologist = self.get_or_create_account(
            Anesthesiologist, 'professional_license_number', DEMO_ANESTHESIOLOGIST, 'password123'
        )
        self.stdout.write(f"Demo anesthesiologist: A-54321 / password123 (id {anesthesiologist.id})")

        self.get_or_create_account(Administrator, 'email', DEMO_ADMIN, 'admin123')
        self.stdout.write("Demo admin: admin@demo.com / admin123")

    def get_or_create_account(self, model, key, fields, raw_password):
        """Existing accounts are left untouched"""
        account = model.objects.filter(**{key: fields[key]}).first()
        if account is None:
            account = model(**fields)
            account.set_password(raw_password)
            account.save()
        return account

    def seed_consent_forms(self, uploads_dir, consent_type):
        """
        Load every PDF of one consent type, updating forms that already exist

        Returns:
            int: Number of forms loaded
        """
        directory = os.path.join(uploads_dir, consent_type.lower())
        if not os.path.isdir(directory):
            raise CommandError(f"Folder not found: {directory}. Create it and place the PDFs inside.")

        pdf_files = sorted(f for f in os.listdir(directory) if f.lower().endswith('.pdf'))
        if not pdf_files:
            self.stdout.write(self.style.WARNING(f"No PDFs in {directory}, skipping {consent_type}"))
            return 0

        for file_name in pdf_files:
            path = os.path.join(directory, file_name)

            form = ConsentForm.objects.filter(type=consent_type, file_name=file_name).first()
            if form is None:
                form = ConsentForm(type=consent_type, file_name=file_name)
            elif form.file:
                form.file.delete(save=False)

            with open(path, 'rb') as fh:
                form.file.save(file_name, File(fh), save=False)
            form.file_size = os.path.getsize(path)
            form.save()

            self.stdout.write(f"Seeded \"{file_name}\" ({consent_type})")

        return len(pdf_files)
