"""
Management command to import a CSV file into a user's collection.

Usage:
    python manage.py import_collection --email alice@example.com --file items.csv
"""

from django.core.management.base import BaseCommand, CommandError

from apps.accounts.models import User
from apps.collection.services import import_items, EmptyImportError


class Command(BaseCommand):
    help = "Import collection items for a user from a CSV file"

    def add_arguments(self, parser):
        parser.add_argument('--email', required=True, help='Owner account e-mail')
        parser.add_argument('--file', required=True, help='Path to the CSV file')

    def handle(self, *args, **options):
        try:
            user = User.objects.get(email__iexact=options['email'])
        except User.DoesNotExist:
            raise CommandError(f"No account with e-mail {options['email']}")

        try:
            with open(options['file'], encoding='utf-8') as f:
                text = f.read()
        except OSError as e:
            raise CommandError(f"Cannot read {options['file']}: {e}")

        try:
            items = import_items(user=user, text=text)
        except EmptyImportError as e:
            raise CommandError(str(e))

        self.stdout.write(
            self.style.SUCCESS(f'Imported {len(items)} item(s) for {user.email}')
        )
