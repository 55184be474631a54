"""
Management command to export a user's collection as CSV.

Usage:
    python manage.py export_collection --email alice@example.com
    python manage.py export_collection --email alice@example.com --output backup.csv

Without --output the file is written to the working directory under the
same dated name the download endpoint uses.
"""

from django.core.management.base import BaseCommand, CommandError

from apps.accounts.models import User
from apps.collection.services import export_items, export_filename, EmptyExportError


class Command(BaseCommand):
    help = "Export a user's collection to a CSV file"

    def add_arguments(self, parser):
        parser.add_argument('--email', required=True, help='Owner account e-mail')
        parser.add_argument('--output', help='Destination path')

    def handle(self, *args, **options):
        try:
            user = User.objects.get(email__iexact=options['email'])
        except User.DoesNotExist:
            raise CommandError(f"No account with e-mail {options['email']}")

        try:
            text = export_items(user=user)
        except EmptyExportError as e:
            raise CommandError(str(e))

        output = options['output'] or export_filename()
        with open(output, 'w', encoding='utf-8', newline='') as f:
            f.write(text)

        self.stdout.write(self.style.SUCCESS(f'Exported collection of {user.email} to {output}'))
