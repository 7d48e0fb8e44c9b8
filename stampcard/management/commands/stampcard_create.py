"""Management command to open a stamp card account."""

from django.apps import apps
from django.core.management.base import BaseCommand, CommandError

from stampcard.exceptions import StampcardError


class Command(BaseCommand):
    help = "Create a stamp card account and print its id"

    def add_arguments(self, parser):
        parser.add_argument("name", help="Customer name")
        parser.add_argument("--phone", default="", help="Customer phone")

    def handle(self, *args, **options):
        service = apps.get_app_config("stampcard").service
        try:
            account_id = service.create_account(options["name"], options["phone"])
        except StampcardError as exc:
            raise CommandError(exc.message) from exc

        self.stdout.write(self.style.SUCCESS(f"Created account {account_id}"))
