"""Management command to apply a scanner payload."""

from django.apps import apps
from django.core.management.base import BaseCommand, CommandError

from stampcard.exceptions import StampcardError


class Command(BaseCommand):
    help = 'Apply a scan payload, e.g. \'{"t":"stamp","uid":"ab12cd34","ts":0}\''

    def add_arguments(self, parser):
        parser.add_argument("payload", help="Scan payload JSON")
        parser.add_argument("--count", type=int, default=1)

    def handle(self, *args, **options):
        service = apps.get_app_config("stampcard").service
        try:
            account = service.apply_scan(options["payload"], options["count"])
        except StampcardError as exc:
            raise CommandError(exc.message) from exc

        self.stdout.write(
            self.style.SUCCESS(f"{account.name} ({account.id}): {account.stamp_count} stamps")
        )
