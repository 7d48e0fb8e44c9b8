"""Management command to clear every stamp card account."""

from django.apps import apps
from django.core.management.base import BaseCommand, CommandError


class Command(BaseCommand):
    help = "Remove every stamp card account (irreversible)"

    def add_arguments(self, parser):
        parser.add_argument(
            "--noinput",
            "--no-input",
            action="store_false",
            dest="interactive",
            help="Do not prompt for confirmation",
        )

    def handle(self, *args, **options):
        if options["interactive"]:
            answer = input("Clear all stamp card data? Type 'yes' to continue: ")
            if answer.strip().lower() != "yes":
                raise CommandError("Reset cancelled.")

        removed = apps.get_app_config("stampcard").service.clear_all()
        self.stdout.write(self.style.SUCCESS(f"Removed {removed} accounts."))
