"""Management command to add stamps to an account."""

from django.apps import apps
from django.core.management.base import BaseCommand, CommandError

from stampcard.exceptions import StampcardError


class Command(BaseCommand):
    help = "Add stamps to a stamp card account"

    def add_arguments(self, parser):
        parser.add_argument("account_id")
        parser.add_argument(
            "--count",
            type=int,
            default=1,
            help="Number of stamps to add (default 1)",
        )

    def handle(self, *args, **options):
        service = apps.get_app_config("stampcard").service
        try:
            account = service.add_stamps(options["account_id"], options["count"])
        except StampcardError as exc:
            raise CommandError(exc.message) from exc

        progress = service.progress(account)
        message = f"{account.name} ({account.id}): {account.stamp_count} stamps"
        if progress.ready_to_redeem:
            message += f", {progress.rewards_available} reward(s) ready"
        else:
            message += f", {progress.remaining} to next reward"
        self.stdout.write(self.style.SUCCESS(message))
