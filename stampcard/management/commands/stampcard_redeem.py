"""Management command to redeem a reward."""

from django.apps import apps
from django.core.management.base import BaseCommand, CommandError

from stampcard.exceptions import StampcardError


class Command(BaseCommand):
    help = "Redeem one free item for a stamp card account"

    def add_arguments(self, parser):
        parser.add_argument("account_id")

    def handle(self, *args, **options):
        service = apps.get_app_config("stampcard").service
        try:
            result = service.redeem(options["account_id"])
        except StampcardError as exc:
            raise CommandError(exc.message) from exc

        account = result.account
        if not result.approved:
            raise CommandError(
                f"Redemption denied: {account.stamp_count}/{result.reward_threshold} stamps"
            )

        self.stdout.write(
            self.style.SUCCESS(
                f"Redeemed reward #{account.redeemed_count} for {account.name} "
                f"({account.stamp_count} stamps left)"
            )
        )
