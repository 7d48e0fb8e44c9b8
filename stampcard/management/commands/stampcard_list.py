"""Management command to list stamp card accounts."""

from django.apps import apps
from django.core.management.base import BaseCommand


class Command(BaseCommand):
    help = "List stamp card accounts, optionally filtered by name, phone or id"

    def add_arguments(self, parser):
        parser.add_argument("query", nargs="?", default="", help="Search text")

    def handle(self, *args, **options):
        service = apps.get_app_config("stampcard").service
        accounts = service.list_accounts(options["query"])

        if not accounts:
            self.stdout.write("No accounts found.")
            return

        for account in accounts:
            ready = " *" if service.progress(account).ready_to_redeem else ""
            self.stdout.write(
                f"{account.id}  {account.name:<20} {account.phone:<16} "
                f"stamps={account.stamp_count} redeemed={account.redeemed_count}{ready}"
            )
