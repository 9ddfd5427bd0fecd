# accounting/management/commands/seed_station_chart.py

from django.core.management.base import BaseCommand, CommandError

from accounting.services.account_resolver import role_codes
from accounting.services.account_store import seed_chart_of_accounts
from accounting.services.exceptions import AccountingServiceError


class Command(BaseCommand):
    help = "Seed the petrol station chart of accounts (idempotent)"

    def handle(self, *args, **options):
        self.stdout.write("Seeding petrol station Chart of Accounts...")

        try:
            created_count, updated_count = seed_chart_of_accounts()
        except AccountingServiceError as exc:
            raise CommandError(str(exc)) from exc

        if options.get("verbosity", 1) > 1:
            for role, code in role_codes().items():
                self.stdout.write(f"  {code}  {role}")

        self.stdout.write(
            self.style.SUCCESS(
                f"✔ Station chart seeded ({created_count} new accounts, {updated_count} updated)."
            )
        )
