from django.core.management.base import BaseCommand, CommandError

from apps.bank_accounts.models import BankAccount
from apps.bank_accounts.services import recalculate_balance


class Command(BaseCommand):
    help = 'Recompute current balances from opening balance plus the transaction ledger'

    def add_arguments(self, parser):
        parser.add_argument(
            '--business',
            type=int,
            help='Only recalculate accounts of this business id',
        )
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show the differences without changing any balance',
        )

    def handle(self, *args, **options):
        dry_run = options['dry_run']

        if dry_run:
            self.stdout.write(self.style.WARNING('DRY RUN - No changes will be made'))

        accounts = BankAccount.objects.select_related('business').order_by('business_id', 'name')
        if options['business'] is not None:
            accounts = accounts.filter(business_id=options['business'])
            if not accounts.exists():
                raise CommandError(f"No bank accounts found for business {options['business']}")

        corrected = 0
        for account in accounts:
            if dry_run:
                old_balance, new_balance = account.current_balance, account.calculate_balance()
            else:
                old_balance, new_balance = recalculate_balance(account)

            if old_balance != new_balance:
                corrected += 1
                self.stdout.write(
                    f'{account.business.name} / {account.name}: {old_balance} -> {new_balance}'
                )

        total = accounts.count()
        if dry_run:
            self.stdout.write(self.style.SUCCESS(f'Would correct {corrected} of {total} account balances'))
        else:
            self.stdout.write(self.style.SUCCESS(f'Corrected {corrected} of {total} account balances'))
