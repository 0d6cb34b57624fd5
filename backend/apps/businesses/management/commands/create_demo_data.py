from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
from django.utils import timezone

from apps.bank_accounts.models import BankAccount, BankTransaction
from apps.bank_accounts.services import create_transaction
from apps.businesses.models import Business
from apps.contacts.models import Creditor, Debtor
from apps.invoices.models import Invoice, Bill
from apps.invoices.services import create_document
from apps.payments.models import Payment, Receipt
from apps.payments.services import record_settlement
from apps.purchases.services import create_purchase

DEMO_BUSINESS_NAME = 'Demo Trading Co'


class Command(BaseCommand):
    help = 'Create a demo business with accounts, contacts, documents, payments and a transfer'

    def add_arguments(self, parser):
        parser.add_argument('--username', required=True, help='Owner of the demo business')

    def handle(self, *args, **options):
        User = get_user_model()
        try:
            owner = User.objects.get(username=options['username'])
        except User.DoesNotExist:
            raise CommandError(f"User '{options['username']}' does not exist")

        if Business.objects.filter(owner=owner, name=DEMO_BUSINESS_NAME).exists():
            self.stdout.write(self.style.WARNING(f'{DEMO_BUSINESS_NAME} already exists for {owner.username}'))
            return

        today = timezone.localdate()

        with transaction.atomic():
            business = Business.objects.create(
                owner=owner, name=DEMO_BUSINESS_NAME, email='accounts@demotrading.example'
            )
            self.stdout.write(f'Created business: {business.name}')

            checking = BankAccount.objects.create(
                business=business, name='Operating Account', account_number='000123456',
                account_type='checking', opening_balance=Decimal('10000.00')
            )
            savings = BankAccount.objects.create(
                business=business, name='Reserve Savings', account_number='000654321',
                account_type='savings', opening_balance=Decimal('5000.00')
            )
            self.stdout.write('Created 2 bank accounts')

            supplier = Creditor.objects.create(business=business, name='Northwind Supplies', email='billing@northwind.example')
            customer = Debtor.objects.create(business=business, name='Contoso Retail', email='ap@contoso.example')
            self.stdout.write('Created 1 creditor and 1 debtor')

            bill = create_document(
                Bill, business,
                [{'description': 'Shelving units', 'quantity': Decimal('4'), 'unit_price': Decimal('150.00')}],
                creditor=supplier, issue_date=today - timedelta(days=20), due_date=today + timedelta(days=10),
            )
            invoice = create_document(
                Invoice, business,
                [
                    {'description': 'Consulting hours', 'quantity': Decimal('10'), 'unit_price': Decimal('120.00')},
                    {'description': 'Setup fee', 'quantity': Decimal('1'), 'unit_price': Decimal('300.00')},
                ],
                debtor=customer, issue_date=today - timedelta(days=15), due_date=today + timedelta(days=15),
            )
            self.stdout.write(f'Created {bill.bill_number} and {invoice.invoice_number}')

            create_purchase(
                business, creditor=supplier, item_name='Printer paper', description='Office supplies',
                quantity=Decimal('10'), unit_price=Decimal('8.50'), purchase_date=today - timedelta(days=12)
            )

            payment = record_settlement(
                Payment, business, creditor=supplier, bill=bill, bank_account=checking,
                amount=bill.total_amount, payment_date=today - timedelta(days=5), reference='Bill settlement'
            )
            receipt = record_settlement(
                Receipt, business, debtor=customer, invoice=invoice, bank_account=checking,
                amount=Decimal('500.00'), payment_date=today - timedelta(days=3), reference='Part payment'
            )
            self.stdout.write(f'Recorded {payment.payment_number} and {receipt.receipt_number}')

            transfer = create_transaction(
                business, account=checking, transaction_type=BankTransaction.TRANSFER,
                destination_account=savings, amount=Decimal('1000.00'), date=today - timedelta(days=1),
                description='Move surplus to savings', category='Transfer'
            )
            self.stdout.write(f'Created transfer {transfer.transaction_number}')

        checking.refresh_from_db()
        savings.refresh_from_db()
        self.stdout.write(self.style.SUCCESS(
            f'Demo data ready: {checking.name} {checking.current_balance}, {savings.name} {savings.current_balance}'
        ))
