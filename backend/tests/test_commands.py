from datetime import timedelta
from decimal import Decimal
from io import StringIO

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError
from django.utils import timezone

from apps.bank_accounts.models import BankAccount
from apps.bank_accounts import services as bank_services
from apps.businesses.models import Business
from apps.contacts.models import Creditor, Debtor
from apps.invoices.models import Invoice, Bill
from apps.invoices.services import create_document
from .conftest import balance_of


def run(*args, **options):
    out = StringIO()
    call_command(*args, stdout=out, **options)
    return out.getvalue()


@pytest.mark.django_db
class TestRecalculateBalances:

    def drift(self, account, balance):
        BankAccount.objects.filter(pk=account.pk).update(current_balance=Decimal(balance))

    def test_corrects_drifted_balance(self, business, checking, savings):
        bank_services.create_transaction(
            business, account=checking, transaction_type='deposit', amount=Decimal('250.00'),
            date=timezone.localdate(), description='Sales'
        )
        self.drift(checking, '1.00')

        output = run('recalculate_balances')

        assert 'Checking: 1.00 -> 1250.00' in output
        assert 'Corrected 1 of 2 account balances' in output
        assert balance_of(checking) == Decimal('1250.00')
        assert balance_of(savings) == Decimal('500.00')

    def test_dry_run_changes_nothing(self, checking):
        self.drift(checking, '1.00')

        output = run('recalculate_balances', '--dry-run')

        assert 'DRY RUN' in output
        assert 'Would correct 1 of 1 account balances' in output
        assert balance_of(checking) == Decimal('1.00')

    def test_single_business(self, checking, other_business):
        foreign = BankAccount.objects.create(business=other_business, name='Foreign', opening_balance=Decimal('10.00'))
        self.drift(checking, '1.00')
        self.drift(foreign, '1.00')

        run('recalculate_balances', '--business', str(other_business.id))

        assert balance_of(foreign) == Decimal('10.00')
        assert balance_of(checking) == Decimal('1.00')

    def test_unknown_business(self, checking):
        with pytest.raises(CommandError):
            run('recalculate_balances', '--business', '999999')


@pytest.mark.django_db
class TestMarkOverdue:

    def test_flags_pending_documents_past_due(self, business, debtor, creditor):
        today = timezone.localdate()
        late = create_document(
            Invoice, business, [{'description': 'Work', 'quantity': Decimal('1'), 'unit_price': Decimal('50.00')}],
            debtor=debtor, issue_date=today - timedelta(days=40), due_date=today - timedelta(days=10)
        )
        current = create_document(
            Invoice, business, [{'description': 'Work', 'quantity': Decimal('1'), 'unit_price': Decimal('50.00')}],
            debtor=debtor, issue_date=today, due_date=today + timedelta(days=30)
        )
        late_bill = create_document(
            Bill, business, [{'description': 'Stock', 'quantity': Decimal('1'), 'unit_price': Decimal('20.00')}],
            creditor=creditor, issue_date=today - timedelta(days=40), due_date=today - timedelta(days=1)
        )

        output = run('mark_overdue')

        assert '1 invoices marked overdue' in output
        assert '1 bills marked overdue' in output
        late.refresh_from_db()
        current.refresh_from_db()
        late_bill.refresh_from_db()
        assert late.status == Invoice.OVERDUE
        assert current.status == Invoice.PENDING
        assert late_bill.status == Bill.OVERDUE


@pytest.mark.django_db
class TestCreateDemoData:

    def test_creates_demo_business(self, user):
        output = run('create_demo_data', '--username', user.username)

        business = Business.objects.get(owner=user, name='Demo Trading Co')
        assert 'Demo data ready' in output
        assert business.bank_accounts.get(name='Operating Account').current_balance == Decimal('8900.00')
        assert business.bank_accounts.get(name='Reserve Savings').current_balance == Decimal('6000.00')
        assert Debtor.objects.get(business=business).outstanding_amount == Decimal('1000.00')
        assert Creditor.objects.get(business=business).outstanding_amount == Decimal('85.00')
        assert Bill.objects.get(business=business).status == Bill.PAID
        assert Invoice.objects.get(business=business).status == Invoice.PENDING

    def test_second_run_is_skipped(self, user):
        run('create_demo_data', '--username', user.username)
        output = run('create_demo_data', '--username', user.username)

        assert 'already exists' in output
        assert Business.objects.filter(owner=user, name='Demo Trading Co').count() == 1

    def test_unknown_user(self, db):
        with pytest.raises(CommandError):
            run('create_demo_data', '--username', 'nobody@example.com')
