from decimal import Decimal
from unittest import mock

import pytest
from django.db import DatabaseError, IntegrityError, transaction

from apps.bank_accounts.models import BankAccount
from apps.businesses.models import Business
from apps.businesses.numbering import next_document_number
from apps.contacts.models import Creditor
from apps.invoices.models import Invoice


@pytest.mark.django_db
class TestBusinessAPI:

    def test_list_only_shows_own_businesses(self, api_client, business, other_business):
        response = api_client.get('/api/v1/businesses/')
        assert response.status_code == 200
        names = [b['name'] for b in response.data['results']]
        assert names == ['Acme Trading']

    def test_create_business(self, api_client, user):
        response = api_client.post('/api/v1/businesses/', {
            'name': 'Second Shop', 'email': 'shop@example.com', 'tax_id': 'GB123'
        }, format='json')
        assert response.status_code == 201
        assert Business.objects.get(name='Second Shop').owner == user

    def test_name_unique_per_owner(self, api_client, business):
        response = api_client.post('/api/v1/businesses/', {'name': 'acme trading'}, format='json')
        assert response.status_code == 400
        assert 'name' in response.data

    def test_same_name_allowed_for_other_owner(self, api_client, other_business):
        response = api_client.post('/api/v1/businesses/', {'name': other_business.name}, format='json')
        assert response.status_code == 201

    def test_cannot_touch_foreign_business(self, api_client, other_business):
        response = api_client.delete(f'/api/v1/businesses/{other_business.id}/')
        assert response.status_code == 404
        assert Business.objects.filter(pk=other_business.pk).exists()


@pytest.mark.django_db
class TestBusinessScoping:

    def test_missing_business_header(self, api_client):
        api_client.credentials()
        response = api_client.get('/api/v1/contacts/creditors/')
        assert response.status_code == 400
        assert 'business' in response.data

    def test_business_query_parameter(self, api_client, business, creditor):
        api_client.credentials()
        response = api_client.get(f'/api/v1/contacts/creditors/?business={business.id}')
        assert response.status_code == 200
        assert response.data['count'] == 1

    def test_foreign_business_is_not_found(self, api_client, other_business):
        api_client.credentials(HTTP_X_BUSINESS_ID=str(other_business.id))
        response = api_client.get('/api/v1/contacts/creditors/')
        assert response.status_code == 404

    def test_querysets_are_filtered_to_the_business(self, api_client, creditor, other_business):
        Creditor.objects.create(business=other_business, name='Hidden')
        response = api_client.get('/api/v1/contacts/creditors/')
        assert [c['name'] for c in response.data['results']] == [creditor.name]

    def test_records_of_another_business_are_not_found(self, api_client, other_business):
        foreign = Creditor.objects.create(business=other_business, name='Hidden')
        response = api_client.get(f'/api/v1/contacts/creditors/{foreign.id}/')
        assert response.status_code == 404

    def test_creates_are_stamped_with_the_business(self, api_client, business):
        response = api_client.post('/api/v1/contacts/debtors/', {'name': 'Fabrikam'}, format='json')
        assert response.status_code == 201
        assert Creditor.objects.count() == 0
        assert business.debtors.get().name == 'Fabrikam'

    def test_related_records_must_share_the_business(self, api_client, other_business):
        foreign_account = BankAccount.objects.create(business=other_business, name='Foreign')
        response = api_client.post('/api/v1/bank-accounts/transactions/', {
            'account': foreign_account.id,
            'transaction_type': 'deposit',
            'amount': '10.00',
            'date': '2025-03-01',
            'description': 'Sneaky',
        }, format='json')
        assert response.status_code == 400
        assert 'account' in response.data


@pytest.mark.django_db
class TestDocumentNumbering:

    def test_first_number(self, business):
        assert next_document_number(Invoice.objects.filter(business=business), 'invoice_number', 'INV') == 'INV-0001'

    def test_continues_after_highest(self, business, debtor):
        for number in ('INV-0003', 'INV-0010', 'INV-0007'):
            Invoice.objects.create(
                business=business, debtor=debtor, invoice_number=number,
                issue_date='2025-01-01', due_date='2025-01-31'
            )
        queryset = Invoice.objects.filter(business=business)
        assert next_document_number(queryset, 'invoice_number', 'INV') == 'INV-0011'

    def test_numbers_are_scoped_per_business(self, business, other_business, debtor):
        Invoice.objects.create(
            business=business, debtor=debtor, invoice_number='INV-0005',
            issue_date='2025-01-01', due_date='2025-01-31'
        )
        queryset = Invoice.objects.filter(business=other_business)
        assert next_document_number(queryset, 'invoice_number', 'INV') == 'INV-0001'

    def test_ignores_values_that_do_not_follow_the_pattern(self, business, checking):
        checking.transactions.create(
            business=business, transaction_type='transfer', transaction_number='TRF-TO-0042',
            amount=Decimal('1.00'), date='2025-01-01', description='Leg'
        )
        queryset = checking.transactions.all()
        assert next_document_number(queryset, 'transaction_number', 'TRF') == 'TRF-0001'

    def test_timestamp_fallback_on_database_error(self, business):
        queryset = mock.Mock()
        queryset.filter.side_effect = DatabaseError('boom')
        number = next_document_number(queryset, 'invoice_number', 'INV')
        assert number.startswith('INV-')
        assert len(number) == len('INV-') + 6

    def test_transaction_numbers_are_unique_per_business(self, business, other_business, checking):
        checking.transactions.create(
            business=business, transaction_type='deposit', transaction_number='DEP-0001',
            amount=Decimal('5.00'), date='2025-01-01', description='Sale'
        )
        elsewhere = BankAccount.objects.create(business=other_business, name='Rival checking')
        elsewhere.transactions.create(
            business=other_business, transaction_type='deposit', transaction_number='DEP-0001',
            amount=Decimal('5.00'), date='2025-01-01', description='Sale'
        )

        with pytest.raises(IntegrityError), transaction.atomic():
            checking.transactions.create(
                business=business, transaction_type='deposit', transaction_number='DEP-0001',
                amount=Decimal('5.00'), date='2025-01-02', description='Duplicate'
            )

    def test_consecutive_creates_get_distinct_numbers(self, business, checking):
        numbers = [
            checking.transactions.create(
                business=business, transaction_type='deposit',
                amount=Decimal('5.00'), date='2025-01-01', description=f'Sale {i}'
            ).transaction_number
            for i in range(3)
        ]
        assert numbers == ['DEP-0001', 'DEP-0002', 'DEP-0003']

    def test_allocation_locks_the_business(self, business, debtor):
        with mock.patch('apps.invoices.models.lock_numbering') as lock:
            invoice = Invoice.objects.create(
                business=business, debtor=debtor, issue_date='2025-01-01', due_date='2025-01-31'
            )
        lock.assert_called_once_with(business.id)
        assert invoice.invoice_number == 'INV-0001'

    def test_explicit_number_skips_the_lock(self, business, debtor):
        with mock.patch('apps.invoices.models.lock_numbering') as lock:
            Invoice.objects.create(
                business=business, debtor=debtor, invoice_number='INV-0100',
                issue_date='2025-01-01', due_date='2025-01-31'
            )
        lock.assert_not_called()
