from datetime import date
from decimal import Decimal

import pytest

from apps.contacts.models import Creditor
from apps.invoices import services as document_services
from apps.invoices.models import Bill, Invoice
from apps.payments import services as payment_services
from apps.payments.models import Payment, Receipt
from apps.purchases import services
from apps.purchases.models import Purchase
from .conftest import outstanding_of

PURCHASES_URL = '/api/v1/purchases/'


@pytest.mark.django_db
class TestPurchases:

    def test_create_adds_total_to_creditor(self, api_client, creditor):
        response = api_client.post(PURCHASES_URL, {
            'creditor': creditor.id,
            'item_name': 'Printer paper',
            'description': 'A4, 80gsm',
            'quantity': '10',
            'unit_price': '4.25',
            'purchase_date': '2025-03-03',
        }, format='json')

        assert response.status_code == 201
        assert response.data['purchase_number'] == 'PUR-0001'
        assert response.data['total_price'] == '42.50'
        assert outstanding_of(creditor) == Decimal('42.50')

    def test_edit_moves_difference(self, api_client, business, creditor):
        purchase = services.create_purchase(
            business, creditor=creditor, item_name='Toner', quantity=Decimal('2'),
            unit_price=Decimal('30.00'), purchase_date=date(2025, 3, 3)
        )
        response = api_client.patch(f'{PURCHASES_URL}{purchase.id}/', {'quantity': '3'}, format='json')

        assert response.status_code == 200
        assert response.data['total_price'] == '90.00'
        assert outstanding_of(creditor) == Decimal('90.00')

    def test_edit_moves_total_to_new_creditor(self, business, creditor):
        purchase = services.create_purchase(
            business, creditor=creditor, item_name='Toner', quantity=Decimal('1'),
            unit_price=Decimal('30.00'), purchase_date=date(2025, 3, 3)
        )
        other = Creditor.objects.create(business=business, name='Other Supplier')

        services.update_purchase(purchase, creditor=other)

        assert outstanding_of(creditor) == Decimal('0.00')
        assert outstanding_of(other) == Decimal('30.00')

    def test_delete_subtracts_total(self, api_client, business, creditor):
        purchase = services.create_purchase(
            business, creditor=creditor, item_name='Toner', quantity=Decimal('1'),
            unit_price=Decimal('30.00'), purchase_date=date(2025, 3, 3)
        )
        Creditor.objects.filter(pk=creditor.pk).update(outstanding_amount=Decimal('10.00'))

        assert api_client.delete(f'{PURCHASES_URL}{purchase.id}/').status_code == 204
        assert not Purchase.objects.exists()
        assert outstanding_of(creditor) == Decimal('0.00')


@pytest.mark.django_db
class TestContacts:

    def test_outstanding_amount_is_read_only(self, api_client, creditor):
        response = api_client.patch(
            f'/api/v1/contacts/creditors/{creditor.id}/',
            {'outstanding_amount': '999.00', 'phone': '555-0100'},
            format='json'
        )
        assert response.status_code == 200
        assert outstanding_of(creditor) == Decimal('0.00')

    def test_list_summary(self, api_client, business, creditor):
        Creditor.objects.create(business=business, name='Owed', outstanding_amount=Decimal('25.00'))
        summary = api_client.get('/api/v1/contacts/creditors/').data['summary']
        assert summary == {'total_contacts': 2, 'contacts_with_balance': 1, 'total_outstanding': '25.00'}

    def test_contact_with_documents_cannot_be_deleted(self, api_client, business, debtor):
        document_services.create_document(
            Invoice, business,
            [{'description': 'Work', 'quantity': Decimal('1'), 'unit_price': Decimal('10.00')}],
            debtor=debtor, issue_date=date(2025, 3, 1), due_date=date(2025, 3, 31)
        )
        response = api_client.delete(f'/api/v1/contacts/debtors/{debtor.id}/')
        assert response.status_code == 400
        assert 'error' in response.data

    def test_creditor_statement(self, api_client, business, creditor):
        services.create_purchase(
            business, creditor=creditor, item_name='Toner', quantity=Decimal('4'),
            unit_price=Decimal('25.00'), purchase_date=date(2025, 3, 3)
        )
        document_services.create_document(
            Bill, business,
            [{'description': 'Stock', 'quantity': Decimal('1'), 'unit_price': Decimal('60.00')}],
            creditor=creditor, issue_date=date(2025, 3, 1), due_date=date(2025, 3, 31)
        )
        payment_services.record_settlement(
            Payment, business, create_bank_transaction=False, creditor=creditor,
            amount=Decimal('30.00'), payment_date=date(2025, 3, 5)
        )

        response = api_client.get(f'/api/v1/contacts/creditors/{creditor.id}/statement/')

        assert response.status_code == 200
        assert response.data['total_purchases'] == '100.00'
        assert response.data['total_payments'] == '30.00'
        assert response.data['total_billed'] == '60.00'
        assert response.data['balance'] == '70.00'
        assert len(response.data['purchases']) == 1
        assert len(response.data['bills']) == 1

    def test_debtor_statement(self, api_client, business, debtor):
        document_services.create_document(
            Invoice, business,
            [{'description': 'Work', 'quantity': Decimal('2'), 'unit_price': Decimal('80.00')}],
            debtor=debtor, issue_date=date(2025, 3, 1), due_date=date(2025, 3, 31)
        )
        payment_services.record_settlement(
            Receipt, business, create_bank_transaction=False, debtor=debtor,
            amount=Decimal('60.00'), payment_date=date(2025, 3, 5)
        )

        response = api_client.get(f'/api/v1/contacts/debtors/{debtor.id}/statement/')

        assert response.data['total_invoiced'] == '160.00'
        assert response.data['total_received'] == '60.00'
        assert response.data['balance'] == '100.00'
        assert outstanding_of(debtor) == Decimal('100.00')
