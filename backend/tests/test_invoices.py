from datetime import date, timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from apps.invoices import services
from apps.invoices.models import Invoice, Bill, BillItem
from apps.contacts.models import Debtor
from apps.payments.models import Receipt
from .conftest import outstanding_of

INVOICES_URL = '/api/v1/invoices/'
BILLS_URL = '/api/v1/bills/'


def invoice_payload(debtor, items=None, **overrides):
    payload = {
        'debtor': debtor.id,
        'issue_date': '2025-03-01',
        'due_date': '2025-03-31',
        'notes': 'Net 30',
        'items': items or [
            {'description': 'Consulting', 'quantity': '3', 'unit_price': '100.00'},
            {'description': 'Travel', 'quantity': '1', 'unit_price': '45.50'},
        ],
    }
    payload.update(overrides)
    return payload


@pytest.mark.django_db
class TestInvoiceCreate:

    def test_create_totals_items_and_raises_outstanding(self, api_client, debtor):
        response = api_client.post(INVOICES_URL, invoice_payload(debtor), format='json')

        assert response.status_code == 201
        assert response.data['invoice_number'] == 'INV-0001'
        assert response.data['total_amount'] == '345.50'
        assert response.data['status'] == Invoice.PENDING
        assert [item['total_price'] for item in response.data['items']] == ['300.00', '45.50']
        assert outstanding_of(debtor) == Decimal('345.50')

    def test_requires_items(self, api_client, debtor):
        payload = invoice_payload(debtor)
        payload['items'] = []
        response = api_client.post(INVOICES_URL, payload, format='json')
        assert response.status_code == 400
        assert 'items' in response.data

    def test_due_date_not_before_issue_date(self, api_client, debtor):
        response = api_client.post(INVOICES_URL, invoice_payload(debtor, due_date='2025-02-01'), format='json')
        assert response.status_code == 400
        assert 'due_date' in response.data
        assert outstanding_of(debtor) == Decimal('0.00')

    def test_item_quantity_must_be_positive(self, api_client, debtor):
        items = [{'description': 'Nothing', 'quantity': '0', 'unit_price': '10.00'}]
        response = api_client.post(INVOICES_URL, invoice_payload(debtor, items=items), format='json')
        assert response.status_code == 400


@pytest.mark.django_db
class TestInvoiceEdit:

    def create(self, business, debtor):
        return services.create_document(
            Invoice, business,
            [
                {'description': 'Consulting', 'quantity': Decimal('3'), 'unit_price': Decimal('100.00')},
                {'description': 'Travel', 'quantity': Decimal('1'), 'unit_price': Decimal('45.50')},
            ],
            debtor=debtor, issue_date=date(2025, 3, 1), due_date=date(2025, 3, 31)
        )

    def test_item_diff_and_outstanding_delta(self, api_client, business, debtor):
        invoice = self.create(business, debtor)
        consulting, travel = invoice.items.all()

        response = api_client.patch(f'{INVOICES_URL}{invoice.id}/', {'items': [
            {'id': consulting.id, 'description': 'Consulting', 'quantity': '4', 'unit_price': '100.00'},
            {'description': 'Materials', 'quantity': '2', 'unit_price': '10.00'},
        ]}, format='json')

        assert response.status_code == 200
        assert response.data['total_amount'] == '420.00'
        assert sorted(i.description for i in invoice.items.all()) == ['Consulting', 'Materials']
        assert not invoice.items.filter(pk=travel.pk).exists()
        assert outstanding_of(debtor) == Decimal('420.00')

    def test_changing_debtor_moves_outstanding(self, api_client, business, debtor):
        invoice = self.create(business, debtor)
        new_debtor = Debtor.objects.create(business=business, name='Fabrikam')

        response = api_client.patch(f'{INVOICES_URL}{invoice.id}/', {'debtor': new_debtor.id}, format='json')

        assert response.status_code == 200
        assert outstanding_of(debtor) == Decimal('0.00')
        assert outstanding_of(new_debtor) == Decimal('345.50')

    def test_old_debtor_outstanding_is_floored(self, business, debtor):
        invoice = self.create(business, debtor)
        Debtor.objects.filter(pk=debtor.pk).update(outstanding_amount=Decimal('100.00'))
        new_debtor = Debtor.objects.create(business=business, name='Fabrikam')

        services.update_document(invoice, debtor=new_debtor)

        assert outstanding_of(debtor) == Decimal('0.00')
        assert outstanding_of(new_debtor) == Decimal('345.50')

    def test_paid_invoice_items_are_locked(self, api_client, business, debtor):
        invoice = self.create(business, debtor)
        services.mark_paid(invoice)
        response = api_client.patch(f'{INVOICES_URL}{invoice.id}/', {'items': [
            {'description': 'Other', 'quantity': '1', 'unit_price': '1.00'}
        ]}, format='json')
        assert response.status_code == 400

    def test_paid_invoice_accepts_full_update_of_notes(self, api_client, business, debtor):
        invoice = self.create(business, debtor)
        services.mark_paid(invoice)
        items = [
            {'id': item.id, 'description': item.description,
             'quantity': str(item.quantity), 'unit_price': str(item.unit_price)}
            for item in invoice.items.all()
        ]

        response = api_client.put(
            f'{INVOICES_URL}{invoice.id}/',
            invoice_payload(debtor, items=items, notes='Paid by bank transfer'),
            format='json'
        )

        assert response.status_code == 200
        invoice.refresh_from_db()
        assert invoice.notes == 'Paid by bank transfer'
        assert invoice.status == Invoice.PAID
        assert invoice.items.count() == 2
        assert outstanding_of(debtor) == Decimal('0.00')

    def test_paid_invoice_contact_is_locked(self, api_client, business, debtor):
        invoice = self.create(business, debtor)
        services.mark_paid(invoice)
        new_debtor = Debtor.objects.create(business=business, name='Fabrikam')

        response = api_client.patch(f'{INVOICES_URL}{invoice.id}/', {'debtor': new_debtor.id}, format='json')

        assert response.status_code == 400
        assert outstanding_of(new_debtor) == Decimal('0.00')


@pytest.mark.django_db
class TestInvoiceStatus:

    def create(self, business, debtor, **overrides):
        data = {'debtor': debtor, 'issue_date': date(2025, 3, 1), 'due_date': date(2025, 3, 31)}
        data.update(overrides)
        return services.create_document(
            Invoice, business,
            [{'description': 'Consulting', 'quantity': Decimal('1'), 'unit_price': Decimal('500.00')}],
            **data
        )

    def test_mark_paid_clears_amount_due(self, api_client, business, debtor):
        invoice = self.create(business, debtor)
        Receipt.objects.create(
            business=business, debtor=debtor, invoice=invoice, amount=Decimal('200.00'), payment_date='2025-03-10'
        )
        Debtor.objects.filter(pk=debtor.pk).update(outstanding_amount=Decimal('300.00'))

        response = api_client.post(f'{INVOICES_URL}{invoice.id}/mark-paid/')

        assert response.status_code == 200
        assert response.data['status'] == Invoice.PAID
        assert outstanding_of(debtor) == Decimal('0.00')

    def test_mark_paid_twice_is_rejected(self, api_client, business, debtor):
        invoice = self.create(business, debtor)
        api_client.post(f'{INVOICES_URL}{invoice.id}/mark-paid/')
        response = api_client.post(f'{INVOICES_URL}{invoice.id}/mark-paid/')
        assert response.status_code == 400
        assert 'error' in response.data

    def test_cancel_writes_off_amount_due(self, api_client, business, debtor):
        invoice = self.create(business, debtor)
        response = api_client.post(f'{INVOICES_URL}{invoice.id}/cancel/')
        assert response.status_code == 200
        assert response.data['status'] == Invoice.CANCELLED
        assert outstanding_of(debtor) == Decimal('0.00')
        assert api_client.post(f'{INVOICES_URL}{invoice.id}/cancel/').status_code == 400

    def test_delete_unpaid_reverses_outstanding(self, api_client, business, debtor):
        invoice = self.create(business, debtor)
        assert api_client.delete(f'{INVOICES_URL}{invoice.id}/').status_code == 204
        assert outstanding_of(debtor) == Decimal('0.00')
        assert not Invoice.objects.exists()

    def test_delete_paid_leaves_outstanding(self, api_client, business, debtor):
        invoice = self.create(business, debtor)
        services.mark_paid(invoice)
        Debtor.objects.filter(pk=debtor.pk).update(outstanding_amount=Decimal('80.00'))

        assert api_client.delete(f'{INVOICES_URL}{invoice.id}/').status_code == 204
        assert outstanding_of(debtor) == Decimal('80.00')

    def test_is_overdue(self, business, debtor):
        today = timezone.localdate()
        late = self.create(business, debtor, issue_date=today - timedelta(days=40), due_date=today - timedelta(days=10))
        current = self.create(business, debtor, issue_date=today, due_date=today + timedelta(days=30))
        assert late.is_overdue is True
        assert current.is_overdue is False

    def test_mark_overdue(self, business, debtor):
        today = timezone.localdate()
        late = self.create(business, debtor, issue_date=today - timedelta(days=40), due_date=today - timedelta(days=10))
        self.create(business, debtor, issue_date=today, due_date=today + timedelta(days=30))

        assert services.mark_overdue(Invoice.objects.all(), today) == 1
        late.refresh_from_db()
        assert late.status == Invoice.OVERDUE

    def test_list_summary(self, api_client, business, debtor):
        self.create(business, debtor)
        paid = self.create(business, debtor)
        services.mark_paid(paid)

        response = api_client.get(INVOICES_URL)
        assert response.status_code == 200
        assert response.data['count'] == 2

        summary = response.data['summary']
        assert summary['total_count'] == 2
        assert summary['total_amount'] == '1000.00'
        assert summary['pending_count'] == 1
        assert summary['pending_amount'] == '500.00'
        assert summary['paid_count'] == 1
        assert summary['paid_amount'] == '500.00'


@pytest.mark.django_db
class TestBills:

    def test_bill_lifecycle(self, api_client, creditor):
        response = api_client.post(BILLS_URL, {
            'creditor': creditor.id,
            'issue_date': '2025-03-01',
            'due_date': '2025-03-15',
            'items': [{'description': 'Paper', 'quantity': '5', 'unit_price': '12.00'}],
        }, format='json')
        assert response.status_code == 201
        assert response.data['bill_number'] == 'BILL-0001'
        assert outstanding_of(creditor) == Decimal('60.00')

        bill = Bill.objects.get(pk=response.data['id'])
        item = BillItem.objects.get(bill=bill)
        response = api_client.put(f'{BILLS_URL}{bill.id}/', {
            'creditor': creditor.id,
            'issue_date': '2025-03-01',
            'due_date': '2025-03-15',
            'items': [{'id': item.id, 'description': 'Paper', 'quantity': '2', 'unit_price': '12.00'}],
        }, format='json')
        assert response.status_code == 200
        assert outstanding_of(creditor) == Decimal('24.00')

        assert api_client.post(f'{BILLS_URL}{bill.id}/mark-paid/').status_code == 200
        assert outstanding_of(creditor) == Decimal('0.00')

    def test_list_with_summary(self, api_client, business, creditor):
        services.create_document(
            Bill, business,
            [{'description': 'Paper', 'quantity': Decimal('5'), 'unit_price': Decimal('12.00')}],
            creditor=creditor, issue_date=date(2025, 3, 1), due_date=date(2025, 3, 15)
        )

        response = api_client.get(BILLS_URL)

        assert response.status_code == 200
        assert [b['bill_number'] for b in response.data['results']] == ['BILL-0001']
        assert response.data['summary']['total_amount'] == '60.00'
        assert response.data['summary']['cancelled_count'] == 0
