"""
Shared fixtures: users, an active business, an API client scoped to it and
a few ready-made accounts and contacts.
"""
from datetime import date
from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from apps.bank_accounts.models import BankAccount
from apps.businesses.models import Business
from apps.contacts.models import Creditor, Debtor

TODAY = date(2025, 3, 15)


@pytest.fixture
def user(db):
    return get_user_model().objects.create_user(
        username='owner@example.com', email='owner@example.com', password='Str0ng-pass-123'
    )


@pytest.fixture
def other_user(db):
    return get_user_model().objects.create_user(
        username='someone@example.com', email='someone@example.com', password='Str0ng-pass-123'
    )


@pytest.fixture
def business(user):
    return Business.objects.create(owner=user, name='Acme Trading')


@pytest.fixture
def other_business(other_user):
    return Business.objects.create(owner=other_user, name='Rival Ltd')


@pytest.fixture
def anon_client():
    return APIClient()


@pytest.fixture
def api_client(user, business):
    """Authenticated client with Acme Trading selected as the active business"""
    client = APIClient()
    client.force_authenticate(user=user)
    client.credentials(HTTP_X_BUSINESS_ID=str(business.id))
    return client


@pytest.fixture
def checking(business):
    return BankAccount.objects.create(
        business=business, name='Checking', account_type='checking', opening_balance=Decimal('1000.00')
    )


@pytest.fixture
def savings(business):
    return BankAccount.objects.create(
        business=business, name='Savings', account_type='savings', opening_balance=Decimal('500.00')
    )


@pytest.fixture
def creditor(business):
    return Creditor.objects.create(business=business, name='Northwind Supplies')


@pytest.fixture
def debtor(business):
    return Debtor.objects.create(business=business, name='Contoso Retail')


def balance_of(account):
    account.refresh_from_db()
    return account.current_balance


def outstanding_of(contact):
    contact.refresh_from_db()
    return contact.outstanding_amount
