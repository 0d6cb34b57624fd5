"""
Bank ledger operations.

Each function runs in a single database transaction so a transfer and its
paired deposit are always written, updated or removed together.
"""
import logging
from decimal import Decimal

from django.db import transaction
from django.db.models import Q

from .models import BankAccount, BankTransaction, BankReconciliation

logger = logging.getLogger(__name__)

# Fields copied from a transfer onto its paired deposit
PAIR_SYNC_FIELDS = ['amount', 'date', 'category', 'reconciled', 'notes']

# Fields copied back from a paired deposit onto its transfer
SOURCE_SYNC_FIELDS = ['date', 'category', 'reconciled', 'notes']


def _pair_number(source):
    return f"TRF-TO-{source.transaction_number.replace('TRF-', '', 1)}"


def _pair_description(source):
    return f"Transfer from {source.account.name}"


def _create_transfer_pair(source):
    pair = BankTransaction.objects.create(
        business_id=source.business_id,
        account=source.destination_account,
        transaction_type=BankTransaction.DEPOSIT,
        transfer_source=source,
        transaction_number=_pair_number(source),
        description=_pair_description(source),
        **{field: getattr(source, field) for field in PAIR_SYNC_FIELDS}
    )
    logger.info(
        f"Transfer {source.transaction_number}: paired deposit {pair.transaction_number} "
        f"created in account {pair.account_id}"
    )
    return pair


def _sync_transfer_pair(source):
    """Bring the paired deposit in line with its transfer (create, update or remove it)"""
    pair = BankTransaction.objects.filter(transfer_source=source).first()

    if not source.is_transfer:
        if pair is not None:
            logger.info(f"{source.transaction_number} is no longer a transfer, removing {pair.transaction_number}")
            pair.delete()
        return None

    if pair is None:
        return _create_transfer_pair(source)

    pair.account = source.destination_account
    pair.description = _pair_description(source)
    for field in PAIR_SYNC_FIELDS:
        setattr(pair, field, getattr(source, field))
    pair.save()
    return pair


def create_transaction(business, **data):
    """Record a transaction; transfers also get their paired deposit"""
    if data.get('transaction_type') != BankTransaction.TRANSFER:
        data['destination_account'] = None
    with transaction.atomic():
        txn = BankTransaction.objects.create(business=business, **data)
        if txn.is_transfer:
            _create_transfer_pair(txn)
    logger.info(f"Transaction {txn.transaction_number} recorded for business {business.pk}")
    return txn


def update_transaction(txn, **data):
    """
    Apply edits and keep the transfer pair consistent.

    Editing a paired deposit copies date, category, reconciled flag and notes
    back to its transfer. Editing a transfer pushes account, amount and the
    same fields to its pair.
    """
    with transaction.atomic():
        for field, value in data.items():
            setattr(txn, field, value)
        if not txn.is_transfer:
            txn.destination_account = None
        txn.save()

        if txn.is_transfer_leg:
            source = BankTransaction.objects.select_for_update().get(pk=txn.transfer_source_id)
            for field in SOURCE_SYNC_FIELDS:
                setattr(source, field, getattr(txn, field))
            source.save()
        else:
            _sync_transfer_pair(txn)
    return txn


def delete_transaction(txn):
    """Delete a transaction; deleting either side of a transfer removes both"""
    with transaction.atomic():
        if txn.is_transfer_leg:
            # Cascades to this leg
            BankTransaction.objects.get(pk=txn.transfer_source_id).delete()
        else:
            txn.delete()
    logger.info(f"Transaction {txn.transaction_number} deleted")


def delete_account(account):
    """
    Delete an account with its ledger. Transfers into the account go too, so
    no transfer outlives its paired deposit.
    """
    account_id = account.pk
    with transaction.atomic():
        incoming = BankTransaction.objects.filter(
            destination_account=account, transaction_type=BankTransaction.TRANSFER
        ).exclude(account=account)
        removed = incoming.count()
        # Transfer deletes reverse their effect on the sending accounts
        for source in incoming:
            source.delete()
        count = account.transactions.count()
        account.delete()
    logger.info(
        f"Bank account {account_id} '{account.name}' deleted with {count} transactions "
        f"and {removed} incoming transfers"
    )


def _with_counterparts(queryset):
    """The given transactions plus the other leg of every transfer among them"""
    ids = list(queryset.values_list('pk', flat=True))
    source_ids = list(
        queryset.filter(transfer_source__isnull=False).values_list('transfer_source_id', flat=True)
    )
    return BankTransaction.objects.filter(
        Q(pk__in=ids) | Q(transfer_source_id__in=ids) | Q(pk__in=source_ids)
    )


def set_reconciled(txn, reconciled):
    """
    Flag a transaction as reconciled or not; a transfer and its paired deposit
    share the flag. Balances are unaffected.
    """
    with transaction.atomic():
        _with_counterparts(BankTransaction.objects.filter(pk=txn.pk)).update(reconciled=reconciled)
    txn.reconciled = reconciled
    return txn


def reconciled_total(transactions):
    """Signed sum of transactions: deposits add, everything else subtracts"""
    return sum(
        (BankTransaction.signed_amount(t.transaction_type, t.amount) for t in transactions),
        Decimal('0.00')
    )


def reconciliation_difference(account, statement_balance, selected_ids=None):
    """
    Statement balance minus the cleared balance: the opening balance plus the
    signed total of the selected transactions (or of the already reconciled
    ones when no selection is given)
    """
    transactions = list(account.transactions.all())
    if selected_ids is None:
        chosen = [t for t in transactions if t.reconciled]
    else:
        selected_ids = set(selected_ids)
        chosen = [t for t in transactions if t.pk in selected_ids]
    total = account.opening_balance + reconciled_total(chosen)
    return Decimal(statement_balance) - total, total


def reconcile_account(account, statement_balance, statement_date, transaction_ids, user=None):
    """
    Mark the selected transactions reconciled and every other transaction of
    the account unreconciled, then record the reconciliation
    """
    selected = set(transaction_ids)
    with transaction.atomic():
        BankAccount.objects.select_for_update().get(pk=account.pk)
        difference, total = reconciliation_difference(account, statement_balance, selected)

        chosen = account.transactions.filter(pk__in=selected)
        matched = chosen.count()
        # Transfer legs in other accounts follow their counterpart here
        _with_counterparts(account.transactions.exclude(pk__in=selected)).update(reconciled=False)
        _with_counterparts(chosen).update(reconciled=True)

        reconciliation = BankReconciliation.objects.create(
            business_id=account.business_id,
            account=account,
            statement_date=statement_date,
            statement_balance=statement_balance,
            reconciled_balance=total,
            difference=difference,
            transactions_count=matched,
            reconciled_by=user,
        )
    logger.info(
        f"Account {account.pk} reconciled to {statement_date}: "
        f"{matched} transactions, difference {difference}"
    )
    return reconciliation


def recalculate_balance(account):
    """Reset current_balance from the ledger; returns (old, new)"""
    with transaction.atomic():
        locked = BankAccount.objects.select_for_update().get(pk=account.pk)
        old_balance = locked.current_balance
        new_balance = locked.calculate_balance()
        if old_balance != new_balance:
            BankAccount.objects.filter(pk=account.pk).update(current_balance=new_balance)
    return old_balance, new_balance
