import logging

from django.db.models.signals import post_delete
from django.dispatch import receiver

from .models import BankAccount, BankTransaction

logger = logging.getLogger(__name__)


@receiver(post_delete, sender=BankTransaction)
def reverse_balance_on_delete(sender, instance, **kwargs):
    """Undo a transaction's balance effect; also fires for cascaded deletes"""
    BankAccount.apply_balance_delta(instance.account_id, -instance.balance_effect)
    logger.info(
        f"Transaction {instance.transaction_number} deleted, "
        f"account {instance.account_id} adjusted by {-instance.balance_effect}"
    )
