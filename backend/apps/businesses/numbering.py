"""
Sequential document numbers (DEP-0001, PAY-0042, BILL-0007 ...).

Numbers are scoped to a business and a prefix. The next number is one past the
highest numeric suffix already issued, so gaps left by deletes are not reused.

Choosing a number and inserting the record happen under a lock on the
business row (see ``lock_numbering``), so concurrent creates in one business
take turns instead of picking the same number.
"""
import logging
import re
import time

from django.db import DatabaseError

from .models import Business

logger = logging.getLogger(__name__)

NUMBER_WIDTH = 4


def lock_numbering(business_id):
    """
    Lock the business row until the surrounding transaction ends.
    Must be called inside ``transaction.atomic()``.
    """
    list(Business.objects.select_for_update().filter(pk=business_id).values_list('pk', flat=True))


def next_document_number(queryset, field, prefix):
    """
    Return the next free ``PREFIX-NNNN`` value of ``field`` within ``queryset``.

    Falls back to ``PREFIX-`` plus the last six digits of the current
    millisecond timestamp when the lookup fails.
    """
    pattern = re.compile(rf'^{re.escape(prefix)}-(\d+)$')
    try:
        issued = queryset.filter(**{f'{field}__startswith': f'{prefix}-'}).values_list(field, flat=True)
        highest = 0
        for number in issued:
            match = pattern.match(number or '')
            if match:
                highest = max(highest, int(match.group(1)))
        return f'{prefix}-{highest + 1:0{NUMBER_WIDTH}d}'
    except DatabaseError:
        logger.exception(f"Could not generate {prefix} number, using timestamp fallback")
        return f'{prefix}-{str(int(time.time() * 1000))[-6:]}'
