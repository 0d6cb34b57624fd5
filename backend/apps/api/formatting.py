from decimal import Decimal

CENTS = Decimal('0.01')


def money(value):
    """Amount as a two-decimal string, whatever the database hands back for sums"""
    if value is None:
        value = 0
    return str(Decimal(str(value)).quantize(CENTS))
