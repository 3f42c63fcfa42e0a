# shopcart/utils/money.py

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

Money = Decimal

CENT = Decimal("0.01")

def D(x) -> Money:
    return x if isinstance(x, Decimal) else Decimal(str(x or "0"))

def round_money(x: Money) -> Money:
    return D(x).quantize(CENT, rounding=ROUND_HALF_UP)

def to_float(x) -> float:
    return float(round_money(x))

def parse_money(x) -> Money | None:
    """Decimal for a JSON number, or None when it is not one."""
    if isinstance(x, bool) or not isinstance(x, (int, float, Decimal)):
        return None
    try:
        value = D(x)
    except InvalidOperation:
        return None
    return value if value.is_finite() else None
