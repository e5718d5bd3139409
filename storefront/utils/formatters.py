"""
Formatting helpers for templates, invoices and share messages.
Numbers follow the Bangladeshi convention: lakh/crore grouping (12,34,567).
"""
from decimal import Decimal, InvalidOperation
from datetime import date, datetime
from typing import Union, Optional

CURRENCY_SYMBOL = '৳'

_BENGALI_DIGITS = str.maketrans('0123456789', '০১২৩৪৫৬৭৮৯')


def _group_bd(integer_part: str) -> str:
    """Group an unsigned integer string as 12,34,567 (last three, then pairs)."""
    if len(integer_part) <= 3:
        return integer_part
    head, tail = integer_part[:-3], integer_part[-3:]
    pairs = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    if head:
        pairs.insert(0, head)
    return ','.join(pairs + [tail])


def num_bd(value: Union[int, float, Decimal, str, None], decimals: Optional[int] = None) -> str:
    """
    Format a number with lakh grouping.

    Trailing decimal zeros are dropped unless ``decimals`` is given.

    Examples:
        num_bd(1500) -> "1,500"
        num_bd(123456.5) -> "1,23,456.5"
        num_bd(4500.00) -> "4,500"
        num_bd(None) -> "-"
    """
    if value is None or value == "":
        return "-"

    try:
        num = Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        return "-"

    if decimals is not None:
        num = num.quantize(Decimal(10) ** -decimals)
        num_str = f"{num:.{decimals}f}"
    else:
        num_str = f"{num:f}"

    sign = ''
    if num_str.startswith('-'):
        sign, num_str = '-', num_str[1:]

    if '.' in num_str:
        integer_part, decimal_part = num_str.split('.')
        if decimals is None:
            decimal_part = decimal_part.rstrip('0')
    else:
        integer_part, decimal_part = num_str, ''

    formatted = _group_bd(integer_part)
    if decimal_part:
        formatted = f"{formatted}.{decimal_part}"
    if sign and formatted.strip('0.,'):
        formatted = sign + formatted
    return formatted


def money_bd(value: Union[int, float, Decimal, str, None], bengali_digits: bool = False,
             symbol: str = CURRENCY_SYMBOL) -> str:
    """
    Format an amount in taka: money_bd(123456) -> "৳1,23,456".

    With ``bengali_digits`` the digits are rendered in Bengali script. PDF
    output passes symbol="Tk " since the base fonts have no taka glyph.
    """
    formatted = num_bd(value)
    if formatted == "-":
        return formatted
    if formatted.startswith('-'):
        formatted = f"-{symbol}{formatted[1:]}"
    else:
        formatted = f"{symbol}{formatted}"
    return to_bengali_digits(formatted) if bengali_digits else formatted


def to_bengali_digits(text: str) -> str:
    return str(text).translate(_BENGALI_DIGITS)


def date_bd(value: Union[date, datetime, None]) -> str:
    """DD/MM/YYYY or "-"."""
    if value is None:
        return "-"
    if isinstance(value, datetime):
        value = value.date()
    if not isinstance(value, date):
        return "-"
    return value.strftime("%d/%m/%Y")


def datetime_bd(value: Union[datetime, None], with_time: bool = True) -> str:
    if value is None or not isinstance(value, datetime):
        return "-"
    if with_time:
        return value.strftime("%d/%m/%Y %I:%M %p")
    return value.strftime("%d/%m/%Y")
