"""Client and order-code normalization utilities.

This module provides the folding rules shared by the client activity limiter
and the search engine, so that a client typed as "Agë Krasniqi" at intake and
searched as "age" later resolve to the same normalized form.
"""

import logging
import math
import re
import unicodedata
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)

CODE_PREFIX = 'X'
CODE_WIDTH = 3

_NON_DIGITS = re.compile(r'\D')
_COMBINING_MARKS = re.compile(r"[\u0300-\u036f]")


def strip_diacritics(text: str) -> str:
    """Remove combining marks using the Unicode database.

    Args:
        text: Text to clean

    Returns:
        The text decomposed (NFD) without any combining characters
    """
    decomposed = unicodedata.normalize('NFD', text)
    return ''.join(ch for ch in decomposed if not unicodedata.combining(ch))


def strip_diacritics_basic(text: str) -> str:
    """Remove combining marks with a fixed character range.

    Only the Combining Diacritical Marks block (U+0300 to U+036F) is dropped,
    which covers every accent used by Latin-script names.
    """
    return _COMBINING_MARKS.sub('', unicodedata.normalize('NFD', text))


FOLD_STRATEGIES: Dict[str, Callable[[str], str]] = {
    'unicode': strip_diacritics,
    'basic': strip_diacritics_basic,
}


def fold_name(name: Any, strategy: str = 'unicode') -> str:
    """Fold a client name for case and accent insensitive matching.

    Applies the following transformations in order:
    1. Decompose and strip diacritics
    2. Convert to uppercase
    3. Trim surrounding whitespace

    Args:
        name: The client name to fold (None is treated as empty)
        strategy: Diacritic stripping strategy, 'unicode' or 'basic'

    Returns:
        The folded name

    Examples:
        >>> fold_name(' Agë Krasniqi ')
        'AGE KRASNIQI'
        >>> fold_name('Çelë', strategy='basic')
        'CELE'
    """
    if name is None:
        return ''
    try:
        strip = FOLD_STRATEGIES[strategy]
    except KeyError:
        raise ValueError(f"Unknown fold strategy: {strategy}")
    return strip(str(name)).upper().strip()


def normalize_phone(phone: Any) -> str:
    """Reduce a phone number to its digits.

    Examples:
        >>> normalize_phone('+383 44 123 456')
        '38344123456'
    """
    if phone is None:
        return ''
    return _NON_DIGITS.sub('', str(phone))


def client_key(name: Any, phone: Any, strategy: str = 'unicode') -> str:
    """Build the composite client key used by the activity limiter."""
    return f"{fold_name(name, strategy)}|{normalize_phone(phone)}"


def normalize_code(code: Any) -> str:
    """Normalize an order code to its numeric suffix.

    Strips a leading "X" and any leading zeros. An empty result becomes "0".

    Examples:
        >>> normalize_code('X007')
        '7'
        >>> normalize_code('x000')
        '0'
    """
    if code is None:
        return '0'
    value = str(code).strip().upper()
    if value.startswith(CODE_PREFIX):
        value = value[len(CODE_PREFIX):]
    return value.lstrip('0') or '0'


def code_number(code: Any) -> int:
    """Parse an order code to its integer value, 0 when not numeric."""
    suffix = normalize_code(code)
    if not suffix.isascii() or not suffix.isdigit():
        return 0
    return int(suffix)


def format_code(number: int) -> str:
    """Format a sequence number as an order code (e.g. 8 -> 'X008')."""
    return f"{CODE_PREFIX}{number:0{CODE_WIDTH}d}"


def parse_number(value: Any) -> Optional[float]:
    """Parse a user-entered numeric value.

    Accepts ints, floats and strings with either '.' or ',' as the decimal
    separator. Empty values parse to 0.0.

    Returns:
        The parsed float, or None if the value is not a finite number
    """
    if value is None or isinstance(value, bool):
        return 0.0 if value is None else None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip()
        if not text:
            return 0.0
        try:
            number = float(text.replace(',', '.'))
        except ValueError:
            return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def to_number(value: Any) -> float:
    """Parse a numeric form field, coercing anything malformed to 0.0."""
    number = parse_number(value)
    if number is None:
        logger.debug(f"Coercing malformed numeric value to 0: {value!r}")
        return 0.0
    return number


def round2(value: float) -> float:
    """Round half-up to two decimals (e.g. money amounts)."""
    try:
        return float(Decimal(str(value)).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP))
    except InvalidOperation:
        return 0.0
