import re
from typing import Optional

_WHITESPACE_RE = re.compile(r'\s+')


def pluralize(count: int, single: str, multiple: Optional[str] = None, zero: Optional[str] = None) -> str:
    """
    Picks the singular or plural form of a word for the given count.

    Args:
        count (int): Number of things being described.
        single (str): Singular form.
        multiple (Optional[str]): Plural form, defaults to `single + "s"`.
        zero (Optional[str]): Form used for a count of zero, defaults to the plural.
    """
    if count == 1:
        return single

    plural = multiple if multiple is not None else f"{single}s"
    if count == 0:
        return zero if zero is not None else plural
    return plural


def truncate(value: Optional[str], length: int, indicator: str = '...') -> Optional[str]:
    """
    Cuts a string down to `length` characters, ending it with `indicator` when shortened.
    Empty and None values are returned as-is.
    """
    if not value:
        return value

    if len(indicator) >= length:
        return indicator

    if len(value) > length:
        return value[:length - len(indicator)].rstrip() + indicator

    return value


def condense_whitespace(value: Optional[str]) -> Optional[str]:
    """Collapses runs of whitespace into a single space and trims both ends."""
    if not value:
        return value
    return _WHITESPACE_RE.sub(' ', value).strip()

