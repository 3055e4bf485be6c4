"""Display helpers for payroll tables and list search boxes."""

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, List, Optional, Sequence

UNLIMITED_LABEL = "Tidak terbatas"
EMPTY_LABEL = "-"


def format_currency(value: Optional[float]) -> str:
    """Rupiah with Indonesian grouping and no decimals, e.g. ``Rp 15.000.000``."""
    if value is None:
        return EMPTY_LABEL
    amount = Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    grouped = f"{abs(amount):,}".replace(",", ".")
    sign = "-" if amount < 0 else ""
    return f"{sign}Rp {grouped}"


def format_percent(value: Optional[float]) -> str:
    """A 0-1 rate as a percentage with two decimals, e.g. ``0.05`` -> ``5.00%``."""
    if value is None:
        return EMPTY_LABEL
    return f"{value * 100:.2f}%"


def format_income_limit(value: Optional[float]) -> str:
    """Upper income bound of a tax row; open-ended rows have none."""
    if not value:
        return UNLIMITED_LABEL
    return format_currency(value)


def _lookup(record: Any, dotted: str) -> Any:
    value = record
    for part in dotted.split("."):
        if not isinstance(value, dict):
            return None
        value = value.get(part)
    return value


def filter_records(records: Iterable[dict], search: Optional[str], fields: Sequence[str]) -> List[dict]:
    """Case-insensitive substring match over the given (dotted) fields."""
    records = list(records)
    if not search:
        return records
    needle = search.lower()
    matched = []
    for record in records:
        for name in fields:
            value = _lookup(record, name)
            if value is not None and needle in str(value).lower():
                matched.append(record)
                break
    return matched
