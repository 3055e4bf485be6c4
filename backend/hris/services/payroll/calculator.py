"""Pure PPh 21 calculations on top of the configured tax tables."""

import math
from decimal import Decimal
from typing import Iterable, List, Optional, Sequence

from hris.core.exceptions import BusinessRuleError
from hris.services.payroll.tax_tables import TER_CATEGORY_BY_PTKP


def ter_category(ptkp_status: str) -> str:
    try:
        return TER_CATEGORY_BY_PTKP[ptkp_status.upper()]
    except KeyError:
        raise BusinessRuleError(
            f"Unknown PTKP status '{ptkp_status}'",
            code="INVALID_PTKP_STATUS",
            errors=[{"field": "ptkp_status", "message": "Must be one of TK/0-TK/3 or K/0-K/3"}],
        )


def find_ter_rate(rows: Iterable, gross_monthly: float) -> float:
    """
    Rate of the band containing ``gross_monthly``.

    ``rows`` are TaxConfiguration-like objects of a single category. The band
    with the highest ``min_income`` not above the gross amount wins.
    """
    gross = Decimal(str(gross_monthly))
    matched = None
    for row in sorted(rows, key=lambda r: Decimal(str(r.min_income))):
        if Decimal(str(row.min_income)) <= gross:
            matched = row
        else:
            break
    if matched is None:
        raise BusinessRuleError("No TER rate configured for this income", code="TER_RATE_NOT_FOUND")
    return float(matched.rate)


def calculate_progressive_tax(brackets: Sequence, pkp: float) -> dict:
    """
    Annual PPh 21 on taxable income using progressive brackets.

    Returns the total, effective rate and per-bracket breakdown.
    """
    remaining = Decimal(str(pkp))
    total = Decimal("0")
    breakdown: List[dict] = []

    ordered = sorted(brackets, key=lambda b: (b.bracket_order, Decimal(str(b.min_income))))
    for bracket in ordered:
        if remaining <= 0:
            break
        lower = Decimal(str(bracket.min_income))
        upper: Optional[Decimal] = Decimal(str(bracket.max_income)) if bracket.max_income is not None else None
        width = (upper - lower) if upper is not None else remaining
        taxable = min(remaining, width)
        tax = taxable * Decimal(str(bracket.rate))
        total += tax
        remaining -= taxable
        breakdown.append({
            "min_income": float(lower),
            "max_income": float(upper) if upper is not None else None,
            "rate": float(bracket.rate),
            "taxable_amount": float(taxable),
            "tax": float(tax),
        })

    pkp_value = float(pkp)
    return {
        "pkp": pkp_value,
        "total_tax": float(total),
        "effective_rate": round(float(total) / pkp_value, 6) if pkp_value else 0.0,
        "breakdown": breakdown,
    }


def round_amount(value: float, method: str = "round", precision: int = 0) -> float:
    factor = 10 ** precision
    if method == "floor":
        return math.floor(value * factor) / factor
    if method == "ceil":
        return math.ceil(value * factor) / factor
    return round(value, precision)
