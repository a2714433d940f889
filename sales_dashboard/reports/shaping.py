"""
Result Shaping

Numeric policy and pivot helpers applied to already-aggregated rows.

- Percentages are rounded half-up to two decimals.
- A zero (or NULL) denominator yields a percentage of 0, never an error.
- NULL aggregates surface as 0 and NULL labels as "Unknown".
"""

from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Hashable, Iterable, List, Optional, Union

UNKNOWN_LABEL = "Unknown"

Number = Union[int, float, Decimal]

_TWO_PLACES = Decimal("0.01")


def to_decimal(value: Optional[Number]) -> Decimal:
    """Exact decimal for a database aggregate, with NULL as zero."""
    if value is None:
        return Decimal(0)
    if isinstance(value, Decimal):
        return value
    # str() keeps float inputs at their shortest repr instead of binary noise
    return Decimal(str(value))


def as_float(value: Optional[Number]) -> float:
    return float(to_decimal(value))


def as_int(value: Optional[Number]) -> int:
    return int(to_decimal(value).to_integral_value(rounding=ROUND_HALF_UP))


def label(value: Any) -> str:
    if value is None:
        return UNKNOWN_LABEL
    return str(value)


def round_half_up(value: Number) -> float:
    """Round to two decimal places, halves away from zero."""
    return float(to_decimal(value).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP))


def percent(part: Optional[Number], whole: Optional[Number]) -> float:
    """
    part / whole * 100 rounded to two decimals.

    Returns 0.0 when whole is zero or NULL.
    """
    denominator = to_decimal(whole)
    if denominator == 0:
        return 0.0
    return round_half_up(to_decimal(part) / denominator * 100)


@dataclass
class PivotRow:
    """
    One row of a wide result whose columns depend on the data.

    key_name/key identify the row (e.g. region="Europe"); fixed holds per-row
    entries written ahead of the dynamic columns; values maps each dynamic
    column name to its cell, in the order the columns were first seen.
    """
    key_name: str
    key: Any
    values: Dict[str, Any] = field(default_factory=dict)
    fixed: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        row = {self.key_name: self.key}
        row.update(self.fixed)
        for name, cell in self.values.items():
            row.setdefault(name, cell)
        return row


def pivot(
    records: Iterable[Dict[str, Any]],
    key_name: str,
    column: str,
    value: str,
    leading: Optional[Iterable[str]] = None,
) -> List[PivotRow]:
    """
    Reshape long records into one PivotRow per distinct key.

    Args:
        records: Dicts holding key_name, column and value entries
        key_name: Record entry identifying the output row
        column: Record entry whose value becomes the dynamic column name
        value: Record entry holding the cell value
        leading: Per-row entries copied ahead of the dynamic columns

    Missing key/column combinations are left absent rather than zero-filled.
    Rows keep the order in which their keys first appear. A dynamic column
    named like the key or a leading entry is suffixed with the column kind,
    e.g. a "year" promotion category becomes "year (category)".
    """
    rows: Dict[Hashable, PivotRow] = {}
    leading = list(leading or [])
    reserved = {key_name, *leading}

    for record in records:
        key = record[key_name]
        row = rows.get(key)
        if row is None:
            row = PivotRow(key_name=key_name, key=key, fixed={name: record[name] for name in leading})
            rows[key] = row
        name = str(record[column])
        if name in reserved:
            name = f"{name} ({column})"
        row.values[name] = record[value]

    return list(rows.values())
