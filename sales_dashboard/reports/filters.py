"""
Report Filters

Translates the optional dashboard filters into one predicate shared by every
report query. A filter set is first reduced to an ordered list of structured
conditions (field, operator, value); those conditions are then rendered as a
SQLAlchemy clause so every value travels as a bound parameter.

Field to column mapping:
- region      countries.country_region = value
- country     countries.country_name = value
- channel     channels.channel_desc = value
- year        times.calendar_year = value
- month_from  times.calendar_month_number >= value
- month_to    times.calendar_month_number <= value
- category    products.prod_category = value
"""

import operator
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator
from pydantic.alias_generators import to_camel
from sqlalchemy import and_, true
from sqlalchemy.sql.elements import ColumnElement

from sales_dashboard.database.models import Channel, Country, Product, Time
from sales_dashboard.reports.exceptions import InvalidFilterError


class FilterSet(BaseModel):
    """
    Request-scoped dashboard filters.

    Every field is optional and None means "no restriction on that dimension".
    Blank strings are normalized to None so they never become a literal
    empty-string match.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    region: Optional[str] = None
    country: Optional[str] = None
    channel: Optional[str] = None
    year: Optional[int] = Field(default=None, ge=1, le=9999)
    month_from: Optional[int] = Field(default=None, ge=1, le=12)
    month_to: Optional[int] = Field(default=None, ge=1, le=12)
    category: Optional[str] = None

    @field_validator("*", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @model_validator(mode="after")
    def check_month_range(self) -> "FilterSet":
        if self.month_from is not None and self.month_to is not None and self.month_from > self.month_to:
            raise ValueError("monthFrom must not be greater than monthTo")
        return self

    @classmethod
    def parse(cls, **values: Any) -> "FilterSet":
        """
        Build a filter set from raw request values.

        Raises:
            InvalidFilterError: If any value fails validation
        """
        try:
            return cls.model_validate(values)
        except ValidationError as e:
            errors = [
                {
                    "field": ".".join(str(part) for part in err["loc"]) or "filters",
                    "message": err["msg"],
                }
                for err in e.errors()
            ]
            message = "; ".join(f"{err['field']}: {err['message']}" for err in errors)
            raise InvalidFilterError(f"Invalid filter values: {message}", errors) from e

    def without(self, *fields: str) -> "FilterSet":
        """Copy of this filter set with the named fields cleared."""
        return self.model_copy(update={name: None for name in fields})

    def active(self) -> Dict[str, Any]:
        """Only the fields that restrict a dimension."""
        return {name: value for name, value in self.model_dump().items() if value is not None}


_OPERATORS: Dict[str, Callable[[Any, Any], ColumnElement[bool]]] = {
    "eq": operator.eq,
    "ge": operator.ge,
    "le": operator.le,
}

# Ordered: conditions (and their bound parameters) always come out in this order
FILTER_FIELDS: Tuple[Tuple[str, Any, str], ...] = (
    ("region", Country.country_region, "eq"),
    ("country", Country.country_name, "eq"),
    ("channel", Channel.channel_desc, "eq"),
    ("year", Time.calendar_year, "eq"),
    ("month_from", Time.calendar_month_number, "ge"),
    ("month_to", Time.calendar_month_number, "le"),
    ("category", Product.prod_category, "eq"),
)

_COLUMNS = {name: column for name, column, _ in FILTER_FIELDS}


@dataclass(frozen=True)
class Condition:
    """One restriction on one dimension column."""
    field: str
    operator: str
    value: Any

    def to_clause(self) -> ColumnElement[bool]:
        return _OPERATORS[self.operator](_COLUMNS[self.field], self.value)


def build_conditions(filters: FilterSet) -> List[Condition]:
    """Conditions for every present field, in FILTER_FIELDS order."""
    return [
        Condition(field=name, operator=op, value=getattr(filters, name))
        for name, _, op in FILTER_FIELDS
        if getattr(filters, name) is not None
    ]


def build_predicate(filters: FilterSet) -> ColumnElement[bool]:
    """
    Conjunction of all conditions, or the identity predicate when none apply.

    The columns referenced live on customers' countries, channels, products
    and times, so the statement it is applied to must join all of them.
    """
    conditions = build_conditions(filters)
    if not conditions:
        return true()
    return and_(*(condition.to_clause() for condition in conditions))


def describe(filters: FilterSet) -> Dict[str, Any]:
    """Active filters keyed by wire name, for logging."""
    return {to_camel(name): value for name, value in filters.active().items()}
