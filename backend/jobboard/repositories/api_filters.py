"""Query-string driven refinement of list queries.

``ApiFilters`` wraps a deferred SQLAlchemy ``Query`` together with the raw
query-string parameters of a list request and narrows the query stage by
stage::

    filters = (
        ApiFilters(session.query(Job), request.query_params, model=Job)
        .filter()
        .sort()
        .limit_fields()
        .search_by_query()
        .paginate()
    )
    jobs = filters.all()

Keys ``sort``, ``fields``, ``q``, ``page`` and ``limit`` control the stages;
every other key is a field predicate. ``field[op]=value`` applies one of the
comparison operators in :data:`OPERATORS`; a plain ``field=value`` is an
equality test. Operator keys are recognized structurally in the parsed
mapping, so a field that happens to be called ``gt`` is still a field.
"""

from __future__ import annotations

import math
import operator
import re
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from types import MappingProxyType
from typing import Any, Callable, Optional, Union

from sqlalchemy import false, inspect as sa_inspect
from sqlalchemy.ext.associationproxy import AssociationProxy, AssociationProxyInstance
from sqlalchemy.orm import Query

from jobboard.core.logging import get_logger
from jobboard.core.time import to_naive_utc
from jobboard.domain.exceptions import ValidationError
from jobboard.repositories.base import DB_INT_MAX, fits_db_int

logger = get_logger(__name__)

RESERVED_KEYS = frozenset({"sort", "fields", "q", "page", "limit"})

OPERATORS: Mapping[str, Callable[[Any, Any], Any]] = MappingProxyType(
    {
        "gt": operator.gt,
        "gte": operator.ge,
        "lt": operator.lt,
        "lte": operator.le,
        "in": lambda attribute, values: attribute.in_(values),
    }
)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 1000

_BRACKET_KEY = re.compile(r"^(?P<field>[^\[\]]+)\[(?P<op>[^\[\]]*)\]$")
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")
_TRUE = {"true", "1", "yes", "on"}
_FALSE = {"false", "0", "no", "off"}

FilterValue = Union[str, list[str]]
FilterRequest = dict[str, Union[FilterValue, dict[str, FilterValue]]]


def _iter_pairs(params: Any) -> Iterator[tuple[str, str]]:
    if hasattr(params, "multi_items"):
        yield from params.multi_items()
        return
    for key, value in params.items():
        if isinstance(value, (list, tuple)):
            for item in value:
                yield key, str(item)
        else:
            yield key, str(value)


def _split_csv(value: str) -> list[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


def parse_filter_request(params: Any) -> FilterRequest:
    """Turn query-string pairs into a nested filter request.

    ``salary[gt]=100`` becomes ``{"salary": {"gt": "100"}}``. A repeated plain
    key keeps its last value; repeated or comma-separated ``[in]`` values are
    collected into one list. Keys carrying ``$`` or ``.`` are dropped.
    """
    request: FilterRequest = {}
    for key, value in _iter_pairs(params):
        if "$" in key or "." in key:
            logger.warning("Dropping unsafe query parameter", extra={"param": key})
            continue

        match = _BRACKET_KEY.match(key)
        if match is None:
            request[key] = value
            continue

        name, op = match.group("field"), match.group("op")
        nested = request.get(name)
        if not isinstance(nested, dict):
            nested = {}
            request[name] = nested
        if op == "in":
            existing = nested.get(op)
            collected = existing if isinstance(existing, list) else []
            collected.extend(_split_csv(value))
            nested[op] = collected
        else:
            nested[op] = value
    return request


@dataclass(frozen=True)
class FieldPredicate:
    """One comparison of a field against a raw query-string value."""

    field: str
    op: str
    value: FilterValue


def build_predicates(request: Mapping[str, Any]) -> tuple[FieldPredicate, ...]:
    """Collect the field predicates of a request, skipping control keys."""
    predicates: list[FieldPredicate] = []
    for name, value in request.items():
        if name in RESERVED_KEYS:
            continue
        if isinstance(value, dict):
            for op, operand in value.items():
                if op not in OPERATORS:
                    raise ValidationError(f"Unsupported operator '{op}' for field '{name}'")
                predicates.append(FieldPredicate(name, op, operand))
        else:
            predicates.append(FieldPredicate(name, "eq", value))
    return tuple(predicates)


@dataclass(frozen=True)
class Projection:
    """Fields kept in each serialized document."""

    include: Optional[frozenset[str]] = None
    exclude: frozenset[str] = field(default_factory=frozenset)

    def apply(self, document: Mapping[str, Any]) -> dict[str, Any]:
        if self.include is not None:
            return {key: value for key, value in document.items() if key in self.include}
        return {key: value for key, value in document.items() if key not in self.exclude}


def _scalar(value: FilterValue) -> str:
    if isinstance(value, list):
        return value[-1] if value else ""
    return value


def _positive_int(raw: Optional[FilterValue], default: int) -> int:
    """Parse the leading integer of ``raw``; fall back when absent or below 1.

    Values past the 64-bit range saturate at :data:`DB_INT_MAX`.
    """
    if raw is None:
        return default
    match = _LEADING_INT.match(_scalar(raw))
    if match is None:
        return default
    digits = match.group(1)
    if digits.startswith("-"):
        return default
    if len(digits.lstrip("+0")) > len(str(DB_INT_MAX)):
        return DB_INT_MAX
    number = int(digits)
    if number < 1:
        return default
    return min(number, DB_INT_MAX)


class ApiFilters:
    """Compose filter, search, sort, projection and pagination onto a query.

    Each stage returns ``self`` with ``query`` replaced by a further narrowed
    generative query; nothing is executed until :meth:`all` (or the caller)
    reads :attr:`query`. Pagination is always applied last, regardless of
    the order in which the stages were invoked.
    """

    def __init__(
        self,
        query: Query,
        query_params: Any,
        *,
        model: type,
        search_field: str = "title",
        default_sort: str = "-posting_date",
        excluded_fields: Iterable[str] = ("version",),
        hidden_fields: Iterable[str] = (),
        identity_field: str = "id",
    ) -> None:
        self.model = model
        self.params: Mapping[str, Any] = MappingProxyType(parse_filter_request(query_params))
        self.search_field = search_field
        self.default_sort = default_sort
        self.excluded_fields = frozenset(excluded_fields)
        self.hidden_fields = frozenset(hidden_fields)
        self.identity_field = identity_field
        self.projection = Projection()
        self._query = query
        self._offset: Optional[int] = None
        self._limit: Optional[int] = None

    @property
    def query(self) -> Query:
        if self._limit is None:
            return self._query
        return self._query.offset(self._offset).limit(self._limit)

    def all(self) -> list[Any]:
        return self.query.all()

    # ------------------------------------------------------------------
    # Stages

    def filter(self) -> "ApiFilters":
        for predicate in build_predicates(self.params):
            self._query = self._query.filter(self._clause(predicate))
        return self

    def search_by_query(self) -> "ApiFilters":
        raw = self.params.get("q")
        if raw:
            phrase = " ".join(_scalar(raw).split("-"))
            column = getattr(self.model, self.search_field)
            self._query = self._query.filter(column.icontains(phrase, autoescape=True))
        return self

    def sort(self) -> "ApiFilters":
        raw = self.params.get("sort")
        keys = _split_csv(_scalar(raw)) if raw else [self.default_sort]

        clauses = []
        for key in keys:
            descending = key.startswith("-")
            name = key.lstrip("-+ ")
            attribute = self._column(name)
            if attribute is None:
                logger.debug("Ignoring unknown sort field", extra={"sort_field": name})
                continue
            clauses.append(attribute.desc() if descending else attribute.asc())

        identity = self._column(self.identity_field)
        if identity is not None:
            clauses.append(identity.asc())
        self._query = self._query.order_by(*clauses)
        return self

    def limit_fields(self) -> "ApiFilters":
        raw = self.params.get("fields")
        names = _split_csv(_scalar(raw)) if raw else []
        if names:
            visible = frozenset(names) - self.hidden_fields
            self.projection = Projection(include=visible | {self.identity_field})
        else:
            self.projection = Projection(exclude=self.excluded_fields)
        return self

    def paginate(self) -> "ApiFilters":
        page = _positive_int(self.params.get("page"), DEFAULT_PAGE)
        limit = min(_positive_int(self.params.get("limit"), DEFAULT_LIMIT), MAX_LIMIT)
        # Keep the OFFSET bindable as a signed 64-bit integer.
        page = min(page, DB_INT_MAX // limit)
        self._offset = (page - 1) * limit
        self._limit = limit
        return self

    # ------------------------------------------------------------------
    # Helpers

    def _column(self, name: str):
        if name in self.hidden_fields:
            return None
        mapper = sa_inspect(self.model)
        if name in mapper.column_attrs:
            return getattr(self.model, name)
        return None

    def _attribute(self, name: str):
        column = self._column(name)
        if column is not None or name in self.hidden_fields:
            return column
        descriptors = sa_inspect(self.model).all_orm_descriptors
        if name in descriptors and isinstance(descriptors[name], AssociationProxy):
            return getattr(self.model, name)
        return None

    def _clause(self, predicate: FieldPredicate):
        attribute = self._attribute(predicate.field)
        if attribute is None:
            # Document semantics: a predicate on a field no row carries matches nothing.
            return false()

        python_type = _python_type(attribute)
        if predicate.op == "in":
            raw_values = predicate.value
            if not isinstance(raw_values, list):
                raw_values = _split_csv(raw_values)
            values = [_coerce(predicate.field, item, python_type) for item in raw_values]
            return OPERATORS["in"](attribute, values)

        value = _coerce(predicate.field, _scalar(predicate.value), python_type)
        compare = operator.eq if predicate.op == "eq" else OPERATORS[predicate.op]
        return compare(attribute, value)


def _python_type(attribute) -> type:
    column = attribute.remote_attr if isinstance(attribute, AssociationProxyInstance) else attribute
    try:
        return column.type.python_type
    except NotImplementedError:
        return str


def _coerce(name: str, raw: str, python_type: type) -> Any:
    try:
        if python_type is bool:
            lowered = raw.strip().lower()
            if lowered in _TRUE:
                return True
            if lowered in _FALSE:
                return False
            raise ValueError(raw)
        if python_type is int:
            try:
                number = int(raw)
            except ValueError:
                return _finite_float(raw)
            if not fits_db_int(number):
                raise ValueError(raw)
            return number
        if python_type is float:
            return _finite_float(raw)
        if python_type is datetime:
            return to_naive_utc(datetime.fromisoformat(raw.replace("Z", "+00:00")))
        if python_type is date:
            return date.fromisoformat(raw)
    except ValueError:
        raise ValidationError(f"Invalid value '{raw}' for field '{name}'") from None
    return raw


def _finite_float(raw: str) -> float:
    number = float(raw)
    if not math.isfinite(number):
        raise ValueError(raw)
    return number
