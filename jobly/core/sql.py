"""
Builders for the dynamic parts of SQL statements.

Both builders return a clause using positional ``$1, $2, ...`` placeholders
together with the list of values to bind. Values never appear in the clause
text; only column names do, and those come from the fixed tables declared by
the crud modules.
"""

import enum
import re
from typing import Any, Dict, List, Mapping, NamedTuple, Optional, Sequence, Tuple

from jobly.core.exceptions import BadRequestError

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class FilterOp(str, enum.Enum):
    """
    How a filter value turns into a predicate.

    - GTE: column >= value
    - LTE: column <= value
    - CONTAINS: case-insensitive substring match
    - POSITIVE: column > 0 when the value is True, nothing otherwise
    """
    GTE = "GTE"
    LTE = "LTE"
    CONTAINS = "CONTAINS"
    POSITIVE = "POSITIVE"


class FilterField(NamedTuple):
    """A recognized filter key, the column it applies to and its predicate."""
    key: str
    column: str
    op: FilterOp


def _quote_column(column: str) -> str:
    if not _IDENTIFIER.match(column):
        raise BadRequestError(f"Invalid column name: {column}")
    return f'"{column}"'


def sql_for_partial_update(
    data: Mapping[str, Any],
    js_to_sql: Optional[Mapping[str, str]] = None,
) -> Tuple[str, List[Any]]:
    """
    Translate a partial update into an assignment clause.

    Args:
        data: Field name -> new value, in the order the assignments should appear
        js_to_sql: Field name -> column name, only for names that differ

    Returns:
        (set_cols, values), e.g.
        ``{"firstName": "Aliya", "age": 32}`` with ``{"firstName": "first_name"}``
        gives ``('"first_name"=$1, "age"=$2', ["Aliya", 32])``

    Raises:
        BadRequestError: If data is empty
    """
    if not data:
        raise BadRequestError("No data")

    js_to_sql = js_to_sql or {}
    cols = [
        f"{_quote_column(js_to_sql.get(name, name))}=${idx}"
        for idx, name in enumerate(data, start=1)
    ]
    return ", ".join(cols), list(data.values())


def sql_for_filter(
    filters: Optional[Mapping[str, Any]],
    fields: Sequence[FilterField],
) -> Tuple[str, List[Any]]:
    """
    Translate optional search filters into a WHERE clause.

    Predicates follow the declared order of ``fields`` and are joined with
    AND. Keys whose value is None count as not supplied.

    Note that a POSITIVE filter set to False emits nothing: ``hasEquity=false``
    lists every job rather than only the ones without equity.

    Args:
        filters: Filter key -> value
        fields: The filters this entity recognizes

    Returns:
        (where_clause, values); where_clause is "" when no predicate applies,
        otherwise it starts with "WHERE "

    Raises:
        BadRequestError: On an unrecognized key, or when a minimum bound is
            greater than the maximum bound on the same column
    """
    supplied: Dict[str, Any] = {
        key: value for key, value in (filters or {}).items() if value is not None
    }

    known = {field.key for field in fields}
    unknown = sorted(set(supplied) - known)
    if unknown:
        raise BadRequestError(f"Unrecognized filter: {', '.join(unknown)}")

    _check_bounds(supplied, fields)

    predicates: List[str] = []
    values: List[Any] = []

    for field in fields:
        if field.key not in supplied:
            continue
        value = supplied[field.key]

        if field.op is FilterOp.GTE:
            values.append(value)
            predicates.append(f"{field.column} >= ${len(values)}")
        elif field.op is FilterOp.LTE:
            values.append(value)
            predicates.append(f"{field.column} <= ${len(values)}")
        elif field.op is FilterOp.CONTAINS:
            values.append(f"%{_escape_like(str(value))}%")
            predicates.append(
                f"LOWER({field.column}) LIKE LOWER(${len(values)}) ESCAPE '\\'"
            )
        elif field.op is FilterOp.POSITIVE:
            if value is True:
                predicates.append(f"{field.column} > 0")

    if not predicates:
        return "", []

    return "WHERE " + " AND ".join(predicates), values


def _escape_like(value: str) -> str:
    """Make LIKE wildcards in user input match literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _check_bounds(supplied: Mapping[str, Any], fields: Sequence[FilterField]) -> None:
    minimums = {f.column: f.key for f in fields if f.op is FilterOp.GTE and f.key in supplied}
    maximums = {f.column: f.key for f in fields if f.op is FilterOp.LTE and f.key in supplied}

    for column, min_key in minimums.items():
        max_key = maximums.get(column)
        if max_key is not None and supplied[min_key] > supplied[max_key]:
            raise BadRequestError(f"{min_key} cannot be greater than {max_key}")
