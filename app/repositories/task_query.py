"""
Translate untrusted listing query parameters into owner-scoped statements.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional, Union
from uuid import UUID

from sqlalchemy import Select, false, func, or_, select

from app.db.models import Task, TaskPriority, TaskStatus

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_PAGE_LIMIT = 100
# keeps (page - 1) * limit well inside a signed 64-bit OFFSET
MAX_PAGE = 10_000_000
SORT_NEWEST = "newest"
SORT_OLDEST = "oldest"


def coerce_positive_int(value: Union[str, int, None], default: int, *, maximum: Optional[int] = None) -> int:
    """
    Parse a query value as a positive integer, falling back to `default` for
    anything missing, non-numeric, zero or negative.
    """
    if value is None:
        return default
    try:
        number = int(str(value).strip())
    except ValueError:
        return default
    if number < 1:
        return default
    if maximum is not None and number > maximum:
        return maximum
    return number


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _parse_enum(enum_cls: type[enum.Enum], value: Optional[str]):
    """
    Returns the member, None for no filter, or the raw string when the value
    names no member (an unmatched filter).
    """
    value = _blank_to_none(value)
    if value is None:
        return None
    try:
        return enum_cls(value)
    except ValueError:
        return value


@dataclass(frozen=True)
class TaskListParams:
    status: Union[TaskStatus, str, None] = None
    priority: Union[TaskPriority, str, None] = None
    search: Optional[str] = None
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT
    sort: str = SORT_NEWEST

    @classmethod
    def from_query(
        cls,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        search: Optional[str] = None,
        page: Union[str, int, None] = None,
        limit: Union[str, int, None] = None,
        sort: Optional[str] = None,
    ) -> "TaskListParams":
        sort_value = (sort or "").strip().lower()
        return cls(
            status=_parse_enum(TaskStatus, status),
            priority=_parse_enum(TaskPriority, priority),
            search=_blank_to_none(search),
            page=coerce_positive_int(page, DEFAULT_PAGE, maximum=MAX_PAGE),
            limit=coerce_positive_int(limit, DEFAULT_LIMIT, maximum=MAX_PAGE_LIMIT),
            sort=SORT_OLDEST if sort_value == SORT_OLDEST else SORT_NEWEST,
        )

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def _enum_clause(column, enum_cls, value):
    if isinstance(value, enum_cls):
        return column == value
    # unknown value: matches nothing
    return false()


def build_task_query(user_id: UUID, params: TaskListParams) -> tuple[Select, Select]:
    """
    Build the page statement and the total-count statement for a listing.

    The owner clause is always applied and is never taken from the request.
    """
    conditions = [Task.user_id == user_id]

    if params.status is not None:
        conditions.append(_enum_clause(Task.status, TaskStatus, params.status))
    if params.priority is not None:
        conditions.append(_enum_clause(Task.priority, TaskPriority, params.priority))
    if params.search:
        conditions.append(
            or_(
                Task.title.icontains(params.search, autoescape=True),
                Task.description.icontains(params.search, autoescape=True),
            )
        )

    if params.sort == SORT_OLDEST:
        order = (Task.created_at.asc(), Task.id.asc())
    else:
        order = (Task.created_at.desc(), Task.id.desc())

    rows_stmt = (
        select(Task)
        .where(*conditions)
        .order_by(*order)
        .offset(params.offset)
        .limit(params.limit)
    )
    count_stmt = select(func.count()).select_from(Task).where(*conditions)
    return rows_stmt, count_stmt
