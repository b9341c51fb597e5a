import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from sqlalchemy import ColumnElement, Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.schemas.base import BaseSchema
from app.schemas.responses import PaginationMetaSchema


type FilterType = ColumnElement[bool]

T = TypeVar("T")


class PaginatedSchema(BaseSchema):
    page: int = 1
    limit: int = 10
    sort_by: str | None = None
    sort_order: str = "DESC"

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def build_pagination_meta(page: PaginatedSchema, total: int) -> PaginationMetaSchema:
    total_pages = math.ceil(total / page.limit) if total else 0
    return PaginationMetaSchema(
        page=page.page,
        limit=page.limit,
        total=total,
        total_pages=total_pages,
        has_next_page=page.page < total_pages,
        has_previous_page=page.page > 1,
    )


def apply_pagination[S: tuple[Any, ...]](
    query: Select[S],
    page: PaginatedSchema,
    default_ordering: ColumnElement | Sequence[ColumnElement] | None = None,
    ordering_mapping: Mapping[str, ColumnElement] | None = None,
) -> Select[S]:
    query = query.offset(page.offset).limit(page.limit)
    if ordering_mapping and page.sort_by:
        column = ordering_mapping[page.sort_by]
        query = query.order_by(
            column.asc() if page.sort_order.upper() == "ASC" else column.desc()
        )
    elif default_ordering is not None:
        if not isinstance(default_ordering, Sequence):
            default_ordering = [default_ordering]
        query = query.order_by(*default_ordering)
    return query


@dataclass
class PaginatedResult(Generic[T]):
    items: list[T]
    pagination: PaginationMetaSchema

    @classmethod
    async def of(
        cls,
        session: AsyncSession,
        query: Select,
        page: PaginatedSchema,
        **ordering: Any,
    ) -> "PaginatedResult":
        total = await session.scalar(
            select(func.count()).select_from(query.order_by(None).subquery())
        )
        items = await session.scalars(apply_pagination(query, page, **ordering))
        return cls(
            items=list(items),
            pagination=build_pagination_meta(page, total or 0),
        )
