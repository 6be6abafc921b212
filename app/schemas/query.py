from math import ceil
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from app.core.config import settings

FilterOperator = Literal[
    "equals", "contains", "startsWith", "endsWith",
    "gt", "gte", "lt", "lte",
    "before", "after",
]
FilterType = Literal["string", "number", "date", "boolean"]
SortOrder = Literal["asc", "desc"]

OPERATORS_BY_TYPE: dict[str, frozenset[str]] = {
    "string": frozenset({"equals", "contains", "startsWith", "endsWith"}),
    "number": frozenset({"equals", "gt", "gte", "lt", "lte"}),
    "date": frozenset({"equals", "before", "after"}),
    "boolean": frozenset({"equals"}),
}


class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SearchFilter(WireModel):
    column: str
    operator: FilterOperator
    value: str
    type: FilterType

    @field_validator("value", mode="before")
    @classmethod
    def stringify_value(cls, value):
        # Clients sometimes send numbers and booleans unquoted.
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (int, float)):
            return str(value)
        return value

    @model_validator(mode="after")
    def operator_matches_type(self):
        if self.operator not in OPERATORS_BY_TYPE[self.type]:
            raise ValueError(f'operator "{self.operator}" is not valid for {self.type} filters')
        return self


class ListQuery(WireModel):
    page: int = Field(default=1, ge=1)
    limit: int = Field(default_factory=lambda: settings.DEFAULT_PAGE_SIZE, ge=1)
    search_filters: List[SearchFilter] = []
    sort_by: Optional[str] = None
    sort_order: Optional[SortOrder] = None

    @field_validator("limit")
    @classmethod
    def limit_within_max_page_size(cls, value: int) -> int:
        if value > settings.MAX_PAGE_SIZE:
            raise ValueError(f"limit must not exceed {settings.MAX_PAGE_SIZE}")
        return value

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


class Pagination(WireModel):
    page: int
    limit: int
    total: int
    total_pages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        return cls(page=page, limit=limit, total=total, total_pages=ceil(total / limit) if limit else 0)
