import math
from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class Page(BaseModel, Generic[T]):
    items: list[T]
    total_count: int
    page_number: int
    page_size: int
    total_pages: int
    has_next_page: bool
    has_previous_page: bool

    @classmethod
    def build(cls, items: list, total_count: int, page_number: int, page_size: int) -> "Page":
        total_pages = math.ceil(total_count / page_size) if page_size else 0
        return cls(
            items=items,
            total_count=total_count,
            page_number=page_number,
            page_size=page_size,
            total_pages=total_pages,
            has_next_page=page_number < total_pages,
            has_previous_page=page_number > 1,
        )
