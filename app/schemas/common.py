from datetime import date, datetime
from typing import Annotated, Generic, Optional, TypeVar, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict
from pydantic.alias_generators import to_camel


T = TypeVar("T")

EntityId = Union[int, str]


def _date_part(value):
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str) and "T" in value:
        return value.split("T", 1)[0]
    if value == "":
        return None
    return value


ApiDate = Annotated[date, BeforeValidator(_date_part)]


class ApiModel(BaseModel):
    """Backend resource: snake_case in Python, camelCase on the wire"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_api(self, exclude_none: bool = False) -> dict:
        return self.model_dump(by_alias=True, mode="json", exclude_none=exclude_none)


class PaginatedResponse(ApiModel, Generic[T]):
    data: list[T] = []
    total_count: int = 0
    page_no: int = 1
    page_size: int = 10
    total_pages: int = 0


class CountResponse(ApiModel):
    count: int = 0


class MonthAmount(ApiModel):
    month: str
    amount: float = 0


class NamedRef(ApiModel):
    id: Optional[EntityId] = None
    name: Optional[str] = None
