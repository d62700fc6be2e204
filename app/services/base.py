from typing import Any, Iterable, Optional, Type, TypeVar

from pydantic import BaseModel

from app.core.http import ApiClient
from app.schemas.common import PaginatedResponse

M = TypeVar("M", bound=BaseModel)


class ApiService:
    """Base class for resource services; one method per backend endpoint"""

    def __init__(self, api: ApiClient):
        self.api = api

    @staticmethod
    def _one(model: Type[M], data: Any) -> Optional[M]:
        if data is None:
            return None
        return model.model_validate(data)

    @staticmethod
    def _many(model: Type[M], data: Optional[Iterable[Any]]) -> list[M]:
        return [model.model_validate(item) for item in (data or [])]

    @staticmethod
    def _page(model: Type[M], data: Any) -> PaginatedResponse:
        data = data or {}
        page = PaginatedResponse.model_validate({**data, "data": []})
        page.data = [model.model_validate(item) for item in data.get("data", [])]
        return page


def pagination_params(page_no: int, page_size: int, search_text: Optional[str] = None, **extra) -> dict:
    params = {"pageNo": page_no, "pageSize": page_size, "searchText": search_text}
    params.update(extra)
    return params


def uploaded_url(data: Any) -> str:
    """URL of an uploaded photo or logo, whatever shape the backend answers with"""
    if isinstance(data, dict):
        return data.get("photoUrl") or data.get("url") or data.get("logo") or ""
    return str(data or "")
