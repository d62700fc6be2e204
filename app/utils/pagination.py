from dataclasses import dataclass
from typing import Mapping, Optional
from urllib.parse import urlencode

DEFAULT_PAGE_NO = 1
DEFAULT_PAGE_SIZE = 10
PAGE_SIZE_OPTIONS = (10, 25, 50)


def _page_no(raw: Optional[str]) -> int:
    try:
        value = int(raw) if raw is not None else DEFAULT_PAGE_NO
    except (TypeError, ValueError):
        return DEFAULT_PAGE_NO
    return value if value >= 1 else DEFAULT_PAGE_NO


def _page_size(raw: Optional[str]) -> int:
    try:
        value = int(raw) if raw is not None else DEFAULT_PAGE_SIZE
    except (TypeError, ValueError):
        return DEFAULT_PAGE_SIZE
    return value if value in PAGE_SIZE_OPTIONS else DEFAULT_PAGE_SIZE


@dataclass
class Pagination:
    """Paging state carried in the ``pageNo``, ``pageSize`` and ``searchText`` query parameters"""

    page_no: int = DEFAULT_PAGE_NO
    page_size: int = DEFAULT_PAGE_SIZE
    search_text: str = ""
    path: str = ""
    extra: Optional[dict] = None

    @classmethod
    def from_query(cls, query: Mapping[str, str], path: str = "") -> "Pagination":
        extra = {
            key: value for key, value in query.items()
            if key not in ("pageNo", "pageSize", "searchText") and value not in (None, "")
        }
        return cls(
            page_no=_page_no(query.get("pageNo")),
            page_size=_page_size(query.get("pageSize")),
            search_text=(query.get("searchText") or "").strip(),
            path=path,
            extra=extra,
        )

    def _url(self, page_no: int, page_size: int, search_text: str) -> str:
        params = dict(self.extra or {})
        params["pageNo"] = page_no
        params["pageSize"] = page_size
        if search_text:
            params["searchText"] = search_text
        return f"{self.path}?{urlencode(params)}"

    def url_for_page(self, page_no: int) -> str:
        return self._url(max(page_no, 1), self.page_size, self.search_text)

    def url_for_page_size(self, page_size: int) -> str:
        if page_size not in PAGE_SIZE_OPTIONS:
            page_size = DEFAULT_PAGE_SIZE
        return self._url(DEFAULT_PAGE_NO, page_size, self.search_text)

    def url_for_search(self, search_text: str) -> str:
        return self._url(DEFAULT_PAGE_NO, self.page_size, (search_text or "").strip())

    @staticmethod
    def total_pages(total_count: int, page_size: int) -> int:
        if total_count <= 0:
            return 0
        return (total_count + page_size - 1) // page_size

    def slice(self, items: list) -> list:
        """Client-side page of an already fetched list"""
        start = (self.page_no - 1) * self.page_size
        return items[start:start + self.page_size]
