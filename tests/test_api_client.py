import asyncio
import json

import httpx
import pytest

from app.core.http import ApiClient, ApiError
from app.schemas.enums import PaymentMethod
from app.services.invoices import InvoiceService
from app.services.members import MemberService
from app.services.packages import PackageService


def _client(handler, token="tok") -> ApiClient:
    return ApiClient("http://backend/api/", token=token, transport=httpx.MockTransport(handler))


def run(coro):
    return asyncio.run(coro)


def test_bearer_token_and_base_url():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json=[])

    async def go():
        async with _client(handler) as api:
            return await api.get("/members/gym/7", params={"searchText": "", "pageNo": 1, "status": None})

    assert run(go()) == []
    request = seen[0]
    assert request.headers["Authorization"] == "Bearer tok"
    assert request.url.path == "/api/members/gym/7"
    assert dict(request.url.params) == {"pageNo": "1"}


def test_no_authorization_header_without_token():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(204)

    async def go():
        async with _client(handler, token=None) as api:
            return await api.post("/auth/logout")

    assert run(go()) is None
    assert "Authorization" not in seen[0].headers


@pytest.mark.parametrize("response,expected", [
    (httpx.Response(400, json={"message": "Email already exists"}), "Email already exists"),
    (httpx.Response(404, json={"title": "Not Found"}), "Not Found"),
    (httpx.Response(422, json={"detail": "Bad data"}), "Bad data"),
    (httpx.Response(400, json="Plain message"), "Plain message"),
    (httpx.Response(500, text="<html>"), "Request failed with status code 500"),
])
def test_error_messages(response, expected):
    async def go():
        async with _client(lambda request: response) as api:
            await api.get("/anything")

    with pytest.raises(ApiError) as exc:
        run(go())
    assert exc.value.message == expected
    assert exc.value.status_code == response.status_code


def test_unauthorized_flag():
    async def go():
        async with _client(lambda request: httpx.Response(401, json={"message": "Unauthorized"})) as api:
            await api.get("/members/1")

    with pytest.raises(ApiError) as exc:
        run(go())
    assert exc.value.is_unauthorized


def test_network_failure():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    async def go():
        async with _client(handler) as api:
            await api.get("/members/1")

    with pytest.raises(ApiError) as exc:
        run(go())
    assert exc.value.status_code == 0
    assert exc.value.message == "Network Error"


def test_download_returns_raw_bytes():
    async def go():
        async with _client(lambda request: httpx.Response(200, content=b"a,b\n1,2\n")) as api:
            return await api.download("/expenses/gym/7/export/csv")

    assert run(go()) == b"a,b\n1,2\n"


# ==================== SERVICES ====================

def test_services_map_to_backend_paths():
    seen = []

    def handler(request):
        seen.append(request)
        if request.url.path.endswith("/generate-code/7"):
            return httpx.Response(200, json={"memberCode": "MEM010"})
        if request.url.path.endswith("/paginated"):
            return httpx.Response(200, json={
                "data": [{"id": 1, "invoiceNumber": "INV-1", "status": 4}],
                "totalCount": 1, "pageNo": 1, "pageSize": 10, "totalPages": 1,
            })
        return httpx.Response(200)

    async def go():
        async with _client(handler) as api:
            code = await MemberService(api).generate_member_code(7)
            page = await InvoiceService(api).get_invoices_paginated(7, 1, 10, "ali", None)
            await InvoiceService(api).mark_paid(3, PaymentMethod.CHEQUE)
            await PackageService(api).set_package_status(5, False)
            missing = await MemberService(api).get_member(99)
            return code, page, missing

    code, page, missing = run(go())

    assert code == "MEM010"
    assert page.total_count == 1
    assert page.data[0].invoice_number == "INV-1"
    assert missing is None

    paginated = seen[1]
    assert paginated.url.path == "/api/invoices/gym/7/paginated"
    assert dict(paginated.url.params) == {"pageNo": "1", "pageSize": "10", "searchText": "ali"}

    mark_paid = seen[2]
    assert (mark_paid.method, mark_paid.url.path) == ("PATCH", "/api/invoices/mark-paid/3")
    assert json.loads(mark_paid.content) == 2

    status = seen[3]
    assert (status.method, status.url.path) == ("PATCH", "/api/packages/5/status")
    assert json.loads(status.content) == {"isActive": False}


def test_member_photo_upload_is_multipart():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"photoUrl": "https://cdn/p.png"})

    async def go():
        async with _client(handler) as api:
            return await MemberService(api).upload_photo(4, "p.png", b"\x89PNG", "image/png")

    assert run(go()) == "https://cdn/p.png"
    assert seen[0].url.path == "/api/members/upload-photo/4"
    assert seen[0].headers["content-type"].startswith("multipart/form-data")
