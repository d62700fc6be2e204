import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import HTMLResponse

from app.deps import Api, BackOfficeSession
from app.schemas.enums import ReferenceType
from app.services.accounts import AccountService
from app.templating import render
from app.utils.dates import parse_date
from app.utils.export import CSV_MEDIA_TYPE, PDF_MEDIA_TYPE, file_response, timestamped_filename
from app.utils.pagination import Pagination
from app.utils.pdf import account_ledger_pdf
from app.web import query_int

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/account-ledger", tags=["Account Ledger"])

PRINT_PAGE_SIZE = 1000


def _reference_type(value: Optional[str]) -> Optional[ReferenceType]:
    try:
        return ReferenceType(value) if value else None
    except ValueError:
        return None


def _filters(request: Request) -> dict:
    query = request.query_params
    return {
        "start_date": parse_date(query.get("startDate")),
        "end_date": parse_date(query.get("endDate")),
        "reference_type": _reference_type(query.get("referenceType")),
    }


async def _account_or_404(api, account_id: int):
    account = await AccountService(api).get_account(account_id)
    if account is None:
        raise HTTPException(status_code=404, detail="Account not found")
    return account


@router.get("", response_class=HTMLResponse)
async def account_ledger(request: Request, auth: BackOfficeSession, api: Api):
    pagination = Pagination.from_query(request.query_params, request.url.path)
    filters = _filters(request)
    service = AccountService(api)

    accounts = await service.get_active_accounts(auth.gym_id)
    account_id = query_int(request.query_params.get("accountId"))
    if account_id is None and accounts:
        account_id = accounts[0].id
    selected = next((a for a in accounts if a.id == account_id), None)

    page = None
    if account_id is not None:
        page = await service.get_account_ledger(
            account_id, pagination.page_no, pagination.page_size, **filters
        )

    return render(request, "ledger.html", {
        "accounts": accounts,
        "account_id": account_id,
        "selected": selected,
        "page": page,
        "pagination": pagination,
        "filters": filters,
        "reference_types": list(ReferenceType),
    })


@router.get("/{account_id}/export/{fmt}")
async def export_ledger(request: Request, account_id: int, fmt: str, auth: BackOfficeSession, api: Api):
    filters = _filters(request)
    service = AccountService(api)
    if fmt == "csv":
        content = await service.export_ledger_csv(account_id, **filters)
        return file_response(content, timestamped_filename(f"ledger_{account_id}", "csv"), CSV_MEDIA_TYPE)
    if fmt == "pdf":
        content = await service.export_ledger_pdf(account_id, **filters)
        return file_response(content, timestamped_filename(f"ledger_{account_id}", "pdf"), PDF_MEDIA_TYPE)
    raise HTTPException(status_code=404, detail="Unknown export format")


@router.get("/{account_id}/print")
async def print_ledger(request: Request, account_id: int, auth: BackOfficeSession, api: Api):
    filters = _filters(request)
    account = await _account_or_404(api, account_id)
    page = await AccountService(api).get_account_ledger(account_id, 1, PRINT_PAGE_SIZE, **filters)
    content = account_ledger_pdf(account.account_name, page.data, filters["start_date"], filters["end_date"])
    return file_response(content, timestamped_filename("account_ledger", "pdf"), PDF_MEDIA_TYPE)
