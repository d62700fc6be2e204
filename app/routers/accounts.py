from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import HTMLResponse

from app.core.http import ApiError
from app.core.session import flash
from app.deps import Api, BackOfficeSession
from app.schemas.enums import AccountType
from app.schemas.forms import AccountForm, AccountUpdateForm, parse_form
from app.services.accounts import AccountService
from app.templating import render
from app.utils.pagination import Pagination
from app.web import flash_error, form_fields, redirect

router = APIRouter(prefix="/accounts", tags=["Accounts"])


@router.get("", response_class=HTMLResponse)
async def list_accounts(request: Request, auth: BackOfficeSession, api: Api):
    pagination = Pagination.from_query(request.query_params, request.url.path)
    page = await AccountService(api).get_accounts_paginated(
        auth.gym_id, pagination.page_no, pagination.page_size, pagination.search_text
    )
    return render(request, "accounts/list.html", {"page": page, "pagination": pagination})


@router.get("/new", response_class=HTMLResponse)
async def new_account(request: Request, auth: BackOfficeSession):
    return render(request, "accounts/form.html", {"account": None, "account_types": list(AccountType)})


@router.post("")
async def create_account(request: Request, auth: BackOfficeSession, api: Api):
    data = await form_fields(request)
    try:
        form = parse_form(AccountForm, data)
        if form.account_type == AccountType.BANK and not form.bank_name:
            raise ValueError("Bank name is required for bank accounts")
        await AccountService(api).create_account({**form.to_api(), "gymId": auth.gym_id})
    except (ValueError, ApiError) as e:
        flash_error(request, e, "Failed to create account")
        return redirect("/accounts/new")

    flash(request, "Account created successfully")
    return redirect("/accounts")


@router.get("/{account_id}/edit", response_class=HTMLResponse)
async def edit_account(request: Request, account_id: int, auth: BackOfficeSession, api: Api):
    account = await AccountService(api).get_account(account_id)
    if account is None:
        raise HTTPException(status_code=404, detail="Account not found")
    return render(request, "accounts/form.html", {"account": account, "account_types": list(AccountType)})


@router.post("/{account_id}")
async def update_account(request: Request, account_id: int, auth: BackOfficeSession, api: Api):
    data = await form_fields(request)
    try:
        form = parse_form(AccountUpdateForm, data)
        await AccountService(api).update_account(account_id, form.to_api())
    except (ValueError, ApiError) as e:
        flash_error(request, e, "Failed to update account")
        return redirect(f"/accounts/{account_id}/edit")

    flash(request, "Account updated successfully")
    return redirect("/accounts")


@router.post("/{account_id}/deactivate")
async def deactivate_account(request: Request, account_id: int, auth: BackOfficeSession, api: Api):
    try:
        await AccountService(api).deactivate_account(account_id)
        flash(request, "Account deactivated successfully")
    except ApiError as e:
        flash_error(request, e, "Failed to deactivate account")
    return redirect("/accounts")
