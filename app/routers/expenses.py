from datetime import date

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import HTMLResponse

from app.core.http import ApiError
from app.core.session import flash
from app.deps import Api, BackOfficeSession
from app.schemas.forms import ExpenseForm, parse_form
from app.services.accounts import AccountService
from app.services.expenses import ExpenseCategoryService, ExpenseService
from app.templating import render
from app.utils.dates import parse_date
from app.utils.export import CSV_MEDIA_TYPE, PDF_MEDIA_TYPE, file_response, timestamped_filename
from app.utils.pagination import Pagination
from app.web import flash_error, form_fields, query_int, redirect

router = APIRouter(prefix="/expenses", tags=["Expenses"])


def _filters(request: Request) -> dict:
    query = request.query_params
    return {
        "start_date": parse_date(query.get("startDate")),
        "end_date": parse_date(query.get("endDate")),
        "category_id": query_int(query.get("categoryId")),
        "account_id": query_int(query.get("accountId")),
    }


async def _choices(api, gym_id) -> dict:
    return {
        "categories": await ExpenseCategoryService(api).get_active_categories(gym_id),
        "accounts": await AccountService(api).get_active_accounts(gym_id),
    }


def _payload(form: ExpenseForm, gym_id) -> dict:
    return {**form.to_api(), "gymId": gym_id}


# ==================== LIST / EXPORT ====================

@router.get("", response_class=HTMLResponse)
async def list_expenses(request: Request, auth: BackOfficeSession, api: Api):
    pagination = Pagination.from_query(request.query_params, request.url.path)
    filters = _filters(request)
    page = await ExpenseService(api).get_expenses_paginated(
        auth.gym_id, pagination.page_no, pagination.page_size, pagination.search_text, **filters
    )
    return render(request, "expenses/list.html", {
        "page": page,
        "pagination": pagination,
        "filters": filters,
        "total_amount": sum(expense.amount for expense in page.data),
        **await _choices(api, auth.gym_id),
    })


@router.get("/export/{fmt}")
async def export_expenses(request: Request, fmt: str, auth: BackOfficeSession, api: Api):
    filters = _filters(request)
    service = ExpenseService(api)
    if fmt == "csv":
        content = await service.export_expense_report_csv(auth.gym_id, **filters)
        return file_response(content, timestamped_filename("expenses", "csv"), CSV_MEDIA_TYPE)
    if fmt == "pdf":
        content = await service.export_expense_report_pdf(auth.gym_id, **filters)
        return file_response(content, timestamped_filename("expenses", "pdf"), PDF_MEDIA_TYPE)
    raise HTTPException(status_code=404, detail="Unknown export format")


# ==================== CREATE ====================

@router.get("/new", response_class=HTMLResponse)
async def new_expense(request: Request, auth: BackOfficeSession, api: Api):
    return render(request, "expenses/form.html", {
        "expense": None,
        "today": date.today(),
        **await _choices(api, auth.gym_id),
    })


@router.post("")
async def create_expense(request: Request, auth: BackOfficeSession, api: Api):
    data = await form_fields(request)
    try:
        form = parse_form(ExpenseForm, data)
        await ExpenseService(api).create_expense(_payload(form, auth.gym_id))
    except (ValueError, ApiError) as e:
        flash_error(request, e, "Failed to create expense")
        return redirect("/expenses/new")

    flash(request, "Expense recorded successfully")
    return redirect("/expenses")


# ==================== EDIT / DELETE ====================

@router.get("/{expense_id}/edit", response_class=HTMLResponse)
async def edit_expense(request: Request, expense_id: int, auth: BackOfficeSession, api: Api):
    expense = await ExpenseService(api).get_expense(expense_id)
    if expense is None:
        raise HTTPException(status_code=404, detail="Expense not found")
    return render(request, "expenses/form.html", {
        "expense": expense,
        "today": date.today(),
        **await _choices(api, auth.gym_id),
    })


@router.post("/{expense_id}")
async def update_expense(request: Request, expense_id: int, auth: BackOfficeSession, api: Api):
    data = await form_fields(request)
    try:
        form = parse_form(ExpenseForm, data)
        await ExpenseService(api).update_expense(expense_id, _payload(form, auth.gym_id))
    except (ValueError, ApiError) as e:
        flash_error(request, e, "Failed to update expense")
        return redirect(f"/expenses/{expense_id}/edit")

    flash(request, "Expense updated successfully")
    return redirect("/expenses")


@router.post("/{expense_id}/delete")
async def delete_expense(request: Request, expense_id: int, auth: BackOfficeSession, api: Api):
    try:
        await ExpenseService(api).delete_expense(expense_id)
        flash(request, "Expense deleted successfully")
    except ApiError as e:
        flash_error(request, e, "Failed to delete expense")
    return redirect("/expenses")
