import logging
from datetime import date, datetime, timezone
from typing import Optional

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import HTMLResponse

from app.deps import Api, BackOfficeSession
from app.schemas.enums import InvoiceStatus, label
from app.services.accounts import AccountService
from app.services.attendance import AttendanceService
from app.services.expenses import ExpenseCategoryService, ExpenseService
from app.services.invoices import InvoiceService
from app.services.members import MemberService
from app.services.reports import (
    attendance_daily_counts,
    default_income_expense_range,
    default_report_range,
    filter_attendance,
    filter_payments,
    is_profit,
    merge_income_expense,
    payment_totals,
    reports_overview,
)
from app.services.trainers import TrainerService
from app.templating import render
from app.utils.dates import format_date, parse_date
from app.utils.export import CSV_MEDIA_TYPE, PDF_MEDIA_TYPE, file_response, timestamped_filename, to_csv
from app.utils.pdf import (
    account_summary_pdf,
    attendance_report_pdf,
    expense_report_pdf,
    income_expense_pdf,
    payment_collection_pdf,
)
from app.web import query_int

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["Reports"])


def _date_range(request: Request, default: tuple[date, date]) -> tuple[date, date]:
    start = parse_date(request.query_params.get("startDate")) or default[0]
    end = parse_date(request.query_params.get("endDate")) or default[1]
    return start, end


def _optional_range(request: Request) -> tuple[Optional[date], Optional[date]]:
    return parse_date(request.query_params.get("startDate")), parse_date(request.query_params.get("endDate"))


def _invoice_status(value: Optional[str]) -> Optional[InvoiceStatus]:
    number = query_int(value)
    try:
        return InvoiceStatus(number) if number is not None else None
    except ValueError:
        return None


def _expense_filters(request: Request) -> dict:
    start, end = _optional_range(request)
    return {
        "start_date": start,
        "end_date": end,
        "category_id": query_int(request.query_params.get("categoryId")),
        "account_id": query_int(request.query_params.get("accountId")),
    }


# ==================== OVERVIEW ====================

@router.get("", response_class=HTMLResponse)
async def reports_dashboard(request: Request, auth: BackOfficeSession, api: Api):
    invoices = await InvoiceService(api).get_invoices_by_gym(auth.gym_id)
    members = await MemberService(api).get_members_by_gym(auth.gym_id)
    logs = await AttendanceService(api).get_attendance_by_gym(auth.gym_id)
    trainers = await TrainerService(api).get_trainers_by_gym(auth.gym_id)

    overview = reports_overview(invoices, members, logs, trainers, datetime.now(timezone.utc))
    return render(request, "reports/index.html", {"overview": overview})


# ==================== ATTENDANCE ====================

async def _attendance_report(request: Request, auth, api):
    start, end = _date_range(request, default_report_range(date.today()))
    search = (request.query_params.get("searchText") or "").strip()
    logs = await AttendanceService(api).get_attendance_by_gym(auth.gym_id)
    return start, end, search, filter_attendance(logs, start, end, search or None, auth.time_zone)


@router.get("/attendance", response_class=HTMLResponse)
async def attendance_report(request: Request, auth: BackOfficeSession, api: Api):
    start, end, search, logs = await _attendance_report(request, auth, api)
    return render(request, "reports/attendance.html", {
        "logs": logs,
        "daily": attendance_daily_counts(logs, auth.time_zone),
        "unique_members": len({log.member_id for log in logs if log.member_id is not None}),
        "start_date": start,
        "end_date": end,
        "search": search,
    })


@router.get("/attendance/pdf")
async def attendance_report_export(request: Request, auth: BackOfficeSession, api: Api):
    start, end, _, logs = await _attendance_report(request, auth, api)
    content = attendance_report_pdf(logs, start, end, auth.time_zone)
    return file_response(content, f"attendance-report-{start}-to-{end}.pdf", PDF_MEDIA_TYPE)


# ==================== PAYMENTS ====================

async def _payments_report(request: Request, auth, api):
    start, end = _date_range(request, default_report_range(date.today()))
    status = _invoice_status(request.query_params.get("status"))
    search = (request.query_params.get("searchText") or "").strip()
    invoices = await InvoiceService(api).get_invoices_by_gym(auth.gym_id)
    return start, end, status, search, filter_payments(invoices, start, end, status, search or None, auth.time_zone)


@router.get("/payments", response_class=HTMLResponse)
async def payments_report(request: Request, auth: BackOfficeSession, api: Api):
    start, end, status, search, invoices = await _payments_report(request, auth, api)
    return render(request, "reports/payments.html", {
        "invoices": invoices,
        "totals": payment_totals(invoices),
        "start_date": start,
        "end_date": end,
        "status": status,
        "statuses": list(InvoiceStatus),
        "search": search,
    })


@router.get("/payments/export/{fmt}")
async def payments_report_export(request: Request, fmt: str, auth: BackOfficeSession, api: Api):
    start, end, _, _, invoices = await _payments_report(request, auth, api)
    if fmt == "pdf":
        content = payment_collection_pdf(invoices, start, end)
        return file_response(content, f"payment-report-{start}-to-{end}.pdf", PDF_MEDIA_TYPE)
    if fmt == "csv":
        rows = [
            [
                inv.invoice_number,
                inv.member.full_name if inv.member else "",
                inv.amount,
                inv.discount,
                inv.net_amount,
                label(inv.status),
                format_date(inv.due_date),
                format_date(inv.created_at),
            ]
            for inv in invoices
        ]
        content = to_csv(
            ["Invoice Number", "Member", "Amount", "Discount", "Net Amount", "Status", "Due Date", "Created"],
            rows,
        )
        return file_response(content, f"payment-report-{start}-to-{end}.csv", CSV_MEDIA_TYPE)
    raise HTTPException(status_code=404, detail="Unknown export format")


# ==================== ACCOUNT SUMMARY ====================

@router.get("/account-summary", response_class=HTMLResponse)
async def account_summary(request: Request, auth: BackOfficeSession, api: Api):
    start, end = _optional_range(request)
    summaries = await AccountService(api).get_account_summary(auth.gym_id, start, end)
    return render(request, "reports/account_summary.html", {
        "summaries": summaries,
        "start_date": start,
        "end_date": end,
        "totals": {
            "opening": sum(s.opening_balance for s in summaries),
            "credit": sum(s.total_credit for s in summaries),
            "debit": sum(s.total_debit for s in summaries),
            "closing": sum(s.closing_balance for s in summaries),
        },
    })


@router.get("/account-summary/pdf")
async def account_summary_export(request: Request, auth: BackOfficeSession, api: Api):
    start, end = _optional_range(request)
    summaries = await AccountService(api).get_account_summary(auth.gym_id, start, end)
    content = account_summary_pdf(summaries, start, end)
    return file_response(content, timestamped_filename("account_summary", "pdf"), PDF_MEDIA_TYPE)


# ==================== EXPENSES ====================

@router.get("/expenses", response_class=HTMLResponse)
async def expense_report(request: Request, auth: BackOfficeSession, api: Api):
    filters = _expense_filters(request)
    items = await ExpenseService(api).get_expense_report(auth.gym_id, **filters)
    return render(request, "reports/expenses.html", {
        "items": items,
        "filters": filters,
        "grand_total": sum(item.total_amount for item in items),
        "categories": await ExpenseCategoryService(api).get_active_categories(auth.gym_id),
        "accounts": await AccountService(api).get_active_accounts(auth.gym_id),
    })


@router.get("/expenses/export/{fmt}")
async def expense_report_export(request: Request, fmt: str, auth: BackOfficeSession, api: Api):
    filters = _expense_filters(request)
    service = ExpenseService(api)
    if fmt in ("summary", "detailed"):
        items = await service.get_expense_report(auth.gym_id, **filters)
        content = expense_report_pdf(items, filters["start_date"], filters["end_date"], detailed=fmt == "detailed")
        return file_response(content, timestamped_filename(f"expense_report_{fmt}", "pdf"), PDF_MEDIA_TYPE)
    if fmt == "csv":
        content = await service.export_expense_report_csv(auth.gym_id, **filters)
        return file_response(content, timestamped_filename("expense_report", "csv"), CSV_MEDIA_TYPE)
    if fmt == "pdf":
        content = await service.export_expense_report_pdf(auth.gym_id, **filters)
        return file_response(content, timestamped_filename("expense_report", "pdf"), PDF_MEDIA_TYPE)
    raise HTTPException(status_code=404, detail="Unknown export format")


# ==================== INCOME VS EXPENSE ====================

async def _income_expense(request: Request, auth, api):
    start, end = _date_range(request, default_income_expense_range(date.today()))
    summary = await ExpenseService(api).get_income_expense_summary(auth.gym_id, start, end)
    return start, end, summary


@router.get("/income-expense", response_class=HTMLResponse)
async def income_expense(request: Request, auth: BackOfficeSession, api: Api):
    start, end, summary = await _income_expense(request, auth, api)
    return render(request, "reports/income_expense.html", {
        "summary": summary,
        "months": merge_income_expense(summary),
        "is_profit": is_profit(summary),
        "start_date": start,
        "end_date": end,
    })


@router.get("/income-expense/export/{fmt}")
async def income_expense_export(request: Request, fmt: str, auth: BackOfficeSession, api: Api):
    start, end, summary = await _income_expense(request, auth, api)
    service = ExpenseService(api)
    if fmt == "report":
        content = income_expense_pdf(summary, merge_income_expense(summary), start, end)
        return file_response(content, timestamped_filename("income_expense", "pdf"), PDF_MEDIA_TYPE)
    if fmt == "csv":
        content = await service.export_income_expense_csv(auth.gym_id, start, end)
        return file_response(content, timestamped_filename("income_expense", "csv"), CSV_MEDIA_TYPE)
    if fmt == "pdf":
        content = await service.export_income_expense_pdf(auth.gym_id, start, end)
        return file_response(content, timestamped_filename("income_expense", "pdf"), PDF_MEDIA_TYPE)
    raise HTTPException(status_code=404, detail="Unknown export format")
