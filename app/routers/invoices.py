import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import HTMLResponse

from app.core.http import ApiError
from app.core.session import flash
from app.deps import Api, BackOfficeSession
from app.schemas.enums import InvoiceStatus, PaymentMethod
from app.schemas.forms import InvoiceForm, PaymentForm, parse_form
from app.schemas.invoice import TransactionCreate
from app.services.accounts import AccountService
from app.services.gyms import GymService
from app.services.invoices import InvoiceService
from app.services.members import MemberService
from app.services.reports import invoice_page_stats
from app.services.subscriptions import SubscriptionService
from app.services.transactions import TransactionService
from app.templating import render
from app.utils.export import PDF_MEDIA_TYPE, file_response
from app.utils.invoice import next_invoice_number, roll_overdue
from app.utils.pagination import Pagination
from app.utils.pdf import invoice_pdf, payment_receipt_pdf
from app.web import flash_error, form_fields, query_int, redirect

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/invoices", tags=["Invoices"])


async def _get_invoice_or_404(service: InvoiceService, invoice_id: int):
    invoice = await service.get_invoice(invoice_id)
    if invoice is None:
        raise HTTPException(status_code=404, detail="Invoice not found")
    return invoice


def _status_filter(value) -> Optional[InvoiceStatus]:
    number = query_int(value)
    if number is None:
        return None
    try:
        return InvoiceStatus(number)
    except ValueError:
        return None


async def _gym_name(api, gym_id):
    gym = await GymService(api).get_gym(gym_id)
    return gym.name if gym else None


# ==================== LIST ====================

@router.get("", response_class=HTMLResponse)
async def list_invoices(request: Request, auth: BackOfficeSession, api: Api):
    pagination = Pagination.from_query(request.query_params, request.url.path)
    status = _status_filter(request.query_params.get("status"))
    service = InvoiceService(api)

    page = await service.get_invoices_paginated(
        auth.gym_id, pagination.page_no, pagination.page_size, pagination.search_text, status
    )
    today = date.today()
    roll_overdue(page.data, today)

    all_invoices = await service.get_invoices_by_gym(auth.gym_id)
    roll_overdue(all_invoices, today)

    return render(request, "invoices/list.html", {
        "page": page,
        "pagination": pagination,
        "status": status,
        "statuses": list(InvoiceStatus),
        "stats": invoice_page_stats(all_invoices),
    })


@router.post("/update-overdue")
async def update_overdue(request: Request, auth: BackOfficeSession, api: Api):
    try:
        await InvoiceService(api).update_overdue(auth.gym_id)
        flash(request, "Overdue invoices updated")
    except ApiError as e:
        flash_error(request, e, "Failed to update overdue invoices")
    return redirect("/invoices")


# ==================== CREATE ====================

@router.get("/new", response_class=HTMLResponse)
async def new_invoice(request: Request, auth: BackOfficeSession, api: Api):
    members = await MemberService(api).get_members_by_gym(auth.gym_id)
    subscriptions = await SubscriptionService(api).get_subscriptions_by_gym(auth.gym_id)
    return render(request, "invoices/form.html", {
        "members": members,
        "subscriptions": subscriptions,
        "today": date.today(),
    })


@router.post("")
async def create_invoice(request: Request, auth: BackOfficeSession, api: Api):
    data = await form_fields(request)
    service = InvoiceService(api)
    try:
        form = parse_form(InvoiceForm, data)
        existing = await service.get_invoices_by_gym(auth.gym_id)
        invoice_number = next_invoice_number(date.today(), (inv.invoice_number for inv in existing))
        await service.create_invoice({
            "invoiceNumber": invoice_number,
            "amount": form.amount,
            "discount": form.discount,
            "netAmount": form.net_amount,
            "dueDate": form.due_date.isoformat(),
            "status": int(InvoiceStatus.UNPAID),
            "notes": form.notes,
            "memberId": form.member_id,
            "subscriptionId": form.subscription_id,
            "gymId": auth.gym_id,
        })
    except (ValueError, ApiError) as e:
        flash_error(request, e, "Failed to create invoice")
        return redirect("/invoices/new")

    logger.info(f"Invoice {invoice_number} created for member {form.member_id}")
    flash(request, f"Invoice {invoice_number} created successfully")
    return redirect("/invoices")


# ==================== PAYMENTS ====================

@router.get("/{invoice_id}/pay", response_class=HTMLResponse)
async def payment_page(request: Request, invoice_id: int, auth: BackOfficeSession, api: Api):
    invoice = await _get_invoice_or_404(InvoiceService(api), invoice_id)
    if not invoice.is_payable:
        flash(request, "This invoice cannot be paid", "error")
        return redirect("/invoices")

    accounts = await AccountService(api).get_active_accounts(auth.gym_id)
    return render(request, "invoices/pay.html", {
        "invoice": invoice,
        "accounts": accounts,
        "selected_account": accounts[0].id if accounts else None,
        "payment_methods": list(PaymentMethod),
        "today": date.today(),
    })


@router.post("/{invoice_id}/pay")
async def record_payment(request: Request, invoice_id: int, auth: BackOfficeSession, api: Api):
    data = await form_fields(request)
    try:
        form = parse_form(PaymentForm, data)
        await TransactionService(api).create_transaction(
            TransactionCreate(
                gym_id=auth.gym_id,
                invoice_id=invoice_id,
                amount=form.amount,
                payment_method=form.payment_method,
                account_id=form.account_id,
                reference_number=form.reference_number,
                notes=form.notes,
                paid_at=form.payment_date,
            )
        )
    except (ValueError, ApiError) as e:
        flash_error(request, e, "Failed to record payment")
        return redirect(f"/invoices/{invoice_id}/pay")

    flash(request, "Payment recorded successfully")
    return redirect("/invoices")


@router.post("/{invoice_id}/mark-paid")
async def mark_paid(request: Request, invoice_id: int, auth: BackOfficeSession, api: Api):
    data = await form_fields(request)
    method = query_int(data.get("payment_method")) or PaymentMethod.CASH
    try:
        await InvoiceService(api).mark_paid(invoice_id, PaymentMethod(method))
        flash(request, "Invoice marked as paid")
    except (ValueError, ApiError) as e:
        flash_error(request, e, "Failed to mark invoice as paid")
    return redirect("/invoices")


@router.get("/{invoice_id}/payments", response_class=HTMLResponse)
async def invoice_payments(request: Request, invoice_id: int, auth: BackOfficeSession, api: Api):
    invoice = await _get_invoice_or_404(InvoiceService(api), invoice_id)
    transactions = await TransactionService(api).get_transactions_by_invoice(invoice_id)
    accounts = {a.id: a.account_name for a in await AccountService(api).get_accounts_by_gym(auth.gym_id)}
    return render(request, "invoices/payments.html", {
        "invoice": invoice,
        "transactions": transactions,
        "accounts": accounts,
        "total_paid": sum(t.amount for t in transactions),
    })


@router.post("/{invoice_id}/payments/{transaction_id}/delete")
async def delete_payment(request: Request, invoice_id: int, transaction_id: int, auth: BackOfficeSession, api: Api):
    try:
        await TransactionService(api).delete_transaction(transaction_id)
        flash(request, "Payment deleted successfully")
    except ApiError as e:
        flash_error(request, e, "Failed to delete payment")
    return redirect(f"/invoices/{invoice_id}/payments")


@router.get("/{invoice_id}/payments/{transaction_id}/receipt")
async def payment_receipt(invoice_id: int, transaction_id: int, auth: BackOfficeSession, api: Api):
    transaction = await TransactionService(api).get_transaction(transaction_id)
    if transaction is None:
        raise HTTPException(status_code=404, detail="Payment not found")
    invoice = await InvoiceService(api).get_invoice(invoice_id)

    account_name = None
    if transaction.account_id is not None:
        account = await AccountService(api).get_account(transaction.account_id)
        account_name = account.account_name if account else None

    content = payment_receipt_pdf(
        transaction, invoice, account_name=account_name, gym_name=await _gym_name(api, auth.gym_id)
    )
    return file_response(content, f"receipt-RCP-{transaction.id}.pdf", PDF_MEDIA_TYPE)


# ==================== CANCEL / PDF ====================

@router.post("/{invoice_id}/cancel")
async def cancel_invoice(request: Request, invoice_id: int, auth: BackOfficeSession, api: Api):
    try:
        await InvoiceService(api).cancel_invoice(invoice_id)
        flash(request, "Invoice cancelled successfully")
    except ApiError as e:
        flash_error(request, e, "Failed to cancel invoice")
    return redirect("/invoices")


@router.get("/{invoice_id}/pdf")
async def invoice_document(invoice_id: int, auth: BackOfficeSession, api: Api):
    invoice = await _get_invoice_or_404(InvoiceService(api), invoice_id)

    member_phone = None
    if invoice.member_id is not None:
        member = await MemberService(api).get_member(invoice.member_id)
        member_phone = member.phone if member else None

    content = invoice_pdf(invoice, gym_name=await _gym_name(api, auth.gym_id), member_phone=member_phone)
    return file_response(content, f"{invoice.invoice_number or f'invoice-{invoice.id}'}.pdf", PDF_MEDIA_TYPE)
