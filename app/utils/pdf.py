"""
PDF reports and documents rendered with ReportLab platypus.

Every public function returns the finished PDF as bytes; routers stream it
back with ``file_response``.
"""
import calendar
import logging
from datetime import date, datetime
from io import BytesIO
from typing import Any, Iterable, Optional, Sequence
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from app.core.config import settings
from app.schemas.account import AccountSummary, AccountTransactionRead, IncomeExpenseSummary
from app.schemas.attendance import AttendanceLogRead
from app.schemas.enums import PaymentStatus, label
from app.schemas.expense import ExpenseReportItem
from app.schemas.invoice import COLLECTED_STATUSES, OUTSTANDING_STATUSES, InvoiceRead, TransactionRead
from app.schemas.subscription import SubscriptionRead
from app.schemas.trainer import SalarySlipRead, SalarySlipSummary
from app.utils.dates import DISPLAY_DATE_FORMAT, as_utc, duration_label, format_date, resolve_timezone

logger = logging.getLogger(__name__)


class PDFGenerationError(Exception):
    """Raised when ReportLab fails to build a document"""
    pass


def _rgb(red: int, green: int, blue: int) -> colors.Color:
    return colors.Color(red / 255, green / 255, blue / 255)


ORANGE = _rgb(255, 102, 51)
RED = _rgb(239, 68, 68)
GREEN = _rgb(34, 197, 94)
BLUE = _rgb(59, 130, 246)
DARK = _rgb(15, 23, 42)
MUTED = _rgb(100, 116, 139)
LIGHT = _rgb(241, 245, 249)
BORDER = _rgb(226, 232, 240)

PAGE_MARGIN = 14 * mm
CONTENT_WIDTH = A4[0] - 2 * PAGE_MARGIN

styles = getSampleStyleSheet()
styles.add(ParagraphStyle(name="ReportTitle", fontName="Helvetica-Bold", fontSize=18, alignment=TA_CENTER,
                          textColor=DARK, spaceAfter=6, leading=22))
styles.add(ParagraphStyle(name="ReportSubtitle", fontName="Helvetica", fontSize=11, alignment=TA_CENTER,
                          textColor=MUTED, spaceAfter=4))
styles.add(ParagraphStyle(name="Generated", fontName="Helvetica", fontSize=9, alignment=TA_CENTER,
                          textColor=MUTED, spaceAfter=12))
styles.add(ParagraphStyle(name="SectionHeader", fontName="Helvetica-Bold", fontSize=13, textColor=DARK,
                          spaceBefore=10, spaceAfter=6))
styles.add(ParagraphStyle(name="Body", fontName="Helvetica", fontSize=10, textColor=DARK, leading=14))


# ==================== FORMATTING ====================

def format_currency(amount: Optional[float]) -> str:
    """Amount with thousands separators, e.g. ``Rs. 1,234`` or ``Rs. 1,234.5``"""
    value = float(amount or 0)
    if value.is_integer():
        text = f"{value:,.0f}"
    else:
        text = f"{value:,.2f}".rstrip("0")
    return f"{settings.CURRENCY_PREFIX} {text}"


def month_label(month: int, year: Optional[int] = None) -> str:
    name = calendar.month_name[month] if 1 <= month <= 12 else str(month)
    return f"{name} {year}" if year else name


def period_label(start: Optional[date], end: Optional[date]) -> Optional[str]:
    if start and end:
        return f"{format_date(start)} - {format_date(end)}"
    if start:
        return f"From {format_date(start)}"
    if end:
        return f"Until {format_date(end)}"
    return None


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _cell(value: Any):
    if isinstance(value, Paragraph):
        return value
    return _text(value)


# ==================== BUILDING BLOCKS ====================

def _header(title: str, subtitle: Optional[str] = None) -> list:
    story = [Paragraph(escape(title), styles["ReportTitle"])]
    if subtitle:
        story.append(Paragraph(escape(subtitle), styles["ReportSubtitle"]))
    generated = datetime.now().strftime(f"{DISPLAY_DATE_FORMAT} %H:%M")
    story.append(Paragraph(f"Generated: {generated}", styles["Generated"]))
    return story


def _data_table(
    headers: Sequence[str],
    rows: Sequence[Sequence[Any]],
    header_color: colors.Color = ORANGE,
    col_widths: Optional[Sequence[float]] = None,
    total_row: Optional[Sequence[Any]] = None,
) -> Table:
    data = [list(headers)] + [[_cell(cell) for cell in row] for row in rows]
    if total_row:
        data.append([_text(cell) for cell in total_row])

    table = Table(data, colWidths=col_widths, repeatRows=1)
    commands = [
        ("BACKGROUND", (0, 0), (-1, 0), header_color),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 9),
        ("TEXTCOLOR", (0, 1), (-1, -1), DARK),
        ("GRID", (0, 0), (-1, -1), 0.5, BORDER),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("TOPPADDING", (0, 0), (-1, -1), 4),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
    ]
    for row_index in range(2, len(data), 2):
        commands.append(("BACKGROUND", (0, row_index), (-1, row_index), LIGHT))
    if total_row:
        commands.append(("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"))
        commands.append(("BACKGROUND", (0, -1), (-1, -1), BORDER))
    table.setStyle(TableStyle(commands))
    return table


def _key_values(pairs: Iterable[tuple[str, Any]]) -> Table:
    data = [[key, _text(value)] for key, value in pairs if value not in (None, "")]
    table = Table(data, colWidths=[55 * mm, CONTENT_WIDTH - 55 * mm])
    table.setStyle(TableStyle([
        ("FONTNAME", (0, 0), (0, -1), "Helvetica"),
        ("FONTNAME", (1, 0), (1, -1), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 10),
        ("TEXTCOLOR", (0, 0), (0, -1), MUTED),
        ("TEXTCOLOR", (1, 0), (1, -1), DARK),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
    ]))
    return table


def _highlight(label_text: str, value: str, color: colors.Color = BLUE) -> Table:
    table = Table([[label_text, value]], colWidths=[CONTENT_WIDTH / 2, CONTENT_WIDTH / 2])
    table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, -1), LIGHT),
        ("FONTNAME", (0, 0), (0, 0), "Helvetica"),
        ("FONTNAME", (1, 0), (1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (0, 0), 11),
        ("FONTSIZE", (1, 0), (1, 0), 14),
        ("TEXTCOLOR", (0, 0), (0, 0), MUTED),
        ("TEXTCOLOR", (1, 0), (1, 0), color),
        ("ALIGN", (1, 0), (1, 0), "RIGHT"),
        ("TOPPADDING", (0, 0), (-1, -1), 10),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 10),
    ]))
    return table


def _summary_lines(pairs: Iterable[tuple[str, str]]) -> Table:
    data = [[key, value] for key, value in pairs]
    table = Table(data, colWidths=[CONTENT_WIDTH - 50 * mm, 50 * mm])
    table.setStyle(TableStyle([
        ("FONTNAME", (0, 0), (-1, -1), "Helvetica"),
        ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 10),
        ("ALIGN", (0, 0), (-1, -1), "RIGHT"),
        ("LINEABOVE", (0, -1), (-1, -1), 0.8, DARK),
    ]))
    return table


def _footer_painter(text: str):
    def paint(canvas, doc):
        canvas.saveState()
        width, _ = A4
        y = PAGE_MARGIN - 4 * mm
        canvas.setStrokeColor(BORDER)
        canvas.setLineWidth(0.5)
        canvas.line(PAGE_MARGIN, y + 4 * mm, width - PAGE_MARGIN, y + 4 * mm)
        canvas.setFont("Helvetica-Oblique", 8)
        canvas.setFillColor(MUTED)
        canvas.drawCentredString(width / 2, y, text)
        canvas.drawRightString(width - PAGE_MARGIN, y, f"Page {doc.page}")
        canvas.restoreState()
    return paint


def _render(story: list, title: str, footer_text: str = "This is a computer-generated document.") -> bytes:
    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        leftMargin=PAGE_MARGIN,
        rightMargin=PAGE_MARGIN,
        topMargin=PAGE_MARGIN + 6 * mm,
        bottomMargin=PAGE_MARGIN + 6 * mm,
        title=title,
    )
    footer = _footer_painter(footer_text)
    try:
        doc.build(story, onFirstPage=footer, onLaterPages=footer)
    except Exception as e:
        logger.exception(f"Failed to build PDF '{title}'")
        raise PDFGenerationError(f"Failed to generate PDF: {str(e)}") from e
    return buffer.getvalue()


# ==================== GENERIC REPORT ====================

def table_report(
    title: str,
    headers: Sequence[str],
    rows: Sequence[Sequence[Any]],
    subtitle: Optional[str] = None,
    header_color: colors.Color = ORANGE,
    summary: Optional[Sequence[tuple[str, str]]] = None,
    total_row: Optional[Sequence[Any]] = None,
) -> bytes:
    """
    Titled table report: title, optional subtitle, a "Generated:" line, one
    table and an optional block of summary lines below it.
    """
    story = _header(title, subtitle)
    if rows:
        story.append(_data_table(headers, rows, header_color, total_row=total_row))
    else:
        story.append(Paragraph("No records found for the selected period.", styles["Body"]))
    if summary:
        story.append(Spacer(1, 8 * mm))
        story.append(_summary_lines(summary))
    return _render(story, title)


# ==================== REPORTS ====================

def account_ledger_pdf(
    account_name: str,
    entries: Sequence[AccountTransactionRead],
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> bytes:
    rows = [
        [
            format_date(entry.transaction_date),
            label(entry.reference_type),
            entry.reference_no or "-",
            entry.description or "-",
            format_currency(entry.debit) if entry.debit else "-",
            format_currency(entry.credit) if entry.credit else "-",
            format_currency(entry.balance),
        ]
        for entry in entries
    ]
    total_debit = sum(entry.debit for entry in entries)
    total_credit = sum(entry.credit for entry in entries)
    closing = entries[-1].balance if entries else 0

    subtitle = account_name
    period = period_label(start_date, end_date)
    if period:
        subtitle = f"{account_name} | {period}"

    return table_report(
        "Account Ledger",
        ["Date", "Type", "Reference", "Description", "Debit", "Credit", "Balance"],
        rows,
        subtitle=subtitle,
        summary=[
            ("Total Debit", format_currency(total_debit)),
            ("Total Credit", format_currency(total_credit)),
            ("Closing Balance", format_currency(closing)),
        ],
    )


def expense_report_pdf(
    items: Sequence[ExpenseReportItem],
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    detailed: bool = False,
) -> bytes:
    title = "Detailed Expense Report" if detailed else "Expense Report"
    grand_total = sum(item.total_amount for item in items)
    story = _header(title, period_label(start_date, end_date))

    if not detailed:
        rows = [
            [item.category_name, item.transaction_count, format_currency(item.total_amount)]
            for item in items
        ]
        story.append(_data_table(
            ["Category", "Transactions", "Amount"],
            rows,
            header_color=RED,
            total_row=["Total", sum(item.transaction_count for item in items), format_currency(grand_total)],
        ))
    else:
        for item in items:
            story.append(Paragraph(
                f"{escape(item.category_name)} ({item.transaction_count}) - {format_currency(item.total_amount)}",
                styles["SectionHeader"],
            ))
            rows = [
                [format_date(line.date), line.description or "-", line.account_name or "-", format_currency(line.amount)]
                for line in item.expenses
            ]
            if rows:
                story.append(_data_table(["Date", "Description", "Account", "Amount"], rows, header_color=RED))

    story.append(Spacer(1, 8 * mm))
    story.append(_highlight("Total Expenses", format_currency(grand_total), RED))
    return _render(story, title)


def salary_slips_report_pdf(
    slips: Sequence[SalarySlipRead],
    summary: Optional[SalarySlipSummary] = None,
    year: Optional[int] = None,
) -> bytes:
    rows = [
        [
            slip.trainer.full_name if slip.trainer else f"#{slip.trainer_id}",
            month_label(slip.month, slip.year),
            format_currency(slip.base_salary),
            slip.active_member_count,
            format_currency(slip.incentive_total),
            format_currency(slip.gross_salary),
            "Paid" if slip.payment_status == PaymentStatus.PAID else "Unpaid",
        ]
        for slip in slips
    ]
    if summary is None:
        summary = SalarySlipSummary(
            total_salary_payout=sum(slip.gross_salary for slip in slips),
            total_incentives=sum(slip.incentive_total for slip in slips),
            total_base_salary=sum(slip.base_salary for slip in slips),
            slip_count=len(slips),
        )
    return table_report(
        "Salary Slips Report",
        ["Trainer", "Period", "Base Salary", "Members", "Incentive", "Gross", "Status"],
        rows,
        subtitle=f"Year {year}" if year else None,
        summary=[
            ("Slips", str(summary.slip_count)),
            ("Total Base Salary", format_currency(summary.total_base_salary)),
            ("Total Incentives", format_currency(summary.total_incentives)),
            ("Total Payout", format_currency(summary.total_salary_payout)),
        ],
    )


def attendance_report_pdf(
    logs: Sequence[AttendanceLogRead],
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    time_zone: Optional[str] = None,
) -> bytes:
    tz = resolve_timezone(time_zone)

    def local_time(value) -> str:
        moment = as_utc(value)
        return moment.astimezone(tz).strftime("%H:%M") if moment else "-"

    rows = [
        [
            format_date(as_utc(log.check_in_at).astimezone(tz)),
            log.member.full_name if log.member else "-",
            (log.member.member_code if log.member else None) or "-",
            local_time(log.check_in_at),
            local_time(log.check_out_at),
            duration_label(log.check_in_at, log.check_out_at),
        ]
        for log in logs
    ]
    unique_members = len({log.member_id for log in logs if log.member_id is not None})
    return table_report(
        "Attendance Report",
        ["Date", "Member", "Code", "Check In", "Check Out", "Duration"],
        rows,
        subtitle=period_label(start_date, end_date),
        header_color=GREEN,
        summary=[
            ("Unique Members", str(unique_members)),
            ("Total Check-ins", str(len(logs))),
        ],
    )


def payment_collection_pdf(
    invoices: Sequence[InvoiceRead],
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> bytes:
    rows = [
        [
            invoice.invoice_number,
            invoice.member.full_name if invoice.member else "-",
            format_date(invoice.due_date),
            format_currency(invoice.net_amount),
            label(invoice.status),
        ]
        for invoice in invoices
    ]
    collected = sum(i.net_amount for i in invoices if i.status in COLLECTED_STATUSES)
    outstanding = sum(i.net_amount for i in invoices if i.status in OUTSTANDING_STATUSES)
    return table_report(
        "Payment Collection Report",
        ["Invoice #", "Member", "Due Date", "Amount", "Status"],
        rows,
        subtitle=period_label(start_date, end_date),
        summary=[
            ("Outstanding", format_currency(outstanding)),
            ("Collected", format_currency(collected)),
        ],
    )


def income_expense_pdf(
    summary: IncomeExpenseSummary,
    months: Sequence[dict],
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> bytes:
    """``months`` are merged rows with ``month``, ``income``, ``expense`` and ``profit`` keys"""
    rows = [
        [row["month"], format_currency(row["income"]), format_currency(row["expense"]), format_currency(row["profit"])]
        for row in months
    ]
    net = summary.net_profit_loss
    return table_report(
        "Income vs Expense Report",
        ["Month", "Income", "Expense", "Profit / Loss"],
        rows,
        subtitle=period_label(start_date, end_date),
        header_color=BLUE,
        summary=[
            ("Total Income", format_currency(summary.total_income)),
            ("Total Expense", format_currency(summary.total_expense)),
            ("Net Profit" if net >= 0 else "Net Loss", format_currency(abs(net))),
        ],
    )


def account_summary_pdf(
    summaries: Sequence[AccountSummary],
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> bytes:
    rows = [
        [
            summary.account_name,
            summary.account_type.title(),
            format_currency(summary.opening_balance),
            format_currency(summary.total_credit),
            format_currency(summary.total_debit),
            format_currency(summary.closing_balance),
        ]
        for summary in summaries
    ]
    return table_report(
        "Account Summary Report",
        ["Account", "Type", "Opening", "Credit", "Debit", "Closing"],
        rows,
        subtitle=period_label(start_date, end_date),
        total_row=[
            "Total",
            "",
            format_currency(sum(s.opening_balance for s in summaries)),
            format_currency(sum(s.total_credit for s in summaries)),
            format_currency(sum(s.total_debit for s in summaries)),
            format_currency(sum(s.closing_balance for s in summaries)),
        ] if summaries else None,
    )


# ==================== DOCUMENTS ====================

def salary_slip_pdf(slip: SalarySlipRead, gym_name: Optional[str] = None) -> bytes:
    trainer_name = slip.trainer.full_name if slip.trainer else f"Trainer #{slip.trainer_id}"
    story = _header("Salary Slip", month_label(slip.month, slip.year))
    if gym_name:
        story.insert(1, Paragraph(escape(gym_name), styles["ReportSubtitle"]))

    story.append(Paragraph("Trainer Information", styles["SectionHeader"]))
    story.append(_key_values([
        ("Name:", trainer_name),
        ("Generated On:", format_date(slip.generated_at) if slip.generated_at else None),
        ("Paid On:", format_date(slip.paid_at) if slip.paid_at else None),
        ("Payment Status:", "Paid" if slip.payment_status == PaymentStatus.PAID else "Unpaid"),
    ]))

    story.append(Paragraph("Salary Breakdown", styles["SectionHeader"]))
    story.append(_data_table(
        ["Description", "Details", "Amount"],
        [
            ["Base Salary", "Fixed monthly", format_currency(slip.base_salary)],
            [
                "Member Incentive",
                f"{slip.active_member_count} members x {format_currency(slip.per_member_incentive)}",
                format_currency(slip.incentive_total),
            ],
        ],
        col_widths=[50 * mm, CONTENT_WIDTH - 100 * mm, 50 * mm],
    ))
    story.append(Spacer(1, 6 * mm))
    story.append(_highlight("Gross Salary", format_currency(slip.gross_salary)))
    return _render(story, "Salary Slip")


def invoice_pdf(invoice: InvoiceRead, gym_name: Optional[str] = None, member_phone: Optional[str] = None) -> bytes:
    story = _header("INVOICE", invoice.invoice_number)
    if gym_name:
        story.insert(1, Paragraph(escape(gym_name), styles["ReportSubtitle"]))

    story.append(Paragraph("Invoice Details", styles["SectionHeader"]))
    story.append(_key_values([
        ("Invoice Date:", format_date(invoice.created_at) if invoice.created_at else None),
        ("Due Date:", format_date(invoice.due_date) if invoice.due_date else None),
        ("Status:", label(invoice.status).upper()),
        ("Paid On:", format_date(invoice.paid_at) if invoice.paid_at else None),
    ]))

    if invoice.member:
        story.append(Paragraph("Bill To", styles["SectionHeader"]))
        story.append(_key_values([
            ("Name:", invoice.member.full_name),
            ("Member ID:", invoice.member.member_code),
            ("Phone:", member_phone),
        ]))

    description = "Membership"
    if invoice.subscription and invoice.subscription.package and invoice.subscription.package.name:
        description = f"Membership - {invoice.subscription.package.name}"
        if invoice.subscription.start_date and invoice.subscription.end_date:
            description += (
                f" ({format_date(invoice.subscription.start_date)} - {format_date(invoice.subscription.end_date)})"
            )

    story.append(Paragraph("Items", styles["SectionHeader"]))
    story.append(_data_table(
        ["Description", "Qty", "Unit Price", "Total"],
        [[Paragraph(escape(description), styles["Body"]), 1, format_currency(invoice.amount), format_currency(invoice.amount)]],
        col_widths=[CONTENT_WIDTH - 90 * mm, 20 * mm, 35 * mm, 35 * mm],
    ))
    story.append(Spacer(1, 4 * mm))

    totals = [("Subtotal:", format_currency(invoice.amount))]
    if invoice.discount:
        totals.append(("Discount:", f"-{format_currency(invoice.discount)}"))
    totals.append(("Total:", format_currency(invoice.net_amount)))
    story.append(_summary_lines(totals))

    if invoice.payment_method:
        story.append(Spacer(1, 4 * mm))
        story.append(_key_values([("Payment Method:", label(invoice.payment_method))]))
    if invoice.notes:
        story.append(Paragraph("Notes", styles["SectionHeader"]))
        story.append(Paragraph(escape(invoice.notes), styles["Body"]))

    return _render(story, f"Invoice {invoice.invoice_number}", "Thank you for your business!")


def payment_receipt_pdf(
    transaction: TransactionRead,
    invoice: Optional[InvoiceRead] = None,
    account_name: Optional[str] = None,
    gym_name: Optional[str] = None,
) -> bytes:
    receipt_number = f"RCP-{transaction.id}"
    story = _header("PAYMENT RECEIPT", receipt_number)
    if gym_name:
        story.insert(1, Paragraph(escape(gym_name), styles["ReportSubtitle"]))

    story.append(_key_values([
        ("Receipt Date:", format_date(transaction.paid_at or transaction.created_at)),
        ("Invoice Number:", invoice.invoice_number if invoice else None),
    ]))

    if invoice and invoice.member:
        story.append(Paragraph("Received From", styles["SectionHeader"]))
        story.append(_key_values([
            ("Name:", invoice.member.full_name),
            ("Member ID:", invoice.member.member_code),
        ]))

    story.append(Paragraph("Payment Details", styles["SectionHeader"]))
    story.append(_key_values([
        ("Payment Method:", label(transaction.payment_method) if transaction.payment_method else None),
        ("Account:", account_name),
        ("Reference Number:", transaction.reference_number),
    ]))
    story.append(Spacer(1, 6 * mm))
    story.append(_highlight("Amount Paid", format_currency(transaction.amount), GREEN))

    if transaction.notes:
        story.append(Paragraph("Notes", styles["SectionHeader"]))
        story.append(Paragraph(escape(transaction.notes), styles["Body"]))

    return _render(story, f"Receipt {receipt_number}", "Thank you for your payment!")


def membership_receipt_pdf(
    subscription: SubscriptionRead,
    member_phone: Optional[str] = None,
    gym_name: Optional[str] = None,
) -> bytes:
    receipt_number = f"MEM-{subscription.id}"
    story = _header("MEMBERSHIP RECEIPT", receipt_number)
    if gym_name:
        story.insert(1, Paragraph(escape(gym_name), styles["ReportSubtitle"]))

    story.append(_key_values([("Receipt Date:", format_date(subscription.created_at or date.today()))]))

    if subscription.member:
        story.append(Paragraph("Member Information", styles["SectionHeader"]))
        story.append(_key_values([
            ("Name:", subscription.member.full_name),
            ("Member ID:", subscription.member.member_code),
            ("Phone:", member_phone),
        ]))

    package_name = subscription.package.name if subscription.package and subscription.package.name else "Membership"
    period = f"{format_date(subscription.start_date)} - {format_date(subscription.end_date)}"
    rows = [[package_name, period, format_currency(subscription.price_paid)]]
    if subscription.trainer_addon_price:
        trainer = subscription.trainer.full_name if subscription.trainer else "Personal trainer"
        rows.append(["Trainer Add-on", trainer, format_currency(subscription.trainer_addon_price)])

    story.append(Paragraph("Package Details", styles["SectionHeader"]))
    story.append(_data_table(
        ["Description", "Details", "Amount"],
        rows,
        col_widths=[55 * mm, CONTENT_WIDTH - 95 * mm, 40 * mm],
    ))
    story.append(Spacer(1, 4 * mm))
    story.append(_summary_lines([
        ("Subtotal:", format_currency(subscription.total_price)),
        ("Total Paid:", format_currency(subscription.total_price)),
    ]))

    if subscription.notes:
        story.append(Paragraph("Notes", styles["SectionHeader"]))
        story.append(Paragraph(escape(subscription.notes), styles["Body"]))

    return _render(story, f"Membership Receipt {receipt_number}", "Welcome to our gym! Stay fit and healthy.")
