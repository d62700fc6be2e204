from datetime import date
from io import BytesIO

from openpyxl import load_workbook

from app.schemas.account import AccountSummary, AccountTransactionRead, IncomeExpenseSummary
from app.schemas.attendance import AttendanceLogRead
from app.schemas.expense import ExpenseReportItem
from app.schemas.invoice import InvoiceRead, TransactionRead
from app.schemas.subscription import SubscriptionRead
from app.schemas.trainer import SalarySlipRead
from app.utils.export import to_csv, to_xlsx
from app.utils.pdf import (
    account_ledger_pdf,
    account_summary_pdf,
    attendance_report_pdf,
    expense_report_pdf,
    format_currency,
    income_expense_pdf,
    invoice_pdf,
    membership_receipt_pdf,
    payment_collection_pdf,
    payment_receipt_pdf,
    salary_slip_pdf,
)

from factories import invoice_json, log_json

START, END = date(2024, 3, 1), date(2024, 3, 31)


def test_csv_quotes_only_when_needed():
    content = to_csv(["Name", "Note"], [["Ali", "plain"], ["Khan, Ali", 'says "hi"'], ["Empty", None]])
    assert content.decode("utf-8").splitlines() == [
        "Name,Note",
        "Ali,plain",
        '"Khan, Ali","says ""hi"""',
        "Empty,",
    ]


def test_xlsx_has_header_and_rows():
    content = to_xlsx(["Code", "Name"], [["MEM001", "Ali Khan"]], sheet_title="Members")
    sheet = load_workbook(BytesIO(content)).active
    assert sheet.title == "Members"
    assert [c.value for c in sheet[1]] == ["Code", "Name"]
    assert [c.value for c in sheet[2]] == ["MEM001", "Ali Khan"]


def test_currency_format():
    assert format_currency(1234) == "Rs. 1,234"
    assert format_currency(1234.5) == "Rs. 1,234.5"
    assert format_currency(None) == "Rs. 0"


def test_invoice_documents_are_pdfs():
    invoice = InvoiceRead.model_validate(invoice_json(discount=500))
    transaction = TransactionRead(id=9, invoice_id=1, amount=2500, payment_method=1, paid_at="2024-03-02T10:00:00Z")

    assert invoice_pdf(invoice, gym_name="Iron Den", member_phone="0300").startswith(b"%PDF")
    assert payment_receipt_pdf(transaction, invoice, account_name="Cash", gym_name="Iron Den").startswith(b"%PDF")
    assert payment_receipt_pdf(transaction).startswith(b"%PDF")


def test_membership_receipt_and_salary_slip_are_pdfs():
    subscription = SubscriptionRead.model_validate({
        "id": 4, "startDate": "2024-03-01", "endDate": "2024-03-31", "pricePaid": 5000, "trainerAddonPrice": 1500,
        "member": {"firstName": "Ali", "lastName": "Khan", "memberCode": "MEM001"},
        "package": {"name": "Gold", "durationDays": 30},
        "trainer": {"firstName": "Omar", "lastName": "Ali"},
    })
    slip = SalarySlipRead(
        id=3, trainer_id=2, month=3, year=2024, base_salary=30000, active_member_count=4,
        per_member_incentive=1000, incentive_total=4000, gross_salary=34000,
    )
    assert membership_receipt_pdf(subscription, gym_name="Iron Den").startswith(b"%PDF")
    assert salary_slip_pdf(slip, gym_name="Iron Den").startswith(b"%PDF")


def test_report_pdfs_render_with_and_without_rows():
    entries = [
        AccountTransactionRead(transaction_date="2024-03-02T10:00:00Z", reference_type="fee", credit=5000, balance=5000),
        AccountTransactionRead(transaction_date="2024-03-03T10:00:00Z", reference_type="expense", debit=800, balance=4200),
    ]
    logs = [AttendanceLogRead.model_validate(log_json())]
    invoices = [InvoiceRead.model_validate(invoice_json())]
    items = [ExpenseReportItem.model_validate({
        "categoryName": "Utilities", "totalAmount": 800, "transactionCount": 1,
        "expenses": [{"date": "2024-03-03", "description": "Electricity", "amount": 800, "accountName": "Cash"}],
    })]
    summary = IncomeExpenseSummary(total_income=5000, total_expense=800, net_profit_loss=4200)
    summaries = [AccountSummary(account_id=1, account_name="Cash", opening_balance=0, total_credit=5000, total_debit=800, closing_balance=4200)]

    documents = [
        account_ledger_pdf("Cash", entries, START, END),
        account_ledger_pdf("Cash", []),
        attendance_report_pdf(logs, START, END, "Asia/Karachi"),
        payment_collection_pdf(invoices, START, END),
        payment_collection_pdf([], START, END),
        expense_report_pdf(items, START, END),
        expense_report_pdf(items, START, END, detailed=True),
        income_expense_pdf(summary, [{"month": "Mar 2024", "income": 5000, "expense": 800, "profit": 4200}], START, END),
        account_summary_pdf(summaries, START, END),
    ]
    assert all(doc.startswith(b"%PDF") for doc in documents)
