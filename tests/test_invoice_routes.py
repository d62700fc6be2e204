from datetime import date, timedelta

import pytest

from factories import invoice_json, member_json


@pytest.fixture
def staff(client, sign_in):
    sign_in("Staff")
    return client


def _page(*invoices):
    return {"data": list(invoices), "totalCount": len(invoices), "pageNo": 1, "pageSize": 10, "totalPages": 1}


def test_list_rolls_pending_past_due_to_overdue(staff, backend):
    yesterday = (date.today() - timedelta(days=1)).isoformat()
    backend.on("GET", "/invoices/gym/7/paginated", _page(invoice_json(1, status=1, due=yesterday)))
    backend.on("GET", "/invoices/gym/7", [
        invoice_json(1, status=1, due=yesterday, net=500),
        invoice_json(2, status=6, due="2099-01-01", net=700),
    ])

    response = staff.get("/invoices?status=")

    assert response.status_code == 200
    assert "Rs. 1,200" in response.text


def test_status_filter_is_sent_to_backend(staff, backend):
    staff.get("/invoices?status=4&pageNo=2&pageSize=25")
    request = backend.calls("GET", "/invoices/gym/7/paginated")[-1]
    assert dict(request.url.params) == {"pageNo": "2", "pageSize": "25", "status": "4"}


def test_create_invoice_numbers_and_payload(staff, backend):
    prefix = f"INV-{date.today():%Y%m%d}"
    backend.on("GET", "/invoices/gym/7", [invoice_json(1, number=f"{prefix}-0003")])

    response = staff.post("/invoices", data={
        "member_id": "1", "subscription_id": "", "amount": "1000", "discount": "200", "due_date": "2024-02-01",
    })

    assert f"Invoice {prefix}-0004 created successfully" in response.text
    assert backend.last_json("POST", "/invoices") == {
        "invoiceNumber": f"{prefix}-0004",
        "amount": 1000,
        "discount": 200,
        "netAmount": 800,
        "dueDate": "2024-02-01",
        "status": 6,
        "notes": None,
        "memberId": 1,
        "subscriptionId": None,
        "gymId": 7,
    }


def test_pay_page_lists_active_accounts(staff, backend):
    backend.on("GET", "/invoices/3", invoice_json(3, status=6))
    backend.on("GET", "/accounts/gym/7/active", [{"id": 11, "accountName": "Front Desk Cash", "accountType": "cash"}])
    response = staff.get("/invoices/3/pay")
    assert response.status_code == 200
    assert "Front Desk Cash" in response.text


def test_paid_invoice_cannot_be_paid_again(staff, backend):
    backend.on("GET", "/invoices/3", invoice_json(3, status=2))
    response = staff.get("/invoices/3/pay")
    assert response.url.path == "/invoices"
    assert "This invoice cannot be paid" in response.text


def test_record_payment_creates_transaction(staff, backend):
    response = staff.post("/invoices/3/pay", data={
        "amount": "2500", "payment_method": "2", "account_id": "11", "payment_date": "2024-03-02",
        "reference_number": "CHQ-77",
    })

    assert "Payment recorded successfully" in response.text
    assert backend.last_json("POST", "/transactions") == {
        "gymId": 7,
        "invoiceId": 3,
        "amount": 2500,
        "paymentMethod": 2,
        "accountId": 11,
        "referenceNumber": "CHQ-77",
        "notes": None,
        "paidAt": "2024-03-02",
    }
    assert not backend.calls("PATCH", "/invoices/mark-paid/3")


def test_payment_requires_account(staff, backend):
    backend.on("GET", "/invoices/3", invoice_json(3, status=6))
    response = staff.post("/invoices/3/pay", data={"amount": "2500", "payment_date": "2024-03-02"})
    assert "Account is required" in response.text
    assert not backend.calls("POST", "/transactions")


def test_mark_paid_sends_bare_method(staff, backend):
    response = staff.post("/invoices/3/mark-paid", data={"payment_method": "3"})
    assert "Invoice marked as paid" in response.text
    assert backend.last_json("PATCH", "/invoices/mark-paid/3") == 3


def test_mark_paid_defaults_to_cash(staff, backend):
    staff.post("/invoices/3/mark-paid")
    assert backend.last_json("PATCH", "/invoices/mark-paid/3") == 1


def test_cancel_and_update_overdue(staff, backend):
    assert "Invoice cancelled successfully" in staff.post("/invoices/3/cancel").text
    assert backend.calls("PATCH", "/invoices/cancel/3")

    assert "Overdue invoices updated" in staff.post("/invoices/update-overdue").text
    assert backend.calls("PATCH", "/invoices/update-overdue/7")


def test_payments_page_totals(staff, backend):
    backend.on("GET", "/invoices/3", invoice_json(3, status=3))
    backend.on("GET", "/transactions/invoice/3", [
        {"id": 1, "invoiceId": 3, "amount": 1000, "accountId": 11, "paymentMethod": 1},
        {"id": 2, "invoiceId": 3, "amount": 1500, "accountId": 11, "paymentMethod": 3},
    ])
    backend.on("GET", "/accounts/gym/7", [{"id": 11, "accountName": "Front Desk Cash"}])

    response = staff.get("/invoices/3/payments")

    assert "Rs. 2,500" in response.text
    assert "Front Desk Cash" in response.text


def test_delete_payment(staff, backend):
    backend.on("GET", "/invoices/3", invoice_json(3, status=3))
    response = staff.post("/invoices/3/payments/2/delete")
    assert response.url.path == "/invoices/3/payments"
    assert backend.calls("DELETE", "/transactions/2")


def test_receipt_and_invoice_pdfs(staff, backend):
    backend.on("GET", "/transactions/9", {"id": 9, "invoiceId": 3, "amount": 2500, "accountId": 11})
    backend.on("GET", "/invoices/3", invoice_json(3))
    backend.on("GET", "/accounts/11", {"id": 11, "accountName": "Cash"})
    backend.on("GET", "/gyms/7", {"id": 7, "name": "Iron Den"})
    backend.on("GET", "/members/1", member_json(1))

    receipt = staff.get("/invoices/3/payments/9/receipt")
    assert receipt.headers["content-disposition"] == "attachment; filename=receipt-RCP-9.pdf"
    assert receipt.content.startswith(b"%PDF")

    document = staff.get("/invoices/3/pdf")
    assert document.headers["content-type"] == "application/pdf"
    assert document.content.startswith(b"%PDF")


def test_missing_invoice_is_404(staff):
    assert staff.get("/invoices/404/pdf").status_code == 404
