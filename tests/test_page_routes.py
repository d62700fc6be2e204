import pytest

from factories import invoice_json, log_json, member_json


@pytest.fixture
def admin(client, sign_in):
    sign_in("Admin")
    return client


# ==================== ATTENDANCE ====================

def test_check_in_picks_first_active_match(admin, backend):
    backend.on("GET", "/members/search", [
        member_json(1, first="Ali", status=2),
        member_json(2, first="Alina", last="Shah", code="MEM002"),
    ])

    response = admin.post("/attendance/check-in", data={"member_search": "ali"})

    assert "Alina Shah checked in successfully" in response.text
    assert dict(backend.calls("GET", "/members/search")[-1].url.params) == {"gymId": "7", "term": "ali"}
    assert backend.last_json("POST", "/attendancelogs/check-in") == {
        "gymId": 7,
        "memberId": 2,
        "checkedInBy": 42,
        "deviceInfo": "Web Admin",
    }


def test_check_in_unknown_member(admin, backend):
    backend.on("GET", "/members/search", [member_json(1, status=3)])
    response = admin.post("/attendance/check-in", data={"member_search": "ali"})
    assert "Member not found" in response.text
    assert not backend.calls("POST", "/attendancelogs/check-in")


def test_attendance_page_filters_checked_in(admin, backend):
    backend.on("GET", "/attendancelogs/gym/7/checked-in", [
        log_json(1, member_id=1, first="Ali", last="Khan"),
        log_json(2, member_id=2, first="Bilal", last="Raza"),
    ])
    response = admin.get("/attendance?search=bilal")
    assert "Bilal Raza" in response.text
    assert "Ali Khan" not in response.text


def test_check_out(admin, backend):
    response = admin.post("/attendance/5/check-out")
    assert "Member checked out successfully" in response.text
    assert "checkOutAt" in backend.last_json("PATCH", "/attendancelogs/5/check-out")


# ==================== SUBSCRIPTIONS ====================

GOLD = {"id": 3, "name": "Gold", "price": 5000, "durationDays": 30, "allowsTrainerAddon": True}
TRAINER = {"id": 9, "firstName": "Omar", "lastName": "Ali", "monthlyAddonPrice": 1500}


def test_create_subscription_splits_trainer_addon(admin, backend):
    backend.on("GET", "/packages/3", GOLD)
    backend.on("GET", "/trainers/9", TRAINER)

    response = admin.post("/subscriptions", data={
        "member_id": "12", "package_id": "3", "trainer_id": "9", "start_date": "2024-01-01", "price_paid": "6500",
    })

    assert "Subscription created successfully" in response.text
    payload = backend.last_json("POST", "/memberSubscriptions")
    assert payload["pricePaid"] == 5000
    assert payload["trainerAddonPrice"] == 1500
    assert payload["endDate"] == "2024-01-31"
    assert payload["gymId"] == 7


def test_create_subscription_unknown_package(admin, backend):
    response = admin.post("/subscriptions", data={
        "member_id": "12", "package_id": "3", "start_date": "2024-01-01", "price_paid": "5000",
    })
    assert "Package not found" in response.text
    assert not backend.calls("POST", "/memberSubscriptions")


def test_renew_expires_old_subscription(admin, backend):
    backend.on("GET", "/memberSubscriptions/4", {"id": 4, "memberId": 12, "endDate": "2024-01-31", "status": 1})
    backend.on("GET", "/packages/3", GOLD)

    response = admin.post("/subscriptions/4/renew", data={
        "package_id": "3", "start_date": "2024-02-01", "price_paid": "5000",
    })

    assert "Subscription renewed and invoice created successfully" in response.text
    renewal = backend.last_json("POST", "/memberSubscriptions/renew/4")
    assert renewal["memberId"] == 12
    assert renewal["startDate"] == "2024-02-01"
    assert backend.last_json("PUT", "/memberSubscriptions/4") == {"status": 2}


def test_membership_receipt(admin, backend):
    backend.on("GET", "/memberSubscriptions/4", {
        "id": 4, "memberId": 12, "startDate": "2024-01-01", "endDate": "2024-01-31", "pricePaid": 5000,
        "member": {"id": 12, "firstName": "Ali", "lastName": "Khan", "memberCode": "MEM012"},
        "package": {"id": 3, "name": "Gold"},
    })
    response = admin.get("/subscriptions/4/receipt")
    assert response.headers["content-disposition"] == "attachment; filename=membership-receipt-MEM-4.pdf"
    assert response.content.startswith(b"%PDF")


# ==================== TRAINERS ====================

def test_generate_salary_slip(admin, backend):
    response = admin.post("/trainers/salary-slips/generate", data={"trainer_id": "9", "month": "3", "year": "2024"})
    assert "Salary slip generated successfully" in response.text
    assert backend.last_json("POST", "/salary-slips/gym/7/generate") == {
        "trainerId": 9, "salaryMonth": 3, "salaryYear": 2024,
    }


def test_duplicate_salary_slip(admin, backend):
    backend.on("POST", "/salary-slips/gym/7/generate", {"message": "duplicate"}, status_code=409)
    response = admin.post("/trainers/salary-slips/generate", data={"trainer_id": "9", "month": "3", "year": "2024"})
    assert "Salary slip already exists for this trainer and month" in response.text


# ==================== ACCOUNTS / EXPENSES ====================

def test_bank_account_needs_bank_name(admin, backend):
    response = admin.post("/accounts", data={"account_name": "Meezan", "account_type": "bank"})
    assert "Bank name is required for bank accounts" in response.text
    assert not backend.calls("POST", "/accounts")


def test_create_cash_account(admin, backend):
    response = admin.post("/accounts", data={"account_name": "Till", "account_type": "cash", "opening_balance": "500"})
    assert "Account created successfully" in response.text
    assert backend.last_json("POST", "/accounts") == {
        "accountName": "Till",
        "accountType": "cash",
        "bankName": None,
        "openingBalance": 500,
        "gymId": 7,
    }


def test_expense_amount_must_be_positive(admin, backend):
    response = admin.post("/expenses", data={
        "expense_date": "2024-03-01", "category_id": "2", "account_id": "11", "amount": "0",
    })
    assert "Amount must be greater than 0" in response.text
    assert not backend.calls("POST", "/expenses")


def test_expense_list_sends_filters(admin, backend):
    admin.get("/expenses?startDate=2024-03-01&categoryId=2")
    params = dict(backend.calls("GET", "/expenses/gym/7")[-1].url.params)
    assert params == {"pageNo": "1", "pageSize": "10", "startDate": "2024-03-01", "categoryId": "2"}


def test_create_category(admin, backend):
    response = admin.post("/expense-categories", data={"name": "Utilities"})
    assert "Category created successfully" in response.text
    assert backend.last_json("POST", "/expense-categories")["gymId"] == 7


# ==================== STAFF / GYM ====================

def test_staff_without_login_details(admin, backend):
    response = admin.post("/staff", data={"first_name": "Hina", "last_name": "Aslam", "phone": "0300"})
    assert "Staff member added successfully" in response.text
    payload = backend.last_json("POST", "/staffs")
    assert payload["firstName"] == "Hina"
    assert payload["email"] is None
    assert payload["gymId"] == 7


def test_staff_pages_are_admin_only(client, sign_in):
    sign_in("Staff")
    assert client.get("/staff").status_code == 403
    assert client.get("/gym-settings").status_code == 403


def test_gym_settings_keep_logo(admin, backend):
    backend.on("GET", "/gyms/7", {"id": 7, "name": "Iron Den", "logo": "logo.png"})

    response = admin.post("/gym-settings", data={"name": "Iron Den Plus", "time_zone": "Asia/Karachi"})

    assert "Gym settings updated successfully" in response.text
    payload = backend.last_json("PUT", "/gyms/7")
    assert payload["name"] == "Iron Den Plus"
    assert payload["timeZone"] == "Asia/Karachi"
    assert payload["logo"] == "logo.png"


def test_gym_settings_reject_unknown_zone(admin, backend):
    backend.on("GET", "/gyms/7", {"id": 7, "name": "Iron Den"})
    response = admin.post("/gym-settings", data={"name": "Iron Den", "time_zone": "Mars/Olympus"})
    assert "Unknown time zone" in response.text
    assert not backend.calls("PUT", "/gyms/7")


def test_logo_must_be_image(admin, backend):
    backend.on("GET", "/gyms/7", {"id": 7, "name": "Iron Den"})
    response = admin.post("/gym-settings/logo", files={"logo": ("logo.txt", b"text", "text/plain")})
    assert "Logo must be an image file" in response.text


# ==================== REPORTS / LEDGER ====================

def test_payments_report_csv(admin, backend):
    backend.on("GET", "/invoices/gym/7", [
        invoice_json(1, number="INV-20240101-0001", createdAt="2024-01-05T10:00:00Z"),
        invoice_json(2, number="INV-20240301-0001", createdAt="2024-03-05T10:00:00Z"),
    ])

    response = admin.get("/reports/payments/export/csv?startDate=2024-01-01&endDate=2024-01-31")

    assert response.headers["content-disposition"] == (
        "attachment; filename=payment-report-2024-01-01-to-2024-01-31.csv"
    )
    assert "INV-20240101-0001" in response.text
    assert "INV-20240301-0001" not in response.text


def test_unknown_export_format(admin):
    assert admin.get("/reports/payments/export/docx").status_code == 404


def test_ledger_defaults_to_first_active_account(admin, backend):
    backend.on("GET", "/accounts/gym/7/active", [
        {"id": 11, "accountName": "Front Desk Cash"},
        {"id": 12, "accountName": "Meezan Bank", "accountType": "bank"},
    ])
    admin.get("/account-ledger")
    assert backend.calls("GET", "/accounts/11/ledger")


# ==================== PORTALS ====================

def test_member_portal_without_profile(client, sign_in):
    sign_in("Member")
    response = client.get("/member-portal")
    assert response.status_code == 200
    assert "No member profile is linked to your account yet" in response.text


def test_trainer_portal_without_profile(client, sign_in):
    sign_in("Trainer")
    response = client.get("/trainer-portal")
    assert response.status_code == 200
    assert "No trainer profile is linked to your account yet" in response.text


# ==================== SMOKE ====================

@pytest.mark.parametrize("path", [
    "/",
    "/members",
    "/members/new",
    "/members/import",
    "/packages",
    "/packages/new",
    "/subscriptions",
    "/subscriptions/new",
    "/trainers",
    "/trainers/new",
    "/trainers/salary-slips",
    "/attendance",
    "/invoices",
    "/invoices/new",
    "/staff",
    "/staff/new",
    "/accounts",
    "/accounts/new",
    "/expense-categories",
    "/expenses",
    "/expenses/new",
    "/account-ledger",
    "/reports",
    "/reports/attendance",
    "/reports/payments",
    "/reports/account-summary",
    "/reports/expenses",
    "/reports/income-expense",
    "/auth/password",
])
def test_pages_render_with_empty_backend(admin, path):
    response = admin.get(path)
    assert response.status_code == 200
    assert "Sara Malik" in response.text


# ==================== DASHBOARD ====================

def test_dashboard_activity_comes_from_gym_attendance(admin, backend):
    backend.on("GET", "/attendancelogs/gym/7", [log_json(3, member_id=3, check_in="2024-01-14T07:00:00Z", first="Bilal", last="Ahmed")])

    response = admin.get("/")

    assert "Bilal Ahmed" in response.text
    assert "No recent activity" not in response.text
    assert backend.calls("GET", "/attendancelogs/gym/7/today")
