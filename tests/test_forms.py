from datetime import date

import pytest

from app.schemas.enums import AccountType, Gender, PaymentMethod
from app.schemas.forms import (
    AccountForm,
    ExpenseForm,
    InvoiceForm,
    LoginForm,
    MemberCreateForm,
    PackageForm,
    PaymentForm,
    SignUpForm,
    SubscriptionForm,
    TrainerCreateForm,
    parse_form,
)


def test_blank_required_field_reports_missing():
    with pytest.raises(ValueError, match="Password is required"):
        parse_form(LoginForm, {"email": "a@b.com", "password": "  "})


def test_invalid_email_is_rejected():
    with pytest.raises(ValueError, match="Email"):
        parse_form(LoginForm, {"email": "not-an-email", "password": "secret"})


def test_signup_password_length():
    with pytest.raises(ValueError, match="Password must be at least 6 characters"):
        parse_form(SignUpForm, {
            "email": "a@b.com", "password": "123", "first_name": "A", "last_name": "B",
        })


def test_signup_camel_case_payload():
    form = parse_form(SignUpForm, {
        "email": "a@b.com", "password": "secret1", "first_name": "Sara", "last_name": "Malik",
        "gym_name": "Iron Den", "timezone": "Asia/Karachi",
    })
    body = form.to_api()
    assert body["firstName"] == "Sara"
    assert body["gymName"] == "Iron Den"
    assert body["gymEmail"] is None


def test_member_create_messages():
    with pytest.raises(ValueError) as exc:
        parse_form(MemberCreateForm, {"first_name": "Ali", "last_name": "Khan", "password": "secret1"})
    assert str(exc.value) == "Email is required to create user account"

    with pytest.raises(ValueError) as exc:
        parse_form(MemberCreateForm, {"first_name": "Ali", "last_name": "Khan", "email": "ali@example.com"})
    assert str(exc.value) == "Password is required to create user account"


def test_member_create_coerces_select_values():
    form = parse_form(MemberCreateForm, {
        "first_name": "Ali", "last_name": "Khan", "email": "ali@example.com", "password": "secret1", "phone": "0300",
        "gender": "2", "status": "1", "date_of_birth": "1990-05-01",
    })
    assert form.gender == Gender.FEMALE
    assert form.to_api()["dateOfBirth"] == "1990-05-01"


def test_package_rules():
    with pytest.raises(ValueError, match="Price must be a positive number"):
        parse_form(PackageForm, {"name": "Gold", "price": "0", "duration_days": "30"})

    form = parse_form(PackageForm, {
        "name": "Gold", "price": "5000", "duration_days": "30",
        "allows_trainer_addon": "true", "is_active": "false",
    })
    assert form.allows_trainer_addon is True
    assert form.is_active is False
    assert form.to_api()["durationDays"] == 30


def test_subscription_ids_are_numbers():
    form = parse_form(SubscriptionForm, {
        "member_id": "12", "package_id": "3", "trainer_id": "", "start_date": "2024-01-01", "price_paid": "4500",
    })
    assert form.member_id == 12
    assert form.trainer_id is None
    assert form.start_date == date(2024, 1, 1)


def test_trainer_specialties_split_on_commas():
    form = parse_form(TrainerCreateForm, {"first_name": "Omar", "last_name": "Ali", "specialties": "Yoga, Boxing,, "})
    assert form.specialties == ["Yoga", "Boxing"]


def test_payment_form():
    with pytest.raises(ValueError, match="Account is required"):
        parse_form(PaymentForm, {"amount": "100", "payment_date": "2024-01-01"})
    with pytest.raises(ValueError, match="Amount must be greater than 0"):
        parse_form(PaymentForm, {"amount": "0", "account_id": "1", "payment_date": "2024-01-01"})

    form = parse_form(PaymentForm, {
        "amount": "2500", "account_id": "1", "payment_date": "2024-01-01", "payment_method": "3",
    })
    assert form.payment_method == PaymentMethod.ONLINE_TRANSFER


def test_invoice_discount_cannot_exceed_amount():
    with pytest.raises(ValueError, match="Discount cannot exceed the amount"):
        parse_form(InvoiceForm, {"member_id": "1", "amount": "100", "discount": "150", "due_date": "2024-01-01"})

    form = parse_form(InvoiceForm, {"member_id": "1", "amount": "100", "discount": "20", "due_date": "2024-01-01"})
    assert form.net_amount == 80


def test_account_and_expense_forms():
    form = parse_form(AccountForm, {"account_name": "HBL", "account_type": "bank", "bank_name": "HBL"})
    assert form.account_type == AccountType.BANK

    with pytest.raises(ValueError, match="Amount must be greater than 0"):
        parse_form(ExpenseForm, {"expense_date": "2024-01-01", "category_id": "1", "account_id": "1", "amount": "0.5"})
