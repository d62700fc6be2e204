"""
Form payloads posted by the admin pages.

HTML forms submit snake_case field names and empty strings for blank
inputs; ``FormModel`` drops the blanks so required fields report as
missing and optional ones fall back to their defaults. ``to_api()`` turns a
validated form into the camelCase body the backend expects.
"""
import re
from datetime import date
from typing import Annotated, ClassVar, Optional

from pydantic import BeforeValidator, EmailStr, Field, ValidationError, field_validator, model_validator

from app.schemas.common import ApiModel, EntityId
from app.schemas.enums import AccountType, Gender, MemberStatus, PaymentMethod, SubscriptionStatus


def _snake(name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


def _digits_to_int(value):
    if isinstance(value, str) and value.isdigit():
        return int(value)
    return value


FormId = Annotated[EntityId, BeforeValidator(_digits_to_int)]


def _humanize(name: str) -> str:
    words = _snake(name).replace("_", " ").strip()
    if words.endswith(" id"):
        words = words[:-3]
    return words[:1].upper() + words[1:]


class FormModel(ApiModel):
    REQUIRED_MESSAGES: ClassVar[dict[str, str]] = {}

    @model_validator(mode="before")
    @classmethod
    def drop_blank_values(cls, data):
        if isinstance(data, dict):
            cleaned = {}
            for key, value in data.items():
                if isinstance(value, str):
                    value = value.strip()
                    if value == "":
                        continue
                cleaned[key] = value
            return cleaned
        return data


def validation_message(exc: ValidationError, form_class: Optional[type] = None) -> str:
    """First validation problem as a single toast-friendly sentence"""
    errors = exc.errors()
    if not errors:
        return "Invalid form data"

    error = errors[0]
    field = str(error["loc"][-1]) if error.get("loc") else ""
    field_key = _snake(field)

    if error["type"] == "missing":
        messages = getattr(form_class, "REQUIRED_MESSAGES", {}) if form_class else {}
        if field_key in messages:
            return messages[field_key]
        return f"{_humanize(field)} is required"

    message = error["msg"]
    if message.startswith("Value error, "):
        return message[len("Value error, "):]
    if field:
        return f"{_humanize(field)}: {message}"
    return message


def parse_form(form_class: type, data) -> "FormModel":
    """Validate raw form data; raises ValueError carrying a readable message"""
    try:
        return form_class.model_validate(dict(data))
    except ValidationError as e:
        raise ValueError(validation_message(e, form_class)) from e


# ==================== AUTH ====================

class LoginForm(FormModel):
    email: EmailStr
    password: str


class SignUpForm(FormModel):
    email: EmailStr
    password: str
    first_name: str
    last_name: str
    timezone: str = "UTC"
    phone: Optional[str] = None
    gym_name: Optional[str] = None
    gym_location: Optional[str] = None
    gym_phone: Optional[str] = None
    gym_email: Optional[EmailStr] = None
    gym_address: Optional[str] = None

    @field_validator("password")
    @classmethod
    def password_length(cls, v: str) -> str:
        if len(v) < 6:
            raise ValueError("Password must be at least 6 characters")
        return v


class UpdatePasswordForm(FormModel):
    old_password: str
    new_password: str

    @field_validator("new_password")
    @classmethod
    def password_length(cls, v: str) -> str:
        if len(v) < 6:
            raise ValueError("Password must be at least 6 characters")
        return v


# ==================== PACKAGES ====================

class PackageForm(FormModel):
    name: str
    description: Optional[str] = None
    price: float
    duration_days: int = Field(ge=1)
    visits_limit: Optional[int] = Field(default=None, ge=0)
    allows_trainer_addon: bool = False
    is_active: bool = True

    @field_validator("price")
    @classmethod
    def positive_price(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("Price must be a positive number")
        return v


# ==================== MEMBERS ====================

class MemberFields(FormModel):
    first_name: str
    last_name: str
    member_code: Optional[str] = None
    cnic: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: Annotated[Gender, BeforeValidator(_digits_to_int)] = Gender.MALE
    address: Optional[str] = None
    emergency_contact: Optional[str] = None
    emergency_phone: Optional[str] = None
    status: Annotated[MemberStatus, BeforeValidator(_digits_to_int)] = MemberStatus.ACTIVE
    notes: Optional[str] = None
    photo_url: Optional[str] = None


class MemberUpdateForm(MemberFields):
    """Edit form; contact details belong to the member's user account"""

    phone_number: Optional[str] = None
    email: Optional[EmailStr] = None


class MemberCreateForm(MemberFields):
    REQUIRED_MESSAGES: ClassVar[dict[str, str]] = {
        "email": "Email is required to create user account",
        "password": "Password is required to create user account",
    }

    email: EmailStr
    password: str
    phone: str

    @field_validator("password")
    @classmethod
    def password_length(cls, v: str) -> str:
        if len(v) < 6:
            raise ValueError("Password must be at least 6 characters")
        return v


# ==================== SUBSCRIPTIONS ====================

class SubscriptionForm(FormModel):
    member_id: FormId
    package_id: FormId
    trainer_id: Optional[FormId] = None
    start_date: date
    price_paid: float = Field(ge=0)
    notes: Optional[str] = None


class SubscriptionEditForm(FormModel):
    status: Annotated[SubscriptionStatus, BeforeValidator(_digits_to_int)]
    end_date: date
    notes: Optional[str] = None


class RenewSubscriptionForm(FormModel):
    package_id: FormId
    trainer_id: Optional[FormId] = None
    start_date: date
    price_paid: float = Field(ge=0)
    notes: Optional[str] = None


# ==================== TRAINERS ====================

def _split_specialties(value):
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return value


class TrainerCreateForm(FormModel):
    first_name: str
    last_name: str
    email: Optional[EmailStr] = None
    password: Optional[str] = None
    phone: Optional[str] = None
    specialties: list[str] = []
    bio: Optional[str] = None
    price_per_session: Optional[float] = Field(default=None, ge=0)
    monthly_addon_price: Optional[float] = Field(default=None, ge=0)
    photo_url: Optional[str] = None
    is_active: bool = True

    @field_validator("specialties", mode="before")
    @classmethod
    def split_specialties(cls, v):
        return _split_specialties(v)


class TrainerUpdateForm(FormModel):
    first_name: str
    last_name: str
    email: EmailStr
    phone: Optional[str] = None
    specialties: list[str] = []
    bio: Optional[str] = None
    price_per_session: float = Field(default=0, ge=0)
    monthly_addon_price: float = Field(default=0, ge=0)
    photo_url: Optional[str] = None
    is_active: bool = True

    @field_validator("specialties", mode="before")
    @classmethod
    def split_specialties(cls, v):
        return _split_specialties(v)


class SalaryGenerateForm(FormModel):
    trainer_id: FormId
    month: int = Field(ge=1, le=12)
    year: int = Field(ge=2000, le=2100)


class SalaryConfigForm(FormModel):
    base_salary: float = Field(ge=0)
    per_member_incentive: float = Field(ge=0)
    effective_from: date
    is_active: bool = True


# ==================== STAFF ====================

class StaffForm(FormModel):
    first_name: str
    last_name: str
    cnic: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    password: Optional[str] = None
    photo_url: Optional[str] = None


# ==================== INVOICES ====================

class PaymentForm(FormModel):
    REQUIRED_MESSAGES: ClassVar[dict[str, str]] = {
        "account_id": "Account is required",
        "payment_date": "Payment date is required",
    }

    amount: float
    payment_method: Annotated[PaymentMethod, BeforeValidator(_digits_to_int)] = PaymentMethod.CASH
    account_id: FormId
    payment_date: date
    reference_number: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("amount")
    @classmethod
    def positive_amount(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("Amount must be greater than 0")
        return v


# ==================== ACCOUNTS ====================

class AccountForm(FormModel):
    account_name: str
    account_type: AccountType = AccountType.CASH
    bank_name: Optional[str] = None
    opening_balance: float = Field(default=0, ge=0)


class AccountUpdateForm(FormModel):
    account_name: str
    bank_name: Optional[str] = None
    is_active: bool = True


# ==================== EXPENSES ====================

class ExpenseCategoryForm(FormModel):
    name: str
    description: Optional[str] = None
    is_active: bool = True

    @field_validator("name")
    @classmethod
    def name_length(cls, v: str) -> str:
        if len(v) > 100:
            raise ValueError("Name is too long")
        return v

    @field_validator("description")
    @classmethod
    def description_length(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and len(v) > 500:
            raise ValueError("Description is too long")
        return v


class ExpenseForm(FormModel):
    expense_date: date
    category_id: FormId
    account_id: FormId
    amount: float
    description: Optional[str] = None
    reference_number: Optional[str] = None

    @field_validator("amount")
    @classmethod
    def minimum_amount(cls, v: float) -> float:
        if v < 1:
            raise ValueError("Amount must be greater than 0")
        return v


# ==================== GYM ====================

class GymForm(FormModel):
    name: str
    location: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    address: Optional[str] = None
    time_zone: Optional[str] = None


# ==================== INVOICES (manual) ====================

class InvoiceForm(FormModel):
    member_id: FormId
    subscription_id: Optional[FormId] = None
    amount: float
    discount: float = Field(default=0, ge=0)
    due_date: date
    notes: Optional[str] = None

    @field_validator("amount")
    @classmethod
    def positive_amount(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("Amount must be greater than 0")
        return v

    @model_validator(mode="after")
    def discount_within_amount(self):
        if self.discount > self.amount:
            raise ValueError("Discount cannot exceed the amount")
        return self

    @property
    def net_amount(self) -> float:
        return self.amount - self.discount


class ResetPasswordForm(FormModel):
    email: EmailStr
