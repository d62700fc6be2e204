from enum import Enum, IntEnum


class UserRole(IntEnum):
    SYSTEM_ADMIN = 1
    ADMIN = 2
    STAFF = 3
    TRAINER = 4
    MEMBER = 5

    @property
    def claim(self) -> str:
        """Role name as it appears in the JWT ``role`` claim"""
        return {
            UserRole.SYSTEM_ADMIN: "SystemAdmin",
            UserRole.ADMIN: "Admin",
            UserRole.STAFF: "Staff",
            UserRole.TRAINER: "Trainer",
            UserRole.MEMBER: "Member",
        }[self]


class Gender(IntEnum):
    MALE = 1
    FEMALE = 2


class MemberStatus(IntEnum):
    ACTIVE = 1
    INACTIVE = 2
    SUSPENDED = 3


class SubscriptionStatus(IntEnum):
    ACTIVE = 1
    EXPIRED = 2
    CANCELLED = 3


class InvoiceStatus(IntEnum):
    PENDING = 1
    PAID = 2
    PARTIALLY_PAID = 3
    OVERDUE = 4
    CANCELLED = 5
    UNPAID = 6


class PaymentMethod(IntEnum):
    CASH = 1
    CHEQUE = 2
    ONLINE_TRANSFER = 3


class PaymentStatus(IntEnum):
    UNPAID = 0
    PAID = 1


class AccountType(str, Enum):
    BANK = "bank"
    CASH = "cash"


class ReferenceType(str, Enum):
    FEE = "fee"
    EXPENSE = "expense"
    ADJUSTMENT = "adjustment"


def label(value) -> str:
    """Human readable label for an enum member, e.g. PARTIALLY_PAID -> Partially Paid"""
    if value is None:
        return ""
    if isinstance(value, Enum):
        return value.name.replace("_", " ").title()
    return str(value)
