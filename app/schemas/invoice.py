from datetime import datetime
from typing import Optional

from app.schemas.common import ApiDate, ApiModel, EntityId
from app.schemas.enums import InvoiceStatus, PaymentMethod
from app.schemas.refs import MemberRef, PackageRef


class InvoiceSubscriptionRef(ApiModel):
    id: Optional[EntityId] = None
    start_date: Optional[ApiDate] = None
    end_date: Optional[ApiDate] = None
    package: Optional[PackageRef] = None


class InvoiceRead(ApiModel):
    id: EntityId
    gym_id: Optional[EntityId] = None
    member_id: Optional[EntityId] = None
    subscription_id: Optional[EntityId] = None
    invoice_number: str = ""
    amount: float = 0
    discount: float = 0
    net_amount: float = 0
    status: InvoiceStatus = InvoiceStatus.PENDING
    due_date: Optional[ApiDate] = None
    paid_at: Optional[datetime] = None
    payment_method: Optional[PaymentMethod] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    member: Optional[MemberRef] = None
    subscription: Optional[InvoiceSubscriptionRef] = None

    @property
    def is_payable(self) -> bool:
        return self.status in PAYABLE_STATUSES


PAYABLE_STATUSES = (InvoiceStatus.UNPAID, InvoiceStatus.OVERDUE, InvoiceStatus.PARTIALLY_PAID)
COLLECTED_STATUSES = (InvoiceStatus.PAID, InvoiceStatus.PARTIALLY_PAID)
OUTSTANDING_STATUSES = (InvoiceStatus.PENDING, InvoiceStatus.OVERDUE)


class TransactionRead(ApiModel):
    id: EntityId
    gym_id: Optional[EntityId] = None
    invoice_id: Optional[EntityId] = None
    account_id: Optional[EntityId] = None
    amount: float = 0
    payment_method: Optional[PaymentMethod] = None
    reference_number: Optional[str] = None
    notes: Optional[str] = None
    paid_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class TransactionCreate(ApiModel):
    gym_id: EntityId
    invoice_id: EntityId
    amount: float
    payment_method: PaymentMethod = PaymentMethod.CASH
    account_id: EntityId
    reference_number: Optional[str] = None
    notes: Optional[str] = None
    paid_at: ApiDate


class TransactionUpdate(ApiModel):
    amount: Optional[float] = None
    payment_method: Optional[PaymentMethod] = None
    reference_number: Optional[str] = None
    notes: Optional[str] = None
    paid_at: Optional[ApiDate] = None
