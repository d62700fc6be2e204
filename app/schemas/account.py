from datetime import datetime
from typing import Optional

from app.schemas.common import ApiModel, EntityId, MonthAmount
from app.schemas.enums import AccountType, ReferenceType
from app.schemas.refs import AccountRef


class AccountRead(ApiModel):
    id: EntityId
    gym_id: Optional[EntityId] = None
    account_name: str
    account_type: AccountType = AccountType.CASH
    bank_name: Optional[str] = None
    opening_balance: float = 0
    current_balance: float = 0
    is_default: bool = False
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AccountTransactionRead(ApiModel):
    id: Optional[EntityId] = None
    account_id: Optional[EntityId] = None
    transaction_date: Optional[datetime] = None
    reference_type: Optional[ReferenceType] = None
    reference_no: Optional[str] = None
    description: Optional[str] = None
    debit: float = 0
    credit: float = 0
    balance: float = 0
    account: Optional[AccountRef] = None


class AccountSummary(ApiModel):
    account_id: EntityId
    account_name: str
    account_type: str = ""
    opening_balance: float = 0
    total_credit: float = 0
    total_debit: float = 0
    closing_balance: float = 0


class IncomeExpenseSummary(ApiModel):
    total_income: float = 0
    total_expense: float = 0
    net_profit_loss: float = 0
    income_by_month: list[MonthAmount] = []
    expense_by_month: list[MonthAmount] = []
