from datetime import datetime
from typing import Optional

from app.schemas.common import ApiDate, ApiModel, EntityId
from app.schemas.refs import AccountRef, CategoryRef


class ExpenseCategoryRead(ApiModel):
    id: EntityId
    gym_id: Optional[EntityId] = None
    name: str
    description: Optional[str] = None
    is_active: bool = True


class ExpenseRead(ApiModel):
    id: EntityId
    gym_id: Optional[EntityId] = None
    expense_date: Optional[ApiDate] = None
    category_id: Optional[EntityId] = None
    category: Optional[CategoryRef] = None
    description: Optional[str] = None
    amount: float = 0
    account_id: Optional[EntityId] = None
    account: Optional[AccountRef] = None
    reference_number: Optional[str] = None
    created_at: Optional[datetime] = None


class ExpenseReportLine(ApiModel):
    id: Optional[EntityId] = None
    date: Optional[ApiDate] = None
    description: Optional[str] = None
    amount: float = 0
    account_name: Optional[str] = None


class ExpenseReportItem(ApiModel):
    category_id: Optional[EntityId] = None
    category_name: str = ""
    total_amount: float = 0
    transaction_count: int = 0
    expenses: list[ExpenseReportLine] = []
