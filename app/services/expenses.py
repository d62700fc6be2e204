from datetime import date
from typing import Optional

from app.schemas.account import IncomeExpenseSummary
from app.schemas.common import EntityId, PaginatedResponse
from app.schemas.expense import ExpenseCategoryRead, ExpenseRead, ExpenseReportItem
from app.services.base import ApiService, pagination_params


def report_filters(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    category_id: Optional[EntityId] = None,
    account_id: Optional[EntityId] = None,
) -> dict:
    return {
        "startDate": start_date.isoformat() if start_date else None,
        "endDate": end_date.isoformat() if end_date else None,
        "categoryId": category_id,
        "accountId": account_id,
    }


class ExpenseCategoryService(ApiService):
    async def get_categories_by_gym(self, gym_id: EntityId) -> list[ExpenseCategoryRead]:
        return self._many(ExpenseCategoryRead, await self.api.get(f"/expense-categories/gym/{gym_id}"))

    async def get_active_categories(self, gym_id: EntityId) -> list[ExpenseCategoryRead]:
        return self._many(ExpenseCategoryRead, await self.api.get(f"/expense-categories/active/{gym_id}"))

    async def create_category(self, payload: dict) -> Optional[ExpenseCategoryRead]:
        return self._one(ExpenseCategoryRead, await self.api.post("/expense-categories", json=payload))

    async def update_category(self, category_id: EntityId, payload: dict) -> Optional[ExpenseCategoryRead]:
        return self._one(ExpenseCategoryRead, await self.api.patch(f"/expense-categories/{category_id}", json=payload))

    async def delete_category(self, category_id: EntityId) -> None:
        await self.api.delete(f"/expense-categories/{category_id}")


class ExpenseService(ApiService):
    async def get_expenses_paginated(
        self,
        gym_id: EntityId,
        page_no: int,
        page_size: int,
        search_text: Optional[str] = None,
        **filters,
    ) -> PaginatedResponse:
        params = pagination_params(page_no, page_size, search_text, **report_filters(**filters))
        return self._page(ExpenseRead, await self.api.get(f"/expenses/gym/{gym_id}", params=params))

    async def get_expense(self, expense_id: EntityId) -> Optional[ExpenseRead]:
        return self._one(ExpenseRead, await self.api.get(f"/expenses/{expense_id}"))

    async def create_expense(self, payload: dict) -> Optional[ExpenseRead]:
        return self._one(ExpenseRead, await self.api.post("/expenses", json=payload))

    async def update_expense(self, expense_id: EntityId, payload: dict) -> Optional[ExpenseRead]:
        return self._one(ExpenseRead, await self.api.patch(f"/expenses/{expense_id}", json=payload))

    async def delete_expense(self, expense_id: EntityId) -> None:
        await self.api.delete(f"/expenses/{expense_id}")

    # ---------- reports ----------

    async def get_expense_report(self, gym_id: EntityId, **filters) -> list[ExpenseReportItem]:
        data = await self.api.get(f"/expenses/gym/{gym_id}/report", params=report_filters(**filters))
        return self._many(ExpenseReportItem, data)

    async def get_income_expense_summary(
        self, gym_id: EntityId, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> IncomeExpenseSummary:
        data = await self.api.get(
            f"/reports/gym/{gym_id}/income-expense",
            params=report_filters(start_date, end_date),
        )
        return IncomeExpenseSummary.model_validate(data or {})

    async def export_expense_report_csv(self, gym_id: EntityId, **filters) -> bytes:
        return await self.api.download(f"/expenses/gym/{gym_id}/export/csv", params=report_filters(**filters))

    async def export_expense_report_pdf(self, gym_id: EntityId, **filters) -> bytes:
        return await self.api.download(f"/expenses/gym/{gym_id}/export/pdf", params=report_filters(**filters))

    async def export_income_expense_csv(self, gym_id: EntityId, start_date=None, end_date=None) -> bytes:
        return await self.api.download(
            f"/reports/gym/{gym_id}/income-expense/export/csv",
            params=report_filters(start_date, end_date),
        )

    async def export_income_expense_pdf(self, gym_id: EntityId, start_date=None, end_date=None) -> bytes:
        return await self.api.download(
            f"/reports/gym/{gym_id}/income-expense/export/pdf",
            params=report_filters(start_date, end_date),
        )
