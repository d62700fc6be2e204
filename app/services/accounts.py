from datetime import date
from typing import Optional

from app.schemas.account import AccountRead, AccountSummary, AccountTransactionRead
from app.schemas.common import EntityId, PaginatedResponse
from app.schemas.enums import ReferenceType
from app.services.base import ApiService, pagination_params


def _date(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value else None


def ledger_filters(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    reference_type: Optional[ReferenceType] = None,
) -> dict:
    return {
        "startDate": _date(start_date),
        "endDate": _date(end_date),
        "referenceType": reference_type.value if reference_type else None,
    }


class AccountService(ApiService):
    async def get_accounts_by_gym(self, gym_id: EntityId) -> list[AccountRead]:
        return self._many(AccountRead, await self.api.get(f"/accounts/gym/{gym_id}"))

    async def get_accounts_paginated(
        self, gym_id: EntityId, page_no: int, page_size: int, search_text: Optional[str] = None
    ) -> PaginatedResponse:
        data = await self.api.get(
            f"/accounts/gym/{gym_id}/paginated",
            params=pagination_params(page_no, page_size, search_text),
        )
        return self._page(AccountRead, data)

    async def get_active_accounts(self, gym_id: EntityId) -> list[AccountRead]:
        return self._many(AccountRead, await self.api.get(f"/accounts/gym/{gym_id}/active"))

    async def get_bank_accounts(self, gym_id: EntityId) -> list[AccountRead]:
        return self._many(AccountRead, await self.api.get(f"/accounts/gym/{gym_id}/bank"))

    async def get_default_cash_account(self, gym_id: EntityId) -> Optional[AccountRead]:
        return self._one(AccountRead, await self.api.get(f"/accounts/gym/{gym_id}/default-cash"))

    async def get_account(self, account_id: EntityId) -> Optional[AccountRead]:
        return self._one(AccountRead, await self.api.get(f"/accounts/{account_id}"))

    async def create_account(self, payload: dict) -> Optional[AccountRead]:
        return self._one(AccountRead, await self.api.post("/accounts", json=payload))

    async def update_account(self, account_id: EntityId, payload: dict) -> Optional[AccountRead]:
        return self._one(AccountRead, await self.api.patch(f"/accounts/{account_id}", json=payload))

    async def deactivate_account(self, account_id: EntityId) -> None:
        await self.api.patch(f"/accounts/{account_id}/deactivate")

    async def get_account_ledger(
        self,
        account_id: EntityId,
        page_no: int,
        page_size: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        reference_type: Optional[ReferenceType] = None,
    ) -> PaginatedResponse:
        params = {"pageNo": page_no, "pageSize": page_size, **ledger_filters(start_date, end_date, reference_type)}
        return self._page(AccountTransactionRead, await self.api.get(f"/accounts/{account_id}/ledger", params=params))

    async def get_account_summary(
        self, gym_id: EntityId, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> list[AccountSummary]:
        data = await self.api.get(
            f"/accounts/gym/{gym_id}/summary",
            params={"startDate": _date(start_date), "endDate": _date(end_date)},
        )
        return self._many(AccountSummary, data)

    async def export_ledger_csv(self, account_id: EntityId, **filters) -> bytes:
        return await self.api.download(f"/accounts/{account_id}/ledger/export/csv", params=ledger_filters(**filters))

    async def export_ledger_pdf(self, account_id: EntityId, **filters) -> bytes:
        return await self.api.download(f"/accounts/{account_id}/ledger/export/pdf", params=ledger_filters(**filters))
