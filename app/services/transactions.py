from datetime import date
from typing import Optional

from app.schemas.common import EntityId
from app.schemas.invoice import TransactionCreate, TransactionRead, TransactionUpdate
from app.services.base import ApiService


class TransactionService(ApiService):
    async def get_transactions_by_gym(self, gym_id: EntityId) -> list[TransactionRead]:
        return self._many(TransactionRead, await self.api.get(f"/transactions/gym/{gym_id}"))

    async def get_transactions_by_invoice(self, invoice_id: EntityId) -> list[TransactionRead]:
        return self._many(TransactionRead, await self.api.get(f"/transactions/invoice/{invoice_id}"))

    async def get_transaction(self, transaction_id: EntityId) -> Optional[TransactionRead]:
        return self._one(TransactionRead, await self.api.get(f"/transactions/{transaction_id}"))

    async def get_total_revenue(self, gym_id: EntityId, month: int, year: int) -> float:
        data = await self.api.get(f"/transactions/getTotalRevenue/{gym_id}/{month}/{year}")
        if isinstance(data, dict):
            data = data.get("totalRevenue", data.get("total", 0))
        return float(data or 0)

    async def create_transaction(self, data: TransactionCreate) -> Optional[TransactionRead]:
        return self._one(TransactionRead, await self.api.post("/transactions", json=data.to_api()))

    async def update_transaction(self, transaction_id: EntityId, data: TransactionUpdate) -> Optional[TransactionRead]:
        body = data.to_api(exclude_none=True)
        return self._one(TransactionRead, await self.api.patch(f"/transactions/{transaction_id}", json=body))

    async def delete_transaction(self, transaction_id: EntityId) -> None:
        await self.api.delete(f"/transactions/{transaction_id}")

    async def get_transactions_by_range(self, gym_id: EntityId, start: date, end: date) -> list[TransactionRead]:
        data = await self.api.get(
            f"/transactions/gym/{gym_id}/range",
            params={"start": start.isoformat(), "end": end.isoformat()},
        )
        return self._many(TransactionRead, data)
