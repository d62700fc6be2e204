from typing import Optional

from app.schemas.common import EntityId, PaginatedResponse
from app.schemas.enums import InvoiceStatus, PaymentMethod
from app.schemas.invoice import InvoiceRead
from app.services.base import ApiService, pagination_params


class InvoiceService(ApiService):
    async def get_invoices_by_gym(self, gym_id: EntityId) -> list[InvoiceRead]:
        return self._many(InvoiceRead, await self.api.get(f"/invoices/gym/{gym_id}"))

    async def get_invoices_paginated(
        self,
        gym_id: EntityId,
        page_no: int,
        page_size: int,
        search_text: Optional[str] = None,
        status: Optional[InvoiceStatus] = None,
    ) -> PaginatedResponse:
        params = pagination_params(page_no, page_size, search_text, status=int(status) if status else None)
        return self._page(InvoiceRead, await self.api.get(f"/invoices/gym/{gym_id}/paginated", params=params))

    async def get_invoices_by_member(self, member_id: EntityId) -> list[InvoiceRead]:
        return self._many(InvoiceRead, await self.api.get(f"/invoices/member/{member_id}"))

    async def get_invoice(self, invoice_id: EntityId) -> Optional[InvoiceRead]:
        return self._one(InvoiceRead, await self.api.get(f"/invoices/{invoice_id}"))

    async def create_invoice(self, payload: dict) -> Optional[InvoiceRead]:
        return self._one(InvoiceRead, await self.api.post("/invoices", json=payload))

    async def update_invoice(self, invoice_id: EntityId, payload: dict) -> Optional[InvoiceRead]:
        return self._one(InvoiceRead, await self.api.put(f"/invoices/{invoice_id}", json=payload))

    async def mark_paid(self, invoice_id: EntityId, payment_method: PaymentMethod) -> None:
        # Body is the bare payment method value, not an object
        await self.api.patch(f"/invoices/mark-paid/{invoice_id}", json=int(payment_method))

    async def cancel_invoice(self, invoice_id: EntityId) -> None:
        await self.api.patch(f"/invoices/cancel/{invoice_id}")

    async def update_overdue(self, gym_id: EntityId) -> None:
        await self.api.patch(f"/invoices/update-overdue/{gym_id}")
