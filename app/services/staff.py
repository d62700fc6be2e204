from typing import Optional

from app.schemas.common import EntityId
from app.schemas.staff import StaffRead
from app.services.base import ApiService, uploaded_url


class StaffService(ApiService):
    async def get_staff_by_gym(self, gym_id: EntityId) -> list[StaffRead]:
        return self._many(StaffRead, await self.api.get(f"/staffs/gym/{gym_id}"))

    async def get_active_staff(self, gym_id: EntityId) -> list[StaffRead]:
        return self._many(StaffRead, await self.api.get(f"/staffs/gym/{gym_id}/active"))

    async def get_staff(self, staff_id: EntityId) -> Optional[StaffRead]:
        return self._one(StaffRead, await self.api.get(f"/staffs/{staff_id}"))

    async def create_staff(self, payload: dict) -> Optional[StaffRead]:
        return self._one(StaffRead, await self.api.post("/staffs", json=payload))

    async def update_staff(self, staff_id: EntityId, payload: dict) -> Optional[StaffRead]:
        return self._one(StaffRead, await self.api.put(f"/staffs/{staff_id}", json=payload))

    async def delete_staff(self, staff_id: EntityId) -> None:
        await self.api.delete(f"/staffs/{staff_id}")

    async def upload_photo(self, staff_id: EntityId, filename: str, content: bytes, content_type: str) -> str:
        data = await self.api.post(
            f"/staffs/upload-photo/{staff_id}",
            files={"file": (filename, content, content_type)},
        )
        return uploaded_url(data)

    async def set_staff_status(self, staff_id: EntityId, is_active: bool) -> None:
        await self.api.patch(f"/staffs/{staff_id}/status", json={"isActive": is_active})
