from typing import Optional

from app.schemas.common import EntityId, PaginatedResponse
from app.schemas.package import PackageRead
from app.services.base import ApiService, pagination_params


class PackageService(ApiService):
    async def get_packages_paginated(
        self, gym_id: EntityId, page_no: int, page_size: int, search_text: Optional[str] = None
    ) -> PaginatedResponse:
        data = await self.api.get(
            f"/packages/gym/{gym_id}/paginated",
            params=pagination_params(page_no, page_size, search_text),
        )
        return self._page(PackageRead, data)

    async def get_packages_by_gym(self, gym_id: EntityId) -> list[PackageRead]:
        return self._many(PackageRead, await self.api.get(f"/packages/gym/{gym_id}"))

    async def get_active_packages(self, gym_id: EntityId) -> list[PackageRead]:
        return self._many(PackageRead, await self.api.get(f"/packages/gym/{gym_id}/active"))

    async def get_package(self, package_id: EntityId) -> Optional[PackageRead]:
        return self._one(PackageRead, await self.api.get(f"/packages/{package_id}"))

    async def create_package(self, payload: dict) -> Optional[PackageRead]:
        return self._one(PackageRead, await self.api.post("/packages", json=payload))

    async def update_package(self, package_id: EntityId, payload: dict) -> Optional[PackageRead]:
        return self._one(PackageRead, await self.api.put(f"/packages/{package_id}", json=payload))

    async def delete_package(self, package_id: EntityId) -> None:
        await self.api.delete(f"/packages/{package_id}")

    async def set_package_status(self, package_id: EntityId, is_active: bool) -> None:
        await self.api.patch(f"/packages/{package_id}/status", json={"isActive": is_active})
