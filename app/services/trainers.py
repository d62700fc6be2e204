from typing import Optional

from app.schemas.common import EntityId
from app.schemas.trainer import TrainerRead
from app.services.base import ApiService, uploaded_url


class TrainerService(ApiService):
    async def get_trainers_by_gym(self, gym_id: EntityId) -> list[TrainerRead]:
        return self._many(TrainerRead, await self.api.get(f"/trainers/gym/{gym_id}"))

    async def get_active_trainers(self, gym_id: EntityId) -> list[TrainerRead]:
        return self._many(TrainerRead, await self.api.get(f"/trainers/gym/{gym_id}/active"))

    async def get_trainer(self, trainer_id: EntityId) -> Optional[TrainerRead]:
        return self._one(TrainerRead, await self.api.get(f"/trainers/{trainer_id}"))

    async def get_trainer_by_user(self, user_id: EntityId) -> Optional[TrainerRead]:
        return self._one(TrainerRead, await self.api.get(f"/trainers/getByUserId/{user_id}"))

    async def create_trainer(self, payload: dict) -> Optional[TrainerRead]:
        return self._one(TrainerRead, await self.api.post("/trainers", json=payload))

    async def upload_photo(self, trainer_id: EntityId, filename: str, content: bytes, content_type: str) -> str:
        data = await self.api.post(
            f"/trainers/upload-photo/{trainer_id}",
            files={"file": (filename, content, content_type)},
        )
        return uploaded_url(data)

    async def update_trainer(self, trainer_id: EntityId, payload: dict) -> Optional[TrainerRead]:
        return self._one(TrainerRead, await self.api.put(f"/trainers/{trainer_id}", json=payload))

    async def delete_trainer(self, trainer_id: EntityId) -> None:
        await self.api.delete(f"/trainers/{trainer_id}")

    async def set_trainer_status(self, trainer_id: EntityId, is_active: bool) -> None:
        await self.api.patch(f"/trainers/{trainer_id}/status", json={"isActive": is_active})
