from typing import Optional

from app.schemas.common import EntityId
from app.schemas.gym import GymRead
from app.services.base import ApiService, uploaded_url


class GymService(ApiService):
    async def get_gym(self, gym_id: EntityId) -> Optional[GymRead]:
        return self._one(GymRead, await self.api.get(f"/gyms/{gym_id}"))

    async def update_gym(self, gym_id: EntityId, payload: dict) -> Optional[GymRead]:
        return self._one(GymRead, await self.api.put(f"/gyms/{gym_id}", json=payload))

    async def upload_logo(self, gym_id: EntityId, filename: str, content: bytes, content_type: str) -> str:
        data = await self.api.post(
            f"/gyms/upload-photo/{gym_id}",
            files={"file": (filename, content, content_type)},
        )
        return uploaded_url(data)
