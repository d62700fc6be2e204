from typing import Optional

from app.schemas.common import EntityId
from app.schemas.member import MemberCard, MemberRead
from app.services.base import ApiService, uploaded_url


class MemberService(ApiService):
    async def get_members_by_gym(self, gym_id: EntityId) -> list[MemberRead]:
        return self._many(MemberRead, await self.api.get(f"/members/gym/{gym_id}"))

    async def get_members_by_trainer(self, trainer_id: EntityId) -> list[MemberRead]:
        return self._many(MemberRead, await self.api.get(f"/members/GetByTrainerId/{trainer_id}"))

    async def get_member(self, member_id: EntityId) -> Optional[MemberRead]:
        return self._one(MemberRead, await self.api.get(f"/members/{member_id}"))

    async def get_member_details(self, member_id: EntityId) -> Optional[MemberRead]:
        return self._one(MemberRead, await self.api.get(f"/members/{member_id}/details"))

    async def get_member_by_user(self, user_id: EntityId) -> Optional[MemberRead]:
        return self._one(MemberRead, await self.api.get(f"/members/by-user/{user_id}"))

    async def get_member_card(self, member_id: EntityId) -> Optional[MemberCard]:
        return self._one(MemberCard, await self.api.get(f"/members/{member_id}/member-card"))

    async def create_member(self, payload: dict) -> Optional[MemberRead]:
        return self._one(MemberRead, await self.api.post("/members", json=payload))

    async def update_member(self, member_id: EntityId, payload: dict) -> Optional[MemberRead]:
        return self._one(MemberRead, await self.api.put(f"/members/{member_id}", json=payload))

    async def delete_member(self, member_id: EntityId) -> None:
        await self.api.delete(f"/members/{member_id}")

    async def upload_photo(self, member_id: EntityId, filename: str, content: bytes, content_type: str) -> str:
        """Upload a member photo and return its public URL"""
        data = await self.api.post(
            f"/members/upload-photo/{member_id}",
            files={"file": (filename, content, content_type)},
        )
        return uploaded_url(data)

    async def generate_member_code(self, gym_id: EntityId) -> str:
        data = await self.api.get(f"/members/generate-code/{gym_id}")
        if isinstance(data, dict):
            return data.get("memberCode") or data.get("code") or ""
        return str(data or "")

    async def search_members(self, gym_id: EntityId, term: str) -> list[MemberRead]:
        return self._many(MemberRead, await self.api.get("/members/search", params={"gymId": gym_id, "term": term}))

