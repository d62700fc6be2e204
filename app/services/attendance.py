from datetime import date, datetime, timezone
from typing import Optional

from app.schemas.attendance import AttendanceLogRead, AttendanceStats, CheckInRequest
from app.schemas.common import EntityId
from app.services.base import ApiService


class AttendanceService(ApiService):
    async def get_attendance_by_gym(self, gym_id: EntityId) -> list[AttendanceLogRead]:
        return self._many(AttendanceLogRead, await self.api.get(f"/attendancelogs/gym/{gym_id}"))

    async def get_attendance_by_member(self, member_id: EntityId) -> list[AttendanceLogRead]:
        return self._many(AttendanceLogRead, await self.api.get(f"/attendancelogs/member/{member_id}"))

    async def get_trainer_members_attendance(self, trainer_id: EntityId) -> list[AttendanceLogRead]:
        data = await self.api.get(f"/attendancelogs/members/GetByTrainerId/{trainer_id}")
        return self._many(AttendanceLogRead, data)

    async def get_today_attendance(self, gym_id: EntityId) -> list[AttendanceLogRead]:
        return self._many(AttendanceLogRead, await self.api.get(f"/attendancelogs/gym/{gym_id}/today"))

    async def get_currently_checked_in(self, gym_id: EntityId) -> list[AttendanceLogRead]:
        return self._many(AttendanceLogRead, await self.api.get(f"/attendancelogs/gym/{gym_id}/checked-in"))

    async def check_in(self, request: CheckInRequest) -> Optional[AttendanceLogRead]:
        data = await self.api.post("/attendancelogs/check-in", json=request.to_api())
        return self._one(AttendanceLogRead, data)

    async def check_out(self, attendance_id: EntityId, at: Optional[datetime] = None) -> Optional[AttendanceLogRead]:
        at = at or datetime.now(timezone.utc)
        data = await self.api.patch(f"/attendancelogs/{attendance_id}/check-out", json={"checkOutAt": at.isoformat()})
        return self._one(AttendanceLogRead, data)

    async def get_attendance_stats(self, gym_id: EntityId, start: date, end: date) -> AttendanceStats:
        data = await self.api.get(
            "/attendancelogs/stats",
            params={"gymId": gym_id, "startDate": start.isoformat(), "endDate": end.isoformat()},
        )
        return AttendanceStats.model_validate(data or {})

    async def get_latest_attendance(self, member_id: EntityId) -> Optional[AttendanceLogRead]:
        return self._one(AttendanceLogRead, await self.api.get(f"/attendancelogs/member/{member_id}/latest"))
