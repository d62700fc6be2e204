from typing import Optional

from app.core.http import ApiError
from app.schemas.common import CountResponse, EntityId, PaginatedResponse
from app.schemas.trainer import SalarySlipRead, SalarySlipSummary, TrainerSalaryConfig
from app.services.base import ApiService, pagination_params

SLIP_EXISTS_MESSAGE = "Salary slip already exists for this trainer and month"


class SalaryService(ApiService):
    # ---------- salary configuration ----------

    async def get_salary_config(self, trainer_id: EntityId) -> Optional[TrainerSalaryConfig]:
        try:
            data = await self.api.get(f"/trainers/{trainer_id}/salary-config")
        except ApiError as e:
            if e.status_code == 404:
                return None
            raise
        return self._one(TrainerSalaryConfig, data)

    async def create_salary_config(self, config: TrainerSalaryConfig) -> Optional[TrainerSalaryConfig]:
        data = await self.api.post("/trainers/salary-config", json=config.to_api(exclude_none=True))
        return self._one(TrainerSalaryConfig, data)

    async def update_salary_config(self, trainer_id: EntityId, config: TrainerSalaryConfig) -> Optional[TrainerSalaryConfig]:
        data = await self.api.put(f"/trainers/{trainer_id}/salary-config", json=config.to_api(exclude_none=True))
        return self._one(TrainerSalaryConfig, data)

    async def get_active_members_count(self, trainer_id: EntityId, month: int, year: int) -> int:
        data = await self.api.get(
            f"/trainers/{trainer_id}/active-members-count",
            params={"month": month, "year": year},
        )
        if isinstance(data, dict):
            return CountResponse.model_validate(data).count
        return int(data or 0)

    # ---------- salary slips ----------

    async def get_salary_slips(
        self,
        gym_id: EntityId,
        page_no: int = 1,
        page_size: int = 10,
        search_text: Optional[str] = None,
        trainer_id: Optional[EntityId] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
        payment_status: Optional[int] = None,
    ) -> PaginatedResponse:
        params = pagination_params(
            page_no, page_size, search_text,
            trainerId=trainer_id, month=month, year=year, paymentStatus=payment_status,
        )
        return self._page(SalarySlipRead, await self.api.get(f"/salary-slips/gym/{gym_id}", params=params))

    async def get_salary_slip(self, slip_id: EntityId) -> Optional[SalarySlipRead]:
        return self._one(SalarySlipRead, await self.api.get(f"/salary-slips/{slip_id}"))

    async def generate_salary_slip(self, gym_id: EntityId, trainer_id: EntityId, month: int, year: int) -> Optional[SalarySlipRead]:
        try:
            data = await self.api.post(
                f"/salary-slips/gym/{gym_id}/generate",
                json={"trainerId": trainer_id, "salaryMonth": month, "salaryYear": year},
            )
        except ApiError as e:
            if e.is_conflict:
                raise ApiError(e.status_code, SLIP_EXISTS_MESSAGE, e.payload) from e
            raise
        return self._one(SalarySlipRead, data)

    async def mark_slip_paid(self, slip_id: EntityId) -> None:
        await self.api.patch(f"/salary-slips/{slip_id}/mark-paid")

    async def get_salary_summary(
        self, gym_id: EntityId, month: Optional[int] = None, year: Optional[int] = None, trainer_id: Optional[EntityId] = None
    ) -> SalarySlipSummary:
        data = await self.api.get(
            f"/salary-slips/gym/{gym_id}/summary",
            params={"month": month, "year": year, "trainerId": trainer_id},
        )
        return SalarySlipSummary.model_validate(data or {})

    async def download_salary_slip(self, slip_id: EntityId) -> bytes:
        return await self.api.download(f"/salary-slips/{slip_id}/download")

    async def export_salary_slips_pdf(self, gym_id: EntityId, **filters) -> bytes:
        return await self.api.download(f"/salary-slips/gym/{gym_id}/export/pdf", params=_filters(filters))

    async def export_salary_slips_csv(self, gym_id: EntityId, **filters) -> bytes:
        return await self.api.download(f"/salary-slips/gym/{gym_id}/export/csv", params=_filters(filters))


def _filters(filters: dict) -> dict:
    keys = {"trainer_id": "trainerId", "month": "month", "year": "year", "payment_status": "paymentStatus"}
    return {keys.get(k, k): v for k, v in filters.items()}


def preview_salary(base_salary: float, per_member_incentive: float, member_count: int) -> dict:
    """Figures shown before a slip is generated"""
    incentive_total = member_count * per_member_incentive
    return {
        "base_salary": base_salary,
        "per_member_incentive": per_member_incentive,
        "active_member_count": member_count,
        "incentive_total": incentive_total,
        "gross_salary": base_salary + incentive_total,
    }
