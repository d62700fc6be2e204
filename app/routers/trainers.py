import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import HTMLResponse

from app.core.http import ApiError
from app.core.session import flash
from app.deps import Api, BackOfficeSession
from app.schemas.enums import PaymentStatus
from app.schemas.forms import SalaryConfigForm, SalaryGenerateForm, TrainerCreateForm, TrainerUpdateForm, parse_form
from app.schemas.trainer import TrainerSalaryConfig
from app.services.gyms import GymService
from app.services.members import MemberService
from app.services.salary import SalaryService, preview_salary
from app.services.trainers import TrainerService
from app.templating import render
from app.utils.export import CSV_MEDIA_TYPE, PDF_MEDIA_TYPE, file_response
from app.utils.pagination import Pagination
from app.utils.pdf import month_label, salary_slip_pdf, salary_slips_report_pdf
from app.web import flash_error, form_fields, form_file, query_int, redirect

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/trainers", tags=["Trainers"])

SALARY_SLIPS_PATH = "/trainers/salary-slips"


async def _get_trainer_or_404(service: TrainerService, trainer_id: int):
    trainer = await service.get_trainer(trainer_id)
    if trainer is None:
        raise HTTPException(status_code=404, detail="Trainer not found")
    return trainer


async def _save_photo(request: Request, service: TrainerService, trainer_id, payload: dict) -> None:
    photo = await form_file(request, "photo")
    if photo is None:
        return
    content = await photo.read()
    payload["photoUrl"] = await service.upload_photo(trainer_id, photo.filename, content, photo.content_type)
    await service.update_trainer(trainer_id, payload)


def _slip_filters(request: Request) -> dict:
    query = request.query_params
    return {
        "trainer_id": query.get("trainerId") or None,
        "month": query_int(query.get("month")),
        "year": query_int(query.get("year")) or date.today().year,
        "payment_status": query_int(query.get("paymentStatus")),
    }


# ==================== LIST / CREATE ====================

@router.get("", response_class=HTMLResponse)
async def list_trainers(request: Request, auth: BackOfficeSession, api: Api):
    pagination = Pagination.from_query(request.query_params, request.url.path)
    trainers = await TrainerService(api).get_trainers_by_gym(auth.gym_id)
    if pagination.search_text:
        term = pagination.search_text.lower()
        trainers = [t for t in trainers if term in t.full_name.lower() or term in (t.email or "").lower()]

    return render(request, "trainers/list.html", {
        "trainers": pagination.slice(trainers),
        "pagination": pagination,
        "total_count": len(trainers),
        "total_pages": Pagination.total_pages(len(trainers), pagination.page_size),
    })


@router.get("/new", response_class=HTMLResponse)
async def new_trainer(request: Request, auth: BackOfficeSession):
    return render(request, "trainers/form.html", {"trainer": None})


@router.post("")
async def create_trainer(request: Request, auth: BackOfficeSession, api: Api):
    data = await form_fields(request)
    service = TrainerService(api)
    try:
        form = parse_form(TrainerCreateForm, data)
        payload = {**form.to_api(), "gymId": auth.gym_id}
        trainer = await service.create_trainer(payload)
        if trainer is not None:
            payload.pop("password", None)
            await _save_photo(request, service, trainer.id, {**payload, "id": trainer.id})
    except (ValueError, ApiError) as e:
        flash_error(request, e, "Failed to add trainer")
        return redirect("/trainers/new")

    flash(request, "Trainer added successfully")
    return redirect("/trainers")


# ==================== SALARY SLIPS ====================

@router.get("/salary-slips", response_class=HTMLResponse)
async def salary_slips(request: Request, auth: BackOfficeSession, api: Api):
    pagination = Pagination.from_query(request.query_params, request.url.path)
    filters = _slip_filters(request)
    service = SalaryService(api)

    page = await service.get_salary_slips(
        auth.gym_id, pagination.page_no, pagination.page_size, pagination.search_text, **filters
    )
    summary = await service.get_salary_summary(
        auth.gym_id, month=filters["month"], year=filters["year"], trainer_id=filters["trainer_id"]
    )
    trainers = await TrainerService(api).get_active_trainers(auth.gym_id)

    preview = None
    preview_for = request.query_params.get("previewTrainerId")
    today = date.today()
    preview_month = query_int(request.query_params.get("previewMonth")) or today.month
    preview_year = query_int(request.query_params.get("previewYear")) or today.year
    if preview_for:
        config = await service.get_salary_config(preview_for)
        if config is None:
            flash(request, "No active salary configuration found for this trainer", "error")
        else:
            count = await service.get_active_members_count(preview_for, preview_month, preview_year)
            preview = preview_salary(config.base_salary, config.per_member_incentive, count)

    return render(request, "trainers/salary_slips.html", {
        "page": page,
        "pagination": pagination,
        "summary": summary,
        "filters": filters,
        "trainers": trainers,
        "preview": preview,
        "preview_trainer_id": preview_for or "",
        "preview_month": preview_month,
        "preview_year": preview_year,
        "months": [(m, month_label(m)) for m in range(1, 13)],
        "payment_statuses": list(PaymentStatus),
    })


@router.post("/salary-slips/generate")
async def generate_salary_slip(request: Request, auth: BackOfficeSession, api: Api):
    data = await form_fields(request)
    try:
        form = parse_form(SalaryGenerateForm, data)
        await SalaryService(api).generate_salary_slip(auth.gym_id, form.trainer_id, form.month, form.year)
    except (ValueError, ApiError) as e:
        flash_error(request, e, "Failed to generate salary slip")
        return redirect(SALARY_SLIPS_PATH)

    flash(request, "Salary slip generated successfully")
    return redirect(SALARY_SLIPS_PATH)


@router.get("/salary-slips/export/{fmt}")
async def export_salary_slips(request: Request, fmt: str, auth: BackOfficeSession, api: Api):
    filters = _slip_filters(request)
    service = SalaryService(api)
    if fmt == "csv":
        content = await service.export_salary_slips_csv(auth.gym_id, **filters)
        return file_response(content, f"salaryslips-{filters['year']}.csv", CSV_MEDIA_TYPE)
    if fmt == "pdf":
        content = await service.export_salary_slips_pdf(auth.gym_id, **filters)
        return file_response(content, f"salaryslips-{filters['year']}.pdf", PDF_MEDIA_TYPE)
    if fmt == "report":
        page = await service.get_salary_slips(auth.gym_id, 1, 1000, None, **filters)
        summary = await service.get_salary_summary(
            auth.gym_id, month=filters["month"], year=filters["year"], trainer_id=filters["trainer_id"]
        )
        content = salary_slips_report_pdf(page.data, summary, filters["year"])
        return file_response(content, f"salary-slips-report-{filters['year']}.pdf", PDF_MEDIA_TYPE)
    raise HTTPException(status_code=404, detail="Unknown export format")


@router.post("/salary-slips/{slip_id}/mark-paid")
async def mark_slip_paid(request: Request, slip_id: int, auth: BackOfficeSession, api: Api):
    try:
        await SalaryService(api).mark_slip_paid(slip_id)
        flash(request, "Salary slip marked as paid")
    except ApiError as e:
        flash_error(request, e, "Failed to mark salary slip as paid")
    return redirect(SALARY_SLIPS_PATH)


@router.get("/salary-slips/{slip_id}/download")
async def download_salary_slip(slip_id: int, auth: BackOfficeSession, api: Api):
    content = await SalaryService(api).download_salary_slip(slip_id)
    return file_response(content, f"salary-slip-{slip_id}.pdf", PDF_MEDIA_TYPE)


@router.get("/salary-slips/{slip_id}/pdf")
async def salary_slip_document(slip_id: int, auth: BackOfficeSession, api: Api):
    slip = await SalaryService(api).get_salary_slip(slip_id)
    if slip is None:
        raise HTTPException(status_code=404, detail="Salary slip not found")
    gym = await GymService(api).get_gym(auth.gym_id)
    content = salary_slip_pdf(slip, gym.name if gym else None)
    trainer_name = slip.trainer.full_name.replace(" ", "-") if slip.trainer else slip.trainer_id
    filename = f"salary-slip-{trainer_name}-{month_label(slip.month)}-{slip.year}.pdf"
    return file_response(content, filename, PDF_MEDIA_TYPE)


# ==================== DETAIL / SALARY CONFIG ====================

@router.get("/{trainer_id}", response_class=HTMLResponse)
async def trainer_detail(request: Request, trainer_id: int, auth: BackOfficeSession, api: Api):
    trainer = await _get_trainer_or_404(TrainerService(api), trainer_id)
    config: Optional[TrainerSalaryConfig] = await SalaryService(api).get_salary_config(trainer_id)
    members = await MemberService(api).get_members_by_trainer(trainer_id)
    return render(request, "trainers/detail.html", {
        "trainer": trainer,
        "config": config,
        "members": members,
        "today": date.today(),
    })


@router.post("/{trainer_id}/salary-config")
async def save_salary_config(request: Request, trainer_id: int, auth: BackOfficeSession, api: Api):
    data = await form_fields(request)
    service = SalaryService(api)
    try:
        form = parse_form(SalaryConfigForm, data)
        config = TrainerSalaryConfig(trainer_id=trainer_id, **form.model_dump())
        if await service.get_salary_config(trainer_id) is None:
            await service.create_salary_config(config)
        else:
            await service.update_salary_config(trainer_id, config)
    except (ValueError, ApiError) as e:
        flash_error(request, e, "Failed to save salary configuration")
        return redirect(f"/trainers/{trainer_id}")

    flash(request, "Salary configuration saved successfully")
    return redirect(f"/trainers/{trainer_id}")


# ==================== EDIT / STATUS / DELETE ====================

@router.get("/{trainer_id}/edit", response_class=HTMLResponse)
async def edit_trainer(request: Request, trainer_id: int, auth: BackOfficeSession, api: Api):
    trainer = await _get_trainer_or_404(TrainerService(api), trainer_id)
    return render(request, "trainers/form.html", {"trainer": trainer})


@router.post("/{trainer_id}")
async def update_trainer(request: Request, trainer_id: int, auth: BackOfficeSession, api: Api):
    data = await form_fields(request)
    service = TrainerService(api)
    try:
        form = parse_form(TrainerUpdateForm, data)
        payload = {**form.to_api(), "id": trainer_id, "gymId": auth.gym_id}
        await service.update_trainer(trainer_id, payload)
        await _save_photo(request, service, trainer_id, payload)
    except (ValueError, ApiError) as e:
        flash_error(request, e, "Failed to update trainer")
        return redirect(f"/trainers/{trainer_id}/edit")

    flash(request, "Trainer updated successfully")
    return redirect("/trainers")


@router.post("/{trainer_id}/status")
async def toggle_trainer_status(request: Request, trainer_id: int, auth: BackOfficeSession, api: Api):
    data = await form_fields(request)
    is_active = data.get("is_active") == "true"
    try:
        await TrainerService(api).set_trainer_status(trainer_id, is_active)
        flash(request, f"Trainer {'activated' if is_active else 'deactivated'} successfully")
    except ApiError as e:
        flash_error(request, e, "Failed to update trainer status")
    return redirect("/trainers")


@router.post("/{trainer_id}/delete")
async def delete_trainer(request: Request, trainer_id: int, auth: BackOfficeSession, api: Api):
    try:
        await TrainerService(api).delete_trainer(trainer_id)
        flash(request, "Trainer deleted successfully")
    except ApiError as e:
        flash_error(request, e, "Failed to delete trainer")
    return redirect("/trainers")
