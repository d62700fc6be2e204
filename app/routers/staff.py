from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import HTMLResponse

from app.core.http import ApiError
from app.core.session import flash
from app.deps import AdminSession, Api
from app.schemas.forms import StaffForm, parse_form
from app.services.staff import StaffService
from app.templating import render
from app.utils.pagination import Pagination
from app.web import flash_error, form_fields, form_file, redirect

router = APIRouter(prefix="/staff", tags=["Staff"])


async def _save_photo(request: Request, service: StaffService, staff_id, payload: dict) -> None:
    photo = await form_file(request, "photo")
    if photo is None:
        return
    content = await photo.read()
    payload["photoUrl"] = await service.upload_photo(staff_id, photo.filename, content, photo.content_type)
    await service.update_staff(staff_id, payload)


@router.get("", response_class=HTMLResponse)
async def list_staff(request: Request, auth: AdminSession, api: Api):
    pagination = Pagination.from_query(request.query_params, request.url.path)
    staff = await StaffService(api).get_staff_by_gym(auth.gym_id)
    if pagination.search_text:
        term = pagination.search_text.lower()
        staff = [s for s in staff if term in s.full_name.lower() or term in (s.email or "").lower()]

    return render(request, "staff/list.html", {
        "staff": pagination.slice(staff),
        "pagination": pagination,
        "total_count": len(staff),
        "total_pages": Pagination.total_pages(len(staff), pagination.page_size),
    })


@router.get("/new", response_class=HTMLResponse)
async def new_staff(request: Request, auth: AdminSession):
    return render(request, "staff/form.html", {"staff": None})


@router.post("")
async def create_staff(request: Request, auth: AdminSession, api: Api):
    data = await form_fields(request)
    service = StaffService(api)
    try:
        form = parse_form(StaffForm, data)
        payload = {**form.to_api(), "gymId": auth.gym_id}
        staff = await service.create_staff(payload)
        if staff is not None:
            payload.pop("password", None)
            await _save_photo(request, service, staff.id, {**payload, "id": staff.id})
    except (ValueError, ApiError) as e:
        flash_error(request, e, "Failed to add staff member")
        return redirect("/staff/new")

    flash(request, "Staff member added successfully")
    return redirect("/staff")


@router.get("/{staff_id}/edit", response_class=HTMLResponse)
async def edit_staff(request: Request, staff_id: int, auth: AdminSession, api: Api):
    staff = await StaffService(api).get_staff(staff_id)
    if staff is None:
        raise HTTPException(status_code=404, detail="Staff member not found")
    return render(request, "staff/form.html", {"staff": staff})


@router.post("/{staff_id}")
async def update_staff(request: Request, staff_id: int, auth: AdminSession, api: Api):
    data = await form_fields(request)
    service = StaffService(api)
    try:
        form = parse_form(StaffForm, data)
        payload = {**form.to_api(exclude_none=True), "id": staff_id, "gymId": auth.gym_id}
        payload.pop("password", None)
        await service.update_staff(staff_id, payload)
        await _save_photo(request, service, staff_id, payload)
    except (ValueError, ApiError) as e:
        flash_error(request, e, "Failed to update staff member")
        return redirect(f"/staff/{staff_id}/edit")

    flash(request, "Staff member updated successfully")
    return redirect("/staff")


@router.post("/{staff_id}/status")
async def toggle_staff_status(request: Request, staff_id: int, auth: AdminSession, api: Api):
    data = await form_fields(request)
    is_active = data.get("is_active") == "true"
    try:
        await StaffService(api).set_staff_status(staff_id, is_active)
        flash(request, f"Staff member {'activated' if is_active else 'deactivated'} successfully")
    except ApiError as e:
        flash_error(request, e, "Failed to update staff status")
    return redirect("/staff")


@router.post("/{staff_id}/delete")
async def delete_staff(request: Request, staff_id: int, auth: AdminSession, api: Api):
    try:
        await StaffService(api).delete_staff(staff_id)
        flash(request, "Staff member deleted successfully")
    except ApiError as e:
        flash_error(request, e, "Failed to delete staff member")
    return redirect("/staff")
