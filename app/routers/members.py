import logging
from datetime import date

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import HTMLResponse

from app.core.http import ApiError
from app.core.session import flash
from app.deps import Api, BackOfficeSession
from app.schemas.enums import Gender, MemberStatus, label
from app.schemas.forms import MemberCreateForm, MemberUpdateForm, parse_form
from app.services.attendance import AttendanceService
from app.services.members import MemberService
from app.services.subscriptions import SubscriptionService
from app.templating import render
from app.utils.export import XLSX_MEDIA_TYPE, file_response, timestamped_filename, to_xlsx
from app.utils.member_import import (
    TEMPLATE_FILENAME,
    MemberImportError,
    build_template,
    import_members,
    parse_workbook,
)
from app.utils.pagination import Pagination
from app.web import flash_error, form_fields, form_file, redirect

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/members", tags=["Members"])

RECENT_VISITS = 10


def _matches(member, term: str) -> bool:
    term = term.lower()
    haystack = [member.full_name, member.member_code, member.contact_phone, member.contact_email]
    return any(term in (value or "").lower() for value in haystack)


def _create_payload(form: MemberCreateForm, gym_id) -> dict:
    payload = form.to_api()
    payload["phoneNo"] = payload.pop("phone", None)
    payload["gymId"] = gym_id
    return payload


async def _save_photo(request: Request, service: MemberService, member_id, payload: dict) -> None:
    photo = await form_file(request, "photo")
    if photo is None:
        return
    content = await photo.read()
    payload["photoUrl"] = await service.upload_photo(member_id, photo.filename, content, photo.content_type)
    await service.update_member(member_id, payload)


async def _get_member_or_404(service: MemberService, member_id: int):
    member = await service.get_member_details(member_id)
    if member is None:
        raise HTTPException(status_code=404, detail="Member not found")
    return member


# ==================== LIST ====================

@router.get("", response_class=HTMLResponse)
async def list_members(request: Request, auth: BackOfficeSession, api: Api):
    pagination = Pagination.from_query(request.query_params, request.url.path)
    members = await MemberService(api).get_members_by_gym(auth.gym_id)
    if pagination.search_text:
        members = [m for m in members if _matches(m, pagination.search_text)]

    return render(request, "members/list.html", {
        "members": pagination.slice(members),
        "pagination": pagination,
        "total_count": len(members),
        "total_pages": Pagination.total_pages(len(members), pagination.page_size),
    })


@router.get("/export")
async def export_members(auth: BackOfficeSession, api: Api):
    members = await MemberService(api).get_members_by_gym(auth.gym_id)
    rows = [
        [
            m.member_code, m.first_name, m.last_name, m.contact_email, m.contact_phone, m.cnic,
            m.date_of_birth.isoformat() if m.date_of_birth else None,
            label(m.gender), label(m.status),
        ]
        for m in members
    ]
    content = to_xlsx(
        ["Member Code", "First Name", "Last Name", "Email", "Phone", "CNIC", "Date of Birth", "Gender", "Status"],
        rows,
        sheet_title="Members",
    )
    return file_response(content, timestamped_filename("members", "xlsx"), XLSX_MEDIA_TYPE)


# ==================== CREATE ====================

@router.get("/new", response_class=HTMLResponse)
async def new_member(request: Request, auth: BackOfficeSession, api: Api):
    try:
        member_code = await MemberService(api).generate_member_code(auth.gym_id)
    except ApiError as e:
        logger.warning(f"Could not generate member code: {e.message}")
        member_code = ""

    return render(request, "members/form.html", {
        "member": None,
        "defaults": {"member_code": member_code},
        "genders": list(Gender),
        "statuses": list(MemberStatus),
    })


@router.post("")
async def create_member(request: Request, auth: BackOfficeSession, api: Api):
    data = await form_fields(request)
    service = MemberService(api)
    try:
        form = parse_form(MemberCreateForm, data)
        payload = _create_payload(form, auth.gym_id)
        member = await service.create_member(payload)
        if member is not None:
            payload.pop("password", None)
            await _save_photo(request, service, member.id, {**payload, "id": member.id})
    except (ValueError, ApiError) as e:
        flash_error(request, e, "Failed to add member")
        return redirect("/members/new")

    flash(request, "Member added successfully!")
    return redirect("/members")


# ==================== IMPORT ====================

@router.get("/import", response_class=HTMLResponse)
async def import_page(request: Request, auth: BackOfficeSession):
    return render(request, "members/import.html", {"result": None})


@router.get("/import/template")
async def download_template(auth: BackOfficeSession):
    return file_response(build_template(), TEMPLATE_FILENAME, XLSX_MEDIA_TYPE)


@router.post("/import", response_class=HTMLResponse)
async def import_upload(request: Request, auth: BackOfficeSession, api: Api):
    upload = await form_file(request, "file")
    if upload is None:
        flash(request, "Please choose an Excel file to import", "error")
        return redirect("/members/import")

    if not upload.filename.lower().endswith((".xlsx", ".xls")):
        flash(request, "Only Excel files (.xlsx, .xls) are allowed", "error")
        return redirect("/members/import")

    try:
        result = parse_workbook(await upload.read(), auth.gym_id)
    except MemberImportError as e:
        flash(request, str(e), "error")
        return redirect("/members/import")

    flash(request, result.summary, "info")
    if not result.valid_rows:
        flash(request, "No valid rows to import", "error")
        return render(request, "members/import.html", {"result": result})

    await import_members(result, MemberService(api))

    if result.success_count:
        flash(request, f"Successfully imported {result.success_count} members")
    if result.failed_count:
        flash(request, f"Failed to import {result.failed_count} members", "error")

    return render(request, "members/import.html", {"result": result})


# ==================== DETAIL ====================

@router.get("/{member_id}", response_class=HTMLResponse)
async def member_detail(request: Request, member_id: int, auth: BackOfficeSession, api: Api):
    member = await _get_member_or_404(MemberService(api), member_id)
    subscriptions = member.subscriptions
    if subscriptions is None:
        subscriptions = await SubscriptionService(api).get_subscriptions_by_member(member_id)
    visits = await AttendanceService(api).get_attendance_by_member(member_id)

    return render(request, "members/detail.html", {
        "member": member,
        "subscriptions": subscriptions,
        "visits": visits[:RECENT_VISITS],
    })


@router.get("/{member_id}/card", response_class=HTMLResponse)
async def member_card(request: Request, member_id: int, auth: BackOfficeSession, api: Api):
    card = await MemberService(api).get_member_card(member_id)
    if card is None:
        raise HTTPException(status_code=404, detail="Member not found")
    return render(request, "members/card.html", {"card": card, "today": date.today()})


# ==================== EDIT / DELETE ====================

@router.get("/{member_id}/edit", response_class=HTMLResponse)
async def edit_member(request: Request, member_id: int, auth: BackOfficeSession, api: Api):
    member = await _get_member_or_404(MemberService(api), member_id)
    return render(request, "members/form.html", {
        "member": member,
        "defaults": {},
        "genders": list(Gender),
        "statuses": list(MemberStatus),
    })


@router.post("/{member_id}")
async def update_member(request: Request, member_id: int, auth: BackOfficeSession, api: Api):
    data = await form_fields(request)
    service = MemberService(api)
    try:
        form = parse_form(MemberUpdateForm, data)
        payload = {**form.to_api(), "id": member_id, "gymId": auth.gym_id}
        await service.update_member(member_id, payload)
        await _save_photo(request, service, member_id, payload)
    except (ValueError, ApiError) as e:
        flash_error(request, e, "Failed to update member")
        return redirect(f"/members/{member_id}/edit")

    flash(request, "Member updated successfully")
    return redirect("/members")


@router.post("/{member_id}/delete")
async def delete_member(request: Request, member_id: int, auth: BackOfficeSession, api: Api):
    try:
        await MemberService(api).delete_member(member_id)
        flash(request, "Member deleted successfully")
    except ApiError as e:
        flash_error(request, e, "Failed to delete member")
    return redirect("/members")
