import logging

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

from app.core.http import ApiError
from app.core.session import flash
from app.deps import Api, BackOfficeSession
from app.schemas.attendance import CheckInRequest
from app.schemas.enums import MemberStatus
from app.services.attendance import AttendanceService
from app.services.members import MemberService
from app.services.reports import matches_member
from app.templating import render
from app.web import flash_error, form_fields, redirect

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/attendance", tags=["Attendance"])

DEVICE_INFO = "Web Admin"


@router.get("", response_class=HTMLResponse)
async def attendance_page(request: Request, auth: BackOfficeSession, api: Api, search: str = ""):
    service = AttendanceService(api)
    today_logs = await service.get_today_attendance(auth.gym_id)
    checked_in = await service.get_currently_checked_in(auth.gym_id)
    search = search.strip()
    if search:
        checked_in = [log for log in checked_in if matches_member(log.member, search)]

    return render(request, "attendance/index.html", {
        "today_logs": today_logs,
        "checked_in": checked_in,
        "search": search,
    })


@router.post("/check-in")
async def check_in(request: Request, auth: BackOfficeSession, api: Api):
    data = await form_fields(request)
    term = (data.get("member_search") or "").strip()
    if not term:
        flash(request, "Enter a member name or code", "error")
        return redirect("/attendance")

    try:
        members = await MemberService(api).search_members(auth.gym_id, term)
        member = next((m for m in members if m.status == MemberStatus.ACTIVE), None)
        if member is None:
            flash(request, "Member not found", "error")
            return redirect("/attendance")

        await AttendanceService(api).check_in(
            CheckInRequest(
                gym_id=auth.gym_id,
                member_id=member.id,
                checked_in_by=auth.user.id,
                device_info=DEVICE_INFO,
            )
        )
    except ApiError as e:
        flash_error(request, e, "Failed to check in member")
        return redirect("/attendance")

    flash(request, f"{member.full_name} checked in successfully")
    return redirect("/attendance")


@router.post("/{attendance_id}/check-out")
async def check_out(request: Request, attendance_id: int, auth: BackOfficeSession, api: Api):
    try:
        await AttendanceService(api).check_out(attendance_id)
        flash(request, "Member checked out successfully")
    except ApiError as e:
        flash_error(request, e, "Failed to check out member")
    return redirect("/attendance")
