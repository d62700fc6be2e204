"""
Self-service pages for members and trainers.
"""
import logging

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

from app.deps import Api, MemberSession, TrainerSession
from app.schemas.enums import MemberStatus, SubscriptionStatus
from app.services.attendance import AttendanceService
from app.services.invoices import InvoiceService
from app.services.members import MemberService
from app.services.subscriptions import SubscriptionService
from app.services.trainers import TrainerService
from app.templating import render
from app.utils.dates import as_utc

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Portals"])

RECENT_VISITS = 10
RECENT_CHECK_INS = 20


@router.get("/member-portal", response_class=HTMLResponse)
async def member_portal(request: Request, auth: MemberSession, api: Api):
    member = await MemberService(api).get_member_by_user(auth.user.id)
    if member is None:
        logger.warning(f"No member profile for user {auth.user.id}")
        return render(request, "portals/member.html", {"member": None})

    subscriptions = await SubscriptionService(api).get_subscriptions_by_member(member.id)
    invoices = await InvoiceService(api).get_invoices_by_member(member.id)
    visits = await AttendanceService(api).get_attendance_by_member(member.id)

    return render(request, "portals/member.html", {
        "member": member,
        "subscriptions": [s for s in subscriptions if s.status == SubscriptionStatus.ACTIVE],
        "invoices": invoices,
        "visits": visits[:RECENT_VISITS],
    })


@router.get("/trainer-portal", response_class=HTMLResponse)
async def trainer_portal(request: Request, auth: TrainerSession, api: Api):
    trainer = await TrainerService(api).get_trainer_by_user(auth.user.id)
    if trainer is None:
        logger.warning(f"No trainer profile for user {auth.user.id}")
        return render(request, "portals/trainer.html", {"trainer": None})

    members = await MemberService(api).get_members_by_trainer(trainer.id)
    logs = await AttendanceService(api).get_trainer_members_attendance(trainer.id)
    logs.sort(key=lambda log: as_utc(log.check_in_at), reverse=True)

    return render(request, "portals/trainer.html", {
        "trainer": trainer,
        "members": [m for m in members if m.status == MemberStatus.ACTIVE],
        "specialties": trainer.specialties or [],
        "check_ins": logs[:RECENT_CHECK_INS],
    })
