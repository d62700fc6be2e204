from datetime import date

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

from app.deps import Api, BackOfficeSession
from app.services.attendance import AttendanceService
from app.services.dashboard import compute_kpis, recent_activity
from app.services.members import MemberService
from app.services.subscriptions import SubscriptionService
from app.services.transactions import TransactionService
from app.templating import render

router = APIRouter(tags=["Dashboard"])

QUICK_ACTIONS = [
    {"title": "Add Member", "url": "/members/new", "icon": "user-plus"},
    {"title": "New Subscription", "url": "/subscriptions/new", "icon": "credit-card"},
    {"title": "Check In", "url": "/attendance", "icon": "log-in"},
    {"title": "Invoices", "url": "/invoices", "icon": "file-text"},
]


@router.get("/", response_class=HTMLResponse)
async def dashboard(request: Request, auth: BackOfficeSession, api: Api):
    gym_id = auth.gym_id
    today = date.today()

    members = await MemberService(api).get_members_by_gym(gym_id)
    subscriptions = await SubscriptionService(api).get_subscriptions_by_gym(gym_id)
    today_logs = await AttendanceService(api).get_today_attendance(gym_id)
    logs = await AttendanceService(api).get_attendance_by_gym(gym_id)
    revenue = await TransactionService(api).get_total_revenue(gym_id, today.month, today.year)

    return render(request, "dashboard.html", {
        "kpis": compute_kpis(members, subscriptions, today_logs, revenue),
        "activity": recent_activity(logs, subscriptions),
        "quick_actions": QUICK_ACTIONS,
    })
