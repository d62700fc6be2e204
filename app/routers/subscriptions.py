import logging
from datetime import date

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import HTMLResponse

from app.core.http import ApiError
from app.core.session import flash
from app.deps import Api, BackOfficeSession
from app.schemas.enums import SubscriptionStatus
from app.schemas.forms import RenewSubscriptionForm, SubscriptionEditForm, SubscriptionForm, parse_form
from app.schemas.subscription import SubscriptionUpdate
from app.services.gyms import GymService
from app.services.members import MemberService
from app.services.packages import PackageService
from app.services.subscriptions import SubscriptionService, build_subscription, default_renewal_start
from app.services.trainers import TrainerService
from app.templating import render
from app.utils.export import PDF_MEDIA_TYPE, file_response
from app.utils.pdf import membership_receipt_pdf
from app.utils.pagination import Pagination
from app.web import flash_error, form_fields, redirect

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/subscriptions", tags=["Subscriptions"])


def _matches(subscription, term: str) -> bool:
    term = term.lower()
    values = [
        subscription.member.full_name if subscription.member else "",
        subscription.member.member_code if subscription.member else "",
        subscription.package.name if subscription.package else "",
    ]
    return any(term in (value or "").lower() for value in values)


async def _get_or_404(service: SubscriptionService, subscription_id: int):
    subscription = await service.get_subscription(subscription_id)
    if subscription is None:
        raise HTTPException(status_code=404, detail="Subscription not found")
    return subscription


async def _form_choices(api, gym_id) -> dict:
    return {
        "members": await MemberService(api).get_members_by_gym(gym_id),
        "packages": await PackageService(api).get_active_packages(gym_id),
        "trainers": await TrainerService(api).get_active_trainers(gym_id),
    }


async def _package_and_trainer(api, package_id, trainer_id):
    package = await PackageService(api).get_package(package_id)
    if package is None:
        raise ValueError("Package not found")
    trainer = None
    if trainer_id is not None:
        trainer = await TrainerService(api).get_trainer(trainer_id)
    return package, trainer


# ==================== LIST ====================

@router.get("", response_class=HTMLResponse)
async def list_subscriptions(request: Request, auth: BackOfficeSession, api: Api):
    pagination = Pagination.from_query(request.query_params, request.url.path)
    subscriptions = await SubscriptionService(api).get_subscriptions_by_gym(auth.gym_id)
    if pagination.search_text:
        subscriptions = [s for s in subscriptions if _matches(s, pagination.search_text)]

    return render(request, "subscriptions/list.html", {
        "subscriptions": pagination.slice(subscriptions),
        "pagination": pagination,
        "total_count": len(subscriptions),
        "total_pages": Pagination.total_pages(len(subscriptions), pagination.page_size),
    })


# ==================== CREATE ====================

@router.get("/new", response_class=HTMLResponse)
async def new_subscription(request: Request, auth: BackOfficeSession, api: Api, member_id: str = ""):
    choices = await _form_choices(api, auth.gym_id)
    return render(request, "subscriptions/form.html", {
        **choices,
        "selected_member": member_id,
        "today": date.today(),
    })


@router.post("")
async def create_subscription(request: Request, auth: BackOfficeSession, api: Api):
    data = await form_fields(request)
    try:
        form = parse_form(SubscriptionForm, data)
        package, trainer = await _package_and_trainer(api, form.package_id, form.trainer_id)
        payload = build_subscription(
            auth.gym_id, form.member_id, package, trainer, form.start_date, form.price_paid, form.notes
        )
        await SubscriptionService(api).create_subscription(payload)
    except (ValueError, ApiError) as e:
        flash_error(request, e, "Failed to create subscription")
        return redirect("/subscriptions/new")

    flash(request, "Subscription created successfully")
    return redirect("/subscriptions")


# ==================== EDIT / CANCEL ====================

@router.get("/{subscription_id}/edit", response_class=HTMLResponse)
async def edit_subscription(request: Request, subscription_id: int, auth: BackOfficeSession, api: Api):
    subscription = await _get_or_404(SubscriptionService(api), subscription_id)
    return render(request, "subscriptions/edit.html", {
        "subscription": subscription,
        "statuses": list(SubscriptionStatus),
    })


@router.post("/{subscription_id}")
async def update_subscription(request: Request, subscription_id: int, auth: BackOfficeSession, api: Api):
    data = await form_fields(request)
    try:
        form = parse_form(SubscriptionEditForm, data)
        update = SubscriptionUpdate(status=form.status, end_date=form.end_date, notes=form.notes)
        await SubscriptionService(api).update_subscription(subscription_id, update)
    except (ValueError, ApiError) as e:
        flash_error(request, e, "Failed to update subscription")
        return redirect(f"/subscriptions/{subscription_id}/edit")

    flash(request, "Subscription updated successfully")
    return redirect("/subscriptions")


@router.post("/{subscription_id}/cancel")
async def cancel_subscription(request: Request, subscription_id: int, auth: BackOfficeSession, api: Api):
    try:
        await SubscriptionService(api).cancel_subscription(subscription_id)
        flash(request, "Subscription cancelled successfully")
    except ApiError as e:
        flash_error(request, e, "Failed to cancel subscription")
    return redirect("/subscriptions")


# ==================== RENEW ====================

@router.get("/{subscription_id}/renew", response_class=HTMLResponse)
async def renew_page(request: Request, subscription_id: int, auth: BackOfficeSession, api: Api):
    subscription = await _get_or_404(SubscriptionService(api), subscription_id)
    choices = await _form_choices(api, auth.gym_id)
    return render(request, "subscriptions/renew.html", {
        **choices,
        "subscription": subscription,
        "default_start": default_renewal_start(subscription.end_date, date.today()),
    })


@router.post("/{subscription_id}/renew")
async def renew_subscription(request: Request, subscription_id: int, auth: BackOfficeSession, api: Api):
    data = await form_fields(request)
    service = SubscriptionService(api)
    try:
        old = await _get_or_404(service, subscription_id)
        form = parse_form(RenewSubscriptionForm, data)
        package, trainer = await _package_and_trainer(api, form.package_id, form.trainer_id)
        payload = build_subscription(
            auth.gym_id, old.member_id, package, trainer, form.start_date, form.price_paid, form.notes
        )
        await service.renew_subscription(subscription_id, payload)
        await service.update_subscription(subscription_id, SubscriptionUpdate(status=SubscriptionStatus.EXPIRED))
    except (ValueError, ApiError) as e:
        flash_error(request, e, "Failed to renew subscription")
        return redirect(f"/subscriptions/{subscription_id}/renew")

    logger.info(f"Subscription {subscription_id} renewed for member {old.member_id}")
    flash(request, "Subscription renewed and invoice created successfully")
    return redirect("/subscriptions")


# ==================== RECEIPT ====================

@router.get("/{subscription_id}/receipt")
async def membership_receipt(subscription_id: int, auth: BackOfficeSession, api: Api):
    subscription = await _get_or_404(SubscriptionService(api), subscription_id)
    gym = await GymService(api).get_gym(auth.gym_id)
    content = membership_receipt_pdf(subscription, gym_name=gym.name if gym else None)
    return file_response(content, f"membership-receipt-MEM-{subscription.id}.pdf", PDF_MEDIA_TYPE)
