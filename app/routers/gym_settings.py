import logging

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import HTMLResponse

from app.core.http import ApiError
from app.core.session import flash
from app.deps import AdminSession, Api
from app.schemas.forms import GymForm, parse_form
from app.services.gyms import GymService
from app.templating import render
from app.utils.dates import TIMEZONES
from app.web import flash_error, form_fields, form_file, redirect

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/gym-settings", tags=["Gym Settings"])

ALLOWED_LOGO_TYPES = ("image/png", "image/jpeg", "image/gif", "image/webp", "image/svg+xml")


async def _get_gym_or_404(service: GymService, gym_id):
    gym = await service.get_gym(gym_id)
    if gym is None:
        raise HTTPException(status_code=404, detail="Gym not found")
    return gym


@router.get("", response_class=HTMLResponse)
async def gym_settings(request: Request, auth: AdminSession, api: Api):
    gym = await _get_gym_or_404(GymService(api), auth.gym_id)
    return render(request, "gym_settings.html", {"gym": gym, "timezones": TIMEZONES})


@router.post("")
async def update_gym(request: Request, auth: AdminSession, api: Api):
    data = await form_fields(request)
    service = GymService(api)
    try:
        form = parse_form(GymForm, data)
        if form.time_zone and form.time_zone not in TIMEZONES:
            raise ValueError("Unknown time zone")
        gym = await _get_gym_or_404(service, auth.gym_id)
        await service.update_gym(auth.gym_id, {**form.to_api(), "id": auth.gym_id, "logo": gym.logo})
    except (ValueError, ApiError) as e:
        flash_error(request, e, "Failed to update gym settings")
        return redirect("/gym-settings")

    flash(request, "Gym settings updated successfully")
    return redirect("/gym-settings")


@router.post("/logo")
async def upload_logo(request: Request, auth: AdminSession, api: Api):
    logo = await form_file(request, "logo")
    if logo is None:
        flash(request, "Please choose an image to upload", "error")
        return redirect("/gym-settings")
    if logo.content_type not in ALLOWED_LOGO_TYPES:
        flash(request, "Logo must be an image file", "error")
        return redirect("/gym-settings")

    service = GymService(api)
    try:
        gym = await _get_gym_or_404(service, auth.gym_id)
        url = await service.upload_logo(auth.gym_id, logo.filename, await logo.read(), logo.content_type)
        payload = gym.to_api()
        payload["logo"] = url
        await service.update_gym(auth.gym_id, payload)
    except ApiError as e:
        flash_error(request, e, "Failed to upload logo")
        return redirect("/gym-settings")

    logger.info(f"Logo updated for gym {auth.gym_id}")
    flash(request, "Logo uploaded successfully")
    return redirect("/gym-settings")
