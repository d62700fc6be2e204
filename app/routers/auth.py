import logging

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

from app.core.http import ApiError
from app.core.permissions import LOGIN_PATH, landing_path_for
from app.core.security import roles_from_token
from app.core.session import AuthSession, clear_session, flash, store_session
from app.deps import Api, CurrentSession, OptionalSession
from app.schemas.forms import LoginForm, ResetPasswordForm, SignUpForm, UpdatePasswordForm, parse_form
from app.services.auth import AuthService
from app.templating import render
from app.utils.dates import TIMEZONES
from app.web import flash_error, form_fields, redirect

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.get("", response_class=HTMLResponse)
async def auth_page(request: Request, auth: OptionalSession, tab: str = "login"):
    if auth is not None:
        landing = landing_path_for(auth.roles)
        if landing:
            return redirect(landing)
    return render(request, "auth/login.html", {
        "tab": tab if tab in ("login", "signup", "reset") else "login",
        "timezones": TIMEZONES,
    })


@router.post("/login")
async def login(request: Request, api: Api):
    data = await form_fields(request)
    try:
        form = parse_form(LoginForm, data)
    except ValueError as e:
        flash(request, str(e), "error")
        return redirect(LOGIN_PATH)

    try:
        result = await AuthService(api).sign_in(form.email, form.password)
    except ApiError as e:
        logger.warning(f"Sign in failed for {form.email}: {e.message}")
        if "Invalid login" in (e.message or ""):
            message = "Invalid email or password"
        else:
            message = e.message or "Failed to sign in"
        flash(request, message, "error")
        return redirect(LOGIN_PATH)

    roles = roles_from_token(result.token)
    landing = landing_path_for(roles)
    if landing is None:
        clear_session(request)
        flash(request, "No valid roles assigned", "error")
        return redirect(LOGIN_PATH)

    store_session(request, AuthSession(token=result.token, user=result.user, profile=result.profile, roles=roles))
    logger.info(f"User {result.user.id} signed in with roles {roles}")
    flash(request, "Welcome back!")
    return redirect(landing)


@router.post("/signup")
async def signup(request: Request, api: Api):
    data = await form_fields(request)
    try:
        form = parse_form(SignUpForm, data)
        await AuthService(api).sign_up(form)
    except (ValueError, ApiError) as e:
        flash_error(request, e, "Failed to sign up")
        return redirect(f"{LOGIN_PATH}?tab=signup")

    flash(request, "Account created! Please verify your email.")
    return redirect(LOGIN_PATH)


@router.post("/reset-password")
async def reset_password(request: Request, api: Api):
    data = await form_fields(request)
    try:
        form = parse_form(ResetPasswordForm, data)
        await AuthService(api).reset_password(form.email, str(request.url_for("auth_page")))
    except (ValueError, ApiError) as e:
        flash_error(request, e, "Failed to send reset email")
        return redirect(f"{LOGIN_PATH}?tab=reset")

    flash(request, "Password reset instructions have been sent to your email")
    return redirect(LOGIN_PATH)


@router.get("/password", response_class=HTMLResponse)
async def password_page(request: Request, auth: CurrentSession):
    return render(request, "auth/password.html")


@router.post("/password")
async def update_password(request: Request, auth: CurrentSession, api: Api):
    data = await form_fields(request)
    try:
        form = parse_form(UpdatePasswordForm, data)
        await AuthService(api).update_password(form.old_password, form.new_password)
    except (ValueError, ApiError) as e:
        flash_error(request, e, "Failed to update password")
        return redirect("/auth/password")

    flash(request, "Password updated successfully")
    return redirect(landing_path_for(auth.roles) or LOGIN_PATH)


@router.post("/logout")
async def logout(request: Request, api: Api):
    await AuthService(api).sign_out()
    clear_session(request)
    flash(request, "Signed out successfully")
    return redirect(LOGIN_PATH)
