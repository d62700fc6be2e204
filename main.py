from fastapi import FastAPI, Request
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware
from contextlib import asynccontextmanager
import logging
from app.routers import (
    auth,
    dashboard,
    members,
    packages,
    subscriptions,
    trainers,
    attendance,
    invoices,
    staff,
    gym_settings,
    accounts,
    expense_categories,
    expenses,
    ledger,
    reports,
    portals,
)
from app.core.config import settings
from app.core.http import ApiError
from app.core.permissions import ACCESS_DENIED_TITLE, LOGIN_PATH
from app.core.session import clear_session, flash
from app.deps import RedirectRequired
from app.templating import render
from app.web import redirect

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

ERROR_TITLES = {
    403: ACCESS_DENIED_TITLE,
    404: "Page Not Found",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager for startup and shutdown events.
    """
    logger.info(f"Starting {settings.APP_NAME} web client...")
    logger.info(f"Backend API: {settings.API_BASE_URL}")

    yield

    logger.info(f"Shutting down {settings.APP_NAME} web client...")


app = FastAPI(
    title=settings.APP_NAME,
    description="Server-rendered administration site for the gym management API",
    version="1.0.0",
    lifespan=lifespan,
    debug=settings.DEBUG,
)

app.add_middleware(
    SessionMiddleware,
    secret_key=settings.SECRET_KEY,
    session_cookie=settings.SESSION_COOKIE,
    max_age=settings.SESSION_MAX_AGE,
    https_only=settings.SESSION_HTTPS_ONLY,
    same_site="lax",
)


# ==================== EXCEPTION HANDLERS ====================

@app.exception_handler(RedirectRequired)
async def redirect_required_handler(request: Request, exc: RedirectRequired):
    return redirect(exc.url)


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError):
    if exc.is_unauthorized:
        logger.warning(f"Backend rejected the session token on {request.url.path}")
        clear_session(request)
        flash(request, "Your session has expired. Please sign in again.", "error")
        return redirect(LOGIN_PATH)

    logger.warning(f"Backend error on {request.url.path}: {exc.status_code} {exc.message}")
    return render(request, "error.html", {
        "title": "Something went wrong",
        "message": exc.message,
    }, status_code=502)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return render(request, "error.html", {
        "title": ERROR_TITLES.get(exc.status_code, "Error"),
        "message": exc.detail,
    }, status_code=exc.status_code)


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "ok",
        "service": settings.APP_NAME,
        "api_base_url": settings.API_BASE_URL,
    }


app.include_router(auth.router)
app.include_router(dashboard.router)
app.include_router(members.router)
app.include_router(packages.router)
app.include_router(subscriptions.router)
app.include_router(trainers.router)
app.include_router(attendance.router)
app.include_router(invoices.router)
app.include_router(staff.router)
app.include_router(gym_settings.router)
app.include_router(accounts.router)
app.include_router(expense_categories.router)
app.include_router(expenses.router)
app.include_router(ledger.router)
app.include_router(reports.router)
app.include_router(portals.router)

if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host=settings.HOST, port=settings.PORT, reload=settings.DEBUG)
