"""
Helpers shared by the page routers: post/redirect/get and form handling.
"""
import logging
from typing import Optional

from fastapi import Request, UploadFile
from fastapi.responses import RedirectResponse
from starlette import status

from app.core.http import ApiError
from app.core.session import flash

logger = logging.getLogger(__name__)


def redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=status.HTTP_303_SEE_OTHER)


async def form_fields(request: Request) -> dict:
    """Text fields of the posted form; for repeated names the last value wins"""
    form = await request.form()
    return {key: value for key, value in form.items() if isinstance(value, str)}


async def form_file(request: Request, name: str) -> Optional[UploadFile]:
    """Uploaded file for ``name``, or None when the input was left empty"""
    form = await request.form()
    upload = form.get(name)
    if upload is None or isinstance(upload, str) or not upload.filename:
        return None
    return upload


def flash_error(request: Request, exc: Exception, fallback: str = "Something went wrong") -> None:
    """
    Show a failed action as an error toast.

    Backend 401s are re-raised so the application handler can end the
    session.
    """
    if isinstance(exc, ApiError):
        if exc.is_unauthorized:
            raise exc
        message = exc.message or fallback
    else:
        message = str(exc) or fallback
    logger.info(f"{request.method} {request.url.path}: {message}")
    flash(request, message, "error")


def query_int(value: Optional[str]) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except ValueError:
        return None
