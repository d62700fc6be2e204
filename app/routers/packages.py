from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import HTMLResponse

from app.core.http import ApiError
from app.core.session import flash
from app.deps import Api, BackOfficeSession
from app.schemas.forms import PackageForm, parse_form
from app.services.packages import PackageService
from app.templating import render
from app.utils.pagination import Pagination
from app.web import flash_error, form_fields, redirect

router = APIRouter(prefix="/packages", tags=["Packages"])


@router.get("", response_class=HTMLResponse)
async def list_packages(request: Request, auth: BackOfficeSession, api: Api):
    pagination = Pagination.from_query(request.query_params, request.url.path)
    page = await PackageService(api).get_packages_paginated(
        auth.gym_id, pagination.page_no, pagination.page_size, pagination.search_text
    )
    return render(request, "packages/list.html", {"page": page, "pagination": pagination})


@router.get("/new", response_class=HTMLResponse)
async def new_package(request: Request, auth: BackOfficeSession):
    return render(request, "packages/form.html", {"package": None})


@router.post("")
async def create_package(request: Request, auth: BackOfficeSession, api: Api):
    data = await form_fields(request)
    try:
        form = parse_form(PackageForm, data)
        await PackageService(api).create_package({**form.to_api(), "gymId": auth.gym_id})
    except (ValueError, ApiError) as e:
        flash_error(request, e, "Failed to create package")
        return redirect("/packages/new")

    flash(request, "Package created successfully")
    return redirect("/packages")


@router.get("/{package_id}/edit", response_class=HTMLResponse)
async def edit_package(request: Request, package_id: int, auth: BackOfficeSession, api: Api):
    package = await PackageService(api).get_package(package_id)
    if package is None:
        raise HTTPException(status_code=404, detail="Package not found")
    return render(request, "packages/form.html", {"package": package})


@router.post("/{package_id}")
async def update_package(request: Request, package_id: int, auth: BackOfficeSession, api: Api):
    data = await form_fields(request)
    try:
        form = parse_form(PackageForm, data)
        await PackageService(api).update_package(package_id, {**form.to_api(), "id": package_id, "gymId": auth.gym_id})
    except (ValueError, ApiError) as e:
        flash_error(request, e, "Failed to update package")
        return redirect(f"/packages/{package_id}/edit")

    flash(request, "Package updated successfully")
    return redirect("/packages")


@router.post("/{package_id}/status")
async def toggle_package_status(request: Request, package_id: int, auth: BackOfficeSession, api: Api):
    data = await form_fields(request)
    is_active = data.get("is_active") == "true"
    try:
        await PackageService(api).set_package_status(package_id, is_active)
        flash(request, f"Package {'activated' if is_active else 'deactivated'} successfully")
    except ApiError as e:
        flash_error(request, e, "Failed to update package status")
    return redirect("/packages")


@router.post("/{package_id}/delete")
async def delete_package(request: Request, package_id: int, auth: BackOfficeSession, api: Api):
    try:
        await PackageService(api).delete_package(package_id)
        flash(request, "Package deleted successfully")
    except ApiError as e:
        flash_error(request, e, "Failed to delete package")
    return redirect("/packages")
