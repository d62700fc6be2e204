from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

from app.core.http import ApiError
from app.core.session import flash
from app.deps import Api, BackOfficeSession
from app.schemas.forms import ExpenseCategoryForm, parse_form
from app.services.expenses import ExpenseCategoryService
from app.templating import render
from app.web import flash_error, form_fields, query_int, redirect

router = APIRouter(prefix="/expense-categories", tags=["Expense Categories"])


@router.get("", response_class=HTMLResponse)
async def list_categories(request: Request, auth: BackOfficeSession, api: Api):
    categories = await ExpenseCategoryService(api).get_categories_by_gym(auth.gym_id)
    editing = query_int(request.query_params.get("edit"))
    return render(request, "expenses/categories.html", {
        "categories": categories,
        "editing": next((c for c in categories if c.id == editing), None),
    })


@router.post("")
async def create_category(request: Request, auth: BackOfficeSession, api: Api):
    data = await form_fields(request)
    try:
        form = parse_form(ExpenseCategoryForm, data)
        await ExpenseCategoryService(api).create_category({**form.to_api(), "gymId": auth.gym_id})
    except (ValueError, ApiError) as e:
        flash_error(request, e, "Failed to create category")
        return redirect("/expense-categories")

    flash(request, "Category created successfully")
    return redirect("/expense-categories")


@router.post("/{category_id}")
async def update_category(request: Request, category_id: int, auth: BackOfficeSession, api: Api):
    data = await form_fields(request)
    try:
        form = parse_form(ExpenseCategoryForm, data)
        await ExpenseCategoryService(api).update_category(category_id, form.to_api())
    except (ValueError, ApiError) as e:
        flash_error(request, e, "Failed to update category")
        return redirect(f"/expense-categories?edit={category_id}")

    flash(request, "Category updated successfully")
    return redirect("/expense-categories")


@router.post("/{category_id}/delete")
async def delete_category(request: Request, category_id: int, auth: BackOfficeSession, api: Api):
    try:
        await ExpenseCategoryService(api).delete_category(category_id)
        flash(request, "Category deleted successfully")
    except ApiError as e:
        flash_error(request, e, "Failed to delete category")
    return redirect("/expense-categories")
