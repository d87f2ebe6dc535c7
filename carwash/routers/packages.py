"""
Service package routes.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import RedirectResponse
from pydantic import ValidationError

from carwash.auth import AuthContext, require_auth
from carwash.client import BackendError
from carwash.forms import first_error
from carwash.identifiers import generate_package_number
from carwash.schemas import PackageCreate
from carwash.templating import render
from carwash.toasts import error, success

router = APIRouter(prefix="/dashboard/packages", tags=["packages"])

PAGE = "/dashboard/packages"


@router.get("")
async def get_packages(
    request: Request,
    edit: Optional[str] = None,
    auth: AuthContext = Depends(require_auth)
):
    """
    List packages with the create or edit form.
    """
    try:
        packages = await auth.backend.list_packages()
    except BackendError as exc:
        packages = []
        auth.toast(error(exc.describe("Failed to fetch packages")))

    editing = next((pkg for pkg in packages if pkg.id == edit), None) if edit else None
    if editing:
        form = {
            "package_number": editing.package_number or "",
            "package_name": editing.package_name,
            "package_description": editing.package_description or "",
            "package_price": editing.package_price,
        }
    else:
        form = {
            "package_number": generate_package_number(),
            "package_name": "",
            "package_description": "",
            "package_price": "",
        }

    return render(request, "packages.html", auth, {"packages": packages, "editing": editing, "form": form})


async def _save_package(auth: AuthContext, package_id: Optional[str], fields: dict):
    try:
        payload = PackageCreate(**fields).model_dump(by_alias=True)
        if package_id:
            await auth.backend.update_package(package_id, payload)
            auth.toast(success("Package updated successfully"))
        else:
            await auth.backend.create_package(payload)
            auth.toast(success("Package created successfully"))
    except ValidationError as exc:
        auth.toast(error(first_error(exc)))
    except BackendError as exc:
        auth.toast(error(exc.describe("Failed to save package")))

    return RedirectResponse(PAGE, status_code=303)


@router.post("")
async def create_package(
    package_number: str = Form(..., alias="packageNumber"),
    package_name: str = Form(..., alias="packageName"),
    package_description: str = Form("", alias="packageDescription"),
    package_price: str = Form(..., alias="packagePrice"),
    auth: AuthContext = Depends(require_auth)
):
    """
    Create a new package.
    """
    fields = {
        "package_number": package_number, "package_name": package_name,
        "package_description": package_description, "package_price": package_price,
    }
    return await _save_package(auth, None, fields)


@router.post("/{package_id}")
async def update_package(
    package_id: str,
    package_number: str = Form(..., alias="packageNumber"),
    package_name: str = Form(..., alias="packageName"),
    package_description: str = Form("", alias="packageDescription"),
    package_price: str = Form(..., alias="packagePrice"),
    auth: AuthContext = Depends(require_auth)
):
    """
    Update a package.
    """
    fields = {
        "package_number": package_number, "package_name": package_name,
        "package_description": package_description, "package_price": package_price,
    }
    return await _save_package(auth, package_id, fields)


@router.post("/{package_id}/delete")
async def delete_package(package_id: str, auth: AuthContext = Depends(require_auth)):
    """
    Delete a package.
    """
    try:
        await auth.backend.delete_package(package_id)
        auth.toast(success("Package deleted successfully"))
    except BackendError as exc:
        auth.toast(error(exc.describe("Failed to delete package")))

    return RedirectResponse(PAGE, status_code=303)
