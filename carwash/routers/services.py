"""
Service record routes.
"""
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import RedirectResponse
from pydantic import ValidationError

from carwash.auth import AuthContext, require_auth
from carwash.client import BackendError
from carwash.forms import first_error
from carwash.identifiers import generate_service_number
from carwash.schemas import ServiceCreate
from carwash.templating import render
from carwash.toasts import error, success

router = APIRouter(prefix="/dashboard/services", tags=["services"])

PAGE = "/dashboard/services"


@router.get("")
async def get_services(
    request: Request,
    edit: Optional[str] = None,
    auth: AuthContext = Depends(require_auth)
):
    """
    List service records together with the cars and packages to pick from.
    """
    services = await auth.fetch_list(auth.backend.list_services, "Failed to fetch data")
    cars = await auth.fetch_list(auth.backend.list_cars, "Failed to fetch data")
    packages = await auth.fetch_list(auth.backend.list_packages, "Failed to fetch data")

    editing = next((s for s in services if s.id == edit), None) if edit else None
    if editing:
        form = {
            "record_number": editing.record_number,
            "service_date": editing.service_date[:10],
            "car": editing.car.id if editing.car else "",
            "package": editing.package.id if editing.package else "",
        }
    else:
        form = {
            "record_number": generate_service_number(),
            "service_date": date.today().isoformat(),
            "car": "",
            "package": "",
        }

    context = {"services": services, "cars": cars, "packages": packages, "editing": editing, "form": form}
    return render(request, "services.html", auth, context)


async def _save_service(auth: AuthContext, service_id: Optional[str], fields: dict):
    try:
        payload = ServiceCreate(**fields).model_dump(by_alias=True)
        if service_id:
            await auth.backend.update_service(service_id, payload)
            auth.toast(success("Service record updated successfully"))
        else:
            await auth.backend.create_service(payload)
            auth.toast(success("Service record created successfully"))
    except ValidationError as exc:
        auth.toast(error(first_error(exc)))
    except BackendError as exc:
        auth.toast(error(exc.describe("Failed to save service record")))

    return RedirectResponse(PAGE, status_code=303)


@router.post("")
async def create_service(
    record_number: str = Form(..., alias="recordNumber"),
    service_date: str = Form(..., alias="serviceDate"),
    car: str = Form(...),
    package: str = Form(...),
    auth: AuthContext = Depends(require_auth)
):
    """
    Log a new service record.
    """
    fields = {"record_number": record_number, "service_date": service_date, "car": car, "package": package}
    return await _save_service(auth, None, fields)


@router.post("/{service_id}")
async def update_service(
    service_id: str,
    record_number: str = Form(..., alias="recordNumber"),
    service_date: str = Form(..., alias="serviceDate"),
    car: str = Form(...),
    package: str = Form(...),
    auth: AuthContext = Depends(require_auth)
):
    """
    Update a service record.
    """
    fields = {"record_number": record_number, "service_date": service_date, "car": car, "package": package}
    return await _save_service(auth, service_id, fields)


@router.post("/{service_id}/delete")
async def delete_service(service_id: str, auth: AuthContext = Depends(require_auth)):
    """
    Delete a service record.
    """
    try:
        await auth.backend.delete_service(service_id)
        auth.toast(success("Service record deleted successfully"))
    except BackendError as exc:
        auth.toast(error(exc.describe("Failed to delete service record")))

    return RedirectResponse(PAGE, status_code=303)
