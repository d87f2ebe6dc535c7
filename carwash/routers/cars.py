"""
Car routes.
"""
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from fastapi.responses import RedirectResponse
from pydantic import ValidationError

from carwash.auth import AuthContext, require_auth
from carwash.client import BackendError
from carwash.forms import first_error, read_upload
from carwash.identifiers import generate_plate_number
from carwash.schemas import CarCreate
from carwash.templating import render
from carwash.toasts import error, success

router = APIRouter(prefix="/dashboard/cars", tags=["cars"])

PAGE = "/dashboard/cars"


@router.get("")
async def get_cars(
    request: Request,
    edit: Optional[str] = None,
    auth: AuthContext = Depends(require_auth)
):
    """
    List cars with the add form, or the edit form when `edit` names a car.
    """
    try:
        cars = await auth.backend.list_cars()
    except BackendError as exc:
        cars = []
        auth.toast(error(exc.describe("Failed to fetch cars")))

    editing = next((car for car in cars if car.id == edit), None) if edit else None
    if editing:
        form = CarCreate.model_validate(editing.model_dump())
    else:
        form = CarCreate(plate_number=generate_plate_number())

    return render(request, "cars.html", auth, {"cars": cars, "editing": editing, "form": form})


async def _save_car(auth: AuthContext, car_id: Optional[str], fields: dict, image: Optional[UploadFile]):
    try:
        car = CarCreate(**fields)
        upload = await read_upload(image)
        payload = car.model_dump(by_alias=True)
        if car_id:
            await auth.backend.update_car(car_id, payload, upload)
            auth.toast(success("Car updated successfully"))
        else:
            await auth.backend.create_car(payload, upload)
            auth.toast(success("Car added successfully"))
    except ValidationError as exc:
        auth.toast(error(first_error(exc)))
    except BackendError as exc:
        auth.toast(error(exc.describe("Failed to save car")))

    return RedirectResponse(PAGE, status_code=303)


@router.post("")
async def create_car(
    plate_number: str = Form(..., alias="plateNumber"),
    car_type: str = Form("", alias="carType"),
    car_size: str = Form("", alias="carSize"),
    driver_name: str = Form("", alias="driverName"),
    phone_number: str = Form("", alias="phoneNumber"),
    image: Optional[UploadFile] = File(None),
    auth: AuthContext = Depends(require_auth)
):
    """
    Register a new car.
    """
    fields = {
        "plate_number": plate_number, "car_type": car_type, "car_size": car_size,
        "driver_name": driver_name, "phone_number": phone_number,
    }
    return await _save_car(auth, None, fields, image)


@router.post("/{car_id}")
async def update_car(
    car_id: str,
    plate_number: str = Form(..., alias="plateNumber"),
    car_type: str = Form("", alias="carType"),
    car_size: str = Form("", alias="carSize"),
    driver_name: str = Form("", alias="driverName"),
    phone_number: str = Form("", alias="phoneNumber"),
    image: Optional[UploadFile] = File(None),
    auth: AuthContext = Depends(require_auth)
):
    """
    Update a car.
    """
    fields = {
        "plate_number": plate_number, "car_type": car_type, "car_size": car_size,
        "driver_name": driver_name, "phone_number": phone_number,
    }
    return await _save_car(auth, car_id, fields, image)


@router.post("/{car_id}/delete")
async def delete_car(car_id: str, auth: AuthContext = Depends(require_auth)):
    """
    Delete a car.
    """
    try:
        await auth.backend.delete_car(car_id)
        auth.toast(success("Car deleted successfully"))
    except BackendError as exc:
        auth.toast(error(exc.describe("Failed to delete car")))

    return RedirectResponse(PAGE, status_code=303)
