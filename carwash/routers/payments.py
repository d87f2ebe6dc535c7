"""
Payment routes.
"""
from datetime import date

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import RedirectResponse, Response
from pydantic import ValidationError

from carwash.auth import AuthContext, require_auth
from carwash.client import BackendError
from carwash.forms import first_error
from carwash.identifiers import generate_payment_number
from carwash.schemas import PaymentCreate, PaymentMethod, PaymentStatus
from carwash.templating import render
from carwash.toasts import error, success

router = APIRouter(prefix="/dashboard/payments", tags=["payments"])

PAGE = "/dashboard/payments"


@router.get("")
async def get_payments(request: Request, auth: AuthContext = Depends(require_auth)):
    """
    List payments with the form for recording a new one.
    """
    payments = await auth.fetch_list(auth.backend.list_payments, "Failed to fetch data")
    services = await auth.fetch_list(auth.backend.list_services, "Failed to fetch data")

    form = {
        "payment_number": generate_payment_number(),
        "amount_paid": "",
        "payment_date": date.today().isoformat(),
        "payment_method": "",
        "status": PaymentStatus.COMPLETED.value,
        "service_package": "",
    }
    context = {
        "payments": payments,
        "services": services,
        "form": form,
        "methods": list(PaymentMethod),
        "statuses": list(PaymentStatus),
    }
    return render(request, "payments.html", auth, context)


@router.post("")
async def create_payment(
    payment_number: str = Form(..., alias="paymentNumber"),
    amount_paid: str = Form(..., alias="amountPaid"),
    payment_date: str = Form(..., alias="paymentDate"),
    payment_method: str = Form(..., alias="paymentMethod"),
    status: str = Form(PaymentStatus.COMPLETED.value),
    service_package: str = Form(..., alias="servicePackage"),
    auth: AuthContext = Depends(require_auth)
):
    """
    Record a payment for a service record.
    """
    try:
        payment = PaymentCreate(
            payment_number=payment_number,
            amount_paid=amount_paid,
            payment_date=payment_date,
            payment_method=payment_method,
            status=status,
            service_package=service_package,
        )
        await auth.backend.create_payment(payment.model_dump(mode="json", by_alias=True))
        auth.toast(success("Payment recorded successfully"))
    except ValidationError as exc:
        auth.toast(error(first_error(exc)))
    except BackendError as exc:
        auth.toast(error(exc.describe("Failed to record payment")))

    return RedirectResponse(PAGE, status_code=303)


@router.post("/{payment_id}/delete")
async def delete_payment(payment_id: str, auth: AuthContext = Depends(require_auth)):
    """
    Delete a payment.
    """
    try:
        await auth.backend.delete_payment(payment_id)
        auth.toast(success("Payment deleted successfully"))
    except BackendError as exc:
        auth.toast(error(exc.describe("Failed to delete payment")))

    return RedirectResponse(PAGE, status_code=303)


@router.get("/{payment_id}/invoice")
async def download_invoice(payment_id: str, auth: AuthContext = Depends(require_auth)):
    """
    Download the backend-generated PDF invoice for a payment.
    """
    try:
        content = await auth.backend.payment_invoice(payment_id)
    except BackendError as exc:
        auth.toast(error(exc.describe("Failed to download invoice")))
        return RedirectResponse(PAGE, status_code=303)

    auth.toast(success("Invoice downloaded successfully"))
    return Response(
        content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="invoice_{payment_id}.pdf"'},
    )
