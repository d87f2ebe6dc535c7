"""
HTTP client for the car wash backend REST API.
"""
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Type, TypeVar, Union

import httpx
from pydantic import BaseModel, ValidationError

from carwash.schemas import (
    Activity, Car, Credentials, Package, Payment, Service, Session, User, UserDetails,
)

logger = logging.getLogger(__name__)

# (filename, content, content type) as accepted by httpx
Upload = Tuple[str, bytes, str]

# Cookie as stored on the web session: name, value, domain, path
StoredCookie = Dict[str, str]

M = TypeVar("M", bound=BaseModel)

UNEXPECTED_RESPONSE = "Unexpected response from server"


class BackendError(Exception):
    """A backend request failed or answered with an error status."""

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message or "Backend request failed")
        self.message = message
        self.status_code = status_code

    def describe(self, fallback: str) -> str:
        """Backend message when it sent one, otherwise the fallback."""
        return self.message or fallback


def _error_message(response: httpx.Response) -> Optional[str]:
    try:
        payload = response.json()
    except ValueError:
        return None
    if isinstance(payload, dict):
        message = payload.get("message") or payload.get("detail")
        if isinstance(message, str) and message:
            return message
    return None


def _multipart(fields: Dict[str, Any], uploads: Dict[str, Optional[Upload]]) -> Dict[str, Any]:
    parts: Dict[str, Any] = {
        name: (None, str(value)) for name, value in fields.items() if value is not None
    }
    for name, upload in uploads.items():
        if upload is not None:
            parts[name] = upload
    return parts


def _validate(model: Type[M], data: Any) -> M:
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        logger.warning("Backend sent a malformed %s: %s", model.__name__, exc)
        raise BackendError(UNEXPECTED_RESPONSE) from exc


def _cookie_domain(base_url: str) -> str:
    """Domain the cookie jar files the backend's host-only cookies under."""
    host = httpx.URL(base_url).host
    # http.cookiejar keys dotless hosts such as localhost as "<host>.local"
    return host if "." in host else f"{host}.local"


class BackendClient:
    """Async client bound to one browser's backend cookies."""

    def __init__(
        self,
        base_url: str,
        *,
        cookies: Union[Mapping[str, str], Iterable[StoredCookie], None] = None,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        jar = httpx.Cookies()
        if isinstance(cookies, Mapping):
            cookies = [{"name": name, "value": value} for name, value in cookies.items()]
        default_domain = _cookie_domain(base_url)
        for cookie in cookies or []:
            jar.set(
                cookie["name"],
                cookie["value"],
                domain=cookie.get("domain") or default_domain,
                path=cookie.get("path") or "/",
            )

        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/") + "/",
            cookies=jar,
            timeout=timeout,
            transport=transport,
        )

    @property
    def cookies(self) -> Dict[str, str]:
        return {cookie.name: cookie.value for cookie in self._client.cookies.jar}

    def cookie_state(self) -> List[StoredCookie]:
        """The cookie jar in the form kept on the web session."""
        return [
            {"name": cookie.name, "value": cookie.value, "domain": cookie.domain, "path": cookie.path}
            for cookie in self._client.cookies.jar
        ]

    def clear_cookies(self) -> None:
        self._client.cookies.clear()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    async def _send(self, method: str, path: str, **kwargs) -> httpx.Response:
        logger.debug("%s %s", method, path)
        try:
            response = await self._client.request(method, path.lstrip("/"), **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("Backend unreachable on %s %s: %s", method, path, exc)
            raise BackendError(status_code=None) from exc

        if response.is_error:
            message = _error_message(response)
            logger.warning("Backend %s %s -> %s %s", method, path, response.status_code, message or "")
            raise BackendError(message, response.status_code)
        return response

    async def _json(self, method: str, path: str, **kwargs) -> Any:
        response = await self._send(method, path, **kwargs)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise BackendError(UNEXPECTED_RESPONSE, response.status_code) from exc

    async def _record(self, model: Type[M], path: str) -> M:
        return _validate(model, await self._json("GET", path))

    async def _records(self, model: Type[M], path: str) -> List[M]:
        data = await self._json("GET", path)
        if data is None:
            return []
        if not isinstance(data, list):
            logger.warning("Backend sent %s instead of a list for %s", type(data).__name__, path)
            raise BackendError(UNEXPECTED_RESPONSE)
        return [_validate(model, item) for item in data]

    # Auth

    async def me(self) -> User:
        return await self._record(User, "/auth/me")

    async def login(self, username: str, password: str) -> None:
        credentials = Credentials(username=username, password=password)
        await self._json("POST", "/auth/login", json=credentials.model_dump())

    async def register(self, username: str, password: str) -> None:
        credentials = Credentials(username=username, password=password)
        await self._json("POST", "/auth/register", json=credentials.model_dump())

    async def google_login(self, credential: str) -> None:
        await self._json("POST", "/auth/login/google", json={"credential": credential})

    async def logout(self) -> None:
        await self._json("POST", "/auth/logout")

    async def edit_profile(self, fields: Dict[str, Any], profile: Optional[Upload] = None) -> User:
        data = await self._json("PUT", "/auth/edit-profile", files=_multipart(fields, {"profile": profile}))
        return _validate(User, data.get("user") if isinstance(data, dict) else None)

    async def list_sessions(self) -> List[Session]:
        return await self._records(Session, "/auth/sessions")

    async def revoke_session(self, session_id: str) -> None:
        await self._json("DELETE", f"/auth/sessions/{session_id}")

    async def revoke_all_sessions(self) -> None:
        await self._json("DELETE", "/auth/sessions")

    async def list_users(self) -> List[User]:
        return await self._records(User, "/auth/admin/users")

    async def user_details(self, user_id: str) -> UserDetails:
        return await self._record(UserDetails, f"/auth/users/{user_id}/details")

    # Cars

    async def list_cars(self) -> List[Car]:
        return await self._records(Car, "/car")

    async def create_car(self, fields: Dict[str, Any], image: Optional[Upload] = None) -> None:
        await self._json("POST", "/car", files=_multipart(fields, {"image": image}))

    async def update_car(self, car_id: str, fields: Dict[str, Any], image: Optional[Upload] = None) -> None:
        await self._json("PUT", f"/car/{car_id}", files=_multipart(fields, {"image": image}))

    async def delete_car(self, car_id: str) -> None:
        await self._json("DELETE", f"/car/{car_id}")

    # Packages

    async def list_packages(self) -> List[Package]:
        return await self._records(Package, "/package")

    async def create_package(self, payload: Dict[str, Any]) -> None:
        await self._json("POST", "/package", json=payload)

    async def update_package(self, package_id: str, payload: Dict[str, Any]) -> None:
        await self._json("PUT", f"/package/{package_id}", json=payload)

    async def delete_package(self, package_id: str) -> None:
        await self._json("DELETE", f"/package/{package_id}")

    # Service records

    async def list_services(self) -> List[Service]:
        return await self._records(Service, "/service-package")

    async def create_service(self, payload: Dict[str, Any]) -> None:
        await self._json("POST", "/service-package", json=payload)

    async def update_service(self, service_id: str, payload: Dict[str, Any]) -> None:
        await self._json("PUT", f"/service-package/{service_id}", json=payload)

    async def delete_service(self, service_id: str) -> None:
        await self._json("DELETE", f"/service-package/{service_id}")

    # Payments

    async def list_payments(self) -> List[Payment]:
        return await self._records(Payment, "/payment")

    async def create_payment(self, payload: Dict[str, Any]) -> None:
        await self._json("POST", "/payment", json=payload)

    async def delete_payment(self, payment_id: str) -> None:
        await self._json("DELETE", f"/payment/{payment_id}")

    async def payment_invoice(self, payment_id: str) -> bytes:
        response = await self._send("GET", f"/payment/{payment_id}/invoice")
        return response.content

    # Activity

    async def list_activities(self) -> List[Activity]:
        return await self._records(Activity, "/activities")
