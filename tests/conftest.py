"""
Shared test configuration.

The app talks to an in-memory fake of the car wash backend (and of Google's
OAuth endpoints) through an httpx mock transport, so no server is needed.
"""
import json
import os
import re
import secrets
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from urllib.parse import parse_qs

# Settings are read at import time, so configure them before the app loads
_TMP_DIR = Path(tempfile.mkdtemp(prefix="carwash-tests-"))
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TMP_DIR / 'sessions.db'}"
os.environ["API_URL"] = "http://backend.test/api"
os.environ["API_ASSET_URL"] = "http://backend.test"
os.environ["GOOGLE_CLIENT_ID"] = "test-client-id"
os.environ["GOOGLE_CLIENT_SECRET"] = "test-client-secret"
os.environ["ACTIVITIES_PER_PAGE"] = "10"

import httpx  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from carwash.auth import get_http_transport  # noqa: E402
from carwash.main import app  # noqa: E402

GOOGLE_ACCESS_TOKEN = "google-access-token"
GOOGLE_ID_TOKEN = "good-id-token"
INVOICE_PDF = b"%PDF-1.4 fake invoice"


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def parse_multipart(request: httpx.Request):
    """Split a multipart body into plain fields and (filename, content) files."""
    boundary = request.headers["content-type"].split("boundary=")[1].encode()
    fields, files = {}, {}
    for part in request.content.split(b"--" + boundary):
        head, sep, body = part.partition(b"\r\n\r\n")
        if not sep:
            continue
        name = re.search(rb'name="([^"]*)"', head)
        if not name:
            continue
        if body.endswith(b"\r\n"):
            body = body[:-2]
        filename = re.search(rb'filename="([^"]*)"', head)
        if filename:
            files[name.group(1).decode()] = (filename.group(1).decode(), body)
        else:
            fields[name.group(1).decode()] = body.decode()
    return fields, files


def _json_body(request: httpx.Request) -> dict:
    return json.loads(request.content) if request.content else {}


class FakeBackend:
    """In-memory stand-in for the REST API, cookie auth included."""

    def __init__(self):
        self._counter = 0
        self.users = {}
        self.passwords = {}
        self.tokens = {}
        self.sessions = []
        self.cars = []
        self.packages = []
        self.services = []
        self.payments = []
        self.activities = []
        self.failures = {}
        self.requests = []

        self.admin = self.add_user("admin", "admin123", role="admin", email="admin@cax.rw")
        self.alice = self.add_user("alice", "secret1", email="alice@cax.rw", fullName="Alice Uwase")

        # (method, path pattern, handler, signed in user required)
        self.routes = [
            ("POST", r"/auth/login", self.login, False),
            ("POST", r"/auth/register", self.register, False),
            ("POST", r"/auth/login/google", self.google_login, False),
            ("POST", r"/auth/logout", self.logout, True),
            ("GET", r"/auth/me", self.me, True),
            ("PUT", r"/auth/edit-profile", self.edit_profile, True),
            ("GET", r"/auth/sessions", self.list_sessions, True),
            ("DELETE", r"/auth/sessions", self.delete_all_sessions, True),
            ("DELETE", r"/auth/sessions/([^/]+)", self.delete_session, True),
            ("GET", r"/auth/admin/users", self.list_users, True),
            ("GET", r"/auth/users/([^/]+)/details", self.user_details, True),
            ("GET", r"/car", self.list_cars, True),
            ("POST", r"/car", self.create_car, True),
            ("PUT", r"/car/([^/]+)", self.update_car, True),
            ("DELETE", r"/car/([^/]+)", self.delete_car, True),
            ("GET", r"/package", self.list_packages, True),
            ("POST", r"/package", self.create_package, True),
            ("PUT", r"/package/([^/]+)", self.update_package, True),
            ("DELETE", r"/package/([^/]+)", self.delete_package, True),
            ("GET", r"/service-package", self.list_services, True),
            ("POST", r"/service-package", self.create_service, True),
            ("PUT", r"/service-package/([^/]+)", self.update_service, True),
            ("DELETE", r"/service-package/([^/]+)", self.delete_service, True),
            ("GET", r"/payment", self.list_payments, True),
            ("POST", r"/payment", self.create_payment, True),
            ("DELETE", r"/payment/([^/]+)", self.delete_payment, True),
            ("GET", r"/payment/([^/]+)/invoice", self.invoice, True),
            ("GET", r"/activities", self.list_activities, True),
        ]

    # Helpers

    def next_id(self) -> str:
        self._counter += 1
        return f"{self._counter:024x}"

    def add_user(self, username, password, role="user", **extra):
        user = {"_id": self.next_id(), "username": username, "role": role, "createdAt": now_iso(), **extra}
        self.users[user["_id"]] = user
        self.passwords[user["_id"]] = password
        return user

    def fail(self, method, path, status=500, message=None):
        """Make the next calls to method/path answer with an error."""
        self.failures[(method, path)] = (status, message)

    def log(self, title, description=None):
        self.activities.append(
            {"_id": self.next_id(), "title": title, "description": description, "createdAt": now_iso()}
        )

    def paths(self):
        return [(r.method, r.url.path) for r in self.requests]

    def _by_username(self, username):
        return next((u for u in self.users.values() if u["username"] == username), None)

    def _current_user(self, request):
        cookies = {}
        for part in request.headers.get("cookie", "").split(";"):
            name, _, value = part.strip().partition("=")
            if name:
                cookies[name] = value
        return self.users.get(self.tokens.get(cookies.get("token")))

    def _token(self, request):
        for part in request.headers.get("cookie", "").split(";"):
            name, _, value = part.strip().partition("=")
            if name == "token":
                return value
        return None

    def _sign_in(self, user, status=200):
        token = secrets.token_hex(8)
        self.tokens[token] = user["_id"]
        self.sessions.append({
            "_id": self.next_id(),
            "user": user["_id"],
            "token": token,
            "sessionId": secrets.token_hex(4),
            "ip": "127.0.0.1",
            "location": "Kigali, Rwanda",
            "device": "Desktop",
            "platform": "Linux",
            "browser": "Chrome",
            "createdAt": now_iso(),
            "lastActive": now_iso(),
        })
        return httpx.Response(
            status,
            json={"message": "Signed in", "user": user},
            headers={"set-cookie": f"token={token}; Path=/; HttpOnly"},
        )

    @staticmethod
    def _not_found(what):
        return httpx.Response(404, json={"message": f"{what} not found"})

    @staticmethod
    def _find(records, record_id):
        return next((r for r in records if r["_id"] == record_id), None)

    def _populated_service(self, service):
        user = self.users.get(service["user"], {})
        return {
            **service,
            "car": self._find(self.cars, service["car"]) or service["car"],
            "package": self._find(self.packages, service["package"]) or service["package"],
            "user": {"_id": user.get("_id"), "username": user.get("username")},
        }

    def _populated_payment(self, payment):
        service = self._find(self.services, payment["servicePackage"])
        return {
            **payment,
            "servicePackage": self._populated_service(service) if service else payment["servicePackage"],
        }

    def _public_session(self, session):
        return {k: v for k, v in session.items() if k != "token"}

    # Transport entry point

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.host == "oauth2.googleapis.com":
            return self.google(request)

        path = request.url.path
        if path.startswith("/api"):
            path = path[len("/api"):]
        if (request.method, path) in self.failures:
            status, message = self.failures[(request.method, path)]
            return httpx.Response(status, json={"message": message} if message else {})

        for method, pattern, handler, signed_in in self.routes:
            match = re.fullmatch(pattern, path)
            if method != request.method or not match:
                continue
            user = self._current_user(request)
            if signed_in and user is None:
                return httpx.Response(401, json={"message": "Not authenticated"})
            return handler(request, user, *match.groups())
        return httpx.Response(404, json={"message": "Route not found"})

    # Auth

    def login(self, request, user):
        body = _json_body(request)
        user = self._by_username(body.get("username"))
        if user is None or self.passwords[user["_id"]] != body.get("password"):
            return httpx.Response(401, json={"message": "Invalid credentials"})
        return self._sign_in(user)

    def register(self, request, user):
        body = _json_body(request)
        if self._by_username(body.get("username")):
            return httpx.Response(400, json={"message": "Username already exists"})
        return self._sign_in(self.add_user(body["username"], body["password"]), status=201)

    def google_login(self, request, user):
        credential = _json_body(request).get("credential")
        if credential not in (GOOGLE_ACCESS_TOKEN, GOOGLE_ID_TOKEN):
            return httpx.Response(401, json={"message": "Invalid Google credential"})
        user = self._by_username("google.user") or self.add_user(
            "google.user", secrets.token_hex(8), provider="google", email="google.user@example.com"
        )
        return self._sign_in(user)

    def logout(self, request, user):
        token = self._token(request)
        self.tokens.pop(token, None)
        self.sessions = [s for s in self.sessions if s["token"] != token]
        return httpx.Response(
            200,
            json={"message": "Logged out"},
            headers={"set-cookie": "token=; Path=/; Max-Age=0"},
        )

    def me(self, request, user):
        return httpx.Response(200, json=user)

    def edit_profile(self, request, user):
        fields, files = parse_multipart(request)
        for name in ("username", "email", "fullName"):
            if name in fields:
                user[name] = fields[name]
        if "profile" in files:
            user["profileImage"] = f"/uploads/profiles/{files['profile'][0]}"
        return httpx.Response(200, json={"message": "Profile updated", "user": user})

    def list_sessions(self, request, user):
        mine = [self._public_session(s) for s in self.sessions if s["user"] == user["_id"]]
        return httpx.Response(200, json=mine)

    def delete_session(self, request, user, session_id):
        session = self._find(self.sessions, session_id)
        if session is None or session["user"] != user["_id"]:
            return self._not_found("Session")
        self.sessions.remove(session)
        self.tokens.pop(session["token"], None)
        return httpx.Response(200, json={"message": "Session removed"})

    def delete_all_sessions(self, request, user):
        for session in [s for s in self.sessions if s["user"] == user["_id"]]:
            self.sessions.remove(session)
            self.tokens.pop(session["token"], None)
        return httpx.Response(200, json={"message": "All sessions removed"})

    def list_users(self, request, user):
        if user["role"] != "admin":
            return httpx.Response(403, json={"message": "Access denied"})
        return httpx.Response(200, json=list(self.users.values()))

    def user_details(self, request, user, user_id):
        if user["role"] != "admin":
            return httpx.Response(403, json={"message": "Access denied"})
        target = self.users.get(user_id)
        if target is None:
            return self._not_found("User")
        owned = lambda records: [r for r in records if r.get("user") == user_id]  # noqa: E731
        return httpx.Response(200, json={
            "user": target,
            "cars": owned(self.cars),
            "packages": owned(self.packages),
            "services": [self._populated_service(s) for s in owned(self.services)],
            "payments": [self._populated_payment(p) for p in owned(self.payments)],
            "sessions": [self._public_session(s) for s in owned(self.sessions)],
        })

    # Cars

    def list_cars(self, request, user):
        return httpx.Response(200, json=self.cars)

    def _car_fields(self, request, car):
        fields, files = parse_multipart(request)
        for name in ("plateNumber", "carType", "carSize", "driverName", "phoneNumber"):
            if name in fields:
                car[name] = fields[name]
        if "image" in files:
            car["image"] = f"/uploads/cars/{files['image'][0]}"
        return car

    def create_car(self, request, user):
        car = self._car_fields(request, {"_id": self.next_id(), "user": user["_id"], "createdAt": now_iso()})
        if not car.get("plateNumber"):
            return httpx.Response(400, json={"message": "Plate number is required"})
        if any(c["plateNumber"] == car["plateNumber"] for c in self.cars):
            return httpx.Response(400, json={"message": "Car with this plate number already exists"})
        self.cars.append(car)
        self.log("Car added", car["plateNumber"])
        return httpx.Response(201, json=car)

    def update_car(self, request, user, car_id):
        car = self._find(self.cars, car_id)
        if car is None:
            return self._not_found("Car")
        self._car_fields(request, car)
        return httpx.Response(200, json=car)

    def delete_car(self, request, user, car_id):
        car = self._find(self.cars, car_id)
        if car is None:
            return self._not_found("Car")
        self.cars.remove(car)
        return httpx.Response(200, json={"message": "Car deleted"})

    # Packages

    def list_packages(self, request, user):
        return httpx.Response(200, json=self.packages)

    def create_package(self, request, user):
        package = {"_id": self.next_id(), "user": user["_id"], "createdAt": now_iso(), **_json_body(request)}
        self.packages.append(package)
        self.log("Package created", package["packageName"])
        return httpx.Response(201, json=package)

    def update_package(self, request, user, package_id):
        package = self._find(self.packages, package_id)
        if package is None:
            return self._not_found("Package")
        package.update(_json_body(request))
        return httpx.Response(200, json=package)

    def delete_package(self, request, user, package_id):
        package = self._find(self.packages, package_id)
        if package is None:
            return self._not_found("Package")
        self.packages.remove(package)
        return httpx.Response(200, json={"message": "Package deleted"})

    # Service records

    def list_services(self, request, user):
        return httpx.Response(200, json=[self._populated_service(s) for s in self.services])

    def create_service(self, request, user):
        service = {"_id": self.next_id(), "user": user["_id"], "createdAt": now_iso(), **_json_body(request)}
        self.services.append(service)
        self.log("Service recorded", service["recordNumber"])
        return httpx.Response(201, json=service)

    def update_service(self, request, user, service_id):
        service = self._find(self.services, service_id)
        if service is None:
            return self._not_found("Service record")
        service.update(_json_body(request))
        return httpx.Response(200, json=service)

    def delete_service(self, request, user, service_id):
        service = self._find(self.services, service_id)
        if service is None:
            return self._not_found("Service record")
        self.services.remove(service)
        return httpx.Response(200, json={"message": "Service record deleted"})

    # Payments

    def list_payments(self, request, user):
        return httpx.Response(200, json=[self._populated_payment(p) for p in self.payments])

    def create_payment(self, request, user):
        payment = {"_id": self.next_id(), "user": user["_id"], "createdAt": now_iso(), **_json_body(request)}
        self.payments.append(payment)
        self.log("Payment recorded", payment["paymentNumber"])
        return httpx.Response(201, json=payment)

    def delete_payment(self, request, user, payment_id):
        payment = self._find(self.payments, payment_id)
        if payment is None:
            return self._not_found("Payment")
        self.payments.remove(payment)
        return httpx.Response(200, json={"message": "Payment deleted"})

    def invoice(self, request, user, payment_id):
        if self._find(self.payments, payment_id) is None:
            return self._not_found("Payment")
        return httpx.Response(200, content=INVOICE_PDF, headers={"content-type": "application/pdf"})

    # Activity

    def list_activities(self, request, user):
        return httpx.Response(200, json=self.activities)

    # Google

    def google(self, request):
        if request.url.path == "/token":
            form = parse_qs(request.content.decode())
            if form.get("code") != ["good-code"]:
                return httpx.Response(400, json={"error": "invalid_grant"})
            return httpx.Response(200, json={"access_token": GOOGLE_ACCESS_TOKEN, "token_type": "Bearer"})
        if request.url.path == "/tokeninfo":
            id_token = request.url.params.get("id_token")
            if id_token == GOOGLE_ID_TOKEN:
                return httpx.Response(200, json={"aud": "test-client-id", "email": "google.user@example.com"})
            if id_token == "foreign-id-token":
                return httpx.Response(200, json={"aud": "another-client-id"})
            return httpx.Response(400, json={"error": "invalid_token"})
        return httpx.Response(404)


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def transport(backend):
    return httpx.MockTransport(backend.handle)


@pytest.fixture
def client(transport):
    app.dependency_overrides[get_http_transport] = lambda: transport
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def sign_in(test_client, username, password):
    response = test_client.post("/auth/login", data={"username": username, "password": password})
    assert response.status_code == 200
    return test_client


@pytest.fixture
def signed_in(client):
    """Client signed in as a regular user."""
    return sign_in(client, "alice", "secret1")


@pytest.fixture
def admin_client(client):
    """Client signed in as an admin."""
    return sign_in(client, "admin", "admin123")
