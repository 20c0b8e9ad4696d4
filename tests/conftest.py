from typing import Any, AsyncGenerator, Dict, List, Optional, Tuple

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from app.clients.admissions_backend import AdmissionsBackendClient, get_admissions_client
from app.core.schemas import FeeStructure
from app.main import app


class FakeAdmissionsBackend:
    """In-memory stand-in for the admissions backend, served through httpx.MockTransport."""

    def __init__(self) -> None:
        self.routes: Dict[Tuple[str, str], Tuple[int, Any]] = {}
        self.requests: List[httpx.Request] = []

    def on(
        self,
        method: str,
        path: str,
        data: Any = None,
        status_code: int = 200,
        success: bool = True,
        message: str = "OK",
    ) -> None:
        self.routes[(method, path)] = (status_code, {"success": success, "message": message, "data": data})

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"success": False, "message": "Route not found"})
        status_code, body = route
        return httpx.Response(status_code, json=body)

    def last(self, method: str, path: str) -> Optional[httpx.Request]:
        for request in reversed(self.requests):
            if request.method == method and request.url.path == path:
                return request
        return None


def semester_fees(tuition: int = 17500) -> Dict[str, int]:
    return {
        "admissionFee": 5000,
        "examPermitRegFee": 2025,
        "specialFee": 2500,
        "tuitionFee": tuition,
        "others": 0,
    }


@pytest.fixture()
def snapshot_json() -> Dict[str, Any]:
    return {
        "academicYear": "2024-25",
        "type": "regular",
        "semesters": [
            {"semester": 1, "semesterName": "Semester 1", "fees": semester_fees(), "total": 27025},
            {"semester": 2, "semesterName": "Semester 2", "fees": semester_fees(), "total": 27025},
        ],
        "grandTotal": 54050,
        "hostelFee": 40000,
    }


@pytest.fixture()
def snapshot(snapshot_json: Dict[str, Any]) -> FeeStructure:
    return FeeStructure.model_validate(snapshot_json)


@pytest.fixture()
def backend() -> FakeAdmissionsBackend:
    return FakeAdmissionsBackend()


@pytest.fixture()
async def backend_client(backend: FakeAdmissionsBackend) -> AsyncGenerator[AdmissionsBackendClient, None]:
    async with httpx.AsyncClient(
        transport=httpx.MockTransport(backend.handle), base_url="http://backend"
    ) as http:
        yield AdmissionsBackendClient(http)


@pytest.fixture()
async def client(backend: FakeAdmissionsBackend) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client bound to the FastAPI app, with the backend replaced by the fake."""

    async def override_get_admissions_client() -> AsyncGenerator[AdmissionsBackendClient, None]:
        async with httpx.AsyncClient(
            transport=httpx.MockTransport(backend.handle), base_url="http://backend"
        ) as http:
            yield AdmissionsBackendClient(http)

    app.dependency_overrides[get_admissions_client] = override_get_admissions_client
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
