"""Tests for the admissions backend client against a mocked transport."""

import json

import httpx
import pytest

from app.clients.admissions_backend import AdmissionsBackendClient, build_http_client
from app.core.config import settings
from app.core.exceptions import AdmissionsBackendError


@pytest.mark.asyncio
async def test_unwraps_fee_structure_envelope(backend, backend_client, snapshot_json) -> None:
    backend.on("GET", "/api/v1/fee-structures/fs1", {"feeStructure": {"id": "fs1", **snapshot_json}})

    structure = await backend_client.get_fee_structure("fs1")

    assert structure.id == "fs1"
    assert structure.grand_total == 54050
    assert [s.semester for s in structure.semesters] == [1, 2]


@pytest.mark.asyncio
async def test_list_drops_empty_filters_and_lowercases_booleans(backend, backend_client) -> None:
    backend.on(
        "GET",
        "/api/v1/fee-structures",
        {"feeStructures": [], "pagination": {"currentPage": 1, "totalPages": 0}},
    )

    result = await backend_client.list_fee_structures(page=1, type=None, isActive=True, search="")

    request = backend.last("GET", "/api/v1/fee-structures")
    assert dict(request.url.params) == {"page": "1", "isActive": "true"}
    assert result["fee_structures"] == []
    assert result["pagination"]["currentPage"] == 1


@pytest.mark.asyncio
async def test_missing_fee_assignment_is_none(backend, backend_client) -> None:
    backend.on("GET", "/api/v1/admin/students/s1/details", {"studentLogin": {"_id": "s1"}})

    assert await backend_client.get_fee_assignment("s1") is None


@pytest.mark.asyncio
async def test_customization_request_body(backend, backend_client, snapshot_json) -> None:
    backend.on(
        "PATCH",
        "/api/v1/admin/students/s1/update-fee-structure",
        {"_id": "fa1", "feeStructureSnapshot": snapshot_json, "customizations": []},
    )

    assignment = await backend_client.customize_semester_fees("s1", 2, {"tuitionFee": 10000}, "scholarship")

    request = backend.last("PATCH", "/api/v1/admin/students/s1/update-fee-structure")
    assert json.loads(request.content) == {
        "semester": 2,
        "feeCustomizations": {"tuitionFee": 10000},
        "reason": "scholarship",
    }
    assert assignment.id == "fa1"


@pytest.mark.asyncio
async def test_client_error_passes_status_through(backend, backend_client) -> None:
    backend.on("GET", "/api/v1/fee-structures/missing", None, status_code=404, success=False, message="Fee structure not found")

    with pytest.raises(AdmissionsBackendError) as exc:
        await backend_client.get_fee_structure("missing")

    assert exc.value.status_code == 404
    assert exc.value.message == "Fee structure not found"


@pytest.mark.asyncio
async def test_server_error_maps_to_bad_gateway(backend, backend_client) -> None:
    backend.on("GET", "/api/v1/fee-structures/academic-years", None, status_code=500, success=False, message="boom")

    with pytest.raises(AdmissionsBackendError) as exc:
        await backend_client.academic_years()

    assert exc.value.status_code == 502
    assert exc.value.upstream_status == 500


@pytest.mark.asyncio
async def test_unsuccessful_envelope_is_an_error(backend, backend_client) -> None:
    backend.on("GET", "/api/v1/fee-structures/academic-years", None, success=False, message="Failed to load")

    with pytest.raises(AdmissionsBackendError) as exc:
        await backend_client.academic_years()

    assert exc.value.status_code == 502
    assert exc.value.message == "Failed to load"


@pytest.mark.asyncio
async def test_malformed_record_maps_to_bad_gateway(backend, backend_client, snapshot_json) -> None:
    snapshot_json["semesters"][1]["fees"]["tuitionFee"] = -1
    backend.on("GET", "/api/v1/fee-structures/fs1", {"feeStructure": snapshot_json})
    backend.on("GET", "/api/v1/fee-structures/fs2", {"somethingElse": {}})

    with pytest.raises(AdmissionsBackendError) as negative:
        await backend_client.get_fee_structure("fs1")
    with pytest.raises(AdmissionsBackendError) as missing:
        await backend_client.get_fee_structure("fs2")

    assert negative.value.status_code == 502
    assert negative.value.message == "Admissions backend returned an invalid FeeStructure record"
    assert missing.value.status_code == 502


@pytest.mark.asyncio
async def test_null_lists_read_as_empty(backend, backend_client, snapshot_json) -> None:
    backend.on(
        "GET",
        "/api/v1/admin/students/s1/details",
        {"feeAssignment": {"_id": "fa1", "feeStructureSnapshot": snapshot_json, "customizations": None}},
    )
    backend.on("GET", "/api/v1/fee-structures/by-year/2024-25", {"feeStructures": None})

    assignment = await backend_client.get_fee_assignment("s1")

    assert assignment.customizations == []
    assert await backend_client.fee_structures_by_year("2024-25") == []


@pytest.mark.asyncio
async def test_transport_failures() -> None:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    def stall(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(refuse), base_url="http://backend") as http:
        with pytest.raises(AdmissionsBackendError) as exc:
            await AdmissionsBackendClient(http).academic_years()
        assert exc.value.status_code == 502

    async with httpx.AsyncClient(transport=httpx.MockTransport(stall), base_url="http://backend") as http:
        with pytest.raises(AdmissionsBackendError) as exc:
            await AdmissionsBackendClient(http).academic_years()
        assert exc.value.status_code == 504


@pytest.mark.asyncio
async def test_http_client_forwards_caller_token(monkeypatch) -> None:
    monkeypatch.setattr(settings, "admissions_api_token", "service-token")

    async with build_http_client("Bearer caller") as http:
        assert http.headers["Authorization"] == "Bearer caller"
    async with build_http_client(None) as http:
        assert http.headers["Authorization"] == "Bearer service-token"
