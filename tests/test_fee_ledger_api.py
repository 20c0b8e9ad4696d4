import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_compute_ledger_from_supplied_records(client: AsyncClient, backend, snapshot_json) -> None:
    payload = {
        "feeStructureSnapshot": snapshot_json,
        "customizations": [
            {"semester": 1, "fees": {"tuitionFee": 10000, "specialFee": 1000}},
            {"semester": 1, "fees": {"tuitionFee": 12000}},
            {"semester": 4, "fees": {"others": 999}},
        ],
        "payments": [
            {"semester": 1, "amountPaid": 10000, "paymentStatus": "completed"},
            {"semester": 2, "amountPaid": 27025, "paymentStatus": "refunded"},
        ],
    }

    response = await client.post("/api/v1/fee-ledger/compute", json=payload)

    assert response.status_code == 200
    data = response.json()
    first, second = data["semesters"]
    assert first["feeBreakdown"]["tuitionFee"] == 12000
    assert first["feeBreakdown"]["specialFee"] == 1000
    assert first["totalDue"] == 20025
    assert first["outstanding"] == 10025
    assert first["percentPaid"] == 50
    assert second["paymentStatus"] == "unpaid"
    assert data["summary"]["totalAmountDue"] == 47050
    assert data["summary"]["hostelFee"] == 40000
    assert backend.requests == []


@pytest.mark.asyncio
async def test_compute_without_snapshot_returns_empty_ledger(client: AsyncClient) -> None:
    response = await client.post("/api/v1/fee-ledger/compute", json={"payments": []})

    assert response.status_code == 200
    assert response.json()["semesters"] == []
    assert response.json()["summary"]["percentPaid"] == 100


@pytest.mark.asyncio
async def test_compute_rejects_negative_override(client: AsyncClient, snapshot_json) -> None:
    payload = {"feeStructureSnapshot": snapshot_json, "customizations": [{"semester": 1, "fees": {"others": -10}}]}

    response = await client.post("/api/v1/fee-ledger/compute", json=payload)

    assert response.status_code == 422
