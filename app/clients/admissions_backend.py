"""Async client for the admissions backend's REST API.

Every backend response is wrapped as ``{"success": bool, "message": str, "data": ...}``;
the client unwraps ``data`` and turns failures into AdmissionsBackendError.
"""

import logging
from typing import Any, AsyncGenerator, Dict, List, Optional, Type, TypeVar

import httpx
from fastapi import Request, status
from pydantic import BaseModel, ValidationError

from app.core.config import settings
from app.core.exceptions import AdmissionsBackendError
from app.core.schemas import ApplicationFeePayment, FeeAssignment, FeeStructure, Payment

logger = logging.getLogger(__name__)

FEE_STRUCTURES = "/api/v1/fee-structures"
ADMIN_STUDENTS = "/api/v1/admin/students"
STUDENT_PAYMENTS = "/api/v1/student-payments"
ADMISSION_ADMIN = "/api/v1/admission/admin"

M = TypeVar("M", bound=BaseModel)


def _clean_params(params: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if not params:
        return None
    out = {}
    for key, value in params.items():
        if value is None or value == "":
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        out[key] = value
    return out


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict):
        return body.get("message") or body.get("detail") or response.reason_phrase
    return response.reason_phrase


def _parse(model: Type[M], data: Any, key: Optional[str] = None) -> M:
    """Validate a backend payload; a record that does not fit the model is a bad gateway, not a crash."""
    if key is not None:
        data = data.get(key) if isinstance(data, dict) else None
    try:
        return model.model_validate(data)
    except ValidationError as e:
        logger.error("Admissions backend sent an invalid %s: %s", model.__name__, e.errors(include_url=False))
        raise AdmissionsBackendError(f"Admissions backend returned an invalid {model.__name__} record") from e


def _parse_list(model: Type[M], data: Any, key: Optional[str] = None) -> List[M]:
    if key is not None:
        data = data.get(key) if isinstance(data, dict) else None
    return [_parse(model, item) for item in data or []]


class AdmissionsBackendClient:
    def __init__(self, http: httpx.AsyncClient) -> None:
        self._http = http

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Any] = None,
    ) -> Any:
        try:
            response = await self._http.request(method, path, params=_clean_params(params), json=json)
        except httpx.TimeoutException as e:
            logger.error("Admissions backend timed out: %s %s", method, path)
            raise AdmissionsBackendError("Admissions backend timed out", status.HTTP_504_GATEWAY_TIMEOUT) from e
        except httpx.HTTPError as e:
            logger.error("Admissions backend unreachable: %s %s (%s)", method, path, e)
            raise AdmissionsBackendError("Admissions backend unreachable") from e

        if response.status_code >= 500:
            logger.error("Admissions backend error %s on %s %s", response.status_code, method, path)
            raise AdmissionsBackendError(
                _error_message(response), status.HTTP_502_BAD_GATEWAY, upstream_status=response.status_code
            )
        if response.status_code >= 400:
            raise AdmissionsBackendError(
                _error_message(response), response.status_code, upstream_status=response.status_code
            )

        try:
            body = response.json()
        except ValueError as e:
            raise AdmissionsBackendError("Admissions backend returned invalid JSON") from e
        if isinstance(body, dict) and "success" in body:
            if not body["success"]:
                raise AdmissionsBackendError(body.get("message") or "Admissions backend request failed")
            return body.get("data")
        return body

    # --- Fee structures ---
    async def list_fee_structures(self, **filters: Any) -> Dict[str, Any]:
        data = await self._request("GET", FEE_STRUCTURES, params=filters)
        return {
            "fee_structures": _parse_list(FeeStructure, data, "feeStructures"),
            "pagination": (data or {}).get("pagination") or {},
        }

    async def get_fee_structure(self, fee_structure_id: str) -> FeeStructure:
        data = await self._request("GET", f"{FEE_STRUCTURES}/{fee_structure_id}")
        return _parse(FeeStructure, data, "feeStructure")

    async def create_fee_structure(self, payload: Dict[str, Any]) -> FeeStructure:
        data = await self._request("POST", FEE_STRUCTURES, json=payload)
        return _parse(FeeStructure, data, "feeStructure")

    async def update_fee_structure(self, fee_structure_id: str, payload: Dict[str, Any]) -> FeeStructure:
        data = await self._request("PUT", f"{FEE_STRUCTURES}/{fee_structure_id}", json=payload)
        return _parse(FeeStructure, data, "feeStructure")

    async def delete_fee_structure(self, fee_structure_id: str) -> None:
        await self._request("DELETE", f"{FEE_STRUCTURES}/{fee_structure_id}")

    async def toggle_fee_structure_status(self, fee_structure_id: str) -> FeeStructure:
        data = await self._request("PATCH", f"{FEE_STRUCTURES}/{fee_structure_id}/toggle-status")
        return _parse(FeeStructure, data, "feeStructure")

    async def fee_structures_by_year(self, academic_year: str, active_only: bool = True) -> List[FeeStructure]:
        params = {"activeOnly": True} if active_only else None
        data = await self._request("GET", f"{FEE_STRUCTURES}/by-year/{academic_year}", params=params)
        return _parse_list(FeeStructure, data, "feeStructures")

    async def fee_structure_by_type_and_year(self, fee_type: str, academic_year: str) -> FeeStructure:
        data = await self._request("GET", f"{FEE_STRUCTURES}/by-type/{fee_type}/year/{academic_year}")
        return _parse(FeeStructure, data, "feeStructure")

    async def academic_years(self) -> List[str]:
        data = await self._request("GET", f"{FEE_STRUCTURES}/academic-years")
        return list((data or {}).get("academicYears") or [])

    async def clone_fee_structure(self, fee_structure_id: str, new_academic_year: str, new_title: str) -> FeeStructure:
        data = await self._request(
            "POST",
            f"{FEE_STRUCTURES}/{fee_structure_id}/clone",
            json={"newAcademicYear": new_academic_year, "newTitle": new_title},
        )
        return _parse(FeeStructure, data, "feeStructure")

    async def active_fee_structures(self) -> List[FeeStructure]:
        data = await self._request("GET", "/api/v1/admin/fee-structures/active")
        return _parse_list(FeeStructure, data)

    # --- Student fee assignment ---
    async def get_fee_assignment(self, student_id: str) -> Optional[FeeAssignment]:
        """Fee assignment from the student detail view; None when nothing is assigned yet."""
        data = await self._request("GET", f"{ADMIN_STUDENTS}/{student_id}/details")
        assignment = (data or {}).get("feeAssignment")
        if not assignment:
            return None
        return _parse(FeeAssignment, assignment)

    async def assign_fee_structure(
        self, student_id: str, fee_structure_id: str, notes: Optional[str] = None
    ) -> FeeAssignment:
        data = await self._request(
            "POST",
            f"{ADMIN_STUDENTS}/{student_id}/assign-fee-structure",
            json={"feeStructureId": fee_structure_id, "notes": notes or ""},
        )
        return _parse(FeeAssignment, data)

    async def customize_semester_fees(
        self, student_id: str, semester: int, fee_customizations: Dict[str, Any], reason: str
    ) -> FeeAssignment:
        data = await self._request(
            "PATCH",
            f"{ADMIN_STUDENTS}/{student_id}/update-fee-structure",
            json={"semester": semester, "feeCustomizations": fee_customizations, "reason": reason},
        )
        return _parse(FeeAssignment, data)

    # --- Admission applications (no student record yet) ---
    async def assign_application_fee_structure(self, application_id: str, fee_structure_id: str) -> FeeAssignment:
        data = await self._request(
            "POST",
            f"{ADMISSION_ADMIN}/{application_id}/assign-fee-structure",
            json={"feeStructureId": fee_structure_id},
        )
        return _parse(FeeAssignment, data)

    async def customize_application_fees(
        self, application_id: str, semester: int, fee_customizations: Dict[str, Any], reason: str
    ) -> FeeAssignment:
        data = await self._request(
            "PATCH",
            f"{ADMISSION_ADMIN}/{application_id}/customize-fee-structure",
            json={"semester": semester, "feeCustomizations": fee_customizations, "reason": reason},
        )
        return _parse(FeeAssignment, data)

    async def update_application_payment(self, application_id: str, payload: Dict[str, Any]) -> ApplicationFeePayment:
        data = await self._request("PUT", f"{ADMISSION_ADMIN}/{application_id}/payment", json=payload)
        return _parse(ApplicationFeePayment, data)

    # --- Payments ---
    async def payment_history(self, student_id: str, **filters: Any) -> List[Payment]:
        data = await self._request("GET", f"{STUDENT_PAYMENTS}/student/{student_id}/history", params=filters)
        return _parse_list(Payment, data, "payments")

    async def record_manual_payment(self, payload: Dict[str, Any]) -> Payment:
        data = await self._request("POST", f"{STUDENT_PAYMENTS}/manual-payment", json=payload)
        if isinstance(data, dict) and "payment" in data:
            data = data["payment"]
        return _parse(Payment, data)


def build_http_client(authorization: Optional[str] = None, **kwargs: Any) -> httpx.AsyncClient:
    headers = {"Accept": "application/json"}
    if authorization:
        headers["Authorization"] = authorization
    elif settings.admissions_api_token:
        headers["Authorization"] = f"Bearer {settings.admissions_api_token}"
    return httpx.AsyncClient(
        base_url=settings.admissions_api_url,
        timeout=settings.admissions_api_timeout_seconds,
        headers=headers,
        **kwargs,
    )


async def get_admissions_client(request: Request) -> AsyncGenerator[AdmissionsBackendClient, None]:
    """Per-request backend client; forwards the caller's bearer token."""
    async with build_http_client(request.headers.get("Authorization")) as http:
        yield AdmissionsBackendClient(http)
