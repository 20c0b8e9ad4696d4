"""Student fees router: ledger, assignment, customization, payments."""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.clients.admissions_backend import AdmissionsBackendClient, get_admissions_client
from app.core.enums import PaymentStatus
from app.core.exceptions import ServiceError
from app.core.schemas import FeeAssignment, FeeLedger, Payment

from .schemas import (
    AssignFeeStructureRequest,
    CustomizationResponse,
    CustomizeSemesterRequest,
    ManualPaymentCreate,
    ManualPaymentResponse,
    PaymentSummaryResponse,
)
from . import service

router = APIRouter(prefix="/api/v1/students/{student_id}", tags=["student-fees"])


@router.get("/fee-ledger", response_model=FeeLedger)
async def get_fee_ledger(
    student_id: str,
    client: AdmissionsBackendClient = Depends(get_admissions_client),
) -> FeeLedger:
    try:
        return await service.get_fee_ledger(client, student_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post(
    "/fee-assignment",
    response_model=FeeAssignment,
    status_code=status.HTTP_201_CREATED,
)
async def assign_fee_structure(
    student_id: str,
    payload: AssignFeeStructureRequest,
    client: AdmissionsBackendClient = Depends(get_admissions_client),
) -> FeeAssignment:
    try:
        return await service.assign_fee_structure(client, student_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.patch("/fee-assignment/customizations", response_model=CustomizationResponse)
async def customize_semester_fees(
    student_id: str,
    payload: CustomizeSemesterRequest,
    client: AdmissionsBackendClient = Depends(get_admissions_client),
) -> CustomizationResponse:
    try:
        return await service.customize_semester_fees(client, student_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/payments", response_model=List[Payment])
async def get_payment_history(
    student_id: str,
    payment_status: Optional[PaymentStatus] = Query(None, alias="paymentStatus"),
    semester: Optional[int] = Query(None, ge=1),
    academic_year: Optional[str] = Query(None, alias="academicYear"),
    page: Optional[int] = Query(None, ge=1),
    limit: Optional[int] = Query(None, ge=1, le=100),
    client: AdmissionsBackendClient = Depends(get_admissions_client),
) -> List[Payment]:
    try:
        return await service.get_payment_history(
            client,
            student_id,
            payment_status=payment_status,
            semester=semester,
            academic_year=academic_year,
            page=page,
            limit=limit,
        )
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post(
    "/payments",
    response_model=ManualPaymentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def record_manual_payment(
    student_id: str,
    payload: ManualPaymentCreate,
    client: AdmissionsBackendClient = Depends(get_admissions_client),
) -> ManualPaymentResponse:
    try:
        return await service.record_manual_payment(client, student_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/payment-summary", response_model=PaymentSummaryResponse)
async def get_payment_summary(
    student_id: str,
    client: AdmissionsBackendClient = Depends(get_admissions_client),
) -> PaymentSummaryResponse:
    try:
        return await service.get_payment_summary(client, student_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
