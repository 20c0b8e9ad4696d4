"""Application fees router: fee structure and application fee payment for admission applications."""

from fastapi import APIRouter, Depends, HTTPException, status

from app.api.v1.student_fees.schemas import CustomizationResponse, CustomizeSemesterRequest
from app.clients.admissions_backend import AdmissionsBackendClient, get_admissions_client
from app.core.exceptions import ServiceError
from app.core.schemas import ApplicationFeePayment, FeeAssignment

from .schemas import ApplicationFeeAssignRequest, ApplicationPaymentUpdate
from . import service

router = APIRouter(prefix="/api/v1/applications/{application_id}", tags=["applications"])


@router.post(
    "/fee-assignment",
    response_model=FeeAssignment,
    status_code=status.HTTP_201_CREATED,
)
async def assign_fee_structure(
    application_id: str,
    payload: ApplicationFeeAssignRequest,
    client: AdmissionsBackendClient = Depends(get_admissions_client),
) -> FeeAssignment:
    try:
        return await service.assign_fee_structure(client, application_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.patch("/fee-assignment/customizations", response_model=CustomizationResponse)
async def customize_semester_fees(
    application_id: str,
    payload: CustomizeSemesterRequest,
    client: AdmissionsBackendClient = Depends(get_admissions_client),
) -> CustomizationResponse:
    try:
        return await service.customize_semester_fees(client, application_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.put("/payment", response_model=ApplicationFeePayment)
async def update_application_payment(
    application_id: str,
    payload: ApplicationPaymentUpdate,
    client: AdmissionsBackendClient = Depends(get_admissions_client),
) -> ApplicationFeePayment:
    try:
        return await service.update_application_payment(client, application_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
