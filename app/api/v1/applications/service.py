"""Application fee service: fee assignment, customization and the application fee payment
for admission applications that have no student record yet.
"""

import logging

from fastapi import status

from app.api.v1.student_fees.schemas import CustomizationResponse, CustomizeSemesterRequest
from app.clients.admissions_backend import AdmissionsBackendClient
from app.core.exceptions import ServiceError
from app.core.schemas import ApplicationFeePayment, FeeAssignment

from .schemas import ApplicationFeeAssignRequest, ApplicationPaymentUpdate

logger = logging.getLogger(__name__)


async def assign_fee_structure(
    client: AdmissionsBackendClient,
    application_id: str,
    payload: ApplicationFeeAssignRequest,
) -> FeeAssignment:
    fee_structure_id = payload.fee_structure_id.strip()
    if not fee_structure_id:
        raise ServiceError("Please select a valid fee structure", status.HTTP_400_BAD_REQUEST)
    assignment = await client.assign_application_fee_structure(application_id, fee_structure_id)
    logger.info("Assigned fee structure %s to application %s", fee_structure_id, application_id)
    return assignment


async def customize_semester_fees(
    client: AdmissionsBackendClient,
    application_id: str,
    payload: CustomizeSemesterRequest,
) -> CustomizationResponse:
    overrides = payload.fee_customizations.overrides()
    if not overrides:
        raise ServiceError("No fee fields to customize", status.HTTP_400_BAD_REQUEST)

    updated = await client.customize_application_fees(
        application_id,
        payload.semester,
        payload.fee_customizations.model_dump(mode="json", by_alias=True, exclude_none=True),
        payload.reason.strip(),
    )

    # Checked against the returned assignment; the application API has no separate fee read.
    warnings = []
    known = [s.semester for s in updated.fee_structure_snapshot.semesters]
    if known and payload.semester not in known:
        warnings.append(f"Semester {payload.semester} is not part of the assigned fee structure")
        logger.warning("Customization for application %s targets unknown semester %s", application_id, payload.semester)

    logger.info(
        "Customized semester %s fees for application %s (%s)",
        payload.semester, application_id, ", ".join(sorted(overrides)),
    )
    return CustomizationResponse(fee_assignment=updated, warnings=warnings)


async def update_application_payment(
    client: AdmissionsBackendClient,
    application_id: str,
    payload: ApplicationPaymentUpdate,
) -> ApplicationFeePayment:
    body = payload.model_dump(mode="json", by_alias=True)
    body["receipt"] = payload.receipt.strip()
    body["reason"] = (payload.reason or "").strip() or f"Payment status updated to {payload.payment_status.value}"
    body["errorMessage"] = (payload.error_message or "").strip() or None
    payment = await client.update_application_payment(application_id, body)
    logger.info(
        "Application %s fee payment set to %s (%s, %s)",
        application_id, payment.status.value, payload.payment_method.value, payload.amount,
    )
    return payment
