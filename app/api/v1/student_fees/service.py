"""Student fees service: ledger reads plus the writes that feed it (assignment, customization, payment).

Unknown semester references are accepted and reported back as warnings; the
ledger itself ignores them.
"""

import asyncio
import logging
from typing import List, Optional

from fastapi import status

from app.clients.admissions_backend import AdmissionsBackendClient
from app.core import fee_ledger
from app.core.enums import PaymentStatus, PaymentType
from app.core.exceptions import ServiceError
from app.core.schemas import FeeAssignment, FeeLedger, Payment
from app.utils.currency import format_inr

from .schemas import (
    AssignFeeStructureRequest,
    CustomizationResponse,
    CustomizeSemesterRequest,
    ManualPaymentCreate,
    ManualPaymentResponse,
    PaymentSummaryResponse,
)

logger = logging.getLogger(__name__)


def _semester_numbers(assignment: FeeAssignment) -> List[int]:
    return [s.semester for s in assignment.fee_structure_snapshot.semesters]


async def _assignment_and_payments(client: AdmissionsBackendClient, student_id: str):
    return await asyncio.gather(
        client.get_fee_assignment(student_id),
        client.payment_history(student_id),
    )


async def get_fee_ledger(client: AdmissionsBackendClient, student_id: str) -> FeeLedger:
    assignment, payments = await _assignment_and_payments(client, student_id)
    return fee_ledger.build_ledger(assignment, payments)


async def get_payment_summary(client: AdmissionsBackendClient, student_id: str) -> PaymentSummaryResponse:
    assignment, payments = await _assignment_and_payments(client, student_id)
    ledger = fee_ledger.build_ledger(assignment, payments)
    counts = fee_ledger.payment_counts(payments)
    return PaymentSummaryResponse(
        total_amount_due=ledger.summary.total_amount_due,
        total_amount_paid=ledger.summary.total_amount_paid,
        total_outstanding=ledger.summary.total_outstanding,
        hostel_fee=ledger.summary.hostel_fee,
        total_convenience_fee=counts.total_convenience_fee,
        completed_payments=counts.completed_payments,
        pending_payments=counts.pending_payments,
        failed_payments=counts.failed_payments,
        outstanding_semesters=fee_ledger.outstanding_semesters(ledger.semesters),
    )


async def get_payment_history(
    client: AdmissionsBackendClient,
    student_id: str,
    payment_status: Optional[PaymentStatus] = None,
    semester: Optional[int] = None,
    academic_year: Optional[str] = None,
    page: Optional[int] = None,
    limit: Optional[int] = None,
) -> List[Payment]:
    return await client.payment_history(
        student_id,
        paymentStatus=payment_status.value if payment_status else None,
        semester=semester,
        academicYear=academic_year,
        page=page,
        limit=limit,
    )


async def assign_fee_structure(
    client: AdmissionsBackendClient,
    student_id: str,
    payload: AssignFeeStructureRequest,
) -> FeeAssignment:
    fee_structure_id = payload.fee_structure_id.strip()
    if not fee_structure_id:
        raise ServiceError("Please select a valid fee structure", status.HTTP_400_BAD_REQUEST)
    assignment = await client.assign_fee_structure(student_id, fee_structure_id, (payload.notes or "").strip())
    logger.info("Assigned fee structure %s to student %s", fee_structure_id, student_id)
    return assignment


async def customize_semester_fees(
    client: AdmissionsBackendClient,
    student_id: str,
    payload: CustomizeSemesterRequest,
) -> CustomizationResponse:
    overrides = payload.fee_customizations.overrides()
    if not overrides:
        raise ServiceError("No fee fields to customize", status.HTTP_400_BAD_REQUEST)
    current = await client.get_fee_assignment(student_id)
    if current is None:
        raise ServiceError("No fee structure assigned to this student", status.HTTP_404_NOT_FOUND)

    warnings = []
    if payload.semester not in _semester_numbers(current):
        warnings.append(f"Semester {payload.semester} is not part of the assigned fee structure")
        logger.warning("Customization for student %s targets unknown semester %s", student_id, payload.semester)

    updated = await client.customize_semester_fees(
        student_id,
        payload.semester,
        payload.fee_customizations.model_dump(mode="json", by_alias=True, exclude_none=True),
        payload.reason.strip(),
    )
    logger.info(
        "Customized semester %s fees for student %s (%s)",
        payload.semester, student_id, ", ".join(sorted(overrides)),
    )
    return CustomizationResponse(fee_assignment=updated, warnings=warnings)


async def record_manual_payment(
    client: AdmissionsBackendClient,
    student_id: str,
    payload: ManualPaymentCreate,
) -> ManualPaymentResponse:
    warnings = []
    if payload.payment_type != PaymentType.hostel_fee:
        if payload.semester is None:
            raise ServiceError("Semester is required for semester payments", status.HTTP_400_BAD_REQUEST)
        assignment, payments = await _assignment_and_payments(client, student_id)
        if assignment is None:
            warnings.append("No fee structure assigned to this student")
        elif payload.semester not in _semester_numbers(assignment):
            warnings.append(f"Semester {payload.semester} is not part of the assigned fee structure")
            logger.warning("Payment for student %s names unknown semester %s", student_id, payload.semester)
        else:
            ledger = fee_ledger.build_ledger(assignment, payments)
            due = next(d for d in ledger.semesters if d.semester == payload.semester)
            if payload.amount_paid > due.outstanding:
                warnings.append(
                    f"Payment exceeds the outstanding balance of {format_inr(due.outstanding)} for semester {payload.semester}"
                )

    body = payload.model_dump(mode="json", by_alias=True, exclude_none=True)
    body["studentId"] = student_id
    payment = await client.record_manual_payment(body)
    logger.info(
        "Recorded %s payment of %s for student %s (semester %s)",
        payload.payment_method.value, payload.amount_paid, student_id, payload.semester,
    )
    return ManualPaymentResponse(payment=payment, warnings=warnings)
