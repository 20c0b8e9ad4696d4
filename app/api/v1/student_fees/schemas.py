"""Student fee schemas: assignment, customization, manual payment, ledger views."""

from datetime import date
from typing import List, Optional

from pydantic import Field

from app.core.enums import ManualPaymentMethod, PaymentType
from app.core.schemas import (
    CamelModel,
    FeeAssignment,
    FeeBreakdownItem,
    FeeOverride,
    Money,
    Payment,
    SemesterDue,
)


class AssignFeeStructureRequest(CamelModel):
    fee_structure_id: str
    notes: Optional[str] = Field(None, max_length=1000)


class CustomizeSemesterRequest(CamelModel):
    semester: int = Field(..., ge=1)
    fee_customizations: FeeOverride
    reason: str = Field("", max_length=1000)


class CustomizationResponse(CamelModel):
    fee_assignment: FeeAssignment
    warnings: List[str] = Field(default_factory=list)


class ManualPaymentCreate(CamelModel):
    payment_type: PaymentType = PaymentType.semester_payment
    semester: Optional[int] = Field(None, ge=1)
    amount_paid: Money = Field(..., gt=0)
    payment_method: ManualPaymentMethod = ManualPaymentMethod.cash_office
    receipt_number: Optional[str] = None
    dd_number: Optional[str] = None
    cheque_number: Optional[str] = None
    bank_name: Optional[str] = None
    branch_name: Optional[str] = None
    deposit_date: Optional[date] = None
    notes: Optional[str] = None
    fee_breakdown: List[FeeBreakdownItem] = Field(default_factory=list)


class ManualPaymentResponse(CamelModel):
    payment: Payment
    warnings: List[str] = Field(default_factory=list)


class PaymentSummaryResponse(CamelModel):
    total_amount_due: Money
    total_amount_paid: Money
    total_outstanding: Money
    hostel_fee: Optional[Money] = None
    total_convenience_fee: Money
    completed_payments: int
    pending_payments: int
    failed_payments: int
    outstanding_semesters: List[SemesterDue] = Field(default_factory=list)
