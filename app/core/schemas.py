"""Fee records exchanged with the admissions backend, plus the derived ledger views.

Field names are snake_case in Python and camelCase on the wire, so these models
read and write the backend's JSON unchanged.
"""

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any, List, Optional, Union

from pydantic import BaseModel, Field, PlainSerializer, field_validator
from pydantic.alias_generators import to_camel

from app.core.enums import ApplicationPaymentStatus, FeeStructureType, PaymentStatus, SemesterPaymentStatus


def _null_as_empty(v: Any) -> Any:
    """Backend records send null for lists that were never set."""
    return [] if v is None else v


def _money_to_json(value: Decimal) -> Union[int, float]:
    if value == value.to_integral_value():
        return int(value)
    return float(value)


# Rupees; serialized as a JSON number (integer when whole).
Money = Annotated[Decimal, PlainSerializer(_money_to_json, when_used="json")]
NonNegativeMoney = Annotated[Money, Field(ge=0)]

FEE_FIELDS = (
    "admission_fee",
    "exam_permit_reg_fee",
    "special_fee",
    "tuition_fee",
    "fee_fund_charges",
    "others",
)


class CamelModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True


class FeeComponent(CamelModel):
    """Fee line items for one semester. feeFundCharges is optional and counts as 0 when absent."""

    admission_fee: NonNegativeMoney = Decimal("0")
    exam_permit_reg_fee: NonNegativeMoney = Decimal("0")
    special_fee: NonNegativeMoney = Decimal("0")
    tuition_fee: NonNegativeMoney = Decimal("0")
    fee_fund_charges: Optional[NonNegativeMoney] = None
    others: NonNegativeMoney = Decimal("0")


class FeeOverride(CamelModel):
    """Partial FeeComponent carried by a customization; only overridden keys are set."""

    admission_fee: Optional[NonNegativeMoney] = None
    exam_permit_reg_fee: Optional[NonNegativeMoney] = None
    special_fee: Optional[NonNegativeMoney] = None
    tuition_fee: Optional[NonNegativeMoney] = None
    fee_fund_charges: Optional[NonNegativeMoney] = None
    others: Optional[NonNegativeMoney] = None

    def overrides(self) -> dict:
        return self.model_dump(exclude_none=True)


class SemesterFee(CamelModel):
    semester: int = Field(..., ge=1)
    semester_name: str = ""
    fees: FeeComponent = Field(default_factory=FeeComponent)
    total: Optional[Money] = None


class FeeStructure(CamelModel):
    """Fee structure template, or the frozen snapshot of one inside an assignment."""

    id: Optional[str] = None
    type: Optional[FeeStructureType] = None
    academic_year: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    effective_date: Optional[datetime] = None
    is_active: bool = True
    semesters: List[SemesterFee] = Field(default_factory=list)
    grand_total: Optional[Money] = None
    hostel_fee: Optional[NonNegativeMoney] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    created_by: Optional[Any] = None

    class Config:
        extra = "allow"

    @field_validator("semesters", mode="before")
    @classmethod
    def null_semesters(cls, v: Any) -> Any:
        return _null_as_empty(v)


class CustomizationActor(CamelModel):
    name: Optional[str] = None
    email: Optional[str] = None


class Customization(CamelModel):
    semester: int
    fees: FeeOverride = Field(default_factory=FeeOverride)
    reason: Optional[str] = None
    customized_by: Optional[Union[CustomizationActor, str]] = None
    customized_at: Optional[datetime] = None


class FeeAssignment(CamelModel):
    id: Optional[str] = Field(None, alias="_id")
    fee_structure_snapshot: FeeStructure = Field(default_factory=FeeStructure)
    customizations: List[Customization] = Field(default_factory=list)

    class Config:
        extra = "allow"

    @field_validator("fee_structure_snapshot", mode="before")
    @classmethod
    def null_snapshot(cls, v: Any) -> Any:
        return {} if v is None else v

    @field_validator("customizations", mode="before")
    @classmethod
    def null_customizations(cls, v: Any) -> Any:
        return _null_as_empty(v)


class FeeBreakdownItem(CamelModel):
    fee_type: str
    amount: Money


class Payment(CamelModel):
    id: Optional[str] = Field(None, alias="_id")
    student: Optional[Any] = None
    semester: Optional[int] = None
    amount_paid: NonNegativeMoney
    payment_status: PaymentStatus
    payment_date: Optional[datetime] = None
    payment_method: Optional[str] = None
    payment_type: Optional[str] = None
    payment_source: Optional[str] = None
    convenience_fee: Optional[Money] = None
    total_amount_charged: Optional[Money] = None
    remaining_balance: Optional[Money] = None
    academic_year: Optional[str] = None
    notes: Optional[str] = None
    fee_breakdown: List[FeeBreakdownItem] = Field(default_factory=list)

    class Config:
        extra = "allow"

    @field_validator("fee_breakdown", mode="before")
    @classmethod
    def null_fee_breakdown(cls, v: Any) -> Any:
        return _null_as_empty(v)


class ApplicationPaymentStatusChange(CamelModel):
    status: Optional[str] = None
    previous_status: Optional[str] = None
    updated_by: Optional[Any] = None
    updated_at: Optional[datetime] = None
    reason: Optional[str] = None


class ApplicationFeePayment(CamelModel):
    """Application fee payment record kept on an admission application."""

    id: Optional[str] = Field(None, alias="_id")
    amount: Money = Decimal("0")
    currency: Optional[str] = None
    status: ApplicationPaymentStatus = ApplicationPaymentStatus.pending
    payment_method: Optional[str] = None
    receipt: Optional[str] = None
    attempts: Optional[int] = None
    last_error: Optional[str] = None
    verified_at: Optional[datetime] = None
    verified_by: Optional[Any] = None
    status_history: List[ApplicationPaymentStatusChange] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        extra = "allow"

    @field_validator("status_history", mode="before")
    @classmethod
    def null_status_history(cls, v: Any) -> Any:
        return _null_as_empty(v)


# --- Derived views ---
class SemesterDue(CamelModel):
    semester: int
    semester_name: str
    total_due: Money
    total_paid: Money
    outstanding: Money
    payment_status: SemesterPaymentStatus
    percent_paid: int
    is_customized: bool = False
    fee_breakdown: FeeComponent


class LedgerSummary(CamelModel):
    total_amount_due: Money
    total_amount_paid: Money
    total_outstanding: Money
    effective_grand_total: Money
    hostel_fee: Optional[Money] = None
    percent_paid: int


class FeeLedger(CamelModel):
    academic_year: Optional[str] = None
    semesters: List[SemesterDue] = Field(default_factory=list)
    summary: LedgerSummary


class PaymentCounts(CamelModel):
    completed_payments: int = 0
    pending_payments: int = 0
    failed_payments: int = 0
    total_convenience_fee: Money = Decimal("0")
