"""Admission application fee schemas."""

from typing import Optional

from pydantic import Field

from app.core.enums import ApplicationPaymentMethod, ApplicationPaymentStatus
from app.core.schemas import CamelModel, NonNegativeMoney


class ApplicationFeeAssignRequest(CamelModel):
    fee_structure_id: str


class ApplicationPaymentUpdate(CamelModel):
    payment_status: ApplicationPaymentStatus
    payment_method: ApplicationPaymentMethod = ApplicationPaymentMethod.cash
    amount: NonNegativeMoney
    receipt: str = Field("", max_length=100)
    reason: Optional[str] = Field(None, max_length=1000)
    error_message: Optional[str] = Field(None, max_length=1000)
