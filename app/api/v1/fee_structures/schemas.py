"""Fee structure schemas."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import Field

from app.core.enums import FeeStructureType
from app.core.schemas import CamelModel, FeeComponent, FeeStructure, NonNegativeMoney


class SemesterFeeInput(CamelModel):
    semester: int = Field(..., ge=1)
    semester_name: str = Field(..., max_length=100)
    fees: FeeComponent


class FeeStructureCreate(CamelModel):
    type: FeeStructureType
    academic_year: str = Field(..., max_length=20)
    title: str = Field(..., max_length=255)
    description: Optional[str] = None
    effective_date: datetime
    semesters: List[SemesterFeeInput] = Field(default_factory=list)
    hostel_fee: Optional[NonNegativeMoney] = None


class FeeStructureUpdate(CamelModel):
    type: Optional[FeeStructureType] = None
    academic_year: Optional[str] = Field(None, max_length=20)
    title: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    effective_date: Optional[datetime] = None
    semesters: Optional[List[SemesterFeeInput]] = None
    hostel_fee: Optional[NonNegativeMoney] = None
    is_active: Optional[bool] = None


class CloneFeeStructureRequest(CamelModel):
    new_academic_year: str = Field(..., max_length=20)
    new_title: str = Field(..., max_length=255)


class FeeStructureListResponse(CamelModel):
    fee_structures: List[FeeStructure]
    pagination: Dict[str, Any] = Field(default_factory=dict)


class FeeStructureTypesResponse(CamelModel):
    types: Dict[str, str]


class AcademicYearsResponse(CamelModel):
    academic_years: List[str]
