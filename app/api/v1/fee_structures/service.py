"""Fee structure service: validates templates and keeps their totals derived before forwarding."""

import logging
from typing import Dict, List, Optional

from fastapi import status

from app.clients.admissions_backend import AdmissionsBackendClient
from app.core.exceptions import ServiceError
from app.core.fee_structure import (
    FEE_STRUCTURE_TYPE_LABELS,
    default_semesters,
    duplicate_semesters,
    recompute_totals,
)
from app.core.schemas import FeeStructure, SemesterFee

from .schemas import (
    CloneFeeStructureRequest,
    FeeStructureCreate,
    FeeStructureListResponse,
    FeeStructureUpdate,
    SemesterFeeInput,
)

logger = logging.getLogger(__name__)


def _checked_semesters(items: List[SemesterFeeInput]) -> List[SemesterFee]:
    dupes = duplicate_semesters(items)
    if dupes:
        raise ServiceError(
            f"Duplicate semester numbers: {', '.join(str(d) for d in dupes)}",
            status.HTTP_400_BAD_REQUEST,
        )
    return [SemesterFee(**item.model_dump()) for item in items]


def fee_structure_types() -> Dict[str, str]:
    return {t.value: label for t, label in FEE_STRUCTURE_TYPE_LABELS.items()}


async def list_fee_structures(
    client: AdmissionsBackendClient,
    page: Optional[int] = None,
    limit: Optional[int] = None,
    fee_type: Optional[str] = None,
    academic_year: Optional[str] = None,
    is_active: Optional[bool] = None,
    search: Optional[str] = None,
    sort_by: Optional[str] = None,
    sort_order: Optional[str] = None,
) -> FeeStructureListResponse:
    result = await client.list_fee_structures(
        page=page,
        limit=limit,
        type=fee_type,
        academicYear=academic_year,
        isActive=is_active,
        search=search,
        sortBy=sort_by,
        sortOrder=sort_order,
    )
    return FeeStructureListResponse(**result)


async def create_fee_structure(client: AdmissionsBackendClient, payload: FeeStructureCreate) -> FeeStructure:
    # A template created without semesters starts from the blank six-semester layout.
    semesters = _checked_semesters(payload.semesters) if payload.semesters else default_semesters()
    structure = recompute_totals(FeeStructure(
        type=payload.type,
        academic_year=payload.academic_year.strip(),
        title=payload.title.strip(),
        description=(payload.description or "").strip() or None,
        effective_date=payload.effective_date,
        semesters=semesters,
        hostel_fee=payload.hostel_fee,
    ))
    body = structure.model_dump(
        mode="json",
        by_alias=True,
        exclude_none=True,
        include={"type", "academic_year", "title", "description", "effective_date", "semesters", "grand_total", "hostel_fee"},
    )
    created = await client.create_fee_structure(body)
    logger.info(
        "Created fee structure %s (%s %s), grand total %s",
        created.id, structure.type.value, structure.academic_year, structure.grand_total,
    )
    return created


async def update_fee_structure(
    client: AdmissionsBackendClient,
    fee_structure_id: str,
    payload: FeeStructureUpdate,
) -> FeeStructure:
    body = payload.model_dump(mode="json", by_alias=True, exclude_unset=True, exclude={"semesters"})
    if payload.semesters is not None:
        structure = recompute_totals(FeeStructure(semesters=_checked_semesters(payload.semesters)))
        body.update(
            structure.model_dump(
                mode="json", by_alias=True, exclude_none=True, include={"semesters", "grand_total"}
            )
        )
    updated = await client.update_fee_structure(fee_structure_id, body)
    logger.info("Updated fee structure %s (fields: %s)", fee_structure_id, ", ".join(sorted(body)))
    return updated


async def deactivate_fee_structure(client: AdmissionsBackendClient, fee_structure_id: str) -> None:
    await client.delete_fee_structure(fee_structure_id)
    logger.info("Deactivated fee structure %s", fee_structure_id)


async def toggle_fee_structure_status(client: AdmissionsBackendClient, fee_structure_id: str) -> FeeStructure:
    structure = await client.toggle_fee_structure_status(fee_structure_id)
    logger.info("Fee structure %s is_active=%s", fee_structure_id, structure.is_active)
    return structure


async def clone_fee_structure(
    client: AdmissionsBackendClient,
    fee_structure_id: str,
    payload: CloneFeeStructureRequest,
) -> FeeStructure:
    clone = await client.clone_fee_structure(
        fee_structure_id, payload.new_academic_year.strip(), payload.new_title.strip()
    )
    logger.info("Cloned fee structure %s into %s as %s", fee_structure_id, payload.new_academic_year, clone.id)
    return clone
