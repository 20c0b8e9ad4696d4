"""Fee structures router: template CRUD, lookups, status toggle and clone."""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from app.clients.admissions_backend import AdmissionsBackendClient, get_admissions_client
from app.core.enums import FeeStructureType
from app.core.exceptions import ServiceError
from app.core.schemas import FeeStructure

from .schemas import (
    AcademicYearsResponse,
    CloneFeeStructureRequest,
    FeeStructureCreate,
    FeeStructureListResponse,
    FeeStructureTypesResponse,
    FeeStructureUpdate,
)
from . import service

router = APIRouter(prefix="/api/v1/fee-structures", tags=["fee-structures"])


@router.get("", response_model=FeeStructureListResponse)
async def list_fee_structures(
    page: Optional[int] = Query(None, ge=1),
    limit: Optional[int] = Query(None, ge=1, le=100),
    fee_type: Optional[FeeStructureType] = Query(None, alias="type"),
    academic_year: Optional[str] = Query(None, alias="academicYear"),
    is_active: Optional[bool] = Query(None, alias="isActive"),
    search: Optional[str] = Query(None),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_order: Optional[str] = Query(None, alias="sortOrder", pattern="^(asc|desc)$"),
    client: AdmissionsBackendClient = Depends(get_admissions_client),
) -> FeeStructureListResponse:
    try:
        return await service.list_fee_structures(
            client,
            page=page,
            limit=limit,
            fee_type=fee_type.value if fee_type else None,
            academic_year=academic_year,
            is_active=is_active,
            search=search,
            sort_by=sort_by,
            sort_order=sort_order,
        )
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/types", response_model=FeeStructureTypesResponse)
async def get_fee_structure_types() -> FeeStructureTypesResponse:
    return FeeStructureTypesResponse(types=service.fee_structure_types())


@router.get("/academic-years", response_model=AcademicYearsResponse)
async def get_academic_years(
    client: AdmissionsBackendClient = Depends(get_admissions_client),
) -> AcademicYearsResponse:
    try:
        return AcademicYearsResponse(academic_years=await client.academic_years())
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/active", response_model=List[FeeStructure])
async def get_active_fee_structures(
    client: AdmissionsBackendClient = Depends(get_admissions_client),
) -> List[FeeStructure]:
    try:
        return await client.active_fee_structures()
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/by-year/{academic_year}", response_model=List[FeeStructure])
async def get_fee_structures_by_year(
    academic_year: str,
    active_only: bool = Query(True, alias="activeOnly"),
    client: AdmissionsBackendClient = Depends(get_admissions_client),
) -> List[FeeStructure]:
    try:
        return await client.fee_structures_by_year(academic_year, active_only=active_only)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/by-type/{fee_type}/year/{academic_year}", response_model=FeeStructure)
async def get_fee_structure_by_type_and_year(
    fee_type: FeeStructureType,
    academic_year: str,
    client: AdmissionsBackendClient = Depends(get_admissions_client),
) -> FeeStructure:
    try:
        return await client.fee_structure_by_type_and_year(fee_type.value, academic_year)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/{fee_structure_id}", response_model=FeeStructure)
async def get_fee_structure(
    fee_structure_id: str,
    client: AdmissionsBackendClient = Depends(get_admissions_client),
) -> FeeStructure:
    try:
        return await client.get_fee_structure(fee_structure_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("", response_model=FeeStructure, status_code=status.HTTP_201_CREATED)
async def create_fee_structure(
    payload: FeeStructureCreate,
    client: AdmissionsBackendClient = Depends(get_admissions_client),
) -> FeeStructure:
    try:
        return await service.create_fee_structure(client, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.put("/{fee_structure_id}", response_model=FeeStructure)
async def update_fee_structure(
    fee_structure_id: str,
    payload: FeeStructureUpdate,
    client: AdmissionsBackendClient = Depends(get_admissions_client),
) -> FeeStructure:
    try:
        return await service.update_fee_structure(client, fee_structure_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete("/{fee_structure_id}", status_code=status.HTTP_204_NO_CONTENT)
async def deactivate_fee_structure(
    fee_structure_id: str,
    client: AdmissionsBackendClient = Depends(get_admissions_client),
) -> Response:
    try:
        await service.deactivate_fee_structure(client, fee_structure_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/{fee_structure_id}/toggle-status", response_model=FeeStructure)
async def toggle_fee_structure_status(
    fee_structure_id: str,
    client: AdmissionsBackendClient = Depends(get_admissions_client),
) -> FeeStructure:
    try:
        return await service.toggle_fee_structure_status(client, fee_structure_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("/{fee_structure_id}/clone", response_model=FeeStructure, status_code=status.HTTP_201_CREATED)
async def clone_fee_structure(
    fee_structure_id: str,
    payload: CloneFeeStructureRequest,
    client: AdmissionsBackendClient = Depends(get_admissions_client),
) -> FeeStructure:
    try:
        return await service.clone_fee_structure(client, fee_structure_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
