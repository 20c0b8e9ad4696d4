"""Fee ledger router: compute a ledger from records the caller already holds."""

from fastapi import APIRouter

from app.core import fee_ledger
from app.core.schemas import FeeAssignment, FeeLedger

from .schemas import LedgerComputeRequest

router = APIRouter(prefix="/api/v1/fee-ledger", tags=["fee-ledger"])


@router.post("/compute", response_model=FeeLedger)
async def compute_fee_ledger(payload: LedgerComputeRequest) -> FeeLedger:
    assignment = None
    if payload.fee_structure_snapshot is not None:
        assignment = FeeAssignment(
            fee_structure_snapshot=payload.fee_structure_snapshot,
            customizations=payload.customizations,
        )
    return fee_ledger.build_ledger(assignment, payload.payments)
