"""Stateless ledger computation schemas."""

from typing import List, Optional

from pydantic import Field

from app.core.schemas import CamelModel, Customization, FeeStructure, Payment


class LedgerComputeRequest(CamelModel):
    fee_structure_snapshot: Optional[FeeStructure] = None
    customizations: List[Customization] = Field(default_factory=list)
    payments: List[Payment] = Field(default_factory=list)
