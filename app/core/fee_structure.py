"""Fee structure template helpers: labels, defaults, totals."""

from decimal import Decimal
from typing import Dict, Iterable, List, Sequence

from app.core.enums import FeeStructureType
from app.core.fee_ledger import ZERO, component_total
from app.core.schemas import FeeComponent, FeeStructure, SemesterFee

FEE_STRUCTURE_TYPE_LABELS: Dict[FeeStructureType, str] = {
    FeeStructureType.regular: "Regular Batch",
    FeeStructureType.lateral_entry: "Lateral Entry (LET)",
    FeeStructureType.evening: "Evening Batch",
    FeeStructureType.tfw_regular: "TFW Regular",
    FeeStructureType.tfw_let: "TFW LET",
    FeeStructureType.inter_state: "Inter State",
}

DEFAULT_SEMESTER_COUNT = 6


def default_semesters(count: int = DEFAULT_SEMESTER_COUNT) -> List[SemesterFee]:
    return [
        SemesterFee(semester=n, semester_name=f"Semester {n}", fees=FeeComponent(), total=ZERO)
        for n in range(1, count + 1)
    ]


def semester_total(semester: SemesterFee) -> Decimal:
    return component_total(semester.fees)


def grand_total(semesters: Iterable[SemesterFee]) -> Decimal:
    """Sum of semester totals as carried on each semester; hostel fee excluded."""
    return sum((s.total if s.total is not None else semester_total(s) for s in semesters), ZERO)


def duplicate_semesters(semesters: Sequence[SemesterFee]) -> List[int]:
    seen = set()
    dupes = []
    for s in semesters:
        if s.semester in seen and s.semester not in dupes:
            dupes.append(s.semester)
        seen.add(s.semester)
    return dupes


def with_totals(semesters: Iterable[SemesterFee]) -> List[SemesterFee]:
    """Semesters ordered by number with each stored total recomputed from its fees."""
    ordered = sorted(semesters, key=lambda s: s.semester)
    return [s.model_copy(update={"total": semester_total(s)}) for s in ordered]


def recompute_totals(structure: FeeStructure) -> FeeStructure:
    semesters = with_totals(structure.semesters)
    return structure.model_copy(update={"semesters": semesters, "grand_total": grand_total(semesters)})
