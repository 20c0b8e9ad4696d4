from decimal import Decimal

from app.core.enums import FeeStructureType
from app.core.fee_structure import (
    FEE_STRUCTURE_TYPE_LABELS,
    default_semesters,
    duplicate_semesters,
    grand_total,
    recompute_totals,
    with_totals,
)
from app.core.schemas import FeeStructure, SemesterFee


def test_every_type_has_a_label() -> None:
    assert set(FEE_STRUCTURE_TYPE_LABELS) == set(FeeStructureType)
    assert FEE_STRUCTURE_TYPE_LABELS[FeeStructureType.lateral_entry] == "Lateral Entry (LET)"


def test_default_semesters() -> None:
    semesters = default_semesters()
    assert [s.semester for s in semesters] == [1, 2, 3, 4, 5, 6]
    assert semesters[0].semester_name == "Semester 1"
    assert grand_total(semesters) == 0


def test_with_totals_sorts_and_recomputes(snapshot: FeeStructure) -> None:
    stale = [s.model_copy(update={"total": Decimal("1")}) for s in reversed(snapshot.semesters)]
    fixed = with_totals(stale)
    assert [s.semester for s in fixed] == [1, 2]
    assert [s.total for s in fixed] == [27025, 27025]


def test_recompute_totals_excludes_hostel_fee(snapshot: FeeStructure) -> None:
    structure = recompute_totals(snapshot.model_copy(update={"grand_total": Decimal("0")}))
    assert structure.grand_total == 54050
    assert structure.hostel_fee == 40000


def test_duplicate_semesters() -> None:
    semesters = [SemesterFee(semester=n) for n in (1, 2, 2, 3, 3, 3)]
    assert duplicate_semesters(semesters) == [2, 3]
    assert duplicate_semesters(semesters[:2]) == []
