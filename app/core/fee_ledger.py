"""Fee ledger calculator.

Derives a student's current fee position from three inputs: the frozen fee
structure snapshot, the ordered customization list and the payment list.
Everything here is pure; inputs are never mutated and nothing is raised for
malformed references (a customization or payment naming an unknown semester
simply never matches).
"""

from decimal import ROUND_HALF_UP, Decimal
from functools import reduce
from typing import Iterable, List, Optional, Sequence

from app.core.enums import PaymentStatus, SemesterPaymentStatus
from app.core.schemas import (
    FEE_FIELDS,
    Customization,
    FeeAssignment,
    FeeComponent,
    FeeLedger,
    FeeStructure,
    LedgerSummary,
    Payment,
    PaymentCounts,
    SemesterDue,
    SemesterFee,
)

ZERO = Decimal("0")


def component_total(fees: FeeComponent) -> Decimal:
    return sum((getattr(fees, name) or ZERO for name in FEE_FIELDS), ZERO)


def customization_history(semester_no: int, customizations: Iterable[Customization]) -> List[Customization]:
    """Customizations targeting one semester, in application order."""
    return [c for c in customizations if c.semester == semester_no]


def has_customizations(semester_no: int, customizations: Iterable[Customization]) -> bool:
    return any(c.semester == semester_no for c in customizations)


def _apply_customization(fees: FeeComponent, customization: Customization) -> FeeComponent:
    # Field-level last write wins; keys absent from the override keep their running value.
    return fees.model_copy(update=customization.fees.overrides())


def effective_fees(semester: SemesterFee, customizations: Sequence[Customization]) -> FeeComponent:
    return reduce(
        _apply_customization,
        customization_history(semester.semester, customizations),
        semester.fees.model_copy(),
    )


def effective_total(semester: SemesterFee, customizations: Sequence[Customization]) -> Decimal:
    return component_total(effective_fees(semester, customizations))


def completed_amount(semester_no: int, payments: Iterable[Payment]) -> Decimal:
    return sum(
        (
            p.amount_paid
            for p in payments
            if p.semester == semester_no and p.payment_status == PaymentStatus.completed
        ),
        ZERO,
    )


def payment_status_for(total_paid: Decimal, total_due: Decimal) -> SemesterPaymentStatus:
    # Checked in this order, so a free semester with nothing paid reads as unpaid.
    if total_paid == 0:
        return SemesterPaymentStatus.unpaid
    if total_paid >= total_due:
        return SemesterPaymentStatus.fully_paid
    return SemesterPaymentStatus.partially_paid


def percent_paid(total_paid: Decimal, total_due: Decimal) -> int:
    """Whole-number percentage for progress display; a zero due counts as 100% paid."""
    if total_due == 0:
        return 100
    ratio = Decimal(100) * Decimal(total_paid) / Decimal(total_due)
    return int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def semester_due(
    semester: SemesterFee,
    customizations: Sequence[Customization],
    payments: Sequence[Payment],
) -> SemesterDue:
    fees = effective_fees(semester, customizations)
    total_due = component_total(fees)
    total_paid = completed_amount(semester.semester, payments)
    return SemesterDue(
        semester=semester.semester,
        semester_name=semester.semester_name,
        total_due=total_due,
        total_paid=total_paid,
        outstanding=max(ZERO, total_due - total_paid),
        payment_status=payment_status_for(total_paid, total_due),
        percent_paid=percent_paid(total_paid, total_due),
        is_customized=has_customizations(semester.semester, customizations),
        fee_breakdown=fees,
    )


def semester_dues(
    snapshot: FeeStructure,
    customizations: Sequence[Customization],
    payments: Sequence[Payment],
) -> List[SemesterDue]:
    return [semester_due(s, customizations, payments) for s in snapshot.semesters]


def summarize(dues: Sequence[SemesterDue], hostel_fee: Optional[Decimal] = None) -> LedgerSummary:
    """Totals across semesters. The effective grand total is the sum of effective semester totals; hostelFee stays outside it."""
    total_due = sum((d.total_due for d in dues), ZERO)
    total_paid = sum((d.total_paid for d in dues), ZERO)
    return LedgerSummary(
        total_amount_due=total_due,
        total_amount_paid=total_paid,
        total_outstanding=sum((d.outstanding for d in dues), ZERO),
        effective_grand_total=total_due,
        hostel_fee=hostel_fee,
        percent_paid=percent_paid(total_paid, total_due),
    )


def grand_summary(
    snapshot: FeeStructure,
    customizations: Sequence[Customization],
    payments: Sequence[Payment],
) -> LedgerSummary:
    return summarize(semester_dues(snapshot, customizations, payments), snapshot.hostel_fee)


def build_ledger(assignment: Optional[FeeAssignment], payments: Sequence[Payment]) -> FeeLedger:
    """Per-semester dues plus summary; no assignment yet gives an empty, zeroed ledger."""
    if assignment is None:
        return FeeLedger(semesters=[], summary=summarize([]))
    snapshot = assignment.fee_structure_snapshot
    dues = semester_dues(snapshot, assignment.customizations, payments)
    return FeeLedger(
        academic_year=snapshot.academic_year,
        semesters=dues,
        summary=summarize(dues, snapshot.hostel_fee),
    )


def outstanding_semesters(dues: Iterable[SemesterDue]) -> List[SemesterDue]:
    """Semesters still open for payment."""
    return [d for d in dues if d.payment_status != SemesterPaymentStatus.fully_paid]


def payment_counts(payments: Iterable[Payment]) -> PaymentCounts:
    counts = PaymentCounts()
    for p in payments:
        if p.payment_status == PaymentStatus.completed:
            counts.completed_payments += 1
            counts.total_convenience_fee += p.convenience_fee or ZERO
        elif p.payment_status in (PaymentStatus.pending, PaymentStatus.processing):
            counts.pending_payments += 1
        elif p.payment_status == PaymentStatus.failed:
            counts.failed_payments += 1
    return counts
