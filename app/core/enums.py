from enum import Enum


class FeeStructureType(str, Enum):
    regular = "regular"
    lateral_entry = "lateral_entry"
    evening = "evening"
    tfw_regular = "tfw_regular"
    tfw_let = "tfw_let"
    inter_state = "inter_state"


class PaymentStatus(str, Enum):
    pending = "pending"
    processing = "processing"
    completed = "completed"
    failed = "failed"
    refunded = "refunded"


class SemesterPaymentStatus(str, Enum):
    """Derived per-semester status; moves forward only as completed payments accumulate."""

    unpaid = "unpaid"
    partially_paid = "partially_paid"
    fully_paid = "fully_paid"


class ManualPaymentMethod(str, Enum):
    cash_office = "cash_office"
    bank_transfer = "bank_transfer"
    dd = "dd"
    cheque = "cheque"
    upi = "upi"


class PaymentType(str, Enum):
    semester_payment = "semester_payment"
    partial_payment = "partial_payment"
    hostel_fee = "hostel_fee"


class ApplicationPaymentStatus(str, Enum):
    """Status of the one-off application fee paid before a student record exists."""

    pending = "pending"
    processing = "processing"
    completed = "completed"
    failed = "failed"
    expired = "expired"


class ApplicationPaymentMethod(str, Enum):
    cash = "cash"
    bank_transfer = "bank_transfer"
    razorpay = "razorpay"
    other = "other"
