from enum import Enum


class Role(str, Enum):
    citizen = "citizen"
    officer = "officer"
    head = "head"
    admin = "admin"


STAFF_ROLES = frozenset({Role.officer, Role.head, Role.admin})


class RequestStatus(str, Enum):
    submitted = "Submitted"
    under_review = "Under Review"
    in_progress = "In-Progress"
    approved = "Approved"
    rejected = "Rejected"


# statuses an officer/head/admin may move a request into
TRANSITION_TARGETS = frozenset(
    {
        RequestStatus.under_review,
        RequestStatus.in_progress,
        RequestStatus.approved,
        RequestStatus.rejected,
    }
)

TERMINAL_STATUSES = frozenset({RequestStatus.approved, RequestStatus.rejected})


class PaymentStatus(str, Enum):
    success = "Success"


class OutcomeKind(str, Enum):
    success = "success"
    error = "error"
    info = "info"
