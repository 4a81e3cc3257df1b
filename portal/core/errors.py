"""
Typed outcomes for everything that can stop an action.

Each error knows how the presentation layer should report it: an HTTP
status, an outcome kind, a user-facing message and, where the portal would
send the user elsewhere, a redirect target.
"""
from __future__ import annotations

from typing import Optional

from portal.core.enums import OutcomeKind


class PortalError(Exception):
    status_code: int = 400
    kind: OutcomeKind = OutcomeKind.error
    default_message: str = "Something went wrong."
    default_redirect: Optional[str] = None

    def __init__(self, message: Optional[str] = None, redirect: Optional[str] = None):
        self.message = message or self.default_message
        self.redirect = redirect if redirect is not None else self.default_redirect
        super().__init__(self.message)


class Unauthenticated(PortalError):
    status_code = 401
    default_message = "Please log in first."
    default_redirect = "/auth/login"


class AlreadyAuthenticated(PortalError):
    status_code = 409
    kind = OutcomeKind.info
    default_message = "You are already logged in."
    default_redirect = "/dashboard"


class Forbidden(PortalError):
    status_code = 403
    default_message = "You do not have the necessary access."
    default_redirect = "/dashboard"


class NotFound(PortalError):
    status_code = 404
    default_message = "Not found."


class InvalidStatus(PortalError):
    status_code = 400
    default_message = "Invalid status."


class NoPaymentRequired(PortalError):
    """Informational: the service carries no fee, so nothing is charged."""

    status_code = 200
    kind = OutcomeKind.info
    default_message = "This service does not require payment."


class Conflict(PortalError):
    status_code = 409
    default_message = "The record conflicts with existing data."


class ValidationFailed(PortalError):
    status_code = 400
    default_message = "Invalid input."


class StorageFailure(PortalError):
    status_code = 500
    default_message = "Something went wrong. Please try again later."
