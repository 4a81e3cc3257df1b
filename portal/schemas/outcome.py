from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel

from portal.core.enums import OutcomeKind


class Outcome(BaseModel):
    kind: OutcomeKind
    message: str


class ActionResult(BaseModel):
    """What a page action hands back: a message to flash, where to go next, and data."""

    outcome: Optional[Outcome] = None
    redirect: Optional[str] = None
    data: Any = None


def success(message: str, data: Any = None, redirect: Optional[str] = None) -> ActionResult:
    return ActionResult(
        outcome=Outcome(kind=OutcomeKind.success, message=message),
        redirect=redirect,
        data=data,
    )


def page(data: Any) -> ActionResult:
    return ActionResult(data=data)
