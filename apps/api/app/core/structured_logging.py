"""Structured logging helpers (PII-safe)."""

from typing import Any
from uuid import UUID


def build_log_context(
    *,
    operation: str | None = None,
    user_id: UUID | str | None = None,
    org_id: UUID | str | None = None,
    case_id: UUID | str | None = None,
) -> dict[str, Any]:
    """Return a PII-safe log context dict.

    Only identifiers go in here: never names, emails, phone numbers or
    free-text descriptions.
    """
    context: dict[str, Any] = {}
    if operation:
        context["operation"] = operation
    if user_id:
        context["user_id"] = str(user_id)
    if org_id:
        context["org_id"] = str(org_id)
    if case_id:
        context["case_id"] = str(case_id)
    return context
