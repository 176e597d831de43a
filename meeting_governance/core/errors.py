# meeting_governance/core/errors.py
"""
Domain error hierarchy for the meeting governance engine.

Every failure a caller can observe is one of the classes below. Errors carry a
stable ``code`` and a ``context`` dict with identifiers only, never storage or
driver details. Nothing here is retryable: retry policy belongs to callers.
"""

from typing import Any, Dict, Iterable, Optional


class GovernanceError(Exception):
    """Base exception for all engine errors."""

    code: str = "governance_error"

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        self.message = message
        self.context = context or {}
        super().__init__(message)

    def __str__(self) -> str:
        base_msg = super().__str__()
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{base_msg} (context: {context_str})"
        return base_msg


class NotFoundError(GovernanceError):
    """
    Entity does not exist, or belongs to another tenant.

    Both cases are reported identically so that callers cannot discover
    the existence of other tenants' records.
    """

    code = "not_found"

    def __init__(self, entity: str, entity_id: str):
        super().__init__(
            f"{entity} with id {entity_id} not found.",
            {"entity": entity, "id": entity_id},
        )


class InvalidTransitionError(GovernanceError):
    """Lifecycle edge not permitted from the current state."""

    code = "invalid_transition"


class AlreadyTerminalError(InvalidTransitionError):
    """Operation attempted on a meeting, session or action that is already closed."""

    code = "already_terminal"


class VoteBlockedError(GovernanceError):
    """A vote or vote closing was attempted while an executive session is active."""

    code = "vote_blocked"


class RecusedMemberError(GovernanceError):
    """The member is recused for the scope of the action being voted on."""

    code = "recused_member"


class UncertifiedExecutiveSessionError(GovernanceError):
    """Minutes approval blocked by executive sessions that are not yet certified."""

    code = "uncertified_executive_session"

    def __init__(self, meeting_id: str, session_ids: Iterable[str]):
        self.session_ids = list(session_ids)
        super().__init__(
            "Minutes cannot be approved until every executive session is "
            f"certified: {', '.join(self.session_ids)}",
            {"meeting_id": meeting_id, "session_ids": self.session_ids},
        )


class InputValidationError(GovernanceError):
    """Malformed or inconsistent input, e.g. a missing required field."""

    code = "validation_error"
