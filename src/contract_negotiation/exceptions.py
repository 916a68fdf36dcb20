"""
Contract Negotiation Exception Hierarchy

Structural and programmer errors raised by the negotiation core. Expected
negotiation results (rejections, lockouts, cap infeasibility, phone-dead
cooldowns) are never raised; they are returned as NegotiationResponse values.

Exception Hierarchy:
    NegotiationException (base)
    ├── SessionNotFoundError
    ├── InvalidOfferError
    └── InvalidConfigError

All exceptions include:
- error_code: Unique identifier for programmatic handling
- context_dict: Relevant context (player_id, offer_id, field, etc.)
- timestamp: When the exception was raised
"""

from datetime import datetime
from typing import Any, Dict, Optional


class NegotiationException(Exception):
    """
    Base exception for all negotiation core errors.

    Attributes:
        message: Human-readable error message
        error_code: Unique error code (e.g., "NEGOTIATION_404")
        context_dict: Additional context for logging
        timestamp: When the exception was raised
    """

    def __init__(
        self,
        message: str,
        error_code: str = "NEGOTIATION_000",
        context_dict: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.context_dict = context_dict or {}
        self.timestamp = datetime.now().isoformat()
        super().__init__(self._build_error_message())

    def _build_error_message(self) -> str:
        """Build error message with context."""
        lines = [f"[{self.error_code}] {self.message}"]
        if self.context_dict:
            lines.append("Context:")
            for key, value in self.context_dict.items():
                lines.append(f"  {key}: {value}")
        return "\n".join(lines)

    def __str__(self) -> str:
        # KeyError subclasses would otherwise repr() the message
        return self._build_error_message()

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "context": self.context_dict,
            "timestamp": self.timestamp,
        }


class SessionNotFoundError(NegotiationException, KeyError):
    """
    Raised when an operation targets a player with no active session.

    Examples:
    - submit_offer() before begin_negotiation()
    - respond_to_shadow_advisor() after the session was ended
    """

    def __init__(self, player_id: Any, operation: str = ""):
        self.player_id = player_id
        context = {"player_id": player_id}
        if operation:
            context["operation"] = operation
        super().__init__(
            message=f"No active negotiation session for player {player_id}",
            error_code="NEGOTIATION_404",
            context_dict=context,
        )


class InvalidOfferError(NegotiationException, ValueError):
    """
    Raised when a contract offer is structurally malformed.

    Examples:
    - years <= 0
    - len(base_salary_per_year) != years
    - guaranteed_money greater than the contract's total value
    - negative money amounts
    """

    def __init__(self, message: str, field_name: Optional[str] = None, value: Any = None):
        context: Dict[str, Any] = {}
        if field_name is not None:
            context["field"] = field_name
            context["value"] = value
        super().__init__(
            message=message,
            error_code="NEGOTIATION_400",
            context_dict=context,
        )


class InvalidConfigError(NegotiationException, ValueError):
    """Raised when a negotiation policy value is out of range."""

    def __init__(self, message: str, field_name: Optional[str] = None, value: Any = None):
        context: Dict[str, Any] = {}
        if field_name is not None:
            context["field"] = field_name
            context["value"] = value
        super().__init__(
            message=message,
            error_code="NEGOTIATION_422",
            context_dict=context,
        )
