"""Map provider errors onto a status code and a user-facing message.

Classification order:

1. An integer ``status_code`` carried by the error (the OpenAI SDK's
   ``APIStatusError`` does this) is used as-is.
2. Otherwise the error text is matched against the provider's fragment
   rules, first match wins. Matching is case-sensitive.
3. Anything unmatched is a 500 carrying the raw text.

Values that are neither exceptions nor carry an ``error`` string end up as
"An unknown error occurred." at 500, so every input maps to a result.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from chatbridge.models.schemas import ChatFailure, FailureKind

UNKNOWN_ERROR = "An unknown error occurred."

_STATUS_KINDS: dict[int, FailureKind] = {
    400: FailureKind.INVALID_INPUT,
    401: FailureKind.UNAUTHORIZED,
    429: FailureKind.RATE_LIMITED,
}


@dataclass(frozen=True)
class ErrorRule:
    """A message fragment that identifies a known upstream failure.

    Attributes:
        fragments: Substrings that trigger the rule.
        status_code: Status returned when the rule matches.
        kind: Failure category.
        message: Replacement text; None keeps the upstream message.
    """

    fragments: tuple[str, ...]
    status_code: int
    kind: FailureKind
    message: str | None = None

    def matches(self, text: str) -> bool:
        return any(fragment in text for fragment in self.fragments)


def extract_error_message(error: object) -> str | None:
    """Pull a message string out of an arbitrary raised value."""
    if isinstance(error, BaseException):
        return str(error)
    if isinstance(error, Mapping):
        value = error.get("error")
        return value if isinstance(value, str) else None
    value = getattr(error, "error", None)
    return value if isinstance(value, str) else None


def _explicit_status(error: object) -> int | None:
    status = getattr(error, "status_code", None)
    if isinstance(status, int) and not isinstance(status, bool):
        return status
    return None


def normalize_error(error: object, rules: Sequence[ErrorRule] = ()) -> ChatFailure:
    """Convert a raised value into a ChatFailure.

    Args:
        error: Whatever the provider call raised.
        rules: Provider-specific fragment rules, in priority order.

    Returns:
        A ChatFailure with a status in the 4xx/5xx range.
    """
    text = extract_error_message(error)
    if text is None:
        return ChatFailure(error=UNKNOWN_ERROR, status_code=500)

    message = text or UNKNOWN_ERROR

    status = _explicit_status(error)
    if status is not None:
        kind = _STATUS_KINDS.get(status, FailureKind.UPSTREAM_FAILURE)
        return ChatFailure(error=message, status_code=status, kind=kind)

    for rule in rules:
        if rule.matches(text):
            return ChatFailure(
                error=rule.message or message,
                status_code=rule.status_code,
                kind=rule.kind,
            )

    return ChatFailure(error=message, status_code=500)
