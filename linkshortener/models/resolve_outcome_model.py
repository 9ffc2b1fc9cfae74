from dataclasses import dataclass
from enum import StrEnum


class ResolveStatus(StrEnum):
    """Terminal states of a single resolution attempt."""

    REDIRECTING = 'redirecting'
    EXPIRED = 'expired'
    DEACTIVATED = 'deactivated'
    NOT_FOUND = 'not_found'
    MISSING_INPUT = 'missing_input'


@dataclass(frozen=True)
class RequestContext:
    """Client details captured into the click record on a successful resolution."""

    user_agent: str = ''
    referrer: str | None = None


@dataclass(frozen=True)
class ResolveOutcome:
    """Result of resolving a shortcode.

    Only REDIRECTING outcomes carry a `destination`. Every other outcome
    carries a human-readable `reason` instead.

    `click_recorded` and `click_error` report the best-effort click write of a
    REDIRECTING outcome. A failed click write never turns a redirect into an error.
    """

    status: ResolveStatus
    shortcode: str | None = None
    destination: str | None = None
    reason: str | None = None
    click_recorded: bool = False
    click_error: str | None = None

    @property
    def redirecting(self) -> bool:
        return self.status is ResolveStatus.REDIRECTING
