from dataclasses import dataclass

from linkshortener.constants import Defaults


# fmt: off
@dataclass(frozen=True)
class CreationRequest:
    url: str                                         # Destination URL as typed by the user
    custom_shortcode: str | None = None              # Optional vanity shortcode; blank means "generate one"
    validity_minutes: int = Defaults.VALIDITY_MINUTES  # Minutes until the link expires
# fmt: on
