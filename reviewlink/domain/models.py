"""
Domain Models
=============

Records and value objects shared by the application and infrastructure
layers. Plain dataclasses; persistence mapping lives in the infrastructure.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional


def utc_now() -> datetime:
    """Timezone-aware current time in UTC."""
    return datetime.now(timezone.utc)


class ReviewStatus(Enum):
    """Delivery status of a review record."""
    PENDING = "PENDING"
    SENT = "SENT"
    FAILED = "FAILED"


class Channel(Enum):
    """Outbound messaging channel."""
    SMS = "sms"
    WHATSAPP = "whatsapp"


@dataclass
class ShortLink:
    """A stored short code and the review text it expands to."""
    short_code: str
    review_text: str
    customer_name: str
    shop_name: Optional[str] = None
    product_name: Optional[str] = None
    created_at: datetime = field(default_factory=utc_now)
    expires_at: Optional[datetime] = None
    clicks: int = 0

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """A link with no expiry never expires."""
        if self.expires_at is None:
            return False
        now = now or utc_now()
        return now >= self.expires_at


@dataclass(frozen=True)
class ResolvedLink:
    """Payload returned when a short code resolves."""
    review_text: str
    customer_name: str
    shop_name: Optional[str] = None
    product_name: Optional[str] = None


@dataclass
class CustomerReview:
    """Review record stored for every submission."""
    id: int
    shop_name: str
    shop_email: str
    customer_name: str
    customer_email: str
    phone_number: str
    product_name: str
    rating: int
    review_text: str
    send_sms: bool = False
    send_whatsapp: bool = False
    status: str = ReviewStatus.PENDING.value
    created_at: str = ""


@dataclass
class DeliveryResult:
    """Outcome of a single outbound message."""
    success: bool
    message_id: Optional[str] = None
    error: Optional[str] = None
    message: Optional[str] = None
    segments: Optional[int] = None
    details: Optional[Dict[str, Any]] = None

    @classmethod
    def failure(cls, error: str, **kwargs) -> "DeliveryResult":
        return cls(success=False, error=error, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """JSON shape used in API responses (None values omitted)."""
        data = {
            "success": self.success,
            "messageId": self.message_id,
            "error": self.error,
            "message": self.message,
            "segments": self.segments,
            "details": self.details,
        }
        return {key: value for key, value in data.items() if value is not None}
