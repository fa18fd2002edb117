"""Value types sent to the Mantle API."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional, Union

from .casing import compact


def format_timestamp(timestamp: Union[datetime, str, None]) -> Optional[str]:
    """Render a datetime as ISO-8601; strings and None pass through."""
    if isinstance(timestamp, datetime):
        return timestamp.isoformat()
    return timestamp


@dataclass
class UsageEvent:
    """A single metered customer action."""
    event_name: str
    customer_id: Optional[str] = None
    event_id: Optional[str] = None
    timestamp: Union[datetime, str, None] = None
    properties: Dict[str, Any] = field(default_factory=dict)

    def to_payload(self) -> Dict[str, Any]:
        """Build the wire form of the event with absent fields omitted."""
        return compact({
            "eventId": self.event_id,
            "eventName": self.event_name,
            "customerId": self.customer_id,
            "timestamp": format_timestamp(self.timestamp),
            "properties": self.properties,
        })
