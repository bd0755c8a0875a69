from datetime import datetime, timezone
from typing import Optional

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def utc_timestamp(moment: Optional[datetime] = None) -> str:
    """Format ``moment`` (default: now) as a second-resolution UTC timestamp."""
    if moment is None:
        moment = datetime.now(timezone.utc)
    elif moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.strftime(TIMESTAMP_FORMAT)
