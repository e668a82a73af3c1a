"""Current time in the configured timezone."""

from collections.abc import Callable
from datetime import datetime
from zoneinfo import ZoneInfo

from stayflow.config import settings

Clock = Callable[[], datetime]


def now() -> datetime:
    """Current instant in the timezone used to decide what "today" is.

    Returns:
        datetime: Timezone-aware current time
    """
    return datetime.now(ZoneInfo(settings.timezone))
