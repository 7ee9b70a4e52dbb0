import time
from datetime import date, datetime
import pytz


class TimeHelper:
    """A static helper class for standardized time and date operations."""
    EST = pytz.timezone('US/Eastern')

    @staticmethod
    def get_est_date() -> str:
        return datetime.now(TimeHelper.EST).strftime('%Y-%m-%d')

    @staticmethod
    def get_current_timestamp() -> int:
        """Returns the current Unix timestamp as an integer."""
        return int(time.time())

    @staticmethod
    def get_current_timestamp_ms() -> int:
        return int(time.time() * 1000)

    @staticmethod
    def est_date_from_ms(timestamp_ms: int) -> date:
        """Calendar date in US/Eastern for an epoch-millisecond timestamp. Seasonal seeds follow this calendar."""
        return datetime.fromtimestamp(timestamp_ms / 1000, tz=TimeHelper.EST).date()

    @staticmethod
    def format_time(ms: float) -> str:
        """Formats a duration in milliseconds as '45s', '2m 05s' or '1h 03m'."""
        total_seconds = max(0, int(ms // 1000))
        hours, remainder = divmod(total_seconds, 3600)
        minutes, seconds = divmod(remainder, 60)

        if hours:
            return f"{hours}h {minutes:02d}m"
        if minutes:
            return f"{minutes}m {seconds:02d}s"
        return f"{seconds}s"
