from app.models.analytics import AnalyticsEvent, AnalyticsEventType  # noqa: F401
from app.models.app_log import AppLog, LogLevel  # noqa: F401
from app.models.error_note import ErrorNote  # noqa: F401
from app.models.fix_step import FixStep  # noqa: F401
