from app.tasks.telemetry import cleanup_app_logs, record_analytics_event, record_app_log

__all__ = [
    "record_analytics_event",
    "record_app_log",
    "cleanup_app_logs",
]
