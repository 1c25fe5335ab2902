"""Non-blocking hand-off of telemetry rows to Celery.

Delivery is best effort and at most once: a row is queued once, never
retried, and silently dropped (logged and counted) if the queue or the
database refuses it. Callers never wait on the write.
"""

from __future__ import annotations

import logging
from typing import Any

from app.metrics import TELEMETRY_DISPATCH_FAILURES, TELEMETRY_DISPATCHED

logger = logging.getLogger(__name__)


class TelemetryDispatcher:
    def dispatch(self, kind: str, task, payload: dict[str, Any]) -> bool:
        try:
            task.apply_async(args=[payload], ignore_result=True)
        except Exception as exc:
            TELEMETRY_DISPATCH_FAILURES.labels(kind=kind).inc()
            logger.warning("telemetry_dispatch_failed kind=%s error=%s", kind, exc)
            return False
        TELEMETRY_DISPATCHED.labels(kind=kind).inc()
        return True

    def analytics(self, payload: dict[str, Any]) -> bool:
        from app.tasks.telemetry import record_analytics_event

        return self.dispatch("analytics", record_analytics_event, payload)

    def app_log(self, payload: dict[str, Any]) -> bool:
        from app.tasks.telemetry import record_app_log

        return self.dispatch("app_log", record_app_log, payload)
