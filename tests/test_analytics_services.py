from datetime import UTC, datetime, timedelta

from app.models.analytics import AnalyticsEvent, AnalyticsEventType
from app.services import analytics as analytics_service
from app.services.device_identity import DeviceIdentityProvider, InMemoryIdentityStore


def _event(event_type, minutes_ago=0, path=None, meta=None):
    return AnalyticsEvent(
        event_type=event_type,
        device_id="device-1",
        path=path,
        meta=meta,
        timestamp=datetime.now(UTC) - timedelta(minutes=minutes_ago),
    )


def _search(code, system, minutes_ago=0):
    return _event(
        AnalyticsEventType.error_code_search,
        minutes_ago,
        meta={"errorCode": code, "systemName": system},
    )


def test_build_event_prefers_explicit_values():
    payload = analytics_service.build_event(
        "page_view",
        device_id="device-1",
        user_id="explicit",
        current_user_id="session-user",
        path=None,
        current_path="/codes",
    )
    assert payload["event_type"] == "page_view"
    assert payload["user_id"] == "explicit"
    assert payload["path"] == "/codes"
    assert payload["meta"] is None
    assert datetime.fromisoformat(payload["timestamp"]).tzinfo is not None


def test_build_event_falls_back_to_none():
    payload = analytics_service.build_event(AnalyticsEventType.custom, device_id="device-1")
    assert payload["user_id"] is None
    assert payload["path"] is None


def test_track_error_code_search_dispatches_meta(dispatcher, identity):
    analytics_service.track_error_code_search(
        "E7", "Daikin", current_user_id="user-1", identity=identity, dispatcher=dispatcher
    )
    (payload,) = dispatcher.analytics_events
    assert payload["event_type"] == "error_code_search"
    assert payload["meta"] == {"errorCode": "E7", "systemName": "Daikin"}
    assert payload["device_id"] == "device-test-1"
    assert payload["user_id"] == "user-1"


def test_track_button_click_merges_meta(dispatcher, identity):
    analytics_service.track_button_click(
        "Save", {"form": "notes"}, identity=identity, dispatcher=dispatcher
    )
    assert dispatcher.analytics_events[0]["meta"] == {"buttonLabel": "Save", "form": "notes"}


def test_track_event_uses_container_defaults(dispatcher):
    analytics_service.track_page_view("/wizard")
    (payload,) = dispatcher.analytics_events
    assert payload["path"] == "/wizard"
    assert payload["device_id"] == "device-test-1"


def test_track_event_never_raises():
    class _BrokenDispatcher:
        def analytics(self, payload):
            raise RuntimeError("boom")

    identity = DeviceIdentityProvider(InMemoryIdentityStore())
    analytics_service.track_page_view("/", identity=identity, dispatcher=_BrokenDispatcher())
    analytics_service.track_event("not-a-type", identity=identity, dispatcher=_BrokenDispatcher())


def test_get_analytics_newest_first_with_range(db_session):
    db_session.add_all(
        [
            _event(AnalyticsEventType.page_view, 30, path="/old"),
            _event(AnalyticsEventType.page_view, 10, path="/mid"),
            _event(AnalyticsEventType.page_view, 1, path="/new"),
        ]
    )
    db_session.commit()

    events = analytics_service.get_analytics(db_session)
    assert [e.path for e in events] == ["/new", "/mid", "/old"]

    start = datetime.now(UTC) - timedelta(minutes=20)
    end = datetime.now(UTC) - timedelta(minutes=5)
    assert [e.path for e in analytics_service.get_analytics(db_session, start, end)] == ["/mid"]


def test_summary_counts_by_type(db_session):
    db_session.add_all(
        [
            _event(AnalyticsEventType.page_view),
            _event(AnalyticsEventType.page_view),
            _search("E7", "Daikin"),
        ]
    )
    db_session.commit()
    assert analytics_service.get_analytics_summary(db_session) == {"page_view": 2, "error_code_search": 1}


def test_most_searched_error_codes(db_session):
    db_session.add_all(
        [
            _search("E7", "Daikin"),
            _search("E7", "Daikin"),
            _search("E7", "Daikin"),
            _search("E7", "LG"),
            _search("U4", "Daikin"),
            _search("U4", "Daikin"),
            _event(AnalyticsEventType.error_code_search, meta={}),
            _event(AnalyticsEventType.page_view, path="/"),
        ]
    )
    db_session.commit()

    top = analytics_service.get_most_searched_error_codes(db_session)
    assert top[0] == {"code": "E7", "system": "Daikin", "count": 3}
    assert top[1] == {"code": "U4", "system": "Daikin", "count": 2}
    assert {"code": "E7", "system": "LG", "count": 1} in top
    assert {"code": "unknown", "system": "unknown", "count": 1} in top
    assert len(analytics_service.get_most_searched_error_codes(db_session, limit=2)) == 2


def test_most_viewed_pages(db_session):
    db_session.add_all(
        [
            _event(AnalyticsEventType.page_view, path="/codes"),
            _event(AnalyticsEventType.page_view, path="/codes"),
            _event(AnalyticsEventType.page_view, path=None),
            _event(AnalyticsEventType.button_click, path="/codes"),
        ]
    )
    db_session.commit()
    assert analytics_service.get_most_viewed_pages(db_session) == [
        {"path": "/codes", "count": 2},
        {"path": "/", "count": 1},
    ]


def test_build_event_keeps_empty_meta():
    payload = analytics_service.build_event("custom", device_id="device-1", meta={})
    assert payload["meta"] == {}
