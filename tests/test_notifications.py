import logging
from datetime import datetime

from src.nesthr.nesthr.core.enums import LeaveStatus
from src.nesthr.nesthr.notifications.events import LeaveStatusChanged
from src.nesthr.nesthr.notifications.publisher import LoggingNotificationPublisher


def test_logging_publisher_emits_event_payload(caplog):
    event = LeaveStatusChanged(
        request_id=7,
        employee_id="emp-f",
        type_id="Sick Leave",
        status=LeaveStatus.REJECTED,
        actor_id="mgr-1",
        occurred_at=datetime(2026, 3, 2, 11, 30),
        reason="Coverage gap",
    )
    with caplog.at_level(logging.INFO, logger="nesthr.notifications"):
        LoggingNotificationPublisher().publish(event)

    record = caplog.records[-1]
    assert "leave request 7 -> REJECTED by mgr-1" in record.getMessage()
    assert record.event["status"] == "REJECTED"
    assert record.event["reason"] == "Coverage gap"
