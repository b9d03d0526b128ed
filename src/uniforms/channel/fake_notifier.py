"""Fake notification adapter — records notices for testing."""

from uuid import uuid4

from uniforms.channel.notification_port import NotificationPort


class FakeNotificationAdapter(NotificationPort):
    def __init__(self):
        self.sent: list[dict] = []
        self.should_succeed = True
        self.failure_reason = "Notification delivery failed"

    def configure(self, should_succeed: bool = True, failure_reason: str = "Notification delivery failed"):
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def send(self, student_id: str, event: str, order_id: str, item: dict) -> dict:
        if not self.should_succeed:
            return {"message_id": None, "status": "failed", "error": self.failure_reason}

        message_id = f"notice-{uuid4().hex[:12]}"
        self.sent.append(
            {
                "message_id": message_id,
                "student_id": student_id,
                "event": event,
                "order_id": order_id,
                "item": item,
            }
        )
        return {"message_id": message_id, "status": "sent"}

    def reset(self):
        self.sent.clear()
        self.should_succeed = True
        self.failure_reason = "Notification delivery failed"
