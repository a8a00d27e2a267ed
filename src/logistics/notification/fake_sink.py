"""Fake notification sink — records notifications for testing."""

from logistics.notification.port import MilestoneNotification, NotificationDeliveryError, NotificationSink


class FakeNotificationSink(NotificationSink):
    """Sink that records notifications in memory for test assertions."""

    def __init__(self):
        self.sent: list[MilestoneNotification] = []
        self.should_succeed = True
        self.failure_reason = "Notification delivery failed"

    def configure(self, should_succeed: bool = True, failure_reason: str = "Notification delivery failed"):
        """Configure the fake sink behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def send(self, notification: MilestoneNotification) -> None:
        if not self.should_succeed:
            raise NotificationDeliveryError(self.failure_reason)
        self.sent.append(notification)

    def statuses(self) -> list[str]:
        return [n.status for n in self.sent]

    def reset(self):
        """Clear sent notifications (useful between tests)."""
        self.sent.clear()
        self.should_succeed = True
        self.failure_reason = "Notification delivery failed"
