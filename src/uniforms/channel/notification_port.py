"""Notification port — abstract interface for restock/conversion notices."""

from abc import ABC, abstractmethod


class NotificationPort(ABC):
    @abstractmethod
    def send(self, student_id: str, event: str, order_id: str, item: dict) -> dict:
        """Deliver a notice to a student.

        ``event`` is "converted" when a pre-order became a regular order, or
        "restocked" when the item is available again but the order was not
        converted.

        Returns:
            dict with keys: message_id, status ("sent" or "failed"), error (optional)
        """
        ...
