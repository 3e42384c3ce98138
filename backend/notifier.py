"""User-facing notifications, passed into core operations instead of broadcast globally."""

from typing import List

from schemas import Severity


class Notifier:
    def notify(self, message: str, severity: Severity = Severity.INFO) -> None:
        raise NotImplementedError


class CollectingNotifier(Notifier):
    """Keeps notifications so the API can return them with the response."""

    def __init__(self):
        self.messages: List[dict] = []

    def notify(self, message, severity=Severity.INFO):
        self.messages.append({"message": message, "type": Severity(severity).value})


def notify(notifier, message, severity=Severity.INFO):
    if notifier is not None:
        notifier.notify(message, severity)
