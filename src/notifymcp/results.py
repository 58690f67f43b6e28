"""Turn a notification outcome into the text returned to the caller."""

from .driver import ActionTriggered, Clicked, Failed, Outcome, Replied, TimedOut


def failure_advisory(reason: str) -> str:
    """Explain a delivery failure and how to fix it."""
    return (
        f"Failed to send notification: {reason}\n"
        "\n"
        "To fix this:\n"
        "1. Open System Settings -> Notifications and allow notifications for "
        "the application running this server (e.g. Claude, Terminal).\n"
        "2. Check that Focus / Do Not Disturb mode is not blocking notifications."
    )


def format_outcome(outcome: Outcome, title: str) -> str:
    if isinstance(outcome, Failed):
        return failure_advisory(outcome.reason)
    if isinstance(outcome, Clicked):
        return f'Notification clicked: "{title}"'
    if isinstance(outcome, TimedOut):
        return f'Notification timed out: "{title}"'
    if isinstance(outcome, Replied) and outcome.text:
        return f'Notification reply received: "{outcome.text}"'
    if isinstance(outcome, ActionTriggered) and outcome.label:
        return f'Notification action clicked: "{outcome.label}"'
    return f'Notification sent successfully: "{title}"'
