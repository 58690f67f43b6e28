"""Drive one notification through its lifecycle.

deliver() posts a notification and always produces exactly one outcome:

- wait=False: Sent (or Failed) as soon as the native call returns.
- wait=True: the first of click / timeout / reply / action to fire wins.
  Later events for the same notification are ignored. If the native
  lifecycle ends without any of them (e.g. the close button), the
  notification counts as Sent.

Delivery problems never escape as exceptions; they become Failed.
"""

import asyncio
from collections.abc import Mapping
from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import Protocol

from .log import get_logger
from .notifier import Listener, NotifierResponse, Subscription
from .options import NormalizedOptions

_log = get_logger("driver")

# terminal-notifier's answer when macOS refused to show the notification
SUPPRESSED_SENTINEL = "Notification not sent"

SUPPRESSED_REASON = (
    "Notification was not delivered. Notifications may be disabled for this "
    "application, or Focus / Do Not Disturb mode is blocking them."
)
NOTIFICATION_CENTER_REASON = (
    "macOS Notification Center refused the notification. Check System Settings "
    "-> Notifications and make sure Focus mode is not blocking notifications."
)


@dataclass(frozen=True)
class Sent:
    response: str | None = None


@dataclass(frozen=True)
class Clicked:
    pass


@dataclass(frozen=True)
class TimedOut:
    pass


@dataclass(frozen=True)
class Replied:
    text: str | None = None


@dataclass(frozen=True)
class ActionTriggered:
    label: str | None = None


@dataclass(frozen=True)
class Failed:
    reason: str


Outcome = Sent | Clicked | TimedOut | Replied | ActionTriggered | Failed


class Notifier(Protocol):
    def subscribe(
        self, listeners: Mapping[str, Listener]
    ) -> AbstractContextManager[Subscription]: ...

    async def notify(
        self, options: NormalizedOptions, subscription: Subscription | None = None
    ) -> NotifierResponse: ...


class OutcomeSlot:
    """Single-assignment holder for a notification's outcome.

    The first offer() wins; every later offer is a no-op.
    """

    def __init__(self) -> None:
        self._future: asyncio.Future[Outcome] = asyncio.get_running_loop().create_future()

    @property
    def settled(self) -> bool:
        return self._future.done()

    def offer(self, outcome: Outcome) -> bool:
        if self._future.done():
            _log.debug("ignoring late outcome %r", outcome)
            return False
        self._future.set_result(outcome)
        return True

    async def wait(self) -> Outcome:
        return await self._future


def _listeners(options: NormalizedOptions, slot: OutcomeSlot) -> dict[str, Listener]:
    listeners: dict[str, Listener] = {
        "click": lambda _value: slot.offer(Clicked()),
        "timeout": lambda _value: slot.offer(TimedOut()),
    }
    if options.wants_reply:
        listeners["replied"] = lambda value: slot.offer(Replied(value))
    if options.has_actions:
        listeners["activate"] = lambda value: slot.offer(ActionTriggered(value))
    return listeners


def describe_error(error: BaseException) -> str:
    """Turn a native error into a reason string."""
    text = str(error) or type(error).__name__
    if "Notification Center" in text:
        return NOTIFICATION_CENTER_REASON
    return text


def _sent_or_suppressed(response: NotifierResponse) -> Outcome:
    if response.raw == SUPPRESSED_SENTINEL:
        return Failed(SUPPRESSED_REASON)
    return Sent(response.raw or None)


async def deliver(options: NormalizedOptions, notifier: Notifier) -> Outcome:
    """Post one notification and resolve its single outcome."""
    try:
        if not options.wait:
            response = await notifier.notify(options)
            return _sent_or_suppressed(response)

        slot = OutcomeSlot()
        with notifier.subscribe(_listeners(options, slot)) as subscription:
            response = await notifier.notify(options, subscription)
            # lifecycle over without an interaction event
            slot.offer(_sent_or_suppressed(response))
            return await slot.wait()
    except Exception as e:
        _log.exception("failed to deliver %r", options.title)
        return Failed(describe_error(e))
