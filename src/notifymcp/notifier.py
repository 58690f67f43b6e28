"""Native macOS notifier.

Drives a terminal-notifier compatible binary (terminal-notifier, alerter)
as a subprocess. The binary is run with -json, so when it exits it prints
a single JSON object describing how the notification ended, e.g.

    {"activationType": "actionClicked", "activationValue": "Approve", ...}

The activation is re-emitted as an event to the subscription that was
passed along with that notification:

    contentsClicked -> "click"
    timeout         -> "timeout"
    replied         -> "replied"  (value: reply text)
    actionClicked   -> "activate" (value: action label)
    closed          -> "close"    (value: close label)

The notifier instance is shared for the life of the server and several
notifications can be in flight at once, so each call gets its own
subscription from subscribe(); it is detached when the call is done.
"""

import asyncio
import contextlib
import json
import shutil
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass

from .log import get_logger
from .options import NormalizedOptions

_log = get_logger("notifier")

Listener = Callable[[str | None], None]

ACTIVATION_EVENTS = {
    "contentsClicked": "click",
    "timeout": "timeout",
    "replied": "replied",
    "actionClicked": "activate",
    "closed": "close",
}


class NotifierError(Exception):
    """The native notifier could not post the notification."""


@dataclass(frozen=True)
class NotifierResponse:
    """What the native binary reported when it exited."""

    raw: str
    activation_type: str | None = None
    activation_value: str | None = None

    @property
    def event(self) -> str | None:
        return ACTIVATION_EVENTS.get(self.activation_type or "")


def parse_response(stdout: str) -> NotifierResponse:
    """Parse the binary's stdout.

    JSON output yields the activation type/value. Anything else (older
    binaries, or plain status text) is kept as the raw response only.
    """
    raw = stdout.strip()
    if not raw:
        return NotifierResponse(raw="")
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        return NotifierResponse(raw=raw)
    if not isinstance(data, dict):
        return NotifierResponse(raw=raw)

    value = data.get("activationValue")
    return NotifierResponse(
        raw=raw,
        activation_type=data.get("activationType"),
        activation_value=str(value) if value is not None else None,
    )


class Subscription:
    """Listeners for one notification, keyed by event name."""

    def __init__(self, listeners: Mapping[str, Listener]) -> None:
        self._listeners = dict(listeners)

    def __len__(self) -> int:
        return len(self._listeners)

    def emit(self, event: str, value: str | None = None) -> None:
        listener = self._listeners.get(event)
        if listener is not None:
            listener(value)


class TerminalNotifier:
    """Post notifications through a terminal-notifier compatible binary."""

    def __init__(self, binary: str = "terminal-notifier", sender: str | None = None) -> None:
        self.binary = binary
        self.sender = sender
        self._subscriptions: set[Subscription] = set()

    # -- events -----------------------------------------------------------

    def listener_count(self) -> int:
        """Listeners attached across all live subscriptions."""
        return sum(len(sub) for sub in self._subscriptions)

    def emit(self, subscription: Subscription, event: str, value: str | None = None) -> None:
        # a detached subscription no longer hears anything
        if subscription in self._subscriptions:
            subscription.emit(event, value)

    @contextlib.contextmanager
    def subscribe(self, listeners: Mapping[str, Listener]) -> Iterator[Subscription]:
        """Attach listeners for the duration of the block, then detach them all.

        Pass the yielded subscription to notify(); only that notification's
        activation reaches these listeners.
        """
        subscription = Subscription(listeners)
        self._subscriptions.add(subscription)
        try:
            yield subscription
        finally:
            self._subscriptions.discard(subscription)

    # -- posting ----------------------------------------------------------

    def build_command(self, options: NormalizedOptions) -> list[str]:
        """Translate normalized options into the binary's argv."""
        cmd = [self.binary, "-title", options.title, "-message", options.message]

        if options.subtitle:
            cmd += ["-subtitle", options.subtitle]
        if options.sound is True:
            cmd += ["-sound", "default"]
        elif options.sound:
            cmd += ["-sound", str(options.sound)]
        if options.icon:
            cmd += ["-appIcon", options.icon]
        if options.content_image:
            cmd += ["-contentImage", options.content_image]
        if options.close_label:
            cmd += ["-closeLabel", options.close_label]
        if options.actions:
            cmd += ["-actions", ",".join(options.actions)]
        if options.reply:
            cmd += ["-reply"]
        if self.sender:
            cmd += ["-sender", self.sender]

        cmd += ["-timeout", _format_timeout(options.timeout), "-json"]
        return cmd

    async def notify(
        self, options: NormalizedOptions, subscription: Subscription | None = None
    ) -> NotifierResponse:
        """Post a notification and wait for the binary to exit.

        The activation (if any) is emitted to `subscription` before this
        returns. Without a subscription nobody hears it.

        Raises:
            NotifierError: binary missing, or it exited with an error
        """
        if shutil.which(self.binary) is None:
            raise NotifierError(f"{self.binary} not found on PATH")

        cmd = self.build_command(options)
        _log.debug("running %s", cmd)
        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise NotifierError(f"could not start {self.binary}: {e}") from e

        stdout, stderr = await proc.communicate()
        err_text = stderr.decode(errors="replace").strip()
        if proc.returncode != 0:
            raise NotifierError(err_text or f"{self.binary} exited with status {proc.returncode}")

        response = parse_response(stdout.decode(errors="replace"))
        _log.debug("response: %r", response.raw)
        if response.event and subscription is not None:
            self.emit(subscription, response.event, response.activation_value)
        return response


def _format_timeout(seconds: float) -> str:
    if float(seconds).is_integer():
        return str(int(seconds))
    return str(seconds)
