"""Map caller-supplied tool arguments onto the native notifier's option set.

Normalization is pure: the same request (and working directory) always
produces the same options. Optional fields are only populated when the
caller supplied something meaningful for them; everything else is left as
None and omitted from the native call.
"""

import os
from dataclasses import dataclass, field, replace
from typing import Any, Mapping

DEFAULT_TIMEOUT = 10
MAX_ACTIONS = 2


@dataclass
class NotificationRequest:
    """Arguments for one send_notification call."""

    title: str
    message: str = ""
    subtitle: str | None = None
    sound: str | None = None
    icon: str | None = None
    content_image: str | None = None
    wait: bool = False
    timeout: float | None = None
    close_label: str | None = None
    actions: list[str] = field(default_factory=list)
    reply: bool = False

    @classmethod
    def from_arguments(cls, arguments: Mapping[str, Any]) -> "NotificationRequest":
        """Build a request from the raw (camelCase) tool arguments."""
        return cls(
            title=arguments.get("title", ""),
            message=arguments.get("message") or "",
            subtitle=arguments.get("subtitle"),
            sound=arguments.get("sound"),
            icon=arguments.get("icon"),
            content_image=arguments.get("contentImage"),
            wait=bool(arguments.get("wait", False)),
            timeout=arguments.get("timeout"),
            close_label=arguments.get("closeLabel"),
            actions=list(arguments.get("actions") or []),
            reply=bool(arguments.get("reply", False)),
        )


@dataclass(frozen=True)
class NormalizedOptions:
    """Resolved options handed to the native notifier.

    sound is True (system default), False (silent) or a sound name.
    icon and content_image are absolute paths when present.
    """

    title: str
    message: str
    timeout: float
    wait: bool
    sound: bool | str = True
    subtitle: str | None = None
    icon: str | None = None
    content_image: str | None = None
    close_label: str | None = None
    actions: tuple[str, ...] | None = None
    reply: bool | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return the option bag with unset optional fields dropped."""
        options: dict[str, Any] = {
            "title": self.title,
            "message": self.message,
            "timeout": self.timeout,
            "wait": self.wait,
            "sound": self.sound,
        }
        optional = {
            "subtitle": self.subtitle,
            "icon": self.icon,
            "contentImage": self.content_image,
            "closeLabel": self.close_label,
            "actions": list(self.actions) if self.actions else None,
            "reply": self.reply,
        }
        options.update({k: v for k, v in optional.items() if v is not None})
        return options

    @property
    def wants_reply(self) -> bool:
        return bool(self.reply)

    @property
    def has_actions(self) -> bool:
        return bool(self.actions)


def resolve_sound(sound: str | None) -> bool | str:
    """Resolve a caller-facing sound choice.

    "none" means silent, "default" or nothing means the system default sound,
    any other name is passed through unchanged.
    """
    if sound == "none":
        return False
    if not sound or sound == "default":
        return True
    return sound


def resolve_path(path: str, cwd: str | None = None) -> str:
    """Resolve a (possibly relative) path to an absolute one.

    "~" is not expanded; it is an ordinary path component.
    """
    base = cwd if cwd is not None else os.getcwd()
    return os.path.normpath(os.path.join(base, path))


class OptionsBuilder:
    """Populate NormalizedOptions one field at a time.

    Each setter ignores empty input, so the built options only carry fields
    whose condition held.
    """

    def __init__(self, title: str, message: str = "") -> None:
        self._options = NormalizedOptions(
            title=title, message=message, timeout=DEFAULT_TIMEOUT, wait=False
        )

    def timeout(self, seconds: float | None, default: float = DEFAULT_TIMEOUT) -> "OptionsBuilder":
        # 0 counts as unset
        self._options = replace(self._options, timeout=seconds or default)
        return self

    def wait(self, wait: bool) -> "OptionsBuilder":
        self._options = replace(self._options, wait=bool(wait))
        return self

    def sound(self, sound: bool | str) -> "OptionsBuilder":
        self._options = replace(self._options, sound=sound)
        return self

    def subtitle(self, subtitle: str | None) -> "OptionsBuilder":
        if subtitle:
            self._options = replace(self._options, subtitle=subtitle)
        return self

    def icon(self, path: str | None, cwd: str | None = None) -> "OptionsBuilder":
        if path:
            self._options = replace(self._options, icon=resolve_path(path, cwd))
        return self

    def content_image(self, path: str | None, cwd: str | None = None) -> "OptionsBuilder":
        if path:
            self._options = replace(self._options, content_image=resolve_path(path, cwd))
        return self

    def close_label(self, label: str | None) -> "OptionsBuilder":
        if label:
            self._options = replace(self._options, close_label=label)
        return self

    def actions(self, actions: list[str] | None) -> "OptionsBuilder":
        if actions:
            self._options = replace(self._options, actions=tuple(actions[:MAX_ACTIONS]))
        return self

    def reply(self, reply: bool) -> "OptionsBuilder":
        if reply:
            self._options = replace(self._options, reply=True)
        return self

    def build(self) -> NormalizedOptions:
        return self._options


def normalize(
    request: NotificationRequest,
    cwd: str | None = None,
    default_timeout: float = DEFAULT_TIMEOUT,
) -> NormalizedOptions:
    """Normalize a send_notification request.

    Args:
        request: The caller's request
        cwd: Directory that relative icon/contentImage paths resolve against
            (defaults to the process working directory)
        default_timeout: Timeout used when the request has none

    Returns:
        The resolved options
    """
    return (
        OptionsBuilder(request.title, request.message or "")
        .timeout(request.timeout, default=default_timeout)
        .wait(request.wait)
        .sound(resolve_sound(request.sound))
        .subtitle(request.subtitle)
        .icon(request.icon, cwd)
        .content_image(request.content_image, cwd)
        .close_label(request.close_label)
        .actions(request.actions)
        .reply(request.reply)
        .build()
    )


def normalize_simple(
    arguments: Mapping[str, Any], default_timeout: float = DEFAULT_TIMEOUT
) -> NormalizedOptions:
    """Normalize send_simple_notification arguments.

    sound is a boolean here: anything but an explicit False plays the
    default sound.
    """
    return (
        OptionsBuilder(arguments.get("title", ""), arguments.get("message") or "")
        .timeout(None, default=default_timeout)
        .sound(arguments.get("sound") is not False)
        .build()
    )
