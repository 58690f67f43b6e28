"""Shared fixtures for notifymcp tests."""

import asyncio

import pytest

from notifymcp.notifier import NotifierResponse, TerminalNotifier


class FakeNotifier(TerminalNotifier):
    """In-memory notifier: emits scripted events instead of running a binary.

    events is either a list of (event, value) pairs used for every call, or a
    dict mapping notification title to such a list. delays maps a title to
    how long its "binary" runs before reporting.
    """

    def __init__(self, events=(), response="", error=None, delays=None):
        super().__init__(binary="fake-notifier")
        self.events = events if isinstance(events, dict) else list(events)
        self.response = response
        self.error = error
        self.delays = delays or {}
        self.calls = []
        self.listeners_during_notify = None

    async def notify(self, options, subscription=None):
        self.calls.append(options)
        self.listeners_during_notify = self.listener_count()
        await asyncio.sleep(self.delays.get(options.title, 0))
        if self.error is not None:
            raise self.error
        events = self.events
        if isinstance(events, dict):
            events = events.get(options.title, [])
        if subscription is not None:
            for event, value in events:
                self.emit(subscription, event, value)
        return NotifierResponse(raw=self.response)


@pytest.fixture
def make_notifier():
    return FakeNotifier
