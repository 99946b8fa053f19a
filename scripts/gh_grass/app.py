"""
gh-grass TUI application.

The App is the event loop around SessionController: it forwards keys and
resizes, runs the single pending task in a worker thread, and re-delivers
the outcome as a message.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Callable

from textual import work
from textual.app import App
from textual.binding import Binding
from textual.message import Message

from gh_grass.providers import QueryService
from gh_grass.session import Event, KeyInput, SessionController, Task
from gh_grass.tasks import run_task
from gh_grass.views.session_view import SessionScreen

logger = logging.getLogger("gh_grass.app")


class TaskCompleted(Message):
    """Outcome of a background task, posted from the worker thread."""

    def __init__(self, event: Event) -> None:
        super().__init__()
        self.event = event


class GrassApp(App):
    """Interactive contribution checker."""

    TITLE = "gh-grass"
    SUB_TITLE = "GitHub contributions"

    # Every key belongs to the session; no palette screen on top of it
    ENABLE_COMMAND_PALETTE = False

    CSS = """
    Screen {
        background: $surface;
    }
    """

    BINDINGS = [
        Binding("ctrl+c", "interrupt", "Quit", show=False, priority=True),
        Binding("ctrl+q", "interrupt", "Quit", show=False, priority=True),
    ]

    def __init__(
        self,
        service: QueryService,
        clock: Callable[[], date] = date.today,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self._service = service
        self.controller = SessionController(clock)

    def on_mount(self) -> None:
        """Called when app is mounted."""
        self.push_screen(SessionScreen(self.controller.render(), self.controller.state))

    def apply_event(self, event: Event) -> None:
        """Feed one event to the session and act on the outcome."""
        task = self.controller.handle(event)
        if self.controller.finished:
            self.exit()
            return
        if task is not None:
            self._run_task(task)
        if isinstance(self.screen, SessionScreen):
            self.screen.show(self.controller.render(), self.controller.state)

    @work(thread=True, exclusive=True, group="fetch")
    def _run_task(self, task: Task) -> None:
        logger.debug("starting %r", task)
        self.post_message(TaskCompleted(run_task(self._service, task)))

    def on_task_completed(self, message: TaskCompleted) -> None:
        self.apply_event(message.event)

    def action_interrupt(self) -> None:
        """Terminate the session immediately."""
        self.apply_event(KeyInput("ctrl+c"))


def run(service: QueryService) -> int:
    """Run the TUI application and return its exit code."""
    app = GrassApp(service)
    app.run()
    return app.return_code or 0
