"""Screen that displays the rendered session and forwards input to it."""

from textual import events
from textual.app import ComposeResult
from textual.containers import Container
from textual.screen import Screen
from textual.widgets import Header, Static

from gh_grass.session import KeyInput, ResizeInput, SessionState


class SessionView(Static):
    """Text body of the current session state."""

    DEFAULT_CSS = """
    SessionView {
        height: auto;
        padding: 1 2;
    }

    SessionView.loading {
        color: $text-muted;
    }

    SessionView.result {
        color: $success;
    }

    SessionView.error {
        color: $error;
    }
    """

    STATE_CLASSES = {
        SessionState.LOADING: "loading",
        SessionState.RESULT: "result",
        SessionState.ERROR: "error",
    }

    def show(self, text: str, state: SessionState) -> None:
        self.update(text)
        for css_class in self.STATE_CLASSES.values():
            self.remove_class(css_class)
        css_class = self.STATE_CLASSES.get(state)
        if css_class:
            self.add_class(css_class)


class SessionScreen(Screen):
    """The only screen; every key and resize goes to the session."""

    DEFAULT_CSS = """
    SessionScreen #body {
        margin: 1 2;
        border: solid $primary;
        height: auto;
    }
    """

    def __init__(self, text: str, state: SessionState, **kwargs) -> None:
        super().__init__(**kwargs)
        self._text = text
        self._state = state

    def compose(self) -> ComposeResult:
        yield Header()
        with Container(id="body"):
            # Session text carries user input and API messages, never markup
            yield SessionView(self._text, markup=False)

    def on_mount(self) -> None:
        self.query_one(SessionView).show(self._text, self._state)

    def show(self, text: str, state: SessionState) -> None:
        self._text = text
        self._state = state
        # Resize can arrive before compose has mounted the view
        for view in self.query(SessionView):
            view.show(text, state)

    def on_key(self, event: events.Key) -> None:
        event.stop()
        self.app.apply_event(KeyInput(event.key, event.character))

    def on_resize(self, event: events.Resize) -> None:
        self.app.apply_event(ResizeInput(event.size.width, event.size.height))
