"""
Interactive session state machine.

The session is a sequence of screens (mode select, input or member
selection, date select, loading, result or error). Every input is an Event;
`transition` maps the current SessionModel snapshot and one event to the
next snapshot plus at most one Task to run in the background. A task's
outcome comes back as another event.

SessionController is the single owner of the current snapshot.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from datetime import date, timedelta
from enum import Enum
from typing import Callable, Union

from gh_grass.providers import (
    ContributionResult,
    NotFound,
    User,
    ValidationError,
)

INTERRUPT_KEY = "ctrl+c"
QUIT_KEY = "q"

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

# Below this width list descriptions are dropped
NARROW_WIDTH = 40


class SessionState(Enum):
    MODE_SELECT = "mode_select"
    INPUT_USER = "input_user"
    INPUT_ORG = "input_org"
    SELECT_MEMBER = "select_member"
    DATE_SELECT = "date_select"
    INPUT_DATE = "input_date"
    LOADING = "loading"
    RESULT = "result"
    ERROR = "error"


LIST_STATES = frozenset(
    {SessionState.MODE_SELECT, SessionState.SELECT_MEMBER, SessionState.DATE_SELECT}
)
INPUT_STATES = frozenset(
    {SessionState.INPUT_USER, SessionState.INPUT_ORG, SessionState.INPUT_DATE}
)
TERMINAL_STATES = frozenset({SessionState.RESULT, SessionState.ERROR})


# --- Targets ---------------------------------------------------------------


@dataclass(frozen=True)
class SelfTarget:
    """The credential owner; the login is looked up when the fetch runs."""


@dataclass(frozen=True)
class NamedUser:
    login: str


@dataclass(frozen=True)
class OrgMember:
    login: str


Target = Union[SelfTarget, NamedUser, OrgMember]


# --- Date choices ----------------------------------------------------------


@dataclass(frozen=True)
class Today:
    def resolve(self, today: date) -> date:
        return today


@dataclass(frozen=True)
class Yesterday:
    def resolve(self, today: date) -> date:
        return today - timedelta(days=1)


@dataclass(frozen=True)
class Explicit:
    day: date

    def resolve(self, today: date) -> date:
        return self.day


DateChoice = Union[Today, Yesterday, Explicit]


def parse_date(text: str) -> date:
    """Parse a strict YYYY-MM-DD string.

    Raises ValidationError for anything else, including impossible
    calendar dates such as 2023-13-40.
    """
    value = text.strip()
    if not DATE_PATTERN.match(value):
        raise ValidationError(
            f"invalid date format (use YYYY-MM-DD): {value!r} does not match YYYY-MM-DD"
        )
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise ValidationError(f"invalid date format (use YYYY-MM-DD): {e}") from e


# --- Events ----------------------------------------------------------------


@dataclass(frozen=True)
class KeyInput:
    """A key press. `character` is set for printable keys."""

    key: str
    character: str | None = None


@dataclass(frozen=True)
class ResizeInput:
    width: int
    height: int


@dataclass(frozen=True)
class RosterFetched:
    members: tuple[User, ...]


@dataclass(frozen=True)
class ContributionFetched:
    result: ContributionResult


@dataclass(frozen=True)
class FetchFailed:
    error: Exception


Event = Union[KeyInput, ResizeInput, RosterFetched, ContributionFetched, FetchFailed]


# --- Tasks -----------------------------------------------------------------


@dataclass(frozen=True)
class FetchRoster:
    org: str


@dataclass(frozen=True)
class FetchContribution:
    target: Target
    day: date


Task = Union[FetchRoster, FetchContribution]


# --- Model -----------------------------------------------------------------


@dataclass(frozen=True)
class ListItem:
    title: str
    description: str = ""


MODE_SELF = "Self"
MODE_USER = "Specific User"
MODE_ORG = "Organization"
DATE_TODAY = "Today"
DATE_YESTERDAY = "Yesterday"
DATE_OTHER = "Other (Date)"

MODE_ITEMS = (
    ListItem(MODE_SELF, "Check your own contributions"),
    ListItem(MODE_USER, "Check another user's contributions"),
    ListItem(MODE_ORG, "Select a member from an organization"),
)

INPUT_PROMPTS = {
    SessionState.INPUT_USER: ("Enter a GitHub username:", "Username"),
    SessionState.INPUT_ORG: ("Enter an organization name:", "Organization Name"),
    SessionState.INPUT_DATE: ("Enter a date:", "YYYY-MM-DD"),
}


@dataclass(frozen=True)
class SessionModel:
    """Immutable snapshot of the session."""

    state: SessionState = SessionState.MODE_SELECT
    title: str = "Select Mode"
    items: tuple[ListItem, ...] = MODE_ITEMS
    cursor: int = 0
    text: str = ""
    placeholder: str = ""
    org: str | None = None
    target: Target | None = None
    date_choice: DateChoice | None = None
    day: date | None = None
    # Local date the Today/Yesterday list was built from
    listed_on: date | None = None
    result: ContributionResult | None = None
    error: Exception | None = field(default=None, compare=False)
    width: int = 80
    height: int = 24
    finished: bool = False


def date_items(today: date) -> tuple[ListItem, ...]:
    return (
        ListItem(DATE_TODAY, today.isoformat()),
        ListItem(DATE_YESTERDAY, (today - timedelta(days=1)).isoformat()),
        ListItem(DATE_OTHER, "Specify a custom date"),
    )


Transition = tuple[SessionModel, Union[Task, None]]


def transition(model: SessionModel, event: Event, today: date) -> Transition:
    """Apply one event to a snapshot.

    Returns the next snapshot and the task to start, if any. A task is only
    ever returned together with a LOADING snapshot.
    """
    if model.finished:
        return model, None

    if isinstance(event, ResizeInput):
        return replace(model, width=event.width, height=event.height), None
    if isinstance(event, KeyInput):
        if event.key == INTERRUPT_KEY:
            return replace(model, finished=True), None
        return _on_key(model, event, today)
    if isinstance(event, (RosterFetched, ContributionFetched, FetchFailed)):
        if model.state is not SessionState.LOADING:
            return model, None
        return _on_completion(model, event), None
    raise TypeError(f"unsupported event: {event!r}")


def _on_key(model: SessionModel, event: KeyInput, today: date) -> Transition:
    state = model.state

    if state is SessionState.LOADING:
        return model, None

    if state in TERMINAL_STATES:
        if event.key == QUIT_KEY:
            return replace(model, finished=True), None
        return model, None

    if state in LIST_STATES:
        last = max(len(model.items) - 1, 0)
        if event.key in ("up", "k"):
            return replace(model, cursor=max(model.cursor - 1, 0)), None
        if event.key in ("down", "j"):
            return replace(model, cursor=min(model.cursor + 1, last)), None
        if event.key == "home":
            return replace(model, cursor=0), None
        if event.key == "end":
            return replace(model, cursor=last), None
        if event.key == QUIT_KEY:
            return replace(model, finished=True), None
        if event.key == "enter" and model.items:
            return _on_select(model, model.items[model.cursor].title, today)
        return model, None

    # Input states
    if event.key == "enter":
        return _on_submit(model, today)
    if event.key == "backspace":
        return replace(model, text=model.text[:-1]), None
    if event.character and len(event.character) == 1 and event.character.isprintable():
        return replace(model, text=model.text + event.character), None
    return model, None


def _on_select(model: SessionModel, title: str, today: date) -> Transition:
    state = model.state

    if state is SessionState.MODE_SELECT:
        if title == MODE_SELF:
            return _to_date_select(replace(model, target=SelfTarget()), today), None
        if title == MODE_USER:
            return _to_input(model, SessionState.INPUT_USER), None
        if title == MODE_ORG:
            return _to_input(model, SessionState.INPUT_ORG), None

    elif state is SessionState.SELECT_MEMBER:
        return _to_date_select(replace(model, target=OrgMember(title)), today), None

    elif state is SessionState.DATE_SELECT:
        if title == DATE_TODAY:
            return _start_contribution(model, Today(), today)
        if title == DATE_YESTERDAY:
            return _start_contribution(model, Yesterday(), today)
        if title == DATE_OTHER:
            return _to_input(model, SessionState.INPUT_DATE), None

    return model, None


def _on_submit(model: SessionModel, today: date) -> Transition:
    value = model.text.strip()
    if not value:
        return model, None

    if model.state is SessionState.INPUT_USER:
        return _to_date_select(replace(model, target=NamedUser(value)), today), None

    if model.state is SessionState.INPUT_ORG:
        loading = replace(model, state=SessionState.LOADING, org=value)
        return loading, FetchRoster(value)

    try:
        day = parse_date(value)
    except ValidationError as e:
        return _to_error(model, e), None
    return _start_contribution(model, Explicit(day), today)


def _on_completion(model: SessionModel, event: Event) -> SessionModel:
    if isinstance(event, FetchFailed):
        return _to_error(model, event.error)

    if isinstance(event, RosterFetched):
        if not event.members:
            return _to_error(model, NotFound(f"organization {model.org!r} has no visible members"))
        return replace(
            model,
            state=SessionState.SELECT_MEMBER,
            title="Select Member",
            items=tuple(ListItem(m.login, "Organization Member") for m in event.members),
            cursor=0,
        )

    return replace(model, state=SessionState.RESULT, result=event.result)


def _to_date_select(model: SessionModel, today: date) -> SessionModel:
    return replace(
        model,
        state=SessionState.DATE_SELECT,
        title="Select Date",
        items=date_items(today),
        listed_on=today,
        cursor=0,
    )


def _to_input(model: SessionModel, state: SessionState) -> SessionModel:
    _, placeholder = INPUT_PROMPTS[state]
    return replace(model, state=state, text="", placeholder=placeholder)


def _to_error(model: SessionModel, error: Exception) -> SessionModel:
    return replace(model, state=SessionState.ERROR, error=error)


def _start_contribution(model: SessionModel, choice: DateChoice, today: date) -> Transition:
    if model.target is None:
        # Every path into DATE_SELECT binds a target first
        return _to_error(model, ValidationError("no target selected")), None
    day = choice.resolve(model.listed_on or today)
    loading = replace(model, state=SessionState.LOADING, date_choice=choice, day=day)
    return loading, FetchContribution(model.target, day)


# --- Rendering -------------------------------------------------------------


def render(model: SessionModel) -> str:
    """Render a snapshot to plain text."""
    state = model.state

    if state in LIST_STATES:
        show_desc = model.width >= NARROW_WIDTH
        pad = max((len(item.title) for item in model.items), default=0)
        lines = [model.title, ""]
        for i, item in enumerate(model.items):
            marker = ">" if i == model.cursor else " "
            if show_desc and item.description:
                lines.append(f"{marker} {item.title.ljust(pad)}  {item.description}")
            else:
                lines.append(f"{marker} {item.title}")
        lines.extend(["", "↑/↓ navigate • enter select • q quit"])
        return "\n".join(lines)

    if state in INPUT_STATES:
        prompt, _ = INPUT_PROMPTS[state]
        value = model.text if model.text else f"({model.placeholder})"
        return f"{prompt}\n\n> {value}\n\n(enter to submit, ctrl+c to quit)"

    if state is SessionState.LOADING:
        return "Loading... please wait."

    if state is SessionState.RESULT and model.result is not None:
        result = model.result
        return (
            f"{result.login}'s contributions on {result.day.isoformat()}:\n\n"
            f"  {result.count}  \n\n(press q to quit)"
        )

    return f"Error occurred:\n\n{model.error}\n\n(press q to quit)"


class SessionController:
    """Owns the session snapshot and feeds it one event at a time."""

    def __init__(self, clock: Callable[[], date] = date.today) -> None:
        self._clock = clock
        self._model = SessionModel()

    @property
    def model(self) -> SessionModel:
        return self._model

    @property
    def state(self) -> SessionState:
        return self._model.state

    @property
    def finished(self) -> bool:
        return self._model.finished

    def handle(self, event: Event) -> Task | None:
        """Apply an event and return the task to start, if any."""
        self._model, task = transition(self._model, event, self._clock())
        return task

    def render(self) -> str:
        return render(self._model)
