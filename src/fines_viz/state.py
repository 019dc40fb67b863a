"""View state and the pure reducer that drives every visualization.

A ``ViewState`` is created once per loaded view with every category
visible and is only ever replaced, never mutated: ``reduce`` maps the
current state plus one event to the next state.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Iterable, Literal, Union

ABSOLUTE = "absolute"
PERCENT = "percent"
SCALE_MODES = (ABSOLUTE, PERCENT)
CHART_KINDS = ("line", "stacked", "bar", "pie", "choropleth", "heatmap")

ScaleMode = Literal["absolute", "percent"]


@dataclass(frozen=True)
class ViewState:
    categories: tuple[str, ...]
    active_filters: frozenset[str]
    chart: str = "line"
    scale_mode: ScaleMode = ABSOLUTE
    time_slice: Any | None = None
    highlight: str | None = None
    saved_filters: frozenset[str] | None = None

    @property
    def percent(self) -> bool:
        return self.scale_mode == PERCENT

    def visible(self) -> list[str]:
        """Visible categories in declared order."""
        return [key for key in self.categories if key in self.active_filters]


def initial_state(
    categories: Iterable[str],
    *,
    chart: str = "line",
    time_slice: Any | None = None,
) -> ViewState:
    ordered = tuple(dict.fromkeys(categories))
    return ViewState(
        categories=ordered,
        active_filters=frozenset(ordered),
        chart=chart,
        time_slice=time_slice,
    )


@dataclass(frozen=True)
class ToggleCategory:
    key: str


@dataclass(frozen=True)
class SelectAll:
    pass


@dataclass(frozen=True)
class SelectOnly:
    keys: tuple[str, ...]


@dataclass(frozen=True)
class SetMode:
    mode: str


@dataclass(frozen=True)
class SetTimeSlice:
    time: Any


@dataclass(frozen=True)
class SetHighlight:
    key: str | None


Event = Union[ToggleCategory, SelectAll, SelectOnly, SetMode, SetTimeSlice, SetHighlight]


def _enter_percent(state: ViewState) -> ViewState:
    if state.percent:
        return state
    return replace(
        state,
        scale_mode=PERCENT,
        saved_filters=state.active_filters,
        active_filters=frozenset(state.categories),
    )


def _exit_percent(state: ViewState) -> ViewState:
    if not state.percent:
        return state
    restored = state.saved_filters if state.saved_filters is not None else state.active_filters
    return replace(state, scale_mode=ABSOLUTE, active_filters=restored, saved_filters=None)


def reduce(state: ViewState, event: Event) -> ViewState:
    """Return the state that follows *event*; unknown keys leave the state unchanged."""
    if isinstance(event, ToggleCategory):
        if state.percent or event.key not in state.categories:
            return state
        if event.key in state.active_filters:
            return replace(state, active_filters=state.active_filters - {event.key})
        return replace(state, active_filters=state.active_filters | {event.key})

    if isinstance(event, SelectAll):
        if state.percent:
            return state
        return replace(state, active_filters=frozenset(state.categories))

    if isinstance(event, SelectOnly):
        if state.percent:
            return state
        keys = frozenset(key for key in event.keys if key in state.categories)
        return replace(state, active_filters=keys)

    if isinstance(event, SetMode):
        if event.mode == PERCENT:
            return _enter_percent(state)
        if event.mode == ABSOLUTE:
            return _exit_percent(state)
        if event.mode in CHART_KINDS:
            return replace(state, chart=event.mode)
        raise ValueError(f"Unknown display mode: {event.mode}")

    if isinstance(event, SetTimeSlice):
        return replace(state, time_slice=event.time)

    if isinstance(event, SetHighlight):
        if event.key is None or event.key == state.highlight:
            return replace(state, highlight=None)
        return replace(state, highlight=event.key)

    raise TypeError(f"Unsupported event: {event!r}")
