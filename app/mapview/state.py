"""Map view state and the pure reducers that produce new states."""

from dataclasses import dataclass, replace
from typing import Iterable, Literal, Optional

from app.schemas.memory import MemoryResponse

Projection = Literal["mercator", "globe"]
PROJECTIONS: tuple[Projection, ...] = ("mercator", "globe")


@dataclass(frozen=True)
class MapState:
    pins: tuple[MemoryResponse, ...] = ()
    filter_text: str = ""
    projection: Projection = "mercator"
    loading: bool = False
    error: Optional[str] = None
    # Last clicked point (lng, lat) and its reverse-geocoded place, used to prefill a new memory
    click_coords: Optional[tuple[float, float]] = None
    click_place: str = ""


def load_started(state: MapState) -> MapState:
    return replace(state, loading=True, error=None)


def pins_loaded(state: MapState, pins: Iterable[MemoryResponse]) -> MapState:
    return replace(state, pins=tuple(pins), loading=False, error=None)


def load_failed(state: MapState, error: str) -> MapState:
    return replace(state, loading=False, error=error)


def pin_added(state: MapState, pin: MemoryResponse) -> MapState:
    """Newest submission goes first, exactly as the server returned it."""
    return replace(state, pins=(pin, *state.pins))


def filter_changed(state: MapState, text: str) -> MapState:
    return replace(state, filter_text=text)


def filter_reset(state: MapState) -> MapState:
    return replace(state, filter_text="")


def projection_changed(state: MapState, projection: Projection) -> MapState:
    """Presentation only; pins are left untouched."""
    if projection not in PROJECTIONS:
        raise ValueError(f"Unknown projection: {projection}")
    return replace(state, projection=projection)


def map_clicked(state: MapState, lng: float, lat: float, place: str) -> MapState:
    return replace(state, click_coords=(lng, lat), click_place=place)


def click_cleared(state: MapState) -> MapState:
    """Adding a memory without a clicked point starts from an empty location."""
    return replace(state, click_coords=None, click_place="")
