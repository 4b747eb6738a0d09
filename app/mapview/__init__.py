# Map view: state, reducers, rendering and the API client

from app.mapview.client import ApiError, MemoryMapClient
from app.mapview.events import (
    ClickCleared,
    FilterChanged,
    FilterReset,
    LoadFailed,
    LoadStarted,
    MapController,
    MapClicked,
    PinAdded,
    PinsLoaded,
    ProjectionChanged,
    reduce,
)
from app.mapview.filtering import matches, visible_pins
from app.mapview.render import Marker, RenderedMap, render, render_markers, to_geojson
from app.mapview.state import MapState

__all__ = [
    "ApiError",
    "ClickCleared",
    "FilterChanged",
    "FilterReset",
    "LoadFailed",
    "LoadStarted",
    "MapController",
    "MapClicked",
    "MapState",
    "Marker",
    "MemoryMapClient",
    "PinAdded",
    "PinsLoaded",
    "ProjectionChanged",
    "RenderedMap",
    "matches",
    "reduce",
    "render",
    "render_markers",
    "to_geojson",
    "visible_pins",
]
