"""Map messages and the controller that dispatches them through the reducers."""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Union

import httpx

from app.config import DEFAULT_MARKER_COLOR, Settings
from app.mapview import state as reducers
from app.mapview.client import ApiError, MemoryMapClient
from app.mapview.render import RenderedMap, render
from app.mapview.state import MapState, Projection
from app.schemas.memory import MemoryResponse

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadStarted:
    pass


@dataclass(frozen=True)
class PinsLoaded:
    pins: tuple[MemoryResponse, ...]


@dataclass(frozen=True)
class LoadFailed:
    error: str


@dataclass(frozen=True)
class PinAdded:
    pin: MemoryResponse


@dataclass(frozen=True)
class FilterChanged:
    text: str


@dataclass(frozen=True)
class FilterReset:
    pass


@dataclass(frozen=True)
class ProjectionChanged:
    projection: Projection


@dataclass(frozen=True)
class MapClicked:
    lng: float
    lat: float
    place: str = ""


@dataclass(frozen=True)
class ClickCleared:
    pass


Message = Union[
    LoadStarted,
    PinsLoaded,
    LoadFailed,
    PinAdded,
    FilterChanged,
    FilterReset,
    ProjectionChanged,
    MapClicked,
    ClickCleared,
]

_REDUCERS: dict[type, Callable[[MapState, Any], MapState]] = {
    LoadStarted: lambda s, m: reducers.load_started(s),
    PinsLoaded: lambda s, m: reducers.pins_loaded(s, m.pins),
    LoadFailed: lambda s, m: reducers.load_failed(s, m.error),
    PinAdded: lambda s, m: reducers.pin_added(s, m.pin),
    FilterChanged: lambda s, m: reducers.filter_changed(s, m.text),
    FilterReset: lambda s, m: reducers.filter_reset(s),
    ProjectionChanged: lambda s, m: reducers.projection_changed(s, m.projection),
    MapClicked: lambda s, m: reducers.map_clicked(s, m.lng, m.lat, m.place),
    ClickCleared: lambda s, m: reducers.click_cleared(s),
}


def reduce(state: MapState, message: Message) -> MapState:
    try:
        reducer = _REDUCERS[type(message)]
    except KeyError:
        raise TypeError(f"Unknown map message: {message!r}") from None
    return reducer(state, message)


Listener = Callable[[MapState], None]


class MapController:
    """
    Holds the current MapState, applies messages and notifies subscribers when the state changes.
    Rendering stays outside: subscribers call render() on the state they receive.
    """

    def __init__(
        self,
        client: Optional[MemoryMapClient] = None,
        state: Optional[MapState] = None,
        api_url: str = "",
        default_color: str = DEFAULT_MARKER_COLOR,
    ) -> None:
        self.client = client
        self.api_url = api_url
        self.default_color = default_color
        self._state = state or MapState()
        self._listeners: list[Listener] = []

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "MapController":
        """Controller wired to the configured API URL, Mapbox token and default marker color."""
        return cls(
            MemoryMapClient.from_settings(settings, token=token, transport=transport),
            api_url=settings.api_url,
            default_color=settings.default_marker_color,
        )

    @property
    def state(self) -> MapState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, message: Message) -> MapState:
        new_state = reduce(self._state, message)
        if new_state != self._state:
            self._state = new_state
            for listener in list(self._listeners):
                listener(new_state)
        return self._state

    def render(self) -> RenderedMap:
        return render(self._state, self.api_url, self.default_color)

    def _require_client(self) -> MemoryMapClient:
        if self.client is None:
            raise RuntimeError("MapController has no API client")
        return self.client

    async def load(self) -> MapState:
        """Fetch all memories once; failures are recorded in state, not raised."""
        client = self._require_client()
        self.dispatch(LoadStarted())
        # ValueError covers undecodable or malformed payloads
        try:
            pins = await client.list_memories()
        except (ApiError, httpx.HTTPError, ValueError) as exc:
            logger.error("Failed to load memories: %s", exc)
            return self.dispatch(LoadFailed(str(exc)))
        return self.dispatch(PinsLoaded(tuple(pins)))

    async def submit(
        self,
        fields: Mapping[str, Any],
        filename: str,
        content: bytes,
        content_type: Optional[str] = None,
    ) -> MemoryResponse:
        """Create a memory and append the returned record without refetching. Errors reach the caller."""
        pin = await self._require_client().create_memory(fields, filename, content, content_type)
        self.dispatch(PinAdded(pin))
        return pin

    async def click(self, lng: float, lat: float) -> MapState:
        """Record a clicked point with its place name; a failed lookup leaves the place empty."""
        place = await self._require_client().reverse_geocode(lng, lat)
        return self.dispatch(MapClicked(lng, lat, place))
