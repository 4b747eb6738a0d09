"""Render map state into markers, popups and GeoJSON. Pure: same state, same output."""

from dataclasses import dataclass
from datetime import date
from html import escape
from typing import Any

from app.config import DEFAULT_MARKER_COLOR
from app.mapview.filtering import visible_pins
from app.mapview.state import MapState, Projection
from app.schemas.memory import MemoryResponse


@dataclass(frozen=True)
class Marker:
    memory_id: int
    longitude: float
    latitude: float
    color: str
    popup_html: str


@dataclass(frozen=True)
class RenderedMap:
    projection: Projection
    markers: tuple[Marker, ...]


def format_memory_date(value: date) -> str:
    """US-style short date, e.g. 5/1/2024."""
    return f"{value.month}/{value.day}/{value.year}"


def media_url(file_url: str, api_url: str) -> str:
    if file_url.startswith(("http://", "https://")):
        return file_url
    return f"{api_url.rstrip('/')}{file_url}"


def popup_html(pin: MemoryResponse, api_url: str) -> str:
    name = escape(pin.memory_name)
    parts = [
        '<div style="text-align:center; margin-bottom:8px;">'
        f'<img src="{escape(media_url(pin.file_url, api_url))}" alt="{name}" '
        'style="max-width:100%; height:auto; border-radius:4px;" /></div>',
        f"<h3>{name}</h3>",
        f"<p><strong>Place:</strong> {escape(pin.place)}</p>",
    ]
    if pin.description:
        parts.append(f"<p>{escape(pin.description)}</p>")
    parts.append(f"<small>{format_memory_date(pin.memory_date)}</small>")
    if pin.prompt_text:
        parts.append(f"<p><em>Prompt:</em> {escape(pin.prompt_text)}</p>")
    return "\n".join(parts)


def render_markers(
    state: MapState,
    api_url: str = "",
    default_color: str = DEFAULT_MARKER_COLOR,
) -> tuple[Marker, ...]:
    """One marker per pin passing the filter; pins without coordinates cannot be placed and are skipped."""
    return tuple(
        Marker(
            memory_id=pin.memory_id,
            longitude=pin.longitude,
            latitude=pin.latitude,
            color=pin.category_color or default_color,
            popup_html=popup_html(pin, api_url),
        )
        for pin in visible_pins(state.pins, state.filter_text)
        if pin.latitude is not None and pin.longitude is not None
    )


def render(state: MapState, api_url: str = "", default_color: str = DEFAULT_MARKER_COLOR) -> RenderedMap:
    return RenderedMap(
        projection=state.projection,
        markers=render_markers(state, api_url, default_color),
    )


def to_geojson(markers: tuple[Marker, ...]) -> dict[str, Any]:
    """FeatureCollection with coordinates in [longitude, latitude] order."""
    return {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "id": m.memory_id,
                "geometry": {"type": "Point", "coordinates": [m.longitude, m.latitude]},
                "properties": {"color": m.color, "popup": m.popup_html},
            }
            for m in markers
        ],
    }
