"""Draw-surface models: edit events and the draw-control configuration."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from kml_capture.utils.measure import readable_distance

if TYPE_CHECKING:
    from collections.abc import Callable

    from kml_capture.models.feature import Feature


class DrawEventKind(enum.StrEnum):
    CREATED = "created"
    EDITED = "edited"
    DELETED = "deleted"


@dataclass(frozen=True, slots=True)
class DrawEvent:
    """An event raised by the map's draw control.

    Attributes:
        kind: What happened.
        layer: The new feature, for ``CREATED`` events.
        layers: Every feature still on the draw layer after the event,
            for ``EDITED`` and ``DELETED`` events.
    """

    kind: DrawEventKind
    layer: Feature | None = None
    layers: tuple[Feature, ...] = ()

    @classmethod
    def created(cls, feature: Feature) -> DrawEvent:
        return cls(kind=DrawEventKind.CREATED, layer=feature)

    @classmethod
    def edited(cls, layers: list[Feature] | tuple[Feature, ...]) -> DrawEvent:
        return cls(kind=DrawEventKind.EDITED, layers=tuple(layers))

    @classmethod
    def deleted(cls, layers: list[Feature] | tuple[Feature, ...]) -> DrawEvent:
        return cls(kind=DrawEventKind.DELETED, layers=tuple(layers))


@dataclass(frozen=True, slots=True)
class PolylineOptions:
    metric: bool = True
    show_length: bool = True
    precision: int = 2
    continue_tooltip: str = "Click to continue drawing line. Length: "
    end_tooltip: str = "Click last point to finish line. Total: "


@dataclass(frozen=True, slots=True)
class DrawControlOptions:
    """Configuration handed to the draw control when it is constructed.

    The distance formatter belongs to this instance, so measuring
    tooltips are configured once at construction time.

    Attributes:
        marker: Allow point placement.
        polygon: Allow polygon drawing.
        rectangle: Allow rectangle drawing (off; stored as polygons otherwise).
        circle: Allow circle drawing (off; circles have no GeoJSON form).
        circlemarker: Allow circle markers (off).
        polyline: Line-drawing options; ``None`` disables lines.
        distance_formatter: ``(metres, metric) -> label`` used by tooltips.
    """

    marker: bool = True
    polygon: bool = True
    rectangle: bool = False
    circle: bool = False
    circlemarker: bool = False
    polyline: PolylineOptions | None = field(default_factory=PolylineOptions)
    distance_formatter: Callable[[float, bool], str] = readable_distance

    def format_length(self, distance_m: float) -> str:
        """Format a measured line length with this control's settings."""
        metric = self.polyline.metric if self.polyline is not None else True
        return self.distance_formatter(distance_m, metric)

    def to_dict(self) -> dict[str, object]:
        """Return the ``draw`` option mapping for the control."""
        polyline: dict[str, object] | bool = False
        if self.polyline is not None:
            polyline = {
                "metric": self.polyline.metric,
                "showLength": self.polyline.show_length,
                "precision": self.polyline.precision,
            }
        return {
            "rectangle": self.rectangle,
            "circle": self.circle,
            "circlemarker": self.circlemarker,
            "marker": self.marker,
            "polyline": polyline,
            "polygon": self.polygon,
        }
