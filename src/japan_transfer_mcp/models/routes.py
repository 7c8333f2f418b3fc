from datetime import datetime
from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field


class StationRole(str, Enum):
    """Where a station sits in an itinerary."""

    START = "start"
    END = "end"
    TRANSFER = "transfer"
    OTHER = "other"


class TransportMode(str, Enum):
    """Known transport modes.

    TransportSegment.mode stays a plain string so that modes the site adds
    later survive parsing; the renderer falls back to the train marker.
    """

    TRAIN = "train"
    SUBWAY = "subway"
    BUS = "bus"
    CAR = "car"
    TAXI = "taxi"
    WALK = "walk"


class TagKind(str, Enum):
    """Route badges shown by the site (fast / comfortable / cheap / car)."""

    FAST = "fast"
    COMFORTABLE = "comfortable"
    CHEAP = "cheap"
    CAR = "car"
    OTHER = "other"


class _ValueObject(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class Weather(_ValueObject):
    condition: str = Field(description="sunny, cloudy, rainy, snowy or a site-specific value")


class StationSegment(_ValueObject):
    """A station (or stop) along the itinerary."""

    kind: Literal["station"] = "station"
    role: StationRole = StationRole.OTHER
    name: str
    platform: str | None = None
    weather: Weather | None = None


class TransportSegment(_ValueObject):
    """A ride or walk between two stations."""

    kind: Literal["transport"] = "transport"
    mode: str = TransportMode.TRAIN.value
    line_name: str
    departure_time: str | None = Field(default=None, description="HH:MM")
    arrival_time: str | None = Field(default=None, description="HH:MM")
    duration_minutes: int | None = None
    fare: int | None = Field(default=None, description="Fare in yen")
    distance: str | None = Field(default=None, description="Distance as shown, e.g. '12.3km'")


Segment = Annotated[StationSegment | TransportSegment, Field(discriminator="kind")]


class Tag(_ValueObject):
    kind: TagKind
    label: str


class Co2Emission(_ValueObject):
    amount: str
    comparison: str | None = None
    reduction_rate: str | None = None


class Notice(_ValueObject):
    title: str
    description: str | None = None


class Route(_ValueObject):
    """One candidate itinerary.

    route_number is the number the site printed on the block; it is never
    reassigned, not even after truncation.
    """

    route_number: int
    departure_time: str = Field(description="HH:MM")
    arrival_time: str = Field(description="HH:MM")
    total_minutes: int | None = None
    transfer_count: int | None = None
    total_fare: int | None = Field(default=None, description="Total fare in yen")
    total_distance_km: float | None = None
    tags: list[Tag] = Field(default_factory=list)
    co2: Co2Emission | None = None
    segments: list[Segment] = Field(default_factory=list)
    notices: list[Notice] = Field(default_factory=list)


class RouteSearchResult(_ValueObject):
    """Parsed route search page, routes in source document order."""

    captured_at: datetime
    routes: list[Route] = Field(default_factory=list)
    parse_errors: list[str] = Field(
        default_factory=list, description="One entry per route block that was dropped"
    )


class RouteSearchPage(BaseModel):
    """Raw route search response: the resolved URL and the HTML body."""

    url: str
    data: str
