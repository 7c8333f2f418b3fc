from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class PlaceCategory(str, Enum):
    """Suggest payload categories, in the order they are merged."""

    RAILWAY = "railway"
    BUS = "bus"
    SPOT = "spot"


class Place(BaseModel):
    """A single autocomplete candidate.

    Validates straight from the raw suggest entry (poiName, prefName,
    location.lat, ...); the category is injected by SuggestResult.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    name: str = Field(alias="poiName")
    category: PlaceCategory
    prefecture: str = Field(default="", alias="prefName")
    city: str | None = Field(default=None, alias="cityName")
    city_code: str | None = Field(default=None, alias="cityCode")
    address: str | None = None
    latitude: float
    longitude: float
    reading: str = Field(default="", alias="poiYomi")

    @model_validator(mode="before")
    @classmethod
    def _flatten_location(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        location = data.pop("location", None)
        if isinstance(location, dict):
            data.setdefault("latitude", location.get("lat"))
            data.setdefault("longitude", location.get("lon"))
        # cityCode arrives as a number for some entries
        if data.get("cityCode") is not None:
            data["cityCode"] = str(data["cityCode"])
        return data


class SuggestResult(BaseModel):
    """Raw suggest response: one independently ranked list per category.

    The site uses R (railway), B (bus) and S (spot) keys; any of them may be
    missing or null.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    railway: list[Place] = Field(default_factory=list, alias="R")
    bus: list[Place] = Field(default_factory=list, alias="B")
    spot: list[Place] = Field(default_factory=list, alias="S")

    @model_validator(mode="before")
    @classmethod
    def _tag_categories(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for key, category in (
            ("R", PlaceCategory.RAILWAY),
            ("B", PlaceCategory.BUS),
            ("S", PlaceCategory.SPOT),
        ):
            entries = data.get(key)
            if entries is None:
                data.pop(key, None)
                continue
            data[key] = [
                {**entry, "category": category} if isinstance(entry, dict) else entry
                for entry in entries
            ]
        return data

    def by_category(self, category: PlaceCategory) -> list[Place]:
        """Return the ranked list for one category."""
        if category is PlaceCategory.RAILWAY:
            return self.railway
        if category is PlaceCategory.BUS:
            return self.bus
        return self.spot
