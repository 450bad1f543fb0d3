from datetime import datetime, time
from enum import IntEnum
from types import MappingProxyType
from typing import Annotated, Dict, Mapping, Optional, Tuple

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, PlainSerializer


class FuelType(IntEnum):
    """Fuel types known to the Kraftstoffbilliger API, keyed by their API id."""
    DIESEL = 1
    SUPER_E5 = 2
    SUPER_E10 = 3
    SUPER_PLUS = 4
    LPG = 5
    CNG = 6
    LNG = 7

    @property
    def label(self) -> str:
        return FUEL_TYPE_LABELS[self]


FUEL_TYPE_LABELS = {
    FuelType.DIESEL: "Diesel",
    FuelType.SUPER_E5: "Super E5",
    FuelType.SUPER_E10: "Super E10",
    FuelType.SUPER_PLUS: "Super Plus",
    FuelType.LPG: "Autogas (LPG)",
    FuelType.CNG: "Erdgas (CNG)",
    FuelType.LNG: "LNG",
}


class Weekday(IntEnum):
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6
    SUNDAY = 7


class PriceEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    fuel_type: FuelType
    price: float = Field(description="Price per litre (or kg for CNG) in EUR")
    changed_at: Optional[datetime] = Field(default=None, description="Local wall-clock time of the price change")


class OpeningTime(BaseModel):
    model_config = ConfigDict(frozen=True)

    weekday: Weekday
    opens: time
    closes: time


# Read-only view over the current price per fuel type; dumps back to a plain dict
PriceMap = Annotated[
    Mapping[FuelType, float],
    AfterValidator(lambda prices: MappingProxyType(dict(prices))),
    PlainSerializer(dict, return_type=Dict[FuelType, float]),
]


class FuelStation(BaseModel):
    """A station as returned by the search and routing endpoints."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: Optional[str] = None
    brand: Optional[str] = None
    street: Optional[str] = None
    postcode: Optional[str] = None
    place: Optional[str] = None
    lat: float
    lon: float
    distance: Optional[float] = Field(default=None, description="Distance from the search point in km")
    is_open: Optional[bool] = None
    prices: PriceMap = Field(default_factory=dict, validate_default=True)


class FuelStationDetail(FuelStation):
    """A station as returned by the details endpoint."""
    opening_times: Tuple[OpeningTime, ...] = ()
    price_history: Tuple[PriceEntry, ...] = ()


class FuelTypeResponse(BaseModel):
    id: int
    name: str
