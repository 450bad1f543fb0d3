"""
Decoders for Kraftstoffbilliger JSON payloads.

The API uses two encodings side by side. Entities (stations, fuel types)
are JSON objects with named fields. Repeated sub-records (price history,
opening times) are compact positional arrays. Each decoder below expects
exactly one of these shapes: it checks the node's shape first, then
extracts fields by name or by position. Anything unexpected raises a
DecodeError subclass that carries the offending node.
"""
import math
import re
from datetime import datetime, time
from typing import Any, Dict, List

from bessertanken.schemas.fuel import (
    FuelStation,
    FuelStationDetail,
    FuelType,
    OpeningTime,
    PriceEntry,
    Weekday,
)
from bessertanken.services.errors import (
    DecodeError,
    InvalidField,
    MalformedPositionalArray,
    MalformedTimestamp,
    MissingField,
    UnknownFuelTypeId,
)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
TIMESTAMP_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2} [0-9]{2}:[0-9]{2}:[0-9]{2}")

STATION_REQUIRED_FIELDS = ("id", "lat", "lon", "brand", "street", "place", "prices")


def _require_object(node: Any, what: str) -> Dict[str, Any]:
    if not isinstance(node, dict):
        raise DecodeError(f"Expected a JSON object for {what}", node)
    return node


def _require_array(node: Any, what: str) -> List[Any]:
    if not isinstance(node, list):
        raise DecodeError(f"Expected a JSON array for {what}", node)
    return node


def _is_number(value: Any) -> bool:
    # bool is an int subclass but never a valid number in these payloads
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _number(value: Any, field: str, node: Any) -> float:
    if not _is_number(value):
        raise InvalidField(field, "a number", node)
    try:
        number = float(value)
    except OverflowError:
        raise InvalidField(field, "a finite number", node)
    # json.loads accepts NaN and Infinity literals
    if not math.isfinite(number):
        raise InvalidField(field, "a finite number", node)
    return number


def _optional_number(value: Any, field: str, node: Any):
    if value is None:
        return None
    return _number(value, field, node)


def _optional_text(value: Any, field: str, node: Any):
    if value is None:
        return None
    if isinstance(value, str):
        return value
    # postcodes and house numbers sometimes arrive as bare integers
    if _is_number(value):
        return str(value)
    raise InvalidField(field, "a string", node)


# --- Fuel types ---

def decode_fuel_type_id(value: Any, node: Any = None) -> FuelType:
    """Map a bare fuel-type id (int or numeric string) onto FuelType."""
    if isinstance(value, str) and value.strip().isdecimal():
        value = int(value)
    if not isinstance(value, int) or isinstance(value, bool):
        raise UnknownFuelTypeId(value, node)
    try:
        return FuelType(value)
    except ValueError:
        raise UnknownFuelTypeId(value, node)


def decode_fuel_type(node: Any) -> FuelType:
    obj = _require_object(node, "fuel type")
    if "id" not in obj:
        raise MissingField("id", obj)
    return decode_fuel_type_id(obj["id"], obj)


def decode_fuel_types(node: Any) -> List[FuelType]:
    return [decode_fuel_type(item) for item in _require_array(node, "fuel type list")]


# --- Timestamps ---

def decode_timestamp(node: Any) -> datetime:
    """Parse 'YYYY-MM-DD HH:MM:SS' (local wall clock, no zone) into a naive datetime."""
    if not isinstance(node, str):
        raise MalformedTimestamp("Expected a timestamp string", node)
    # strptime alone would also accept unpadded fields such as "2024-3-1 6:15:0"
    if not TIMESTAMP_PATTERN.fullmatch(node):
        raise MalformedTimestamp(f"Timestamp does not match {TIMESTAMP_FORMAT}", node)
    try:
        return datetime.strptime(node, TIMESTAMP_FORMAT)
    except ValueError:
        raise MalformedTimestamp(f"Timestamp does not match {TIMESTAMP_FORMAT}", node)


# --- Positional sub-records ---

def decode_price_entry(node: Any) -> PriceEntry:
    entry = _require_array(node, "price entry")
    if len(entry) < 2:
        raise MalformedPositionalArray("Price entry needs at least [fuelTypeId, price]", node)

    changed_at = None
    if len(entry) > 2 and entry[2] is not None:
        changed_at = decode_timestamp(entry[2])

    return PriceEntry(
        fuel_type=decode_fuel_type_id(entry[0], node),
        price=_number(entry[1], "price", node),
        changed_at=changed_at,
    )


def decode_price_list(node: Any) -> List[PriceEntry]:
    """Decode [[fuelTypeId, price(, timestamp)], ...] keeping source order."""
    return [decode_price_entry(item) for item in _require_array(node, "price list")]


def _decode_clock_time(value: Any, field: str, node: Any) -> time:
    if not isinstance(value, str):
        raise InvalidField(field, "a HH:MM time", node)
    if value in ("24:00", "24:00:00"):
        return time.max
    try:
        return time.fromisoformat(value)
    except ValueError:
        raise InvalidField(field, "a HH:MM time", node)


def decode_opening_time(node: Any) -> OpeningTime:
    entry = _require_array(node, "opening time")
    if len(entry) < 3:
        raise MalformedPositionalArray("Opening time needs [weekday, opens, closes]", node)

    weekday = entry[0]
    if not isinstance(weekday, int) or isinstance(weekday, bool) or not 1 <= weekday <= 7:
        raise InvalidField("weekday", "an ISO weekday (1-7)", node)

    return OpeningTime(
        weekday=Weekday(weekday),
        opens=_decode_clock_time(entry[1], "opens", node),
        closes=_decode_clock_time(entry[2], "closes", node),
    )


def decode_opening_times(node: Any) -> List[OpeningTime]:
    return [decode_opening_time(item) for item in _require_array(node, "opening times")]


# --- Stations ---

def _decode_price_map(value: Any, node: Any) -> Dict[FuelType, float]:
    # an empty price map arrives as [] instead of {}
    if value == []:
        return {}
    if not isinstance(value, dict):
        raise InvalidField("prices", "an object", node)

    prices = {}
    for key, price in value.items():
        if price is None:
            continue
        prices[decode_fuel_type_id(key, node)] = _number(price, f"prices.{key}", node)
    return prices


def _station_fields(obj: Dict[str, Any]) -> Dict[str, Any]:
    for field in STATION_REQUIRED_FIELDS:
        if field not in obj:
            raise MissingField(field, obj)

    station_id = obj["id"]
    if isinstance(station_id, bool) or not isinstance(station_id, (str, int)):
        raise InvalidField("id", "a string", obj)

    is_open = obj.get("open")
    if is_open is not None and not isinstance(is_open, bool):
        raise InvalidField("open", "a boolean", obj)

    return {
        "id": str(station_id),
        "name": _optional_text(obj.get("name"), "name", obj),
        "brand": _optional_text(obj["brand"], "brand", obj),
        "street": _optional_text(obj["street"], "street", obj),
        "postcode": _optional_text(obj.get("postcode"), "postcode", obj),
        "place": _optional_text(obj["place"], "place", obj),
        "lat": _number(obj["lat"], "lat", obj),
        "lon": _number(obj["lon"], "lon", obj),
        "distance": _optional_number(obj.get("distance"), "distance", obj),
        "is_open": is_open,
        "prices": _decode_price_map(obj["prices"], obj),
    }


def decode_station(node: Any) -> FuelStation:
    return FuelStation(**_station_fields(_require_object(node, "fuel station")))


def decode_stations(node: Any) -> List[FuelStation]:
    """Decode a station list. One bad station fails the whole list."""
    return [decode_station(item) for item in _require_array(node, "fuel station list")]


def decode_station_detail(node: Any) -> FuelStationDetail:
    obj = _require_object(node, "fuel station detail")
    fields = _station_fields(obj)

    opening_times = obj.get("openingTimes")
    price_history = obj.get("priceHistory")

    return FuelStationDetail(
        **fields,
        opening_times=decode_opening_times(opening_times) if opening_times is not None else (),
        price_history=decode_price_list(price_history) if price_history is not None else (),
    )
