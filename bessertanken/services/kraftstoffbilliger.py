import logging
from typing import Any, Callable, Dict, List, Optional, TypeVar

import httpx

from bessertanken import config
from bessertanken.schemas.fuel import FuelStation, FuelStationDetail, FuelType
from bessertanken.services import decoders
from bessertanken.services.envelope import RESULT_KEY, RESULTS_KEY, TYPES_KEY, unwrap, unwrap_first
from bessertanken.services.errors import EmptyResult, ResponseError, TransportError
from bessertanken.services.request_builder import Endpoint, build_request

_LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


class KraftstoffbilligerService:
    """
    Client for the Kraftstoffbilliger fuel-price API.

    Every operation is a single request/response round trip. Responses that
    cannot be unwrapped or decoded are logged and replaced by an empty list
    (or None for the detail lookup). Only transport failures reach the caller,
    as TransportError.

    Pass a shared httpx.AsyncClient to reuse its connection pool and timeout
    settings; otherwise each call opens a short-lived client. The service
    itself holds no mutable state, so concurrent calls are independent.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
    ):
        self._client = client
        self._api_key = api_key
        self._base_url = base_url

    async def _send(self, client: httpx.AsyncClient, request: httpx.Request) -> str:
        try:
            response = await client.send(request)
        except httpx.HTTPError as e:
            _LOGGER.warning("Request %s %s failed: %s", request.method, request.url, e)
            raise TransportError(f"Failed to reach {request.url}: {e}")

        if response.is_error:
            _LOGGER.warning("%s %s returned HTTP %s", request.method, request.url, response.status_code)
        return response.text

    async def _request(self, endpoint: Endpoint, params: Optional[Dict[str, str]] = None) -> str:
        # the key is looked up per request so a rotated secret is picked up
        api_key = self._api_key if self._api_key is not None else config.get_api_key()
        request = build_request(
            endpoint,
            params=params,
            api_key=api_key,
            base_url=self._base_url or config.get_base_url(),
        )

        if self._client is not None:
            return await self._send(self._client, request)
        async with httpx.AsyncClient() as client:
            return await self._send(client, request)

    def _decode_or_default(self, body: str, what: str, decode: Callable[[str], T], default: Any) -> T:
        try:
            return decode(body)
        except EmptyResult:
            _LOGGER.info("No %s in response %s", what, body)
            return default
        except ResponseError:
            _LOGGER.exception("Error while parsing %s json %s", what, body)
            return default

    async def list_fuel_types(self) -> List[FuelType]:
        body = await self._request(Endpoint.TYPES)
        return self._decode_or_default(
            body, "fuel types", lambda b: decoders.decode_fuel_types(unwrap(b, TYPES_KEY)), []
        )

    async def search_stations(
        self, fuel_type: FuelType, lat: float, lon: float, radius: Optional[int] = None
    ) -> List[FuelStation]:
        """Find stations selling `fuel_type` around (lat, lon), optionally within `radius` km."""
        form = {
            "type": str(int(fuel_type)),
            "lat": str(lat),
            "lon": str(lon),
        }
        if radius is not None:
            form["radius"] = str(radius)

        body = await self._request(Endpoint.SEARCH, form)
        return self._decode_or_default(
            body, "fuel stations", lambda b: decoders.decode_stations(unwrap(b, RESULTS_KEY)), []
        )

    async def search_stations_along_route(
        self,
        lat: float,
        lon: float,
        lat2: float,
        lon2: float,
        fuel_type: FuelType,
        map_provider: Optional[str] = None,
    ) -> List[FuelStation]:
        """Find stations along the route from (lat, lon) to (lat2, lon2)."""
        form = {
            "lat": str(lat),
            "lon": str(lon),
            "lat2": str(lat2),
            "lon2": str(lon2),
            "type": str(int(fuel_type)),
        }
        if map_provider is not None:
            form["map"] = map_provider

        body = await self._request(Endpoint.ROUTING, form)
        return self._decode_or_default(
            body, "fuel stations", lambda b: decoders.decode_stations(unwrap(b, RESULTS_KEY)), []
        )

    async def get_station_detail(self, station_id: str) -> Optional[FuelStationDetail]:
        body = await self._request(Endpoint.DETAILS, {"id": station_id})
        return self._decode_or_default(
            body,
            "fuel station details",
            lambda b: decoders.decode_station_detail(unwrap_first(b, RESULT_KEY)),
            None,
        )


# --- SINGLETON PATTERN ---
_service_instance = KraftstoffbilligerService()


def get_kraftstoffbilliger_service() -> KraftstoffbilligerService:
    return _service_instance
