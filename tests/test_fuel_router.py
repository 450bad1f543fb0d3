import pytest
from unittest.mock import patch, AsyncMock, MagicMock

from bessertanken.schemas.fuel import FuelStation, FuelStationDetail, FuelType
from bessertanken.services.errors import TransportError


# ---------------------------------------------------------------------------
# Sample decoded records reused across tests
# ---------------------------------------------------------------------------

MOCK_STATION = FuelStation(
    id="51d4b55e-a095-1aa0-e100-80009459e03a",
    name="ARAL Tankstelle",
    brand="ARAL",
    street="Hanauer Landstr. 34",
    postcode="60314",
    place="Frankfurt am Main",
    lat=50.1127,
    lon=8.6977,
    distance=1.4,
    is_open=True,
    prices={FuelType.DIESEL: 1.659, FuelType.SUPER_E5: 1.799},
)

MOCK_DETAIL = FuelStationDetail(**MOCK_STATION.model_dump())


def mock_service(**methods):
    service = MagicMock()
    for name, value in methods.items():
        if isinstance(value, Exception):
            setattr(service, name, AsyncMock(side_effect=value))
        else:
            setattr(service, name, AsyncMock(return_value=value))
    return service


# ---------------------------------------------------------------------------
# GET /api/v1/fuel-types
# ---------------------------------------------------------------------------

class TestFuelTypesEndpoint:

    ENDPOINT = "/api/v1/fuel-types"

    @patch("bessertanken.routers.fuel.get_kraftstoffbilliger_service")
    def test_returns_ids_and_labels(self, mock_service_factory, client):
        mock_service_factory.return_value = mock_service(list_fuel_types=[FuelType.DIESEL, FuelType.SUPER_E10])

        response = client.get(self.ENDPOINT)

        assert response.status_code == 200
        assert response.json() == [
            {"id": 1, "name": "Diesel"},
            {"id": 3, "name": "Super E10"},
        ]

    @patch("bessertanken.routers.fuel.get_kraftstoffbilliger_service")
    def test_transport_error_returns_503(self, mock_service_factory, client):
        mock_service_factory.return_value = mock_service(list_fuel_types=TransportError("connection refused"))

        response = client.get(self.ENDPOINT)

        assert response.status_code == 503
        assert "Fuel price service unavailable" in response.json()["detail"]
        assert "connection refused" in response.json()["detail"]


# ---------------------------------------------------------------------------
# GET /api/v1/stations
# ---------------------------------------------------------------------------

class TestSearchStationsEndpoint:

    ENDPOINT = "/api/v1/stations"

    @patch("bessertanken.routers.fuel.get_kraftstoffbilliger_service")
    def test_returns_stations(self, mock_service_factory, client):
        mock_service_factory.return_value = mock_service(search_stations=[MOCK_STATION])

        response = client.get(self.ENDPOINT, params={"fuel_type": 2, "lat": 50.1, "lon": 8.6})

        assert response.status_code == 200
        data = response.json()
        assert len(data) == 1
        assert data[0]["id"] == MOCK_STATION.id
        assert data[0]["brand"] == "ARAL"

    @patch("bessertanken.routers.fuel.get_kraftstoffbilliger_service")
    def test_query_is_forwarded_to_service(self, mock_service_factory, client):
        service = mock_service(search_stations=[])
        mock_service_factory.return_value = service

        client.get(self.ENDPOINT, params={"fuel_type": 2, "lat": 50.1, "lon": 8.6, "radius": 5})

        service.search_stations.assert_called_once_with(FuelType.SUPER_E5, 50.1, 8.6, 5)

    @patch("bessertanken.routers.fuel.get_kraftstoffbilliger_service")
    def test_empty_result_is_200_with_empty_list(self, mock_service_factory, client):
        mock_service_factory.return_value = mock_service(search_stations=[])

        response = client.get(self.ENDPOINT, params={"fuel_type": 1, "lat": 50.1, "lon": 8.6})

        assert response.status_code == 200
        assert response.json() == []

    def test_unknown_fuel_type_is_rejected(self, client):
        response = client.get(self.ENDPOINT, params={"fuel_type": 99, "lat": 50.1, "lon": 8.6})
        assert response.status_code == 422

    @patch("bessertanken.routers.fuel.get_kraftstoffbilliger_service")
    def test_transport_error_returns_503(self, mock_service_factory, client):
        mock_service_factory.return_value = mock_service(search_stations=TransportError("timeout"))

        response = client.get(self.ENDPOINT, params={"fuel_type": 1, "lat": 50.1, "lon": 8.6})
        assert response.status_code == 503


# ---------------------------------------------------------------------------
# GET /api/v1/stations/route
# ---------------------------------------------------------------------------

class TestRouteEndpoint:

    ENDPOINT = "/api/v1/stations/route"

    @patch("bessertanken.routers.fuel.get_kraftstoffbilliger_service")
    def test_map_query_parameter_is_forwarded(self, mock_service_factory, client):
        service = mock_service(search_stations_along_route=[MOCK_STATION])
        mock_service_factory.return_value = service

        response = client.get(
            self.ENDPOINT,
            params={"lat": 50.11, "lon": 8.68, "lat2": 48.14, "lon2": 11.58, "fuel_type": 1, "map": "osm"},
        )

        assert response.status_code == 200
        service.search_stations_along_route.assert_called_once_with(
            50.11, 8.68, 48.14, 11.58, FuelType.DIESEL, "osm"
        )


# ---------------------------------------------------------------------------
# GET /api/v1/stations/{station_id}
# ---------------------------------------------------------------------------

class TestStationDetailEndpoint:

    @patch("bessertanken.routers.fuel.get_kraftstoffbilliger_service")
    def test_returns_detail(self, mock_service_factory, client):
        mock_service_factory.return_value = mock_service(get_station_detail=MOCK_DETAIL)

        response = client.get(f"/api/v1/stations/{MOCK_DETAIL.id}")

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == MOCK_DETAIL.id
        assert data["opening_times"] == []
        assert data["price_history"] == []

    @patch("bessertanken.routers.fuel.get_kraftstoffbilliger_service")
    def test_absent_detail_returns_404(self, mock_service_factory, client):
        mock_service_factory.return_value = mock_service(get_station_detail=None)

        response = client.get("/api/v1/stations/does-not-exist")

        assert response.status_code == 404

    @patch("bessertanken.routers.fuel.get_kraftstoffbilliger_service")
    def test_route_path_is_not_treated_as_station_id(self, mock_service_factory, client):
        service = mock_service(search_stations_along_route=[], get_station_detail=None)
        mock_service_factory.return_value = service

        client.get(
            "/api/v1/stations/route",
            params={"lat": 50.1, "lon": 8.6, "lat2": 48.1, "lon2": 11.5, "fuel_type": 1},
        )

        service.get_station_detail.assert_not_called()


# ---------------------------------------------------------------------------
# Health check endpoint (already exists in test_api.py, but grouped here too)
# ---------------------------------------------------------------------------

class TestHealthEndpoint:

    def test_health_returns_ok(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok", "service": "BesserTanken"}
