"""Integration tests for the API endpoints."""

import pytest
from httpx import ASGITransport, AsyncClient

from hotpot.api.app import app, app_state
from hotpot.core.controller import HotPotController

JSON_HEADERS = {"Content-Type": "application/json"}


@pytest.fixture
async def test_client(controller: HotPotController):
    """Create test client with a controller whose clock is not running."""
    app_state.controller = controller

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    await controller.stop()
    app_state.controller = None


class TestHealthEndpoint:
    """Test health check endpoint."""

    @pytest.mark.asyncio
    async def test_health_returns_ok(self, test_client: AsyncClient) -> None:
        response = await test_client.get("/health")
        assert response.status_code == 200

        data = response.json()
        assert data["status"] == "healthy"
        assert data["controller_running"] is True
        assert data["clock_running"] is False


class TestPotEndpoints:
    """Test reading and changing the pot."""

    @pytest.mark.asyncio
    async def test_get_pot(self, test_client: AsyncClient) -> None:
        response = await test_client.get("/api/pot/")
        assert response.status_code == 200

        data = response.json()
        assert data["temperature"] == 25.0
        assert data["volume"] == 1000.0
        assert data["heater_setting"] == 5
        assert data["is_boiling"] is False
        assert data["foods"] == []
        assert data["total_heat_capacity"] == pytest.approx(4184.0)
        assert data["fire_output"] == 2500.0

    @pytest.mark.asyncio
    async def test_food_table(self, test_client: AsyncClient) -> None:
        response = await test_client.get("/api/pot/foods")
        kinds = {food["kind"] for food in response.json()["foods"]}
        assert kinds == {"beef", "potato", "tofu"}

    @pytest.mark.asyncio
    async def test_set_heater_clamps(self, test_client: AsyncClient) -> None:
        response = await test_client.post("/api/pot/heater", json={"setting": 42})
        assert response.status_code == 200
        assert response.json()["heater_setting"] == 10

    @pytest.mark.asyncio
    async def test_set_heater_rejects_garbage(self, test_client: AsyncClient) -> None:
        response = await test_client.post("/api/pot/heater", json={"setting": "high"})
        assert response.status_code == 400

    @pytest.mark.asyncio
    @pytest.mark.parametrize(("raw", "applied"), [("Infinity", 10), ("-Infinity", 0)])
    async def test_set_heater_clamps_infinity(
        self, test_client: AsyncClient, raw: str, applied: int
    ) -> None:
        response = await test_client.post(
            "/api/pot/heater",
            content=f'{{"setting": {raw}}}',
            headers=JSON_HEADERS,
        )
        assert response.status_code == 200
        assert response.json()["heater_setting"] == applied

    @pytest.mark.asyncio
    @pytest.mark.parametrize("raw", ["NaN", "3.7"])
    async def test_set_heater_rejects_non_integer(
        self, test_client: AsyncClient, raw: str
    ) -> None:
        response = await test_client.post(
            "/api/pot/heater",
            content=f'{{"setting": {raw}}}',
            headers=JSON_HEADERS,
        )
        assert response.status_code == 400

        pot = (await test_client.get("/api/pot/")).json()
        assert pot["heater_setting"] == 5

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [
            '{"amount": NaN, "temperature": 10}',
            '{"amount": Infinity, "temperature": 10}',
            '{"amount": 200, "temperature": NaN}',
            '{"amount": 200, "temperature": -Infinity}',
        ],
    )
    async def test_add_liquid_rejects_non_finite(
        self, test_client: AsyncClient, body: str
    ) -> None:
        response = await test_client.post(
            "/api/pot/liquid", content=body, headers=JSON_HEADERS
        )
        assert response.status_code == 400

        pot = (await test_client.get("/api/pot/")).json()
        assert pot["volume"] == 1000.0
        assert pot["temperature"] == 25.0

    @pytest.mark.asyncio
    async def test_add_liquid(self, test_client: AsyncClient) -> None:
        response = await test_client.post(
            "/api/pot/liquid",
            json={"amount": 200, "temperature": 10},
        )
        assert response.status_code == 200

        data = response.json()
        assert data["temperature"] == pytest.approx(22.5)
        assert data["volume"] == 1200.0

    @pytest.mark.asyncio
    async def test_add_preset_liquid(self, test_client: AsyncClient) -> None:
        response = await test_client.post("/api/pot/liquid", json={"preset": "cold_water"})
        assert response.status_code == 200
        assert response.json()["volume"] == 1200.0

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [{"amount": 0, "temperature": 10}, {"amount": -5, "temperature": 10}, {"amount": 100}, {"preset": "lava"}],
    )
    async def test_add_liquid_rejects_bad_input(
        self, test_client: AsyncClient, body: dict
    ) -> None:
        response = await test_client.post("/api/pot/liquid", json=body)
        assert response.status_code == 400

        pot = (await test_client.get("/api/pot/")).json()
        assert pot["volume"] == 1000.0

    @pytest.mark.asyncio
    async def test_add_and_remove_food(self, test_client: AsyncClient) -> None:
        response = await test_client.post("/api/pot/food", json={"kind": "potato"})
        assert response.status_code == 201
        food_id = response.json()["food"]["id"]

        pot = (await test_client.get("/api/pot/")).json()
        assert [food["id"] for food in pot["foods"]] == [food_id]

        response = await test_client.delete(f"/api/pot/food/{food_id}")
        assert response.status_code == 200
        assert response.json() == {"removed": True, "foods": []}

        response = await test_client.delete(f"/api/pot/food/{food_id}")
        assert response.status_code == 200
        assert response.json()["removed"] is False

    @pytest.mark.asyncio
    async def test_add_unknown_food(self, test_client: AsyncClient) -> None:
        response = await test_client.post("/api/pot/food", json={"kind": "carrot"})
        assert response.status_code == 400


class TestSimulatorEndpoints:
    """Test simulator control endpoints."""

    @pytest.mark.asyncio
    async def test_status(self, test_client: AsyncClient) -> None:
        response = await test_client.get("/api/simulator/")
        assert response.status_code == 200

        data = response.json()
        assert data["running"] is False
        assert data["tick_seconds"] == 1.0
        assert data["ticks"] == 0

    @pytest.mark.asyncio
    async def test_set_speed(self, test_client: AsyncClient) -> None:
        response = await test_client.post("/api/simulator/speed", json={"multiplier": 60})
        assert response.status_code == 200
        assert response.json()["speed_multiplier"] == 60.0

        response = await test_client.get("/api/simulator/speed")
        assert response.json()["speed_multiplier"] == 60.0

    @pytest.mark.asyncio
    async def test_reset(self, test_client: AsyncClient) -> None:
        await test_client.post("/api/pot/food", json={"kind": "beef"})
        await test_client.post("/api/pot/heater", json={"setting": 0})

        response = await test_client.post("/api/simulator/reset")
        assert response.status_code == 200
        assert response.json()["heater_setting"] == 5

        pot = (await test_client.get("/api/pot/")).json()
        assert pot["foods"] == []


class TestWithoutController:
    """Test behavior before the session exists."""

    @pytest.mark.asyncio
    async def test_pot_unavailable(self) -> None:
        app_state.controller = None
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/api/pot/")
        assert response.status_code == 503
