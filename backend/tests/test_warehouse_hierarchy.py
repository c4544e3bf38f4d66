"""Tests for the warehouse -> zone -> aisle -> rack -> location -> bin hierarchy."""

import pytest
from fastapi import status


@pytest.fixture
async def chain(client, viewer_headers):
    """Build one record at every level and return their ids."""
    h = viewer_headers
    warehouse = await client.post("/api/warehouses/", headers=h, json={
        "warehouse_name": "Main DC", "warehouse_code": "mdc-01", "city": "Columbus",
    })
    assert warehouse.status_code == status.HTTP_201_CREATED, warehouse.text
    warehouse_id = warehouse.json()["data"]["warehouse_id"]

    zone = await client.post("/api/zones/", headers=h, json={
        "warehouse_id": warehouse_id, "zone_name": "Ambient", "zone_code": "amb", "zone_type": "storage",
    })
    zone_id = zone.json()["data"]["zone_id"]

    aisle = await client.post("/api/aisles/", headers=h, json={
        "zone_id": zone_id, "aisle_name": "Aisle A", "aisle_code": "A",
    })
    aisle_id = aisle.json()["data"]["aisle_id"]

    rack = await client.post("/api/racks/", headers=h, json={
        "aisle_id": aisle_id, "rack_name": "Rack 1", "rack_code": "A-01", "levels_count": 3, "side": "left",
    })
    rack_id = rack.json()["data"]["rack_id"]

    location = await client.post("/api/locations/", headers=h, json={
        "rack_id": rack_id, "location_code": "A-01-L3", "level_number": 3, "location_type": "picking",
    })
    location_id = location.json()["data"]["location_id"]

    bin_ = await client.post("/api/bins/", headers=h, json={
        "location_id": location_id, "bin_code": "A-01-L3-B1", "bin_priority": 2,
    })
    bin_id = bin_.json()["data"]["bin_id"]

    return {
        "warehouse": warehouse_id, "zone": zone_id, "aisle": aisle_id,
        "rack": rack_id, "location": location_id, "bin": bin_id,
    }


class TestWarehouses:
    """Test the /api/warehouses endpoints."""

    async def test_codes_are_derived(self, client, viewer_headers):
        response = await client.post("/api/warehouses/", headers=viewer_headers, json={
            "warehouse_name": "North", "warehouse_code": "nth-2",
        })
        data = response.json()["data"]
        assert data["warehouse_code"] == "nth-2"
        assert data["lc_warehouse_code"] == "NTH-2"
        assert data["lc_full_code"] == "WH-NTH-2"
        assert data["status"] == "operational"

    async def test_codes_follow_updates(self, client, viewer_headers):
        created = await client.post("/api/warehouses/", headers=viewer_headers, json={
            "warehouse_name": "North", "warehouse_code": "NTH",
        })
        warehouse_id = created.json()["data"]["warehouse_id"]
        updated = await client.patch(
            f"/api/warehouses/{warehouse_id}", headers=viewer_headers, json={"warehouse_code": "nor"}
        )
        assert updated.json()["data"]["lc_full_code"] == "WH-NOR"

    async def test_duplicate_code_is_case_insensitive(self, client, viewer_headers):
        await client.post("/api/warehouses/", headers=viewer_headers, json={
            "warehouse_name": "One", "warehouse_code": "DUP",
        })
        response = await client.post("/api/warehouses/", headers=viewer_headers, json={
            "warehouse_name": "Two", "warehouse_code": "dup",
        })
        assert response.status_code == status.HTTP_409_CONFLICT

    async def test_explicit_id_is_kept(self, client, viewer_headers):
        response = await client.post("/api/warehouses/", headers=viewer_headers, json={
            "warehouse_id": "wh-custom", "warehouse_name": "Custom", "warehouse_code": "CUS",
        })
        assert response.json()["data"]["warehouse_id"] == "wh-custom"
        fetched = await client.get("/api/warehouses/wh-custom", headers=viewer_headers)
        assert fetched.status_code == status.HTTP_200_OK

    async def test_temperature_range_validated(self, client, viewer_headers):
        response = await client.post("/api/warehouses/", headers=viewer_headers, json={
            "warehouse_name": "Cold", "warehouse_code": "CLD", "temperature_min": 10, "temperature_max": 2,
        })
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    async def test_requires_authentication(self, client):
        response = await client.get("/api/warehouses/")
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    async def test_search(self, client, viewer_headers, chain):
        found = await client.get("/api/warehouses/?search=columbus", headers=viewer_headers)
        assert found.json()["data"]["total"] == 1
        missing = await client.get("/api/warehouses/?search=nowhere", headers=viewer_headers)
        assert missing.json()["data"]["total"] == 0


class TestHierarchy:
    """Test parent checks and derived fields along the chain."""

    async def test_location_inherits_warehouse(self, client, viewer_headers, chain):
        response = await client.get(f"/api/locations/{chain['location']}", headers=viewer_headers)
        data = response.json()["data"]
        assert data["warehouse_id"] == chain["warehouse"]
        assert data["location_priority"] == "MEDIUM"

        by_warehouse = await client.get(f"/api/locations/?warehouse_id={chain['warehouse']}", headers=viewer_headers)
        assert by_warehouse.json()["data"]["total"] == 1

    async def test_zone_code_upper_cased(self, client, viewer_headers, chain):
        response = await client.get(f"/api/zones/{chain['zone']}", headers=viewer_headers)
        assert response.json()["data"]["zone_code"] == "AMB"

    async def test_bin_defaults(self, client, viewer_headers, chain):
        response = await client.get(f"/api/bins/{chain['bin']}", headers=viewer_headers)
        data = response.json()["data"]
        assert data["bin_priority"] == 2
        assert data["status"] == "available"

    @pytest.mark.parametrize("url, payload, message", [
        ("/api/zones/", {"warehouse_id": "nope", "zone_name": "Z", "zone_code": "Z"}, "Warehouse not found"),
        ("/api/aisles/", {"zone_id": "nope", "aisle_name": "A", "aisle_code": "A"}, "Zone not found"),
        ("/api/racks/", {"aisle_id": "nope", "rack_name": "R", "rack_code": "R"}, "Aisle not found"),
        ("/api/locations/", {"rack_id": "nope", "location_code": "L"}, "Rack not found"),
        ("/api/bins/", {"location_id": "nope", "bin_code": "B"}, "Location not found"),
    ])
    async def test_missing_parent(self, client, viewer_headers, url, payload, message):
        response = await client.post(url, headers=viewer_headers, json=payload)
        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["message"] == message

    async def test_invalid_zone_type(self, client, viewer_headers, chain):
        response = await client.post("/api/zones/", headers=viewer_headers, json={
            "warehouse_id": chain["warehouse"], "zone_name": "Z", "zone_code": "Z", "zone_type": "attic",
        })
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    async def test_level_above_rack_rejected(self, client, viewer_headers, chain):
        response = await client.post("/api/locations/", headers=viewer_headers, json={
            "rack_id": chain["rack"], "location_code": "A-01-L4", "level_number": 4,
        })
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    async def test_rack_levels_cannot_drop_below_locations(self, client, viewer_headers, chain):
        response = await client.patch(f"/api/racks/{chain['rack']}", headers=viewer_headers, json={"levels_count": 2})
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        response = await client.patch(f"/api/racks/{chain['rack']}", headers=viewer_headers, json={"levels_count": 5})
        assert response.json()["data"]["levels_count"] == 5

    @pytest.mark.parametrize("bad_priority", [0, 11])
    async def test_bin_priority_range(self, client, viewer_headers, chain, bad_priority):
        response = await client.post("/api/bins/", headers=viewer_headers, json={
            "location_id": chain["location"], "bin_code": "X", "bin_priority": bad_priority,
        })
        assert response.status_code == status.HTTP_400_BAD_REQUEST


class TestPartialUpdates:
    """Test that updates validate what they write."""

    async def test_null_for_required_column_is_a_validation_error(self, client, viewer_headers, chain):
        response = await client.patch(
            f"/api/warehouses/{chain['warehouse']}", headers=viewer_headers, json={"warehouse_name": None}
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Validation failed"
        assert body["error"] == [
            {"field": "warehouse_name", "message": "Value error, warehouse_name may not be null"},
        ]

        fetched = await client.get(f"/api/warehouses/{chain['warehouse']}", headers=viewer_headers)
        assert fetched.json()["data"]["warehouse_name"] == "Main DC"

    async def test_null_clears_optional_column(self, client, viewer_headers, chain):
        response = await client.patch(
            f"/api/warehouses/{chain['warehouse']}", headers=viewer_headers, json={"city": None}
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"]["city"] is None

    @pytest.mark.parametrize("level, url, field", [
        ("zone", "/api/zones/", "zone_name"),
        ("aisle", "/api/aisles/", "aisle_code"),
        ("rack", "/api/racks/", "levels_count"),
        ("location", "/api/locations/", "location_code"),
        ("bin", "/api/bins/", "bin_priority"),
    ])
    async def test_null_rejected_at_every_level(self, client, viewer_headers, chain, level, url, field):
        response = await client.patch(f"{url}{chain[level]}", headers=viewer_headers, json={field: None})
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"][0]["field"] == field

    @pytest.mark.parametrize("payload", [{"temperature_min": 50}, {"temperature_max": -3}])
    async def test_temperature_range_checked_against_stored_values(self, client, viewer_headers, payload):
        created = await client.post("/api/warehouses/", headers=viewer_headers, json={
            "warehouse_name": "Chill", "warehouse_code": "CHL", "temperature_min": 1, "temperature_max": 5,
        })
        warehouse_id = created.json()["data"]["warehouse_id"]

        response = await client.patch(f"/api/warehouses/{warehouse_id}", headers=viewer_headers, json=payload)
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "Validation failed"
        assert response.json()["error"] == [
            {"field": "temperature_min", "message": "temperature_min must not exceed temperature_max"},
        ]

        fetched = (await client.get(f"/api/warehouses/{warehouse_id}", headers=viewer_headers)).json()["data"]
        assert (fetched["temperature_min"], fetched["temperature_max"]) == (1.0, 5.0)

    async def test_temperature_range_can_move_together(self, client, viewer_headers):
        created = await client.post("/api/warehouses/", headers=viewer_headers, json={
            "warehouse_name": "Chill", "warehouse_code": "CHL", "temperature_min": 1, "temperature_max": 5,
        })
        warehouse_id = created.json()["data"]["warehouse_id"]
        response = await client.patch(f"/api/warehouses/{warehouse_id}", headers=viewer_headers, json={
            "temperature_min": 50, "temperature_max": 60,
        })
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"]["temperature_min"] == 50.0

    @pytest.mark.parametrize("level, url, payload, field", [
        ("warehouse", "/api/warehouses/", {"warehouse_name": "Renamed"}, "warehouse_name"),
        ("zone", "/api/zones/", {"zone_name": "Renamed"}, "zone_name"),
        ("rack", "/api/racks/", {"rack_name": "Renamed"}, "rack_name"),
        ("bin", "/api/bins/", {"bin_name": "Renamed"}, "bin_name"),
    ])
    async def test_put_updates_like_patch(self, client, viewer_headers, chain, level, url, payload, field):
        response = await client.put(f"{url}{chain[level]}", headers=viewer_headers, json=payload)
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"][field] == "Renamed"

    async def test_blank_zone_code_rejected(self, client, viewer_headers, chain):
        created = await client.post("/api/zones/", headers=viewer_headers, json={
            "warehouse_id": chain["warehouse"], "zone_name": "Blank", "zone_code": "   ",
        })
        assert created.status_code == status.HTTP_400_BAD_REQUEST
        assert created.json()["error"][0]["field"] == "zone_code"

        updated = await client.patch(f"/api/zones/{chain['zone']}", headers=viewer_headers, json={"zone_code": " "})
        assert updated.status_code == status.HTTP_400_BAD_REQUEST

        fetched = await client.get(f"/api/zones/{chain['zone']}", headers=viewer_headers)
        assert fetched.json()["data"]["zone_code"] == "AMB"

    async def test_zone_code_trimmed_on_update(self, client, viewer_headers, chain):
        response = await client.patch(f"/api/zones/{chain['zone']}", headers=viewer_headers, json={"zone_code": " cold "})
        assert response.json()["data"]["zone_code"] == "COLD"


class TestListPaging:
    """Test limit/offset validation on list endpoints."""

    @pytest.mark.parametrize("query, field, message", [
        ("limit=0", "query.limit", "Input should be greater than or equal to 1"),
        ("limit=501", "query.limit", "Input should be less than or equal to 500"),
        ("offset=-1", "query.offset", "Input should be greater than or equal to 0"),
    ])
    async def test_out_of_range_paging(self, client, viewer_headers, query, field, message):
        response = await client.get(f"/api/warehouses/?{query}", headers=viewer_headers)
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {
            "success": False,
            "data": None,
            "message": "Validation failed",
            "error": [{"field": field, "message": message}],
        }

    async def test_total_ignores_paging(self, client, viewer_headers):
        for code in ("PA", "PB", "PC"):
            await client.post("/api/warehouses/", headers=viewer_headers, json={
                "warehouse_name": f"Paged {code}", "warehouse_code": code,
            })
        response = await client.get("/api/warehouses/?limit=2&offset=2", headers=viewer_headers)
        data = response.json()["data"]
        assert data["total"] == 3
        assert [w["warehouse_code"] for w in data["warehouses"]] == ["PC"]


class TestDeletes:
    """Test soft deletes guarded by live children."""

    @pytest.mark.parametrize("level, url", [
        ("warehouse", "/api/warehouses/"),
        ("zone", "/api/zones/"),
        ("aisle", "/api/aisles/"),
        ("rack", "/api/racks/"),
        ("location", "/api/locations/"),
    ])
    async def test_parent_with_children_cannot_be_deleted(self, client, viewer_headers, chain, level, url):
        response = await client.delete(f"{url}{chain[level]}", headers=viewer_headers)
        assert response.status_code == status.HTTP_409_CONFLICT

    async def test_bottom_up_delete(self, client, viewer_headers, chain):
        """Deleting leaf first releases each parent in turn."""
        for level, url in [
            ("bin", "/api/bins/"),
            ("location", "/api/locations/"),
            ("rack", "/api/racks/"),
            ("aisle", "/api/aisles/"),
            ("zone", "/api/zones/"),
            ("warehouse", "/api/warehouses/"),
        ]:
            response = await client.delete(f"{url}{chain[level]}", headers=viewer_headers)
            assert response.status_code == status.HTTP_200_OK, level
            gone = await client.get(f"{url}{chain[level]}", headers=viewer_headers)
            assert gone.status_code == status.HTTP_404_NOT_FOUND

        listed = await client.get("/api/warehouses/", headers=viewer_headers)
        assert listed.json()["data"]["total"] == 0
