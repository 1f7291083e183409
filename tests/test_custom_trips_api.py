"""API tests for custom trip inquiries."""

import uuid

import pytest

CUSTOM_TRIPS = "/api/v1/custom-trips"
STATS = "/api/v1/custom-trips/admin/stats"


def inquiry(**overrides):
    payload = {
        "name": "Sonam Choden",
        "email": "Sonam@Example.com",
        "phone": "+975 1711 2233",
        "destination": "Bhutan",
        "travelers": 4,
        "dates": "October 2025",
        "budget": "USD 3000 per person",
        "message": "Festival season if possible",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def submit(client):
    async def post(**overrides):
        response = await client.post(CUSTOM_TRIPS, json=inquiry(**overrides))
        assert response.status_code == 201, response.text
        return response.json()["data"]["customTrip"]

    return post


class TestSubmit:

    async def test_submit_is_public_and_pending(self, client):
        response = await client.post(CUSTOM_TRIPS, json=inquiry())

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "success"
        assert body["message"].startswith("Custom trip request submitted successfully")

        trip = body["data"]["customTrip"]
        assert trip["status"] == "pending"
        assert trip["email"] == "sonam@example.com"
        assert trip["travelers"] == "4"
        assert trip["adminNotes"] is None
        assert trip["quotedPrice"] is None
        assert trip["submittedDate"]
        assert trip["updatedDate"] is None

    async def test_blank_optional_answers_are_stored_as_missing(self, submit):
        trip = await submit(dates="   ", budget="")
        assert trip["dates"] is None
        assert trip["budget"] is None

    @pytest.mark.parametrize("field", ["name", "email", "phone", "destination"])
    async def test_required_fields(self, client, field):
        payload = inquiry()
        payload.pop(field)

        response = await client.post(CUSTOM_TRIPS, json=payload)

        assert response.status_code == 400
        assert field in response.json()["message"]


class TestAdminConsole:

    async def test_list_requires_authentication(self, client):
        assert (await client.get(CUSTOM_TRIPS)).status_code == 401

    async def test_list_search_and_filter(self, client, auth_headers, submit):
        bhutan = await submit()
        await submit(name="Lobsang", email="lobsang@example.com", destination="Tibet")

        response = await client.get(CUSTOM_TRIPS, params={"search": "tibet"}, headers=auth_headers)
        body = response.json()
        assert body["results"] == 1
        assert body["data"]["customTrips"][0]["name"] == "Lobsang"
        assert body["data"]["pagination"] == {"total": 1, "page": 1, "pages": 1}

        await client.patch(
            f"{CUSTOM_TRIPS}/{bhutan['id']}", json={"status": "quoted"}, headers=auth_headers
        )
        quoted = await client.get(CUSTOM_TRIPS, params={"status": "quoted"}, headers=auth_headers)
        assert [t["id"] for t in quoted.json()["data"]["customTrips"]] == [bhutan["id"]]

    async def test_list_newest_first(self, client, auth_headers, submit):
        first = await submit(name="First")
        second = await submit(name="Second")

        response = await client.get(CUSTOM_TRIPS, headers=auth_headers)

        ids = [t["id"] for t in response.json()["data"]["customTrips"]]
        assert ids == [second["id"], first["id"]]

    async def test_unknown_status_filter(self, client, auth_headers):
        response = await client.get(CUSTOM_TRIPS, params={"status": "Pending"}, headers=auth_headers)
        assert response.status_code == 400

    async def test_quote_an_inquiry(self, client, auth_headers, submit):
        trip = await submit()

        response = await client.patch(
            f"{CUSTOM_TRIPS}/{trip['id']}",
            json={"status": "quoted", "quotedPrice": 2850.5, "adminNotes": "Includes Paro festival permits"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        updated = response.json()["data"]["customTrip"]
        assert updated["status"] == "quoted"
        assert updated["quotedPrice"] == 2850.5
        assert updated["adminNotes"] == "Includes Paro festival permits"
        assert updated["updatedDate"] is not None
        assert updated["submittedDate"] == trip["submittedDate"]

    async def test_negative_quote_is_rejected(self, client, auth_headers, submit):
        trip = await submit()

        response = await client.patch(
            f"{CUSTOM_TRIPS}/{trip['id']}", json={"quotedPrice": -10}, headers=auth_headers
        )

        assert response.status_code == 400
        assert "quotedPrice" in response.json()["message"]

    async def test_get_and_delete(self, client, auth_headers, submit):
        trip = await submit()
        url = f"{CUSTOM_TRIPS}/{trip['id']}"

        fetched = await client.get(url, headers=auth_headers)
        assert fetched.json()["data"]["customTrip"]["destination"] == "Bhutan"

        deleted = await client.delete(url, headers=auth_headers)
        assert deleted.json() == {
            "status": "success",
            "message": "Custom trip request deleted successfully",
        }

        missing = await client.get(url, headers=auth_headers)
        assert missing.status_code == 404
        assert missing.json() == {"status": "fail", "message": "Custom trip request not found"}

    async def test_update_missing_inquiry(self, client, auth_headers):
        response = await client.patch(
            f"{CUSTOM_TRIPS}/{uuid.uuid4()}", json={"status": "confirmed"}, headers=auth_headers
        )
        assert response.status_code == 404


class TestCustomTripStats:

    async def test_counts_only_present_statuses(self, client, auth_headers, submit):
        first = await submit()
        await submit()
        await client.patch(
            f"{CUSTOM_TRIPS}/{first['id']}", json={"status": "confirmed"}, headers=auth_headers
        )

        response = await client.get(STATS, headers=auth_headers)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["total"] == 2
        assert sorted((s["status"], s["count"]) for s in data["stats"]) == [
            ("confirmed", 1),
            ("pending", 1),
        ]

    async def test_empty_store(self, client, auth_headers):
        data = (await client.get(STATS, headers=auth_headers)).json()["data"]
        assert data == {"total": 0, "stats": []}
