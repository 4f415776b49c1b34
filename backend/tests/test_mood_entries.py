# tests for mood entries router — create, list/filter, update, delete
# cross-user access must look exactly like a missing record

import pytest

from app.services.storage import RecordKind
from tests.conftest import SAMPLE_MOOD


async def _create(client, **overrides):
    resp = await client.post("/api/mood-entries", json={**SAMPLE_MOOD, **overrides})
    assert resp.status_code == 200, resp.text
    return resp.json()


class TestCreateMoodEntry:
    """create mood entries"""

    async def test_create_minimal(self, ann_client, ann):
        entry = await _create(ann_client)
        assert entry["userId"] == ann["id"]
        assert entry["timeOfDay"] == "morning"
        assert entry["intensity"] == 3
        assert entry["weightUnit"] == "kg"
        assert entry["morningMedication"] is False
        assert entry["cravingsTags"] == []
        assert entry["createdAt"]

    async def test_create_full_evening_entry(self, ann_client):
        entry = await _create(
            ann_client,
            timeOfDay="evening",
            sleepQuality=4,
            energyLevel=2,
            weight=72.5,
            weightUnit="lbs",
            eveningMedication=True,
            reflectiveComment="Long day",
            overallDaySummary="challenging",
            cravingsImpulses=True,
            cravingsTags=["sugar", "caffeine"],
        )
        assert entry["sleepQuality"] == 4
        assert entry["weightUnit"] == "lbs"
        assert entry["cravingsTags"] == ["sugar", "caffeine"]

    async def test_ids_are_monotonic(self, ann_client):
        first = await _create(ann_client)
        second = await _create(ann_client)
        assert second["id"] > first["id"]

    async def test_same_day_same_time_allowed(self, ann_client):
        await _create(ann_client)
        await _create(ann_client)
        resp = await ann_client.get("/api/mood-entries", params={"date": "2024-01-01"})
        assert len(resp.json()) == 2

    async def test_client_cannot_choose_owner_or_timestamp(self, ann_client, ann, bob):
        entry = await _create(ann_client, userId=bob["id"], id=999, createdAt="1999-01-01T00:00:00Z")
        assert entry["userId"] == ann["id"]
        assert entry["id"] != 999
        assert not entry["createdAt"].startswith("1999")

    async def test_null_cravings_tags_become_empty(self, ann_client):
        entry = await _create(ann_client, cravingsTags=None)
        assert entry["cravingsTags"] == []

    @pytest.mark.parametrize("intensity", [0, 6, -2, 100])
    async def test_intensity_out_of_range(self, ann_client, storage, ann, intensity):
        resp = await ann_client.post("/api/mood-entries", json={**SAMPLE_MOOD, "intensity": intensity})
        assert resp.status_code == 400
        data = resp.json()
        assert data["kind"] == "VALIDATION_ERROR"
        assert data["errors"][0]["path"] == "intensity"
        assert await storage.list_records(RecordKind.MOOD_ENTRIES, ann["id"]) == []

    @pytest.mark.parametrize("field,value", [
        ("sleepQuality", 0),
        ("sleepQuality", 6),
        ("energyLevel", 9),
        ("hoursSlept", 0),
        ("weight", -1),
        ("weightUnit", "stone"),
        ("timeOfDay", "noon"),
        ("mood", ""),
        ("date", "01/01/2024"),
        ("date", "2024-02-30"),
    ])
    async def test_invalid_field_rejected(self, ann_client, field, value):
        resp = await ann_client.post("/api/mood-entries", json={**SAMPLE_MOOD, field: value})
        assert resp.status_code == 400
        assert resp.json()["errors"][0]["path"] == field

    async def test_missing_required_fields(self, ann_client):
        resp = await ann_client.post("/api/mood-entries", json={})
        assert resp.status_code == 400
        paths = {e["path"] for e in resp.json()["errors"]}
        assert paths == {"date", "timeOfDay", "mood", "intensity"}


class TestListMoodEntries:
    """list with optional date filters"""

    async def test_empty_list(self, ann_client):
        resp = await ann_client.get("/api/mood-entries")
        assert resp.status_code == 200
        assert resp.json() == []

    async def test_newest_first(self, ann_client):
        first = await _create(ann_client, date="2024-01-05")
        second = await _create(ann_client, date="2024-01-01")
        resp = await ann_client.get("/api/mood-entries")
        assert [e["id"] for e in resp.json()] == [second["id"], first["id"]]

    async def test_only_own_entries(self, ann_client, bob_client):
        await _create(ann_client)
        await _create(bob_client)
        resp = await ann_client.get("/api/mood-entries")
        data = resp.json()
        assert len(data) == 1
        assert all(e["userId"] == data[0]["userId"] for e in data)

    async def test_filter_exact_date(self, ann_client):
        await _create(ann_client, date="2024-01-01")
        await _create(ann_client, date="2024-01-02")
        resp = await ann_client.get("/api/mood-entries", params={"date": "2024-01-02"})
        data = resp.json()
        assert [e["date"] for e in data] == ["2024-01-02"]

    async def test_date_range_inclusive_oldest_first(self, ann_client):
        for day in ["2024-01-03", "2024-01-01", "2024-01-05", "2024-01-02"]:
            await _create(ann_client, date=day)
        resp = await ann_client.get(
            "/api/mood-entries", params={"startDate": "2024-01-01", "endDate": "2024-01-03"}
        )
        assert resp.status_code == 200
        assert [e["date"] for e in resp.json()] == ["2024-01-01", "2024-01-02", "2024-01-03"]

    async def test_open_ended_range(self, ann_client):
        for day in ["2024-01-03", "2024-01-01", "2024-01-05"]:
            await _create(ann_client, date=day)
        resp = await ann_client.get("/api/mood-entries", params={"startDate": "2024-01-02"})
        assert [e["date"] for e in resp.json()] == ["2024-01-03", "2024-01-05"]

    async def test_inverted_range_rejected(self, ann_client):
        resp = await ann_client.get(
            "/api/mood-entries", params={"startDate": "2024-02-01", "endDate": "2024-01-01"}
        )
        assert resp.status_code == 400
        assert resp.json()["errors"][0]["path"] == "endDate"

    async def test_malformed_query_date_rejected(self, ann_client):
        resp = await ann_client.get("/api/mood-entries", params={"date": "yesterday"})
        assert resp.status_code == 400
        assert resp.json()["errors"][0]["path"] == "date"

    async def test_get_single_entry(self, ann_client):
        entry = await _create(ann_client)
        resp = await ann_client.get(f"/api/mood-entries/{entry['id']}")
        assert resp.status_code == 200
        assert resp.json() == entry

    async def test_get_other_users_entry_not_found(self, ann_client, bob_client):
        entry = await _create(ann_client)
        resp = await bob_client.get(f"/api/mood-entries/{entry['id']}")
        assert resp.status_code == 404


class TestUpdateMoodEntry:
    """partial updates with ownership"""

    async def test_partial_update(self, ann_client):
        entry = await _create(ann_client)
        resp = await ann_client.put(f"/api/mood-entries/{entry['id']}", json={"intensity": 5})
        assert resp.status_code == 200
        data = resp.json()
        assert data["intensity"] == 5
        # untouched fields survive
        assert data["mood"] == "happy"
        assert data["createdAt"] == entry["createdAt"]

    async def test_patch_alias(self, ann_client):
        entry = await _create(ann_client)
        resp = await ann_client.patch(f"/api/mood-entries/{entry['id']}", json={"mood": "calm"})
        assert resp.status_code == 200
        assert resp.json()["mood"] == "calm"

    async def test_update_validates_supplied_fields(self, ann_client):
        entry = await _create(ann_client)
        resp = await ann_client.put(f"/api/mood-entries/{entry['id']}", json={"intensity": 9})
        assert resp.status_code == 400
        assert resp.json()["errors"][0]["path"] == "intensity"

    async def test_update_rejects_null_required_field(self, ann_client):
        entry = await _create(ann_client)
        resp = await ann_client.put(f"/api/mood-entries/{entry['id']}", json={"mood": None})
        assert resp.status_code == 400

    async def test_update_clears_optional_field(self, ann_client):
        entry = await _create(ann_client, sleepQuality=3)
        resp = await ann_client.put(f"/api/mood-entries/{entry['id']}", json={"sleepQuality": None})
        assert resp.status_code == 200
        assert resp.json()["sleepQuality"] is None

    async def test_update_missing_entry(self, ann_client):
        resp = await ann_client.put("/api/mood-entries/9999", json={"intensity": 2})
        assert resp.status_code == 404
        assert resp.json()["message"] == "Mood entry not found"

    async def test_update_other_users_entry_not_found(self, ann_client, bob_client):
        entry = await _create(ann_client)
        resp = await bob_client.put(f"/api/mood-entries/{entry['id']}", json={"intensity": 1})
        assert resp.status_code == 404
        assert resp.json()["message"] == "Mood entry not found"

        # ann's entry is untouched
        resp = await ann_client.get(f"/api/mood-entries/{entry['id']}")
        assert resp.json()["intensity"] == 3

    async def test_update_cannot_reassign_owner(self, ann_client, ann, bob):
        entry = await _create(ann_client)
        resp = await ann_client.put(f"/api/mood-entries/{entry['id']}", json={"userId": bob["id"]})
        assert resp.status_code == 200
        assert resp.json()["userId"] == ann["id"]


class TestDeleteMoodEntry:
    """delete with ownership"""

    async def test_delete_own_entry(self, ann_client):
        entry = await _create(ann_client)
        resp = await ann_client.delete(f"/api/mood-entries/{entry['id']}")
        assert resp.status_code == 200
        assert resp.json() == {"message": "Mood entry deleted successfully"}

        resp = await ann_client.get("/api/mood-entries")
        assert resp.json() == []

    async def test_delete_twice(self, ann_client):
        entry = await _create(ann_client)
        await ann_client.delete(f"/api/mood-entries/{entry['id']}")
        resp = await ann_client.delete(f"/api/mood-entries/{entry['id']}")
        assert resp.status_code == 404

    async def test_delete_other_users_entry_not_found(self, ann_client, bob_client, storage):
        entry = await _create(ann_client)
        resp = await bob_client.delete(f"/api/mood-entries/{entry['id']}")
        assert resp.status_code == 404
        assert resp.json()["message"] == "Mood entry not found"
        assert await storage.get_record(RecordKind.MOOD_ENTRIES, entry["id"]) is not None

    async def test_non_integer_id_rejected(self, ann_client):
        resp = await ann_client.delete("/api/mood-entries/abc")
        assert resp.status_code == 400
