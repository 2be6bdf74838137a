"""Unit tests for the ownership-scoped trip service."""

import pytest

from trip_planner_api.app.core.errors import BadRequestError, NotFoundError, ValidationError
from trip_planner_api.app.services.trip_service import TripService

PARIS = {"title": "Paris Trip", "location": "Paris", "price": 1200.5, "description": ""}


@pytest.fixture
def alice(conn, make_user):
    return TripService(conn, owner_id=make_user("alice@example.com"))


@pytest.fixture
def bob(conn, make_user):
    return TripService(conn, owner_id=make_user("bob@example.com"))


@pytest.mark.asyncio
async def test_create_then_get_returns_stored_fields(alice):
    created = await alice.create_trip(PARIS)

    fetched = await alice.get_trip(created.id)
    assert fetched == created
    assert fetched.title == "Paris Trip"
    assert fetched.location == "Paris"
    assert fetched.price == 1200.5
    assert fetched.description == ""
    assert fetched.user_id == alice.owner_id
    assert fetched.created_at == fetched.updated_at


@pytest.mark.asyncio
async def test_created_ids_are_unique(alice, bob):
    ids = {(await alice.create_trip(PARIS)).id for _ in range(3)}
    ids.add((await bob.create_trip(PARIS)).id)
    assert len(ids) == 4


@pytest.mark.asyncio
async def test_create_trims_text_and_defaults_description(alice):
    trip = await alice.create_trip({"title": "  Rome  ", "location": " Italy ", "price": 0})
    assert trip.title == "Rome"
    assert trip.location == "Italy"
    assert trip.description == ""
    assert trip.price == 0


@pytest.mark.asyncio
async def test_create_reports_every_invalid_field(alice):
    with pytest.raises(ValidationError) as exc_info:
        await alice.create_trip(
            {"title": "   ", "location": "x" * 201, "price": -1, "description": "y" * 2001}
        )
    assert set(exc_info.value.fields) == {"title", "location", "price", "description"}
    assert await alice.list_trips() == []


@pytest.mark.asyncio
async def test_create_requires_title_location_and_price(alice):
    with pytest.raises(ValidationError) as exc_info:
        await alice.create_trip({"description": "no essentials"})
    assert set(exc_info.value.fields) == {"title", "location", "price"}


@pytest.mark.asyncio
@pytest.mark.parametrize("price", [True, "abc", float("inf"), -0.01])
async def test_create_rejects_bad_prices(alice, price):
    with pytest.raises(ValidationError) as exc_info:
        await alice.create_trip({**PARIS, "price": price})
    assert exc_info.value.fields == ["price"]


@pytest.mark.asyncio
async def test_list_is_scoped_and_newest_first(alice, bob):
    first = await alice.create_trip({**PARIS, "title": "First"})
    second = await alice.create_trip({**PARIS, "title": "Second"})
    await bob.create_trip({**PARIS, "title": "Bob's"})

    trips = await alice.list_trips()
    assert [t.id for t in trips] == [second.id, first.id]
    assert await TripService(alice.conn, owner_id=999).list_trips() == []


@pytest.mark.asyncio
async def test_other_user_cannot_read_update_or_delete(alice, bob):
    trip = await alice.create_trip(PARIS)

    with pytest.raises(NotFoundError):
        await bob.get_trip(trip.id)
    with pytest.raises(NotFoundError):
        await bob.update_trip(trip.id, {"title": "Hijacked"})
    with pytest.raises(NotFoundError):
        await bob.delete_trip(trip.id)
    with pytest.raises(NotFoundError):
        await bob.update_trip(trip.id, {})

    assert await alice.get_trip(trip.id) == trip


@pytest.mark.asyncio
async def test_missing_and_foreign_trips_look_the_same(alice, bob):
    trip = await alice.create_trip(PARIS)
    with pytest.raises(NotFoundError) as foreign:
        await bob.get_trip(trip.id)
    with pytest.raises(NotFoundError) as missing:
        await bob.get_trip(trip.id + 100)
    assert foreign.value.to_dict() == missing.value.to_dict()


@pytest.mark.asyncio
async def test_update_changes_only_supplied_fields(alice):
    trip = await alice.create_trip(PARIS)

    updated = await alice.update_trip(trip.id, {"price": 999, "description": "Museum pass"})
    assert updated.price == 999
    assert updated.description == "Museum pass"
    assert updated.title == trip.title
    assert updated.location == trip.location
    assert updated.created_at == trip.created_at
    assert updated.updated_at >= trip.updated_at


@pytest.mark.asyncio
async def test_update_with_no_fields_is_bad_request(alice):
    trip = await alice.create_trip(PARIS)
    with pytest.raises(BadRequestError, match="No fields to update"):
        await alice.update_trip(trip.id, {})
    with pytest.raises(BadRequestError):
        await alice.update_trip(trip.id, {"user_id": 42})


@pytest.mark.asyncio
async def test_update_with_one_invalid_field_persists_nothing(alice):
    trip = await alice.create_trip(PARIS)

    with pytest.raises(ValidationError) as exc_info:
        await alice.update_trip(trip.id, {"title": "Lyon", "location": "", "price": 10})
    assert exc_info.value.fields == ["location"]
    assert await alice.get_trip(trip.id) == trip


@pytest.mark.asyncio
async def test_update_rejects_null_required_fields_but_clears_description(alice):
    trip = await alice.create_trip({**PARIS, "description": "old"})

    with pytest.raises(ValidationError) as exc_info:
        await alice.update_trip(trip.id, {"title": None})
    assert exc_info.value.fields == ["title"]

    updated = await alice.update_trip(trip.id, {"description": None})
    assert updated.description == ""


@pytest.mark.asyncio
async def test_update_unknown_trip_is_not_found(alice):
    with pytest.raises(NotFoundError):
        await alice.update_trip(12345, {"title": "Ghost"})


@pytest.mark.asyncio
@pytest.mark.parametrize("trip_id", [2**63, -(2**63) - 1, 10**20])
async def test_ids_sqlite_cannot_store_are_not_found(alice, trip_id):
    with pytest.raises(NotFoundError):
        await alice.get_trip(trip_id)
    with pytest.raises(NotFoundError):
        await alice.update_trip(trip_id, {"title": "Ghost"})
    with pytest.raises(NotFoundError):
        await alice.update_trip(trip_id, {})
    with pytest.raises(NotFoundError):
        await alice.delete_trip(trip_id)


@pytest.mark.asyncio
async def test_second_delete_is_not_found(alice):
    trip = await alice.create_trip(PARIS)

    assert await alice.delete_trip(trip.id) == {"message": "Trip deleted successfully"}
    with pytest.raises(NotFoundError):
        await alice.delete_trip(trip.id)
    with pytest.raises(NotFoundError):
        await alice.get_trip(trip.id)


@pytest.mark.asyncio
async def test_deleting_user_cascades_to_trips(conn, alice):
    await alice.create_trip(PARIS)
    conn.execute("DELETE FROM users WHERE id = ?", (alice.owner_id,))
    conn.commit()

    count = conn.execute("SELECT COUNT(*) AS n FROM trips").fetchone()["n"]
    assert count == 0
