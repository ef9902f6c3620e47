from __future__ import annotations

import pytest
from sqlalchemy.exc import OperationalError

from trippino.core.db import session_scope
from trippino.core.settings import settings
from trippino.models.schemas import CityCreate, CityUpdate, TripCreate
from trippino.repositories import CityRepository
from trippino.services import (
    AdjacencyResolver,
    CitySequenceService,
    NotFoundError,
    StorageError,
    ValidationError,
)
from trippino.services.trip_service import TripService

from backend.tests.utils.db import create_context


@pytest.fixture()
def ctx():
    return create_context()


@pytest.fixture()
def service() -> CitySequenceService:
    return CitySequenceService()


def _new_trip(ctx, name: str = "City sequence trip") -> int:
    return TripService().create_trip(ctx, TripCreate(name=name)).id


def _append(service, ctx, trip_id: int, *names: str) -> list[int]:
    return [service.append_city(ctx, trip_id, CityCreate(name=name)).id for name in names]


def _sort_keys(trip_id: int) -> dict[int, int]:
    with session_scope() as session:
        return {
            city.id: city.sort_order
            for city in CityRepository(session).list_ordered(trip_id)
        }


def test_append_assigns_next_sort_key(service, ctx):
    trip_id = _new_trip(ctx)

    first = service.append_city(ctx, trip_id, CityCreate(name="  Lyon  "))
    second = service.append_city(ctx, trip_id, CityCreate(name="Nice", nights=3))

    assert first.sort_order == 0
    assert first.name == "Lyon"
    assert first.nights == settings.city_default_nights
    assert second.sort_order == 1
    assert second.nights == 3


def test_append_honours_gaps_in_sort_keys(service, ctx):
    trip_id = _new_trip(ctx)
    first_id, second_id = _append(service, ctx, trip_id, "Bern", "Basel")
    with session_scope() as session:
        CityRepository(session).set_sort_order(second_id, 7)

    third = service.append_city(ctx, trip_id, CityCreate(name="Zurich"))

    assert third.sort_order == 8
    assert _sort_keys(trip_id) == {first_id: 0, second_id: 7, third.id: 8}


def test_append_validates_input(service, ctx):
    trip_id = _new_trip(ctx)

    with pytest.raises(ValidationError):
        service.append_city(ctx, trip_id, CityCreate(name="   "))
    with pytest.raises(ValidationError):
        service.append_city(ctx, trip_id, CityCreate(name="Oslo", nights=-1))
    with pytest.raises(ValidationError):
        service.append_city(ctx, trip_id, CityCreate(name="Oslo", nights=1.5))
    with pytest.raises(ValidationError):
        service.append_city(ctx, trip_id, CityCreate(name="Oslo", latitude=91))

    zero = service.append_city(
        ctx,
        trip_id,
        CityCreate(name="Oslo", nights=0, notes="  ", latitude=59.91, longitude=10.75),
    )
    assert zero.nights == 0
    assert zero.notes is None
    assert zero.latitude == pytest.approx(59.91)
    assert [city.id for city in service.list_cities(ctx, trip_id)] == [zero.id]


def test_append_to_foreign_trip_is_not_found(service, ctx):
    trip_id = _new_trip(ctx)
    stranger = create_context()

    with pytest.raises(NotFoundError) as excinfo:
        service.append_city(stranger, trip_id, CityCreate(name="Rome"))

    assert excinfo.value.code == 14004
    assert service.list_cities(ctx, trip_id) == []


def test_update_applies_only_supplied_fields(service, ctx):
    trip_id = _new_trip(ctx)
    city = service.append_city(
        ctx, trip_id, CityCreate(name="Kyoto", nights=2, notes="temples")
    )

    updated = service.update_city(ctx, trip_id, city.id, CityUpdate(nights=4))

    assert updated.nights == 4
    assert updated.name == "Kyoto"
    assert updated.notes == "temples"
    assert updated.sort_order == city.sort_order

    cleared = service.update_city(ctx, trip_id, city.id, CityUpdate(notes=None))
    assert cleared.notes is None
    assert cleared.nights == 4


def test_update_rejects_bad_nights_and_empty_payload(service, ctx):
    trip_id = _new_trip(ctx)
    (city_id,) = _append(service, ctx, trip_id, "Osaka")

    with pytest.raises(ValidationError):
        service.update_city(ctx, trip_id, city_id, CityUpdate(nights=-1))
    with pytest.raises(ValidationError) as excinfo:
        service.update_city(ctx, trip_id, city_id, CityUpdate())
    assert excinfo.value.code == 14002

    (unchanged,) = service.list_cities(ctx, trip_id)
    assert unchanged.nights == settings.city_default_nights


def test_full_reorder_defines_adjacency(service, ctx):
    trip_id = _new_trip(ctx)
    a, b, c, d = _append(service, ctx, trip_id, "A", "B", "C", "D")

    reordered = service.reorder_cities(ctx, trip_id, [d, b, a, c])

    assert [city.id for city in reordered] == [d, b, a, c]
    assert [city.sort_order for city in reordered] == [0, 1, 2, 3]
    with session_scope() as session:
        resolver = AdjacencyResolver(session)
        assert resolver.next_city_of(trip_id, d).id == b
        assert resolver.next_city_of(trip_id, b).id == a
        assert resolver.next_city_of(trip_id, a).id == c
        assert resolver.next_city_of(trip_id, c) is None
        assert resolver.adjacent_pairs(trip_id) == [(d, b), (b, a), (a, c)]


def test_partial_reorder_keeps_other_keys(service, ctx):
    trip_id = _new_trip(ctx)
    a, b, c = _append(service, ctx, trip_id, "A", "B", "C")

    cities = service.reorder_cities(ctx, trip_id, [c])

    # c and a now share key 0; ties resolve by id.
    assert _sort_keys(trip_id) == {a: 0, b: 1, c: 0}
    assert [city.id for city in cities] == [a, c, b]


@pytest.mark.parametrize(
    "make_ids",
    [
        lambda ids, foreign: [],
        lambda ids, foreign: [ids[0], ids[0], ids[1]],
        lambda ids, foreign: [ids[1], foreign],
        lambda ids, foreign: [ids[0], 999999],
    ],
)
def test_reorder_rejects_invalid_lists(service, ctx, make_ids):
    trip_id = _new_trip(ctx)
    ids = _append(service, ctx, trip_id, "A", "B")
    other_trip = _new_trip(ctx, "Other trip")
    (foreign,) = _append(service, ctx, other_trip, "Elsewhere")
    before = _sort_keys(trip_id)

    with pytest.raises(ValidationError) as excinfo:
        service.reorder_cities(ctx, trip_id, make_ids(ids, foreign))

    assert excinfo.value.code == 14003
    assert _sort_keys(trip_id) == before
    assert _sort_keys(other_trip) == {foreign: 0}


def test_delete_removes_only_target(service, ctx):
    trip_id = _new_trip(ctx)
    a, b, c = _append(service, ctx, trip_id, "A", "B", "C")

    service.delete_city(ctx, trip_id, b)

    assert _sort_keys(trip_id) == {a: 0, c: 2}
    with session_scope() as session:
        assert AdjacencyResolver(session).next_city_of(trip_id, a).id == c


def test_delete_city_of_other_trip_is_not_found(service, ctx):
    trip_id = _new_trip(ctx)
    other_trip = _new_trip(ctx, "Other trip")
    (foreign,) = _append(service, ctx, other_trip, "Elsewhere")

    with pytest.raises(NotFoundError) as excinfo:
        service.delete_city(ctx, trip_id, foreign)

    assert excinfo.value.code == 14005
    assert _sort_keys(other_trip) == {foreign: 0}


def test_storage_failure_is_reported_opaquely(service, ctx, monkeypatch):
    trip_id = _new_trip(ctx)

    def _boom(self, trip_id):
        raise OperationalError("SELECT cities", {}, Exception("disk I/O error"))

    monkeypatch.setattr(CityRepository, "list_ordered", _boom)

    with pytest.raises(StorageError) as excinfo:
        service.list_cities(ctx, trip_id)

    assert excinfo.value.message == "server error"
    assert excinfo.value.status_code == 500
    assert isinstance(excinfo.value.__cause__, OperationalError)


def test_nights_beyond_column_range_are_rejected(service, ctx):
    trip_id = _new_trip(ctx)
    (city_id,) = _append(service, ctx, trip_id, "Sapporo")

    for nights in (1e20, 2**31):
        with pytest.raises(ValidationError) as excinfo:
            service.append_city(ctx, trip_id, CityCreate(name="Nara", nights=nights))
        assert excinfo.value.code == 14001
        with pytest.raises(ValidationError):
            service.update_city(ctx, trip_id, city_id, CityUpdate(nights=nights))

    largest = service.append_city(
        ctx, trip_id, CityCreate(name="Nara", nights=2**31 - 1)
    )
    assert largest.nights == 2**31 - 1


def test_ids_beyond_row_range_look_missing(service, ctx):
    trip_id = _new_trip(ctx)
    (city_id,) = _append(service, ctx, trip_id, "Kobe")
    huge = 2**70

    with pytest.raises(NotFoundError) as excinfo:
        service.list_cities(ctx, huge)
    assert excinfo.value.code == 14004
    with pytest.raises(NotFoundError) as excinfo:
        service.delete_city(ctx, trip_id, huge)
    assert excinfo.value.code == 14005
    with pytest.raises(ValidationError) as excinfo:
        service.reorder_cities(ctx, trip_id, [city_id, huge])
    assert excinfo.value.code == 14003
    assert _sort_keys(trip_id) == {city_id: 0}
