from decimal import Decimal

import pytest
from sqlalchemy import select, update

from onpoint.db.session import SessionLocal
from onpoint.models.user import User
from onpoint.services import favorites_service
from onpoint.services.errors import FavoritesConflictError, NotFoundError

from conftest import make_trip


@pytest.fixture
def trips(db, destination):
    return [
        make_trip(db, destination, name="Dhow Sunset Cruise", price=Decimal("60")),
        make_trip(db, destination, name="Jozani Forest Walk", price=Decimal("40")),
        make_trip(db, destination, name="Prison Island", price=Decimal("45")),
    ]


def _stored(db, user_id):
    db.expire_all()
    return db.execute(select(User.favorite_trips).where(User.id == user_id)).scalar_one()


def test_toggle_adds_then_removes(db, user, trips):
    assert favorites_service.toggle_favorite(db, user, trips[0].id) is True
    assert favorites_service.is_favorite(db, user, trips[0].id)
    assert favorites_service.toggle_favorite(db, user, trips[0].id) is False
    assert not favorites_service.is_favorite(db, user, trips[0].id)


def test_double_toggle_restores_content_and_order(db, user, trips):
    ids = [t.id for t in trips]
    favorites_service.toggle_favorite(db, user, ids[0])
    favorites_service.toggle_favorite(db, user, ids[1])
    before = _stored(db, user.id)
    assert before == [ids[0], ids[1]]

    favorites_service.toggle_favorite(db, user, ids[2])
    assert _stored(db, user.id) == [ids[0], ids[1], ids[2]]
    favorites_service.toggle_favorite(db, user, ids[2])
    assert _stored(db, user.id) == before


def test_toggle_round_trip_from_clean_state(db, user, trips):
    favorites_service.toggle_favorite(db, user, trips[0].id)
    favorites_service.toggle_favorite(db, user, trips[0].id)
    assert _stored(db, user.id) == []


def test_toggle_unknown_trip(db, user):
    with pytest.raises(NotFoundError):
        favorites_service.toggle_favorite(db, user, "ghost-trip")


def test_each_write_bumps_version(db, user, trips):
    _, v0 = favorites_service.read_favorites(db, user.id)
    favorites_service.toggle_favorite(db, user, trips[0].id)
    _, v1 = favorites_service.read_favorites(db, user.id)
    assert v1 == v0 + 1


def test_duplicates_are_dropped_on_write(db, user, trips):
    _, version = favorites_service.read_favorites(db, user.id)
    favorites_service.write_favorites(db, user.id, [trips[0].id, trips[1].id, trips[0].id], version)
    assert _stored(db, user.id) == [trips[0].id, trips[1].id]


def test_list_favorite_trips_keeps_list_order_and_skips_missing(db, user, trips):
    _, version = favorites_service.read_favorites(db, user.id)
    favorites_service.write_favorites(db, user.id, [trips[2].id, "deleted-trip", trips[0].id], version)
    assert [t.name for t in favorites_service.list_favorite_trips(db, user)] == ["Prison Island", "Dhow Sunset Cruise"]


def test_unversioned_read_modify_write_loses_an_update(db, user, trips):
    """Two screens toggling at once with a plain read-modify-write: one toggle vanishes."""
    user_id = user.id
    card = SessionLocal()
    details = SessionLocal()
    try:
        seen_by_card = list(card.execute(select(User.favorite_trips).where(User.id == user_id)).scalar_one() or [])
        seen_by_details = list(details.execute(select(User.favorite_trips).where(User.id == user_id)).scalar_one() or [])

        card.execute(update(User).where(User.id == user_id).values(favorite_trips=seen_by_card + [trips[0].id]))
        card.commit()
        details.execute(update(User).where(User.id == user_id).values(favorite_trips=seen_by_details + [trips[1].id]))
        details.commit()
    finally:
        card.close()
        details.close()

    # trips[0] was favorited and acknowledged, yet it is gone
    assert _stored(db, user_id) == [trips[1].id]


def test_versioned_write_detects_the_concurrent_toggle(db, user, trips):
    user_id = user.id
    card = SessionLocal()
    details = SessionLocal()
    try:
        seen_by_card, card_version = favorites_service.read_favorites(card, user_id)
        seen_by_details, details_version = favorites_service.read_favorites(details, user_id)
        assert card_version == details_version

        favorites_service.write_favorites(card, user_id, seen_by_card + [trips[0].id], card_version)
        with pytest.raises(FavoritesConflictError):
            favorites_service.write_favorites(details, user_id, seen_by_details + [trips[1].id], details_version)

        # the losing screen re-reads and succeeds
        fresh, fresh_version = favorites_service.read_favorites(details, user_id)
        favorites_service.write_favorites(details, user_id, fresh + [trips[1].id], fresh_version)
    finally:
        card.close()
        details.close()

    assert _stored(db, user_id) == [trips[0].id, trips[1].id]


def test_favorites_api(client, auth_headers, trips):
    trip_id = trips[1].id
    r = client.post(f"/api/v1/favorites/{trip_id}/toggle", headers=auth_headers)
    assert r.status_code == 200
    assert r.json() == {"tripId": trip_id, "isFavorite": True}

    assert client.get(f"/api/v1/favorites/{trip_id}", headers=auth_headers).json()["isFavorite"] is True
    listed = client.get("/api/v1/favorites", headers=auth_headers).json()
    assert [t["id"] for t in listed] == [trip_id]
    assert listed[0]["destination"]["name"] == "Zanzibar"

    r = client.post(f"/api/v1/favorites/{trip_id}/toggle", headers=auth_headers)
    assert r.json()["isFavorite"] is False
    assert client.get("/api/v1/favorites", headers=auth_headers).json() == []


def test_favorites_api_conflict_is_409(client, auth_headers, trips, monkeypatch):
    def _lost_race(db, user_id, favorites, expected_version):
        raise FavoritesConflictError("Favorites were changed elsewhere, please try again.")

    monkeypatch.setattr(favorites_service, "write_favorites", _lost_race)
    r = client.post(f"/api/v1/favorites/{trips[0].id}/toggle", headers=auth_headers)
    assert r.status_code == 409


def test_favorites_require_sign_in(client, trips):
    assert client.post(f"/api/v1/favorites/{trips[0].id}/toggle").status_code == 401
