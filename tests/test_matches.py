from datetime import date, time, timedelta

import pytest

from basquete import matches, presence
from basquete.errors import NotFound
from basquete.schemas import MatchFilters

TODAY = date(2026, 5, 10)


def _create(repos, place, days, hour=19):
    return matches.create_match(repos, TODAY + timedelta(days=days), time(hour, 0), place.id)


def test_create_match_requires_existing_place(repos):
    with pytest.raises(NotFound):
        matches.create_match(repos, TODAY, time(19, 0), "nao-existe")


def test_update_match(repos, place):
    match = _create(repos, place, 1)
    updated = matches.update_match(repos, match.id, TODAY + timedelta(days=2), time(20, 0), place.id)
    assert updated.date == TODAY + timedelta(days=2)
    assert updated.time == time(20, 0)


def test_update_unknown_match_is_not_found(repos, place):
    with pytest.raises(NotFound):
        matches.update_match(repos, "nao-existe", TODAY, time(19, 0), place.id)


def test_status_filter_splits_upcoming_and_past(repos, place, admin_user):
    past = _create(repos, place, -2)
    today = _create(repos, place, 0)
    later = _create(repos, place, 5)
    sooner = _create(repos, place, 1)

    upcoming = matches.list_matches(repos, MatchFilters(status="upcoming"), admin_user, today=TODAY)
    assert [item.id for item in upcoming.items] == [today.id, sooner.id, later.id]

    older = matches.list_matches(repos, MatchFilters(status="past"), admin_user, today=TODAY)
    assert [item.id for item in older.items] == [past.id]

    everything = matches.list_matches(repos, MatchFilters(status="all"), admin_user, today=TODAY)
    assert everything.total_count == 4


def test_past_matches_are_newest_first(repos, place, admin_user):
    older = _create(repos, place, -10)
    newer = _create(repos, place, -1)
    page = matches.list_matches(repos, MatchFilters(status="past"), admin_user, today=TODAY)
    assert [item.id for item in page.items] == [newer.id, older.id]


def test_date_range_and_place_filters(repos, db, place, admin_user):
    from basquete.models import Place

    other_place = Place(name="Ginásio Norte")
    db.add(other_place)
    db.commit()
    inside = _create(repos, place, 3)
    _create(repos, place, 10)
    elsewhere = matches.create_match(repos, TODAY + timedelta(days=3), time(18, 0), other_place.id)

    ranged = matches.list_matches(repos, MatchFilters(status="all", date_from=TODAY, date_to=TODAY + timedelta(days=5)),
                                  admin_user, today=TODAY)
    assert {item.id for item in ranged.items} == {inside.id, elsewhere.id}

    by_place = matches.list_matches(repos, MatchFilters(status="all", place_id=other_place.id), admin_user, today=TODAY)
    assert [item.id for item in by_place.items] == [elsewhere.id]


def test_admin_sees_confirmed_athlete_ids(repos, place, admin_user, athlete):
    match = _create(repos, place, 1)
    presence.toggle_confirmation(repos, athlete.id, match.id, admin_user)
    page = matches.list_matches(repos, MatchFilters(status="all"), admin_user, today=TODAY)
    assert page.items[0].confirmed_athlete_ids == [athlete.id]
    assert page.items[0].confirmed_by_me is None


# --- Rotas ---
def test_athlete_cannot_create_match(athlete_client, place):
    response = athlete_client.post("/partidas", json={
        "intent": "create", "date": "2030-01-10", "time": "19:30", "place_id": place.id,
    })
    assert response.status_code == 403


def test_admin_creates_match_and_lists_it(admin_client, place):
    response = admin_client.post("/partidas", json={
        "intent": "create", "date": "2030-01-10", "time": "19:30", "place_id": place.id,
    })
    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Partida criada com sucesso!"}

    body = admin_client.get("/partidas").json()
    assert body["matches"][0]["date"] == "2030-01-10"
    assert body["matches"][0]["place"]["name"] == "Quadra Principal"
    assert body["places"] == [{"id": place.id, "name": "Quadra Principal",
                               "address": "Rua do Basquete, 123 - Recife, PE"}]
    assert body["current_athlete"] is None
    assert body["user"]["role"] == "ADMINISTRADOR"


def test_create_match_with_unknown_place_is_404(admin_client):
    response = admin_client.post("/partidas", json={
        "intent": "create", "date": "2030-01-10", "time": "19:30", "place_id": "nao-existe",
    })
    assert response.status_code == 404


def test_create_match_with_bad_date_is_field_error(admin_client, place):
    response = admin_client.post("/partidas", json={
        "intent": "create", "date": "ontem", "time": "19:30", "place_id": place.id,
    })
    assert response.status_code == 422
    assert "date" in response.json()["field_errors"]


def test_athlete_listing_carries_current_athlete(athlete_client, athlete):
    body = athlete_client.get("/partidas").json()
    assert body["current_athlete"]["id"] == athlete.id
    assert body["matches"] == []
