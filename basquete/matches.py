import logging
from datetime import date, time
from typing import List, Optional

from .errors import NotFound
from .models import Match, Place, RoleEnum, User
from .pagination import Page
from .repositories import Repositories
from .schemas import MatchFilters, MatchOut

logger = logging.getLogger(__name__)


def _require_place(repos: Repositories, place_id: str) -> Place:
    place = repos.places.get(place_id)
    if place is None:
        raise NotFound(f"Local com id {place_id} não encontrado")
    return place


def create_match(repos: Repositories, match_date: date, match_time: time, place_id: str) -> Match:
    with repos.atomic():
        _require_place(repos, place_id)
        match = repos.matches.add(Match(date=match_date, time=match_time, place_id=place_id))
    logger.info("✅ Partida %s criada para %s %s", match.id, match_date, match_time)
    return match


def update_match(repos: Repositories, match_id: str, match_date: date, match_time: time, place_id: str) -> Match:
    with repos.atomic():
        match = repos.matches.get(match_id)
        if match is None:
            raise NotFound("Partida não encontrada")
        _require_place(repos, place_id)
        match.date = match_date
        match.time = match_time
        match.place_id = place_id
    logger.info("Partida %s atualizada", match_id)
    return match


def list_places(repos: Repositories) -> List[Place]:
    return repos.places.list_all()


def _date_bounds(filters: MatchFilters, today: date) -> dict:
    bounds = {}
    if filters.status == "upcoming":
        bounds["date_gte"] = today
    elif filters.status == "past":
        bounds["date_lt"] = today
    # date_from substitui o limite inferior de "upcoming", como no filtro de status.
    if filters.date_from is not None:
        bounds["date_gte"] = filters.date_from
    if filters.date_to is not None:
        bounds["date_lte"] = filters.date_to
    return bounds


def _to_out(match: Match, caller: User, caller_athlete_id: Optional[str]) -> MatchOut:
    item = MatchOut.model_validate(match)
    item.confirmation_count = len(match.confirmations)
    item.participation_count = len(match.participations)
    if caller.role == RoleEnum.ATLETA:
        item.confirmed_by_me = caller_athlete_id is not None and any(
            confirmation.athlete_id == caller_athlete_id for confirmation in match.confirmations
        )
    else:
        item.confirmed_athlete_ids = [confirmation.athlete_id for confirmation in match.confirmations]
    return item


def list_matches(repos: Repositories, filters: MatchFilters, caller: User,
                 today: Optional[date] = None) -> Page[MatchOut]:
    today = today or date.today()
    matches, total_count = repos.matches.search(
        place_id=filters.place_id,
        newest_first=filters.status == "past",
        page=filters.page,
        limit=filters.limit,
        **_date_bounds(filters, today),
    )
    caller_athlete = repos.athletes.get_by_user(caller.id) if caller.role == RoleEnum.ATLETA else None
    caller_athlete_id = caller_athlete.id if caller_athlete else None
    items = [_to_out(match, caller, caller_athlete_id) for match in matches]
    return Page(items=items, total_count=total_count, current_page=filters.page, limit=filters.limit)
