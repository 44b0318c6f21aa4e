from typing import Union

from fastapi import APIRouter, Depends, Request

from .. import commands, matches, presence
from ..auth import ensure_admin, get_repositories, require_user
from ..models import RoleEnum, User
from ..pagination import parse_filters
from ..repositories import Repositories
from ..schemas import ActionSuccess, AthleteBrief, MatchFilters, MatchListOut, ToggleConfirmationOut

router = APIRouter(prefix="/partidas", tags=["Matches"])


@router.get("", response_model=MatchListOut)
def list_matches(request: Request, user: User = Depends(require_user),
                 repos: Repositories = Depends(get_repositories)):
    filters = parse_filters(MatchFilters, request.query_params)
    page = matches.list_matches(repos, filters, user)
    current_athlete = None
    if user.role == RoleEnum.ATLETA:
        athlete = repos.athletes.get_by_user(user.id)
        current_athlete = AthleteBrief.model_validate(athlete) if athlete else None
    return {
        "matches": page.items,
        "filters": filters,
        "places": matches.list_places(repos),
        "current_athlete": current_athlete,
        "user": user,
        "pagination": page.pagination(),
    }


@router.post("", response_model=Union[ToggleConfirmationOut, ActionSuccess])
def match_action(command: commands.MatchCommand, user: User = Depends(require_user),
                 repos: Repositories = Depends(get_repositories)):
    match command:
        case commands.CreateMatch():
            ensure_admin(user)
            matches.create_match(repos, command.date, command.time, command.place_id)
            return ActionSuccess(message="Partida criada com sucesso!")
        case commands.UpdateMatch():
            ensure_admin(user)
            matches.update_match(repos, command.id, command.date, command.time, command.place_id)
            return ActionSuccess(message="Partida atualizada com sucesso!")
        case commands.ConfirmPresence():
            result = presence.toggle_confirmation(repos, command.athlete_id, command.match_id, user)
            return ToggleConfirmationOut(message=result.message, confirmed=result.confirmed)
        case _:
            raise TypeError(f"Comando de partida desconhecido: {type(command).__name__}")
