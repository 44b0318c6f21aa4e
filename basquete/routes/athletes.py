from fastapi import APIRouter, Depends, Request

from .. import athletes
from ..auth import get_repositories, require_admin, require_user
from ..commands import AthleteCommand
from ..models import User
from ..pagination import parse_filters
from ..repositories import Repositories
from ..schemas import ActionSuccess, AthleteFilters, AthleteListOut

router = APIRouter(prefix="/atletas", tags=["Athletes"])


@router.get("", response_model=AthleteListOut)
def list_athletes(request: Request, user: User = Depends(require_user),
                  repos: Repositories = Depends(get_repositories)):
    filters = parse_filters(AthleteFilters, request.query_params)
    page = athletes.list_athletes(repos, filters)
    return {"athletes": page.items, "filters": filters, "pagination": page.pagination()}


@router.post("", response_model=ActionSuccess)
def athlete_action(command: AthleteCommand, admin: User = Depends(require_admin),
                   repos: Repositories = Depends(get_repositories)):
    message, _ = athletes.dispatch(repos, command)
    return {"success": True, "message": message}
