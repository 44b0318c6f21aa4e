import logging
from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import RedirectResponse

from ..accounts import verify_login
from ..auth import get_optional_user, get_repositories, require_user
from ..commands import LoginForm
from ..config import DASHBOARD_PATH, LOGIN_PATH
from ..errors import InvalidCredentials
from ..models import User
from ..repositories import Repositories
from ..schemas import ActionSuccess, AthleteBrief, LoginStatusOut, SessionUserOut
from ..security import commit_session, destroy_session

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Authentication"])


def _redirect(path: str) -> RedirectResponse:
    return RedirectResponse(path, status_code=status.HTTP_303_SEE_OTHER)


@router.get("/")
def home(user: Optional[User] = Depends(get_optional_user)):
    return _redirect(DASHBOARD_PATH if user else LOGIN_PATH)


@router.get("/login", response_model=LoginStatusOut)
def login_page(user: Optional[User] = Depends(get_optional_user)):
    if user:
        return _redirect(DASHBOARD_PATH)
    return {"authenticated": False}


@router.post("/login", response_model=ActionSuccess)
def login(form_data: LoginForm, response: Response, repos: Repositories = Depends(get_repositories)):
    user = verify_login(repos, form_data.email, form_data.password)
    if user is None:
        logger.warning("Falha de login para %s", form_data.email)
        raise InvalidCredentials()
    commit_session(response, user.id)
    logger.info("Usuário %s autenticado", user.id)
    return {"success": True, "message": "Login realizado com sucesso!"}


@router.api_route("/logout", methods=["GET", "POST"])
def logout():
    response = _redirect(LOGIN_PATH)
    destroy_session(response)
    return response


@router.get("/dashboard", response_model=SessionUserOut)
def dashboard(user: User = Depends(require_user)):
    athlete = AthleteBrief.model_validate(user.athlete) if user.athlete else None
    return SessionUserOut(id=user.id, email=user.email, role=user.role, athlete=athlete)
