from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from .config import SESSION_COOKIE_NAME
from .database import get_db
from .errors import Forbidden, Unauthenticated
from .models import RoleEnum, User
from .repositories import Repositories
from .security import resolve_session


def get_repositories(db: Session = Depends(get_db)) -> Repositories:
    return Repositories(db)


def get_user(request: Request, repos: Repositories) -> Optional[User]:
    """Resolve o cookie de sessão e relê o usuário no banco (sem cache)."""
    user_id = resolve_session(request.cookies.get(SESSION_COOKIE_NAME))
    if user_id is None:
        return None
    return repos.users.get(user_id)


def get_optional_user(request: Request, repos: Repositories = Depends(get_repositories)) -> Optional[User]:
    return get_user(request, repos)


def require_user(request: Request, repos: Repositories = Depends(get_repositories)) -> User:
    user = get_user(request, repos)
    if user is None:
        # Sessão ausente, inválida ou de um usuário que já não existe.
        raise Unauthenticated()
    return user


def require_admin(user: User = Depends(require_user)) -> User:
    ensure_admin(user)
    return user


def require_athlete_user(user: User = Depends(require_user)) -> User:
    if user.role != RoleEnum.ATLETA:
        raise Forbidden()
    return user


def ensure_admin(user: User) -> None:
    if user.role != RoleEnum.ADMINISTRADOR:
        raise Forbidden()
