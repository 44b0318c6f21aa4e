from fastapi import APIRouter, Depends

from .. import accounts
from ..auth import get_repositories, require_admin
from ..commands import UserCommand
from ..models import User
from ..repositories import Repositories
from ..schemas import ActionSuccess, UserListItem, UserListOut

router = APIRouter(prefix="/admin/users", tags=["Users"])


@router.get("", response_model=UserListOut)
def list_users(admin: User = Depends(require_admin), repos: Repositories = Depends(get_repositories)):
    users = [UserListItem.model_validate(user) for user in accounts.list_users(repos)]
    return {"users": users}


@router.post("", response_model=ActionSuccess)
def create_user(command: UserCommand, admin: User = Depends(require_admin),
                repos: Repositories = Depends(get_repositories)):
    accounts.create_user(repos, command.email, command.password, command.role)
    return {"success": True, "message": "Usuário criado com sucesso!"}
