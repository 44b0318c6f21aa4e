import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError

from .errors import DuplicateEmail
from .models import RoleEnum, User
from .repositories import Repositories
from .security import dummy_verify, get_password_hash, verify_password

logger = logging.getLogger(__name__)


def verify_login(repos: Repositories, email: str, password: str) -> Optional[User]:
    """Devolve o usuário se email e senha conferem, senão None.

    Quando o email não existe ainda é feito um verify de custo equivalente,
    para que o tempo de resposta não revele quais emails estão cadastrados.
    """
    user = repos.users.get_by_email(email)
    if user is None:
        dummy_verify()
        return None
    try:
        valid = verify_password(password, user.password)
    except ValueError:
        # Hash armazenado em formato desconhecido: trata como senha incorreta.
        logger.warning("Hash de senha inválido para o usuário %s", user.id)
        return None
    return user if valid else None


def build_user(email: str, password: str, role: RoleEnum) -> User:
    return User(email=email, password=get_password_hash(password), role=role)


def create_user(repos: Repositories, email: str, password: str, role: RoleEnum) -> User:
    # Sem pré-verificação: a unicidade é garantida pelo índice único do banco.
    try:
        with repos.atomic():
            user = repos.users.add(build_user(email, password, role))
    except IntegrityError:
        logger.warning("Tentativa de cadastro com email duplicado: %s", email)
        raise DuplicateEmail("email")
    logger.info("✅ Usuário %s criado com perfil %s", user.id, role.value)
    return user


def list_users(repos: Repositories) -> List[User]:
    return repos.users.list_with_athletes()
