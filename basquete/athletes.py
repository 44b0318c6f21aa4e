import logging
from typing import Optional, Tuple

from sqlalchemy.exc import IntegrityError

from . import commands
from .accounts import build_user
from .errors import DuplicateEmail, NotFound, ValidationError
from .models import Athlete, RoleEnum
from .pagination import Page
from .repositories import Repositories
from .schemas import AthleteCounts, AthleteFilters, AthleteOut

logger = logging.getLogger(__name__)

STATUS_FILTER = {"all": None, "active": True, "inactive": False}


def _require_credentials(data: commands.CreateAthlete) -> None:
    field_errors = {}
    if not data.user_email:
        field_errors["user_email"] = ["Email de acesso é obrigatório"]
    if not data.user_password:
        field_errors["user_password"] = ["Senha deve ter pelo menos 6 caracteres"]
    if field_errors:
        raise ValidationError("Falha na validação", field_errors)


def create_athlete(repos: Repositories, data: commands.CreateAthlete) -> Athlete:
    """Cria o atleta e, opcionalmente, o usuário ATLETA vinculado, na mesma transação.

    Emails duplicados são detectados pelos índices únicos: ``user_email``
    para o usuário, ``email`` para o atleta. Nada é gravado em caso de erro.
    """
    if data.create_user:
        _require_credentials(data)

    try:
        with repos.atomic():
            user_id: Optional[str] = None
            if data.create_user:
                try:
                    user = repos.users.add(build_user(data.user_email, data.user_password, RoleEnum.ATLETA))
                except IntegrityError:
                    raise DuplicateEmail("user_email")
                user_id = user.id

            try:
                athlete = repos.athletes.add(Athlete(
                    name=data.name,
                    email=data.email or data.user_email or None,
                    billing_type=data.billing_type,
                    preferred_positions=[position.value for position in data.preferred_positions],
                    is_active=data.is_active,
                    user_id=user_id,
                ))
            except IntegrityError:
                # Sem email próprio, o atleta usa o email de acesso.
                field = "email" if data.email else "user_email"
                raise DuplicateEmail(field, "Este email já está cadastrado para outro atleta")
    except DuplicateEmail:
        logger.warning("Cadastro de atleta recusado: email duplicado")
        raise

    logger.info("✅ Atleta %s criado (usuário vinculado: %s)", athlete.id, user_id or "nenhum")
    return athlete


def _get_or_404(repos: Repositories, athlete_id: str) -> Athlete:
    athlete = repos.athletes.get(athlete_id)
    if athlete is None:
        raise NotFound("Atleta não encontrado")
    return athlete


def update_athlete(repos: Repositories, data: commands.UpdateAthlete) -> Athlete:
    with repos.atomic():
        athlete = _get_or_404(repos, data.id)
        if data.name is not None:
            athlete.name = data.name
        if data.billing_type is not None:
            athlete.billing_type = data.billing_type
        if data.preferred_positions is not None:
            athlete.preferred_positions = [position.value for position in data.preferred_positions]
        if data.is_active is not None:
            athlete.is_active = data.is_active
    logger.info("Atleta %s atualizado", athlete.id)
    return athlete


def set_athlete_status(repos: Repositories, athlete_id: str, is_active: bool) -> Athlete:
    with repos.atomic():
        athlete = _get_or_404(repos, athlete_id)
        athlete.is_active = is_active
    logger.info("Atleta %s %s", athlete.id, "ativado" if is_active else "desativado")
    return athlete


def list_athletes(repos: Repositories, filters: AthleteFilters) -> Page[AthleteOut]:
    athletes, total_count = repos.athletes.search(
        is_active=STATUS_FILTER[filters.status],
        billing_type=None if filters.billing_type == "all" else filters.billing_type,
        position=None if filters.position == "all" else filters.position,
        search=filters.search.strip() if filters.search else None,
        page=filters.page,
        limit=filters.limit,
    )
    counts = repos.athletes.count_related(athlete.id for athlete in athletes)
    items = []
    for athlete in athletes:
        item = AthleteOut.model_validate(athlete)
        item.counts = AthleteCounts(**counts[athlete.id])
        items.append(item)
    return Page(items=items, total_count=total_count, current_page=filters.page, limit=filters.limit)


def status_message(is_active: bool) -> str:
    return f"Atleta {'ativado' if is_active else 'desativado'} com sucesso!"


def dispatch(repos: Repositories, command) -> Tuple[str, Athlete]:
    match command:
        case commands.CreateAthlete():
            return "Atleta criado com sucesso!", create_athlete(repos, command)
        case commands.UpdateAthlete():
            return "Atleta atualizado com sucesso!", update_athlete(repos, command)
        case commands.ToggleAthleteStatus():
            athlete = set_athlete_status(repos, command.id, command.is_active)
            return status_message(command.is_active), athlete
        case _:
            raise TypeError(f"Comando de atleta desconhecido: {type(command).__name__}")
