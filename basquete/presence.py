"""Confirmação de presença em partidas (liga/desliga por clique)."""
import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

from sqlalchemy.exc import IntegrityError

from . import config
from .errors import Forbidden, NotFound, ValidationError
from .models import Athlete, MatchConfirmation, RoleEnum, User
from .repositories import Repositories

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToggleResult:
    confirmed: bool

    @property
    def message(self) -> str:
        return "Presença confirmada!" if self.confirmed else "Presença cancelada!"


def _authorized_athlete(repos: Repositories, athlete_id: str, caller: User) -> Athlete:
    athlete = repos.athletes.get(athlete_id)
    if caller.role == RoleEnum.ADMINISTRADOR:
        if athlete is None:
            raise NotFound("Atleta não encontrado")
        return athlete
    # ATLETA só altera a presença do próprio cadastro.
    if athlete is None or athlete.user_id != caller.id:
        raise Forbidden()
    return athlete


def toggle_confirmation(repos: Repositories, athlete_id: str, match_id: str, caller: User,
                        allow_past: Optional[bool] = None, today: Optional[date] = None) -> ToggleResult:
    if allow_past is None:
        allow_past = config.ALLOW_PAST_MATCH_CONFIRMATION

    with repos.atomic():
        match = repos.matches.get(match_id)
        if match is None:
            raise NotFound("Partida não encontrada")
        _authorized_athlete(repos, athlete_id, caller)
        if not allow_past and match.date < (today or date.today()):
            raise ValidationError.for_field("match_id", "Não é possível alterar presença em partidas passadas")

        existing = repos.confirmations.find(athlete_id, match_id)
        if existing is not None:
            repos.confirmations.delete(existing)
            result = ToggleResult(confirmed=False)
        else:
            result = _insert_confirmation(repos, athlete_id, match_id)

    logger.info("Presença do atleta %s na partida %s: %s", athlete_id, match_id,
                "confirmada" if result.confirmed else "cancelada")
    return result


def _insert_confirmation(repos: Repositories, athlete_id: str, match_id: str) -> ToggleResult:
    try:
        with repos.db.begin_nested():
            repos.confirmations.add(MatchConfirmation(athlete_id=athlete_id, match_id=match_id))
    except IntegrityError:
        # Outra requisição confirmou o mesmo par entre a leitura e o insert:
        # o índice único manteve uma só linha e o estado final é "confirmado".
        logger.info("Confirmação concorrente detectada para atleta %s na partida %s", athlete_id, match_id)
    return ToggleResult(confirmed=True)
