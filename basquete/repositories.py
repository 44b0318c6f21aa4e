"""Repositórios por entidade sobre uma ``Session`` do SQLAlchemy.

As regras de negócio recebem um :class:`Repositories` (todos os repositórios
compartilhando a mesma sessão/transação) em vez de acessar o banco direto.
"""
from contextlib import contextmanager
from datetime import date
from typing import Iterable, List, Optional, Tuple

from sqlalchemy import case, func, or_, update
from sqlalchemy.orm import Query, Session, joinedload, selectinload

from .models import (Athlete, CashFlow, FinancialPending, Match, MatchConfirmation, Participation,
                     PendingStatusEnum, Place, User)


def paginate(query: Query, page: int, limit: int) -> Tuple[list, int]:
    total_count = query.enable_eagerloads(False).order_by(None).count()
    items = query.offset((page - 1) * limit).limit(limit).all()
    return items, total_count


class SqlRepository:

    def __init__(self, db: Session):
        self.db = db

    def add(self, entity):
        self.db.add(entity)
        self.db.flush()
        return entity


class UserRepository(SqlRepository):

    def get(self, user_id: str) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def list_with_athletes(self) -> List[User]:
        return self.db.query(User).options(joinedload(User.athlete)).order_by(User.created_at.desc()).all()


class AthleteRepository(SqlRepository):

    def get(self, athlete_id: str) -> Optional[Athlete]:
        return self.db.query(Athlete).filter(Athlete.id == athlete_id).first()

    def get_by_user(self, user_id: str) -> Optional[Athlete]:
        return self.db.query(Athlete).filter(Athlete.user_id == user_id).first()

    def list_active(self) -> List[Athlete]:
        return self.db.query(Athlete).options(joinedload(Athlete.user)).filter(
            Athlete.is_active.is_(True)
        ).order_by(Athlete.name).all()

    def search(self, *, is_active: Optional[bool] = None, billing_type=None, position=None,
               search: Optional[str] = None, page: int = 1, limit: int = 20) -> Tuple[List[Athlete], int]:
        query = self.db.query(Athlete).outerjoin(User, Athlete.user_id == User.id).options(
            joinedload(Athlete.user)
        )
        if is_active is not None:
            query = query.filter(Athlete.is_active.is_(is_active))
        if billing_type is not None:
            query = query.filter(Athlete.billing_type == billing_type)
        if search:
            term = search.lower()
            query = query.filter(or_(
                func.lower(Athlete.name).contains(term, autoescape=True),
                func.lower(Athlete.email).contains(term, autoescape=True),
                func.lower(User.email).contains(term, autoescape=True),
            ))
        if position is None:
            query = query.order_by(Athlete.created_at.desc(), Athlete.id)
            return paginate(query, page, limit)

        # Lista JSON: o filtro por posição é feito em Python para funcionar em qualquer banco.
        matching = [
            athlete for athlete in query.order_by(Athlete.created_at.desc(), Athlete.id).all()
            if position.value in (athlete.preferred_positions or [])
        ]
        start = (page - 1) * limit
        return matching[start:start + limit], len(matching)

    def count_related(self, athlete_ids: Iterable[str]) -> dict:
        """Contagem de confirmações, participações e pendências por atleta."""
        ids = list(athlete_ids)
        counts = {athlete_id: {"match_confirmations": 0, "participations": 0, "financial_pendencies": 0}
                  for athlete_id in ids}
        if not ids:
            return counts
        for key, model in (("match_confirmations", MatchConfirmation),
                           ("participations", Participation),
                           ("financial_pendencies", FinancialPending)):
            rows = self.db.query(model.athlete_id, func.count(model.id)).filter(
                model.athlete_id.in_(ids)
            ).group_by(model.athlete_id).all()
            for athlete_id, total in rows:
                counts[athlete_id][key] = total
        return counts


class PlaceRepository(SqlRepository):

    def get(self, place_id: str) -> Optional[Place]:
        return self.db.query(Place).filter(Place.id == place_id).first()

    def list_all(self) -> List[Place]:
        return self.db.query(Place).order_by(Place.name).all()


class MatchRepository(SqlRepository):

    def get(self, match_id: str) -> Optional[Match]:
        return self.db.query(Match).filter(Match.id == match_id).first()

    def search(self, *, date_gte: Optional[date] = None, date_lt: Optional[date] = None,
               date_lte: Optional[date] = None, place_id: Optional[str] = None, newest_first: bool = False,
               page: int = 1, limit: int = 20) -> Tuple[List[Match], int]:
        query = self.db.query(Match).options(
            joinedload(Match.place),
            selectinload(Match.confirmations).joinedload(MatchConfirmation.athlete),
            selectinload(Match.participations),
        )
        if date_gte is not None:
            query = query.filter(Match.date >= date_gte)
        if date_lt is not None:
            query = query.filter(Match.date < date_lt)
        if date_lte is not None:
            query = query.filter(Match.date <= date_lte)
        if place_id:
            query = query.filter(Match.place_id == place_id)
        query = query.order_by(Match.date.desc() if newest_first else Match.date, Match.time, Match.id)
        return paginate(query, page, limit)


class ConfirmationRepository(SqlRepository):

    def find(self, athlete_id: str, match_id: str) -> Optional[MatchConfirmation]:
        return self.db.query(MatchConfirmation).filter(
            MatchConfirmation.athlete_id == athlete_id,
            MatchConfirmation.match_id == match_id,
        ).first()

    def delete(self, confirmation: MatchConfirmation) -> None:
        self.db.delete(confirmation)
        self.db.flush()


# PENDENTE antes de PAGO sem depender da ordem do tipo enum no banco.
PENDING_FIRST = case((FinancialPending.status == PendingStatusEnum.PENDENTE, 0), else_=1)


class FinancialPendingRepository(SqlRepository):

    def get(self, pending_id: str) -> Optional[FinancialPending]:
        return self.db.query(FinancialPending).filter(FinancialPending.id == pending_id).first()

    def mark_paid_if_pending(self, pending_id: str, payment_date: date) -> int:
        """UPDATE condicional: só altera linhas ainda PENDENTE. Devolve o número de linhas."""
        result = self.db.execute(
            update(FinancialPending)
            .where(FinancialPending.id == pending_id, FinancialPending.status == PendingStatusEnum.PENDENTE)
            .values(status=PendingStatusEnum.PAGO, payment_date=payment_date)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def _filtered(self, *, athlete_id=None, status=None, due_from=None, due_to=None) -> Query:
        query = self.db.query(FinancialPending)
        if athlete_id:
            query = query.filter(FinancialPending.athlete_id == athlete_id)
        if status is not None:
            query = query.filter(FinancialPending.status == status)
        if due_from is not None:
            query = query.filter(FinancialPending.due_date >= due_from)
        if due_to is not None:
            query = query.filter(FinancialPending.due_date <= due_to)
        return query

    def search(self, *, page: int, limit: int, **filters) -> Tuple[List[FinancialPending], int]:
        query = self._filtered(**filters).options(joinedload(FinancialPending.athlete).joinedload(Athlete.user))
        query = query.order_by(PENDING_FIRST, FinancialPending.due_date, FinancialPending.id)
        return paginate(query, page, limit)

    def all(self, athlete_id: Optional[str] = None) -> List[FinancialPending]:
        query = self._filtered(athlete_id=athlete_id)
        return query.order_by(PENDING_FIRST, FinancialPending.due_date, FinancialPending.id).all()


class CashFlowRepository(SqlRepository):

    def _filtered(self, *, date_from=None, date_to=None) -> Query:
        query = self.db.query(CashFlow)
        if date_from is not None:
            query = query.filter(CashFlow.date >= date_from)
        if date_to is not None:
            query = query.filter(CashFlow.date <= date_to)
        return query

    def search(self, *, page: int, limit: int, **filters) -> Tuple[List[CashFlow], int]:
        query = self._filtered(**filters).order_by(CashFlow.date.desc(), CashFlow.created_at.desc(), CashFlow.id)
        return paginate(query, page, limit)

    def all(self) -> List[CashFlow]:
        return self.db.query(CashFlow).all()


class Repositories:
    """Agrupa os repositórios de uma mesma sessão (unidade de trabalho da requisição)."""

    def __init__(self, db: Session):
        self.db = db
        self.users = UserRepository(db)
        self.athletes = AthleteRepository(db)
        self.places = PlaceRepository(db)
        self.matches = MatchRepository(db)
        self.confirmations = ConfirmationRepository(db)
        self.pendencies = FinancialPendingRepository(db)
        self.cash_flows = CashFlowRepository(db)

    @contextmanager
    def atomic(self):
        try:
            yield self
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
