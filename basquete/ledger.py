"""Regras financeiras: pendências dos atletas, fluxo de caixa e resumos.

Os resumos não são armazenados. São dobras puras sobre o conjunto de
registros, recalculadas a cada leitura a partir de dados lidos na mesma
sessão, para que listagem e totais reflitam o mesmo estado.
"""
import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Iterable, List, Optional, Tuple

from .errors import InvalidTransition, NotFound, ValidationError
from .models import (Athlete, CashFlow, CashFlowTypeEnum, FinancialPending, PendingStatusEnum,
                     User)
from .pagination import Page
from .repositories import Repositories
from .schemas import FinancialFilters

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")


@dataclass(frozen=True)
class PendingSummary:
    pending_amount: Decimal = ZERO
    pending_count: int = 0
    paid_amount: Decimal = ZERO
    paid_count: int = 0

    @property
    def total_amount(self) -> Decimal:
        return self.pending_amount + self.paid_amount

    @property
    def total_count(self) -> int:
        return self.pending_count + self.paid_count


@dataclass(frozen=True)
class CashFlowSummary:
    total_inflow: Decimal = ZERO
    total_outflow: Decimal = ZERO

    @property
    def balance(self) -> Decimal:
        return self.total_inflow - self.total_outflow


def summarize_pendencies(records: Iterable[FinancialPending]) -> PendingSummary:
    pending_amount, pending_count, paid_amount, paid_count = ZERO, 0, ZERO, 0
    for record in records:
        amount = Decimal(record.amount)
        if record.status == PendingStatusEnum.PAGO:
            paid_amount += amount
            paid_count += 1
        else:
            pending_amount += amount
            pending_count += 1
    return PendingSummary(pending_amount, pending_count, paid_amount, paid_count)


def summarize_cash_flow(entries: Iterable[CashFlow]) -> CashFlowSummary:
    inflow, outflow = ZERO, ZERO
    for entry in entries:
        if entry.type == CashFlowTypeEnum.INFLOW:
            inflow += Decimal(entry.amount)
        else:
            outflow += Decimal(entry.amount)
    return CashFlowSummary(inflow, outflow)


# --- MUTAÇÕES ---
def create_pending(repos: Repositories, athlete_id: str, amount: Decimal, due_date: date,
                   description: Optional[str] = None) -> FinancialPending:
    if amount <= 0:
        raise ValidationError.for_field("amount", "Valor deve ser positivo")
    with repos.atomic():
        if repos.athletes.get(athlete_id) is None:
            raise NotFound("Atleta não encontrado")
        pending = repos.pendencies.add(FinancialPending(
            athlete_id=athlete_id,
            amount=amount,
            due_date=due_date,
            description=description or None,
            status=PendingStatusEnum.PENDENTE,
        ))
    logger.info("✅ Pendência %s de %s criada para o atleta %s", pending.id, amount, athlete_id)
    return pending


def mark_paid(repos: Repositories, pending_id: str, payment_date: Optional[date] = None) -> FinancialPending:
    """PENDENTE -> PAGO em um único UPDATE condicional.

    Se nenhuma linha mudou, ou o id não existe (NotFound) ou a pendência já
    estava paga (InvalidTransition). Duas chamadas concorrentes não podem
    ambas ter sucesso.
    """
    payment_date = payment_date or date.today()
    with repos.atomic():
        updated = repos.pendencies.mark_paid_if_pending(pending_id, payment_date)
        if updated == 0:
            if repos.pendencies.get(pending_id) is None:
                raise NotFound("Pendência não encontrada")
            raise InvalidTransition("Esta pendência já foi paga")
    pending = repos.pendencies.get(pending_id)
    logger.info("Pendência %s marcada como paga em %s", pending_id, payment_date)
    return pending


def update_pending(repos: Repositories, pending_id: str, amount: Optional[Decimal] = None,
                   due_date: Optional[date] = None, description: Optional[str] = None,
                   paid: bool = False, payment_date: Optional[date] = None) -> FinancialPending:
    """Edita valor, vencimento ou descrição e, se ``paid``, marca como paga.

    Só pendências ainda PENDENTE aceitam edição. Tudo acontece na mesma
    transação: uma falha ao pagar desfaz as edições.
    """
    if amount is not None and amount <= 0:
        raise ValidationError.for_field("amount", "Valor deve ser positivo")
    edits = {"amount": amount, "due_date": due_date, "description": description}
    edits = {field: value for field, value in edits.items() if value is not None}
    if not edits and not paid:
        raise ValidationError("Nenhuma alteração informada")

    with repos.atomic():
        pending = repos.pendencies.get(pending_id)
        if pending is None:
            raise NotFound("Pendência não encontrada")
        if edits:
            if pending.status != PendingStatusEnum.PENDENTE:
                raise InvalidTransition("Pendências pagas não podem ser alteradas")
            for field, value in edits.items():
                setattr(pending, field, value)
            repos.db.flush()
        if paid and repos.pendencies.mark_paid_if_pending(pending_id, payment_date or date.today()) == 0:
            raise InvalidTransition("Esta pendência já foi paga")

    logger.info("Pendência %s atualizada (campos: %s, paga: %s)", pending_id, ", ".join(edits) or "nenhum", paid)
    return repos.pendencies.get(pending_id)


def record_cash_flow(repos: Repositories, description: str, amount: Decimal, flow_type: CashFlowTypeEnum,
                     entry_date: date) -> CashFlow:
    if amount <= 0:
        raise ValidationError.for_field("amount", "Valor deve ser positivo")
    with repos.atomic():
        entry = repos.cash_flows.add(CashFlow(
            description=description, amount=amount, type=flow_type, date=entry_date,
        ))
    logger.info("Movimentação %s (%s) de %s registrada", entry.id, flow_type.value, amount)
    return entry


# --- LEITURAS ---
@dataclass
class FinancialOverview:
    pendencies: Page
    cash_flows: Page
    athletes: List[Athlete]
    pending_summary: PendingSummary
    cash_flow_summary: CashFlowSummary

    def pagination(self, filters: FinancialFilters) -> dict:
        if filters.type == "cashflow":
            return self.cash_flows.pagination()
        if filters.type in ("pending", "paid"):
            return self.pendencies.pagination()
        # "all": as duas listas são paginadas com o mesmo page/limit.
        return {
            "total_count": self.pendencies.total_count + self.cash_flows.total_count,
            "total_pages": max(self.pendencies.total_pages, self.cash_flows.total_pages),
            "current_page": filters.page,
        }


PENDING_STATUS_FILTER = {"pending": PendingStatusEnum.PENDENTE, "paid": PendingStatusEnum.PAGO}


def _empty_page(filters: FinancialFilters) -> Page:
    return Page(items=[], total_count=0, current_page=filters.page, limit=filters.limit)


def financial_overview(repos: Repositories, filters: FinancialFilters) -> FinancialOverview:
    pendencies = _empty_page(filters)
    cash_flows = _empty_page(filters)
    if filters.type != "cashflow":
        items, total = repos.pendencies.search(
            page=filters.page, limit=filters.limit,
            athlete_id=filters.athlete_id,
            status=PENDING_STATUS_FILTER.get(filters.type),
            due_from=filters.date_from, due_to=filters.date_to,
        )
        pendencies = Page(items=items, total_count=total, current_page=filters.page, limit=filters.limit)
    if filters.type in ("all", "cashflow"):
        items, total = repos.cash_flows.search(
            page=filters.page, limit=filters.limit,
            date_from=filters.date_from, date_to=filters.date_to,
        )
        cash_flows = Page(items=items, total_count=total, current_page=filters.page, limit=filters.limit)

    return FinancialOverview(
        pendencies=pendencies,
        cash_flows=cash_flows,
        athletes=repos.athletes.list_active(),
        pending_summary=summarize_pendencies(repos.pendencies.all()),
        cash_flow_summary=summarize_cash_flow(repos.cash_flows.all()),
    )


def athlete_statement(repos: Repositories, user: User) -> Tuple[Athlete, List[FinancialPending], PendingSummary]:
    athlete = repos.athletes.get_by_user(user.id)
    if athlete is None:
        raise NotFound("Atleta não encontrado")
    pendencies = repos.pendencies.all(athlete_id=athlete.id)
    return athlete, pendencies, summarize_pendencies(pendencies)

