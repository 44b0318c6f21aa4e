from fastapi import APIRouter, Depends, Request

from .. import commands, ledger
from ..auth import get_repositories, require_admin, require_athlete_user
from ..errors import InvalidTransition
from ..models import FinancialPending, PendingStatusEnum, User
from ..pagination import parse_filters
from ..repositories import Repositories
from ..schemas import (ActionSuccess, AthleteBrief, AthleteStatementOut, FinancialFilters,
                       FinancialOverviewOut, PendingOut)

router = APIRouter(tags=["Financial"])


def _pending_out(pending: FinancialPending) -> PendingOut:
    item = PendingOut.model_validate(pending)
    item.athlete_name = pending.athlete.name if pending.athlete else None
    return item


@router.get("/financeiro", response_model=FinancialOverviewOut)
def financial_overview(request: Request, admin: User = Depends(require_admin),
                       repos: Repositories = Depends(get_repositories)):
    filters = parse_filters(FinancialFilters, request.query_params)
    overview = ledger.financial_overview(repos, filters)
    pendings, cash = overview.pending_summary, overview.cash_flow_summary
    return {
        "pendencies": [_pending_out(pending) for pending in overview.pendencies.items],
        "cash_flows": overview.cash_flows.items,
        "athletes": overview.athletes,
        "filters": filters,
        "summary": {
            "pending_amount": pendings.pending_amount,
            "pending_count": pendings.pending_count,
            "paid_amount": pendings.paid_amount,
            "paid_count": pendings.paid_count,
            "total_inflow": cash.total_inflow,
            "total_outflow": cash.total_outflow,
            "balance": cash.balance,
        },
        "pagination": overview.pagination(filters),
    }


@router.post("/financeiro", response_model=ActionSuccess)
def financial_action(command: commands.FinancialCommand, admin: User = Depends(require_admin),
                     repos: Repositories = Depends(get_repositories)):
    match command:
        case commands.CreateCashFlow():
            ledger.record_cash_flow(repos, command.description, command.amount, command.type, command.date)
            return ActionSuccess(message="Movimentação financeira registrada com sucesso!")
        case commands.CreatePending():
            ledger.create_pending(repos, command.athlete_id, command.amount, command.due_date, command.description)
            return ActionSuccess(message="Pendência financeira criada com sucesso!")
        case commands.UpdatePending():
            if command.status == PendingStatusEnum.PENDENTE:
                raise InvalidTransition("Uma pendência só pode ser marcada como paga")
            ledger.update_pending(
                repos, command.id,
                amount=command.amount,
                due_date=command.due_date,
                description=command.description,
                paid=command.status == PendingStatusEnum.PAGO,
                payment_date=command.payment_date,
            )
            return ActionSuccess(message="Pendência atualizada com sucesso!")
        case _:
            raise TypeError(f"Comando financeiro desconhecido: {type(command).__name__}")


@router.get("/minhas-pendencias", response_model=AthleteStatementOut)
def my_pendencies(user: User = Depends(require_athlete_user), repos: Repositories = Depends(get_repositories)):
    athlete, pendencies, summary = ledger.athlete_statement(repos, user)
    return {
        "athlete": AthleteBrief.model_validate(athlete),
        "pendencies": [_pending_out(pending) for pending in pendencies],
        "summary": {
            "total_amount": summary.total_amount,
            "total_count": summary.total_count,
            "pending_amount": summary.pending_amount,
            "paid_amount": summary.paid_amount,
            "pending_count": summary.pending_count,
            "paid_count": summary.paid_count,
        },
    }
