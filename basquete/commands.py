"""Comandos de formulário, um tipo por ``intent``.

Cada rota recebe uma união discriminada pelo campo ``intent``; o payload já
chega validado no formato da variante e o despacho é feito com ``match``
sobre a classe do comando.
"""
import re
from datetime import date, time as time_type
from decimal import Decimal
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic_core import PydanticCustomError

from .models import BillingTypeEnum, CashFlowTypeEnum, PendingStatusEnum, PositionEnum, RoleEnum

NAME_PATTERN = re.compile(r"^[a-zA-ZÀ-ÿ\s]+$")
MAX_POSITIONS = 3

Amount = Annotated[Decimal, Field(gt=0, max_digits=10, decimal_places=2)]
Password = Annotated[str, Field(min_length=6)]
RequiredId = Annotated[str, Field(min_length=1)]


def _validate_name(value: str) -> str:
    value = value.strip()
    if len(value) < 2:
        raise PydanticCustomError("name_too_short", "Nome deve ter pelo menos 2 caracteres")
    if len(value) > 100:
        raise PydanticCustomError("name_too_long", "Nome deve ter no máximo 100 caracteres")
    if not NAME_PATTERN.match(value):
        raise PydanticCustomError("name_invalid", "Nome pode conter apenas letras e espaços")
    return value


def _validate_positions(value: List[PositionEnum]) -> List[PositionEnum]:
    unique = list(dict.fromkeys(value))
    if not unique:
        raise PydanticCustomError("positions_empty", "Selecione pelo menos uma posição preferida")
    if len(unique) > MAX_POSITIONS:
        raise PydanticCustomError("positions_too_many", "Selecione no máximo 3 posições preferidas")
    return unique


# Campos desconhecidos são recusados (422) em vez de ignorados.
class Command(BaseModel):
    model_config = ConfigDict(extra="forbid")


# --- AUTENTICAÇÃO E USUÁRIOS ---
class LoginForm(BaseModel):
    email: EmailStr
    password: Password

class CreateUser(Command):
    intent: Literal["create"]
    email: EmailStr
    password: Password
    role: RoleEnum

# Apenas uma variante por enquanto; o campo intent continua obrigatório.
UserCommand = CreateUser


# --- ATLETAS ---
class CreateAthlete(Command):
    intent: Literal["create"]
    name: str
    email: Optional[EmailStr] = None
    billing_type: BillingTypeEnum
    preferred_positions: List[PositionEnum]
    is_active: bool = True
    create_user: bool = False
    user_email: Optional[EmailStr] = None
    user_password: Optional[Password] = None

    @field_validator("name")
    @classmethod
    def check_name(cls, value):
        return _validate_name(value)

    @field_validator("preferred_positions")
    @classmethod
    def check_positions(cls, value):
        return _validate_positions(value)

class UpdateAthlete(Command):
    intent: Literal["update"]
    id: RequiredId
    name: Optional[str] = None
    billing_type: Optional[BillingTypeEnum] = None
    preferred_positions: Optional[List[PositionEnum]] = None
    is_active: Optional[bool] = None

    @field_validator("name")
    @classmethod
    def check_name(cls, value):
        return _validate_name(value) if value is not None else value

    @field_validator("preferred_positions")
    @classmethod
    def check_positions(cls, value):
        return _validate_positions(value) if value is not None else value

class ToggleAthleteStatus(Command):
    intent: Literal["toggleStatus"]
    id: RequiredId
    is_active: bool

AthleteCommand = Annotated[
    Union[CreateAthlete, UpdateAthlete, ToggleAthleteStatus],
    Field(discriminator="intent"),
]


# --- PARTIDAS ---
class CreateMatch(Command):
    intent: Literal["create"]
    date: date
    time: time_type
    place_id: RequiredId

class UpdateMatch(Command):
    intent: Literal["update"]
    id: RequiredId
    date: date
    time: time_type
    place_id: RequiredId

class ConfirmPresence(Command):
    intent: Literal["confirmPresence"]
    match_id: RequiredId
    athlete_id: RequiredId

MatchCommand = Annotated[
    Union[CreateMatch, UpdateMatch, ConfirmPresence],
    Field(discriminator="intent"),
]


# --- FINANCEIRO ---
class CreateCashFlow(Command):
    intent: Literal["createCashFlow"]
    description: Annotated[str, Field(min_length=1)]
    amount: Amount
    type: CashFlowTypeEnum
    date: date

class CreatePending(Command):
    intent: Literal["createPending"]
    athlete_id: RequiredId
    amount: Amount
    due_date: date
    description: Optional[str] = None

class UpdatePending(Command):
    intent: Literal["updatePending"]
    id: RequiredId
    amount: Optional[Amount] = None
    due_date: Optional[date] = None
    description: Optional[str] = None
    status: Optional[PendingStatusEnum] = None
    payment_date: Optional[date] = None

FinancialCommand = Annotated[
    Union[CreateCashFlow, CreatePending, UpdatePending],
    Field(discriminator="intent"),
]
