from datetime import date, datetime, time as time_type
from decimal import Decimal
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from .config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from .models import (BillingTypeEnum, CashFlowTypeEnum, PendingStatusEnum, PositionEnum,
                     RoleEnum)


# --- FILTROS DE LISTAGEM ---
class ListFilters(BaseModel):
    page: int = Field(1, ge=1)
    limit: int = Field(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)

class AthleteFilters(ListFilters):
    status: Literal["all", "active", "inactive"] = "active"
    billing_type: Union[Literal["all"], BillingTypeEnum] = "all"
    position: Union[Literal["all"], PositionEnum] = "all"
    search: Optional[str] = None

class MatchFilters(ListFilters):
    status: Literal["upcoming", "past", "all"] = "upcoming"
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    place_id: Optional[str] = None

class FinancialFilters(ListFilters):
    type: Literal["all", "pending", "paid", "cashflow"] = "all"
    athlete_id: Optional[str] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None


# --- RESPOSTAS ---
class ActionSuccess(BaseModel):
    success: bool = True
    message: str

class ToggleConfirmationOut(ActionSuccess):
    confirmed: bool

class LoginStatusOut(BaseModel):
    authenticated: bool

class PaginationOut(BaseModel):
    total_count: int
    total_pages: int
    current_page: int

class AthleteBrief(BaseModel):
    id: str
    name: str
    is_active: bool
    model_config = ConfigDict(from_attributes=True)

class UserOut(BaseModel):
    id: str
    email: EmailStr
    role: RoleEnum
    model_config = ConfigDict(from_attributes=True)

class UserListItem(UserOut):
    created_at: Optional[datetime] = None
    athlete: Optional[AthleteBrief] = None

class UserListOut(BaseModel):
    users: List[UserListItem]

class SessionUserOut(UserOut):
    athlete: Optional[AthleteBrief] = None

class LinkedUserOut(BaseModel):
    email: str
    role: RoleEnum
    model_config = ConfigDict(from_attributes=True)

class AthleteCounts(BaseModel):
    match_confirmations: int = 0
    participations: int = 0
    financial_pendencies: int = 0

class AthleteOut(BaseModel):
    id: str
    name: str
    email: Optional[str] = None
    billing_type: BillingTypeEnum
    preferred_positions: List[PositionEnum]
    is_active: bool
    user_id: Optional[str] = None
    user: Optional[LinkedUserOut] = None
    counts: AthleteCounts = AthleteCounts()
    model_config = ConfigDict(from_attributes=True)

class AthleteListOut(BaseModel):
    athletes: List[AthleteOut]
    filters: AthleteFilters
    pagination: PaginationOut

class PlaceOut(BaseModel):
    id: str
    name: str
    address: Optional[str] = None
    model_config = ConfigDict(from_attributes=True)

class MatchOut(BaseModel):
    id: str
    date: date
    time: time_type
    place_id: str
    place: PlaceOut
    confirmation_count: int = 0
    participation_count: int = 0
    confirmed_by_me: Optional[bool] = None # Apenas para ATLETA
    confirmed_athlete_ids: Optional[List[str]] = None # Apenas para ADMINISTRADOR
    model_config = ConfigDict(from_attributes=True)

class MatchListOut(BaseModel):
    matches: List[MatchOut]
    filters: MatchFilters
    places: List[PlaceOut]
    current_athlete: Optional[AthleteBrief] = None
    user: UserOut
    pagination: PaginationOut

class PendingOut(BaseModel):
    id: str
    athlete_id: str
    athlete_name: Optional[str] = None
    amount: Decimal
    due_date: date
    description: Optional[str] = None
    status: PendingStatusEnum
    payment_date: Optional[date] = None
    model_config = ConfigDict(from_attributes=True)

class CashFlowOut(BaseModel):
    id: str
    description: str
    amount: Decimal
    type: CashFlowTypeEnum
    date: date
    model_config = ConfigDict(from_attributes=True)

class FinancialSummaryOut(BaseModel):
    pending_amount: Decimal
    pending_count: int
    paid_amount: Decimal
    paid_count: int
    total_inflow: Decimal
    total_outflow: Decimal
    balance: Decimal

class FinancialOverviewOut(BaseModel):
    pendencies: List[PendingOut]
    cash_flows: List[CashFlowOut]
    athletes: List[AthleteBrief]
    filters: FinancialFilters
    summary: FinancialSummaryOut
    pagination: PaginationOut

class StatementSummaryOut(BaseModel):
    total_amount: Decimal
    total_count: int
    pending_amount: Decimal
    paid_amount: Decimal
    pending_count: int
    paid_count: int

class AthleteStatementOut(BaseModel):
    athlete: AthleteBrief
    pendencies: List[PendingOut]
    summary: StatementSummaryOut
