import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import (Column, String, DateTime, ForeignKey, Numeric, Date, Time, Boolean,
                        Enum as SQLAlchemyEnum, UniqueConstraint, JSON)
from sqlalchemy.orm import relationship

from .database import Base


# --- ENUMS ---
class RoleEnum(str, enum.Enum):
    ADMINISTRADOR = "ADMINISTRADOR"
    ATLETA = "ATLETA"

class BillingTypeEnum(str, enum.Enum):
    DIARISTA = "DIARISTA"
    MENSALISTA = "MENSALISTA"

class PositionEnum(str, enum.Enum):
    ARMADOR = "ARMADOR"
    ALA = "ALA"
    ALA_ARMADOR = "ALA_ARMADOR"
    PIVO = "PIVO"
    ALA_PIVO = "ALA_PIVO"

class PendingStatusEnum(str, enum.Enum):
    PENDENTE = "PENDENTE"
    PAGO = "PAGO"

class CashFlowTypeEnum(str, enum.Enum):
    INFLOW = "INFLOW"
    OUTFLOW = "OUTFLOW"


def _new_id() -> str:
    return str(uuid.uuid4())

def _now() -> datetime:
    return datetime.now(timezone.utc)


# --- MODELOS SQLALCHEMY ---
class User(Base):
    __tablename__ = "user"
    id = Column(String(36), primary_key=True, default=_new_id)
    email = Column(String, unique=True, index=True, nullable=False)
    password = Column(String, nullable=False)
    role = Column(SQLAlchemyEnum(RoleEnum), nullable=False, default=RoleEnum.ATLETA)
    created_at = Column(DateTime(timezone=True), default=_now)

    athlete = relationship("Athlete", back_populates="user", uselist=False)

class Athlete(Base):
    __tablename__ = "athlete"
    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, nullable=True)
    billing_type = Column(SQLAlchemyEnum(BillingTypeEnum), nullable=False)
    preferred_positions = Column(JSON, nullable=False, default=list) # Lista de PositionEnum (valores)
    is_active = Column(Boolean, nullable=False, default=True)
    user_id = Column(String(36), ForeignKey("user.id"), unique=True, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_now)

    user = relationship("User", back_populates="athlete")
    match_confirmations = relationship("MatchConfirmation", back_populates="athlete")
    participations = relationship("Participation", back_populates="athlete")
    financial_pendencies = relationship("FinancialPending", back_populates="athlete")

class Place(Base):
    __tablename__ = "place"
    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String, nullable=False)
    address = Column(String, nullable=True)

    matches = relationship("Match", back_populates="place")

class Match(Base):
    __tablename__ = "match"
    id = Column(String(36), primary_key=True, default=_new_id)
    date = Column(Date, nullable=False, index=True)
    time = Column(Time, nullable=False)
    place_id = Column(String(36), ForeignKey("place.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), default=_now)

    place = relationship("Place", back_populates="matches")
    confirmations = relationship("MatchConfirmation", back_populates="match")
    participations = relationship("Participation", back_populates="match")

class MatchConfirmation(Base):
    __tablename__ = "match_confirmation"
    id = Column(String(36), primary_key=True, default=_new_id)
    athlete_id = Column(String(36), ForeignKey("athlete.id"), nullable=False)
    match_id = Column(String(36), ForeignKey("match.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), default=_now)

    athlete = relationship("Athlete", back_populates="match_confirmations")
    match = relationship("Match", back_populates="confirmations")

    __table_args__ = (UniqueConstraint('athlete_id', 'match_id', name='uq_confirmation_athlete_match'),)

class Participation(Base):
    __tablename__ = "participation"
    id = Column(String(36), primary_key=True, default=_new_id)
    athlete_id = Column(String(36), ForeignKey("athlete.id"), nullable=False)
    match_id = Column(String(36), ForeignKey("match.id"), nullable=False)

    athlete = relationship("Athlete", back_populates="participations")
    match = relationship("Match", back_populates="participations")

    __table_args__ = (UniqueConstraint('athlete_id', 'match_id', name='uq_participation_athlete_match'),)

class FinancialPending(Base):
    __tablename__ = "financial_pending"
    id = Column(String(36), primary_key=True, default=_new_id)
    athlete_id = Column(String(36), ForeignKey("athlete.id"), nullable=False, index=True)
    amount = Column(Numeric(10, 2), nullable=False)
    due_date = Column(Date, nullable=False)
    description = Column(String, nullable=True)
    status = Column(SQLAlchemyEnum(PendingStatusEnum), nullable=False, default=PendingStatusEnum.PENDENTE)
    payment_date = Column(Date, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_now)

    athlete = relationship("Athlete", back_populates="financial_pendencies")

class CashFlow(Base):
    __tablename__ = "cash_flow"
    id = Column(String(36), primary_key=True, default=_new_id)
    description = Column(String, nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    type = Column(SQLAlchemyEnum(CashFlowTypeEnum), nullable=False)
    date = Column(Date, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=_now)
