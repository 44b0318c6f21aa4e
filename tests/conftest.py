# Configuração de teste: banco SQLite em memória, definido antes de importar o pacote
# (basquete.config lê o ambiente no import).
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SESSION_SECRET"] = "segredo-de-teste"
os.environ.pop("APP_ENV", None)

import pytest
from fastapi.testclient import TestClient

from basquete import accounts, athletes, commands
from basquete.database import Base, SessionLocal, engine
from basquete.models import Place, RoleEnum
from basquete.repositories import Repositories
from main import app

ADMIN_EMAIL = "admin@sistema.com"
ADMIN_PASSWORD = "admin123"
ATHLETE_EMAIL = "ana@exemplo.com"
ATHLETE_PASSWORD = "senha123"


@pytest.fixture(autouse=True)
def _schema():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def repos(db):
    return Repositories(db)


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def place(db):
    place = Place(name="Quadra Principal", address="Rua do Basquete, 123 - Recife, PE")
    db.add(place)
    db.commit()
    return place


@pytest.fixture
def admin_user(repos):
    return accounts.create_user(repos, ADMIN_EMAIL, ADMIN_PASSWORD, RoleEnum.ADMINISTRADOR)


def make_athlete(repos, name="Ana Souza", email=None, user_email=None, user_password=None,
                 billing_type="MENSALISTA", positions=("ARMADOR",), is_active=True):
    command = commands.CreateAthlete(
        intent="create",
        name=name,
        email=email,
        billing_type=billing_type,
        preferred_positions=list(positions),
        is_active=is_active,
        create_user=user_email is not None,
        user_email=user_email,
        user_password=user_password,
    )
    return athletes.create_athlete(repos, command)


@pytest.fixture
def athlete(repos):
    """Atleta com usuário ATLETA vinculado."""
    return make_athlete(repos, user_email=ATHLETE_EMAIL, user_password=ATHLETE_PASSWORD)


@pytest.fixture
def athlete_user(repos, athlete):
    return repos.users.get_by_email(ATHLETE_EMAIL)


def login(client, email, password):
    response = client.post("/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return response


@pytest.fixture
def admin_client(client, admin_user):
    login(client, ADMIN_EMAIL, ADMIN_PASSWORD)
    return client


@pytest.fixture
def athlete_client(client, athlete_user):
    login(client, ATHLETE_EMAIL, ATHLETE_PASSWORD)
    return client
