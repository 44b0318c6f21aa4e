import pytest
from pydantic import ValidationError as PydanticValidationError

from basquete import athletes, commands
from basquete.errors import DuplicateEmail, NotFound, ValidationError
from basquete.models import Athlete, RoleEnum, User
from basquete.schemas import AthleteFilters

from conftest import ATHLETE_EMAIL, make_athlete


def test_create_athlete_with_user_links_both(repos, athlete):
    user = repos.users.get_by_email(ATHLETE_EMAIL)
    assert user.role == RoleEnum.ATLETA
    assert athlete.user_id == user.id
    # Sem email próprio, o atleta herda o email de acesso.
    assert athlete.email == ATHLETE_EMAIL


def test_create_athlete_without_user(repos):
    athlete = make_athlete(repos, name="Bruno Lima", email="bruno@exemplo.com", positions=("PIVO", "ALA_PIVO"))
    assert athlete.user_id is None
    assert athlete.preferred_positions == ["PIVO", "ALA_PIVO"]
    assert athlete.is_active is True


def test_create_user_requires_credentials(repos, db):
    with pytest.raises(ValidationError) as exc_info:
        make_athlete(repos, user_email="sem-senha@exemplo.com")
    assert "user_password" in exc_info.value.field_errors
    assert db.query(Athlete).count() == 0


def test_duplicate_user_email_writes_nothing(repos, db, athlete):
    with pytest.raises(DuplicateEmail) as exc_info:
        make_athlete(repos, name="Outra Pessoa", user_email=ATHLETE_EMAIL, user_password="senha123")
    assert exc_info.value.field_errors == {"user_email": ["Email já está em uso"]}
    assert db.query(Athlete).count() == 1
    assert db.query(User).count() == 1


def test_duplicate_athlete_email_rolls_back_new_user(repos, db, athlete):
    with pytest.raises(DuplicateEmail) as exc_info:
        make_athlete(repos, name="Outra Pessoa", email=ATHLETE_EMAIL,
                     user_email="outra@exemplo.com", user_password="senha123")
    assert "email" in exc_info.value.field_errors
    assert db.query(User).filter(User.email == "outra@exemplo.com").count() == 0
    assert db.query(Athlete).count() == 1


def test_positions_are_deduplicated_and_bounded():
    command = commands.CreateAthlete(intent="create", name="Ana Souza", billing_type="DIARISTA",
                                     preferred_positions=["ALA", "ALA", "PIVO"])
    assert [position.value for position in command.preferred_positions] == ["ALA", "PIVO"]
    with pytest.raises(PydanticValidationError):
        commands.CreateAthlete(intent="create", name="Ana Souza", billing_type="DIARISTA",
                               preferred_positions=["ALA", "PIVO", "ARMADOR", "ALA_PIVO"])
    with pytest.raises(PydanticValidationError):
        commands.CreateAthlete(intent="create", name="Ana Souza", billing_type="DIARISTA",
                               preferred_positions=[])


def test_update_athlete_is_partial(repos, athlete):
    updated = athletes.update_athlete(repos, commands.UpdateAthlete(
        intent="update", id=athlete.id, billing_type="DIARISTA",
    ))
    assert updated.billing_type.value == "DIARISTA"
    assert updated.name == "Ana Souza"
    assert updated.preferred_positions == ["ARMADOR"]


def test_update_unknown_athlete_is_not_found(repos):
    with pytest.raises(NotFound):
        athletes.update_athlete(repos, commands.UpdateAthlete(intent="update", id="nao-existe", name="Novo Nome"))


def test_status_filter_scenario(repos):
    athlete = make_athlete(repos, name="Carla Dias", positions=("ARMADOR", "ALA"), billing_type="MENSALISTA")
    athletes.set_athlete_status(repos, athlete.id, False)

    active = athletes.list_athletes(repos, AthleteFilters(status="active"))
    assert athlete.id not in [item.id for item in active.items]

    everyone = athletes.list_athletes(repos, AthleteFilters(status="all"))
    assert athlete.id in [item.id for item in everyone.items]

    inactive = athletes.list_athletes(repos, AthleteFilters(status="inactive"))
    assert [item.id for item in inactive.items] == [athlete.id]


def test_search_is_case_insensitive_over_name_and_emails(repos, athlete):
    make_athlete(repos, name="Bruno Lima", email="bruno@exemplo.com")
    by_name = athletes.list_athletes(repos, AthleteFilters(search="ana SOUZA"))
    assert [item.name for item in by_name.items] == ["Ana Souza"]
    by_email = athletes.list_athletes(repos, AthleteFilters(search="BRUNO@"))
    assert [item.name for item in by_email.items] == ["Bruno Lima"]


def test_billing_and_position_filters(repos):
    make_athlete(repos, name="Ana Souza", billing_type="MENSALISTA", positions=("ARMADOR",))
    make_athlete(repos, name="Bruno Lima", billing_type="DIARISTA", positions=("PIVO", "ALA"))

    diaristas = athletes.list_athletes(repos, AthleteFilters(billing_type="DIARISTA"))
    assert [item.name for item in diaristas.items] == ["Bruno Lima"]

    alas = athletes.list_athletes(repos, AthleteFilters(position="ALA"))
    assert [item.name for item in alas.items] == ["Bruno Lima"]
    assert alas.total_count == 1


def test_listing_paginates_45_athletes(repos, db):
    for index in range(45):
        db.add(Athlete(name=f"Atleta {chr(65 + index % 26)}", billing_type="DIARISTA",
                       preferred_positions=["ALA"], is_active=True))
    db.commit()

    first = athletes.list_athletes(repos, AthleteFilters(limit=20))
    assert len(first.items) == 20
    assert first.total_count == 45
    assert first.total_pages == 3

    last = athletes.list_athletes(repos, AthleteFilters(page=3, limit=20))
    assert len(last.items) == 5

    beyond = athletes.list_athletes(repos, AthleteFilters(page=4, limit=20))
    assert beyond.items == []
    assert beyond.total_pages == 3


# --- Rotas ---
def test_athlete_listing_route_with_invalid_filters_falls_back(admin_client, repos, athlete):
    athletes.set_athlete_status(repos, athlete.id, False)
    response = admin_client.get("/atletas", params={"status": "quase", "limit": "500"})
    assert response.status_code == 200
    body = response.json()
    assert body["filters"]["status"] == "active"
    assert body["filters"]["limit"] == 20
    assert body["athletes"] == []


def test_athlete_listing_route_includes_counts_and_user(admin_client, athlete):
    body = admin_client.get("/atletas", params={"status": "all"}).json()
    item = body["athletes"][0]
    assert item["user"] == {"email": ATHLETE_EMAIL, "role": "ATLETA"}
    assert item["counts"] == {"match_confirmations": 0, "participations": 0, "financial_pendencies": 0}
    assert body["pagination"] == {"total_count": 1, "total_pages": 1, "current_page": 1}


def test_create_athlete_route(admin_client):
    response = admin_client.post("/atletas", json={
        "intent": "create",
        "name": "Diego Alves",
        "billing_type": "MENSALISTA",
        "preferred_positions": ["ARMADOR", "ALA_ARMADOR"],
    })
    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Atleta criado com sucesso!"}


def test_create_athlete_route_reports_field_errors(admin_client):
    response = admin_client.post("/atletas", json={
        "intent": "create",
        "name": "R2D2",
        "billing_type": "ANUAL",
        "preferred_positions": [],
    })
    assert response.status_code == 422
    field_errors = response.json()["field_errors"]
    assert set(field_errors) == {"name", "billing_type", "preferred_positions"}


def test_unknown_intent_is_rejected(admin_client):
    response = admin_client.post("/atletas", json={"intent": "apagar", "id": "x"})
    assert response.status_code == 422
    assert "intent" in response.json()["field_errors"]


def test_toggle_status_route(admin_client, athlete):
    response = admin_client.post("/atletas", json={"intent": "toggleStatus", "id": athlete.id, "is_active": False})
    assert response.json()["message"] == "Atleta desativado com sucesso!"
    listing = admin_client.get("/atletas").json()
    assert listing["athletes"] == []


def test_athlete_cannot_manage_athletes(athlete_client, athlete):
    response = athlete_client.post("/atletas", json={"intent": "toggleStatus", "id": athlete.id, "is_active": False})
    assert response.status_code == 403
    # Listagem continua liberada para qualquer usuário autenticado.
    assert athlete_client.get("/atletas").status_code == 200


def test_search_treats_wildcards_literally(repos, athlete):
    make_athlete(repos, name="Bruno Lima", email="bruno_lima@exemplo.com")
    assert athletes.list_athletes(repos, AthleteFilters(status="all", search="%")).items == []
    by_underscore = athletes.list_athletes(repos, AthleteFilters(status="all", search="o_l"))
    assert [item.name for item in by_underscore.items] == ["Bruno Lima"]
    assert athletes.list_athletes(repos, AthleteFilters(status="all", search="a_s")).items == []


def test_inherited_email_clash_is_reported_on_user_email(repos, db):
    make_athlete(repos, name="Bia Costa", email="bia@exemplo.com")
    with pytest.raises(DuplicateEmail) as exc_info:
        make_athlete(repos, name="Outra Pessoa", user_email="bia@exemplo.com", user_password="senha123")
    assert set(exc_info.value.field_errors) == {"user_email"}
    assert db.query(User).count() == 0
