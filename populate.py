from basquete.database import SessionLocal, init_db
from basquete.models import Place, RoleEnum, User
from basquete.security import get_password_hash

DEFAULT_ADMIN_EMAIL = "admin@sistema.com"
DEFAULT_ADMIN_PASSWORD = "admin123"
EXAMPLE_PLACE_ID = "example-place"


def populate_initial_data(db=None):
    """
    Garante que existem o administrador padrão e o local de exemplo.
    Pode ser executado várias vezes: registros existentes são mantidos.
    """
    own_session = db is None
    if own_session:
        init_db()
        db = SessionLocal()

    try:
        # Passo 1: administrador padrão
        admin = db.query(User).filter_by(email=DEFAULT_ADMIN_EMAIL).first()
        if not admin:
            admin = User(
                email=DEFAULT_ADMIN_EMAIL,
                password=get_password_hash(DEFAULT_ADMIN_PASSWORD),
                role=RoleEnum.ADMINISTRADOR,
            )
            db.add(admin)
            print(f"👤 Usuário administrador criado: {DEFAULT_ADMIN_EMAIL}")
        else:
            print(f"- Já existe: {DEFAULT_ADMIN_EMAIL}. A ignorar.")

        # Passo 2: local de exemplo (locais só são criados por aqui)
        place = db.query(Place).filter_by(id=EXAMPLE_PLACE_ID).first()
        if not place:
            place = Place(
                id=EXAMPLE_PLACE_ID,
                name="Quadra Principal",
                address="Rua do Basquete, 123 - Recife, PE",
            )
            db.add(place)
            print(f"📍 Local criado: {place.name}")
        else:
            print(f"- Já existe: {place.name}. A ignorar.")

        db.commit()
        print("\n✅ Seed concluído com sucesso!")
    except Exception as e:
        print(f"\nERRO durante a operação: {e}")
        db.rollback()
        raise
    finally:
        if own_session:
            db.close()


if __name__ == "__main__":
    populate_initial_data()
