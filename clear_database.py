from basquete import models  # noqa: F401  (registra as tabelas no metadata)
from basquete.database import Base, engine


def clear_all_tables():
    """
    Apaga todas as tabelas conhecidas pelos modelos.
    Operação destrutiva: use apenas em desenvolvimento.
    """
    print("\nIniciando a exclusão das tabelas...")
    try:
        # drop_all respeita a ordem das dependências (confirmações antes de partidas, etc.)
        with engine.begin() as connection:
            for table in reversed(Base.metadata.sorted_tables):
                table.drop(connection, checkfirst=True)
                print(f"- Tabela {table.name} excluída com sucesso.")
        print("\nOPERAÇÃO CONCLUÍDA: Todas as tabelas foram excluídas.")
    except Exception as e:
        print(f"\nERRO durante a exclusão das tabelas: {e}")
        print("A transação foi revertida.")
        raise


if __name__ == "__main__":
    # Pede uma confirmação final para o usuário por segurança
    confirm = input("ATENÇÃO: Esta ação apagará TODAS as tabelas do banco de dados.\nIsso não pode ser desfeito. Deseja continuar? (s/n): ")
    if confirm.lower() == 's':
        clear_all_tables()
    else:
        print("Operação cancelada.")
