"""Reset do sistema + cria utilizador admin e setores padrão.

Uso:
  python reset_sistema.py

Apaga todas as tabelas da base configurada (DATABASE_URL ou messe.db),
recria-as e cria o admin definido em ADMIN_EMAIL / ADMIN_PASSWORD.
"""

from messe import create_app
from messe.maintenance import reset_database


def resetar_banco():
    app = create_app()
    reset_database(app)

    print("OK! Banco recriado.")
    print(f"Login: {app.config['ADMIN_EMAIL']}  |  Senha: {app.config['ADMIN_PASSWORD']}")


if __name__ == "__main__":
    resetar_banco()
