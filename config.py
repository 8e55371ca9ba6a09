import os


def _database_url(default="sqlite:///messe.db"):
    db_url = os.getenv("DATABASE_URL")
    if not db_url:
        return default
    if db_url.startswith("postgres://"):
        db_url = db_url.replace("postgres://", "postgresql+psycopg://", 1)
    return db_url


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")

    SQLALCHEMY_DATABASE_URI = _database_url()
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    API_PREFIX = os.getenv("API_PREFIX", "/api")

    # senha aplicada a utilizadores novos sem senha e nos resets
    DEFAULT_USER_PASSWORD = os.getenv("DEFAULT_USER_PASSWORD", "123456")

    ADMIN_NAME = os.getenv("ADMIN_NAME", "Administrador")
    ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@messe.com")
    ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "123456")

    SEED_SECTORS = [s.strip() for s in os.getenv("SEED_SECTORS", "Bar,Cozinha").split(",") if s.strip()]

    HOTEL_NAME = "Messe Hotel Huambo"


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    LOG_LEVEL = "WARNING"
