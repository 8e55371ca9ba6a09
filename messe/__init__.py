import logging

from flask import Flask, jsonify
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from .exceptions import MesseError
from .extensions import db, login_manager
from .models.user import User

logger = logging.getLogger(__name__)


def create_app(config_object="config.Config"):
    app = Flask(__name__)
    app.config.from_object(config_object)

    _configure_logging(app)

    db.init_app(app)
    login_manager.init_app(app)

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({"error": "Autenticação necessária"}), 401

    _register_error_handlers(app)

    # Blueprints
    from messe.blueprints.auth import auth_bp
    from messe.blueprints.estoque import estoque_bp
    from messe.blueprints.movimentos import movimentos_bp
    from messe.blueprints.requisicoes import requisicoes_bp
    from messe.blueprints.admin import admin_bp
    from messe.blueprints.relatorios import relatorios_bp

    prefix = app.config.get("API_PREFIX", "/api").rstrip("/")
    app.register_blueprint(auth_bp, url_prefix=prefix)
    app.register_blueprint(estoque_bp, url_prefix=prefix)
    app.register_blueprint(movimentos_bp, url_prefix=f"{prefix}/movements")
    app.register_blueprint(requisicoes_bp, url_prefix=f"{prefix}/requisitions")
    app.register_blueprint(admin_bp, url_prefix=f"{prefix}/users")
    app.register_blueprint(relatorios_bp, url_prefix=f"{prefix}/reports")

    # cria tabelas + admin e setores padrão
    with app.app_context():
        db.create_all()
        seed_defaults(app)

    return app


def seed_defaults(app):
    from messe.models import Sector

    admin_email = app.config["ADMIN_EMAIL"]
    if not User.query.filter_by(email=admin_email).first():
        u = User(name=app.config["ADMIN_NAME"], email=admin_email, role="ADMIN")
        u.set_password(app.config["ADMIN_PASSWORD"])
        db.session.add(u)
        logger.info("seed.admin", extra={"email": admin_email})

    for nome in app.config.get("SEED_SECTORS", []):
        if not Sector.query.filter_by(name=nome).first():
            db.session.add(Sector(name=nome))

    db.session.commit()


def _configure_logging(app):
    level = app.config.get("LOG_LEVEL", "INFO")
    root = logging.getLogger("messe")
    root.setLevel(level)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        root.addHandler(handler)


def _register_error_handlers(app):

    @app.errorhandler(MesseError)
    def handle_messe_error(e):
        db.session.rollback()
        return jsonify(e.as_dict()), e.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return jsonify({"error": e.description}), e.code

    @app.errorhandler(SQLAlchemyError)
    def handle_db_error(e):
        db.session.rollback()
        logger.exception("db.error")
        return jsonify({"error": str(e.__cause__ or e)}), 500

    @app.errorhandler(Exception)
    def handle_unexpected(e):
        db.session.rollback()
        logger.exception("unhandled.error")
        return jsonify({"error": str(e)}), 500
