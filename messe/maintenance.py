"""Reset and backup of the database, used by reset_sistema.py and backup.py."""

import logging
import shutil
import subprocess
from datetime import datetime
from pathlib import Path

from messe import seed_defaults
from messe.extensions import db

logger = logging.getLogger(__name__)


def reset_database(app):
    """Drop every table, recreate them and seed the admin and sectors."""
    with app.app_context():
        db.drop_all()
        db.create_all()
        seed_defaults(app)
    logger.info("maintenance.reset")


def backup_database(app, dest_dir=".", now=None) -> Path:
    """
    Back up the configured database into dest_dir.

    SQLite files are copied; PostgreSQL goes through pg_dump.
    """
    now = now or datetime.now()
    stamp = now.strftime("%Y%m%d_%H%M")
    dest = Path(dest_dir)
    dest.mkdir(parents=True, exist_ok=True)

    with app.app_context():
        url = db.engine.url

    if url.get_backend_name() == "sqlite":
        if not url.database or url.database == ":memory:":
            raise RuntimeError("Base de dados em memória não pode ser copiada.")
        target = dest / f"backup_{stamp}.db"
        shutil.copy2(url.database, target)
    else:
        target = dest / f"backup_{stamp}.sql"
        pg_url = url.set(drivername="postgresql").render_as_string(hide_password=False)
        with target.open("wb") as fh:
            subprocess.run(["pg_dump", pg_url], stdout=fh, check=True)

    logger.info("maintenance.backup", extra={"path": str(target)})
    return target
