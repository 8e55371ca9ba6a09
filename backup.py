import sys

from messe import create_app
from messe.maintenance import backup_database

app = create_app()

if __name__ == "__main__":
    destino = sys.argv[1] if len(sys.argv) > 1 else "."
    filename = backup_database(app, destino)
    print("Backup gerado:", filename)
