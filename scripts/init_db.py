"""Inicjalizacja bazy historii statusów.

Skrypt można uruchomić poleceniem ``python scripts/init_db.py`` bez
konieczności modyfikacji ``PYTHONPATH``. Tworzy również katalog na plik
SQLite, dzięki czemu ``sqlite3`` nie zgłasza błędu "unable to open database
file" gdy folder ``data/`` nie istnieje.
"""

import sys
from pathlib import Path

# Dodaj katalog nadrzędny do sys.path, aby import "epdconsole" działał przy
# bezpośrednim uruchomieniu skryptu.
sys.path.append(str(Path(__file__).resolve().parents[1]))

from epdconsole.core.config import ensure_dirs, settings
from epdconsole.core.db import init_db
from epdconsole.core.notifications import log_event

ensure_dirs()
init_db()
log_event("Status history initialised", source="system")

print(f"DB initialized: {settings.db_path}")
