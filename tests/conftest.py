from pathlib import Path

import pytest

from comicstop.adapters.sqlite.migrator import SQLiteMigrator
from comicstop.rules.loader import load_rules
from comicstop.rules.models import Rules


@pytest.fixture
def rules() -> Rules:
    # Tests run from the project root
    rules_path = Path("rules.yaml").resolve()
    if not rules_path.exists():
        raise FileNotFoundError(f"Rules not found at {rules_path}")
    return load_rules(rules_path)


@pytest.fixture
def db_path(tmp_path) -> str:
    """A migrated SQLite database in a temp directory."""
    path = str(tmp_path / "comicstop.db")
    SQLiteMigrator(path, "migrations").run_migrations()
    return path
