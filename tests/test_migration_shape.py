from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

from core.config import get_settings

ROOT = Path(__file__).resolve().parents[1]


def test_required_tables_present_in_migration():
    text = (ROOT / "alembic/versions/20261019_0001_initial.py").read_text(encoding="utf-8")
    for t in ["users", "workouts", "trainer_programs", "user_programs", "trainer_cvs"]:
        assert f'"{t}"' in text


def test_migrations_avoid_postgres_now_function_for_portability():
    for migration_file in (ROOT / "alembic/versions").glob("*.py"):
        text = migration_file.read_text(encoding="utf-8").lower()
        assert "now()" not in text, f"Non-portable now() found in {migration_file.name}"


def test_alembic_upgrade_head_succeeds_on_sqlite(tmp_path, monkeypatch):
    db_path = tmp_path / "migration_smoke.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{db_path}")
    get_settings.cache_clear()

    cfg = Config(str(ROOT / "alembic.ini"))
    cfg.set_main_option("script_location", str(ROOT / "alembic"))
    cfg.attributes["configure_logger"] = False
    try:
        command.upgrade(cfg, "head")
    finally:
        get_settings.cache_clear()

    engine = create_engine(f"sqlite:///{db_path}")
    try:
        insp = inspect(engine)
        tables = set(insp.get_table_names())
        assert {"users", "workouts", "trainer_programs", "user_programs", "trainer_cvs"} <= tables
        uniques = {tuple(u["column_names"]) for u in insp.get_unique_constraints("user_programs")}
        assert ("user_id", "program_id") in uniques
    finally:
        engine.dispose()
