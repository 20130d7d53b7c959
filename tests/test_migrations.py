from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import UniqueConstraint, create_engine, inspect

from tajneed.core.config import settings
from tajneed.db.base import Base

ALEMBIC_DIR = Path(__file__).resolve().parents[1] / "alembic"


def _alembic_config() -> Config:
    config = Config()
    config.set_main_option("script_location", str(ALEMBIC_DIR))
    return config


def test_upgrade_and_downgrade(tmp_path, monkeypatch):
    url = f"sqlite+pysqlite:///{tmp_path / 'directory.db'}"
    monkeypatch.setattr(settings, "DATABASE_URL", url)
    config = _alembic_config()

    command.upgrade(config, "head")

    engine = create_engine(url)
    inspector = inspect(engine)
    assert {"zones", "dilas", "muqams", "jamaats", "members"} <= set(inspector.get_table_names())
    jamaat_columns = {column["name"] for column in inspector.get_columns("jamaats")}
    assert {"jamaat_id", "muqam_id", "circuit_name", "version"} <= jamaat_columns
    assert "idx_members_jamaat" in {index["name"] for index in inspector.get_indexes("members")}

    command.downgrade(config, "base")

    assert "jamaats" not in inspect(engine).get_table_names()
    engine.dispose()


def test_migration_constraint_names_match_models(tmp_path, monkeypatch):
    url = f"sqlite+pysqlite:///{tmp_path / 'names.db'}"
    monkeypatch.setattr(settings, "DATABASE_URL", url)

    command.upgrade(_alembic_config(), "head")

    engine = create_engine(url)
    inspector = inspect(engine)
    for table, column in (("jamaats", "jamaat_id"), ("members", "chanda_no")):
        migrated = {c["name"] for c in inspector.get_unique_constraints(table)}
        modelled = {
            c.name
            for c in Base.metadata.tables[table].constraints
            if isinstance(c, UniqueConstraint)
        }
        assert migrated == modelled == {f"uq_{table}_{column}"}
    assert [fk["name"] for fk in inspector.get_foreign_keys("jamaats")] == [
        "fk_jamaats_muqam_id_muqams"
    ]
    engine.dispose()
