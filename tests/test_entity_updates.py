from __future__ import annotations

import pytest
import sqlalchemy as sa
from sqlalchemy import create_engine, inspect

from event_app.entity_types import get_entity_type_manager
from event_app.models import Base
from event_app.services import entity_updates
from event_app.services.entity_updates import EntityDefinitionUpdateManager
from event_app.services.exceptions import SchemaApplyError


@pytest.fixture
def scratch_engine(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'schema.db'}", future=True)
    try:
        yield engine
    finally:
        engine.dispose()


def _manager(engine) -> EntityDefinitionUpdateManager:
    return EntityDefinitionUpdateManager(engine, get_entity_type_manager(), Base.metadata)


def _create_partial_event_table(engine, extra_columns=()):
    metadata = sa.MetaData()
    sa.Table(
        "event",
        metadata,
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("uuid", sa.String(36), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("date", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("uuid", name="event_field__uuid__value"),
        *extra_columns,
    )
    metadata.create_all(engine)


def _columns(engine) -> set[str]:
    return {c["name"] for c in inspect(engine).get_columns("event")}


def test_up_to_date_schema_has_no_changes(scratch_engine):
    Base.metadata.create_all(scratch_engine)
    manager = _manager(scratch_engine)

    assert manager.get_change_summary() == {}
    assert manager.needs_updates() is False


def test_missing_table_is_reported_and_installed(scratch_engine):
    manager = _manager(scratch_engine)

    assert manager.get_change_summary() == {
        "event": ["The Event entity type needs to be installed."]
    }

    manager.apply_updates()

    assert "event" in inspect(scratch_engine).get_table_names()
    assert manager.get_change_summary() == {}


def test_missing_field_is_reported_once_and_installed(scratch_engine):
    _create_partial_event_table(scratch_engine)
    manager = _manager(scratch_engine)

    # description has two columns but is one field
    assert manager.get_change_summary() == {
        "event": ["The Description field needs to be installed."]
    }

    manager.apply_updates()

    assert {"description__value", "description__format"} <= _columns(scratch_engine)
    assert manager.get_change_summary() == {}


def test_undeclared_column_is_reported_for_uninstall(scratch_engine):
    _create_partial_event_table(
        scratch_engine,
        extra_columns=(
            sa.Column("description__value", sa.Text(), nullable=True),
            sa.Column("description__format", sa.String(64), nullable=True),
            sa.Column("location", sa.String(255), nullable=True),
        ),
    )

    summary = _manager(scratch_engine).get_change_summary()

    assert summary == {"event": ["The Location field needs to be uninstalled."]}


def test_unrelated_tables_are_ignored(scratch_engine):
    Base.metadata.create_all(scratch_engine)
    with scratch_engine.begin() as conn:
        conn.execute(sa.text("CREATE TABLE alembic_version (version_num VARCHAR(32) NOT NULL)"))

    assert _manager(scratch_engine).get_change_summary() == {}


def test_apply_failure_raises_schema_apply_error(scratch_engine, monkeypatch):
    def _boom(context, metadata):
        raise RuntimeError("disk full")

    monkeypatch.setattr(entity_updates, "produce_migrations", _boom)

    with pytest.raises(SchemaApplyError) as exc_info:
        _manager(scratch_engine).apply_updates()

    assert exc_info.value.code == "SCHEMA_APPLY_FAILED"
    assert "disk full" not in exc_info.value.message
    assert isinstance(exc_info.value.__cause__, RuntimeError)
    assert "event" not in inspect(scratch_engine).get_table_names()
