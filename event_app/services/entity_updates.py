"""Entity/field definition updates.

Compares the tables declared by registered entity types with the live
database and applies the difference. Diffing and DDL generation are done by
Alembic's autogenerate API; this module only scopes it to entity tables and
turns the raw diff into readable change descriptions.
"""

from __future__ import annotations

from typing import Any

import structlog
from alembic.autogenerate import compare_metadata, produce_migrations
from alembic.migration import MigrationContext
from alembic.operations import Operations
from alembic.operations import ops as alembic_ops
from sqlalchemy import MetaData, Table
from sqlalchemy.engine import Connection, Engine

from event_app.entity_types import EntityType, EntityTypeManager
from event_app.services.error_codes import ErrorCode
from event_app.services.exceptions import SchemaApplyError

logger = structlog.get_logger()

_TABLE_DIFFS = {
    "add_table": "The {label} entity type needs to be installed.",
    "remove_table": "The {label} entity type needs to be uninstalled.",
}
_COLUMN_DIFFS = {
    "add_column": "The {label} field needs to be installed.",
    "remove_column": "The {label} field needs to be uninstalled.",
}
_UPDATED = "The {label} field needs to be updated."


def _column_label(entity_type: EntityType, column_name: str) -> str:
    definition = entity_type.field_for_column(column_name)
    if definition is not None:
        return definition.label
    return column_name.split("__", 1)[0].replace("_", " ").capitalize()


def _table_name_of(obj: Any) -> str | None:
    if isinstance(obj, Table):
        return obj.name
    table = getattr(obj, "table", None)
    if table is not None:
        return table.name
    parent = getattr(obj, "parent", None)
    if parent is not None:
        return parent.name
    return None


class EntityDefinitionUpdateManager:
    def __init__(
        self,
        engine: Engine,
        entity_type_manager: EntityTypeManager,
        metadata: MetaData | None = None,
    ) -> None:
        if metadata is None:
            from event_app.models import Base

            metadata = Base.metadata
        self._engine = engine
        self._entity_type_manager = entity_type_manager
        self._metadata = metadata

    def _entity_tables(self) -> set[str]:
        return {
            entity_type.base_table
            for entity_type in self._entity_type_manager.get_definitions().values()
        }

    def _entity_type_for(self, table_name: str | None) -> EntityType | None:
        if not table_name:
            return None
        return self._entity_type_manager.definition_for_table(table_name)

    def _include_name(self, name: str | None, type_: str, parent_names: dict) -> bool:
        if type_ == "table":
            return name in self._entity_tables()
        return True

    def _migration_context(self, connection: Connection) -> MigrationContext:
        return MigrationContext.configure(
            connection,
            opts={"include_name": self._include_name, "compare_type": True},
        )

    def _describe(self, diff: Any) -> tuple[EntityType, str] | None:
        # Column modifications arrive as a list of tuples for one column.
        if isinstance(diff, list):
            _kind, _schema, table_name, column_name = diff[0][:4]
            entity_type = self._entity_type_for(table_name)
            if entity_type is None:
                return None
            return entity_type, _UPDATED.format(label=_column_label(entity_type, column_name))

        kind = diff[0]
        if kind in _TABLE_DIFFS:
            entity_type = self._entity_type_for(diff[1].name)
            if entity_type is None:
                return None
            return entity_type, _TABLE_DIFFS[kind].format(label=entity_type.label)

        if kind in _COLUMN_DIFFS:
            _kind, _schema, table_name, column = diff
            entity_type = self._entity_type_for(table_name)
            if entity_type is None:
                return None
            label = _column_label(entity_type, column.name)
            return entity_type, _COLUMN_DIFFS[kind].format(label=label)

        # Indexes, constraints and foreign keys are reported against the
        # field owning their first column.
        obj = diff[1]
        entity_type = self._entity_type_for(_table_name_of(obj))
        if entity_type is None:
            return None
        columns = [] if isinstance(obj, Table) else [c.name for c in getattr(obj, "columns", [])]
        if not columns:
            return entity_type, f"The {entity_type.label} entity type needs to be updated."
        return entity_type, _UPDATED.format(label=_column_label(entity_type, columns[0]))

    def get_change_summary(self) -> dict[str, list[str]]:
        """Return change descriptions keyed by entity type id."""
        with self._engine.connect() as connection:
            diffs = compare_metadata(self._migration_context(connection), self._metadata)

        summary: dict[str, list[str]] = {}
        for diff in diffs:
            described = self._describe(diff)
            if described is None:
                continue
            entity_type, message = described
            changes = summary.setdefault(entity_type.id, [])
            if message not in changes:
                changes.append(message)
        return summary

    def needs_updates(self) -> bool:
        return bool(self.get_change_summary())

    def apply_updates(self) -> None:
        """Bring the live tables in line with the declared entity types.

        Raises:
            SchemaApplyError: If any migration operation fails. The
                transaction is rolled back by the engine; nothing is retried.
        """
        try:
            with self._engine.begin() as connection:
                context = self._migration_context(connection)
                script = produce_migrations(context, self._metadata)
                use_batch = connection.dialect.name == "sqlite"
                self._invoke(Operations(context), script.upgrade_ops, use_batch)
        except Exception as exc:
            logger.exception("entity_updates_failed")
            raise SchemaApplyError(
                ErrorCode.SCHEMA_APPLY_FAILED.value,
                "entity/field definition updates could not be applied",
            ) from exc

        logger.info("entity_updates_applied")

    @staticmethod
    def _invoke(operations: Operations, upgrade_ops: alembic_ops.UpgradeOps, use_batch: bool) -> None:
        stack: list[Any] = [upgrade_ops]
        while stack:
            elem = stack.pop(0)
            if use_batch and isinstance(elem, alembic_ops.ModifyTableOps):
                # SQLite cannot alter most things in place.
                with operations.batch_alter_table(elem.table_name, schema=elem.schema) as batch_ops:
                    for table_elem in elem.ops:
                        batch_ops.invoke(table_elem)
            elif hasattr(elem, "ops"):
                stack.extend(elem.ops)
            else:
                operations.invoke(elem)
