"""
Schema registry: alias code -> AliasSchema.

Schemas are read from the PyDAL dictionary tables when a database is
configured. Without a database, or while its dictionary tables do not exist
yet, the compiled-in defaults serve as the schema source and sync writes to
that in-memory copy instead.
"""

# flake8: noqa: E501

import logging
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError as PydanticValidationError

from apps.api.models.pydantic.dictionary import (
    Agrup,
    AliasSchema,
    AliasSchemaEntry,
    FieldDescriptor,
    Folder,
    SyncedAlias,
    SyncResult,
)
from shared.database import ensure_connection

from .errors import MissingBackingTable, NotFoundError, StorageFault, ValidationError, is_missing_table
from .seed import default_schemas

logger = logging.getLogger(__name__)


class SchemaRegistry:
    """Resolve and synchronize alias schemas."""

    def __init__(self, db=None, defaults: Optional[Dict[str, AliasSchema]] = None):
        """
        Initialize the registry.

        Args:
            db: PyDAL DAL with the dictionary tables defined, or None for
                memory-only operation
            defaults: Schemas used when the database cannot serve them
        """
        self.db = db
        self._memory: Dict[str, AliasSchema] = dict(defaults if defaults is not None else default_schemas())

    @property
    def mode(self) -> str:
        return "memory" if self.db is None else "database"

    # ==================== Reads ====================

    def get_schema(self, alias: str) -> AliasSchema:
        """
        Return the schema for ``alias``.

        Raises:
            NotFoundError: The alias is not registered in the active source
            StorageFault: The dictionary tables could not be read
        """
        key = (alias or "").strip().upper()
        if self.db is not None:
            try:
                return self._load(key)
            except MissingBackingTable:
                logger.warning(f"Dictionary tables missing, serving default schema for {key}")
        schema = self._memory.get(key)
        if schema is None:
            raise NotFoundError(f"Alias not found: {key}", code="ALIAS_NOT_FOUND")
        return schema

    def _load(self, alias: str) -> AliasSchema:
        db = self.db
        try:
            ensure_connection(db)
            parent = db(db.dictionary_tables.alias_code == alias).select().first()
            if parent is None:
                raise NotFoundError(f"Alias not found: {alias}", code="ALIAS_NOT_FOUND")

            fields = db(db.dictionary_fields.table_id == parent.id).select(
                orderby=db.dictionary_fields.field_order | db.dictionary_fields.id
            )
            folders = db(db.dictionary_folders.table_id == parent.id).select(
                orderby=db.dictionary_folders.folder_order | db.dictionary_folders.id
            )
            agrups = db(db.dictionary_agrups.table_id == parent.id).select(
                orderby=db.dictionary_agrups.agrup_order | db.dictionary_agrups.id
            )
        except NotFoundError:
            raise
        except Exception as exc:
            db.rollback()
            if is_missing_table(exc):
                raise MissingBackingTable("Dictionary tables do not exist", detailed_message=str(exc)) from exc
            logger.error(f"Failed to load schema for {alias}: {exc}")
            raise StorageFault.from_exception(exc, message=f"Failed to load schema for alias {alias}") from exc

        return AliasSchema(
            description=parent.description or "",
            struct=[_field_from_row(row) for row in fields],
            folders=[Folder(id=row.folder_code, title=row.folder_title or "") for row in folders],
            agrups=[
                Agrup(id=row.agrup_code, title=row.agrup_title or "", order=row.agrup_order or 0)
                for row in agrups
            ],
        )

    # ==================== Sync ====================

    def sync_schemas(self, payload: Any) -> SyncResult:
        """
        Upsert alias schemas.

        Sources, first non-empty wins: ``aliasSchemas`` mapping, ``schemas``
        list, ``useSeed`` flag. Aliases with an empty description are skipped.
        Each alias is written in its own transaction; a failure stops the
        batch and leaves earlier aliases committed.

        Raises:
            ValidationError: No source given or a schema is malformed
            StorageFault: A write failed
        """
        entries = self._collect(payload)
        synced: List[SyncedAlias] = []
        for alias, schema in entries:
            if self.db is not None:
                try:
                    self._write(alias, schema)
                except MissingBackingTable:
                    logger.warning(f"Dictionary tables missing, syncing {alias} in memory")
                    self._memory[alias] = schema
            else:
                self._memory[alias] = schema
            synced.append(
                SyncedAlias(
                    alias=alias,
                    fields=len(schema.struct),
                    folders=len(schema.folders),
                    agrups=len(schema.agrups),
                )
            )
        logger.info(f"Synchronized {len(synced)} alias schemas ({self.mode})")
        return SyncResult(success=True, synced=len(synced), aliases=synced)

    def _collect(self, payload: Any) -> List[Tuple[str, AliasSchema]]:
        if not isinstance(payload, dict):
            raise ValidationError("Sync payload must be a JSON object", code="INVALID_PAYLOAD")

        raw: List[Tuple[str, Any]] = []
        alias_schemas = payload.get("aliasSchemas")
        schemas = payload.get("schemas")
        if isinstance(alias_schemas, dict) and alias_schemas:
            raw = list(alias_schemas.items())
        elif isinstance(schemas, list) and schemas:
            for entry in schemas:
                if not isinstance(entry, dict):
                    raise ValidationError("Each schema entry must be an object", code="INVALID_SCHEMA")
                raw.append((entry.get("alias") or "", entry))
        elif payload.get("useSeed"):
            return [(alias, schema) for alias, schema in default_schemas().items()]
        else:
            raise ValidationError(
                "Provide aliasSchemas, schemas or useSeed",
                code="MISSING_SCHEMAS",
            )

        entries: List[Tuple[str, AliasSchema]] = []
        for alias, data in raw:
            alias = str(alias or "").strip().upper()
            if not isinstance(data, dict):
                raise ValidationError(f"Schema for {alias} must be an object", code="INVALID_SCHEMA")
            if not alias or not str(data.get("description") or "").strip():
                logger.info(f"Skipping schema without alias or description: {alias or '<blank>'}")
                continue
            try:
                parsed = AliasSchemaEntry.model_validate(data)
            except PydanticValidationError as exc:
                raise ValidationError(
                    f"Invalid schema for alias {alias}",
                    code="INVALID_SCHEMA",
                    detailed_message=str(exc),
                ) from exc
            entries.append(
                (alias, AliasSchema(**parsed.model_dump(include={"description", "struct", "folders", "agrups"})))
            )
        return entries

    def _write(self, alias: str, schema: AliasSchema) -> None:
        db = self.db
        try:
            ensure_connection(db)
            table_id = db.dictionary_tables.update_or_insert(
                db.dictionary_tables.alias_code == alias,
                alias_code=alias,
                description=schema.description,
            )
            if table_id is None:
                table_id = db(db.dictionary_tables.alias_code == alias).select(db.dictionary_tables.id).first().id

            db(db.dictionary_fields.table_id == table_id).delete()
            db(db.dictionary_folders.table_id == table_id).delete()
            db(db.dictionary_agrups.table_id == table_id).delete()

            field_rows = [_field_to_row(table_id, descriptor) for descriptor in schema.struct]
            folder_rows = [
                {"table_id": table_id, "folder_code": folder.id, "folder_title": folder.title, "folder_order": idx}
                for idx, folder in enumerate(schema.folders, start=1)
            ]
            agrup_rows = [
                {"table_id": table_id, "agrup_code": agrup.id, "agrup_title": agrup.title, "agrup_order": agrup.order}
                for agrup in schema.agrups
            ]
            if field_rows:
                db.dictionary_fields.bulk_insert(field_rows)
            if folder_rows:
                db.dictionary_folders.bulk_insert(folder_rows)
            if agrup_rows:
                db.dictionary_agrups.bulk_insert(agrup_rows)
            db.commit()
        except Exception as exc:
            db.rollback()
            if is_missing_table(exc):
                raise MissingBackingTable("Dictionary tables do not exist", detailed_message=str(exc)) from exc
            logger.error(f"Failed to sync alias {alias}: {exc}")
            raise StorageFault.from_exception(exc, message=f"Failed to sync alias {alias}") from exc


def _field_to_row(table_id: int, descriptor: FieldDescriptor) -> Dict[str, Any]:
    detail = descriptor.standard_query_detail
    return {
        "table_id": table_id,
        "field_name": descriptor.field,
        "field_title": descriptor.title,
        "field_type": descriptor.type.value,
        "field_size": descriptor.size,
        "is_required": descriptor.required,
        "is_editable": descriptor.editable,
        "is_enabled": descriptor.enabled,
        "is_virtual": descriptor.virtual,
        "field_options": [option.model_dump(mode="json") for option in descriptor.options],
        "field_decimals": descriptor.decimals,
        "exist_trigger": descriptor.exist_trigger,
        "help_text": descriptor.help,
        "field_order": descriptor.order,
        "agrup_id": descriptor.agrup,
        "folder_id": descriptor.folder,
        "standard_query": descriptor.standard_query,
        "standard_query_detail": detail.model_dump(mode="json") if detail is not None else None,
    }


def _field_from_row(row) -> FieldDescriptor:
    return FieldDescriptor(
        field=row.field_name,
        title=row.field_title or "",
        type=row.field_type or "C",
        size=row.field_size or 0,
        required=bool(row.is_required),
        editable=row.is_editable is not False,
        enabled=row.is_enabled is not False,
        virtual=bool(row.is_virtual),
        options=row.field_options or [],
        decimals=row.field_decimals or 0,
        exist_trigger=bool(row.exist_trigger),
        help=row.help_text or "",
        order=row.field_order or 0,
        agrup=row.agrup_id or None,
        folder=row.folder_id or None,
        standard_query=row.standard_query or None,
        standard_query_detail=row.standard_query_detail or None,
    )
