"""PyDAL table definitions for the data dictionary.

The dictionary lives in four configuration tables: ``tables`` (one row per
alias), and its children ``table_fields``, ``table_folders`` and
``table_agrups`` scoped by ``table_id``. Python-side names are prefixed with
``dictionary_`` so they never collide with DAL attributes such as
``db.tables``. Long lines are unavoidable due to Field() definition syntax
and are suppressed from linting.
"""

# flake8: noqa: E501

import datetime

from pydal import Field
from pydal.validators import IS_IN_SET, IS_MATCH, IS_NOT_EMPTY

FIELD_TYPES = ["C", "N", "D", "L", "M"]


def _now():
    return datetime.datetime.now(datetime.timezone.utc)


def define_all_tables(db, migrate=False):
    """Define the dictionary configuration tables.

    Tables are defined in dependency order to satisfy foreign key references.
    Alias data tables (``z10``, ``z11``...) are not declared here; the row
    store reaches them by name.
    """

    # ==========================================
    # LEVEL 0: Alias registry
    # ==========================================

    db.define_table(
        "dictionary_tables",
        Field(
            "alias_code",
            "string",
            length=32,
            notnull=True,
            unique=True,
            requires=IS_MATCH(r"^[A-Za-z0-9_]+$"),
        ),
        Field("description", "string", length=255, notnull=True, requires=IS_NOT_EMPTY()),
        Field("created_at", "datetime", default=_now),
        Field("updated_at", "datetime", default=_now, update=_now),
        rname="tables",
        migrate=migrate,
    )

    # ==========================================
    # LEVEL 1: Alias children
    # ==========================================

    db.define_table(
        "dictionary_fields",
        Field("table_id", "reference dictionary_tables", notnull=True, ondelete="CASCADE"),
        Field("field_name", "string", length=64, notnull=True),
        Field("field_title", "string", length=255, default=""),
        Field("field_type", "string", length=1, default="C", requires=IS_IN_SET(FIELD_TYPES)),
        Field("field_size", "integer", default=0),
        Field("is_required", "boolean", default=False),
        Field("is_editable", "boolean", default=True),
        Field("is_enabled", "boolean", default=True),
        Field("is_virtual", "boolean", default=False),
        Field("field_options", "json"),  # [{value, label}]
        Field("field_decimals", "integer", default=0),
        Field("exist_trigger", "boolean", default=False),
        Field("help_text", "text", default=""),
        Field("field_order", "integer", default=0),
        Field("agrup_id", "string", length=64),
        Field("folder_id", "string", length=64),
        Field("standard_query", "string", length=255),
        Field("standard_query_detail", "json"),
        rname="table_fields",
        migrate=migrate,
    )

    db.define_table(
        "dictionary_folders",
        Field("table_id", "reference dictionary_tables", notnull=True, ondelete="CASCADE"),
        Field("folder_code", "string", length=64, notnull=True),
        Field("folder_title", "string", length=255, default=""),
        Field("folder_order", "integer", default=0),
        rname="table_folders",
        migrate=migrate,
    )

    db.define_table(
        "dictionary_agrups",
        Field("table_id", "reference dictionary_tables", notnull=True, ondelete="CASCADE"),
        Field("agrup_code", "string", length=64, notnull=True),
        Field("agrup_title", "string", length=255, default=""),
        Field("agrup_order", "integer", default=0),
        rname="table_agrups",
        migrate=migrate,
    )
