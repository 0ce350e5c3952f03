"""Field-type mappings from specification primitives to target dialects.

Each mapping covers every primitive in ``PRIMITIVE_FIELD_TYPES``; references
to other models are handled by the helper functions.
"""

from __future__ import annotations

from typing import Any

from appgen.spec.models import PRIMITIVE_FIELD_TYPES

_TS_TYPE_MAP: dict[str, str] = {
    "string": "string",
    "text": "string",
    "integer": "number",
    "float": "number",
    "boolean": "boolean",
    "datetime": "Date",
    "json": "Record<string, unknown>",
    "id": "string",
}

_PRISMA_TYPE_MAP: dict[str, str] = {
    "string": "String",
    "text": "String",
    "integer": "Int",
    "float": "Float",
    "boolean": "Boolean",
    "datetime": "DateTime",
    "json": "Json",
    "id": "String",
}

_MONGOOSE_TYPE_MAP: dict[str, str] = {
    "string": "String",
    "text": "String",
    "integer": "Number",
    "float": "Number",
    "boolean": "Boolean",
    "datetime": "Date",
    "json": "Schema.Types.Mixed",
    "id": "String",
}

# Drizzle column builders per dialect: primitive -> builder function name.
_DRIZZLE_COLUMN_MAP: dict[str, dict[str, str]] = {
    "postgresql": {
        "string": "varchar",
        "text": "text",
        "integer": "integer",
        "float": "doublePrecision",
        "boolean": "boolean",
        "datetime": "timestamp",
        "json": "jsonb",
        "id": "uuid",
    },
    "mysql": {
        "string": "varchar",
        "text": "text",
        "integer": "int",
        "float": "double",
        "boolean": "boolean",
        "datetime": "datetime",
        "json": "json",
        "id": "varchar",
    },
    "sqlite": {
        "string": "text",
        "text": "text",
        "integer": "integer",
        "float": "real",
        "boolean": "integer",
        "datetime": "integer",
        "json": "text",
        "id": "text",
    },
}

DRIZZLE_CORE_MODULE: dict[str, str] = {
    "postgresql": "drizzle-orm/pg-core",
    "mysql": "drizzle-orm/mysql-core",
    "sqlite": "drizzle-orm/sqlite-core",
}

DRIZZLE_TABLE_FUNCTION: dict[str, str] = {
    "postgresql": "pgTable",
    "mysql": "mysqlTable",
    "sqlite": "sqliteTable",
}


def _split(field_type: str) -> tuple[str, bool]:
    if field_type.endswith("[]"):
        return field_type[:-2], True
    return field_type, False


def ts_type(field_type: str) -> str:
    """TypeScript type for a spec field type (references become model names)."""
    base, is_list = _split(field_type)
    mapped = _TS_TYPE_MAP.get(base, base)
    return f"{mapped}[]" if is_list else mapped


def prisma_type(field: dict[str, Any]) -> str:
    """Prisma scalar or relation type with ``?`` / ``[]`` modifiers."""
    base, is_list = _split(field["type"])
    mapped = _PRISMA_TYPE_MAP.get(base, base)
    if is_list:
        return f"{mapped}[]"
    return mapped if field.get("required", True) else f"{mapped}?"


def mongoose_type(field_type: str) -> str:
    """Mongoose SchemaType expression; references become ObjectId refs."""
    base, is_list = _split(field_type)
    if base in PRIMITIVE_FIELD_TYPES:
        expr = _MONGOOSE_TYPE_MAP[base]
    else:
        expr = f"{{ type: Schema.Types.ObjectId, ref: '{base}' }}"
    return f"[{expr}]" if is_list else expr


def drizzle_column(field_type: str, dialect: str) -> str:
    """Drizzle column builder name for a primitive on *dialect*.

    References and lists are stored as foreign-key ids and JSON text
    respectively.
    """
    columns = _DRIZZLE_COLUMN_MAP[dialect]
    base, is_list = _split(field_type)
    if is_list:
        return columns["json"]
    if base not in PRIMITIVE_FIELD_TYPES:
        return columns["id"]
    return columns[base]
