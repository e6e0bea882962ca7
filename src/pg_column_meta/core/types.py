"""PostgreSQL type OIDs and type-modifier decoding."""

from typing import Optional

from pg_column_meta.models.column import TypeMetadata

# Built-in type OIDs -> abstract type symbol
OID_TYPE_SYMBOLS: dict[int, str] = {
    16: "boolean",  # bool
    17: "binary",  # bytea
    20: "integer",  # int8 / bigint
    21: "integer",  # int2 / smallint
    23: "integer",  # int4 / integer
    25: "text",
    26: "oid",
    114: "json",
    142: "xml",
    650: "cidr",
    700: "float",  # float4 / real
    701: "float",  # float8 / double precision
    790: "money",
    829: "macaddr",
    869: "inet",
    1042: "string",  # bpchar / character
    1043: "string",  # varchar / character varying
    1082: "date",
    1083: "time",
    1114: "datetime",  # timestamp without time zone
    1184: "timestamptz",
    1186: "interval",
    1266: "time",  # timetz
    1560: "bit",
    1562: "bit_varying",
    1700: "decimal",  # numeric
    2950: "uuid",
    3614: "tsvector",
    3802: "jsonb",
}

# Array type OIDs -> element type OID
ARRAY_ELEMENT_OIDS: dict[int, int] = {
    199: 114,
    1000: 16,
    1001: 17,
    1005: 21,
    1007: 23,
    1009: 25,
    1014: 1042,
    1015: 1043,
    1016: 20,
    1021: 700,
    1022: 701,
    1115: 1114,
    1182: 1082,
    1183: 1083,
    1185: 1184,
    1187: 1186,
    1231: 1700,
    1270: 1266,
    1561: 1560,
    1563: 1562,
    2951: 2950,
    3807: 3802,
}

CHARACTER_OIDS = {1042, 1043}
BIT_OIDS = {1560, 1562}
NUMERIC_OID = 1700
TIME_OIDS = {1083, 1114, 1184, 1266}

# Varlena types store their length limit with a 4-byte header included
VARHDRSZ = 4


def element_oid(oid: int) -> int:
    """Resolve an array type OID to its element type OID."""
    return ARRAY_ELEMENT_OIDS.get(oid, oid)


def type_symbol(oid: int) -> Optional[str]:
    """Abstract type symbol for a built-in type, None for user types."""
    return OID_TYPE_SYMBOLS.get(element_oid(oid))


def type_metadata_from_row(sql_type: str, oid: int, fmod: int) -> TypeMetadata:
    """
    Build type metadata from catalog values.

    Args:
        sql_type: format_type(atttypid, atttypmod) output
        oid: atttypid
        fmod: atttypmod, -1 when the type carries no modifier

    Returns:
        Type metadata with limit, precision and scale decoded from fmod
    """
    base_oid = element_oid(oid)
    limit = precision = scale = None

    if fmod >= 0:
        if base_oid in CHARACTER_OIDS and fmod >= VARHDRSZ:
            limit = fmod - VARHDRSZ
        elif base_oid in BIT_OIDS:
            limit = fmod
        elif base_oid == NUMERIC_OID and fmod >= VARHDRSZ:
            packed = fmod - VARHDRSZ
            precision = (packed >> 16) & 0xFFFF
            # Scale is a signed 11-bit field; numeric(5,-2) is valid since PostgreSQL 15
            scale = ((packed & 0x7FF) ^ 1024) - 1024
        elif base_oid in TIME_OIDS:
            precision = fmod

    return TypeMetadata(
        sql_type=sql_type,
        type=type_symbol(oid),
        limit=limit,
        precision=precision,
        scale=scale,
        oid=oid,
        fmod=fmod,
    )
