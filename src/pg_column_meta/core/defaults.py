"""Parsing of catalog default expressions and serial sequence detection.

PostgreSQL reports column defaults as SQL expressions (``pg_get_expr`` on
``pg_attrdef.adbin``). A column descriptor keeps two views of that expression:

- the literal value, when the expression is a constant (``'draft'::text``,
  ``42``, ``true``)
- the expression itself, when it is a function call or cast that the database
  evaluates on insert (``now()``, ``nextval('users_id_seq'::regclass)``)
"""

import re
from typing import Optional

# NAMEDATALEN - 1 in a stock PostgreSQL build
MAX_IDENTIFIER_LENGTH = 63

_QUOTED_LITERAL = re.compile(
    r"""^[(B]?'(?P<value>(?:[^']|'')*)'.*::"?(?P<cast>[\w. ]+)"?(?:\[\])?$""",
    re.DOTALL,
)
_NUMERIC_LITERAL = re.compile(r"^\(?(?P<value>-?\d+(?:\.\d*)?)\)?(?:::[\w ]+)?$")
_DEFAULT_FUNCTION = re.compile(
    r"\w+\(.*\)|\(.*\)::\w+|CURRENT_DATE|CURRENT_TIMESTAMP", re.DOTALL
)
_NEXTVAL = re.compile(r"^nextval\('(?P<sequence>[^']+)'::regclass\)$")
_SEQUENCE_SUFFIX = re.compile(r"^.+_(?P<suffix>seq\d*)$")
_LAST_IDENTIFIER = re.compile(r'(?:"(?P<quoted>(?:[^"]|"")*)"|(?P<plain>[^."]+))$')


def extract_value_from_default(default: Optional[str]) -> Optional[str]:
    """
    Extract the literal value of a default expression.

    Args:
        default: Default expression as reported by the catalog

    Returns:
        The literal as a string, or None for NULL, function calls and
        expressions whose value cannot be known without evaluating them
    """
    if default is None:
        return None

    expr = default.strip()

    match = _QUOTED_LITERAL.match(expr)
    if match:
        # 'now'::date is CURRENT_DATE, not a literal
        if match.group("value") == "now" and match.group("cast") == "date":
            return None
        return match.group("value").replace("''", "'")

    if expr in ("true", "false"):
        return expr

    match = _NUMERIC_LITERAL.match(expr)
    if match:
        return match.group("value")

    return None


def extract_default_function(
    default_value: Optional[str], default: Optional[str]
) -> Optional[str]:
    """Return the default expression when it is evaluated by the database."""
    if default_value is None and default and _DEFAULT_FUNCTION.search(default):
        return default
    return None


def sequence_name_from_parts(
    table_name: str,
    column_name: str,
    suffix: str,
    max_identifier_length: int = MAX_IDENTIFIER_LENGTH,
) -> str:
    """
    Build the name PostgreSQL gives the sequence owned by a serial column.

    Mirrors the server's makeObjectName: the longer of table and column name is
    trimmed one byte at a time until '<table>_<column>_<suffix>' fits in
    max_identifier_length bytes, then each part is clipped back to a whole
    UTF-8 character.
    """
    table_bytes = table_name.encode("utf-8")
    column_bytes = column_name.encode("utf-8")
    available = max_identifier_length - len(suffix.encode("utf-8")) - 2
    table_len = len(table_bytes)
    column_len = len(column_bytes)

    while table_len + column_len > available:
        if table_len > column_len:
            table_len -= 1
        else:
            column_len -= 1

    table_part = _clip_utf8(table_bytes, table_len)
    column_part = _clip_utf8(column_bytes, column_len)
    return f"{table_part}_{column_part}_{suffix}"


def _clip_utf8(encoded: bytes, length: int) -> str:
    """Decode at most length bytes, dropping a trailing partial character."""
    return encoded[:length].decode("utf-8", errors="ignore")


def is_serial_default(
    table_name: str, column_name: str, default_function: Optional[str]
) -> bool:
    """
    Check whether a default is nextval() on the sequence a serial column owns.

    A nextval() default on some other, shared sequence is not serial.
    """
    if not default_function:
        return False

    match = _NEXTVAL.match(default_function.strip())
    if not match:
        return False

    sequence_name = _unqualified_identifier(match.group("sequence"))
    suffix_match = _SEQUENCE_SUFFIX.match(sequence_name)
    if not suffix_match:
        return False

    expected = sequence_name_from_parts(
        table_name, column_name, suffix_match.group("suffix")
    )
    return expected == sequence_name


def _unqualified_identifier(identifier: str) -> str:
    """Drop a schema qualifier and identifier quoting: 'public."Seq"' -> 'Seq'."""
    match = _LAST_IDENTIFIER.search(identifier)
    if match is None:
        return identifier
    if match.group("quoted") is not None:
        return match.group("quoted").replace('""', '"')
    return match.group("plain")
