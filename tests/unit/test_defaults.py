"""Unit tests for default-expression parsing and serial detection."""

import pytest

from pg_column_meta.core.defaults import (
    extract_default_function,
    extract_value_from_default,
    is_serial_default,
    sequence_name_from_parts,
)


class TestExtractValueFromDefault:
    """Literal values are recovered from catalog expressions."""

    @pytest.mark.parametrize(
        "expr, expected",
        [
            ("'draft'::character varying", "draft"),
            ("'it''s'::text", "it's"),
            ("''::text", ""),
            ("'{}'::integer[]", "{}"),
            ("'2024-01-01'::date", "2024-01-01"),
            ("42", "42"),
            ("-1", "-1"),
            ("3.14", "3.14"),
            ("(-1)", "-1"),
            ("'1'::bigint", "1"),
            ("(-5)::integer", "-5"),
            ("true", "true"),
            ("false", "false"),
        ],
    )
    def test_literals(self, expr, expected):
        assert extract_value_from_default(expr) == expected

    @pytest.mark.parametrize(
        "expr",
        [
            None,
            "NULL::character varying",
            "now()",
            "CURRENT_TIMESTAMP",
            "nextval('users_id_seq'::regclass)",
            "gen_random_uuid()",
            "('now'::text)::date",
        ],
    )
    def test_non_literals(self, expr):
        assert extract_value_from_default(expr) is None


class TestExtractDefaultFunction:
    """Expressions evaluated by the database are kept as functions."""

    @pytest.mark.parametrize(
        "expr",
        [
            "now()",
            "CURRENT_TIMESTAMP",
            "CURRENT_DATE",
            "nextval('users_id_seq'::regclass)",
            "('now'::text)::date",
        ],
    )
    def test_functions(self, expr):
        value = extract_value_from_default(expr)
        assert extract_default_function(value, expr) == expr

    def test_literal_is_not_function(self):
        assert extract_default_function("draft", "'draft'::text") is None

    def test_null_default(self):
        assert extract_default_function(None, None) is None
        assert extract_default_function(None, "NULL::text") is None


class TestSequenceNameFromParts:
    """Owned sequence names follow PostgreSQL truncation."""

    def test_short_names(self):
        assert sequence_name_from_parts("users", "id", "seq") == "users_id_seq"

    def test_fits_identifier_limit(self):
        name = sequence_name_from_parts("t" * 60, "c" * 60, "seq")

        assert len(name) == 63
        assert name.endswith("_seq")

    def test_longer_part_trimmed_first(self):
        name = sequence_name_from_parts("a" * 70, "id", "seq")

        assert name == "a" * 56 + "_id_seq"

    def test_custom_identifier_length(self):
        name = sequence_name_from_parts("orders", "number", "seq", max_identifier_length=12)

        # Ties trim the column name
        assert name == "orde_num_seq"

    def test_multibyte_names_trimmed_by_bytes(self):
        name = sequence_name_from_parts("ü" * 40, "id", "seq")

        assert name == "ü" * 28 + "_id_seq"
        assert len(name.encode("utf-8")) == 63

    def test_multibyte_trim_keeps_whole_characters(self):
        # 55 bytes left for the table part, which holds 27 two-byte characters
        name = sequence_name_from_parts("ü" * 40, "idx", "seq")

        assert name == "ü" * 27 + "_idx_seq"
        assert len(name.encode("utf-8")) == 62


class TestIsSerialDefault:
    """nextval() on the owned sequence marks a serial column."""

    def test_owned_sequence(self):
        assert is_serial_default("users", "id", "nextval('users_id_seq'::regclass)")

    def test_numbered_suffix(self):
        assert is_serial_default("users", "id", "nextval('users_id_seq1'::regclass)")

    def test_schema_qualified(self):
        assert is_serial_default(
            "users", "id", "nextval('public.users_id_seq'::regclass)"
        )

    def test_quoted_identifier(self):
        assert is_serial_default(
            "Users", "Id", "nextval('\"Users_Id_seq\"'::regclass)"
        )
        assert is_serial_default(
            "Users", "Id", "nextval('public.\"Users_Id_seq\"'::regclass)"
        )

    def test_multibyte_table_name(self):
        sequence = "ü" * 28 + "_id_seq"

        assert is_serial_default("ü" * 40, "id", f"nextval('{sequence}'::regclass)")

    def test_shared_sequence_is_not_serial(self):
        assert not is_serial_default(
            "users", "id", "nextval('global_id_seq'::regclass)"
        )

    @pytest.mark.parametrize("default_function", [None, "", "now()", "gen_random_uuid()"])
    def test_other_defaults(self, default_function):
        assert not is_serial_default("users", "id", default_function)
