"""Column and type metadata models for PostgreSQL introspection."""

import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

ARRAY_MARKER = "[]"


class TypeMetadata(BaseModel):
    """Type information reported by the catalog for one column."""

    model_config = ConfigDict(frozen=True)

    sql_type: str = Field(..., description="Declared type, e.g. 'integer[]'")
    type: Optional[str] = Field(None, description="Abstract type symbol")
    limit: Optional[int] = Field(None, description="Length limit for string types")
    precision: Optional[int] = Field(None, description="Numeric or time precision")
    scale: Optional[int] = Field(None, description="Numeric scale")
    oid: int = Field(..., description="pg_type oid")
    fmod: int = Field(default=-1, description="Type modifier (atttypmod)")


class Column(BaseModel):
    """Database-agnostic description of a table column."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Column name")
    default: Optional[str] = Field(None, description="Literal default value")
    sql_type_metadata: TypeMetadata = Field(..., description="Type metadata")
    null: bool = Field(default=True, description="Whether column allows NULL")
    default_function: Optional[str] = Field(
        None, description="Default expression when not a literal"
    )
    collation: Optional[str] = Field(None, description="Column collation")
    comment: Optional[str] = Field(None, description="Column comment/description")

    def has_default(self) -> bool:
        """Whether the catalog reports any default for this column."""
        return self.default is not None or bool(self.default_function)

    @property
    def sql_type(self) -> str:
        return self.sql_type_metadata.sql_type

    @property
    def type(self) -> Optional[str]:
        return self.sql_type_metadata.type

    @property
    def limit(self) -> Optional[int]:
        return self.sql_type_metadata.limit

    @property
    def precision(self) -> Optional[int]:
        return self.sql_type_metadata.precision

    @property
    def scale(self) -> Optional[int]:
        return self.sql_type_metadata.scale

    def is_bigint(self) -> bool:
        return re.match(r"bigint\b", self.sql_type) is not None

    def human_name(self) -> str:
        """
        Human-readable column name.

        Returns:
            Name with a trailing '_id' dropped, underscores as spaces and the
            first letter capitalized ('author_id' -> 'Author').
        """
        name = self.name
        if name.endswith("_id") and len(name) > 3:
            name = name[:-3]
        name = name.replace("_", " ").strip()
        return name[:1].upper() + name[1:]


class PostgresColumn(Column):
    """PostgreSQL column with serial, generated and array semantics."""

    serial: Optional[bool] = Field(
        None, description="Whether the default is backed by an owned sequence"
    )
    generated: Optional[str] = Field(
        None, description="Generation kind (attgenerated), empty when not generated"
    )

    @property
    def oid(self) -> int:
        return self.sql_type_metadata.oid

    @property
    def fmod(self) -> int:
        return self.sql_type_metadata.fmod

    def is_serial(self) -> Optional[bool]:
        return self.serial

    def is_virtual(self) -> bool:
        # Every generated column is reported as virtual, stored ones included
        return bool(self.generated and self.generated.strip())

    def has_default(self) -> bool:
        return super().has_default() and not self.is_virtual()

    def is_array(self) -> bool:
        return self.sql_type_metadata.sql_type.endswith(ARRAY_MARKER)

    @property
    def array(self) -> bool:
        return self.is_array()

    @property
    def sql_type(self) -> str:
        """Declared type without the trailing array marker."""
        return strip_array_marker(self.sql_type_metadata.sql_type)


def strip_array_marker(sql_type: str) -> str:
    """Remove one trailing '[]' from a type string."""
    if sql_type.endswith(ARRAY_MARKER):
        return sql_type[: -len(ARRAY_MARKER)]
    return sql_type
