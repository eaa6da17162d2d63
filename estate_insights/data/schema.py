"""Positional schema for decoding dataset rows into PropertyRecord.

The column layout is read from dataset_schema.yaml. Each field names a
parser registered via the @column_parser decorator; the parser receives
the raw column text and returns the typed value, raising ValueError when
the text cannot be parsed.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from .errors import RowDecodeError, SchemaError
from .models import PropertyRecord

logger = logging.getLogger(__name__)

DEFAULT_SCHEMA_PATH = Path(__file__).parent / "mappings" / "dataset_schema.yaml"

# Registry for column parsers
# Each function takes the raw column text and returns a typed value
_COLUMN_PARSER_REGISTRY: dict[str, Callable[[str], Any]] = {}


def column_parser(name: str):
    """
    Decorator to register a column parser.

    The `name` argument is what dataset_schema.yaml refers to in a
    field's `parser` key. This binding is validated when the schema loads.

    Usage:
        @column_parser("float")
        def parse_float(raw: str) -> float:
            ...
    """

    def decorator(func: Callable[[str], Any]):
        _COLUMN_PARSER_REGISTRY[name] = func
        return func

    return decorator


def get_registered_column_parsers() -> list[str]:
    """Return list of all registered column parser names."""
    return list(_COLUMN_PARSER_REGISTRY.keys())


@column_parser("str")
def parse_str(raw: str) -> str:
    return raw.strip()


@column_parser("float")
def parse_float(raw: str) -> float:
    """Parse a finite float. NaN and infinities count as parse failures."""
    value = float(raw.strip())
    if not math.isfinite(value):
        raise ValueError(f"non-finite value: {raw!r}")
    return value


@column_parser("int")
def parse_int(raw: str) -> int:
    """Parse an integral value. "3.0" is accepted, "2.5" is a parse failure."""
    value = parse_float(raw)
    if not value.is_integer():
        raise ValueError(f"non-integral value: {raw!r}")
    return int(value)


@column_parser("bool")
def parse_bool(raw: str) -> bool:
    text = raw.strip().lower()
    if text in ("true", "yes"):
        return True
    if text in ("false", "no"):
        return False
    return parse_float(text) != 0.0


@dataclass(frozen=True)
class ColumnSpec:
    """Binding of one PropertyRecord field to a source column."""

    name: str
    column: int
    parser: str
    default: Any


_RECORD_FIELDS = {f.name for f in fields(PropertyRecord)}


class DatasetSchema:
    """
    Fixed positional layout of the property dataset.

    Loads the column bindings from YAML and decodes split rows into
    PropertyRecord values. Parse failures fall back to the field default
    unless strict mode is requested.
    """

    def __init__(self, schema_path: Path | None = None):
        """
        Initialize schema from a YAML file.

        Args:
            schema_path: Path to dataset_schema.yaml. If None, uses default location.
        """
        self._schema_path = schema_path or DEFAULT_SCHEMA_PATH
        self._load_schema()
        self._validate_parsers()

        logger.debug(
            f"DatasetSchema loaded {len(self._columns)} fields "
            f"(min_columns={self.min_columns}) from {self._schema_path}"
        )

    def _load_schema(self) -> None:
        """Load column bindings from YAML."""
        try:
            with open(self._schema_path) as f:
                config = yaml.safe_load(f)
        except FileNotFoundError as e:
            raise SchemaError(f"Schema file not found: {self._schema_path}") from e
        except yaml.YAMLError as e:
            raise SchemaError(f"Invalid YAML in dataset schema: {e}") from e

        if not isinstance(config, dict):
            raise SchemaError("Dataset schema must be a mapping")

        required_keys = {"delimiter", "min_columns", "fields"}
        missing = required_keys - config.keys()
        if missing:
            raise SchemaError(f"Dataset schema missing required keys: {sorted(missing)}")

        if not isinstance(config["fields"], dict):
            raise SchemaError("Dataset schema 'fields' must be a mapping")

        unknown = set(config["fields"]) - _RECORD_FIELDS
        if unknown:
            raise SchemaError(f"Schema fields not on PropertyRecord: {sorted(unknown)}")

        if "id" not in config["fields"] or "price" not in config["fields"]:
            raise SchemaError("Schema must bind both 'id' and 'price'")

        self.delimiter: str = config["delimiter"]
        self.min_columns: int = int(config["min_columns"])

        columns = []
        for name, entry in config["fields"].items():
            try:
                columns.append(
                    ColumnSpec(
                        name=name,
                        column=int(entry["column"]),
                        parser=entry["parser"],
                        default=entry["default"],
                    )
                )
            except (KeyError, TypeError, ValueError) as e:
                raise SchemaError(f"Invalid schema entry for field '{name}': {e}") from e

        too_far = [c.name for c in columns if c.column >= self.min_columns]
        if too_far:
            raise SchemaError(
                f"Fields bound beyond min_columns={self.min_columns}: {too_far}"
            )

        self._columns: tuple[ColumnSpec, ...] = tuple(columns)

    def _validate_parsers(self) -> None:
        """Validate all fields reference a registered parser."""
        missing = [c.parser for c in self._columns if c.parser not in _COLUMN_PARSER_REGISTRY]
        if missing:
            raise SchemaError(
                f"Schema references unregistered parsers: {sorted(set(missing))}. "
                f"Available parsers: {get_registered_column_parsers()}"
            )

    @property
    def columns(self) -> tuple[ColumnSpec, ...]:
        """Field bindings in schema order."""
        return self._columns

    def split(self, line: str) -> list[str]:
        """Split a raw line into column values."""
        return line.split(self.delimiter)

    def decode_row(
        self,
        values: Sequence[str],
        strict: bool = False,
        line: int | None = None,
    ) -> tuple[PropertyRecord | None, list[str]]:
        """
        Decode one split row.

        Args:
            values: Column values of the row
            strict: Raise instead of defaulting unparseable values
            line: Source line number, for error messages

        Returns:
            Tuple of (record, defaulted field names). Record is None when
            the row has fewer than min_columns values.

        Raises:
            RowDecodeError: In strict mode, if a value cannot be parsed
        """
        if len(values) < self.min_columns:
            return None, []

        decoded: dict[str, Any] = {}
        defaulted: list[str] = []
        for col in self._columns:
            raw = values[col.column]
            try:
                decoded[col.name] = _COLUMN_PARSER_REGISTRY[col.parser](raw)
            except ValueError as e:
                if strict:
                    raise RowDecodeError(
                        f"Cannot parse '{col.name}' from {raw!r}: {e}",
                        field=col.name,
                        line=line,
                    ) from e
                decoded[col.name] = col.default
                defaulted.append(col.name)

        return PropertyRecord(**decoded), defaulted
