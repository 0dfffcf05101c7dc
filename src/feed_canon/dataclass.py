"""Raw feed container handed over by an external loader."""

import logging
from dataclasses import dataclass, field, fields

import polars as pl

logger = logging.getLogger(__name__)


class FeedLoadError(Exception):
    """Raised by a loader when the archive cannot be read at all."""


@dataclass(frozen=True)
class TableLoadError:
    """A table file the loader could not decode.

    Attributes:
        file_name: Name of the file in the archive
        message: Human-readable error description
        line_number: Line of the offending record, if known
        headers: Header row of the file, if known
        values: Values of the offending record, if known
    """

    file_name: str
    message: str
    line_number: int | None = None
    headers: list[str] = field(default_factory=list)
    values: list[str] = field(default_factory=list)

    def __str__(self) -> str:
        """Format error message."""
        if self.line_number is None:
            return f"{self.file_name}: {self.message}"
        return f"{self.file_name} line {self.line_number}: {self.message}"


@dataclass
class RawFeed:
    """Tables of a transit feed as loaded from an archive.

    A table set to None means its file was not present in the archive.
    When no file list is given, it is derived from the tables that are set.
    """

    agency: pl.DataFrame | None = None
    routes: pl.DataFrame | None = None
    trips: pl.DataFrame | None = None
    stops: pl.DataFrame | None = None
    stop_times: pl.DataFrame | None = None
    calendar: pl.DataFrame | None = None
    calendar_dates: pl.DataFrame | None = None
    shapes: pl.DataFrame | None = None
    fare_attributes: pl.DataFrame | None = None
    fare_rules: pl.DataFrame | None = None
    feed_info: pl.DataFrame | None = None
    pathways: pl.DataFrame | None = None

    # Every file name found in the archive, possibly with a folder prefix
    files: list[str] = field(default_factory=list)

    # Table name -> decoding failure reported by the loader
    load_errors: dict[str, TableLoadError] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.files:
            self.files = [
                f"{name}.txt"
                for name in self.table_names()
                if getattr(self, name) is not None or name in self.load_errors
            ]

    @classmethod
    def table_names(cls) -> list[str]:
        """Names of the tables a feed can carry."""
        return [
            f.name for f in fields(cls) if f.name not in ("files", "load_errors")
        ]

    def get_table(self, table_name: str) -> pl.DataFrame | None:
        """Get a table by name.

        Raises:
            ValueError: If the table name is unknown
        """
        if table_name not in self.table_names():
            valid_tables = ", ".join(self.table_names())
            msg = (
                f"Invalid table name: {table_name}. "
                f"Valid tables: {valid_tables}"
            )
            raise ValueError(msg)
        return getattr(self, table_name)

    @classmethod
    def from_files(
        cls,
        tables: dict[str, pl.DataFrame],
        files: list[str] | None = None,
    ) -> "RawFeed":
        """Build a feed from a mapping of table name to DataFrame.

        When no file list is given, it is derived from the table names.
        """
        unknown = set(tables) - set(cls.table_names())
        if unknown:
            msg = f"Unknown tables: {sorted(unknown)}"
            raise ValueError(msg)
        logger.debug("Raw feed with tables %s", sorted(tables))
        return cls(**tables, files=list(files or []))
