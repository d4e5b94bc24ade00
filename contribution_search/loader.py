"""Load FEC contribution files into an immutable record set.

Source files are pipe-delimited FEC individual contribution extracts without
a header row. Every file in the data directory is parsed with Polars and
turned into Contribution records whose normalized names are computed once,
here, at load time.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import polars as pl
from tqdm import tqdm

from .analytics import DatasetStats, dataset_stats
from .cache import ResultCache
from .exceptions import DataDirectoryError, SourceReadError
from .index import SearchIndex
from .schema import (
    CACHE_TTL_SECONDS,
    FEC_COLUMNS,
    SOURCE_FILE_PATTERN,
    SOURCE_SEPARATOR,
    Contribution,
    RecordSet,
)

logger = logging.getLogger(__name__)


def read_fec_file(path: Path) -> pl.DataFrame:
    """
    Read one pipe-delimited FEC file as all-string columns named FEC_COLUMNS.

    Rows with fewer fields than FEC_COLUMNS get nulls for the missing
    columns; extra fields are dropped.

    Raises:
        SourceReadError: If the file cannot be read or parsed
    """
    try:
        df = pl.read_csv(
            path,
            separator=SOURCE_SEPARATOR,
            has_header=False,
            infer_schema=False,
            quote_char=None,
            truncate_ragged_lines=True,
            encoding="utf8-lossy",
        )
    except pl.exceptions.NoDataError:
        logger.warning("Skipping empty source file: %s", path)
        return pl.DataFrame(schema={c: pl.String for c in FEC_COLUMNS})
    except (OSError, pl.exceptions.PolarsError) as e:
        raise SourceReadError(message=str(e), source_path=path) from e

    df = df.select(df.columns[: len(FEC_COLUMNS)])
    df = df.rename(dict(zip(df.columns, FEC_COLUMNS)))
    missing = FEC_COLUMNS[len(df.columns) :]
    if missing:
        df = df.with_columns([pl.lit(None, dtype=pl.String).alias(c) for c in missing])

    # Blank lines come through as all-null rows
    return df.filter(~pl.all_horizontal(pl.all().is_null()))


def load_contributions(
    data_dir: Path | str,
    *,
    pattern: str = SOURCE_FILE_PATTERN,
    show_progress: bool = True,
) -> RecordSet:
    """
    Load every source file in ``data_dir`` into a record set.

    Args:
        data_dir: Directory holding FEC .txt extracts
        pattern: Glob for source files (default: *.txt)
        show_progress: Show a progress bar over files

    Returns:
        Tuple of contributions in file-name then line order

    Raises:
        DataDirectoryError: If the directory is missing or holds no matching files
        SourceReadError: If a file cannot be read
    """
    data_dir = Path(data_dir)
    if not data_dir.is_dir():
        raise DataDirectoryError(message="Data directory does not exist", path=data_dir, pattern=pattern)

    files = sorted(data_dir.glob(pattern))
    if not files:
        raise DataDirectoryError(message="Nothing to load", path=data_dir, pattern=pattern)

    logger.info("Loading data from: %s", ", ".join(f.name for f in files))

    records: list[Contribution] = []
    for path in tqdm(files, desc="Loading files", unit=" file", disable=not show_progress):
        df = read_fec_file(path)
        records.extend(Contribution.from_fec_row(row) for row in df.iter_rows(named=True))

    logger.info("Loaded %s total contributions", f"{len(records):,}")
    return tuple(records)


@dataclass
class ContributionStore:
    """The loaded record set with its search index, headline stats and result cache."""

    records: RecordSet
    index: SearchIndex
    # Computed once per load; the record set never changes afterwards
    stats: DatasetStats
    cache: ResultCache = field(default_factory=ResultCache)


def build_store(records: RecordSet, *, ttl_seconds: float = CACHE_TTL_SECONDS) -> ContributionStore:
    """Index ``records``, compute their stats and pair them with a fresh result cache."""
    logger.info("Building search index...")
    index = SearchIndex(records)
    logger.info("Search index built over %s contributions", f"{len(index):,}")
    return ContributionStore(
        records=index.records,
        index=index,
        stats=dataset_stats(index.records),
        cache=ResultCache(ttl_seconds),
    )


def load_store(data_dir: Path | str, *, show_progress: bool = True) -> ContributionStore:
    """Load ``data_dir`` and build the store in one step."""
    return build_store(load_contributions(data_dir, show_progress=show_progress))
