"""
Common reading of semicolon-delimited reference data files.

Layout shared by plant, soil and climate files:
- first line holds the column names
- `dataObjName` names the entity a row belongs to
- an iterator column keys the row (development day, depth or date)
- lines starting with `#` are comments, `#NV` marks a missing value
"""
from pathlib import Path
from typing import Dict, Optional, Union, IO
import logging

import pandas as pd

from cropwater.core.exceptions import DataValidationError, ErrorContext, MissingDataError, handle_exception

logger = logging.getLogger(__name__)

NAME_COLUMN = "dataObjName"
MISSING_MARKER = "#NV"

CsvInput = Union[str, Path, IO[str]]


def read_delimited(
    source: CsvInput,
    name: Optional[str] = None,
    component: str = "data",
) -> pd.DataFrame:
    """
    Read a delimited reference data file as strings.

    Args:
        source: Path or open text stream
        name: Keep only rows of this entity (first entity if None)
        component: Component name for error context

    Returns:
        DataFrame of stripped string cells, missing cells as NaN
    """
    context = ErrorContext(component=component, operation="read", details={"source": str(source)})
    try:
        frame = pd.read_csv(source, sep=";", dtype=str, skipinitialspace=True)
    except (OSError, ValueError) as e:
        raise handle_exception(e, context) from e

    frame.columns = [str(c).strip() for c in frame.columns]
    if NAME_COLUMN not in frame.columns:
        raise DataValidationError(f"Column '{NAME_COLUMN}' missing", context)

    frame = frame.apply(lambda column: column.str.strip())
    names = frame[NAME_COLUMN]
    frame = frame[names.notna() & (names != "") & ~names.str.startswith("#", na=False)]
    frame = frame.mask(frame.apply(lambda column: column.str.startswith(MISSING_MARKER, na=False)))

    if name is None and len(frame):
        name = frame[NAME_COLUMN].iloc[0]
    frame = frame[frame[NAME_COLUMN] == name]
    if frame.empty:
        raise MissingDataError(f"No rows for '{name}'", context)

    logger.debug(f"Read {len(frame)} rows for '{name}' from {source}")
    return frame.reset_index(drop=True)


def parse_fields(row: pd.Series, fields: Dict[str, str], kind: str = "float") -> Dict[str, object]:
    """
    Convert the cells of a row named in a field table.

    Args:
        row: One row of read_delimited()
        fields: Column name -> attribute name
        kind: "float" or "bool"

    Returns:
        Attribute name -> converted value, for present cells only
    """
    values = {}
    for column, attribute in fields.items():
        cell = row.get(column)
        if cell is None or pd.isna(cell) or cell == "":
            continue
        try:
            if kind == "bool":
                values[attribute] = cell.lower() in ("true", "1", "yes")
            else:
                values[attribute] = float(cell)
        except ValueError as e:
            raise DataValidationError(
                f"Invalid value '{cell}' in column '{column}'",
                ErrorContext(component="data", operation="parse"),
            ) from e
    return values
