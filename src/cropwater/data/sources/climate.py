"""
Climate record providers.
"""
from datetime import date
from typing import Dict, Mapping, Optional
import logging

import pandas as pd

from cropwater.core.exceptions import DataValidationError, ErrorContext
from cropwater.core.types import ClimateDailyRecord
from cropwater.data.sources.base import CsvInput, NAME_COLUMN, parse_fields, read_delimited

logger = logging.getLogger(__name__)

DATE_COLUMN = "_iterator.date"

# Column name -> ClimateDailyRecord attribute
CLIMATE_FIELDS: Dict[str, str] = {
    "max_temp": "max_temp",
    "min_temp": "min_temp",
    "mean_temp": "mean_temp",
    "humidity": "humidity",
    "windspeed": "windspeed",
    "sunshine_duration": "sunshine_duration",
    "Rs": "solar_radiation",
    "precipitation": "precipitation",
    "et0": "et0",
    "pattern_precipitation": "pattern_precipitation",
}


class FrameClimate:
    """Climate provider over daily records keyed by date"""

    def __init__(self, name: str, records: Mapping[date, ClimateDailyRecord]):
        self.name = name
        self._records: Dict[date, ClimateDailyRecord] = dict(records)

    @classmethod
    def from_frame(cls, name: str, frame: pd.DataFrame) -> "FrameClimate":
        """
        Build from a DataFrame indexed by date.

        Columns are ClimateDailyRecord attribute names; NaN is missing.
        """
        attributes = set(CLIMATE_FIELDS.values())
        unknown = [c for c in frame.columns if c not in attributes]
        if unknown:
            raise DataValidationError(
                f"Unknown climate columns: {unknown}",
                ErrorContext(component="climate", operation="from_frame"),
            )

        records = {}
        for index, row in frame.iterrows():
            values = {k: float(v) for k, v in row.items() if pd.notna(v)}
            records[pd.Timestamp(index).date()] = ClimateDailyRecord(**values)
        return cls(name, records)

    def get_daily_record(self, day: date) -> Optional[ClimateDailyRecord]:
        return self._records.get(day)

    def to_frame(self) -> pd.DataFrame:
        """Records as a DataFrame indexed by date"""
        rows = {
            day: {attr: getattr(record, attr) for attr in CLIMATE_FIELDS.values()}
            for day, record in sorted(self._records.items())
        }
        frame = pd.DataFrame.from_dict(rows, orient="index", dtype=float)
        frame.index.name = "date"
        return frame

    @property
    def start(self) -> Optional[date]:
        return min(self._records) if self._records else None

    @property
    def end(self) -> Optional[date]:
        return max(self._records) if self._records else None

    def __len__(self) -> int:
        return len(self._records)


def load_climate_csv(source: CsvInput, name: Optional[str] = None) -> FrameClimate:
    """
    Load a climate station from a delimited file.

    Args:
        source: Path or text stream
        name: Station name (`dataObjName`), first station if None

    Returns:
        FrameClimate
    """
    frame = read_delimited(source, name, component="climate")
    if DATE_COLUMN not in frame.columns:
        raise DataValidationError(
            f"Column '{DATE_COLUMN}' missing",
            ErrorContext(component="climate", operation="load"),
        )

    records = {}
    for _, row in frame.iterrows():
        try:
            day = pd.Timestamp(row[DATE_COLUMN]).date()
        except ValueError as e:
            raise DataValidationError(
                f"Invalid date '{row[DATE_COLUMN]}'",
                ErrorContext(component="climate", operation="load"),
            ) from e
        records[day] = ClimateDailyRecord(**parse_fields(row, CLIMATE_FIELDS))

    station = frame[NAME_COLUMN].iloc[0]
    logger.info(f"Loaded {len(records)} climate records for station '{station}'")
    return FrameClimate(station, records)
