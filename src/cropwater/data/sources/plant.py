"""
Plant parameter providers.
"""
from datetime import date
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple
import logging

from cropwater.core.exceptions import DataValidationError, ErrorContext
from cropwater.core.types import GrowthStage, PlantStageParameters
from cropwater.data.sources.base import CsvInput, NAME_COLUMN, parse_fields, read_delimited
from cropwater.physics.crop_development import development_day

logger = logging.getLogger(__name__)

DAY_COLUMN = "_iterator"
STAGE_COLUMN = "name"

# Column name -> PlantStageParameters attribute
PLANT_FIELDS: Dict[str, str] = {
    "Kc": "kc",
    "Kcb": "kcb",
    "LAI": "lai",
    "Zr": "zr",
    "p": "p",
    "Ky": "ky",
    "height": "height",
}
PLANT_FLAGS: Dict[str, str] = {
    "isFallow": "is_fallow",
}


class TabularPlant:
    """
    Plant provider over a table of development days.

    Row 0 holds defaults merged into every development day, days
    1..stage_total hold the values of the day.
    """

    def __init__(self, name: str, rows: Mapping[int, Mapping[str, Any]]):
        self.name = name
        self._defaults: Dict[str, Any] = dict(rows.get(0, {}))
        self._rows: Dict[int, Dict[str, Any]] = {day: dict(values) for day, values in rows.items() if day > 0}
        self.stage_total = max(self._rows) if self._rows else 0
        self._parameters: Dict[int, PlantStageParameters] = {}

    @classmethod
    def from_stages(
        cls,
        name: str,
        stages: Sequence[Tuple[GrowthStage, int, Mapping[str, Any]]],
        defaults: Optional[Mapping[str, Any]] = None,
    ) -> "TabularPlant":
        """
        Build from consecutive stages of constant parameters.

        Args:
            name: Plant name
            stages: (stage, number of days, parameters) in season order
            defaults: Parameters shared by all days
        """
        rows: Dict[int, Dict[str, Any]] = {0: dict(defaults or {})}
        day = 1
        for stage, length, values in stages:
            for _ in range(length):
                rows[day] = {"stage": stage, **values}
                day += 1
        return cls(name, rows)

    def get_development_day(self, day: date, seed_date: date, harvest_date: date) -> Optional[int]:
        return development_day(day, seed_date, harvest_date, self.stage_total)

    def get_stage_parameters(self, development_day: int) -> Optional[PlantStageParameters]:
        if development_day not in self._rows:
            return None
        if development_day not in self._parameters:
            values = {**self._defaults, **self._rows[development_day]}
            try:
                values["stage"] = GrowthStage(values["stage"])
                self._parameters[development_day] = PlantStageParameters(**values)
            except (KeyError, ValueError, TypeError) as e:
                raise DataValidationError(
                    f"Invalid parameters for development day {development_day}: {e}",
                    ErrorContext(component="plant", operation="get_stage_parameters"),
                ) from e
        return self._parameters[development_day]


def load_plant_csv(source: CsvInput, name: Optional[str] = None) -> TabularPlant:
    """
    Load a plant from a delimited file.

    Args:
        source: Path or text stream
        name: Plant name (`dataObjName`), first plant if None

    Returns:
        TabularPlant
    """
    frame = read_delimited(source, name, component="plant")
    missing = [c for c in (DAY_COLUMN,) if c not in frame.columns]
    if missing:
        raise DataValidationError(
            f"Columns missing: {missing}",
            ErrorContext(component="plant", operation="load"),
        )

    rows = {}
    for _, row in frame.iterrows():
        try:
            day = int(float(row[DAY_COLUMN]))
        except (TypeError, ValueError) as e:
            raise DataValidationError(
                f"Invalid development day '{row[DAY_COLUMN]}'",
                ErrorContext(component="plant", operation="load"),
            ) from e
        values = parse_fields(row, PLANT_FIELDS)
        values.update(parse_fields(row, PLANT_FLAGS, kind="bool"))
        stage = row.get(STAGE_COLUMN)
        if isinstance(stage, str) and stage:
            values["stage"] = stage
        rows[day] = values

    plant_name = frame[NAME_COLUMN].iloc[0]
    plant = TabularPlant(plant_name, rows)
    logger.info(f"Loaded plant '{plant_name}' with {plant.stage_total} development days")
    return plant
