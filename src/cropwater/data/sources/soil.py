"""
Soil property providers.
"""
from typing import Dict, Mapping, Optional
import logging

from cropwater.core.exceptions import DataValidationError, ErrorContext
from cropwater.core.types import SoilLayerProperties
from cropwater.data.sources.base import CsvInput, NAME_COLUMN, parse_fields, read_delimited

logger = logging.getLogger(__name__)

DEPTH_COLUMN = "_iterator.z"

# Column name -> SoilLayerProperties attribute
SOIL_FIELDS: Dict[str, str] = {
    "Qfc": "field_capacity",
    "Qwp": "wilting_point",
    "Ze": "evaporation_layer_depth",
}

DEFAULT_MAX_DEPTH_M = 2.0


class LayeredSoil:
    """
    Soil provider over properties keyed by depth (m, 0.01 m steps).

    Depths without an entry return the default set stored at depth 0.
    """

    def __init__(
        self,
        name: str,
        layers: Mapping[float, SoilLayerProperties],
        max_depth: float = DEFAULT_MAX_DEPTH_M,
    ):
        if max_depth <= 0:
            raise ValueError(f"max_depth must be > 0, got {max_depth}")
        self.name = name
        self.max_depth = max_depth
        self._layers: Dict[float, SoilLayerProperties] = {
            round(depth, 2): props for depth, props in layers.items()
        }

    @classmethod
    def uniform(cls, name: str, properties: SoilLayerProperties, max_depth: float = DEFAULT_MAX_DEPTH_M) -> "LayeredSoil":
        """Soil with the same properties at every depth"""
        return cls(name, {0.0: properties}, max_depth)

    def get_layer_properties(self, depth: float) -> Optional[SoilLayerProperties]:
        props = self._layers.get(round(depth, 2))
        if props is None:
            props = self._layers.get(0.0)
        return props


def load_soil_csv(
    source: CsvInput,
    name: Optional[str] = None,
    max_depth: float = DEFAULT_MAX_DEPTH_M,
) -> LayeredSoil:
    """
    Load a soil from a delimited file.

    Args:
        source: Path or text stream
        name: Soil name (`dataObjName`), first soil if None
        max_depth: Maximum soil depth (m)

    Returns:
        LayeredSoil
    """
    frame = read_delimited(source, name, component="soil")
    if DEPTH_COLUMN not in frame.columns:
        raise DataValidationError(
            f"Column '{DEPTH_COLUMN}' missing",
            ErrorContext(component="soil", operation="load"),
        )

    layers = {}
    for _, row in frame.iterrows():
        values = parse_fields(row, SOIL_FIELDS)
        try:
            depth = round(float(row[DEPTH_COLUMN]), 2)
            layers[depth] = SoilLayerProperties(**values)
        except (TypeError, ValueError) as e:
            raise DataValidationError(
                f"Invalid soil row at depth '{row[DEPTH_COLUMN]}': {e}",
                ErrorContext(component="soil", operation="load"),
            ) from e

    soil_name = frame[NAME_COLUMN].iloc[0]
    logger.info(f"Loaded soil '{soil_name}' with {len(layers)} layers")
    return LayeredSoil(soil_name, layers, max_depth)
