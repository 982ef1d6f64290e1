"""
Settings of the water balance engine.
Defaults follow FAO-56; values can be overridden from YAML or CROPWATER_* environment variables.
"""
import logging
from pathlib import Path
import yaml
from pydantic import Field, model_validator, ConfigDict
from pydantic_settings import BaseSettings
from typing import Optional, Literal, Union

from cropwater.core.constants import FLUX_EPSILON


class PenmanMonteithConfig(BaseSettings):
    """Coefficients for the FAO-56 Penman-Monteith reference ET"""

    # Angström regression for Rs from sunshine duration (FAO-56 Eq. 35)
    a_s: float = Field(0.25, ge=0, le=1, description="Angström intercept")
    b_s: float = Field(0.5, ge=0, le=1, description="Angström slope")

    default_windspeed: float = Field(2.0, ge=0, description="Windspeed at 2 m if missing (m/s)")
    default_altitude: float = Field(0.0, description="Station altitude if missing (m)")


class HargreavesConfig(BaseSettings):
    """Coefficients for the temperature-only Hargreaves reference ET"""

    ct: float = Field(17.8, description="Temperature offset")
    ch: float = Field(0.0023, gt=0, description="Scaling coefficient")
    eh: float = Field(0.5, gt=0, description="Temperature range exponent")
    radiation_as_evaporation: bool = Field(
        False, description="Convert Ra to equivalent evaporation (mm/day) before scaling"
    )


class SimulationConfig(BaseSettings):
    """Main configuration for the water-balance engine"""

    # Component configurations
    penman_monteith: PenmanMonteithConfig = Field(default_factory=PenmanMonteithConfig)
    hargreaves: HargreavesConfig = Field(default_factory=HargreavesConfig)

    # Canopy interception and evaporation
    interception_a: float = Field(0.25, ge=0, description="Interception coefficient a (mm)")
    e_factor: float = Field(1.0, ge=0, le=1, description="Evaporation reduction, e.g. mulching")
    default_evaporation_layer_depth_m: float = Field(0.1, gt=0, description="Ze if soil has none (m)")
    default_humidity: float = Field(45.0, ge=0, le=100, description="RHmin if missing (%)")

    # Initial state as fractions of taw / tew
    initial_depletion_rz: float = Field(0.1, ge=0, le=1)
    initial_depletion_dz: float = Field(0.1, ge=0, le=1)
    initial_depletion_de: float = Field(0.1, ge=0, le=1)

    # Numerical
    epsilon: float = Field(FLUX_EPSILON, ge=0, description="Fluxes below are reported as zero (mm)")
    balance_tolerance_mm: float = Field(1e-3, gt=0, description="Allowed cumulative balance error")

    # Input selection
    use_pattern_precipitation: bool = Field(False, description="Prefer pattern-scaled precipitation")
    use_precomputed_et0: bool = Field(False, description="Prefer the record's precomputed ET0")

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: str = Field(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    model_config = ConfigDict(
        env_prefix="CROPWATER_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_config(self):
        """Cross-field validation"""
        if self.penman_monteith.a_s + self.penman_monteith.b_s > 1:
            raise ValueError("Angström coefficients a_s + b_s must not exceed 1")
        return self

    @classmethod
    def from_yaml(cls, yaml_path: Union[str, Path]) -> "SimulationConfig":
        """Load configuration from YAML file"""
        yaml_path = Path(yaml_path)
        if not yaml_path.exists():
            raise FileNotFoundError(f"Config file not found: {yaml_path}")

        with open(yaml_path, encoding="utf-8") as f:
            yaml_config = yaml.safe_load(f) or {}

        return cls(**yaml_config)

    def to_yaml(self, yaml_path: Union[str, Path]):
        """Save configuration to YAML file"""
        yaml_path = Path(yaml_path)
        yaml_path.parent.mkdir(parents=True, exist_ok=True)

        with open(yaml_path, "w", encoding="utf-8") as f:
            yaml.dump(self.model_dump(), f, default_flow_style=False)


def configure_logging(config: Optional[SimulationConfig] = None):
    """Configure root logging from the settings"""
    config = config or get_config()
    logging.basicConfig(level=getattr(logging, config.log_level), format=config.log_format)


# USAGE: Environment variables override defaults
# export CROPWATER_HARGREAVES__CT=17.8
# export CROPWATER_E_FACTOR=0.8

# Global configuration instance
_config: Optional[SimulationConfig] = None


def get_config(config_path: Optional[Path] = None) -> SimulationConfig:
    """Get or create configuration instance (singleton pattern)"""
    global _config

    if _config is None:
        if config_path and Path(config_path).exists():
            _config = SimulationConfig.from_yaml(config_path)
        else:
            # Try to load from environment
            _config = SimulationConfig()

    return _config


def set_config(config: Optional[SimulationConfig]):
    """Set configuration (useful for testing)"""
    global _config
    _config = config
