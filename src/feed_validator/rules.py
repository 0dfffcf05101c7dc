"""Rule configuration for the validation checks.

Speed ceilings are configured per transport mode. A YAML file only needs
the values it overrides, everything else falls back to the defaults:

    max_bus_speed: 150
    close_stops_distance: 5
"""

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from feed_canon.codebook.routes import TransportMode

logger = logging.getLogger(__name__)


class RuleConfigError(Exception):
    """Raised when a rule configuration file cannot be used."""


class RuleConfig(BaseModel):
    """Thresholds used by the kinematic and geometric checks.

    Speeds are in km/h and distances in meters.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    # Maximum speeds per transport mode (km/h)
    max_tram_speed: float = Field(default=100.0, gt=0)
    max_subway_speed: float = Field(default=140.0, gt=0)
    max_rail_speed: float = Field(default=320.0, gt=0)
    max_bus_speed: float = Field(default=100.0, gt=0)
    max_ferry_speed: float = Field(default=90.0, gt=0)
    max_cable_car_speed: float = Field(default=30.0, gt=0)
    max_gondola_speed: float = Field(default=45.0, gt=0)
    max_funicular_speed: float = Field(default=40.0, gt=0)
    max_coach_speed: float = Field(default=120.0, gt=0)
    max_air_speed: float = Field(default=1000.0, gt=0)
    max_taxi_speed: float = Field(default=150.0, gt=0)
    max_other_speed: float = Field(default=120.0, gt=0)

    slow_speed: float = Field(
        default=0.36,
        ge=0,
        description="Speed below which a segment is reported as slow (km/h)",
    )
    close_stops_distance: float = Field(
        default=10.0,
        ge=0,
        description="Distance under which consecutive stops are too close",
    )
    duplicate_stop_point_distance: float = Field(
        default=2.0,
        ge=0,
        description=(
            "Distance under which two stop points with the same name "
            "are duplicates"
        ),
    )
    duplicate_stop_area_distance: float = Field(
        default=100.0,
        ge=0,
        description=(
            "Distance under which two stations with the same name "
            "are duplicates"
        ),
    )

    def max_speed(self, mode: TransportMode | None) -> float:
        """Maximum speed allowed for a transport mode.

        Args:
            mode: Transport mode, None for non-standard route types

        Returns:
            Speed ceiling in km/h
        """
        mode = mode or TransportMode.OTHER
        return getattr(self, f"max_{mode.value}_speed")


def load_rules(path: str | Path | None = None) -> RuleConfig:
    """Load a rule configuration merged over the defaults.

    Args:
        path: YAML file with overrides, or None for the defaults

    Returns:
        The rule configuration

    Raises:
        FileNotFoundError: If the file does not exist
        RuleConfigError: If the file is not a valid rule configuration
    """
    if path is None:
        return RuleConfig()

    path = Path(path)
    if not path.exists():
        msg = f"Rule configuration not found: {path}"
        raise FileNotFoundError(msg)

    with path.open() as f:
        try:
            overrides = yaml.safe_load(f)
        except yaml.YAMLError as e:
            msg = f"Malformed rule configuration {path}: {e}"
            raise RuleConfigError(msg) from e

    if overrides is None:
        overrides = {}
    if not isinstance(overrides, dict):
        msg = f"Rule configuration {path} must be a mapping"
        raise RuleConfigError(msg)

    try:
        rules = RuleConfig(**overrides)
    except PydanticValidationError as e:
        msg = f"Invalid rule configuration {path}: {e}"
        raise RuleConfigError(msg) from e

    logger.info("Loaded rules from %s (%d overrides)", path, len(overrides))
    return rules
