"""
Settings for hex map generation runs.

Every recognized option carries its allowed range, so out-of-range values are
rejected when the options are built rather than clamped mid-run.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..core.hex_grid import HexDirection

MAX_SEED = 0x7FFFFFFF


class MapGeneratorOptions(BaseModel):
    """Tunable parameters for one call to ``HexMapGenerator.generate_map``."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    # Seeding
    seed: int = Field(default=0, ge=0, le=MAX_SEED, description="Seed used when use_fixed_seed is set")
    use_fixed_seed: bool = Field(default=False, description="Reuse seed instead of deriving a new one")

    # Land sculpting
    jitter_probability: float = Field(default=0.25, ge=0.0, le=0.5, description="Chance a frontier cell gets +1 priority")
    chunk_size_min: int = Field(default=30, ge=20, le=200, description="Smallest land blob in cells")
    chunk_size_max: int = Field(default=100, ge=20, le=200, description="Largest land blob in cells")
    land_percentage: int = Field(default=50, ge=5, le=95, description="Share of cells raised above water")
    water_level: int = Field(default=3, ge=1, le=5, description="Base water level for every cell")
    high_rise_probability: float = Field(default=0.25, ge=0.0, le=1.0, description="Chance a blob moves two levels at once")
    sink_probability: float = Field(default=0.2, ge=0.0, le=0.4, description="Chance an iteration sinks instead of raises")
    elevation_minimum: int = Field(default=-2, ge=-4, le=0, description="Lowest allowed elevation")
    elevation_maximum: int = Field(default=8, ge=6, le=10, description="Highest allowed elevation")

    # Regions
    map_border_x: int = Field(default=5, ge=0, le=10, description="Cells kept free of blob starts along X edges")
    map_border_z: int = Field(default=5, ge=0, le=10, description="Cells kept free of blob starts along Z edges")
    region_border: int = Field(default=5, ge=0, le=10, description="Gap on each side of a region split")
    region_count: int = Field(default=1, ge=1, le=4, description="Number of land regions")

    # Erosion
    erosion_percentage: int = Field(default=50, ge=0, le=100, description="Share of erodible cells to wear down")

    # Climate
    starting_moisture: float = Field(default=0.1, ge=0.0, le=1.0)
    evaporation_factor: float = Field(default=0.5, ge=0.0, le=1.0)
    precipitation_factor: float = Field(default=0.25, ge=0.0, le=1.0)
    runoff_factor: float = Field(default=0.25, ge=0.0, le=1.0)
    seepage_factor: float = Field(default=0.125, ge=0.0, le=1.0)
    wind_direction: HexDirection = Field(default=HexDirection.NW, description="Direction the wind blows from")
    wind_strength: float = Field(default=4.0, ge=1.0, le=10.0)

    # Rivers
    river_percentage: int = Field(default=10, ge=0, le=20, description="River cells as a share of land cells")
    extra_lake_probability: float = Field(default=0.25, ge=0.0, le=1.0)

    @field_validator("wind_direction", mode="before")
    @classmethod
    def parse_wind_direction(cls, value: Any) -> Any:
        """Accept direction names such as "NW" as well as enum values."""
        if isinstance(value, str) and not value.isdigit():
            try:
                return HexDirection[value.upper()]
            except KeyError:
                raise ValueError(f"Unknown hex direction '{value}'")
        return value

    @model_validator(mode="after")
    def check_chunk_sizes(self) -> "MapGeneratorOptions":
        if self.chunk_size_min > self.chunk_size_max:
            raise ValueError(
                f"chunk_size_min ({self.chunk_size_min}) greater than "
                f"chunk_size_max ({self.chunk_size_max})"
            )
        return self
