"""Partition the playable part of the map into land regions."""

from dataclasses import dataclass
from typing import List

import structlog

from .alea_prng import AleaPRNG
from .errors import RegionPartitionError

logger = structlog.get_logger()


@dataclass(frozen=True)
class MapRegion:
    """Offset-coordinate rectangle; ``x_max`` and ``z_max`` are exclusive."""

    x_min: int
    x_max: int
    z_min: int
    z_max: int

    @property
    def width(self) -> int:
        return self.x_max - self.x_min

    @property
    def height(self) -> int:
        return self.z_max - self.z_min

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def overlaps(self, other: "MapRegion") -> bool:
        return (
            self.x_min < other.x_max
            and other.x_min < self.x_max
            and self.z_min < other.z_max
            and other.z_min < self.z_max
        )

    def contains(self, x: int, z: int) -> bool:
        return self.x_min <= x < self.x_max and self.z_min <= z < self.z_max


def create_regions(
    cell_count_x: int,
    cell_count_z: int,
    map_border_x: int,
    map_border_z: int,
    region_border: int,
    region_count: int,
    prng: AleaPRNG,
) -> List[MapRegion]:
    """
    Split the map interior into 1-4 non-touching regions.

    Two regions split along X or Z depending on one random draw, three are
    side by side along X and four are quadrants. Every cut is inset by
    ``region_border`` on both sides.

    Args:
        cell_count_x: Map width in cells
        cell_count_z: Map height in cells
        map_border_x: Margin kept free along the X edges
        map_border_z: Margin kept free along the Z edges
        region_border: Margin on each side of a split
        region_count: Number of regions (1-4)
        prng: Run PRNG (consumed only for two regions)

    Returns:
        List of MapRegion rectangles

    Raises:
        RegionPartitionError: If a resulting region holds no cells
    """
    if region_count not in (1, 2, 3, 4):
        raise RegionPartitionError(f"Unsupported region count {region_count}")

    x_min, x_max = map_border_x, cell_count_x - map_border_x
    z_min, z_max = map_border_z, cell_count_z - map_border_z
    half_x, half_z = cell_count_x // 2, cell_count_z // 2

    if region_count == 2:
        if prng.value() < 0.5:
            regions = [
                MapRegion(x_min, half_x - region_border, z_min, z_max),
                MapRegion(half_x + region_border, x_max, z_min, z_max),
            ]
        else:
            regions = [
                MapRegion(x_min, x_max, z_min, half_z - region_border),
                MapRegion(x_min, x_max, half_z + region_border, z_max),
            ]
    elif region_count == 3:
        third, two_thirds = cell_count_x // 3, cell_count_x * 2 // 3
        regions = [
            MapRegion(x_min, third - region_border, z_min, z_max),
            MapRegion(third + region_border, two_thirds - region_border, z_min, z_max),
            MapRegion(two_thirds + region_border, x_max, z_min, z_max),
        ]
    elif region_count == 4:
        regions = [
            MapRegion(x_min, half_x - region_border, z_min, half_z - region_border),
            MapRegion(half_x + region_border, x_max, z_min, half_z - region_border),
            MapRegion(half_x + region_border, x_max, half_z + region_border, z_max),
            MapRegion(x_min, half_x - region_border, half_z + region_border, z_max),
        ]
    else:
        regions = [MapRegion(x_min, x_max, z_min, z_max)]

    for region in regions:
        if region.is_empty:
            raise RegionPartitionError(
                f"Map of {cell_count_x}x{cell_count_z} cells is too small for "
                f"{region_count} region(s) with borders "
                f"({map_border_x}, {map_border_z}, {region_border}): {region}"
            )

    logger.debug("Created regions", count=len(regions))
    return regions
