#!/usr/bin/env python3
"""
Generate sample hex maps with the full pipeline and print a text summary.

This includes:
1. Region partitioning and land sculpting
2. Erosion
3. Climate simulation
4. Rivers and lakes
5. Terrain classification

Usage:
    python generate_sample_maps.py [seed]

If no seed is provided, defaults to 1337
"""

import sys

from py_hexmap import HexMapGenerator, MapGeneratorOptions
from py_hexmap.config import settings
from py_hexmap.core.biomes import TerrainType
from py_hexmap.core.map_statistics import summarize_map
from py_hexmap.utils.logging_config import configure_logging

TERRAIN_GLYPHS = {
    TerrainType.SAND: ":",
    TerrainType.GRASS: '"',
    TerrainType.MUD: "%",
    TerrainType.STONE: "^",
    TerrainType.SNOW: "*",
}


def render_text(generator):
    """Lay the grid out as text, odd rows shifted half a cell, water as '~'."""
    grid = generator.grid
    lines = []
    for z in reversed(range(grid.cell_count_z)):
        row = []
        for x in range(grid.cell_count_x):
            cell = grid.get_cell_index(x, z)
            if grid.is_underwater(cell):
                glyph = "~"
            elif grid.has_river(cell):
                glyph = "r"
            else:
                glyph = TERRAIN_GLYPHS[TerrainType(int(grid.terrain_type_index[cell]))]
            row.append(glyph)
        indent = " " if z & 1 else ""
        lines.append(indent + " ".join(row))
    return "\n".join(lines)


def create_map(width, height, seed, **overrides):
    """Generate one map and print its statistics."""
    options = MapGeneratorOptions(seed=seed, use_fixed_seed=True, **overrides)

    print(f"\nGenerating {width}x{height} map (seed {seed}, {options.region_count} region(s))...")
    generator = HexMapGenerator()
    result = generator.generate_map(width, height, options)
    stats = summarize_map(generator.grid, result.moisture)

    print(f"  Land cells: {stats.land_cells} ({stats.land_fraction * 100:.1f}%)")
    print(f"  Erodible cells: {result.erosion.initial_erodible} -> {stats.erodible_cells}")
    print(f"  Rivers: {len(result.rivers.rivers)} ({stats.river_cells} river cells)")
    print(f"  Elevation range: {stats.elevation_range}")
    print(f"  Terrain: {stats.terrain_distribution}")
    for warning in result.warnings:
        print(f"  Warning: {warning}")
    print(render_text(generator))
    return result


def main():
    seed = int(sys.argv[1]) if len(sys.argv) > 1 else 1337
    configure_logging("WARNING", "console")

    create_map(settings.default_map_width, settings.default_map_height, seed)
    create_map(60, 40, seed, region_count=2)
    create_map(80, 60, seed, region_count=4, land_percentage=40, region_border=3)


if __name__ == "__main__":
    main()
