"""
Core map generation functionality.
"""

from .hex_grid import HexGrid, HexDirection, HexCoordinates
from .priority_queue import HexCellPriorityQueue, SearchFrontier
from .regions import MapRegion, create_regions
from .climate import ClimateSimulator, ClimateOptions
from .hydrology import RiverSynthesizer, HydrologyOptions, River
from .biomes import TerrainType, TerrainClassifier, classify_terrain

__all__ = ['HexGrid', 'HexDirection', 'HexCoordinates',
           'HexCellPriorityQueue', 'SearchFrontier', 'MapRegion', 'create_regions',
           'ClimateSimulator', 'ClimateOptions',
           'RiverSynthesizer', 'HydrologyOptions', 'River',
           'TerrainType', 'TerrainClassifier', 'classify_terrain']
