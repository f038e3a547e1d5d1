"""Procedural hexagonal terrain map generation."""

__version__ = "0.1.0"

from .config.generator_settings import MapGeneratorOptions
from .core.hex_grid import HexGrid, HexDirection
from .core.map_generator import HexMapGenerator, GenerationResult, generate_map

__all__ = ['MapGeneratorOptions', 'HexGrid', 'HexDirection',
           'HexMapGenerator', 'GenerationResult', 'generate_map', '__version__']
