"""
Configuration modules for map generation.
"""

from .config import Settings, settings
from .generator_settings import MapGeneratorOptions

__all__ = ['Settings', 'settings', 'MapGeneratorOptions']
