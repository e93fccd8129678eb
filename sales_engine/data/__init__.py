"""
Sample Data Module
"""
from .generators import SourceDataGenerator, generate_sources

__all__ = [
    "SourceDataGenerator",
    "generate_sources",
]
