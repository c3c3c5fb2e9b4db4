"""
Módulo CPU - Intérprete del conjunto de instrucciones Chip-8
"""

from .core import CPU
from .registers import Registers

__all__ = ["CPU", "Registers"]
