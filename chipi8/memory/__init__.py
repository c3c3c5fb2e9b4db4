"""
Módulo de memoria

La MMU gestiona los 4KB de memoria del Chip-8 (0x000 a 0xFFF), incluida la
fuente hexadecimal. Incluye también la clase Rom para leer programas de disco.
"""

from .mmu import MMU
from .rom import Rom

__all__ = ["MMU", "Rom"]
