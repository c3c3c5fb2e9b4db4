"""
Chipi-8 - Intérprete de la máquina virtual Chip-8

Componentes:
- Chip8: la VM completa (memoria, CPU, pantalla, timers, teclado)
- VMConfig: parámetros de construcción y quirks
- SystemClock: reparto de ciclos de CPU y ticks de timers por frame
"""

from .chip8 import Chip8
from .config import VMConfig
from .errors import (
    Chip8Error,
    OutOfBoundsError,
    StackOverflowError,
    StackUnderflowError,
    UnknownOpcodeError,
)
from .system_clock import SystemClock

__version__ = "0.1.0"

__all__ = [
    "Chip8",
    "Chip8Error",
    "OutOfBoundsError",
    "StackOverflowError",
    "StackUnderflowError",
    "SystemClock",
    "UnknownOpcodeError",
    "VMConfig",
]
