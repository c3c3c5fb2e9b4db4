"""
Módulo de Entrada/Salida (I/O)

Contiene los periféricos del Chip-8:
- Keypad: Teclado hexadecimal de 16 teclas
- Timer: Timers de retardo (DT) y sonido (ST) a 60 Hz
- Beeper: Tono del zumbador (requiere pygame)
"""

from .keypad import Keypad
from .timer import Timer

__all__ = ["Keypad", "Timer"]
