"""
Registros de la CPU Chip-8

El Chip-8 tiene:
- 16 registros de propósito general de 8 bits: V0 a VF
- VF hace de registro de flags: carry, borrow, bit desplazado o colisión
  de píxeles según la instrucción. Los programas no deberían usarlo como
  registro general.
- I: registro índice de 16 bits (solo se usan 12 bits para direcciones)
- PC: Program Counter de 16 bits

El puntero de pila (SP) y los timers viven en sus propios componentes
(la pila en la CPU y los timers en io.timer).

Fuente: Cowgod's Chip-8 Technical Reference - 2.2 Registers
"""

from __future__ import annotations

# Índice del registro de flags
VF = 0xF

# Número de registros generales
NUM_REGISTERS = 16


class Registers:
    """
    Registros de la CPU Chip-8.

    Todas las escrituras aseguran wrap-around (8 bits para V0-VF,
    16 bits para I y PC).
    """

    def __init__(self, pc: int = 0x200) -> None:
        """
        Inicializa todos los registros a cero y PC al inicio del programa.

        Args:
            pc: Valor inicial del Program Counter
        """
        self.v: list[int] = [0] * NUM_REGISTERS
        self.i: int = 0
        self.pc: int = pc & 0xFFFF

    def reset(self, pc: int = 0x200) -> None:
        """Vuelve al estado inicial"""
        self.v = [0] * NUM_REGISTERS
        self.i = 0
        self.pc = pc & 0xFFFF

    # ========== Registros generales (con wrap-around) ==========

    def get_v(self, x: int) -> int:
        """Obtiene Vx"""
        return self.v[x & 0x0F]

    def set_v(self, x: int, value: int) -> None:
        """Establece Vx (8 bits, wrap-around)"""
        self.v[x & 0x0F] = value & 0xFF

    def get_vf(self) -> int:
        return self.v[VF]

    def set_vf(self, value: int) -> None:
        self.v[VF] = value & 0xFF

    # ========== Registros de 16 bits ==========

    def set_pc(self, value: int) -> None:
        """Establece el Program Counter (16 bits, wrap-around)"""
        self.pc = value & 0xFFFF

    def get_pc(self) -> int:
        return self.pc

    def set_i(self, value: int) -> None:
        """Establece el registro índice (16 bits, wrap-around)"""
        self.i = value & 0xFFFF

    def get_i(self) -> int:
        return self.i
