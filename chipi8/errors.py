"""
Errores de la VM Chip-8

Todas las condiciones fatales se comunican de forma síncrona desde la llamada
que las detecta. El núcleo nunca reintenta ni se traga estos errores: decide
el host (mostrar mensaje, detenerse o continuar).

Cada error hereda también de la excepción estándar que el resto del proyecto
ya captura (ValueError en carga, NotImplementedError/RuntimeError en
ejecución), de modo que main.py los trata igual que cualquier otro fallo.
"""

from __future__ import annotations


class Chip8Error(Exception):
    """Raíz de todos los errores de la VM"""


class OutOfBoundsError(Chip8Error, ValueError):
    """
    La carga de un programa escribiría más allá del final de la memoria.

    Se lanza ANTES de modificar ningún byte (la carga es todo o nada).
    """

    def __init__(self, address: int, length: int, memory_size: int) -> None:
        self.address = address
        self.length = length
        self.memory_size = memory_size
        super().__init__(
            f"Programa de {length} bytes en 0x{address:04X} no cabe en "
            f"memoria ({memory_size} bytes)"
        )


class UnknownOpcodeError(Chip8Error, NotImplementedError):
    """La palabra leída no corresponde a ninguna instrucción definida"""

    def __init__(self, opcode: int, address: int) -> None:
        self.opcode = opcode
        self.address = address
        super().__init__(f"Opcode 0x{opcode:04X} desconocido en PC=0x{address:04X}")


class StackOverflowError(Chip8Error, RuntimeError):
    """CALL con la pila llena"""

    def __init__(self, address: int, depth: int) -> None:
        self.address = address
        self.depth = depth
        super().__init__(
            f"Desbordamiento de pila en PC=0x{address:04X} (profundidad máxima {depth})"
        )


class StackUnderflowError(Chip8Error, RuntimeError):
    """RET con la pila vacía"""

    def __init__(self, address: int) -> None:
        self.address = address
        super().__init__(f"RET con la pila vacía en PC=0x{address:04X}")
