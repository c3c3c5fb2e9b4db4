"""
MMU (Memory Management Unit) - Memoria del Chip-8

El Chip-8 tiene un espacio de direcciones de 12 bits (0x000 a 0xFFF = 4096 bytes):

- 0x000 - 0x1FF: Reservado para el intérprete original. Aquí guardamos la
  fuente hexadecimal (16 glifos de 5 bytes, por defecto en 0x050).
- 0x200 - 0xFFF: Programa (ROM) y datos de trabajo.

Usamos un bytearray lineal del tamaño configurado. Las lecturas y escrituras
en tiempo de ejecución hacen wrap-around módulo el tamaño de la memoria (un
programa que apunta I al final de la memoria no tumba el intérprete). La carga
de programas, en cambio, es estricta: si no cabe, se rechaza entera.

La fuente es de solo lectura en tiempo de ejecución: write_byte() ignora las
escrituras en su rango (Fx33 o Fx55 con I apuntando a la fuente no la
corrompen). Solo reset() la vuelve a escribir. load() no tiene esa
restricción: copia la imagen entera donde se le pida.

CRÍTICO: El Chip-8 es Big-Endian. Cada instrucción ocupa 2 bytes con el byte
más significativo en la dirección más baja.

Fuente: Cowgod's Chip-8 Technical Reference - 2.1 Memory
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..config import FONT_GLYPH_SIZE
from ..errors import OutOfBoundsError

if TYPE_CHECKING:
    from ..config import VMConfig

logger = logging.getLogger(__name__)


class MMU:
    """
    Memoria principal de la VM.

    Mantiene el bytearray de memoria y la fuente hexadecimal en la zona
    reservada. La fuente solo se reescribe al reiniciar.
    """

    def __init__(self, config: VMConfig) -> None:
        """
        Inicializa la memoria a cero y escribe la fuente.

        Args:
            config: Configuración de la VM (tamaño, fuente, dirección de la fuente)
        """
        self._size: int = config.memory_size
        self._font: bytes = bytes(config.font)
        self._font_address: int = config.font_address
        self._font_end: int = config.font_address + len(self._font)
        self._memory = bytearray(self._size)
        self.reset()

    def reset(self) -> None:
        """
        Pone toda la memoria a cero y vuelve a escribir la fuente.
        """
        self._memory[:] = bytes(self._size)
        self._memory[self._font_address:self._font_end] = self._font
        logger.debug(
            f"MMU reiniciada ({self._size} bytes, fuente en 0x{self._font_address:03X})"
        )

    @property
    def size(self) -> int:
        return self._size

    def read_byte(self, addr: int) -> int:
        """
        Lee un byte de memoria.

        Args:
            addr: Dirección (se reduce módulo el tamaño de memoria)

        Returns:
            Byte leído (0x00 a 0xFF)
        """
        return self._memory[addr % self._size]

    def write_byte(self, addr: int, value: int) -> None:
        """
        Escribe un byte en memoria.

        Las escrituras en el rango de la fuente se ignoran.

        Args:
            addr: Dirección (se reduce módulo el tamaño de memoria)
            value: Valor a escribir (se enmascara a 8 bits)
        """
        addr %= self._size
        if self._font_address <= addr < self._font_end:
            logger.debug(f"MMU: escritura ignorada en la fuente (0x{addr:04X})")
            return
        self._memory[addr] = value & 0xFF

    def read_word(self, addr: int) -> int:
        """
        Lee una palabra de 16 bits en formato Big-Endian.

        Ejemplo: memoria [0x200]=0x12, [0x201]=0x34 -> 0x1234

        Args:
            addr: Dirección del byte alto

        Returns:
            Palabra de 16 bits
        """
        high = self.read_byte(addr)
        low = self.read_byte(addr + 1)
        return (high << 8) | low

    def load(self, data: bytes | bytearray | list[int], address: int) -> None:
        """
        Copia un programa en memoria a partir de una dirección.

        La operación es todo o nada: si el programa no cabe, se lanza el error
        sin haber tocado ni un solo byte.

        Args:
            data: Imagen del programa
            address: Dirección de inicio

        Raises:
            OutOfBoundsError: Si address + len(data) > tamaño de memoria
        """
        length = len(data)
        if address < 0 or address + length > self._size:
            raise OutOfBoundsError(address, length, self._size)
        self._memory[address:address + length] = bytes(data)
        logger.debug(f"MMU: {length} bytes cargados en 0x{address:04X}")

    def font_address_for(self, digit: int) -> int:
        """
        Devuelve la dirección del glifo de un dígito hexadecimal.

        Solo se usa el nibble bajo del dígito (Fx29 con Vx > 0xF apunta al
        glifo de Vx & 0xF).

        Args:
            digit: Dígito (0x0 a 0xF)

        Returns:
            Dirección del primer byte del glifo
        """
        return self._font_address + (digit & 0x0F) * FONT_GLYPH_SIZE

    def dump(self, start: int, length: int) -> bytes:
        """Copia de un rango de memoria (para depuración y tests)"""
        return bytes(self.read_byte(start + offset) for offset in range(length))
