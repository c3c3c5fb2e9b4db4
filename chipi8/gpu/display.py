"""
Display - Buffer de pantalla del Chip-8

La pantalla del Chip-8 es monocroma de 64x32 píxeles (configurable). Cada
píxel está encendido (1) o apagado (0). Guardamos los píxeles en un bytearray
en orden row-major: el píxel (x, y) está en el índice y * ancho + x.

Solo dos instrucciones modifican la pantalla:
- 00E0 (CLS): apaga todos los píxeles.
- Dxyn (DRW): dibuja un sprite de n bytes (8 píxeles de ancho, n de alto)
  componiendo con XOR. Si algún píxel encendido se apaga, hay colisión y
  la CPU pone VF = 1.

Política de bordes:
- La coordenada inicial (Vx, Vy) siempre se reduce módulo ancho/alto.
- sprite_wrap=True (por defecto): los píxeles que se salen aparecen por el
  lado opuesto.
- sprite_wrap=False: los píxeles que se salen se recortan.

Como el XOR es su propia inversa, dibujar dos veces el mismo sprite en el
mismo sitio deja la pantalla exactamente como estaba.

Fuente: Cowgod's Chip-8 Technical Reference - 2.4 Display, Dxyn
"""

from __future__ import annotations

import logging
from typing import Iterable

logger = logging.getLogger(__name__)

# Ancho de un sprite en píxeles (un byte por fila)
SPRITE_WIDTH = 8


class Display:
    """
    Buffer de píxeles de la pantalla.

    Las dimensiones son fijas durante toda la vida del objeto.
    """

    def __init__(self, width: int = 64, height: int = 32, wrap: bool = True) -> None:
        """
        Args:
            width: Ancho en píxeles
            height: Alto en píxeles
            wrap: True para wrap-around en los bordes, False para recortar
        """
        self._width = width
        self._height = height
        self._wrap = wrap
        self._pixels = bytearray(width * height)

        # Flag de "frame listo": se activa cuando la pantalla cambia y el host
        # lo consume con get_frame_ready_and_reset()
        self._frame_ready: bool = True

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def clear(self) -> None:
        """Apaga todos los píxeles (00E0)"""
        self._pixels[:] = bytes(len(self._pixels))
        self._frame_ready = True

    def draw_sprite(self, x: int, y: int, rows: Iterable[int]) -> bool:
        """
        Dibuja un sprite con composición XOR.

        Cada byte de rows es una fila de 8 píxeles; el bit 7 es el píxel de
        más a la izquierda.

        Args:
            x: Coordenada X inicial (se reduce módulo el ancho)
            y: Coordenada Y inicial (se reduce módulo el alto)
            rows: Bytes del sprite (uno por fila)

        Returns:
            True si algún píxel encendido se apagó (colisión)
        """
        x0 = x % self._width
        y0 = y % self._height
        collision = False

        for row, sprite_byte in enumerate(rows):
            py = y0 + row
            if py >= self._height:
                if not self._wrap:
                    break
                py %= self._height

            for bit in range(SPRITE_WIDTH):
                if not (sprite_byte >> (7 - bit)) & 1:
                    continue

                px = x0 + bit
                if px >= self._width:
                    if not self._wrap:
                        break
                    px %= self._width

                index = py * self._width + px
                if self._pixels[index]:
                    collision = True
                self._pixels[index] ^= 1

        self._frame_ready = True
        return collision

    def get_pixel(self, x: int, y: int) -> int:
        """Estado de un píxel (0 o 1)"""
        return self._pixels[(y % self._height) * self._width + (x % self._width)]

    def get_snapshot(self) -> bytes:
        """
        Copia inmutable del buffer (row-major, un byte 0/1 por píxel).

        El host la usa para renderizar; modificar la VM después no altera
        la copia.
        """
        return bytes(self._pixels)

    def get_rows(self) -> list[list[int]]:
        """Buffer como lista de filas (útil en tests)"""
        w = self._width
        return [list(self._pixels[y * w:(y + 1) * w]) for y in range(self._height)]

    def count_lit(self) -> int:
        """Número de píxeles encendidos"""
        return sum(self._pixels)

    def get_frame_ready_and_reset(self) -> bool:
        """
        Devuelve si la pantalla cambió desde la última consulta y baja el flag.
        """
        ready = self._frame_ready
        self._frame_ready = False
        return ready
