"""
Renderer - Ventana de visualización con Pygame

Dibuja el buffer de pantalla del Chip-8 escalado y traduce los eventos de
teclado del PC a pulsaciones del teclado hexadecimal.

La escala es una cuestión de presentación: el núcleo no sabe nada de ella.
Cada píxel del Chip-8 se convierte en un cuadrado de scale x scale píxeles.

Renderizado:
El snapshot de la VM (row-major, un byte 0/1 por píxel) se convierte en un
array numpy (alto, ancho), se traspone a (ancho, alto) como espera
pygame.surfarray y se mapea a colores RGB de una vez, sin bucles Python.

Mapeo de teclado (disposición habitual en teclados QWERTY):

    PC              Chip-8
    1 2 3 4         1 2 3 C
    Q W E R   ->    4 5 6 D
    A S D F         7 8 9 E
    Z X C V         A 0 B F
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

try:
    import pygame
except ImportError:
    pygame = None  # type: ignore

if TYPE_CHECKING:
    from ..io.keypad import Keypad

logger = logging.getLogger(__name__)

# Colores (RGB)
COLOR_OFF = (0, 0, 0)
COLOR_ON = (255, 255, 255)

# Nombres de tecla de pygame -> código del teclado Chip-8
KEYMAP_NAMES: dict[str, int] = {
    "1": 0x1, "2": 0x2, "3": 0x3, "4": 0xC,
    "q": 0x4, "w": 0x5, "e": 0x6, "r": 0xD,
    "a": 0x7, "s": 0x8, "d": 0x9, "f": 0xE,
    "z": 0xA, "x": 0x0, "c": 0xB, "v": 0xF,
}


def build_keymap() -> dict[int, int]:
    """
    Construye el mapeo código de tecla pygame -> código Chip-8.

    Raises:
        RuntimeError: Si pygame no está disponible
    """
    if pygame is None:
        raise RuntimeError("Pygame no está instalado. Instala con: pip install pygame-ce")
    return {pygame.key.key_code(name): code for name, code in KEYMAP_NAMES.items()}


def snapshot_to_rgb(snapshot: bytes, width: int, height: int,
                    on: tuple[int, int, int] = COLOR_ON,
                    off: tuple[int, int, int] = COLOR_OFF) -> np.ndarray:
    """
    Convierte un snapshot de pantalla en un array RGB para pygame.surfarray.

    Args:
        snapshot: Buffer row-major (un byte 0/1 por píxel)
        width: Ancho en píxeles
        height: Alto en píxeles
        on: Color de los píxeles encendidos
        off: Color de los píxeles apagados

    Returns:
        Array uint8 de forma (width, height, 3)
    """
    pixels = np.frombuffer(snapshot, dtype=np.uint8).reshape(height, width)
    palette = np.array([off, on], dtype=np.uint8)
    # surfarray indexa (x, y): trasponer (alto, ancho) -> (ancho, alto)
    return palette[pixels.T & 1]


class Renderer:
    """
    Ventana pygame que muestra la pantalla del Chip-8.
    """

    def __init__(self, width: int = 64, height: int = 32, scale: int = 10,
                 title: str = "Chipi-8") -> None:
        """
        Abre la ventana.

        Args:
            width: Ancho de la pantalla del Chip-8
            height: Alto de la pantalla del Chip-8
            scale: Factor de escala
            title: Título de la ventana

        Raises:
            RuntimeError: Si pygame no está disponible
        """
        if pygame is None:
            raise RuntimeError("Pygame no está instalado. Instala con: pip install pygame-ce")

        self.width = width
        self.height = height
        self.scale = scale
        self.window_width = width * scale
        self.window_height = height * scale

        pygame.init()
        self.screen = pygame.display.set_mode((self.window_width, self.window_height))
        pygame.display.set_caption(title)

        # Superficie a resolución nativa; se escala al volcarla a la ventana
        self.buffer = pygame.Surface((width, height))
        self._clock = pygame.time.Clock()
        self._keymap = build_keymap()

        logger.info(f"Renderer inicializado: {self.window_width}x{self.window_height} (escala {scale})")

    def render_frame(self, snapshot: bytes) -> None:
        """
        Dibuja un snapshot de pantalla en la ventana.

        Args:
            snapshot: Buffer row-major devuelto por Chip8.get_display()
        """
        rgb = snapshot_to_rgb(snapshot, self.width, self.height)
        pygame.surfarray.blit_array(self.buffer, rgb)
        scaled = pygame.transform.scale(self.buffer, (self.window_width, self.window_height))
        self.screen.blit(scaled, (0, 0))
        pygame.display.flip()

    def handle_events(self, keypad: Keypad) -> bool:
        """
        Procesa los eventos pendientes de pygame.

        Las teclas mapeadas se pasan al Keypad; Escape o cerrar la ventana
        terminan la ejecución.

        Args:
            keypad: Teclado de la VM

        Returns:
            False si el usuario quiere salir, True en caso contrario
        """
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                return False
            if event.type in (pygame.KEYDOWN, pygame.KEYUP):
                if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                    return False
                code = self._keymap.get(event.key)
                if code is not None:
                    keypad.set_key(code, event.type == pygame.KEYDOWN)
        return True

    def tick(self, fps: int) -> None:
        """Espera lo necesario para no superar fps frames por segundo"""
        self._clock.tick(fps)

    def close(self) -> None:
        pygame.display.quit()
