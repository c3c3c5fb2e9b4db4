"""
Keypad - Teclado hexadecimal del Chip-8

El Chip-8 tiene un teclado de 16 teclas, identificadas por su código
hexadecimal 0x0 - 0xF. La disposición original (COSMAC VIP) es:

    1 2 3 C
    4 5 6 D
    7 8 9 E
    A 0 B F

El host escribe el estado de las teclas (pulsada/soltada). El núcleo solo lo
lee, desde Ex9E/ExA1 (saltar si pulsada / no pulsada) y desde Fx0A (esperar
una tecla).

Para Fx0A guardamos además un "latch": la última tecla que pasó de soltada a
pulsada desde que empezó la espera. Así una pulsación muy corta que ocurre
entre dos ciclos no se pierde.

El mapeo teclado del PC -> teclado Chip-8 no pertenece a esta clase; lo hace
el Renderer.

Fuente: Cowgod's Chip-8 Technical Reference - 2.3 Keyboard
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

# Número de teclas del teclado hexadecimal
NUM_KEYS = 16


class Keypad:
    """
    Estado de las 16 teclas (True = pulsada, False = soltada).
    """

    def __init__(self) -> None:
        """Inicializa el teclado con todas las teclas soltadas"""
        self._state: list[bool] = [False] * NUM_KEYS
        self._latched: int | None = None

        logger.debug("Keypad inicializado: todas las teclas soltadas")

    def reset(self) -> None:
        self._state = [False] * NUM_KEYS
        self._latched = None

    def press(self, key: int) -> None:
        """
        Marca una tecla como pulsada.

        Si la tecla estaba soltada, se registra en el latch de Fx0A.

        Args:
            key: Código de la tecla (0x0 a 0xF)
        """
        if not self._valid(key):
            return

        if not self._state[key]:
            self._latched = key
        self._state[key] = True
        logger.debug(f"Keypad: tecla 0x{key:X} pulsada")

    def release(self, key: int) -> None:
        """
        Marca una tecla como soltada.

        Args:
            key: Código de la tecla (0x0 a 0xF)
        """
        if not self._valid(key):
            return

        self._state[key] = False
        logger.debug(f"Keypad: tecla 0x{key:X} soltada")

    def set_key(self, key: int, pressed: bool) -> None:
        """Interfaz de escritura del host: código + pulsada/soltada"""
        if pressed:
            self.press(key)
        else:
            self.release(key)

    def is_pressed(self, key: int) -> bool:
        """
        Estado de una tecla.

        Ex9E/ExA1 usan Vx como código; solo cuenta el nibble bajo.
        """
        return self._state[key & 0x0F]

    def get_first_pressed(self) -> int | None:
        """Código más bajo entre las teclas pulsadas, o None si no hay ninguna"""
        for key, pressed in enumerate(self._state):
            if pressed:
                return key
        return None

    def arm_wait(self) -> None:
        """Descarta pulsaciones anteriores al inicio de una espera Fx0A"""
        self._latched = None

    def take_latched_press(self) -> int | None:
        """
        Consume la última pulsación registrada desde arm_wait().

        Returns:
            Código de la tecla, o None si no hubo pulsación
        """
        key = self._latched
        self._latched = None
        return key

    def get_state(self) -> list[bool]:
        """Copia del estado de las 16 teclas"""
        return list(self._state)

    def _valid(self, key: int) -> bool:
        if 0 <= key < NUM_KEYS:
            return True
        logger.warning(f"Keypad: código de tecla desconocido {key!r}, ignorando")
        return False
