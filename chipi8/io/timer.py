"""
Timer - Timers de retardo y sonido del Chip-8

El Chip-8 tiene dos registros de temporización de 8 bits:
- DT (Delay Timer): Los programas lo escriben con Fx15 y lo leen con Fx07
  para medir tiempo.
- ST (Sound Timer): Se escribe con Fx18. Mientras sea distinto de cero suena
  el zumbador.

Ambos decrementan en 1 a 60 Hz mientras sean distintos de cero, y se quedan
en 0. El decremento lo provoca EXCLUSIVAMENTE el host llamando a tick(), a
60 Hz fijos, independientemente de la frecuencia de la CPU. Ejecutar
instrucciones no toca nunca los timers.

Fuente: Cowgod's Chip-8 Technical Reference - 2.5 Timers & Sound
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


class Timer:
    """
    Timers DT y ST del Chip-8.
    """

    def __init__(self) -> None:
        """Inicializa ambos timers a 0"""
        self._delay: int = 0
        self._sound: int = 0

        logger.debug("Timer inicializado (DT=0, ST=0)")

    def reset(self) -> None:
        self._delay = 0
        self._sound = 0

    def tick(self) -> None:
        """
        Avanza los timers un tick de 60 Hz.

        Cada timer se decrementa en 1 si es distinto de cero. Nunca baja de 0.
        """
        if self._delay > 0:
            self._delay -= 1
        if self._sound > 0:
            self._sound -= 1
            if self._sound == 0:
                logger.debug("Timer: ST llegó a 0, fin del tono")

    def read_delay(self) -> int:
        """Lee DT (0x00 a 0xFF)"""
        return self._delay

    def write_delay(self, value: int) -> None:
        """
        Escribe DT.

        Args:
            value: Valor a escribir (se enmascara a 8 bits)
        """
        self._delay = value & 0xFF
        logger.debug(f"Timer: DT escrito = 0x{self._delay:02X}")

    def read_sound(self) -> int:
        """Lee ST (0x00 a 0xFF)"""
        return self._sound

    def write_sound(self, value: int) -> None:
        """
        Escribe ST.

        Args:
            value: Valor a escribir (se enmascara a 8 bits)
        """
        self._sound = value & 0xFF
        logger.debug(f"Timer: ST escrito = 0x{self._sound:02X}")

    def is_sound_active(self) -> bool:
        """True si el tono debería estar sonando (ST != 0)"""
        return self._sound != 0
