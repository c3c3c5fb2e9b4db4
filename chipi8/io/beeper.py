"""
Beeper - Tono del zumbador del Chip-8

El Chip-8 solo tiene un sonido: un tono fijo que suena mientras el Sound
Timer (ST) es distinto de cero. La VM expone el valor de ST; esta clase se
limita a arrancar o parar un tono en bucle con pygame.mixer.

La onda es cuadrada, generada con numpy (un segundo de muestras de 16 bits
que se repite con loops=-1).

Si no hay dispositivo de audio (servidores, CI), el mixer no se inicializa y
el Beeper queda desactivado: update() y stop() no hacen nada.
"""

from __future__ import annotations

import logging

import numpy as np

try:
    import pygame
except ImportError:
    pygame = None  # type: ignore

logger = logging.getLogger(__name__)

SAMPLE_RATE = 44_100
TONE_HZ = 440
VOLUME = 0.2


def square_wave(frequency: int = TONE_HZ, sample_rate: int = SAMPLE_RATE,
                amplitude: int = 2 ** 15 - 1) -> np.ndarray:
    """
    Genera un segundo de onda cuadrada mono de 16 bits.

    Returns:
        Array int16 de sample_rate muestras
    """
    t = np.arange(sample_rate)
    high = (t * frequency * 2 // sample_rate) % 2 == 0
    return np.where(high, amplitude, -amplitude).astype(np.int16)


class Beeper:
    """
    Tono en bucle controlado por el Sound Timer.
    """

    def __init__(self, frequency: int = TONE_HZ) -> None:
        self._sound = None
        self._playing: bool = False

        if pygame is None:
            logger.warning("Pygame no disponible. Sonido desactivado.")
            return

        try:
            pygame.mixer.init(SAMPLE_RATE, -16, 1)
        except pygame.error as e:
            logger.warning(f"Beeper: no se pudo inicializar el audio ({e}). Sonido desactivado.")
            return

        # El driver puede abrir el dispositivo con más canales de los pedidos
        _, _, channels = pygame.mixer.get_init()
        wave = square_wave(frequency)
        if channels > 1:
            wave = np.repeat(wave[:, np.newaxis], channels, axis=1)

        self._sound = pygame.sndarray.make_sound(wave)
        self._sound.set_volume(VOLUME)
        logger.debug(f"Beeper inicializado ({frequency} Hz)")

    @property
    def enabled(self) -> bool:
        return self._sound is not None

    @property
    def playing(self) -> bool:
        return self._playing

    def update(self, active: bool) -> None:
        """
        Arranca o para el tono.

        Args:
            active: True si ST != 0
        """
        if self._sound is None or active == self._playing:
            return
        if active:
            self._sound.play(loops=-1)
        else:
            self._sound.stop()
        self._playing = active

    def stop(self) -> None:
        self.update(False)
