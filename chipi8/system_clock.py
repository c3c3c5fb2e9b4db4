"""
SystemClock: reparto de ciclos de CPU y ticks de timers por frame.

El Chip-8 tiene dos dominios de reloj independientes:
1. La CPU, a una frecuencia nominal configurable (típicamente 500-1000 Hz)
2. Los timers DT/ST, a 60 Hz FIJOS, sea cual sea la frecuencia de la CPU

El host trabaja por frames de 1/60 s. En cada frame hay que ejecutar
cpu_hz / 60 instrucciones y exactamente un tick de timers. Como cpu_hz no
tiene por qué ser múltiplo de 60, llevamos un acumulador de la parte
fraccionaria para que, a la larga, el número de instrucciones por segundo
sea exactamente cpu_hz.

Ejemplo: cpu_hz = 700 -> 11.67 instrucciones por frame -> frames de 11 y 12
que suman 700 cada 60 frames.

Esta conversión se hace en UN SOLO LUGAR: aquí.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .chip8 import Chip8


class SystemClock:
    """
    Reloj maestro: coordina step() de la CPU y tick() de los timers.
    """

    def __init__(self, vm: Chip8, cpu_hz: int | None = None, timer_hz: int | None = None) -> None:
        """
        Args:
            vm: VM a la que se dan los ciclos
            cpu_hz: Instrucciones por segundo (por defecto las de la config de la VM)
            timer_hz: Frecuencia de los timers (por defecto 60 Hz)
        """
        self._vm = vm
        self._cpu_hz = cpu_hz if cpu_hz is not None else vm.config.cpu_hz
        self._timer_hz = timer_hz if timer_hz is not None else vm.config.timer_hz
        if self._cpu_hz <= 0 or self._timer_hz <= 0:
            raise ValueError(f"Frecuencias inválidas: CPU={self._cpu_hz} Hz, timers={self._timer_hz} Hz")

        # Acumulador en unidades de 1/timer_hz instrucciones
        self._remainder = 0
        self._total_cycles = 0
        self._total_frames = 0

    @property
    def frame_rate(self) -> int:
        """Frames por segundo (= frecuencia de los timers)"""
        return self._timer_hz

    def cycles_for_next_frame(self) -> int:
        """
        Número de instrucciones que tocan en el próximo frame.

        No modifica el acumulador.
        """
        return (self._remainder + self._cpu_hz) // self._timer_hz

    def run_frame(self) -> int:
        """
        Ejecuta un frame: N instrucciones y un tick de timers.

        Los ciclos consumidos esperando una tecla (Fx0A) cuentan igual que
        los demás. Un error de la CPU se propaga inmediatamente; en ese caso
        no se hace el tick de timers de este frame.

        Returns:
            Número de ciclos ejecutados en el frame
        """
        self._remainder += self._cpu_hz
        cycles = self._remainder // self._timer_hz
        self._remainder %= self._timer_hz

        for _ in range(cycles):
            self._vm.step()
            self._total_cycles += 1

        self._vm.tick_timers()
        self._total_frames += 1
        return cycles

    def get_total_cycles(self) -> int:
        """Total de ciclos ejecutados desde el inicio"""
        return self._total_cycles

    def get_total_frames(self) -> int:
        """Total de frames (ticks de timers) desde el inicio"""
        return self._total_frames

    def reset_total_cycles(self) -> None:
        """Reinicia contadores y acumulador"""
        self._total_cycles = 0
        self._total_frames = 0
        self._remainder = 0
