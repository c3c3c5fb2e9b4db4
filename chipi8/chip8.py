"""
Chip8 - Sistema Principal (Placa Base)

La clase Chip8 representa la máquina virtual completa e integra todos los
componentes:
- MMU (4KB de memoria con la fuente hexadecimal)
- CPU (registros V0-VF, I, PC y pila de retorno)
- Display (buffer de 64x32 píxeles)
- Timer (DT y ST)
- Keypad (16 teclas)

Contrato con el host:
- load_program(): carga una imagen (bytes) en memoria. Todo o nada.
- step(): ejecuta UN ciclo de instrucción. Sin noción de tiempo real.
- tick_timers(): un tick de 60 Hz de DT/ST. Desacoplado de step().
- get_display(): copia inmutable de la pantalla para renderizar.
- set_key(): pulsación/liberación de una tecla 0x0-0xF.
- is_sound_active(): ST != 0 -> debería sonar el tono.
- awaiting_key: la CPU está detenida en Fx0A esperando una tecla.

El núcleo nunca llama al renderizado, al audio ni al teclado del PC: solo
expone estado para que el host lo lea y lo escriba. El único método que toca
pygame es run(), que es el bucle de host por defecto.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from .config import VMConfig
from .cpu.core import CPU
from .cpu.registers import Registers
from .errors import OutOfBoundsError
from .gpu.display import Display
from .io.keypad import Keypad
from .io.timer import Timer
from .memory.mmu import MMU
from .memory.rom import Rom
from .system_clock import SystemClock

if TYPE_CHECKING:
    import random

logger = logging.getLogger(__name__)


class Chip8:
    """
    Máquina virtual Chip-8.

    Todo el estado se crea en el constructor y se modifica en sitio durante
    toda la vida del proceso. Cargar un programa nuevo reinicia el estado
    completo.
    """

    def __init__(self, config: VMConfig | None = None, rng: random.Random | None = None) -> None:
        """
        Inicializa la VM: memoria a cero con la fuente, registros a cero,
        PC = inicio del programa, pantalla apagada y teclas soltadas.

        Args:
            config: Configuración de la VM (por defecto VMConfig())
            rng: Generador aleatorio para Cxkk (opcional, útil en tests)

        Raises:
            ValueError: Si la configuración no es coherente
        """
        self.config = (config if config is not None else VMConfig()).validate()

        self.mmu = MMU(self.config)
        self.display = Display(
            self.config.display_width,
            self.config.display_height,
            wrap=self.config.sprite_wrap,
        )
        self.timer = Timer()
        self.keypad = Keypad()
        self.cpu = CPU(self.mmu, self.display, self.timer, self.keypad, self.config, rng=rng)

        self._rom: Rom | None = None
        self.running: bool = False

        logger.info(
            f"Sistema Chip-8 inicializado ({self.config.memory_size} bytes, "
            f"{self.config.display_width}x{self.config.display_height}, "
            f"quirks={self.config.active_quirks or 'ninguno'})"
        )

    def reset(self) -> None:
        """
        Vuelve al estado inicial: memoria a cero salvo la fuente, PC = 0x200,
        SP = 0, timers a 0, pantalla apagada, teclas soltadas.
        """
        self.mmu.reset()
        self.cpu.reset()
        self.display.clear()
        self.timer.reset()
        self.keypad.reset()

    # ========== Carga de programas ==========

    def load_program(self, data: bytes | bytearray | list[int], address: int | None = None) -> None:
        """
        Carga una imagen de programa y deja la VM lista para ejecutarla.

        Primero comprueba que cabe; si no, lanza el error sin tocar nada. Si
        cabe, reinicia todo el estado, copia los bytes y pone PC = address.

        Args:
            data: Imagen del programa
            address: Dirección de carga (por defecto config.program_start, 0x200)

        Raises:
            OutOfBoundsError: Si address + len(data) > tamaño de memoria
        """
        start = self.config.program_start if address is None else address
        # Validación antes de reset: un fallo no debe alterar el estado
        if start < 0 or start + len(data) > self.mmu.size:
            raise OutOfBoundsError(start, len(data), self.mmu.size)

        self.reset()
        self.mmu.load(data, start)
        self.cpu.registers.set_pc(start)
        logger.info(f"Programa cargado: {len(data)} bytes en 0x{start:04X}")

    def load_rom(self, rom_path: str | Path, address: int | None = None) -> Rom:
        """
        Lee una ROM de disco y la carga.

        Args:
            rom_path: Ruta al archivo ROM
            address: Dirección de carga opcional

        Returns:
            La Rom leída

        Raises:
            FileNotFoundError: Si el archivo no existe
            IOError: Si hay un error al leer el archivo
            ValueError: Si la ROM está vacía o no cabe en memoria
        """
        rom = Rom(rom_path)
        start = self.config.program_start if address is None else address
        if not rom.fits(self.config, start):
            logger.error(
                f"La ROM {rom.get_name()} ({rom.get_size()} bytes) no cabe a partir "
                f"de 0x{start:04X}: máximo {self.mmu.size - start} bytes"
            )
            raise OutOfBoundsError(start, rom.get_size(), self.mmu.size)
        self.load_program(rom.get_data(), start)
        self._rom = rom
        return rom

    def get_rom(self) -> Rom | None:
        return self._rom

    # ========== Interfaz con el host ==========

    def step(self) -> int | None:
        """
        Ejecuta un ciclo de instrucción.

        Returns:
            Palabra ejecutada, o None si la CPU está esperando una tecla

        Raises:
            UnknownOpcodeError, StackOverflowError, StackUnderflowError
        """
        return self.cpu.step()

    def tick_timers(self) -> None:
        """Un tick de 60 Hz de los timers (DT y ST)"""
        self.timer.tick()

    def get_display(self) -> bytes:
        """Copia inmutable de la pantalla (row-major, 1 byte 0/1 por píxel)"""
        return self.display.get_snapshot()

    def set_key(self, key: int, pressed: bool) -> None:
        """
        Cambia el estado de una tecla.

        Args:
            key: Código 0x0-0xF
            pressed: True = pulsada, False = soltada
        """
        self.keypad.set_key(key, pressed)

    @property
    def sound_timer(self) -> int:
        return self.timer.read_sound()

    @property
    def delay_timer(self) -> int:
        return self.timer.read_delay()

    def is_sound_active(self) -> bool:
        return self.timer.is_sound_active()

    @property
    def awaiting_key(self) -> bool:
        """True si la CPU está detenida en Fx0A esperando una tecla"""
        return self.cpu.waiting_for_key

    @property
    def registers(self) -> Registers:
        return self.cpu.registers

    # ========== Depuración ==========

    def dump_state(self) -> dict[str, Any]:
        """
        Volcado del estado de la VM.

        Returns:
            Diccionario con PC, I, SP, DT, ST, V0-VF, pila y teclado
        """
        regs = self.cpu.registers
        return {
            "pc": regs.get_pc(),
            "i": regs.get_i(),
            "sp": self.cpu.sp,
            "dt": self.timer.read_delay(),
            "st": self.timer.read_sound(),
            "v": list(regs.v),
            "stack": self.cpu.get_stack(),
            "keys": self.keypad.get_state(),
            "awaiting_key": self.cpu.waiting_for_key,
        }

    def format_state(self) -> str:
        """Volcado del estado en texto, una línea por campo"""
        state = self.dump_state()
        registers = " ".join(f"V{idx:X}={value:02X}" for idx, value in enumerate(state["v"]))
        stack = " ".join(f"{addr:03X}" for addr in state["stack"]) or "-"
        keys = "".join(f"{idx:X}" for idx, pressed in enumerate(state["keys"]) if pressed) or "-"
        return "\n".join([
            f"PC: 0x{state['pc']:04X}",
            f"I:  0x{state['i']:04X}",
            f"SP: {state['sp']}",
            f"DT: 0x{state['dt']:02X}",
            f"ST: 0x{state['st']:02X}",
            f"Registros: {registers}",
            f"Pila: {stack}",
            f"Teclas: {keys}",
            f"Esperando tecla: {'sí' if state['awaiting_key'] else 'no'}",
        ])

    # ========== Bucle de host ==========

    def run(
        self,
        scale: int = 10,
        max_frames: int | None = None,
        renderer: Any = None,
        beeper: Any = None,
    ) -> int:
        """
        Ejecuta el bucle principal con ventana pygame.

        Por cada frame (1/60 s):
        1. Procesa eventos de pygame (teclado -> Keypad, cerrar ventana)
        2. Ejecuta cpu_hz/60 instrucciones y un tick de timers (SystemClock)
        3. Si la pantalla cambió, la renderiza
        4. Activa o para el tono según ST
        5. Espera al siguiente frame

        Args:
            scale: Factor de escala de la ventana
            max_frames: Número máximo de frames (None = hasta cerrar la ventana)
            renderer: Renderer a usar (por defecto uno nuevo de pygame)
            beeper: Beeper a usar (por defecto uno nuevo de pygame.mixer)

        Returns:
            Número de frames ejecutados

        Raises:
            RuntimeError: Si pygame no está disponible
            UnknownOpcodeError, StackOverflowError, StackUnderflowError
        """
        if renderer is None:
            from .gpu.renderer import Renderer

            renderer = Renderer(self.config.display_width, self.config.display_height, scale=scale)
        if beeper is None:
            from .io.beeper import Beeper

            beeper = Beeper()

        clock = SystemClock(self)
        frames = 0
        self.running = True

        try:
            while self.running:
                if not renderer.handle_events(self.keypad):
                    break

                clock.run_frame()

                if self.display.get_frame_ready_and_reset():
                    renderer.render_frame(self.get_display())

                beeper.update(self.is_sound_active())
                renderer.tick(clock.frame_rate)

                frames += 1
                if max_frames is not None and frames >= max_frames:
                    break
        finally:
            self.running = False
            beeper.stop()
            renderer.close()

        logger.info(f"Bucle terminado tras {frames} frames ({clock.get_total_cycles()} ciclos)")
        return frames
