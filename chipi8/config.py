"""
Configuración de la máquina virtual Chip-8

Todas las constantes "globales" del sistema (tamaño de memoria, dimensiones de
la pantalla, profundidad de la pila, fuente hexadecimal...) se inyectan en la
VM a través de VMConfig en lugar de estar fijadas en el código. Así se pueden
probar variantes y quirks sin tocar el núcleo.

Quirks soportados (divergencias históricas entre intérpretes):
- shift_uses_vy: 8xy6/8xyE desplazan Vy y guardan el resultado en Vx (COSMAC VIP).
  Si es False, se desplaza Vx ignorando Vy (CHIP-48 / Cowgod).
- logic_resets_vf: 8xy1/8xy2/8xy3 ponen VF a 0 (COSMAC VIP).
- load_store_increments_i: Fx55/Fx65 dejan I = I + x + 1 (COSMAC VIP).
- jump_uses_vx: Bnnn salta a nnn + Vx en lugar de nnn + V0 (CHIP-48).
- sprite_wrap: los píxeles que se salen de la pantalla aparecen por el lado
  opuesto (True) o se recortan (False). La coordenada inicial siempre se
  reduce módulo ancho/alto.

Fuente: Cowgod's Chip-8 Technical Reference, sección 2.4 (Fuente) y 3.1
"""

from __future__ import annotations

from dataclasses import dataclass, field

# Fuente hexadecimal: 16 glifos (0-F), 5 bytes cada uno, 4 píxeles de ancho
FONT_SET: bytes = bytes([
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
])

# Bytes por glifo de la fuente
FONT_GLYPH_SIZE = 5

# Región reservada del intérprete (0x000 - 0x1FF)
RESERVED_END = 0x200

# Frecuencia fija de los timers (delay y sound)
TIMER_HZ = 60


@dataclass
class VMConfig:
    """
    Parámetros de construcción de la VM.

    Los valores por defecto reproducen el Chip-8 original: 4KB de memoria,
    programa en 0x200, pantalla de 64x32, pila de 16 niveles.
    """

    memory_size: int = 4096
    program_start: int = RESERVED_END
    font_address: int = 0x050
    font: bytes = FONT_SET
    display_width: int = 64
    display_height: int = 32
    stack_depth: int = 16
    cpu_hz: int = 700
    timer_hz: int = TIMER_HZ
    random_seed: int | None = None

    # Quirks
    shift_uses_vy: bool = False
    logic_resets_vf: bool = False
    load_store_increments_i: bool = False
    jump_uses_vx: bool = False
    sprite_wrap: bool = True

    # Nombres de los quirks activos (solo informativo, se rellena en validate)
    active_quirks: list[str] = field(default_factory=list, compare=False)

    def validate(self) -> "VMConfig":
        """
        Comprueba que la configuración es coherente.

        Returns:
            La propia configuración (permite encadenar)

        Raises:
            ValueError: Si algún parámetro está fuera de rango
        """
        if self.memory_size <= 0 or self.memory_size > 0x10000:
            raise ValueError(f"Tamaño de memoria inválido: {self.memory_size}")
        if not 0 <= self.program_start < self.memory_size:
            raise ValueError(
                f"Dirección de carga 0x{self.program_start:04X} fuera de memoria "
                f"({self.memory_size} bytes)"
            )
        if len(self.font) != 16 * FONT_GLYPH_SIZE:
            raise ValueError(
                f"La fuente debe tener {16 * FONT_GLYPH_SIZE} bytes, tiene {len(self.font)}"
            )
        if self.font_address < 0 or self.font_address + len(self.font) > self.memory_size:
            raise ValueError(f"La fuente no cabe en 0x{self.font_address:04X}")
        if self.font_address + len(self.font) > self.program_start:
            raise ValueError(
                f"La fuente (0x{self.font_address:04X}) se solapa con el programa "
                f"(0x{self.program_start:04X}): debe quedar en la zona reservada"
            )
        if self.display_width <= 0 or self.display_height <= 0:
            raise ValueError(
                f"Dimensiones de pantalla inválidas: {self.display_width}x{self.display_height}"
            )
        if self.stack_depth <= 0:
            raise ValueError(f"Profundidad de pila inválida: {self.stack_depth}")
        if self.cpu_hz <= 0:
            raise ValueError(f"Frecuencia de CPU inválida: {self.cpu_hz}")
        if self.timer_hz <= 0:
            raise ValueError(f"Frecuencia de timers inválida: {self.timer_hz}")

        self.active_quirks = [
            name
            for name in (
                "shift_uses_vy",
                "logic_resets_vf",
                "load_store_increments_i",
                "jump_uses_vx",
            )
            if getattr(self, name)
        ]
        if not self.sprite_wrap:
            self.active_quirks.append("sprite_clip")
        return self
