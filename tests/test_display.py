"""
Tests para el buffer de pantalla y la instrucción Dxyn.

Valida:
- Composición XOR: dibujar dos veces lo mismo deja la pantalla igual
- VF = 1 solo si algún píxel encendido se apaga
- Wrap-around (por defecto) y recorte (sprite_wrap=False) en los bordes
- La coordenada inicial siempre se reduce módulo ancho/alto
- get_display() devuelve una copia
"""

from chipi8 import Chip8, VMConfig
from chipi8.gpu.display import Display
from tests.helpers_cpu import load_program, run_steps


class TestDisplayBuffer:
    """Tests directos de Display"""

    def test_initial_state(self):
        display = Display()
        assert display.width == 64
        assert display.height == 32
        assert display.count_lit() == 0

    def test_draw_single_row(self):
        """0xA5 = 10100101 enciende las columnas 0, 2, 5 y 7"""
        display = Display()
        collision = display.draw_sprite(0, 0, [0xA5])

        assert collision is False
        assert [display.get_pixel(x, 0) for x in range(8)] == [1, 0, 1, 0, 0, 1, 0, 1]

    def test_xor_twice_restores(self):
        display = Display()
        display.draw_sprite(10, 5, [0xFF, 0x81, 0xFF])
        before = display.get_snapshot()

        display.draw_sprite(20, 7, [0x3C, 0x42])
        assert display.draw_sprite(20, 7, [0x3C, 0x42]) is True
        assert display.get_snapshot() == before

    def test_collision_only_on_turn_off(self):
        """Encender píxeles nuevos junto a otros no es colisión"""
        display = Display()
        display.draw_sprite(0, 0, [0xF0])
        assert display.draw_sprite(0, 0, [0x0F]) is False
        assert display.draw_sprite(0, 0, [0x01]) is True

    def test_wrap_horizontal(self):
        """Un sprite en x = 60 continúa en x = 0"""
        display = Display()
        display.draw_sprite(60, 0, [0xFF])
        row = display.get_rows()[0]
        assert row[60:64] == [1, 1, 1, 1]
        assert row[0:4] == [1, 1, 1, 1]
        assert display.count_lit() == 8

    def test_wrap_vertical(self):
        display = Display()
        display.draw_sprite(0, 31, [0x80, 0x80])
        assert display.get_pixel(0, 31) == 1
        assert display.get_pixel(0, 0) == 1

    def test_clip_horizontal(self):
        display = Display(wrap=False)
        display.draw_sprite(60, 0, [0xFF])
        assert display.count_lit() == 4
        assert display.get_rows()[0][0:4] == [0, 0, 0, 0]

    def test_clip_vertical(self):
        display = Display(wrap=False)
        display.draw_sprite(0, 31, [0x80, 0x80])
        assert display.count_lit() == 1

    def test_start_coordinate_always_wraps(self):
        """x = 70 equivale a x = 6 incluso recortando"""
        display = Display(wrap=False)
        display.draw_sprite(70, 33, [0x80])
        assert display.get_pixel(6, 1) == 1

    def test_snapshot_is_copy(self):
        display = Display()
        snapshot = display.get_snapshot()
        display.draw_sprite(0, 0, [0xFF])
        assert snapshot == bytes(64 * 32)
        assert len(display.get_snapshot()) == 64 * 32

    def test_frame_ready_flag(self):
        display = Display()
        assert display.get_frame_ready_and_reset() is True
        assert display.get_frame_ready_and_reset() is False

        display.draw_sprite(0, 0, [0x80])
        assert display.get_frame_ready_and_reset() is True
        assert display.get_frame_ready_and_reset() is False

    def test_custom_dimensions(self):
        display = Display(128, 64)
        display.draw_sprite(127, 63, [0xC0])
        assert display.get_pixel(127, 63) == 1
        assert display.get_pixel(0, 63) == 1


class TestDrawInstruction:
    """Tests de Dxyn a través de la CPU"""

    def test_draw_font_glyph(self, vm: Chip8):
        """
        Glifo "0" (F0 90 90 90 F0) en (0, 0): 14 píxeles encendidos, VF = 0.
        """
        load_program(vm, [0x6000, 0xF029, 0xD005])
        run_steps(vm, 3)

        assert vm.registers.get_vf() == 0
        assert vm.display.count_lit() == 14
        rows = vm.display.get_rows()
        assert rows[0][:4] == [1, 1, 1, 1]
        assert rows[1][:4] == [1, 0, 0, 1]

    def test_draw_twice_sets_vf_and_clears(self, vm: Chip8):
        load_program(vm, [0xA050, 0xD005, 0xD005])
        run_steps(vm, 3)

        assert vm.registers.get_vf() == 1
        assert vm.get_display() == bytes(64 * 32)

    def test_draw_uses_vx_vy(self, vm: Chip8):
        """V1 = 10, V2 = 20 -> el sprite empieza en (10, 20)"""
        load_program(vm, [0x610A, 0x6214, 0xA050, 0xD121])
        run_steps(vm, 4)
        assert vm.display.get_pixel(10, 20) == 1
        assert vm.display.get_pixel(9, 20) == 0

    def test_draw_zero_rows(self, vm: Chip8):
        load_program(vm, [0xA050, 0xD000])
        run_steps(vm, 2)
        assert vm.display.count_lit() == 0
        assert vm.registers.get_vf() == 0

    def test_draw_clips_with_config(self):
        vm = Chip8(VMConfig(sprite_wrap=False))
        load_program(vm, [0x603C, 0xA050, 0xD015])
        run_steps(vm, 3)
        # Glifo "0" recortado en x = 60: cabe entero (4 píxeles de ancho)
        assert vm.display.count_lit() == 14

        vm2 = Chip8(VMConfig(sprite_wrap=False))
        load_program(vm2, [0x603E, 0xA050, 0xD015])
        run_steps(vm2, 3)
        # En x = 62 solo quedan las columnas 62 y 63: 2 + 1 + 1 + 1 + 2
        assert vm2.display.count_lit() == 7
