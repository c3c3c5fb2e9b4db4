"""
Tests unitarios para las instrucciones de teclado.

Valida:
- Ex9E (SKP Vx) y ExA1 (SKNP Vx)
- Fx0A (LD Vx, K): la espera no bloquea; PC se queda en la instrucción,
  step() devuelve None y awaiting_key está activo hasta que llega una tecla
- Los timers siguen bajando durante la espera
"""

from chipi8 import Chip8
from tests.helpers_cpu import load_program, run_steps


class TestSkipOnKey:
    """Tests de Ex9E y ExA1"""

    def test_skp_pressed(self, vm: Chip8):
        load_program(vm, [0x6105, 0xE19E])
        vm.set_key(0x5, True)
        run_steps(vm, 2)
        assert vm.registers.get_pc() == 0x206

    def test_skp_not_pressed(self, vm: Chip8):
        load_program(vm, [0x6105, 0xE19E])
        run_steps(vm, 2)
        assert vm.registers.get_pc() == 0x204

    def test_sknp_not_pressed(self, vm: Chip8):
        load_program(vm, [0x6105, 0xE1A1])
        run_steps(vm, 2)
        assert vm.registers.get_pc() == 0x206

    def test_sknp_pressed(self, vm: Chip8):
        load_program(vm, [0x6105, 0xE1A1])
        vm.set_key(0x5, True)
        run_steps(vm, 2)
        assert vm.registers.get_pc() == 0x204

    def test_skp_uses_low_nibble(self, vm: Chip8):
        """Vx = 0x1A consulta la tecla 0xA"""
        load_program(vm, [0x611A, 0xE19E])
        vm.set_key(0xA, True)
        run_steps(vm, 2)
        assert vm.registers.get_pc() == 0x206

    def test_released_key(self, vm: Chip8):
        load_program(vm, [0x6105, 0xE19E])
        vm.set_key(0x5, True)
        vm.set_key(0x5, False)
        run_steps(vm, 2)
        assert vm.registers.get_pc() == 0x204


class TestWaitForKey:
    """Tests de Fx0A"""

    def test_wait_blocks_without_key(self, vm: Chip8):
        """Sin teclas, Fx0A deja la VM esperando y PC no avanza"""
        load_program(vm, [0xF30A, 0x6001])
        vm.step()

        assert vm.awaiting_key is True
        assert vm.registers.get_pc() == 0x200

        for _ in range(5):
            assert vm.step() is None, "step() debe devolver None durante la espera"
        assert vm.registers.get_pc() == 0x200
        assert vm.registers.get_v(0) == 0, "No debe ejecutarse nada más durante la espera"

    def test_wait_resolves_on_press(self, vm: Chip8):
        """Una pulsación durante la espera se guarda en Vx y PC avanza"""
        load_program(vm, [0xF30A, 0x6001])
        run_steps(vm, 2)

        vm.set_key(0xB, True)
        result = vm.step()

        assert result == 0xF30A
        assert vm.awaiting_key is False
        assert vm.registers.get_v(3) == 0xB
        assert vm.registers.get_pc() == 0x202

        vm.step()
        assert vm.registers.get_v(0) == 1

    def test_wait_catches_short_press(self, vm: Chip8):
        """Una pulsación y liberación entre dos ciclos no se pierde"""
        load_program(vm, [0xF30A])
        vm.step()

        vm.set_key(0x7, True)
        vm.set_key(0x7, False)
        vm.step()

        assert vm.awaiting_key is False
        assert vm.registers.get_v(3) == 0x7

    def test_key_already_held(self, vm: Chip8):
        """Si ya hay una tecla pulsada, Fx0A se resuelve en el mismo ciclo"""
        load_program(vm, [0xF20A])
        vm.set_key(0x9, True)
        vm.set_key(0x4, True)

        assert vm.step() == 0xF20A
        assert vm.awaiting_key is False
        assert vm.registers.get_v(2) == 0x4, "Debe elegirse la tecla de código más bajo"
        assert vm.registers.get_pc() == 0x202

    def test_timers_run_during_wait(self, vm: Chip8):
        """DT sigue bajando con tick_timers() aunque la CPU espere"""
        load_program(vm, [0x6010, 0xF015, 0xF10A])
        run_steps(vm, 3)
        assert vm.awaiting_key

        for _ in range(4):
            vm.tick_timers()
        assert vm.delay_timer == 0x0C

    def test_press_before_wait_is_ignored_once_released(self, vm: Chip8):
        """Una tecla pulsada y soltada antes de Fx0A no resuelve la espera"""
        load_program(vm, [0x6001, 0xF30A])
        vm.set_key(0x2, True)
        vm.set_key(0x2, False)
        run_steps(vm, 2)
        assert vm.awaiting_key

        vm.step()
        assert vm.awaiting_key
