"""
Tests unitarios para saltos y saltos condicionales de la CPU.

Valida:
- 1nnn (JP addr) y Bnnn (JP V0, addr), con el quirk jump_uses_vx
- 3xkk, 4xkk, 5xy0 y 9xy0 (skip: PC += 2 adicional)
"""

from chipi8 import Chip8, VMConfig
from tests.helpers_cpu import load_program, run_steps


class TestJumpAbsolute:
    """Tests para JP addr"""

    def test_jp_addr(self, vm: Chip8):
        """1ABC -> PC = 0xABC"""
        load_program(vm, [0x1ABC])
        vm.step()
        assert vm.registers.get_pc() == 0xABC, (
            f"PC debe ser 0x0ABC después de JP, es 0x{vm.registers.get_pc():04X}"
        )

    def test_self_jump_is_stable(self, vm: Chip8):
        """1200 en 0x200: PC vuelve siempre a 0x200"""
        load_program(vm, [0x1200])
        run_steps(vm, 10)
        assert vm.registers.get_pc() == 0x200


class TestJumpOffset:
    """Tests para JP V0, addr"""

    def test_jp_v0_addr(self, vm: Chip8):
        """V0 = 0x10, B300 -> PC = 0x310"""
        load_program(vm, [0x6010, 0xB300])
        run_steps(vm, 2)
        assert vm.registers.get_pc() == 0x310

    def test_jp_ignores_vx_by_default(self, vm: Chip8):
        """B2xx usa V0 aunque V2 tenga valor"""
        load_program(vm, [0x6004, 0x6208, 0xB300])
        run_steps(vm, 3)
        assert vm.registers.get_pc() == 0x304

    def test_jump_uses_vx_quirk(self):
        """Con jump_uses_vx, B3xx salta a 3xx + V3"""
        vm = Chip8(VMConfig(jump_uses_vx=True))
        load_program(vm, [0x6004, 0x6308, 0xB310])
        run_steps(vm, 3)
        assert vm.registers.get_pc() == 0x318


class TestConditionalSkips:
    """Tests para SE/SNE"""

    def test_se_vx_byte_taken(self, vm: Chip8):
        load_program(vm, [0x6533, 0x3533])
        run_steps(vm, 2)
        assert vm.registers.get_pc() == 0x206

    def test_se_vx_byte_not_taken(self, vm: Chip8):
        load_program(vm, [0x6533, 0x3534])
        run_steps(vm, 2)
        assert vm.registers.get_pc() == 0x204

    def test_sne_vx_byte_taken(self, vm: Chip8):
        load_program(vm, [0x6533, 0x4534])
        run_steps(vm, 2)
        assert vm.registers.get_pc() == 0x206

    def test_sne_vx_byte_not_taken(self, vm: Chip8):
        load_program(vm, [0x6533, 0x4533])
        run_steps(vm, 2)
        assert vm.registers.get_pc() == 0x204

    def test_se_vx_vy(self, vm: Chip8):
        load_program(vm, [0x6109, 0x6209, 0x5120])
        run_steps(vm, 3)
        assert vm.registers.get_pc() == 0x208

    def test_se_vx_vy_not_equal(self, vm: Chip8):
        load_program(vm, [0x6109, 0x620A, 0x5120])
        run_steps(vm, 3)
        assert vm.registers.get_pc() == 0x206

    def test_sne_vx_vy(self, vm: Chip8):
        load_program(vm, [0x6109, 0x620A, 0x9120])
        run_steps(vm, 3)
        assert vm.registers.get_pc() == 0x208

    def test_sne_vx_vy_equal(self, vm: Chip8):
        load_program(vm, [0x6109, 0x6209, 0x9120])
        run_steps(vm, 3)
        assert vm.registers.get_pc() == 0x206

    def test_skip_jumps_over_instruction(self, vm: Chip8):
        """La instrucción saltada no se ejecuta"""
        load_program(vm, [0x3000, 0x6177, 0x6288])
        run_steps(vm, 2)
        assert vm.registers.get_v(1) == 0x00
        assert vm.registers.get_v(2) == 0x88
