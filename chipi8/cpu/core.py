"""
CPU (Central Processing Unit) - Intérprete Chip-8

La CPU del Chip-8 ejecuta instrucciones en un ciclo continuo:
1. Fetch: Lee la palabra de 16 bits (Big-Endian) apuntada por PC
2. Decode: Identifica la instrucción por su nibble alto y, en las familias
   compartidas, por el nibble bajo (8xyN) o el byte bajo (0nnn, ExNN, FxNN)
3. Increment: Avanza PC en 2 (todas las instrucciones miden 2 bytes)
4. Execute: Ejecuta la operación. Los saltos, CALL y RET sobrescriben PC;
   los saltos condicionales (skip) le suman 2 más.

Campos de la instrucción (notación de Cowgod):
- nnn: dirección de 12 bits (bits 0-11)
- kk: byte inmediato (bits 0-7)
- n: nibble (bits 0-3)
- x: registro en bits 8-11
- y: registro en bits 4-7

La CPU no tiene noción de tiempo real: el host llama a step() a la
frecuencia que quiera y, por separado, a Timer.tick() a 60 Hz.

Espera de tecla (Fx0A):
La instrucción no bloquea nunca el hilo del host. Se expresa como un flag de
estado (waiting_for_key). Mientras está activo, PC sigue apuntando a la
propia Fx0A y cada step() se limita a mirar el teclado. Cuando hay una
tecla, se guarda en Vx, se baja el flag y PC avanza a la siguiente
instrucción. Los timers siguen corriendo durante la espera.

Flags en VF (notación: VF se escribe DESPUÉS del resultado, así que si x = F
el flag prevalece):
- 8xy4 ADD: VF = 1 si hay carry (suma > 0xFF), 0 si no.
- 8xy5 SUB: VF = 1 si NO hay borrow (Vx >= Vy), 0 si hay borrow.
  Ejemplo: 5 - 3 -> VF = 1; 3 - 5 -> VF = 0 (Vx = 0xFE).
  Con Vx == Vy no hay borrow, así que VF = 1.
- 8xy7 SUBN: VF = 1 si Vy >= Vx, 0 si no.
- 8xy6 SHR: VF = bit 0 antes del desplazamiento.
- 8xyE SHL: VF = bit 7 antes del desplazamiento.
- Dxyn DRW: VF = 1 si algún píxel encendido se apaga (colisión).

Fuente: Cowgod's Chip-8 Technical Reference - 3.1 Standard Chip-8 Instructions
"""

from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING, Callable

from ..errors import StackOverflowError, StackUnderflowError, UnknownOpcodeError
from .registers import Registers

if TYPE_CHECKING:
    from ..config import VMConfig
    from ..gpu.display import Display
    from ..io.keypad import Keypad
    from ..io.timer import Timer
    from ..memory.mmu import MMU

logger = logging.getLogger(__name__)

# Tamaño de una instrucción en bytes
INSTRUCTION_SIZE = 2


def _x(opcode: int) -> int:
    return (opcode >> 8) & 0x0F


def _y(opcode: int) -> int:
    return (opcode >> 4) & 0x0F


def _n(opcode: int) -> int:
    return opcode & 0x000F


def _kk(opcode: int) -> int:
    return opcode & 0x00FF


def _nnn(opcode: int) -> int:
    return opcode & 0x0FFF


class CPU:
    """
    CPU del Chip-8.

    Gestiona el ciclo Fetch-Decode-Execute, los registros y la pila de
    retorno. Mantiene referencias a la memoria, la pantalla, los timers y el
    teclado, que son los únicos efectos externos de las instrucciones.
    """

    def __init__(
        self,
        mmu: MMU,
        display: Display,
        timer: Timer,
        keypad: Keypad,
        config: VMConfig,
        rng: random.Random | None = None,
    ) -> None:
        """
        Inicializa la CPU.

        Args:
            mmu: Memoria de la VM
            display: Buffer de pantalla
            timer: Timers DT/ST
            keypad: Estado del teclado
            config: Configuración (profundidad de pila, quirks, dirección de carga)
            rng: Generador aleatorio para Cxkk (por defecto uno sembrado con
                config.random_seed)
        """
        self.mmu = mmu
        self.display = display
        self.timer = timer
        self.keypad = keypad
        self.config = config
        self.registers = Registers(config.program_start)

        # Pila de retorno: array fijo + puntero (SP = número de entradas ocupadas)
        self._stack_depth: int = config.stack_depth
        self.stack: list[int] = [0] * self._stack_depth
        self.sp: int = 0

        # Espera de tecla (Fx0A)
        self.waiting_for_key: bool = False
        self._wait_register: int = 0

        self._rng = rng if rng is not None else random.Random(config.random_seed)

        # Tabla de despacho por nibble alto (las familias 0, 8, E y F tienen
        # su propia tabla por nibble o byte bajo)
        self._opcode_table: dict[int, Callable[[int], None]] = {
            0x1: self._op_jp_addr,       # 1nnn - JP addr
            0x2: self._op_call_addr,     # 2nnn - CALL addr
            0x3: self._op_se_vx_byte,    # 3xkk - SE Vx, byte
            0x4: self._op_sne_vx_byte,   # 4xkk - SNE Vx, byte
            0x5: self._op_se_vx_vy,      # 5xy0 - SE Vx, Vy
            0x6: self._op_ld_vx_byte,    # 6xkk - LD Vx, byte
            0x7: self._op_add_vx_byte,   # 7xkk - ADD Vx, byte
            0x9: self._op_sne_vx_vy,     # 9xy0 - SNE Vx, Vy
            0xA: self._op_ld_i_addr,     # Annn - LD I, addr
            0xB: self._op_jp_v0_addr,    # Bnnn - JP V0, addr
            0xC: self._op_rnd,           # Cxkk - RND Vx, byte
            0xD: self._op_drw,           # Dxyn - DRW Vx, Vy, nibble
        }

        # Familia 0: por palabra completa (el resto es SYS addr)
        self._table_0: dict[int, Callable[[int], None]] = {
            0x00E0: self._op_cls,
            0x00EE: self._op_ret,
        }

        # Familia 8: aritmética/lógica, por nibble bajo
        self._table_8: dict[int, Callable[[int], None]] = {
            0x0: self._op_ld_vx_vy,
            0x1: self._op_or,
            0x2: self._op_and,
            0x3: self._op_xor,
            0x4: self._op_add_vx_vy,
            0x5: self._op_sub_vx_vy,
            0x6: self._op_shr,
            0x7: self._op_subn,
            0xE: self._op_shl,
        }

        # Familia E: teclado, por byte bajo
        self._table_e: dict[int, Callable[[int], None]] = {
            0x9E: self._op_skp,
            0xA1: self._op_sknp,
        }

        # Familia F: timers, teclado y memoria, por byte bajo
        self._table_f: dict[int, Callable[[int], None]] = {
            0x07: self._op_ld_vx_dt,
            0x0A: self._op_ld_vx_k,
            0x15: self._op_ld_dt_vx,
            0x18: self._op_ld_st_vx,
            0x1E: self._op_add_i_vx,
            0x29: self._op_ld_f_vx,
            0x33: self._op_ld_b_vx,
            0x55: self._op_ld_i_vx,
            0x65: self._op_ld_vx_i,
        }

        logger.info("CPU inicializada")

    def reset(self) -> None:
        """Registros, pila y espera de tecla a su estado inicial"""
        self.registers.reset(self.config.program_start)
        self.stack = [0] * self._stack_depth
        self.sp = 0
        self.waiting_for_key = False
        self._wait_register = 0

    # ========== Ciclo de instrucción ==========

    def step(self) -> int | None:
        """
        Ejecuta un ciclo de instrucción.

        Si la CPU espera una tecla (Fx0A), intenta resolver la espera y no
        lee ninguna instrucción nueva.

        Returns:
            La palabra de instrucción ejecutada, o None si el ciclo se
            consumió esperando una tecla

        Raises:
            UnknownOpcodeError: Si la palabra no es ninguna instrucción.
                Se lanza antes de modificar el estado.
            StackOverflowError: CALL con la pila llena
            StackUnderflowError: RET con la pila vacía

        Tras un error, PC sigue apuntando a la instrucción que falló.
        """
        if self.waiting_for_key:
            return self._resolve_key_wait()

        addr = self.registers.get_pc()
        opcode = self.mmu.read_word(addr)

        logger.debug(f"PC=0x{addr:04X} Opcode=0x{opcode:04X}")

        handler = self.decode(opcode, addr)
        self.registers.set_pc(addr + INSTRUCTION_SIZE)
        try:
            handler(opcode)
        except (StackOverflowError, StackUnderflowError):
            self.registers.set_pc(addr)
            raise
        return opcode

    def decode(self, opcode: int, addr: int | None = None) -> Callable[[int], None]:
        """
        Devuelve el manejador de una palabra de instrucción.

        Args:
            opcode: Palabra de 16 bits
            addr: Dirección de la instrucción (solo para el mensaje de error)

        Returns:
            Función que ejecuta la instrucción (recibe la palabra completa)

        Raises:
            UnknownOpcodeError: Si la palabra no corresponde a ninguna instrucción
        """
        handler: Callable[[int], None] | None
        family = opcode >> 12

        if family == 0x0:
            handler = self._table_0.get(opcode, self._op_sys)
        elif family == 0x8:
            handler = self._table_8.get(_n(opcode))
        elif family == 0xE:
            handler = self._table_e.get(_kk(opcode))
        elif family == 0xF:
            handler = self._table_f.get(_kk(opcode))
        elif family in (0x5, 0x9) and _n(opcode) != 0:
            handler = None
        else:
            handler = self._opcode_table[family]

        if handler is None:
            pc = self.registers.get_pc() if addr is None else addr
            raise UnknownOpcodeError(opcode, pc)
        return handler

    def _skip(self) -> None:
        """Salta la siguiente instrucción (PC += 2)"""
        self.registers.set_pc(self.registers.get_pc() + INSTRUCTION_SIZE)

    # ========== Pila ==========

    def _push(self, value: int) -> None:
        """
        Empuja una dirección de retorno.

        Raises:
            StackOverflowError: Si la pila ya tiene stack_depth entradas
        """
        if self.sp >= self._stack_depth:
            raise StackOverflowError(self.registers.get_pc() - INSTRUCTION_SIZE, self._stack_depth)
        self.stack[self.sp] = value & 0xFFFF
        self.sp += 1

    def _pop(self) -> int:
        """
        Saca la última dirección de retorno.

        Raises:
            StackUnderflowError: Si la pila está vacía
        """
        if self.sp == 0:
            raise StackUnderflowError(self.registers.get_pc() - INSTRUCTION_SIZE)
        self.sp -= 1
        return self.stack[self.sp]

    def get_stack(self) -> list[int]:
        """Entradas ocupadas de la pila (de la más antigua a la más reciente)"""
        return self.stack[:self.sp]

    # ========== Familia 0 ==========

    def _op_cls(self, opcode: int) -> None:
        """00E0 - CLS: apaga todos los píxeles"""
        self.display.clear()
        logger.debug("CLS")

    def _op_ret(self, opcode: int) -> None:
        """
        00EE - RET: vuelve de una subrutina.

        PC = dirección en la cima de la pila, SP -= 1.
        """
        target = self._pop()
        self.registers.set_pc(target)
        logger.debug(f"RET -> PC=0x{target:04X}")

    def _op_sys(self, opcode: int) -> None:
        """
        0nnn - SYS addr: salto a rutina máquina del COSMAC VIP.

        Los intérpretes modernos la ignoran; aquí es un NOP.
        """
        logger.debug(f"SYS 0x{_nnn(opcode):03X} ignorado")

    # ========== Saltos y subrutinas ==========

    def _op_jp_addr(self, opcode: int) -> None:
        """1nnn - JP addr: PC = nnn"""
        self.registers.set_pc(_nnn(opcode))

    def _op_call_addr(self, opcode: int) -> None:
        """
        2nnn - CALL addr: llama a una subrutina.

        Guarda en la pila el PC actual (que ya apunta a la instrucción
        siguiente al CALL) y salta a nnn.

        Ejemplo:
        - CALL 0x300 en 0x200
        - Después del fetch: PC = 0x202
        - Se guarda 0x202 en la pila, PC = 0x300
        """
        return_addr = self.registers.get_pc()
        self._push(return_addr)
        self.registers.set_pc(_nnn(opcode))
        logger.debug(
            f"CALL 0x{_nnn(opcode):03X} -> PUSH return 0x{return_addr:04X} (SP={self.sp})"
        )

    def _op_jp_v0_addr(self, opcode: int) -> None:
        """
        Bnnn - JP V0, addr: PC = nnn + V0.

        Con el quirk jump_uses_vx (CHIP-48/SUPER-CHIP) la instrucción se
        interpreta como Bxnn: PC = xnn + Vx.
        """
        offset_reg = _x(opcode) if self.config.jump_uses_vx else 0
        self.registers.set_pc(_nnn(opcode) + self.registers.get_v(offset_reg))

    # ========== Saltos condicionales ==========

    def _op_se_vx_byte(self, opcode: int) -> None:
        """3xkk - SE Vx, byte: salta si Vx == kk"""
        if self.registers.get_v(_x(opcode)) == _kk(opcode):
            self._skip()

    def _op_sne_vx_byte(self, opcode: int) -> None:
        """4xkk - SNE Vx, byte: salta si Vx != kk"""
        if self.registers.get_v(_x(opcode)) != _kk(opcode):
            self._skip()

    def _op_se_vx_vy(self, opcode: int) -> None:
        """5xy0 - SE Vx, Vy: salta si Vx == Vy"""
        if self.registers.get_v(_x(opcode)) == self.registers.get_v(_y(opcode)):
            self._skip()

    def _op_sne_vx_vy(self, opcode: int) -> None:
        """9xy0 - SNE Vx, Vy: salta si Vx != Vy"""
        if self.registers.get_v(_x(opcode)) != self.registers.get_v(_y(opcode)):
            self._skip()

    # ========== Cargas y aritmética con inmediato ==========

    def _op_ld_vx_byte(self, opcode: int) -> None:
        """6xkk - LD Vx, byte"""
        self.registers.set_v(_x(opcode), _kk(opcode))

    def _op_add_vx_byte(self, opcode: int) -> None:
        """
        7xkk - ADD Vx, byte: Vx = Vx + kk.

        No toca VF aunque haya carry.
        """
        x = _x(opcode)
        self.registers.set_v(x, self.registers.get_v(x) + _kk(opcode))

    # ========== Familia 8: registro a registro ==========

    def _op_ld_vx_vy(self, opcode: int) -> None:
        """8xy0 - LD Vx, Vy"""
        self.registers.set_v(_x(opcode), self.registers.get_v(_y(opcode)))

    def _logic(self, opcode: int, result: int) -> None:
        self.registers.set_v(_x(opcode), result)
        if self.config.logic_resets_vf:
            self.registers.set_vf(0)

    def _op_or(self, opcode: int) -> None:
        """8xy1 - OR Vx, Vy"""
        regs = self.registers
        self._logic(opcode, regs.get_v(_x(opcode)) | regs.get_v(_y(opcode)))

    def _op_and(self, opcode: int) -> None:
        """8xy2 - AND Vx, Vy"""
        regs = self.registers
        self._logic(opcode, regs.get_v(_x(opcode)) & regs.get_v(_y(opcode)))

    def _op_xor(self, opcode: int) -> None:
        """8xy3 - XOR Vx, Vy"""
        regs = self.registers
        self._logic(opcode, regs.get_v(_x(opcode)) ^ regs.get_v(_y(opcode)))

    def _op_add_vx_vy(self, opcode: int) -> None:
        """
        8xy4 - ADD Vx, Vy: Vx = Vx + Vy, VF = carry.

        Si la suma supera 0xFF, VF = 1 y Vx se queda con los 8 bits bajos.

        Ejemplo: 0xFF + 0x01 -> Vx = 0x00, VF = 1
        """
        x = _x(opcode)
        total = self.registers.get_v(x) + self.registers.get_v(_y(opcode))
        self.registers.set_v(x, total)
        self.registers.set_vf(1 if total > 0xFF else 0)

    def _op_sub_vx_vy(self, opcode: int) -> None:
        """
        8xy5 - SUB Vx, Vy: Vx = Vx - Vy, VF = NOT borrow.

        VF = 1 si Vx >= Vy (no hay borrow), 0 en caso contrario.
        """
        x = _x(opcode)
        vx = self.registers.get_v(x)
        vy = self.registers.get_v(_y(opcode))
        self.registers.set_v(x, vx - vy)
        self.registers.set_vf(1 if vx >= vy else 0)

    def _op_shr(self, opcode: int) -> None:
        """
        8xy6 - SHR Vx {, Vy}: desplaza a la derecha 1 bit.

        VF = bit menos significativo antes del desplazamiento. El operando es
        Vx, o Vy con el quirk shift_uses_vy.
        """
        x = _x(opcode)
        source = self.registers.get_v(_y(opcode) if self.config.shift_uses_vy else x)
        self.registers.set_v(x, source >> 1)
        self.registers.set_vf(source & 0x01)

    def _op_subn(self, opcode: int) -> None:
        """
        8xy7 - SUBN Vx, Vy: Vx = Vy - Vx, VF = NOT borrow.

        VF = 1 si Vy >= Vx, 0 en caso contrario.
        """
        x = _x(opcode)
        vx = self.registers.get_v(x)
        vy = self.registers.get_v(_y(opcode))
        self.registers.set_v(x, vy - vx)
        self.registers.set_vf(1 if vy >= vx else 0)

    def _op_shl(self, opcode: int) -> None:
        """
        8xyE - SHL Vx {, Vy}: desplaza a la izquierda 1 bit.

        VF = bit más significativo antes del desplazamiento.
        """
        x = _x(opcode)
        source = self.registers.get_v(_y(opcode) if self.config.shift_uses_vy else x)
        self.registers.set_v(x, source << 1)
        self.registers.set_vf((source >> 7) & 0x01)

    # ========== Registro índice ==========

    def _op_ld_i_addr(self, opcode: int) -> None:
        """Annn - LD I, addr"""
        self.registers.set_i(_nnn(opcode))

    def _op_add_i_vx(self, opcode: int) -> None:
        """Fx1E - ADD I, Vx (no toca VF)"""
        self.registers.set_i(self.registers.get_i() + self.registers.get_v(_x(opcode)))

    def _op_ld_f_vx(self, opcode: int) -> None:
        """
        Fx29 - LD F, Vx: I = dirección del glifo del dígito Vx.

        Solo cuenta el nibble bajo de Vx.
        """
        self.registers.set_i(self.mmu.font_address_for(self.registers.get_v(_x(opcode))))

    # ========== Aleatorio ==========

    def _op_rnd(self, opcode: int) -> None:
        """Cxkk - RND Vx, byte: Vx = byte aleatorio AND kk"""
        self.registers.set_v(_x(opcode), self._rng.randint(0, 0xFF) & _kk(opcode))

    # ========== Pantalla ==========

    def _op_drw(self, opcode: int) -> None:
        """
        Dxyn - DRW Vx, Vy, nibble: dibuja un sprite.

        Lee n bytes de memoria a partir de I y los dibuja en (Vx, Vy) con XOR.
        VF = 1 si algún píxel encendido se apagó, 0 si no.
        """
        regs = self.registers
        base = regs.get_i()
        rows = [self.mmu.read_byte(base + offset) for offset in range(_n(opcode))]
        collision = self.display.draw_sprite(regs.get_v(_x(opcode)), regs.get_v(_y(opcode)), rows)
        regs.set_vf(1 if collision else 0)

    # ========== Teclado ==========

    def _op_skp(self, opcode: int) -> None:
        """Ex9E - SKP Vx: salta si la tecla Vx está pulsada"""
        if self.keypad.is_pressed(self.registers.get_v(_x(opcode))):
            self._skip()

    def _op_sknp(self, opcode: int) -> None:
        """ExA1 - SKNP Vx: salta si la tecla Vx NO está pulsada"""
        if not self.keypad.is_pressed(self.registers.get_v(_x(opcode))):
            self._skip()

    def _op_ld_vx_k(self, opcode: int) -> None:
        """
        Fx0A - LD Vx, K: espera a que se pulse una tecla y guarda su código.

        Si ya hay una tecla pulsada se resuelve en este mismo ciclo (la de
        código más bajo). Si no, se activa waiting_for_key y PC vuelve a
        apuntar a esta instrucción hasta que llegue una pulsación.
        """
        x = _x(opcode)
        key = self.keypad.get_first_pressed()
        if key is not None:
            self.registers.set_v(x, key)
            return

        self.keypad.arm_wait()
        self.waiting_for_key = True
        self._wait_register = x
        self.registers.set_pc(self.registers.get_pc() - INSTRUCTION_SIZE)
        logger.debug(f"Fx0A: esperando tecla para V{x:X}")

    def _resolve_key_wait(self) -> int | None:
        """
        Un ciclo de espera de Fx0A.

        Returns:
            La palabra Fx0A si la espera terminó en este ciclo, None si sigue
        """
        key = self.keypad.take_latched_press()
        if key is None:
            key = self.keypad.get_first_pressed()
        if key is None:
            return None

        x = self._wait_register
        self.registers.set_v(x, key)
        self.waiting_for_key = False
        self._skip()
        logger.debug(f"Fx0A: tecla 0x{key:X} -> V{x:X}")
        return 0xF00A | (x << 8)

    # ========== Timers ==========

    def _op_ld_vx_dt(self, opcode: int) -> None:
        """Fx07 - LD Vx, DT"""
        self.registers.set_v(_x(opcode), self.timer.read_delay())

    def _op_ld_dt_vx(self, opcode: int) -> None:
        """Fx15 - LD DT, Vx"""
        self.timer.write_delay(self.registers.get_v(_x(opcode)))

    def _op_ld_st_vx(self, opcode: int) -> None:
        """Fx18 - LD ST, Vx"""
        self.timer.write_sound(self.registers.get_v(_x(opcode)))

    # ========== Memoria ==========

    def _op_ld_b_vx(self, opcode: int) -> None:
        """
        Fx33 - LD B, Vx: guarda Vx en BCD.

        [I] = centenas, [I+1] = decenas, [I+2] = unidades.

        Ejemplo: Vx = 234 -> [I]=2, [I+1]=3, [I+2]=4
        """
        value = self.registers.get_v(_x(opcode))
        base = self.registers.get_i()
        self.mmu.write_byte(base, value // 100)
        self.mmu.write_byte(base + 1, (value // 10) % 10)
        self.mmu.write_byte(base + 2, value % 10)

    def _op_ld_i_vx(self, opcode: int) -> None:
        """
        Fx55 - LD [I], Vx: guarda V0..Vx (inclusive) en memoria a partir de I.

        Con el quirk load_store_increments_i, I queda en I + x + 1.
        """
        x = _x(opcode)
        base = self.registers.get_i()
        for reg in range(x + 1):
            self.mmu.write_byte(base + reg, self.registers.get_v(reg))
        if self.config.load_store_increments_i:
            self.registers.set_i(base + x + 1)

    def _op_ld_vx_i(self, opcode: int) -> None:
        """Fx65 - LD Vx, [I]: carga V0..Vx desde memoria (mismo quirk que Fx55)"""
        x = _x(opcode)
        base = self.registers.get_i()
        for reg in range(x + 1):
            self.registers.set_v(reg, self.mmu.read_byte(base + reg))
        if self.config.load_store_increments_i:
            self.registers.set_i(base + x + 1)
