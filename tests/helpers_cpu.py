"""
Helpers para tests de CPU.

Los tests escriben programas como listas de palabras de 16 bits (tal y como
aparecen en la notación de Cowgod) y las cargan en 0x200 con load_program()
de la VM, que es el mismo camino que usa una ROM real.
"""

from typing import List

from chipi8 import Chip8

# Dirección de carga de los programas de test
TEST_EXEC_BASE = 0x200


def words_to_bytes(words: List[int]) -> bytes:
    """Convierte palabras de 16 bits a bytes Big-Endian"""
    out = bytearray()
    for word in words:
        out.append((word >> 8) & 0xFF)
        out.append(word & 0xFF)
    return bytes(out)


def load_program(vm: Chip8, words: List[int], start_addr: int = TEST_EXEC_BASE) -> None:
    """
    Carga un programa de test en la VM y deja PC apuntando a su inicio.

    Args:
        vm: VM donde cargar el programa (se reinicia)
        words: Palabras de instrucción, por ejemplo [0x6005, 0x610A]
        start_addr: Dirección de carga
    """
    vm.load_program(words_to_bytes(words), start_addr)

    # Verificación: leer de vuelta para confirmar la carga
    for i, word in enumerate(words):
        addr = start_addr + 2 * i
        read_back = vm.mmu.read_word(addr)
        if read_back != word:
            raise AssertionError(
                f"load_program: Verificación falló en 0x{addr:04X}: "
                f"esperado 0x{word:04X}, leído 0x{read_back:04X}"
            )


def run_steps(vm: Chip8, count: int) -> None:
    """Ejecuta count ciclos de instrucción"""
    for _ in range(count):
        vm.step()
