"""
Rom - Carga de programas Chip-8 desde disco

Los programas Chip-8 se distribuyen como volcados binarios sin cabecera
(`.ch8`, `.c8` o sin extensión). No hay nada que parsear: el contenido del
fichero se copia tal cual en memoria a partir de 0x200.

La VM no hace nunca E/S de ficheros. Esta clase lee el archivo y entrega los
bytes; la validación de tamaño la hace la MMU al cargar.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..config import VMConfig

logger = logging.getLogger(__name__)


class Rom:
    """
    Imagen de un programa Chip-8 leída de disco.
    """

    def __init__(self, rom_path: str | Path) -> None:
        """
        Lee la ROM desde el archivo especificado.

        Args:
            rom_path: Ruta al archivo ROM

        Raises:
            FileNotFoundError: Si el archivo no existe
            IOError: Si hay un error al leer el archivo
            ValueError: Si el archivo está vacío
        """
        path = Path(rom_path)

        if not path.exists():
            raise FileNotFoundError(f"ROM no encontrada: {rom_path}")

        try:
            with open(path, "rb") as f:
                self._data = bytes(f.read())
        except IOError as e:
            raise IOError(f"Error al leer ROM: {rom_path}") from e

        if not self._data:
            raise ValueError(f"ROM vacía: {rom_path}")

        self._name = path.name
        logger.info(f"ROM leída: {self._name} ({len(self._data)} bytes)")

    def get_data(self) -> bytes:
        return self._data

    def get_size(self) -> int:
        return len(self._data)

    def get_name(self) -> str:
        return self._name

    def fits(self, config: VMConfig, address: int | None = None) -> bool:
        """
        Indica si la ROM cabe en memoria a partir de la dirección de carga.

        Args:
            config: Configuración de la VM
            address: Dirección de carga (por defecto config.program_start)

        Returns:
            True si address + tamaño <= tamaño de memoria
        """
        start = config.program_start if address is None else address
        return start + len(self._data) <= config.memory_size
