"""
Configuración global de pytest para Chipi-8

Este archivo configura el entorno de testing para evitar bloqueos:
- Configura pygame en modo headless (sin ventanas ni audio)
- Añade la raíz del proyecto al sys.path
- Proporciona fixtures comunes (VM limpia, VM con semilla fija)
"""

import os
import random
import sys
from pathlib import Path

import pytest

# Agregar el directorio raíz al sys.path para importar módulos
project_root = Path(__file__).parent.parent.absolute()
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

# Configurar pygame en modo headless (sin ventanas) para evitar bloqueos
os.environ['SDL_VIDEODRIVER'] = 'dummy'
os.environ['SDL_AUDIODRIVER'] = 'dummy'
os.environ['PYGAME_HIDE_SUPPORT_PROMPT'] = '1'

from chipi8 import Chip8, VMConfig  # noqa: E402


@pytest.fixture
def vm() -> Chip8:
    """VM con la configuración por defecto"""
    return Chip8()


@pytest.fixture
def seeded_vm() -> Chip8:
    """VM con generador aleatorio determinista (para Cxkk)"""
    return Chip8(VMConfig(), rng=random.Random(1234))
