"""
GPU - Pantalla del Chip-8

Este módulo contiene los componentes relacionados con la pantalla:
- Display: Buffer de píxeles monocromo (64x32) con dibujo de sprites XOR
- Renderer: Ventana de visualización usando Pygame
"""

from .display import Display

try:
    from .renderer import Renderer
    __all__ = ["Display", "Renderer"]
except ImportError:
    # Si pygame no está instalado, Renderer no estará disponible
    __all__ = ["Display"]
