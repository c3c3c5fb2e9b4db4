"""
Setup script de Chipi-8.

El núcleo es Python puro: no hay extensiones que compilar. La ventana y el
sonido usan pygame-ce; el renderizado y la generación del tono usan NumPy.

Uso:
    pip install -e .
    pip install -e .[test]
"""

from pathlib import Path

from setuptools import find_packages, setup

# Obtener el directorio raíz del proyecto
project_root = Path(__file__).parent.absolute()

setup(
    name="chipi8",
    version="0.1.0",
    description="Intérprete educativo de Chip-8",
    packages=find_packages(include=["chipi8", "chipi8.*"]),
    py_modules=["main"],
    python_requires=">=3.10",
    install_requires=[
        "pygame-ce>=2.1",
        "numpy>=1.22",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "chipi8=main:main",
        ],
    },
    zip_safe=False,
)
