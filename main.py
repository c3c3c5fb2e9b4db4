#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Chipi-8 - Intérprete de Chip-8
Punto de entrada principal del emulador
"""

import argparse
import logging
import sys

from chipi8 import Chip8, VMConfig

# Configurar logging básico
# ERROR: Solo errores fatales. --verbose sube a INFO y --debug a DEBUG.
logging.basicConfig(
    level=logging.ERROR,
    format="%(message)s",
    force=True,  # Forzar reconfiguración
)


def build_parser() -> argparse.ArgumentParser:
    """Argumentos de la línea de comandos"""
    parser = argparse.ArgumentParser(
        description="Chipi-8 - Intérprete educativo de Chip-8"
    )
    parser.add_argument(
        "rom",
        nargs="?",
        type=str,
        help="Ruta al archivo ROM (.ch8)",
    )
    parser.add_argument(
        "--hz",
        type=int,
        default=VMConfig.cpu_hz,
        help=f"Instrucciones por segundo (por defecto {VMConfig.cpu_hz})",
    )
    parser.add_argument(
        "--scale",
        type=int,
        default=10,
        help="Factor de escala de la ventana (por defecto 10)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Semilla del generador aleatorio (Cxkk) para ejecuciones reproducibles",
    )
    parser.add_argument(
        "--quirk-shift",
        action="store_true",
        help="8xy6/8xyE desplazan Vy en lugar de Vx (COSMAC VIP)",
    )
    parser.add_argument(
        "--quirk-logic",
        action="store_true",
        help="8xy1/8xy2/8xy3 ponen VF a 0 (COSMAC VIP)",
    )
    parser.add_argument(
        "--quirk-load-store",
        action="store_true",
        help="Fx55/Fx65 incrementan I (COSMAC VIP)",
    )
    parser.add_argument(
        "--quirk-jump",
        action="store_true",
        help="Bnnn salta a nnn + Vx en lugar de nnn + V0 (CHIP-48)",
    )
    parser.add_argument(
        "--clip-sprites",
        action="store_true",
        help="Recortar los sprites en los bordes en lugar de hacer wrap-around",
    )
    parser.add_argument(
        "--max-frames",
        type=int,
        default=None,
        help="Terminar tras N frames (útil para pruebas)",
    )
    parser.add_argument(
        "--dump-state",
        action="store_true",
        help="Mostrar registros, pila y timers al terminar",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Activar modo debug con trazas detalladas de instrucciones",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Activar modo verbose (muestra mensajes INFO)",
    )
    return parser


def config_from_args(args: argparse.Namespace) -> VMConfig:
    """Traduce los argumentos a una VMConfig"""
    return VMConfig(
        cpu_hz=args.hz,
        random_seed=args.seed,
        shift_uses_vy=args.quirk_shift,
        logic_resets_vf=args.quirk_logic,
        load_store_increments_i=args.quirk_load_store,
        jump_uses_vx=args.quirk_jump,
        sprite_wrap=not args.clip_sprites,
    )


def main(argv: list[str] | None = None) -> None:
    """Función principal del emulador"""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Si se especifica --debug, cambiar nivel de logging
    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)
    elif args.verbose:
        logging.getLogger().setLevel(logging.INFO)

    print("Chipi-8 - Sistema Iniciado")
    print("=" * 50)

    if not args.rom:
        print("Error: Se requiere especificar una ROM")
        print("Uso: python main.py <ruta_a_rom.ch8> [--hz N] [--debug]")
        sys.exit(1)

    try:
        chip8 = Chip8(config_from_args(args))
        rom = chip8.load_rom(args.rom)
    except (FileNotFoundError, IOError, ValueError) as e:
        print(f"\nError al cargar ROM: {e}")
        sys.exit(1)

    print(f"\nROM cargada: {rom.get_name()} ({rom.get_size()} bytes)")
    print(f"   CPU: {chip8.config.cpu_hz} Hz, timers: {chip8.config.timer_hz} Hz")
    if chip8.config.active_quirks:
        print(f"   Quirks: {', '.join(chip8.config.active_quirks)}")
    print("\nSistema listo para ejecutar (Escape para salir)\n")

    try:
        chip8.run(scale=args.scale, max_frames=args.max_frames)
    except (NotImplementedError, RuntimeError) as e:
        print(f"\nError de ejecución: {e}")
        if args.debug or args.verbose or args.dump_state:
            print(chip8.format_state())
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nInterrumpido por el usuario")

    if args.dump_state:
        print(chip8.format_state())


if __name__ == "__main__":
    main()
