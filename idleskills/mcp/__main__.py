"""CLI entry point: python -m idleskills.mcp <game_module>"""

from __future__ import annotations

import sys

from loguru import logger


def main() -> None:
    if len(sys.argv) < 2:
        print("Usage: python -m idleskills.mcp <game_module>", file=sys.stderr)
        print("Example: python -m idleskills.mcp examples.woodcutting_example", file=sys.stderr)
        sys.exit(1)

    module_path = sys.argv[1]

    # stdout carries the MCP protocol; logs go to stderr only
    logger.remove()
    logger.add(sys.stderr, level="WARNING")

    # Redirect stdout to stderr during module loading in case define_game() prints
    real_stdout = sys.stdout
    sys.stdout = sys.stderr
    try:
        from idleskills.cli import load_game

        definition = load_game(module_path)
    finally:
        sys.stdout = real_stdout

    from idleskills.mcp.server import create_server

    server = create_server(definition)
    server.run(transport="stdio")


if __name__ == "__main__":
    main()
