"""Script de ejecución.

Permite ejecutar la CLI con `python -m main` desde `src/` durante desarrollo,
además del script `nimbus` instalado.
"""

from __future__ import annotations

import sys

# Rich prints box-drawing characters; cp1252 consoles on Windows choke on them.
if sys.platform == "win32":
    sys.stdout.reconfigure(encoding="utf-8")
    sys.stderr.reconfigure(encoding="utf-8")

from cli.main import run


def main() -> None:
    run()


if __name__ == "__main__":
    main()
