"""Self-check de ponto.

Ejecuta:
- compileall
- pytest
- smoke run del CLI (`day`) con un día conocido (saldo CLT -8)

Exit code:
- 0 si todo pasa
- distinto de 0 si algo falla

Uso:
    python scripts/selfcheck.py
"""

from __future__ import annotations

import json
import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]


def run(cmd: list[str]) -> str:
    print("\n$", " ".join(cmd))
    proc = subprocess.run(cmd, cwd=str(ROOT), check=True, capture_output=True, text=True)
    if proc.stdout:
        print(proc.stdout.rstrip())
    return proc.stdout


def main() -> int:
    try:
        run([sys.executable, "-m", "compileall", "-q", "ponto", "tests"])
        run([sys.executable, "-m", "pytest", "-q"])

        out = run(
            [
                sys.executable,
                "-m",
                "ponto.cli",
                "day",
                "--fecha",
                "2025-12-01",
                "--batidas",
                "08:13,12:11,14:11,17:56",
                "--escala",
                "08:00-12:00,14:00-18:00",
                "--json",
            ]
        )
        rec = json.loads(out)
        if rec.get("net_balance_clt_minutes") != -8:
            print(f"\n[FAIL] smoke: saldo CLT inesperado {rec.get('net_balance_clt_minutes')!r}")
            return 1
        print("\n[OK] selfcheck passed")
        return 0
    except subprocess.CalledProcessError as e:
        print(f"\n[FAIL] selfcheck failed: {e}")
        if e.stderr:
            print(e.stderr)
        return int(e.returncode or 1)


if __name__ == "__main__":
    raise SystemExit(main())
