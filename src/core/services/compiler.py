"""`agxcl compile`: enumera fuentes `.agxcl` y prepara `build/`.

Nota:
- No se genera bytecode; la compilación real la hace la API en el deploy.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from core.domain.errors import ContractNotFound, ContractsDirMissing, ProjectError

CONTRACT_SUFFIX = ".agxcl"
CONTRACTS_DIR = "contracts"
BUILD_DIR = "build"


@dataclass
class CompileSummary:
    contracts_dir: Path
    build_dir: Path
    contracts: list[Path] = field(default_factory=list)


def find_contracts(project_dir: Path) -> list[Path]:
    contracts_dir = project_dir / CONTRACTS_DIR
    if not contracts_dir.is_dir():
        raise ContractsDirMissing(contracts_dir)
    return sorted(p for p in contracts_dir.iterdir() if p.is_file() and p.suffix == CONTRACT_SUFFIX)


def compile_contracts(project_dir: Path) -> CompileSummary:
    contracts = find_contracts(project_dir)
    build_dir = project_dir / BUILD_DIR
    build_dir.mkdir(parents=True, exist_ok=True)
    return CompileSummary(contracts_dir=project_dir / CONTRACTS_DIR, build_dir=build_dir, contracts=contracts)


def pick_contract(project_dir: Path, explicit: Path | None = None) -> Path:
    """Contract file to deploy: `explicit` if given, else the first source in `contracts/`."""

    if explicit is not None:
        if not explicit.is_file():
            raise ContractNotFound(f"Contract file not found: {explicit}")
        return explicit
    contracts = find_contracts(project_dir)
    if not contracts:
        raise ContractNotFound(f"No {CONTRACT_SUFFIX} files found in contracts directory.")
    return contracts[0]


def read_contract(path: Path) -> str:
    """Source text of a contract file (UTF-8)."""

    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise ProjectError(f"Contract file is not valid UTF-8: {path}") from exc
    except OSError as exc:
        raise ContractNotFound(f"Cannot read contract file {path}: {exc.strerror or exc}") from exc
