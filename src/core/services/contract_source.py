"""Checks ligeros sobre fuentes `.agxcl`.

No es un parser: solo descarta ficheros que claramente no son un contrato
antes de enviarlos a la API.
"""

from __future__ import annotations

import re

_CONTRACT_NAME = re.compile(r"contract\s+(\w+)")


def check_contract_structure(code: str) -> list[str]:
    """Return the structural problems found in `code` (empty when none)."""

    errors: list[str] = []
    if "contract " not in code:
        errors.append("Contract declaration not found")
    if "{" not in code or "}" not in code:
        errors.append("Invalid contract structure")
    return errors


def extract_contract_name(code: str) -> str | None:
    match = _CONTRACT_NAME.search(code)
    return match.group(1) if match else None
