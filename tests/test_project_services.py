from __future__ import annotations

import json
from pathlib import Path

import pytest

from core.domain.errors import ContractNotFound, ContractsDirMissing, ProjectError, ProjectExists
from core.services.compiler import compile_contracts, pick_contract, read_contract
from core.services.contract_source import check_contract_structure, extract_contract_name
from core.services.scaffold import init_project


def test_init_project_layout(tmp_path: Path) -> None:
    project = init_project("Token", tmp_path)

    assert project == tmp_path / "Token"
    for sub in ("contracts", "tests", "scripts"):
        assert (project / sub).is_dir()
    source = (project / "contracts" / "Token.agxcl").read_text(encoding="utf-8")
    assert source.startswith("// AGXCL Smart Contract for Token")
    assert extract_contract_name(source) == "Token"
    assert check_contract_structure(source) == []

    config = json.loads((project / "agxcl.config.json").read_text(encoding="utf-8"))
    assert config["name"] == "Token"
    assert config["version"] == "1.0.0"
    assert config["networks"]["testnet"]["endpoint"] == "https://api.testnet.agefix.com"
    assert config["networks"]["mainnet"]["endpoint"] == "https://api.mainnet.agefix.com"


def test_init_refuses_non_empty_directory(tmp_path: Path) -> None:
    (tmp_path / "Token").mkdir()
    (tmp_path / "Token" / "README").write_text("mine", encoding="utf-8")

    with pytest.raises(ProjectExists):
        init_project("Token", tmp_path)


def test_init_accepts_empty_directory(tmp_path: Path) -> None:
    (tmp_path / "Token").mkdir()

    assert (init_project("Token", tmp_path) / "agxcl.config.json").is_file()


@pytest.mark.parametrize("name", ["my-token", "1token", "", "a b"])
def test_init_rejects_invalid_names(tmp_path: Path, name: str) -> None:
    with pytest.raises(ProjectError):
        init_project(name, tmp_path)


def test_compile_lists_contracts(project_dir: Path) -> None:
    (project_dir / "contracts" / "Another.agxcl").write_text("contract Another {}", encoding="utf-8")
    (project_dir / "contracts" / "notes.txt").write_text("ignored", encoding="utf-8")

    summary = compile_contracts(project_dir)

    assert [p.name for p in summary.contracts] == ["Another.agxcl", "Demo.agxcl"]
    assert summary.build_dir.is_dir()


def test_compile_without_contracts_dir(tmp_path: Path) -> None:
    with pytest.raises(ContractsDirMissing):
        compile_contracts(tmp_path)
    assert not (tmp_path / "build").exists()


def test_pick_contract(project_dir: Path, tmp_path: Path) -> None:
    assert pick_contract(project_dir).name == "Demo.agxcl"
    with pytest.raises(ContractNotFound):
        pick_contract(project_dir, tmp_path / "missing.agxcl")

    for path in (project_dir / "contracts").iterdir():
        path.unlink()
    with pytest.raises(ContractNotFound):
        pick_contract(project_dir)


def test_read_contract(project_dir: Path) -> None:
    assert read_contract(project_dir / "contracts" / "Demo.agxcl").startswith("contract Demo")


def test_read_contract_failures_are_project_errors(project_dir: Path) -> None:
    binary = project_dir / "contracts" / "Binary.agxcl"
    binary.write_bytes(b"\xff\xfe\x00contract")

    with pytest.raises(ProjectError, match="not valid UTF-8"):
        read_contract(binary)
    with pytest.raises(ContractNotFound, match="Cannot read contract file"):
        read_contract(project_dir / "contracts")


@pytest.mark.parametrize(
    ("code", "errors"),
    [
        ("contract A { }", []),
        ("function f() {}", ["Contract declaration not found"]),
        ("contract A", ["Invalid contract structure"]),
        ("", ["Contract declaration not found", "Invalid contract structure"]),
    ],
)
def test_contract_structure_placeholder(code: str, errors: list[str]) -> None:
    assert check_contract_structure(code) == errors


def test_extract_contract_name_missing() -> None:
    assert extract_contract_name("// nothing here") is None
