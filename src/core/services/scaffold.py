"""`agxcl init`: create a new project skeleton."""

from __future__ import annotations

from pathlib import Path

from adapters.project_config import CONFIG_FILENAME, write_project_config
from core.domain.errors import ProjectError, ProjectExists
from core.domain.models import ChainType, CompilerSettings, NetworkProfile, ProjectConfig
from core.services.compiler import CONTRACT_SUFFIX, CONTRACTS_DIR

PROJECT_DIRS = (CONTRACTS_DIR, "tests", "scripts")

DEFAULT_NETWORKS: dict[str, str] = {
    "development": "http://localhost:8001",
    "testnet": "https://api.testnet.agefix.com",
    "mainnet": "https://api.mainnet.agefix.com",
}

SAMPLE_CONTRACT = """\
// AGXCL Smart Contract for {name}
contract {name} {{
    mapping(address => uint256) public balances;

    event Transfer(address indexed from, address indexed to, uint256 value);

    function transfer(address to, uint256 amount) public {{
        require(balances[msg.sender] >= amount, "Insufficient balance");
        balances[msg.sender] -= amount;
        balances[to] += amount;
        emit Transfer(msg.sender, to, amount);
    }}
}}
"""


def default_project_config(name: str) -> ProjectConfig:
    return ProjectConfig(
        name=name,
        version="1.0.0",
        networks={
            network: NetworkProfile(endpoint=endpoint, chain_type=ChainType.PUBLIC)
            for network, endpoint in DEFAULT_NETWORKS.items()
        },
        compiler=CompilerSettings(version="0.8.0"),
    )


def init_project(name: str, base_dir: Path) -> Path:
    """Create `<base_dir>/<name>` with a sample contract and config; return its path."""

    # The name doubles as the contract identifier.
    if not name.isidentifier():
        raise ProjectError(f"Invalid project name {name!r}: use letters, digits and underscores")

    project_path = base_dir / name
    if project_path.exists() and (not project_path.is_dir() or any(project_path.iterdir())):
        raise ProjectExists(project_path)

    for sub in PROJECT_DIRS:
        (project_path / sub).mkdir(parents=True, exist_ok=True)

    contract_path = project_path / CONTRACTS_DIR / f"{name}{CONTRACT_SUFFIX}"
    contract_path.write_text(SAMPLE_CONTRACT.format(name=name), encoding="utf-8")
    write_project_config(default_project_config(name), project_path / CONFIG_FILENAME)
    return project_path
