from __future__ import annotations

import json
from pathlib import Path

import pytest
from rich.console import Console

from cli.main import CliState
from core.config import AppSettings

API = "http://api.test"


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(_env_file=None, api_key=None, http_timeout_seconds=None)


@pytest.fixture
def config_document() -> dict:
    return {
        "name": "Demo",
        "version": "1.0.0",
        "networks": {
            "development": {"endpoint": API, "chainType": "public"},
            "privnet": {"endpoint": "http://private.test/", "chainType": "private"},
        },
        "compiler": {"version": "0.8.0"},
    }


@pytest.fixture
def project_dir(tmp_path: Path, config_document: dict) -> Path:
    project = tmp_path / "Demo"
    (project / "contracts").mkdir(parents=True)
    (project / "contracts" / "Demo.agxcl").write_text(
        "contract Demo { function ping() public {} }\n", encoding="utf-8"
    )
    (project / "agxcl.config.json").write_text(json.dumps(config_document), encoding="utf-8")
    return project


@pytest.fixture
def cli_state(settings: AppSettings, project_dir: Path) -> CliState:
    return CliState(
        console=Console(soft_wrap=True, width=200),
        settings=settings,
        config_path=project_dir / "agxcl.config.json",
    )
