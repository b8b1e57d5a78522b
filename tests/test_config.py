from __future__ import annotations

from pathlib import Path

import pytest

from caseapi.config import ConfigError, load_config

REPO_CONFIGS = Path(__file__).resolve().parents[1] / "configs"


def test_load_config_expands_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CASES_FILE", "shop/cases.yaml")
    monkeypatch.setenv("STORE_DIR", str(tmp_path / "data"))

    p = tmp_path / "app.yaml"
    p.write_text(
        """
catalog: ${CASES_FILE}
storage:
  backend: json
  path: ${STORE_DIR}/players.json
draw:
  seed: 42
logging:
  level: debug
""".lstrip(),
        encoding="utf-8",
    )

    cfg = load_config(p)
    assert cfg.catalog_path == tmp_path / "shop" / "cases.yaml"
    assert cfg.storage.backend == "json"
    assert cfg.storage.path == tmp_path / "data" / "players.json"
    assert cfg.draw.seed == 42
    assert cfg.logging.level == "DEBUG"


def test_load_config_missing_env_raises(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("CASES_FILE", raising=False)

    p = tmp_path / "app.yaml"
    p.write_text("catalog: ${CASES_FILE}\n", encoding="utf-8")

    with pytest.raises(ConfigError) as ei:
        load_config(p)

    assert "CASES_FILE" in str(ei.value)
    assert ei.value.path == "catalog"


def test_dotenv_next_to_config_is_loaded(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("CASEAPI_TEST_CATALOG", raising=False)
    (tmp_path / ".env").write_text("CASEAPI_TEST_CATALOG=from_dotenv.yaml\n", encoding="utf-8")
    p = tmp_path / "app.yaml"
    p.write_text("catalog: ${CASEAPI_TEST_CATALOG}\n", encoding="utf-8")

    cfg = load_config(p)
    assert cfg.catalog_path.name == "from_dotenv.yaml"


@pytest.mark.parametrize(
    ("body", "path"),
    [
        ("storage: {}\n", "catalog"),
        ("catalog: c.yaml\nstorage:\n  backend: redis\n", "storage.backend"),
        ("catalog: c.yaml\nstorage:\n  backend: json\n", "storage.path"),
        ("catalog: c.yaml\ndraw:\n  seed: abc\n", "draw.seed"),
        ("catalog: c.yaml\nlogging:\n  level: LOUD\n", "logging.level"),
        ("catalog: c.yaml\ndraw: [1, 2]\n", "draw"),
    ],
)
def test_invalid_config_names_key_path(tmp_path: Path, body: str, path: str) -> None:
    p = tmp_path / "app.yaml"
    p.write_text(body, encoding="utf-8")

    with pytest.raises(ConfigError) as ei:
        load_config(p)
    assert ei.value.path == path


def test_missing_file_and_non_mapping(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        load_config(tmp_path / "nope.yaml")

    p = tmp_path / "list.yaml"
    p.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(p)


def test_repo_configs_app_yaml_loadable() -> None:
    cfg = load_config(REPO_CONFIGS / "app.yaml")
    assert cfg.catalog_path == REPO_CONFIGS / "cases.yaml"
    assert cfg.storage.backend == "json"
