from __future__ import annotations

from pathlib import Path

import pytest

from caseapi.catalog import CaseCatalog, catalog_from_mapping, load_catalog
from caseapi.core.errors import CaseNotFoundError, ConfigError
from caseapi.models import CaseRewardType, DurationUnit

REPO_CONFIGS = Path(__file__).resolve().parents[1] / "configs"


def test_repo_catalog_loads() -> None:
    catalog = load_catalog(REPO_CONFIGS / "cases.yaml")
    assert catalog.case_ids == ["starter", "legendary"]

    legendary = catalog.require("legendary")
    assert legendary.with_glowing is True
    assert legendary.permission == "caseopening.case.legendary"
    assert [r.index for r in legendary.rewards] == [0, 1, 2]

    fly = legendary.rewards[1]
    assert fly.type is CaseRewardType.PERMISSION
    assert fly.raw_permission_duration == 12
    assert fly.permission_duration_unit is DurationUnit.HOURS

    vip = legendary.rewards[2]
    assert vip.is_limited and vip.remaining_draws == 10


def test_reward_errors_carry_key_path() -> None:
    raw = {
        "cases": {
            "c": {
                "item": "icon",
                "rewards": [
                    {"type": "gems", "chance": 1, "amount": 5},
                    {"type": "lootbox", "chance": 1},
                ],
            }
        }
    }
    with pytest.raises(ConfigError) as ei:
        catalog_from_mapping(raw)
    assert ei.value.path == "cases.c.rewards[1]"
    assert "lootbox" in str(ei.value)


def test_bad_duration_is_config_error() -> None:
    raw = {
        "cases": {
            "c": {
                "item": "icon",
                "rewards": [{"type": "permission", "chance": 1, "permission": "p", "duration": "12 parsecs"}],
            }
        }
    }
    with pytest.raises(ConfigError):
        catalog_from_mapping(raw)


def test_case_requires_item_and_non_negative_price() -> None:
    with pytest.raises(ConfigError) as ei:
        catalog_from_mapping({"cases": {"c": {"rewards": []}}})
    assert ei.value.path == "cases.c.item"

    with pytest.raises(ConfigError):
        catalog_from_mapping({"cases": {"c": {"item": "icon", "price": -1}}})


def test_flags_must_be_real_booleans() -> None:
    with pytest.raises(ConfigError) as ei:
        catalog_from_mapping({"cases": {"c": {"item": "icon", "glowing": "false"}}})
    assert ei.value.path == "cases.c.glowing"

    raw = {"cases": {"c": {"item": "icon", "rewards": [{"type": "gems", "chance": 1, "amount": 5, "broadcast": "false"}]}}}
    with pytest.raises(ConfigError) as ei:
        catalog_from_mapping(raw)
    assert ei.value.path == "cases.c.rewards[0]"

    ok = catalog_from_mapping(
        {"cases": {"c": {"item": "icon", "glowing": False, "rewards": [{"type": "gems", "chance": 1, "amount": 5, "broadcast": True}]}}}
    )
    assert ok.require("c").with_glowing is False
    assert ok.require("c").rewards[0].with_broadcast_message is True


def test_display_name_defaults_to_id_and_empty_catalog() -> None:
    catalog = catalog_from_mapping({"cases": {"plain": {"item": "icon"}}})
    assert catalog.require("plain").display_name == "plain"
    assert catalog.require("plain").permission is None

    assert len(catalog_from_mapping({})) == 0


def test_lookup_of_unknown_case() -> None:
    catalog = CaseCatalog()
    assert "x" not in catalog
    assert catalog.get("x") is None
    with pytest.raises(CaseNotFoundError):
        catalog.require("x")
