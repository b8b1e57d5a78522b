from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable, Iterator, Mapping

from caseapi.config.loader import load_yaml_mapping
from caseapi.core.errors import CaseNotFoundError, ConfigError
from caseapi.models.case import Case
from caseapi.models.reward import CaseReward, reward_from_mapping


class CaseCatalog:
    """Ordered, read-only collection of cases keyed by case id."""

    def __init__(self, cases: Iterable[Case] = ()) -> None:
        self._cases: dict[str, Case] = {}
        for case in cases:
            if case.case_id in self._cases:
                raise ConfigError("duplicate case id", path=f"cases.{case.case_id}")
            self._cases[case.case_id] = case

    def __contains__(self, case_id: object) -> bool:
        return case_id in self._cases

    def __iter__(self) -> Iterator[Case]:
        return iter(self._cases.values())

    def __len__(self) -> int:
        return len(self._cases)

    def get(self, case_id: str) -> Case | None:
        return self._cases.get(case_id)

    def require(self, case_id: str) -> Case:
        case = self._cases.get(case_id)
        if case is None:
            raise CaseNotFoundError(case_id)
        return case

    @property
    def case_ids(self) -> list[str]:
        return list(self._cases)


def _reward(entry: Any, *, path: str, index: int) -> CaseReward:
    if not isinstance(entry, Mapping):
        raise ConfigError("reward must be a mapping", path=path)
    try:
        return reward_from_mapping(entry, index=index)
    except (TypeError, ValueError) as e:
        raise ConfigError(str(e), path=path) from e


def _case(case_id: str, raw: Any) -> Case:
    path = f"cases.{case_id}"
    if not isinstance(raw, Mapping):
        raise ConfigError("case must be a mapping", path=path)

    rewards_raw = raw.get("rewards") or []
    if not isinstance(rewards_raw, list):
        raise ConfigError("must be a list", path=f"{path}.rewards")
    rewards = tuple(
        _reward(entry, path=f"{path}.rewards[{i}]", index=i) for i, entry in enumerate(rewards_raw)
    )

    item = raw.get("item")
    if not isinstance(item, str) or not item:
        raise ConfigError("must be a non-empty Base64 item stack", path=f"{path}.item")

    glowing = raw.get("glowing", False)
    if not isinstance(glowing, bool):
        raise ConfigError("must be true or false", path=f"{path}.glowing")

    permission = raw.get("permission")
    try:
        return Case(
            case_id=case_id,
            display_name=str(raw.get("display_name") or case_id),
            item_stack_base64=item,
            price=int(raw.get("price", 0)),
            with_glowing=glowing,
            permission=str(permission) if permission else None,
            rewards=rewards,
        )
    except (TypeError, ValueError) as e:
        raise ConfigError(str(e), path=path) from e


def catalog_from_mapping(raw: Mapping[str, Any]) -> CaseCatalog:
    cases_raw = raw.get("cases")
    if cases_raw is None:
        cases_raw = {}
    if not isinstance(cases_raw, Mapping):
        raise ConfigError("must be a mapping of case id -> case", path="cases")

    cases = []
    for case_id, case_raw in cases_raw.items():
        if not isinstance(case_id, str) or not case_id:
            raise ConfigError("case id must be a non-empty string", path="cases")
        cases.append(_case(case_id, case_raw))
    return CaseCatalog(cases)


def load_catalog(path: str | Path) -> CaseCatalog:
    return catalog_from_mapping(load_yaml_mapping(path))
