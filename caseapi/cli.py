"""``caseapi`` command line: inspect the catalog and simulate openings.

Rewards are handed to a :class:`~caseapi.gateway.RecordingGateway` that
grants every permission, so the CLI is a dry-run harness for a catalog
and a player store, not a game-server binding.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Sequence
from uuid import UUID

from caseapi.about import __title__, artifact_name
from caseapi.config import AppConfig, ConfigError, load_config
from caseapi.core.errors import CaseNotFoundError
from caseapi.events import CaseOpenCompleteEvent, CaseOpeningEventListener
from caseapi.gateway import RecordingGateway
from caseapi.observability import configure_logging, get_logger
from caseapi.service import CaseService, build_service

log = get_logger("caseapi.cli")


def _log_level(value: str) -> str:
    level = value.upper()
    if not isinstance(logging.getLevelName(level), int):
        raise argparse.ArgumentTypeError(f"unknown log level: {value!r}")
    return level


def _player(value: str) -> UUID:
    try:
        return UUID(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a player UUID: {value!r}") from None


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="caseapi", description=f"{__title__} case opening tools")
    parser.add_argument("--config", type=Path, default=Path("configs/app.yaml"), help="Path to the YAML config")
    parser.add_argument("--log-level", type=_log_level, default=None, help="Logging level (overrides logging.level)")
    parser.add_argument("--version", action="version", version=artifact_name())

    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("cases", help="List cases and their rewards")
    sub.add_parser("print-config", help="Load and print the expanded config")

    p = sub.add_parser("preview", help="Show a case preview with win chances")
    p.add_argument("player", type=_player)
    p.add_argument("case_id")

    p = sub.add_parser("open", help="Open a case for a player")
    p.add_argument("player", type=_player)
    p.add_argument("case_id")
    p.add_argument("--keep", action="store_true", help="Do not remove a case from the player")

    p = sub.add_parser("give", help="Give a player cases")
    p.add_argument("player", type=_player)
    p.add_argument("case_id")
    p.add_argument("amount", type=int)

    p = sub.add_parser("balance", help="Show a player's jewelry and cases")
    p.add_argument("player", type=_player)

    p = sub.add_parser("stats", help="Show opening statistics")
    p.add_argument("player", type=_player, nargs="?")

    return parser


def _emit(payload: Any) -> None:
    sys.stdout.write(json.dumps(payload, ensure_ascii=False, indent=2))
    sys.stdout.write("\n")


class _LastOpen(CaseOpeningEventListener):
    def __init__(self) -> None:
        self.event: CaseOpenCompleteEvent | None = None

    def on_case_open_complete(self, event: CaseOpenCompleteEvent) -> None:
        self.event = event


def _config_dump(cfg: AppConfig) -> dict[str, Any]:
    return {
        "catalog": str(cfg.catalog_path),
        "storage": {
            "backend": cfg.storage.backend,
            "path": str(cfg.storage.path) if cfg.storage.path else None,
        },
        "draw": {"seed": cfg.draw.seed},
        "logging": {"level": cfg.logging.level},
        "broadcast": {"template": cfg.broadcast.template},
    }


def _cases_dump(service: CaseService) -> list[dict[str, Any]]:
    out = []
    for case in service.catalog:
        total = case.total_chance
        out.append(
            {
                "id": case.case_id,
                "name": case.display_name,
                "price": case.price,
                "glowing": case.with_glowing,
                "permission": case.permission,
                "rewards": [
                    {
                        "reward": r.describe(),
                        "win_chance": round(r.win_chance(total), 6),
                        "remaining_draws": r.remaining_draws,
                    }
                    for r in case.rewards
                ],
            }
        )
    return out


async def _run(ns: argparse.Namespace, service: CaseService, gateway: RecordingGateway) -> int:
    if ns.command == "cases":
        _emit(_cases_dump(service))
        return 0

    if ns.command == "preview":
        await service.open_case_preview(ns.player, ns.case_id)
        shown = gateway.calls_named("show_preview")
        if not shown:
            _emit({"case": ns.case_id, "found": False})
            return 1
        preview = shown[-1].args["preview"]
        _emit(
            {
                "case": preview.case.case_id,
                "found": True,
                "entries": [
                    {"reward": e.reward.describe(), "win_chance": round(e.win_chance, 6), "available": e.available}
                    for e in preview.entries
                ],
            }
        )
        return 0

    if ns.command == "open":
        last = _LastOpen()
        service.register_listener(last)
        if ns.keep:
            ok = await service.open_case_without_remove(ns.player, ns.case_id)
        else:
            ok = await service.open_case_with_remove(ns.player, ns.case_id)
        service.unregister_listener(last)
        _emit(
            {
                "opened": ok,
                "case": ns.case_id,
                "reward": last.event.reward.describe() if ok and last.event else None,
                "remaining": await service.get_player_cases(ns.player, ns.case_id),
            }
        )
        return 0 if ok else 1

    if ns.command == "give":
        await service.add_cases(ns.player, ns.case_id, ns.amount)
        _emit({"case": ns.case_id, "amount": await service.get_player_cases(ns.player, ns.case_id)})
        return 0

    if ns.command == "balance":
        _emit(
            {
                "player": str(ns.player),
                "jewelry": await service.get_jewelry(ns.player),
                "cases": {
                    case_id: await service.get_player_cases(ns.player, case_id)
                    for case_id in service.catalog.case_ids
                },
            }
        )
        return 0

    if ns.command == "stats":
        payload: dict[str, Any] = {"total_opened": await service.get_total_cases_opened()}
        if ns.player is not None:
            payload["player"] = str(ns.player)
            payload["opened_by_player"] = await service.get_total_cases_opened_by_player(ns.player)
        _emit(payload)
        return 0

    raise AssertionError(f"unhandled command {ns.command!r}")


def main(argv: Sequence[str] | None = None) -> int:
    """Console entrypoint referenced by pyproject.toml.

    Exit codes: 0 ok, 1 the requested action did not happen, 2 bad config
    or arguments.
    """

    parser = _build_parser()
    try:
        ns = parser.parse_args(list(argv) if argv is not None else None)
    except SystemExit as e:
        code = e.code
        return int(code) if isinstance(code, int) else 2

    configure_logging(level=ns.log_level or "INFO")

    try:
        cfg = load_config(ns.config)
    except ConfigError as e:
        log.error("config_invalid", error=str(e))
        sys.stderr.write(f"config error: {e}\n")
        return 2

    if ns.log_level is None:
        configure_logging(level=cfg.logging.level)

    if ns.command == "print-config":
        _emit(_config_dump(cfg))
        return 0

    gateway = RecordingGateway(grant_all=True)
    try:
        service = build_service(cfg, gateway=gateway)
        return asyncio.run(_run(ns, service, gateway))
    except ConfigError as e:
        log.error("config_invalid", error=str(e))
        sys.stderr.write(f"config error: {e}\n")
        return 2
    except (CaseNotFoundError, ValueError) as e:
        sys.stderr.write(f"error: {e}\n")
        return 2
