from __future__ import annotations

import argparse
import time
from typing import Callable, Sequence

from buildgate.core.config import Settings, get_settings
from buildgate.core.logging import configure_logging
from buildgate.gate.errors import BuildGateError
from buildgate.gate.runner import BuildClient, run_gate
from buildgate.percy.client import PercyClient


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Wait for a Percy build to finish, then fail when too many comparisons changed."
    )
    parser.add_argument("--build-id", default=None, help="Build to watch. Defaults to PERCY_BUILD_ID.")
    parser.add_argument("--api-base-url", default=None, help="API root. Defaults to PERCY_API_BASE_URL.")
    parser.add_argument("--interval", type=float, default=None, help="Seconds between polls.")
    parser.add_argument("--max-attempts", type=int, default=None, help="Polls before giving up.")
    parser.add_argument("--threshold", type=float, default=None, help="Maximum allowed diff percentage.")
    return parser


def apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    overrides: dict[str, object] = {}
    if args.build_id is not None:
        overrides["PERCY_BUILD_ID"] = args.build_id
    if args.api_base_url is not None:
        overrides["PERCY_API_BASE_URL"] = args.api_base_url
    if args.interval is not None:
        overrides["POLL_INTERVAL_SECONDS"] = args.interval
    if args.max_attempts is not None:
        overrides["POLL_MAX_ATTEMPTS"] = args.max_attempts
    if args.threshold is not None:
        overrides["FAILURE_THRESHOLD_PERCENTAGE"] = args.threshold
    if not overrides:
        return settings
    return settings.model_copy(update=overrides)


def main(
    argv: Sequence[str] | None = None,
    *,
    client_factory: Callable[..., BuildClient] = PercyClient,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    args = build_parser().parse_args(argv)
    settings = apply_overrides(get_settings(), args)
    configure_logging(settings.LOG_LEVEL)

    missing = settings.missing_fields()
    if missing:
        print(f"[build-gate] FAIL: missing configuration: {', '.join(missing)}")
        return 1
    try:
        config = settings.poll_config()
    except ValueError as exc:
        print(f"[build-gate] FAIL: invalid configuration: {exc}")
        return 1

    print(f"[build-gate] Watching {config.url} (every {config.interval_seconds}s, up to {config.max_attempts} attempts)")
    client = client_factory(config)
    try:
        verdict = run_gate(config, client, sleep=sleep)
    except BuildGateError as exc:
        print(f"[build-gate] FAIL: {exc}")
        return 1
    finally:
        close = getattr(client, "close", None)
        if callable(close):
            close()
    print(f"[build-gate] PASS: {verdict.reason}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
