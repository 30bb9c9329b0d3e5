"""CLI entrypoint for booking import and location scoring."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from spaceops.common.config_loader import ConfigBundle, load_all_configs
from spaceops.common.constants import EXIT_HARD_FAIL, EXIT_PARTIAL, EXIT_SUCCESS
from spaceops.common.errors import SpaceOpsError
from spaceops.common.fs import dump_json
from spaceops.common.http import HttpClient
from spaceops.common.ids import generate_run_id
from spaceops.common.logging import build_logger, log_event
from spaceops.ingest.column_map import field_patterns_from_config
from spaceops.ingest.commit import ImportCommitClient, operator_messages
from spaceops.ingest.encoding import read_text
from spaceops.ingest.export import write_preview_csv
from spaceops.ingest.platforms import aliases_from_config, get_platform
from spaceops.ingest.preview import build_preview
from spaceops.location.analysis import LocationAnalyzer
from spaceops.location.companies import CompanyEstimator
from spaceops.location.scoring import ScoringSettings
from spaceops.location.stations import StationCatalog


def parse_args(argv: list[str]) -> argparse.Namespace:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--run-id", default=None)
    common.add_argument("--config-dir", default="./config")
    common.add_argument("--overlay-config-dir", default=None)
    common.add_argument("--log-dir", default=None)
    common.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARN", "ERROR"])

    parser = argparse.ArgumentParser(description=__doc__)
    sub = parser.add_subparsers(dest="command", required=True)

    preview = sub.add_parser("preview", parents=[common])
    preview.add_argument("file")
    preview.add_argument("--limit", type=int, default=None)
    preview.add_argument("--out", default=None)

    parse = sub.add_parser("parse", parents=[common])
    parse.add_argument("file")
    parse.add_argument("--platform", required=True)

    commit = sub.add_parser("commit", parents=[common])
    commit.add_argument("file")
    commit.add_argument("--platform", required=True)
    commit.add_argument("--api-base", required=True)

    analyse = sub.add_parser("analyse-location", parents=[common])
    analyse.add_argument("station")
    analyse.add_argument("--walk-minutes", type=float, default=None)
    analyse.add_argument("--address", default=None)

    return parser.parse_args(argv)


def _fallback_encodings(bundle: ConfigBundle) -> tuple[str, ...]:
    return tuple(bundle.ingest["fallback_encodings"])


def run_preview(args: argparse.Namespace, bundle: ConfigBundle, logger: logging.Logger, run_id: str) -> int:
    source = Path(args.file)
    decoded = read_text(source, _fallback_encodings(bundle))
    limit = args.limit if args.limit is not None else int(bundle.ingest["preview_limit"])
    preview = build_preview(decoded.text, field_patterns_from_config(bundle.ingest), limit=limit)

    if args.out:
        write_preview_csv(Path(args.out), preview.rows)
    print(dump_json(preview.to_dict()))

    log_event(
        logger,
        "preview built",
        run_id=run_id,
        stage="preview",
        source=source.name,
        event="PREVIEW_BUILT",
        status="ok",
        rows_in=preview.total_rows,
        rows_out=len(preview.rows),
    )
    return EXIT_SUCCESS


def run_parse(args: argparse.Namespace, bundle: ConfigBundle, logger: logging.Logger, run_id: str) -> int:
    source = Path(args.file)
    profile = get_platform(args.platform)
    decoded = read_text(source, _fallback_encodings(bundle))
    result = profile.parse(decoded.text, aliases_from_config(bundle.ingest))
    print(dump_json(result.to_dict()))

    log_event(
        logger,
        "platform export parsed",
        run_id=run_id,
        stage="parse",
        platform=profile.code,
        source=source.name,
        event="PARSE_END",
        status="ok" if result.success else "partial",
        rows_out=len(result.bookings),
    )
    if not result.success:
        return EXIT_PARTIAL
    return EXIT_SUCCESS


def run_commit(args: argparse.Namespace, bundle: ConfigBundle, logger: logging.Logger, run_id: str) -> int:
    source = Path(args.file)
    profile = get_platform(args.platform)
    decoded = read_text(source, _fallback_encodings(bundle))

    with HttpClient() as http:
        feedback = ImportCommitClient(args.api_base, http).commit(
            decoded.text,
            platform_code=profile.code,
            file_name=source.name,
        )
    for message in operator_messages(feedback):
        print(message)

    log_event(
        logger,
        "import committed",
        run_id=run_id,
        stage="commit",
        platform=profile.code,
        source=source.name,
        event="COMMIT_END",
        status="partial" if feedback.is_partial else "ok",
        rows_out=feedback.inserted,
    )
    if feedback.is_partial:
        return EXIT_PARTIAL
    return EXIT_SUCCESS


def run_analyse_location(args: argparse.Namespace, bundle: ConfigBundle, logger: logging.Logger, run_id: str) -> int:
    catalog = StationCatalog.from_path(bundle.resolve_path(bundle.location["reference_dataset"]))
    analyzer = LocationAnalyzer(
        catalog,
        CompanyEstimator.from_config(bundle.location),
        ScoringSettings.from_config(bundle.location),
    )
    report = analyzer.analyse(args.station, walk_minutes=args.walk_minutes, address=args.address)
    print(dump_json(report.to_dict()))
    return EXIT_SUCCESS


HANDLERS = {
    "preview": run_preview,
    "parse": run_parse,
    "commit": run_commit,
    "analyse-location": run_analyse_location,
}


def run_command(args: argparse.Namespace) -> int:
    run_id = args.run_id or generate_run_id()
    overlay_config_dir = Path(args.overlay_config_dir) if args.overlay_config_dir else None
    log_dir = Path(args.log_dir) if args.log_dir else None

    logger = build_logger(run_id, log_dir=log_dir, level="WARNING" if args.log_level == "WARN" else args.log_level)
    log_event(logger, "command start", run_id=run_id, stage=args.command, event="COMMAND_START", status="ok")

    try:
        bundle = load_all_configs(Path(args.config_dir), overlay_config_dir=overlay_config_dir)
        code = HANDLERS[args.command](args, bundle, logger, run_id)
    except SpaceOpsError as exc:
        log_event(
            logger,
            f"{args.command} failed: {exc}",
            run_id=run_id,
            stage=args.command,
            event="COMMAND_FAIL",
            status="error",
            error_code=exc.error_code,
        )
        return EXIT_HARD_FAIL
    except Exception as exc:
        log_event(
            logger,
            f"unexpected failure in {args.command}: {exc.__class__.__name__}: {exc}",
            run_id=run_id,
            stage=args.command,
            event="COMMAND_FAIL",
            status="error",
            error_code="UNEXPECTED_ERROR",
        )
        return EXIT_HARD_FAIL

    log_event(logger, "command end", run_id=run_id, stage=args.command, event="COMMAND_END", status="ok")
    return code


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv if argv is not None else sys.argv[1:])
    return run_command(args)


if __name__ == "__main__":
    raise SystemExit(main())
