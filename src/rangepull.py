"""rangepull - resolve version-ranged Maven dependencies to concrete artifacts.

    Returns:
        int: Exit code
"""
import csv
import json
import logging
import os
import sys
from typing import IO, List, Sequence, Tuple

from constants import ExitCodes, OutputFormats, Constants
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from args import parse_args
from cli_config import (
    ConfigError,
    build_metadata_source,
    build_requests,
    build_settings,
    load_config_file,
)
from versioning.errors import InvalidRangeError, MetadataLookupError, PartialResolutionError
from versioning.materializer import LocalFilesystem
from versioning.models import RangeRequest, ResolvedArtifact
from versioning.service import ArtifactRangeResolver

CSV_HEADERS = [
    "groupId",
    "artifactId",
    "version",
    "type",
    "classifier",
    "destFileName",
    "outputDirectory",
    "overWrite",
    "needsProcessing",
]


def _write(path, writer_fn, newline=None):
    """Run ``writer_fn`` against ``path``, or stdout when no path is given."""
    if not path:
        writer_fn(sys.stdout)
        return
    with open(path, 'w', newline=newline, encoding='utf-8') as file:
        writer_fn(file)


def export_csv(artifacts: Sequence[ResolvedArtifact], path=None):
    """Exports resolved artifacts to a CSV file.

    Args:
        artifacts (list): Resolved artifacts.
        path (str): File path to export the CSV; stdout when None.
    """
    def _nv(v):
        return "" if v is None else v

    rows = [CSV_HEADERS]
    for x in artifacts:
        record = x.to_dict()
        rows.append([_nv(record[h]) for h in CSV_HEADERS])

    def _dump(file: IO[str]):
        csv.writer(file).writerows(rows)

    try:
        _write(path, _dump, newline='')
        if path:
            logging.info("CSV file has been successfully exported at: %s", path)
    except (OSError, csv.Error) as e:
        logging.error("CSV file couldn't be written to disk: %s", e)
        sys.exit(ExitCodes.FILE_ERROR.value)


def export_json(artifacts: Sequence[ResolvedArtifact], path=None):
    """Exports resolved artifacts to a JSON file.

    Args:
        artifacts (list): Resolved artifacts.
        path (str): File path to export the JSON; stdout when None.
    """
    data = [x.to_dict() for x in artifacts]

    def _dump(file: IO[str]):
        json.dump(data, file, ensure_ascii=False, indent=4)
        file.write("\n")

    try:
        _write(path, _dump)
        if path:
            logging.info("JSON file has been successfully exported at: %s", path)
    except OSError as e:
        logging.error("JSON file couldn't be written to disk: %s", e)
        sys.exit(ExitCodes.FILE_ERROR.value)


def export_text(artifacts: Sequence[ResolvedArtifact], path=None):
    """One ``coordinate -> destination`` line per artifact."""
    def _dump(file: IO[str]):
        for x in artifacts:
            file.write(f"{x.coordinate} -> {x.destination_path}\n")

    try:
        _write(path, _dump)
    except OSError as e:
        logging.error("Output file couldn't be written to disk: %s", e)
        sys.exit(ExitCodes.FILE_ERROR.value)


def resolve_output_format(args) -> str:
    """Explicit --format wins, then the --output extension, then text."""
    if getattr(args, "OUTPUT_FORMAT", None):
        return args.OUTPUT_FORMAT
    output = getattr(args, "OUTPUT", None)
    if output:
        ext = os.path.splitext(output)[1].lower().lstrip(".")
        if ext in (OutputFormats.JSON.value, OutputFormats.CSV.value):
            return ext
    return OutputFormats.TEXT.value


def resolve_requests(
    resolver: ArtifactRangeResolver, requests: List[RangeRequest]
) -> Tuple[List[ResolvedArtifact], ExitCodes]:
    """Resolve each request in turn; a failing request does not stop the rest.

    Returns the collected artifacts and the most severe exit code seen.
    """
    artifacts: List[ResolvedArtifact] = []
    exit_code = ExitCodes.SUCCESS

    def _worse(code: ExitCodes) -> ExitCodes:
        return code if code.value > exit_code.value else exit_code

    for req in requests:
        try:
            artifacts.extend(resolver.resolve(req))
        except PartialResolutionError as e:
            logging.error("Partially resolved: %s", e)
            artifacts.extend(e.artifacts)
            exit_code = _worse(ExitCodes.PARTIAL_FAILURE)
        except InvalidRangeError as e:
            logging.error("Version range is invalid: %s", e)
            exit_code = _worse(ExitCodes.INVALID_REQUEST)
        except MetadataLookupError as e:
            logging.error("Could not retrieve available versions: %s", e)
            exit_code = _worse(ExitCodes.LOOKUP_ERROR)
    return artifacts, exit_code


def _setup_logging(args) -> None:
    """Configure logging from CLI arguments on top of the environment."""
    log_file = getattr(args, "LOG_FILE", None)
    try:
        configure_logging(level=getattr(args, "LOG_LEVEL", None), log_file=log_file)
    except OSError as e:
        configure_logging(level=getattr(args, "LOG_LEVEL", None))
        logging.error("Log file couldn't be opened: %s", e)
        sys.exit(ExitCodes.FILE_ERROR.value)
    if log_file:
        logging.info("Logging to file: %s", log_file)


def main(argv=None):
    """Main function of the program."""
    logger = logging.getLogger(__name__)

    args = parse_args(argv)
    _setup_logging(args)

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action="main")
        )

    try:
        config = load_config_file(args.CONFIG)
    except ConfigError as e:
        logging.error("%s, aborting", e)
        sys.exit(ExitCodes.FILE_ERROR.value)

    try:
        settings = build_settings(args, config)
        requests = build_requests(args, config)
        source = build_metadata_source(args, config)
    except ValueError as e:
        logging.error("Invalid artifact request: %s", e)
        sys.exit(ExitCodes.INVALID_REQUEST.value)

    if not requests:
        logging.warning("No artifacts requested.")
        sys.exit(ExitCodes.SUCCESS.value)

    resolver = ArtifactRangeResolver(source, LocalFilesystem(), settings)
    artifacts, exit_code = resolve_requests(resolver, requests)
    logging.info("Resolved %d artifact(s) from %d request(s).", len(artifacts), len(requests))

    output = getattr(args, "OUTPUT", None)
    if output or not args.QUIET:
        fmt = resolve_output_format(args)
        if fmt == OutputFormats.JSON.value:
            export_json(artifacts, output)
        elif fmt == OutputFormats.CSV.value:
            export_csv(artifacts, output)
        else:
            export_text(artifacts, output)

    if is_debug_enabled(logger):
        logger.debug(
            "CLI finished",
            extra=extra_context(
                event="function_exit",
                component="cli",
                action="main",
                outcome="success" if exit_code is ExitCodes.SUCCESS else "failure",
                count=len(artifacts),
            )
        )
    sys.exit(exit_code.value)


if __name__ == "__main__":
    main()
