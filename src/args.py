"""Argument parsing functionality for rangepull."""

import argparse
from constants import Constants

def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="rangepull",
        description=(
            "rangepull - Resolve version-ranged Maven dependencies to concrete artifacts"
        ),
        add_help=True,
    )

    parser.add_argument("-a", "--artifact",
                        dest="ARTIFACTS",
                        help="Artifact with a version range, i.e: "
                             "groupId:artifactId[:type[:classifier]]:[1.0,2.0)",
                        action="append", type=str,
                        default=[])
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML, YML, or JSON)",
                        action="store",
                        type=str)
    parser.add_argument("-m", "--metadata",
                        dest="METADATA",
                        help=f"{Constants.METADATA_FILE} file listing available versions (repeatable)",
                        action="append", type=str,
                        default=[])

    parser.add_argument("--type",
                        dest="TYPE",
                        help=f"Artifact type for --artifact tokens without one (default: {Constants.DEFAULT_TYPE})",
                        action="store", type=str,
                        default=Constants.DEFAULT_TYPE)
    parser.add_argument("--classifier",
                        dest="CLASSIFIER",
                        help="Classifier for --artifact tokens without one",
                        action="store", type=str)
    parser.add_argument("--include-snapshots",
                        dest="INCLUDE_SNAPSHOTS",
                        help="Include every SNAPSHOT version in the range.",
                        action="store_true")
    parser.add_argument("--include-latest-snapshot",
                        dest="INCLUDE_LATEST_SNAPSHOT",
                        help="Include the newest version even when it is a SNAPSHOT.",
                        action="store_true")

    parser.add_argument("-d", "--output-directory",
                        dest="OUTPUT_DIRECTORY",
                        help=f"Default output directory (default: {Constants.DEFAULT_OUTPUT_DIRECTORY})",
                        action="store",
                        type=str)
    parser.add_argument("--overwrite",
                        dest="OVERWRITE",
                        help="Mark resolved artifacts as overwriting existing files.",
                        action="store_true")

    parser.add_argument("-o", "--output",
                        dest="OUTPUT",
                        help="Path to output file (JSON or CSV)",
                        action="store",
                        type=str)
    parser.add_argument("-f", "--format",
                        dest="OUTPUT_FORMAT",
                        help="Output format (text, json or csv). If not specified, inferred from "
                             "--output extension; defaults to text.",
                        action="store",
                        type=str.lower,
                        choices=Constants.OUTPUT_FORMATS)

    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str.upper,
                        choices=Constants.LOG_LEVELS,
                        default=None)
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    parser.add_argument("-q", "--quiet",
                        dest="QUIET",
                        help="Do not output to console.",
                        action="store_true")

    return parser.parse_args(argv)
