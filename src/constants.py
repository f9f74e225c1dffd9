"""Constants used in the project."""

import os
from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    LOOKUP_ERROR = 2
    PARTIAL_FAILURE = 3
    INVALID_REQUEST = 4


class OutputFormats(Enum):
    """Output formats supported by the program.

    Args:
        Enum (string): Output formats supported by the program.
    """

    TEXT = "text"
    JSON = "json"
    CSV = "csv"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration defaults; not intended to provide behavior.
    """

    DEFAULT_OUTPUT_DIRECTORY = os.path.join("target", "dependency")
    DEFAULT_TYPE = "jar"
    DEFAULT_OVERWRITE = False
    SNAPSHOT_QUALIFIER = "SNAPSHOT"
    METADATA_FILE = "maven-metadata.xml"
    OUTPUT_FORMATS = [fmt.value for fmt in OutputFormats]
    LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    LOG_FORMAT = "[%(levelname)s] %(message)s"
    LOG_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

    # Environment overrides
    ENV_LOG_LEVEL = "RANGEPULL_LOG_LEVEL"
    ENV_LOG_FORMAT = "RANGEPULL_LOG_FORMAT"
    ENV_OUTPUT_DIRECTORY = "RANGEPULL_OUTPUT_DIRECTORY"
    ENV_OVERWRITE = "RANGEPULL_OVERWRITE"
