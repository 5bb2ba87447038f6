"""Parser configuration via environment variables.

Reads MLOPS_PARSER_* variables, falling back to the values the host package
manager uses.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from mlops_parser.core.models import MANIFEST_FILENAME

DEFAULT_PACKAGE_TYPE = "rpk"
_DEFAULT_PACKAGES_FILE = "~/.mlops-parser/packages.yaml"


@dataclass
class ParserConfig:
    """Configuration for the lifecycle gate and the CLI.

    package_type: only packages of this type carry a manifest; others are
        skipped at install time.
    manifest_filename: file name under <root>/res/global/<res_type>/.
    packages_file: YAML package table used by the CLI's static inspector.
    """

    package_type: str = field(
        default_factory=lambda: os.environ.get("MLOPS_PARSER_PACKAGE_TYPE", DEFAULT_PACKAGE_TYPE)
    )
    manifest_filename: str = field(
        default_factory=lambda: os.environ.get("MLOPS_PARSER_MANIFEST_FILENAME", MANIFEST_FILENAME)
    )
    packages_file: Path = field(
        default_factory=lambda: Path(
            os.environ.get("MLOPS_PARSER_PACKAGES", _DEFAULT_PACKAGES_FILE)
        ).expanduser()
    )

    def __post_init__(self) -> None:
        if not self.package_type:
            raise ValueError("package_type must not be empty")
        if not self.manifest_filename or "/" in self.manifest_filename:
            raise ValueError(
                f"Invalid manifest_filename={self.manifest_filename!r}. Must be a bare file name."
            )


def get_config() -> ParserConfig:
    """Get the current configuration."""
    return ParserConfig()
