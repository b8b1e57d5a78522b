"""Project coordinates shared by packaging, the CLI and release tooling."""

from __future__ import annotations

__title__ = "CaseAPI"
__group__ = "net.cubexa.caseapi"
__version__ = "1.0.2"

# Minimum interpreter the package is built and tested against.
TOOLCHAIN = (3, 10)


def archive_file_name(version: str = __version__) -> str:
    """Name of the distributable archive for ``version``."""

    return f"{__title__}-{version}.jar"


def artifact_name() -> str:
    return f"{__title__}-{__version__}"
