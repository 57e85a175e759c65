"""Resolution of raw suite parameters into SuiteMetadata."""

from __future__ import annotations

from typing import TYPE_CHECKING

from testledger.core.exceptions import ConfigurationError
from testledger.core.models import SuiteMetadata

if TYPE_CHECKING:
    from collections.abc import Mapping

    from testledger.config import Settings

PLATFORM_PLACEHOLDER = "current.platform"
BUILD_PLACEHOLDER = "current.build"

# Unexpanded build-tool property, e.g. "${current.build}"
_PROPERTY_REFERENCE = "${"


def is_unresolved(value: str | None, placeholder: str) -> bool:
    """Check whether a parameter is missing or still holds a build placeholder."""
    if value is None or not value.strip():
        return True
    return placeholder in value or _PROPERTY_REFERENCE in value


def is_snapshot(version: str, marker: str = "SNAPSHOT") -> bool:
    """Check whether a version string identifies an unreleased build."""
    return marker.lower() in version.lower()


def _require(parameters: Mapping[str, str | None], name: str) -> str:
    value = parameters.get(name)
    if value is None or not value.strip():
        raise ConfigurationError(f"Suite parameter '{name}' is required for publishing")
    return value.strip()


def resolve_suite_metadata(
    parameters: Mapping[str, str | None],
    settings: Settings,
) -> SuiteMetadata:
    """
    Build SuiteMetadata from raw suite parameters.

    Args:
        parameters: Mapping with ``component``, ``version``, ``buildNumber``
            and ``platform`` keys; values may be missing or unresolved.
        settings: Settings supplying the platform and build number defaults.

    Returns:
        Resolved SuiteMetadata.

    Raises:
        ConfigurationError: If component or version is missing, or the build
            number is not an integer.
    """
    component = _require(parameters, "component")
    version = _require(parameters, "version")

    platform = parameters.get("platform")
    if is_unresolved(platform, PLATFORM_PLACEHOLDER):
        platform = settings.default_platform

    raw_build = parameters.get("buildNumber")
    if is_unresolved(raw_build, BUILD_PLACEHOLDER):
        build_number = settings.default_build_number
    else:
        try:
            build_number = int(raw_build.strip())
        except ValueError as e:
            raise ConfigurationError(f"Build number must be an integer, got '{raw_build}'") from e

    return SuiteMetadata(
        component=component,
        version=version,
        build_number=build_number,
        platform=platform.strip(),
    )
