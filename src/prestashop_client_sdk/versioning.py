from __future__ import annotations

import re

from .exceptions import IncompatibleVersionError

VERSION_HEADER = "PSWS-Version"
MIN_COMPATIBLE_VERSION = "1.4.0.0"
MAX_COMPATIBLE_VERSION = "1.7.99.99"
UNKNOWN_VERSION = "unknown"

_VERSION_PART = re.compile(r"\d+")


def version_tuple(version: str) -> tuple[int, ...]:
    """Numeric parts of a dotted version; trailing zeros are dropped so 1.7 == 1.7.0.0."""
    parts = [int(match) for match in _VERSION_PART.findall(version.split("-", 1)[0])]
    while parts and parts[-1] == 0:
        parts.pop()
    return tuple(parts)


def compare_versions(left: str, right: str) -> int:
    left_parts = version_tuple(left)
    right_parts = version_tuple(right)
    if left_parts < right_parts:
        return -1
    if left_parts > right_parts:
        return 1
    return 0


def is_compatible(
    version: str,
    minimum: str = MIN_COMPATIBLE_VERSION,
    maximum: str = MAX_COMPATIBLE_VERSION,
) -> bool:
    return compare_versions(minimum, version) <= 0 and compare_versions(version, maximum) <= 0


def ensure_compatible(version: str) -> None:
    if not is_compatible(version):
        raise IncompatibleVersionError(
            code="INCOMPATIBLE_VERSION",
            message=(
                f"This library is not compatible with PrestaShop {version} "
                f"(supported: {MIN_COMPATIBLE_VERSION} - {MAX_COMPATIBLE_VERSION}). "
                "Please upgrade/downgrade this library"
            ),
            details={"version": version},
        )
