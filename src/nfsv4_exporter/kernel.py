"""
Kernel version gate.

/proc/fs/nfsd/clients only exists from Linux 5.3 onwards, so the exporter
refuses to start on older kernels. Release strings look like
"5.15.0-91-generic" or "6.8.9-300.fc40.x86_64"; only the part before the
first "-" is compared.
"""

import logging
import platform
import re

logger = logging.getLogger(__name__)

MINIMAL_KERNEL_VERSION = "5.3.0"

# Exit status when the kernel is too old (EX_UNAVAILABLE)
EXIT_INCOMPATIBLE_KERNEL = 69

VERSION_PATTERN = re.compile(r"(\d+)(?:\.(\d+))?(?:\.(\d+))?")


def parse_version(version: str) -> tuple[int, int, int] | None:
    """
    Parse "major[.minor[.patch]]" into a tuple, missing parts as 0.

    Returns None when the string does not start with a version number.
    """
    match = VERSION_PATTERN.match(version.split("-", 1)[0].strip())
    if not match:
        return None
    return tuple(int(part) if part else 0 for part in match.groups())


def is_kernel_compatible(
    release: str | None = None, minimum: str = MINIMAL_KERNEL_VERSION
) -> bool:
    """
    Check whether the running (or given) kernel release is at least `minimum`.

    Args:
        release: Kernel release string, defaults to platform.release()
        minimum: Minimal version, e.g. "5.3.0"

    Returns:
        True if compatible; False if older or unparseable
    """
    release = release if release is not None else platform.release()
    current = parse_version(release)
    required = parse_version(minimum)
    if required is None:
        raise ValueError(f"Invalid minimal kernel version: {minimum!r}")
    if current is None:
        logger.error(f"Cannot parse kernel release {release!r}")
        return False
    if current < required:
        logger.error(f"Kernel {release} is older than the required {minimum}")
        return False
    return True
