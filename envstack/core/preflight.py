"""Preflight checks: privileges and supported operating system."""
import os
import shlex
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Optional, Union

from envstack.core.config import get_config
from envstack.core.errors import PreflightError
from envstack.core.logger import get_logger

logger = get_logger(__name__)

# Distribution ID -> accepted VERSION_ID values
SUPPORTED_RELEASES = {
    'debian': ('11', '12', '13'),
}


@dataclass
class OSRelease:
    """Fields of /etc/os-release that envstack cares about."""
    id: str = ""
    version_id: str = ""
    version_codename: str = ""
    pretty_name: str = ""

    @property
    def supported(self) -> bool:
        return self.version_id in SUPPORTED_RELEASES.get(self.id, ())

    @classmethod
    def from_fields(cls, fields: Dict[str, str]) -> "OSRelease":
        return cls(
            id=fields.get('ID', ''),
            version_id=fields.get('VERSION_ID', ''),
            version_codename=fields.get('VERSION_CODENAME', ''),
            pretty_name=fields.get('PRETTY_NAME', ''),
        )


def parse_os_release(text: str) -> Dict[str, str]:
    """Parse os-release content (shell-style KEY=value lines)."""
    fields = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith('#') or '=' not in line:
            continue
        key, _, raw = line.partition('=')
        try:
            parts = shlex.split(raw)
        except ValueError:
            parts = [raw.strip('"\'')]
        fields[key.strip()] = parts[0] if parts else ''
    return fields


def read_os_release(path: Union[str, Path]) -> OSRelease:
    """Read and parse an os-release file.

    Raises:
        PreflightError: If the file does not exist
    """
    path = Path(path)
    if not path.is_file():
        raise PreflightError("Could not determine the operating system distribution.")
    return OSRelease.from_fields(parse_os_release(path.read_text()))


def supported_summary() -> str:
    """Human-readable list of supported releases, e.g. 'Debian 11, 12 or 13'."""
    parts = []
    for distro, versions in SUPPORTED_RELEASES.items():
        listed = ', '.join(versions[:-1])
        listed = f"{listed} or {versions[-1]}" if listed else versions[-1]
        parts.append(f"{distro.capitalize()} {listed}")
    return '; '.join(parts)


class PreflightChecker:
    """Verifies the host before anything is installed."""

    def __init__(
        self,
        os_release_path: Optional[Union[str, Path]] = None,
        geteuid: Optional[Callable[[], int]] = None,
        skip_privileges: bool = False,
    ):
        self.os_release_path = Path(os_release_path or get_config().os_release_path)
        self.geteuid = geteuid or os.geteuid
        self.skip_privileges = skip_privileges

    def check_privileges(self) -> None:
        if self.skip_privileges:
            logger.info("MOCK: Skipping privilege check")
            return
        if self.geteuid() != 0:
            raise PreflightError(
                "This command must be run as the superuser (root). Please use 'sudo'."
            )

    def check_os(self) -> OSRelease:
        release = read_os_release(self.os_release_path)
        if not release.supported:
            detected = release.pretty_name or f"{release.id} {release.version_id}".strip()
            raise PreflightError(
                f"envstack supports {supported_summary()}. Detected: {detected or 'unknown'}."
            )
        logger.info(
            f"Supported operating system: {release.pretty_name or release.id} "
            f"({release.version_codename})"
        )
        return release

    def run(self) -> OSRelease:
        """Run all checks in order and return the detected release."""
        self.check_privileges()
        return self.check_os()
