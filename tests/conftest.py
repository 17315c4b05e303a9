"""Shared test fixtures for envstack tests."""
from typing import Dict, List, Optional

import pytest

from envstack.core.config import set_config
from envstack.core.errors import CommandError
from envstack.core.runner import CommandResult, CommandRunner

DEBIAN_12 = """\
PRETTY_NAME="Debian GNU/Linux 12 (bookworm)"
NAME="Debian GNU/Linux"
VERSION_ID="12"
VERSION="12 (bookworm)"
VERSION_CODENAME=bookworm
ID=debian
HOME_URL="https://www.debian.org/"
"""

UBUNTU_2204 = """\
PRETTY_NAME="Ubuntu 22.04.4 LTS"
NAME="Ubuntu"
VERSION_ID="22.04"
VERSION_CODENAME=jammy
ID=ubuntu
ID_LIKE=debian
"""

IP_ROUTE = """\
default via 192.0.2.1 dev eth0 proto dhcp src 192.0.2.10 metric 100
192.0.2.0/24 dev eth0 proto kernel scope link src 192.0.2.10 metric 100
"""

IP_ADDR_ETH0 = """\
2: eth0: <BROADCAST,MULTICAST,UP,LOWER_UP> mtu 1500 qdisc fq_codel state UP group default qlen 1000
    inet 192.0.2.10/24 brd 192.0.2.255 scope global dynamic eth0
       valid_lft 86012sec preferred_lft 86012sec
"""


class FakeRunner(CommandRunner):
    """Records commands and answers them from a canned output table."""

    def __init__(self, outputs: Optional[Dict[str, str]] = None, fail: Optional[Dict[str, int]] = None):
        super().__init__(mock=False, timeout=None)
        self.outputs = outputs or {}
        self.fail = fail or {}

    def run(self, command, capture=False, check=True, cwd=None):
        argv = [str(part) for part in command]
        self.history.append(argv)
        key = ' '.join(argv)
        returncode = self.fail.get(key, 0)
        if returncode and check:
            raise CommandError(argv, returncode)
        return CommandResult(command=argv, returncode=returncode, stdout=self.outputs.get(key, ''))


def fake_ip(routes: str = IP_ROUTE, addrs: Optional[Dict[str, str]] = None):
    """run_cmd replacement answering `ip route` and `ip -4 addr show`."""
    addrs = addrs if addrs is not None else {'eth0': IP_ADDR_ETH0}

    def run_cmd(argv: List[str]) -> str:
        if argv[:2] == ['ip', 'route']:
            return routes
        if argv[:4] == ['ip', '-4', 'addr', 'show']:
            return addrs.get(argv[4], '')
        return ''

    return run_cmd


@pytest.fixture(autouse=True)
def fresh_config(monkeypatch):
    """Each test reads configuration from its own environment."""
    for var in ('ENVSTACK_WORKDIR', 'ENVSTACK_PROJECT', 'ENVSTACK_MOCK', 'ENVSTACK_OS_RELEASE'):
        monkeypatch.delenv(var, raising=False)
    set_config(None)
    yield
    set_config(None)


@pytest.fixture
def debian_release(tmp_path):
    """Path to a Debian 12 os-release file."""
    path = tmp_path / 'os-release'
    path.write_text(DEBIAN_12)
    return path


@pytest.fixture
def ubuntu_release(tmp_path):
    """Path to an unsupported os-release file."""
    path = tmp_path / 'os-release'
    path.write_text(UBUNTU_2204)
    return path


@pytest.fixture
def mock_runner():
    """CommandRunner in mock mode."""
    return CommandRunner(mock=True)


@pytest.fixture
def fake_runner():
    """Factory for FakeRunner instances."""
    return FakeRunner


@pytest.fixture
def ip_commands():
    """Factory for fake `ip` command output (defaults: eth0 at 192.0.2.10)."""
    return fake_ip


@pytest.fixture
def os_release_text():
    return {'debian12': DEBIAN_12, 'ubuntu2204': UBUNTU_2204}
