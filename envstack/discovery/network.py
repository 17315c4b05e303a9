"""Resolve the address the stack is published on.

Two strategies:
- auto: follow the default route to its interface and take that
  interface's first IPv4 address
- static: use an operator-supplied value, prompting when none was given
"""
import ipaddress
import re
from dataclasses import dataclass
from typing import Callable, List, Optional

from envstack.core.errors import AddressResolutionError, CommandError
from envstack.core.logger import console, get_logger
from envstack.core.runner import CommandRunner

logger = get_logger(__name__)

AUTO = "auto"
STATIC = "static"
STRATEGIES = (AUTO, STATIC)

_INET_RE = re.compile(r"inet\s+(\d+(?:\.\d+){3})")


@dataclass
class ResolvedAddress:
    """The address substituted into every generated file."""
    address: str
    strategy: str
    interface: Optional[str] = None

    def __str__(self) -> str:
        return self.address


def parse_default_interface(ip_route_output: str) -> Optional[str]:
    """Return the interface of the first default route in `ip route` output."""
    for line in ip_route_output.splitlines():
        fields = line.split()
        if not fields or fields[0] != "default":
            continue
        if "dev" in fields:
            idx = fields.index("dev")
            return fields[idx + 1] if idx + 1 < len(fields) else None
        # awk '{print $5}' position of `default via <gw> dev <iface>`
        return fields[4] if len(fields) > 4 else None
    return None


def parse_first_ipv4(ip_addr_output: str) -> Optional[str]:
    """Return the first `inet a.b.c.d` address in `ip -4 addr show` output."""
    match = _INET_RE.search(ip_addr_output)
    return match.group(1) if match else None


def looks_like_ipv4(value: str) -> bool:
    try:
        ipaddress.IPv4Address(value)
        return True
    except ValueError:
        return False


def _default_run_cmd(argv: List[str]) -> str:
    # Reading routing state is harmless, so this never runs mocked
    return CommandRunner(mock=False).output(argv, check=False)


class AddressResolver:
    """Resolves the published address using one of the supported strategies."""

    def __init__(
        self,
        run_cmd: Optional[Callable[[List[str]], str]] = None,
        prompt: Optional[Callable[[str], str]] = None,
    ):
        self.run_cmd = run_cmd or _default_run_cmd
        self.prompt = prompt or console.input

    def detect(self) -> ResolvedAddress:
        """Auto-detect the primary IPv4 address via the default route.

        Raises:
            AddressResolutionError: If no default route or no IPv4 address was found
        """
        logger.info("Detecting the server's primary IP address...")
        try:
            interface = parse_default_interface(self.run_cmd(["ip", "route"]))
            address = None
            if interface:
                address = parse_first_ipv4(
                    self.run_cmd(["ip", "-4", "addr", "show", interface])
                )
        except CommandError as e:
            raise AddressResolutionError(
                f"Could not detect the primary IP address automatically: {e}"
            ) from e

        if not interface or not address:
            raise AddressResolutionError(
                "Could not detect the primary IP address automatically. "
                "Make sure the server has a network interface with an IP address "
                "and a default route."
            )

        logger.info(f"Detected IP address: {address} (interface: {interface})")
        return ResolvedAddress(address=address, strategy=AUTO, interface=interface)

    def from_operator(self, value: Optional[str] = None) -> ResolvedAddress:
        """Take the address from the operator, prompting when value is None.

        The value is used verbatim apart from surrounding whitespace.

        Raises:
            AddressResolutionError: If the value is empty
        """
        if value is None:
            value = self.prompt("Enter the server's static IP address: ")
        address = (value or "").strip()
        if not address:
            raise AddressResolutionError("No IP address was entered.")
        logger.info(f"Using static IP address: {address}")
        return ResolvedAddress(address=address, strategy=STATIC)

    def resolve(
        self,
        strategy: str = AUTO,
        static_address: Optional[str] = None,
        strict: bool = False,
    ) -> ResolvedAddress:
        """Resolve an address with the given strategy.

        A supplied static_address always wins over the strategy. Values that
        are not IPv4 addresses only produce a warning unless strict is set.
        """
        if static_address is not None or strategy == STATIC:
            resolved = self.from_operator(static_address)
        elif strategy == AUTO:
            resolved = self.detect()
        else:
            raise AddressResolutionError(
                f"Unknown address strategy '{strategy}'. Choose one of: {', '.join(STRATEGIES)}"
            )

        if not looks_like_ipv4(resolved.address):
            if strict:
                raise AddressResolutionError(
                    f"'{resolved.address}' is not a valid IPv4 address."
                )
            logger.warning(
                f"'{resolved.address}' does not look like an IPv4 address; "
                "using it as given"
            )
        return resolved
