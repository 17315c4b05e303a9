"""Tests for address resolution."""
import pytest

from envstack.core.errors import AddressResolutionError, CommandError
from envstack.discovery.network import (
    AUTO,
    STATIC,
    AddressResolver,
    looks_like_ipv4,
    parse_default_interface,
    parse_first_ipv4,
)


class TestParsing:
    """Test `ip` output parsing."""

    def test_default_interface(self):
        output = "default via 192.0.2.1 dev eth0 proto dhcp metric 100\n"
        assert parse_default_interface(output) == 'eth0'

    def test_default_interface_without_gateway(self):
        assert parse_default_interface("default dev wg0 scope link\n") == 'wg0'

    def test_first_default_route_wins(self):
        output = (
            "10.0.0.0/8 dev ens4 scope link\n"
            "default via 10.0.0.1 dev ens3\n"
            "default via 10.0.0.1 dev ens4 metric 200\n"
        )
        assert parse_default_interface(output) == 'ens3'

    @pytest.mark.parametrize("output", [
        "",
        "192.0.2.0/24 dev eth0 proto kernel scope link\n",
        "default\n",
        "default via 192.0.2.1 dev\n",
    ])
    def test_no_default_interface(self, output):
        assert parse_default_interface(output) is None

    def test_first_ipv4(self, ip_commands):
        output = ip_commands()(['ip', '-4', 'addr', 'show', 'eth0'])
        assert parse_first_ipv4(output) == '192.0.2.10'

    def test_no_ipv4(self):
        output = "2: eth0: <NO-CARRIER> mtu 1500 state DOWN\n"
        assert parse_first_ipv4(output) is None

    @pytest.mark.parametrize("value,expected", [
        ("192.0.2.10", True),
        ("10.0.0.1", True),
        ("999.1.1.1", False),
        ("host.example", False),
        ("2001:db8::1", False),
    ])
    def test_looks_like_ipv4(self, value, expected):
        assert looks_like_ipv4(value) is expected


class TestDetect:
    """Test auto-detection."""

    def test_detect(self, ip_commands):
        resolved = AddressResolver(run_cmd=ip_commands()).detect()

        assert resolved.address == '192.0.2.10'
        assert resolved.interface == 'eth0'
        assert resolved.strategy == AUTO

    @pytest.mark.parametrize("routes", ["", "garbage\n", "192.0.2.0/24 dev eth0\n"])
    def test_detect_fails_without_default_route(self, ip_commands, routes):
        resolver = AddressResolver(run_cmd=ip_commands(routes=routes))

        with pytest.raises(AddressResolutionError):
            resolver.detect()

    def test_detect_fails_without_address(self, ip_commands):
        resolver = AddressResolver(run_cmd=ip_commands(addrs={}))

        with pytest.raises(AddressResolutionError, match="default route"):
            resolver.detect()

    @pytest.mark.parametrize("returncode", [127, 124])
    def test_detect_fails_when_ip_cannot_run(self, returncode):
        def run_cmd(argv):
            raise CommandError(argv, returncode)

        with pytest.raises(AddressResolutionError) as exc:
            AddressResolver(run_cmd=run_cmd).detect()

        assert exc.value.exit_code == 1
        assert "ip route" in str(exc.value)
        assert isinstance(exc.value.__cause__, CommandError)


class TestOperatorAddress:
    """Test operator-supplied addresses."""

    def test_value_used_verbatim(self):
        resolved = AddressResolver(run_cmd=lambda argv: "").from_operator("  my-host.lan ")

        assert resolved.address == 'my-host.lan'
        assert resolved.strategy == STATIC

    def test_prompts_when_no_value(self):
        prompts = []

        def prompt(message):
            prompts.append(message)
            return "10.1.2.3"

        resolved = AddressResolver(prompt=prompt).from_operator()

        assert resolved.address == '10.1.2.3'
        assert len(prompts) == 1

    @pytest.mark.parametrize("value", ["", "   "])
    def test_empty_input_fails(self, value):
        resolver = AddressResolver(prompt=lambda message: value)

        with pytest.raises(AddressResolutionError, match="No IP address"):
            resolver.from_operator()


class TestResolve:
    """Test strategy dispatch and address checks."""

    def test_auto(self, ip_commands):
        resolved = AddressResolver(run_cmd=ip_commands()).resolve(AUTO)
        assert resolved.address == '192.0.2.10'

    def test_static_value_beats_auto(self, ip_commands):
        resolved = AddressResolver(run_cmd=ip_commands()).resolve(AUTO, static_address="10.9.8.7")
        assert resolved.address == '10.9.8.7'
        assert resolved.strategy == STATIC

    def test_static_strategy_prompts(self):
        resolver = AddressResolver(prompt=lambda message: "10.0.0.2")
        assert resolver.resolve(STATIC).address == '10.0.0.2'

    def test_unknown_strategy(self):
        with pytest.raises(AddressResolutionError, match="Unknown address strategy"):
            AddressResolver().resolve("dhcp")

    def test_non_ipv4_accepted_by_default(self):
        resolved = AddressResolver().resolve(STATIC, static_address="not-an-ip")
        assert resolved.address == 'not-an-ip'

    def test_non_ipv4_rejected_when_strict(self):
        with pytest.raises(AddressResolutionError, match="not a valid IPv4"):
            AddressResolver().resolve(STATIC, static_address="not-an-ip", strict=True)
