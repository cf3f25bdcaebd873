import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from scapy.layers.l2 import Ether
from scapy.layers.inet6 import IPv6
from scapy.utils import wrpcap
from typer.testing import CliRunner

from ip6text.cli import main as cli
from ip6text.cli.main import app

runner = CliRunner()


def test_canonical_command():
    result = runner.invoke(app, ["canonical", "2001:DB8:0:0:0:0:0:1", "::ffff:192.0.2.1"])
    assert result.exit_code == 0
    assert result.output.splitlines() == ["2001:db8::1", "::ffff:192.0.2.1"]


def test_canonical_command_reports_invalid_address():
    result = runner.invoke(app, ["canonical", "1::2::3", "::1"])
    assert result.exit_code == 1
    assert "Not a valid IPv6 address: 1::2::3" in result.output
    assert "::1" in result.output.splitlines()


def test_pure_command():
    result = runner.invoke(app, ["pure", "::ffff:192.0.2.1"])
    assert result.exit_code == 0
    assert result.output.strip() == "::ffff:c000:201"


def test_full_command():
    result = runner.invoke(app, ["full", "2001:db8::1"])
    assert result.output.strip() == "2001:db8:0:0:0:0:0:1"

    result = runner.invoke(app, ["full", "--padded", "2001:db8::1"])
    assert result.output.strip() == "2001:0db8:0000:0000:0000:0000:0000:0001"


def test_arpa_command():
    result = runner.invoke(app, ["arpa", "::1"])
    assert result.exit_code == 0
    assert result.output.strip() == "1." + "0." * 31 + "ip6.arpa."


def test_check_command():
    assert runner.invoke(app, ["check", "fe80::1"]).exit_code == 0
    assert runner.invoke(app, ["check", ":::1"]).exit_code == 1

    result = runner.invoke(app, ["--verbose", "check", "fe80::1"])
    assert "Valid" in result.output


def test_tokens_command():
    result = runner.invoke(app, ["tokens", "::ffff:192.0.2.1"])
    assert result.exit_code == 0
    assert "DoubleColon" in result.output
    assert "IPv4Addr" in result.output
    assert "IPv4-mapped" in result.output


def test_tokens_command_invalid():
    result = runner.invoke(app, ["tokens", "zz::1"])
    assert result.exit_code == 1
    assert "Cannot tokenize" in result.output


def test_interfaces_command(monkeypatch):
    monkeypatch.setattr(cli, "in6_getifaddr", lambda: [("FE80::0001", 0x20, "eth0")])
    result = runner.invoke(app, ["interfaces"])
    assert result.exit_code == 0
    assert "eth0" in result.output
    assert "fe80::1" in result.output


def test_analyze_command(tmp_path):
    capture = tmp_path / "capture.pcap"
    wrpcap(str(capture), [
        Ether() / IPv6(src="2001:db8::1", dst="2001:db8::2"),
        Ether() / IPv6(src="2001:db8::1", dst="fe80::1"),
    ])

    result = runner.invoke(app, ["analyze", str(capture)])
    assert result.exit_code == 0
    assert "IPv6 Packets: 2" in result.output
    assert "Addresses Seen: 4" in result.output
    assert "2001:db8::1" in result.output


def test_analyze_missing_file(tmp_path):
    result = runner.invoke(app, ["analyze", str(tmp_path / "missing.pcap")])
    assert result.exit_code == 1
    assert "File not found" in result.output
