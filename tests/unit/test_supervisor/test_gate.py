"""Tests for the wireless-network gate."""

from __future__ import annotations

import sys

import pytest

from ledbar.supervisor.gate import NetworkGate


def _echo(text: str) -> list[str]:
    return [sys.executable, "-c", f"print({text!r})"]


class TestNetworkGate:
    @pytest.mark.asyncio
    async def test_unconfigured_gate_passes(self) -> None:
        gate = NetworkGate(ssid=None, command=["/nonexistent/binary"])
        assert not gate.configured
        assert await gate.check() is True

    @pytest.mark.asyncio
    async def test_matching_network_passes(self) -> None:
        gate = NetworkGate(ssid="home-wifi", command=_echo("home-wifi"))
        assert await gate.check() is True

    @pytest.mark.asyncio
    async def test_other_network_fails(self) -> None:
        gate = NetworkGate(ssid="home-wifi", command=_echo("cafe"))
        assert await gate.current_network() == "cafe"
        assert await gate.check() is False

    @pytest.mark.asyncio
    async def test_missing_command_fails(self) -> None:
        gate = NetworkGate(ssid="home-wifi", command=["/nonexistent/iwgetid", "-r"])
        assert await gate.current_network() is None
        assert await gate.check() is False

    @pytest.mark.asyncio
    async def test_failing_command_fails(self) -> None:
        gate = NetworkGate(ssid="home-wifi", command=[sys.executable, "-c", "raise SystemExit(255)"])
        assert await gate.check() is False
