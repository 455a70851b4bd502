#!/usr/bin/env python3
"""Unit tests for the command-line interface.

Tests cover:
    - Argument parsing for subcommands and filters
    - Dispatch to the facade
    - Non-zero exit on library errors
"""
import argparse
import io
import sys
from datetime import datetime
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

sys.path.insert(0, str(__file__).rsplit("/tests", 1)[0])
import main as cli
from src.maas360.api import ConsolePresenter, MaaS360Client
from src.maas360.api.exceptions import NotFoundError, RemoteAuthError
from src.maas360.api.models import Device


class TestParsing:
    """Test argument parsing helpers."""

    def test_parse_filters(self):
        assert cli.parse_filters(["a=1", "b=x=y"]) == {"a": "1", "b": "x=y"}
        assert cli.parse_filters([]) == {}

    @pytest.mark.parametrize("pair", ["novalue", "=value"])
    def test_parse_filters_rejects(self, pair):
        with pytest.raises(argparse.ArgumentTypeError):
            cli.parse_filters([pair])

    def test_update_os_arguments(self):
        args = cli.build_parser().parse_args(
            ["update-os", "D1", "17.4", "2024-06-01T22:00:00"]
        )
        assert args.target_time == datetime(2024, 6, 1, 22, 0, 0)

    def test_subcommand_required(self):
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args([])

    def test_repeatable_filters(self):
        args = cli.build_parser().parse_args(
            ["search", "--filter", "platformName=iOS", "--filter", "deviceStatus=Active"]
        )
        assert args.filter == ["platformName=iOS", "deviceStatus=Active"]


class TestDispatch:
    """Test subcommand dispatch."""

    @pytest.mark.asyncio
    async def test_search(self):
        client = MagicMock(spec=MaaS360Client)
        client.search_devices = AsyncMock(return_value=[Device(maas360_device_id="D1")])
        stream = io.StringIO()
        args = cli.build_parser().parse_args(["search", "--filter", "platformName=iOS"])

        await cli.dispatch(client, args, ConsolePresenter(stream))

        client.search_devices.assert_awaited_once_with({"platformName": "iOS"})
        assert "Found 1 devices" in stream.getvalue()

    @pytest.mark.asyncio
    async def test_action_without_params_passes_none(self):
        client = MagicMock(spec=MaaS360Client)
        client.perform_device_action = AsyncMock()
        presenter = MagicMock(spec=ConsolePresenter)
        args = cli.build_parser().parse_args(["action", "D1", "MDM_LOCATE"])

        await cli.dispatch(client, args, presenter)

        client.perform_device_action.assert_awaited_once_with("D1", "MDM_LOCATE", None)


class TestRun:
    """Test exit codes."""

    @pytest.fixture
    def env_vars(self, monkeypatch):
        monkeypatch.setenv("MAAS360_BILLING_ID", "123456")
        monkeypatch.setenv("MAAS360_APP_ID", "app")
        monkeypatch.setenv("MAAS360_ACCESS_KEY", "key")
        monkeypatch.setenv("MAAS360_USERNAME", "user")
        monkeypatch.setenv("MAAS360_PASSWORD", "pass")
        monkeypatch.delenv("MAAS360_TIMEOUT", raising=False)

    @pytest.mark.asyncio
    async def test_missing_config_returns_1(self, monkeypatch):
        monkeypatch.delenv("MAAS360_BILLING_ID", raising=False)
        args = cli.build_parser().parse_args(["auth"])

        assert await cli.run(args, ConsolePresenter(io.StringIO())) == 1

    @pytest.mark.asyncio
    async def test_auth_failure_returns_1(self, env_vars):
        args = cli.build_parser().parse_args(["auth"])

        with patch.object(
            MaaS360Client, "authenticate", AsyncMock(side_effect=RemoteAuthError(1007, "Bad"))
        ):
            assert await cli.run(args, ConsolePresenter(io.StringIO())) == 1

    @pytest.mark.asyncio
    async def test_not_found_returns_1(self, env_vars):
        args = cli.build_parser().parse_args(["search"])

        with patch.object(MaaS360Client, "authenticate", AsyncMock()), patch.object(
            MaaS360Client, "search_devices", AsyncMock(side_effect=NotFoundError("devices"))
        ):
            assert await cli.run(args, ConsolePresenter(io.StringIO())) == 1

    @pytest.mark.asyncio
    async def test_success_returns_0(self, env_vars):
        args = cli.build_parser().parse_args(["lock", "D1"])
        stream = io.StringIO()

        with patch.object(MaaS360Client, "authenticate", AsyncMock()), patch.object(
            MaaS360Client, "lock_device", AsyncMock(return_value=MagicMock(
                maas360_device_id="D1", description="Queued"
            ))
        ):
            assert await cli.run(args, ConsolePresenter(stream)) == 0

        assert "Lock accepted for device D1: Queued" in stream.getvalue()

    def test_main_exits_nonzero(self, monkeypatch):
        monkeypatch.delenv("MAAS360_BILLING_ID", raising=False)

        with pytest.raises(SystemExit) as exc:
            cli.main(["auth"])

        assert exc.value.code == 1


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
