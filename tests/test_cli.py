"""Tests for the nfsv4-exporter CLI."""

from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from nfsv4_exporter import __version__
from nfsv4_exporter.cli import app
from nfsv4_exporter.kernel import EXIT_INCOMPATIBLE_KERNEL

runner = CliRunner()


@pytest.fixture
def tree_env(populated_tree, monkeypatch):
    """Point the exporter's kernel paths at the fake tree."""
    monkeypatch.setenv("NFSV4_EXPORTER_PROC_RPC_PATH", str(populated_tree.proc_rpc))
    monkeypatch.setenv("NFSV4_EXPORTER_PROC_NFSD_PATH", str(populated_tree.proc_nfsd))
    monkeypatch.setenv("NFSV4_EXPORTER_VAR_NFS_PATH", str(populated_tree.var_nfs))
    monkeypatch.delenv("NFSV4_EXPORTER_NFSV4_OPS_CLIENTS", raising=False)
    return populated_tree


class TestVersion:
    def test_version_flag(self):
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output


class TestSetCommand:
    """Tests for `nfsv4-exporter set`."""

    def test_starts_server_with_options(self, tree_env):
        with (
            patch("nfsv4_exporter.cli.is_kernel_compatible", return_value=True),
            patch("nfsv4_exporter.cli.uvicorn.run") as run,
        ):
            result = runner.invoke(
                app, ["set", "--ip-address", "127.0.0.1", "--port", "9100", "--nfsv4-ops-clients"]
            )

        assert result.exit_code == 0, result.output
        assert "Exporter started on IP: 127.0.0.1, Port: 9100" in result.output
        run.assert_called_once()
        fastapi_app = run.call_args.args[0]
        assert fastapi_app.state.settings.nfsv4_ops_clients is True
        assert run.call_args.kwargs["host"] == "127.0.0.1"
        assert run.call_args.kwargs["port"] == 9100

    def test_defaults(self, tree_env, monkeypatch):
        monkeypatch.delenv("NFSV4_EXPORTER_PORT", raising=False)
        monkeypatch.delenv("NFSV4_EXPORTER_IP_ADDRESS", raising=False)
        with (
            patch("nfsv4_exporter.cli.is_kernel_compatible", return_value=True),
            patch("nfsv4_exporter.cli.uvicorn.run") as run,
        ):
            result = runner.invoke(app, ["set"])

        assert result.exit_code == 0, result.output
        assert run.call_args.kwargs["host"] == "0.0.0.0"
        assert run.call_args.kwargs["port"] == 9944
        assert run.call_args.args[0].state.settings.nfsv4_ops_clients is False

    def test_old_kernel_exits(self, tree_env):
        with (
            patch("nfsv4_exporter.cli.is_kernel_compatible", return_value=False),
            patch("nfsv4_exporter.cli.uvicorn.run") as run,
        ):
            result = runner.invoke(app, ["set"])

        assert result.exit_code == EXIT_INCOMPATIBLE_KERNEL
        run.assert_not_called()


class TestShowCommand:
    """Tests for `nfsv4-exporter show`."""

    def test_prints_server_stats(self, tree_env):
        result = runner.invoke(app, ["show"])

        assert result.exit_code == 0, result.output
        assert "reply cache hits" in result.output
        assert "NFSv4 clients" not in result.output

    def test_prints_clients_when_requested(self, tree_env):
        result = runner.invoke(app, ["show", "--clients"])

        assert result.exit_code == 0, result.output
        assert "NFSv4 clients" in result.output
        assert "0xabc123" in result.output

    def test_malformed_source_exits_with_error(self, tree_env):
        tree_env.write_rpc_nfsd("rc ten 2 1\n")

        result = runner.invoke(app, ["show"])

        assert result.exit_code == 1
        assert "reply_cache" in result.output
