"""Tests for SnapshotAssembler."""

from unittest.mock import MagicMock

import pytest

from nfsv4_exporter.exceptions import (
    MalformedRecordError,
    ScrapeFailedError,
    UnreadableSourceError,
)
from nfsv4_exporter.snapshot import SnapshotAssembler
from nfsv4_exporter.types import NfsServerStats, ReplyCacheCounters, ServerSnapshot


class TestSnapshotAssembler:
    """Tests for SnapshotAssembler.assemble()."""

    def test_empty_tree_yields_zero_snapshot(self, nfs_tree):
        assembler = SnapshotAssembler.from_settings(nfs_tree.settings())

        assert assembler.assemble(collect_per_client_ops=True) == ServerSnapshot()

    def test_populated_tree(self, populated_tree):
        assembler = SnapshotAssembler.from_settings(populated_tree.settings())

        snapshot = assembler.assemble(collect_per_client_ops=True)

        assert snapshot.stats.reply_cache == ReplyCacheCounters(10, 2, 1)
        assert snapshot.client_count == 1
        assert snapshot.export_count == 2
        assert len(snapshot.clients) == 1
        assert snapshot.clients[0].address == "10.0.0.1:876"

    def test_clients_skipped_when_disabled(self, populated_tree):
        assembler = SnapshotAssembler.from_settings(populated_tree.settings())

        snapshot = assembler.assemble(collect_per_client_ops=False)

        assert snapshot.client_count == 1
        assert snapshot.clients == ()

    def test_list_clients_not_called_when_disabled(self):
        reply_cache_reader = MagicMock()
        reply_cache_reader.read.return_value = NfsServerStats()
        client_reader = MagicMock()
        client_reader.count_clients.return_value = 4
        client_reader.count_exports.return_value = 2

        snapshot = SnapshotAssembler(reply_cache_reader, client_reader).assemble(False)

        client_reader.list_clients.assert_not_called()
        assert snapshot.client_count == 4
        assert snapshot.export_count == 2

    def test_repeated_scrapes_are_identical(self, populated_tree):
        """No caching and no hidden state: same filesystem, same snapshot."""
        assembler = SnapshotAssembler.from_settings(populated_tree.settings())

        first = assembler.assemble(collect_per_client_ops=True)
        second = assembler.assemble(collect_per_client_ops=True)

        assert first == second

    def test_rereads_filesystem_every_call(self, populated_tree):
        assembler = SnapshotAssembler.from_settings(populated_tree.settings())
        assembler.assemble(collect_per_client_ops=False)

        populated_tree.write_rpc_nfsd("rc 99 0 0\n")

        snapshot = assembler.assemble(collect_per_client_ops=False)
        assert snapshot.stats.reply_cache.hits == 99

    def test_malformed_record_aborts_scrape(self, populated_tree):
        populated_tree.write_rpc_nfsd("rc ten 2 1\n")
        assembler = SnapshotAssembler.from_settings(populated_tree.settings())

        with pytest.raises(ScrapeFailedError) as exc_info:
            assembler.assemble(collect_per_client_ops=True)

        assert exc_info.value.component == "reply_cache"
        assert isinstance(exc_info.value.source_error, MalformedRecordError)

    def test_malformed_record_is_logged(self, populated_tree, caplog):
        populated_tree.write_rpc_nfsd("rc ten 2 1\n")
        assembler = SnapshotAssembler.from_settings(populated_tree.settings())

        with pytest.raises(ScrapeFailedError):
            assembler.assemble(collect_per_client_ops=False)

        assert "rc ten 2 1" in caplog.text

    def test_short_record_does_not_abort(self, populated_tree):
        populated_tree.write_rpc_nfsd("rc 1\n")
        assembler = SnapshotAssembler.from_settings(populated_tree.settings())

        snapshot = assembler.assemble(collect_per_client_ops=False)

        assert snapshot.stats.reply_cache == ReplyCacheCounters()
        assert snapshot.export_count == 2


class TestFailingComponent:
    """ScrapeFailedError names the reader that failed."""

    def assemble_failure(self, tree, collect_per_client_ops=True) -> ScrapeFailedError:
        assembler = SnapshotAssembler.from_settings(tree.settings())
        with pytest.raises(ScrapeFailedError) as exc_info:
            assembler.assemble(collect_per_client_ops=collect_per_client_ops)
        return exc_info.value

    def test_unreadable_rpc_stats(self, populated_tree):
        (populated_tree.proc_rpc / "nfsd").unlink()
        (populated_tree.proc_rpc / "nfsd").mkdir()

        error = self.assemble_failure(populated_tree)

        assert error.component == "reply_cache"
        assert isinstance(error.source_error, UnreadableSourceError)

    def test_unreadable_clients_root(self, nfs_tree):
        nfs_tree.proc_nfsd.mkdir(parents=True)
        nfs_tree.clients_root.symlink_to(nfs_tree.clients_root)

        error = self.assemble_failure(nfs_tree)

        assert error.component == "clients"
        assert isinstance(error.source_error, UnreadableSourceError)

    def test_unreadable_etab(self, populated_tree):
        (populated_tree.var_nfs / "etab").unlink()
        (populated_tree.var_nfs / "etab").mkdir()

        error = self.assemble_failure(populated_tree, collect_per_client_ops=False)

        assert error.component == "exports"
        assert isinstance(error.source_error, UnreadableSourceError)

    @pytest.mark.parametrize("filename", ["info", "states"])
    def test_unreadable_client_file(self, populated_tree, filename):
        (populated_tree.clients_root / "3" / filename).unlink()
        (populated_tree.clients_root / "3" / filename).mkdir()

        error = self.assemble_failure(populated_tree)

        assert error.component == "client_info"
        assert isinstance(error.source_error, UnreadableSourceError)

    def test_unreadable_client_file_ignored_when_disabled(self, populated_tree):
        (populated_tree.clients_root / "3" / "info").unlink()
        (populated_tree.clients_root / "3" / "info").mkdir()
        assembler = SnapshotAssembler.from_settings(populated_tree.settings())

        snapshot = assembler.assemble(collect_per_client_ops=False)

        assert snapshot.client_count == 1
        assert snapshot.clients == ()
