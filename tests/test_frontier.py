"""Tests for frontier processing using an in-memory tree.

The in-memory adapter yields to the event loop on every call, so reads
and stats of one level genuinely overlap.
"""

import asyncio
import stat

import pytest

from ftwalk import WalkConfig, WalkEventKind
from ftwalk.aio import AsyncTreeWalker, CollectErrorsPolicy
from ftwalk.aio.core import CompletionTracker, VisitedSet, gather_all
from ftwalk.testing import FELIDAE, InMemoryAdapter


TREE = {
    'a': {
        'a1': {'deep.txt': ''},
        'a.txt': '',
    },
    'b': {
        'b.txt': '',
    },
    'top.txt': '',
}


def depth_of(path):
    """Depth of an in-memory directory path; 'root' is 0."""
    return path.count('/')


async def run_events(walker, paths):
    return [event async for event in walker.walk(paths)]


class TestVisitedSet:

    def test_claim_once(self):
        visited = VisitedSet(lambda p: p.rstrip('/'))
        assert visited.claim('root/a') is True
        assert visited.claim('root/a/') is False
        assert 'root/a' in visited
        assert len(visited) == 1
        assert visited.paths == ['root/a']

    def test_grows_monotonically(self):
        visited = VisitedSet(str)
        for path in ['x', 'y', 'x', 'z', 'y']:
            visited.claim(path)
        assert visited.paths == ['x', 'y', 'z']


class TestCompletionTracker:

    @pytest.mark.asyncio
    async def test_counts_in_flight_operations(self):
        tracker = CompletionTracker()
        assert tracker.idle

        async with tracker.track('list_directory'):
            async with tracker.track('inspect'):
                assert tracker.pending == 2
                assert not tracker.idle
            assert tracker.pending == 1

        assert tracker.idle
        snapshot = tracker.snapshot()
        assert snapshot['reads'] == 1
        assert snapshot['inspections'] == 1
        assert snapshot['peak_pending'] == 2

    @pytest.mark.asyncio
    async def test_releases_on_error(self):
        tracker = CompletionTracker()
        with pytest.raises(OSError):
            async with tracker.track('inspect'):
                raise OSError('boom')
        assert tracker.idle


class TestGatherAll:

    @pytest.mark.asyncio
    async def test_preserves_order(self):
        async def value(v, delay):
            await asyncio.sleep(delay)
            return v

        assert await gather_all([value(1, 0.02), value(2, 0), value(3, 0.01)]) == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_empty(self):
        assert await gather_all([]) == []

    @pytest.mark.asyncio
    async def test_failure_cancels_siblings(self):
        finished = []

        async def slow():
            await asyncio.sleep(1)
            finished.append('slow')

        async def fail():
            raise ValueError('bad')

        with pytest.raises(ValueError):
            await gather_all([slow(), fail()])
        await asyncio.sleep(0)
        assert finished == []


class TestBreadthFirstLevels:

    @pytest.mark.asyncio
    async def test_level_settles_before_next_begins(self):
        """No directory at depth d+1 is read before depth d is fully stat'd."""
        adapter = InMemoryAdapter(FELIDAE, root='Felidae')
        walker = AsyncTreeWalker(adapter=adapter)
        events = await run_events(walker, 'Felidae')

        # Every root-level entry is stat'd before any subdirectory read
        first_sub_read = adapter.read_log.index(next(p for p in adapter.read_log if p != 'Felidae'))
        assert first_sub_read == 1
        root_entries = [p for p in adapter.inspect_log if depth_of(p) == 1]
        assert len(root_entries) == 8
        assert adapter.inspect_log[:8] == root_entries

        # Every directory event at depth 1 comes after all depth-0 files
        positions = {
            (e.kind, e.path): i for i, e in enumerate(events)
        }
        last_top_file = max(i for (kind, path), i in positions.items()
                            if kind is WalkEventKind.FILE and depth_of(path) == 1)
        first_sub_dir = min(i for (kind, path), i in positions.items()
                            if kind is WalkEventKind.DIRECTORY and depth_of(path) == 1)
        assert last_top_file < first_sub_dir

    @pytest.mark.asyncio
    async def test_concurrent_reads_within_level(self):
        """All directories of a level are in flight together."""
        adapter = InMemoryAdapter(FELIDAE, root='Felidae', delay=0.01)
        walker = AsyncTreeWalker(adapter=adapter)
        summary = await walker.run('Felidae')

        # 5 subdirectory reads (or their 13 stats) overlap
        assert summary.peak_in_flight >= 5
        assert summary.count('file') == 16

    @pytest.mark.asyncio
    async def test_concurrency_cap_respected(self):
        adapter = InMemoryAdapter(FELIDAE, root='Felidae', delay=0.005, max_concurrent=2)
        walker = AsyncTreeWalker(adapter=adapter)
        summary = await walker.run('Felidae')

        stats = await adapter.get_stats()
        assert stats['peak_active'] <= 2
        assert stats['active'] == 0
        assert summary.count('file') == 16

    @pytest.mark.asyncio
    async def test_duplicate_roots_read_once(self):
        adapter = InMemoryAdapter(TREE)
        walker = AsyncTreeWalker(adapter=adapter)
        events = await run_events(walker, ['root', 'root/', 'root/a', 'root/a/a1'])

        assert sorted(adapter.read_log) == ['root', 'root/a', 'root/a/a1', 'root/b']
        directories = [e.path for e in events if e.kind is WalkEventKind.DIRECTORY]
        assert len(directories) == 4

    @pytest.mark.asyncio
    async def test_depth_cutoff_not_listed(self):
        adapter = InMemoryAdapter(TREE)
        walker = AsyncTreeWalker(WalkConfig(max_depth=1), adapter=adapter)
        events = await run_events(walker, 'root')

        assert sorted(adapter.read_log) == ['root', 'root/a', 'root/b']
        files = sorted(e.path for e in events if e.kind is WalkEventKind.FILE)
        assert files == ['root/a/a.txt', 'root/b/b.txt', 'root/top.txt']
        # a1 was stat'd (it is an entry of a listed directory) but not read
        assert 'root/a/a1' in adapter.inspect_log


class TestClassificationEvents:

    @pytest.mark.asyncio
    async def test_special_files(self):
        adapter = InMemoryAdapter(
            {'disk': '', 'tty': '', 'pipe': '', 'sock': '', 'plain': ''},
            modes={
                'root/disk': stat.S_IFBLK,
                'root/tty': stat.S_IFCHR,
                'root/pipe': stat.S_IFIFO,
                'root/sock': stat.S_IFSOCK,
            },
        )
        walker = AsyncTreeWalker(adapter=adapter)
        events = await run_events(walker, 'root')

        by_kind = {e.kind: e.path for e in events
                   if e.kind not in (WalkEventKind.DIRECTORY, WalkEventKind.DONE)}
        assert by_kind == {
            WalkEventKind.BLOCK: 'root/disk',
            WalkEventKind.CHARACTER: 'root/tty',
            WalkEventKind.FIFO: 'root/pipe',
            WalkEventKind.SOCKET: 'root/sock',
            WalkEventKind.FILE: 'root/plain',
        }

    @pytest.mark.asyncio
    async def test_unknown_mode_emits_nothing(self):
        """An entry matching no predicate is stat'd but not reported."""
        adapter = InMemoryAdapter({'odd': ''}, modes={'root/odd': 0})
        walker = AsyncTreeWalker(adapter=adapter)
        events = await run_events(walker, 'root')

        assert [e.kind for e in events] == [WalkEventKind.DIRECTORY, WalkEventKind.DONE]


class TestFailures:

    @pytest.mark.asyncio
    async def test_read_failure_prunes_subtree(self):
        adapter = InMemoryAdapter(TREE, read_failures={'root/a': PermissionError(13, 'denied', 'root/a')})
        policy = CollectErrorsPolicy()
        walker = AsyncTreeWalker(adapter=adapter, error_policy=policy)
        events = await run_events(walker, 'root')

        files = sorted(e.path for e in events if e.kind is WalkEventKind.FILE)
        assert files == ['root/b/b.txt', 'root/top.txt']
        errors = [e.error for e in events if e.kind is WalkEventKind.ERROR]
        assert [(err.path, err.operation) for err in errors] == [('root/a', 'list_directory')]
        assert events[-1].kind is WalkEventKind.DONE
        assert policy.skipped_paths == ['root/a']

    @pytest.mark.asyncio
    async def test_inspect_failure_reported_not_dropped(self):
        adapter = InMemoryAdapter(TREE, stat_failures={'root/top.txt': FileNotFoundError(2, 'vanished')})
        walker = AsyncTreeWalker(adapter=adapter, error_policy=CollectErrorsPolicy())
        events = await run_events(walker, 'root')

        errors = [e.error for e in events if e.kind is WalkEventKind.ERROR]
        assert len(errors) == 1
        assert errors[0].operation == 'inspect'
        assert 'root/top.txt' not in [e.path for e in events if e.kind is WalkEventKind.FILE]

    @pytest.mark.asyncio
    async def test_all_roots_fail(self):
        adapter = InMemoryAdapter(TREE)
        walker = AsyncTreeWalker(adapter=adapter, error_policy=CollectErrorsPolicy())
        events = await run_events(walker, ['nope', 'root/top.txt', 'missing'])

        assert [e.kind for e in events] == [WalkEventKind.ERROR] * 3 + [WalkEventKind.DONE]
        assert (await adapter.get_stats())['active'] == 0
