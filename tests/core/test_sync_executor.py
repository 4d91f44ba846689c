import asyncio
from pathlib import Path

import pytest
from unittest.mock import AsyncMock, MagicMock

from treepick.core.executor import SyncExecutor
from treepick.infrastructure.error_handler import ApiError
from treepick.models import (
    ClientConfig, EntryKind, PlannedDownload, RepoDescriptor, SyncOptions, TreeEntry
)


DESCRIPTOR = RepoDescriptor(owner="acme", repo="widgets", ref="main")


def make_entry(path: str, kind: EntryKind = EntryKind.BLOB) -> TreeEntry:
    mode = "040000" if kind is EntryKind.TREE else "100644"
    return TreeEntry(path=path, mode=mode, kind=kind, sha="0" * 40, size=4)


@pytest.fixture
def download_service():
    """Fake fetch primitive writing a fixed payload."""
    service = MagicMock()

    async def fetch_to_file(url, destination):
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_bytes(b"data")
        return 4

    service.fetch_to_file = AsyncMock(side_effect=fetch_to_file)
    service.ensure_directory = AsyncMock()
    return service


@pytest.fixture
def entries():
    return [make_entry("README.md"), make_entry("src/index.js")]


def test_source_url():
    executor = SyncExecutor(MagicMock())
    assert executor.make_source_url(DESCRIPTOR, "main", "src/my file.js") == (
        "https://raw.githubusercontent.com/acme/widgets/main/src/my%20file.js"
    )


def test_plan_skips_directories_and_existing(tmp_path, entries):
    (tmp_path / "README.md").write_text("existing")
    executor = SyncExecutor(MagicMock())
    options = SyncOptions(output_dir=tmp_path)

    tasks, skipped = executor.plan(
        DESCRIPTOR, "main", entries + [make_entry("src", EntryKind.TREE)], options
    )

    assert [task.entry.path for task in tasks] == ["src/index.js"]
    assert tasks[0].destination == tmp_path / "src" / "index.js"
    assert skipped == ["README.md", "src"]


@pytest.mark.asyncio
async def test_dry_run_performs_no_fetch(tmp_path, download_service, entries):
    executor = SyncExecutor(download_service)
    options = SyncOptions(output_dir=tmp_path, dry_run=True)

    report = await executor.execute(DESCRIPTOR, "main", entries, options)

    download_service.fetch_to_file.assert_not_called()
    download_service.ensure_directory.assert_not_called()
    assert report.outcomes == []
    assert report.planned == [
        PlannedDownload(
            destination=tmp_path / "README.md",
            source_url="https://raw.githubusercontent.com/acme/widgets/main/README.md"
        ),
        PlannedDownload(
            destination=tmp_path / "src/index.js",
            source_url="https://raw.githubusercontent.com/acme/widgets/main/src/index.js"
        ),
    ]
    assert list(tmp_path.iterdir()) == []


@pytest.mark.asyncio
async def test_downloads_every_candidate(tmp_path, download_service, entries):
    executor = SyncExecutor(download_service)

    report = await executor.execute(DESCRIPTOR, "main", entries, SyncOptions(output_dir=tmp_path))

    assert download_service.fetch_to_file.await_count == 2
    assert report.succeeded == 2
    assert report.planned == []
    assert (tmp_path / "src" / "index.js").read_bytes() == b"data"


@pytest.mark.asyncio
async def test_second_run_writes_nothing(tmp_path, download_service, entries):
    """Scenario: without force an unchanged tree is fetched only once"""
    executor = SyncExecutor(download_service)
    options = SyncOptions(output_dir=tmp_path)

    await executor.execute(DESCRIPTOR, "main", entries, options)
    download_service.fetch_to_file.reset_mock()
    report = await executor.execute(DESCRIPTOR, "main", entries, options)

    download_service.fetch_to_file.assert_not_called()
    assert report.outcomes == []
    assert report.skipped == ["README.md", "src/index.js"]


@pytest.mark.asyncio
async def test_force_refetches_existing(tmp_path, download_service, entries):
    (tmp_path / "README.md").write_text("old")
    executor = SyncExecutor(download_service)

    report = await executor.execute(
        DESCRIPTOR, "main", entries, SyncOptions(output_dir=tmp_path, force=True)
    )

    assert download_service.fetch_to_file.await_count == 2
    assert report.skipped == []
    assert (tmp_path / "README.md").read_bytes() == b"data"


@pytest.mark.asyncio
async def test_failure_does_not_abandon_siblings(tmp_path, download_service):
    """Scenario: a failing download is reported while siblings still complete"""
    slow_done = asyncio.Event()

    async def fetch_to_file(url, destination):
        if url.endswith("broken.txt"):
            raise ApiError("HTTP 500", status_code=500)
        await asyncio.sleep(0.01)
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_bytes(b"ok")
        slow_done.set()
        return 2

    download_service.fetch_to_file = AsyncMock(side_effect=fetch_to_file)
    executor = SyncExecutor(download_service)
    entries = [make_entry("broken.txt"), make_entry("slow.txt")]

    report = await executor.execute(DESCRIPTOR, "main", entries, SyncOptions(output_dir=tmp_path))

    assert slow_done.is_set()
    assert (tmp_path / "slow.txt").read_bytes() == b"ok"
    outcomes = {outcome.path: outcome for outcome in report.outcomes}
    assert outcomes["slow.txt"].ok
    assert outcomes["slow.txt"].bytes_written == 2
    assert not outcomes["broken.txt"].ok
    assert "HTTP 500" in outcomes["broken.txt"].error
    assert report.succeeded == 1


@pytest.mark.asyncio
async def test_concurrency_limit_is_honoured(tmp_path, download_service):
    running = 0
    peak = 0

    async def fetch_to_file(url, destination):
        nonlocal running, peak
        running += 1
        peak = max(peak, running)
        await asyncio.sleep(0.01)
        running -= 1
        return 1

    download_service.fetch_to_file = AsyncMock(side_effect=fetch_to_file)
    executor = SyncExecutor(download_service, ClientConfig(max_concurrent_downloads=2))
    entries = [make_entry(f"f{i}.txt") for i in range(6)]

    report = await executor.execute(DESCRIPTOR, "main", entries, SyncOptions(output_dir=tmp_path))

    assert report.succeeded == 6
    assert peak == 2


@pytest.mark.asyncio
async def test_unbounded_by_default(tmp_path, download_service):
    running = 0
    peak = 0

    async def fetch_to_file(url, destination):
        nonlocal running, peak
        running += 1
        peak = max(peak, running)
        await asyncio.sleep(0.01)
        running -= 1
        return 1

    download_service.fetch_to_file = AsyncMock(side_effect=fetch_to_file)
    executor = SyncExecutor(download_service)
    entries = [make_entry(f"f{i}.txt") for i in range(6)]

    await executor.execute(DESCRIPTOR, "main", entries, SyncOptions(output_dir=Path(tmp_path)))

    assert peak == 6


def test_source_url_quotes_owner_and_repo():
    executor = SyncExecutor(MagicMock())
    descriptor = RepoDescriptor(owner="acme corp", repo="wid gets", ref="main")
    assert executor.make_source_url(descriptor, "main", "README.md") == (
        "https://raw.githubusercontent.com/acme%20corp/wid%20gets/main/README.md"
    )
