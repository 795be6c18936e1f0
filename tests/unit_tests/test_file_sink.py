"""
File sink unit tests: record format, day rotation, error diversion.
"""

from __future__ import annotations

import os
import sys
import threading
from datetime import datetime, timedelta

import pytest

from logprovider.file_sink import SEPARATOR, FileSink, LogFileRecord, format_record

FIXED_NOW = datetime(2026, 10, 19, 14, 5, 9)


def _read(path) -> str:
    return path.read_bytes().decode("utf-8")


def _set_mtime(path, when: datetime) -> None:
    stamp = when.timestamp()
    os.utime(path, (stamp, stamp))


class TestRecordFormat:
    def test_record_with_machine_identifier(self) -> None:
        content = format_record("[Information] hello", "HOST", FIXED_NOW)
        assert content == f"2026/10/19 14:05:09\tHOST\t[Information] hello\r\n{SEPARATOR}\r\n"

    def test_record_without_machine_identifier(self) -> None:
        content = format_record("hello", None, FIXED_NOW)
        assert content == f"2026/10/19 14:05:09\thello\r\n{SEPARATOR}\r\n"

    def test_error_record_appends_exception_block(self) -> None:
        content = format_record("hello", None, FIXED_NOW, error="disk full")
        assert content.endswith(f"hello\r\n{SEPARATOR}\r\ndisk full\r\n{SEPARATOR}\r\n")

    def test_separator_is_119_dashes(self) -> None:
        assert SEPARATOR == "-" * 119


class TestWriteEntry:
    def test_creates_log_file_named_after_application(self, tmp_path) -> None:
        sink = FileSink(clock=lambda: FIXED_NOW)
        sink.write_entry(LogFileRecord("hello", "Orders", tmp_path, "HOST"))

        log_path = tmp_path / "OrdersLog.txt"
        assert _read(log_path) == f"2026/10/19 14:05:09\tHOST\thello\r\n{SEPARATOR}\r\n"

    def test_appends_on_same_day(self, tmp_path) -> None:
        sink = FileSink()
        sink.write_entry(LogFileRecord("first", "Orders", tmp_path))
        sink.write_entry(LogFileRecord("second", "Orders", tmp_path))

        content = _read(tmp_path / "OrdersLog.txt")
        assert "first" in content and "second" in content
        assert content.count(SEPARATOR) == 2
        assert list(tmp_path.glob("*_OrdersLog.txt")) == []


class TestRotation:
    def test_file_from_yesterday_is_rotated(self, tmp_path) -> None:
        log_path = tmp_path / "OrdersLog.txt"
        log_path.write_text("yesterday entry\r\n", encoding="utf-8")
        yesterday = datetime.now() - timedelta(days=1)
        _set_mtime(log_path, yesterday)

        record = LogFileRecord("today entry", "Orders", tmp_path)
        FileSink().write_entry(record)

        rotated = list(tmp_path.glob("*_OrdersLog.txt"))
        assert [p.name for p in rotated] == [f"{yesterday:%Y%m%d}_OrdersLog.txt"]
        assert _read(rotated[0]) == "yesterday entry\r\n"

        current = _read(log_path)
        assert "today entry" in current
        assert "yesterday entry" not in current
        assert record.backup_time is not None
        assert record.backup_time.date() == datetime.now().date()

    def test_file_from_today_is_not_rotated(self, tmp_path) -> None:
        log_path = tmp_path / "OrdersLog.txt"
        log_path.write_text("earlier today\r\n", encoding="utf-8")

        record = LogFileRecord("later today", "Orders", tmp_path)
        FileSink().write_entry(record)

        assert list(tmp_path.glob("*_OrdersLog.txt")) == []
        assert record.backup_time is None
        assert _read(log_path).startswith("earlier today\r\n")

    def test_rotation_uses_last_modified_date(self, tmp_path) -> None:
        log_path = tmp_path / "OrdersLog.txt"
        log_path.write_text("old", encoding="utf-8")
        _set_mtime(log_path, datetime(2025, 3, 7, 23, 59, 0))

        FileSink().write_entry(LogFileRecord("new", "Orders", tmp_path))

        assert (tmp_path / "20250307_OrdersLog.txt").exists()

    def test_same_day_rotation_collision_overwrites(self, tmp_path) -> None:
        target = tmp_path / "20250307_OrdersLog.txt"
        target.write_text("stale archive", encoding="utf-8")
        log_path = tmp_path / "OrdersLog.txt"
        log_path.write_text("fresh archive", encoding="utf-8")
        _set_mtime(log_path, datetime(2025, 3, 7, 12, 0, 0))

        FileSink().write_entry(LogFileRecord("new", "Orders", tmp_path))

        assert _read(target) == "fresh archive"


class TestFailurePath:
    def test_missing_folder_does_not_raise(self, tmp_path) -> None:
        folder = tmp_path / "does-not-exist"

        FileSink().write_entry(LogFileRecord("hello", "Orders", folder))

        assert not (folder / "OrdersLog.txt").exists()
        assert not (folder / "OrdersErrorLog.txt").exists()

    @pytest.mark.skipif(
        sys.platform == "win32" or (hasattr(os, "geteuid") and os.geteuid() == 0),
        reason="needs POSIX permissions enforced for a non-root user",
    )
    def test_read_only_folder_does_not_raise(self, tmp_path) -> None:
        folder = tmp_path / "ro"
        folder.mkdir()
        folder.chmod(0o500)
        try:
            FileSink().write_entry(LogFileRecord("hello", "Orders", folder))

            assert not (folder / "OrdersLog.txt").exists()
            assert not (folder / "OrdersErrorLog.txt").exists()
        finally:
            folder.chmod(0o700)

    def test_write_failure_is_diverted_to_error_log(self, tmp_path) -> None:
        # a directory in place of the log file makes the append fail
        (tmp_path / "OrdersLog.txt").mkdir()

        FileSink(clock=lambda: FIXED_NOW).write_entry(LogFileRecord("hello", "Orders", tmp_path, "HOST"))

        content = _read(tmp_path / "OrdersErrorLog.txt")
        assert content.startswith(f"2026/10/19 14:05:09\tHOST\thello\r\n{SEPARATOR}\r\n")
        assert content.endswith(f"\r\n{SEPARATOR}\r\n")
        assert content.count(SEPARATOR) == 2

    def test_failing_clock_is_swallowed(self, tmp_path) -> None:
        def broken_clock() -> datetime:
            raise RuntimeError("no clock")

        FileSink(clock=broken_clock).write_entry(LogFileRecord("hello", "Orders", tmp_path))

        assert not (tmp_path / "OrdersLog.txt").exists()


class TestConcurrency:
    @pytest.mark.parametrize("threads,writes", [(8, 25)])
    def test_concurrent_writes_are_not_interleaved(self, tmp_path, threads, writes) -> None:
        sink = FileSink()

        def worker(index: int) -> None:
            for n in range(writes):
                sink.write_entry(LogFileRecord(f"worker-{index}-{n}", "Orders", tmp_path))

        pool = [threading.Thread(target=worker, args=(i,)) for i in range(threads)]
        for thread in pool:
            thread.start()
        for thread in pool:
            thread.join()

        lines = _read(tmp_path / "OrdersLog.txt").split("\r\n")
        messages = [line for line in lines if "worker-" in line]
        separators = [line for line in lines if line == SEPARATOR]
        assert len(messages) == threads * writes
        assert len(separators) == threads * writes
