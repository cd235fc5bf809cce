"""Tests for mdai.watcher — real file writes, append_answer patched."""

import asyncio
import contextlib
import logging
from unittest.mock import AsyncMock, patch

import pytest

from mdai.errors import DocumentError
from mdai.watcher import FileChangeHandler, watch_and_append


def _append_line(path, text="\n> And yield?\n"):
    with open(path, "a", encoding="utf-8") as f:
        f.write(text)


async def _start(config, path, max_cycles, debounce_ms=0):
    task = asyncio.create_task(
        watch_and_append(config, path, debounce_ms=debounce_ms, max_cycles=max_cycles, settle_ms=50)
    )
    # let the observer schedule its watch
    await asyncio.sleep(0.2)
    return task


async def _cancel(task):
    task.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await task


class TestWatchAndAppend:
    async def test_runs_append_on_write(self, config, md_file):
        with patch("mdai.watcher.append_answer", new_callable=AsyncMock, return_value=True) as mock_append:
            task = await _start(config, md_file, max_cycles=1)
            mock_append.assert_not_called()

            _append_line(md_file)
            cycles = await asyncio.wait_for(task, timeout=5)

        assert cycles == 1
        mock_append.assert_awaited_once()
        assert mock_append.call_args.args == (config, md_file)

    async def test_own_write_is_not_a_new_change(self, config, md_file):
        async def append_and_write(*args, **kwargs):
            _append_line(md_file, "\n\nIt delegates to a subgenerator.")
            return True

        with patch("mdai.watcher.append_answer", side_effect=append_and_write) as mock_append:
            task = await _start(config, md_file, max_cycles=2)
            _append_line(md_file)
            await asyncio.sleep(0.5)

            assert mock_append.call_count == 1
            assert not task.done()
            await _cancel(task)

    async def test_writes_within_debounce_are_one_cycle(self, config, md_file):
        with patch("mdai.watcher.append_answer", new_callable=AsyncMock, return_value=True) as mock_append:
            task = await _start(config, md_file, max_cycles=2, debounce_ms=300)
            for _ in range(3):
                _append_line(md_file)
                await asyncio.sleep(0.02)
            await asyncio.sleep(0.8)

            assert mock_append.await_count == 1
            await _cancel(task)

    async def test_failed_cycle_is_logged_and_watching_continues(self, config, md_file, caplog):
        side_effects = [DocumentError("fail in loading content: busy"), True]
        with patch("mdai.watcher.append_answer", new_callable=AsyncMock, side_effect=side_effects) as mock_append:
            with caplog.at_level(logging.ERROR, logger="mdai.watcher"):
                task = await _start(config, md_file, max_cycles=2)
                _append_line(md_file)
                await asyncio.sleep(0.4)
                _append_line(md_file)
                cycles = await asyncio.wait_for(task, timeout=5)

        assert cycles == 2
        assert mock_append.await_count == 2
        assert "append failed: fail in loading content" in caplog.text

    async def test_other_files_are_ignored(self, config, md_file):
        with patch("mdai.watcher.append_answer", new_callable=AsyncMock, return_value=True) as mock_append:
            task = await _start(config, md_file, max_cycles=1)
            (md_file.parent / "other.md").write_text("> elsewhere\n", encoding="utf-8")
            await asyncio.sleep(0.4)

            mock_append.assert_not_called()
            await _cancel(task)

    async def test_missing_file_raises(self, config, tmp_path):
        with pytest.raises(DocumentError, match="file not found"):
            await watch_and_append(config, tmp_path / "missing.md")

    async def test_observer_stopped_on_cancel(self, config, md_file):
        with patch("mdai.watcher.Observer") as mock_observer_cls:
            observer = mock_observer_cls.return_value
            task = asyncio.create_task(watch_and_append(config, md_file))
            await asyncio.sleep(0.05)
            observer.start.assert_called_once()

            await _cancel(task)

        observer.stop.assert_called_once()
        observer.join.assert_called_once()


class TestFileChangeHandler:
    def _handler(self, path):
        loop = asyncio.get_running_loop()
        return FileChangeHandler(path, loop, asyncio.Queue())

    async def test_forwards_target_modification(self, md_file):
        handler = self._handler(md_file)
        handler._notify(str(md_file))
        await asyncio.sleep(0)
        assert handler.queue.qsize() == 1

    async def test_drops_events_while_working(self, md_file):
        handler = self._handler(md_file)
        handler.working = True
        handler._notify(str(md_file))
        await asyncio.sleep(0)
        assert handler.queue.empty()

    async def test_drops_other_paths(self, md_file):
        handler = self._handler(md_file)
        handler._notify(str(md_file.parent / "other.md"))
        await asyncio.sleep(0)
        assert handler.queue.empty()
