"""Watch a markdown file and answer new quotes as they are written."""

import asyncio
import logging
from pathlib import Path

from openai import OpenAIError
from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from mdai.append import append_answer
from mdai.config import MdaiConfig
from mdai.document import validate_markdown_file
from mdai.errors import MdaiError
from mdai.llm_client import OpenAIClient

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_MS = 500
DEFAULT_MAX_CYCLES = 20
DEFAULT_SETTLE_MS = 200


class FileChangeHandler(FileSystemEventHandler):
    """Forward changes of one file to an asyncio queue."""

    def __init__(self, path: Path, loop: asyncio.AbstractEventLoop, queue: asyncio.Queue):
        self.path = path.resolve()
        self.loop = loop
        self.queue = queue
        self.working = False

    def _notify(self, src_path) -> None:
        if self.working or Path(src_path).resolve() != self.path:
            return
        self.loop.call_soon_threadsafe(self.queue.put_nowait, src_path)

    def on_modified(self, event):
        if not event.is_directory:
            self._notify(event.src_path)

    def on_created(self, event):
        if not event.is_directory:
            self._notify(event.src_path)

    def on_moved(self, event):
        # Editors that save through a temp file and rename.
        if not event.is_directory:
            self._notify(event.dest_path)


def _drain(queue: asyncio.Queue) -> None:
    while not queue.empty():
        queue.get_nowait()


async def watch_and_append(
    config: MdaiConfig,
    path: Path,
    operation: str = "answer",
    debounce_ms: int = DEFAULT_DEBOUNCE_MS,
    max_cycles: int = DEFAULT_MAX_CYCLES,
    settle_ms: int = DEFAULT_SETTLE_MS,
    client: OpenAIClient | None = None,
) -> int:
    """Run the append operation every time ``path`` changes.

    Each change waits ``debounce_ms`` for the editor to finish writing, then
    runs one append cycle. Events raised by that cycle's own write, including
    ones delivered up to ``settle_ms`` later, are discarded. Stops after
    ``max_cycles`` cycles and returns the count.
    """
    path = validate_markdown_file(path)
    loop = asyncio.get_running_loop()
    queue: asyncio.Queue = asyncio.Queue()
    handler = FileChangeHandler(path, loop, queue)

    observer = Observer()
    observer.schedule(handler, str(path.resolve().parent), recursive=False)
    observer.start()
    cycles = 0

    logger.info("file watching started: file=%s operation=%s", path, operation)
    logger.info("press Ctrl+C to exit")

    try:
        while True:
            await queue.get()
            cycles += 1
            logger.info("file changed: %s (cycle %d)", path, cycles)

            await asyncio.sleep(debounce_ms / 1000)
            _drain(queue)

            handler.working = True
            try:
                appended = await append_answer(config, path, operation=operation, client=client)
            except (MdaiError, OpenAIError, OSError, ValueError) as e:
                logger.error("append failed: %s", e)
            else:
                if appended:
                    logger.info("append operation completed")
            finally:
                await asyncio.sleep(settle_ms / 1000)
                _drain(queue)
                handler.working = False

            if cycles >= max_cycles:
                logger.info("maximum cycles reached: %d", max_cycles)
                return cycles
    finally:
        observer.stop()
        observer.join()
