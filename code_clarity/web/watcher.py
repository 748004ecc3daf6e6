"""Rebuild loop: watch the repository and republish the graph on change."""

from __future__ import annotations

import asyncio
import logging
import os

from watchfiles import Change, DefaultFilter, awatch

from code_clarity.errors import GitError
from code_clarity.languages import is_supported_extension
from code_clarity.vcs import git
from code_clarity.web.state import WatchSession, build_payload

logger = logging.getLogger(__name__)


class SourceFileFilter(DefaultFilter):
    """Only react to files some resolver understands."""

    extra_ignore_dirs = (".dart_tool", "build", ".gradle", ".idea", ".vscode")

    def __init__(self):
        super().__init__(ignore_dirs=(*DefaultFilter.ignore_dirs, *self.extra_ignore_dirs))

    def __call__(self, change: Change, path: str) -> bool:
        return super().__call__(change, path) and is_supported_extension(os.path.splitext(path)[1])


class RebuildLoop:
    """Serializes rebuilds in a single asyncio task.

    File events are debounced by watchfiles. When no event arrives within the
    poll interval the repository state signature is compared instead, which
    catches commits, checkouts and stash operations that touch no watched
    source file.
    """

    def __init__(self, session: WatchSession):
        self.session = session
        self._stop = asyncio.Event()
        self._task: asyncio.Task | None = None
        self._signature: str | None = None

    @property
    def repo_path(self) -> str:
        return str(self.session.config.repo_path)

    def start(self) -> asyncio.Task:
        self._task = asyncio.create_task(self.run(), name="code-clarity-rebuild")
        return self._task

    async def stop(self) -> None:
        self._stop.set()
        if self._task is not None:
            try:
                await asyncio.wait_for(self._task, timeout=5)
            except asyncio.TimeoutError:
                self._task.cancel()

    async def run(self) -> None:
        config = self.session.config
        self._signature = await self._read_signature()
        await self.rebuild("initial build")

        async for changes in awatch(
            self.repo_path,
            watch_filter=SourceFileFilter(),
            debounce=config.debounce_ms,
            rust_timeout=int(config.state_poll_seconds * 1000),
            yield_on_timeout=True,
            stop_event=self._stop,
        ):
            signature = await self._read_signature()
            if changes:
                logger.debug("%d file change(s) detected", len(changes))
                self._signature = signature
                await self.rebuild("file change")
            elif signature != self._signature:
                self._signature = signature
                await self.rebuild("repository state change")

    async def rebuild(self, reason: str) -> None:
        logger.info("rebuilding graph (%s)", reason)
        try:
            payload = await asyncio.to_thread(build_payload, self.session.config)
        except Exception as e:
            self.session.last_error = str(e)
            logger.exception("graph rebuild failed")
            return
        self.session.publish(payload)

    async def _read_signature(self) -> str | None:
        try:
            return await asyncio.to_thread(git.repository_state_signature, self.repo_path)
        except GitError as e:
            logger.warning("git state read error: %s", e)
            return None
