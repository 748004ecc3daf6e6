"""In-memory state for the watch server: the latest graph and its subscribers."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from code_clarity.formatter import RenderOptions, get_formatter, graph_document
from code_clarity.models import GraphConfig, WatchConfig
from code_clarity.pipeline import build_file_graph

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GraphSnapshot:
    version: int
    payload: dict[str, Any]
    generated_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "generated_at": self.generated_at,
            "payload": self.payload,
        }


class GraphBroker:
    """Latest-value broadcast of graph snapshots.

    Every subscriber owns a one-slot queue. Publishing replaces a snapshot the
    subscriber has not picked up yet, so a slow client only ever sees the
    newest graph and the publisher never waits. Must be used from the event
    loop thread.
    """

    def __init__(self):
        self._subscribers: set[asyncio.Queue] = set()
        self.latest: GraphSnapshot | None = None

    def subscribe(self) -> asyncio.Queue:
        queue: asyncio.Queue = asyncio.Queue(maxsize=1)
        if self.latest is not None:
            queue.put_nowait(self.latest)
        self._subscribers.add(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue) -> None:
        self._subscribers.discard(queue)

    def publish(self, snapshot: GraphSnapshot) -> None:
        self.latest = snapshot
        for queue in list(self._subscribers):
            if queue.full():
                try:
                    queue.get_nowait()
                except asyncio.QueueEmpty:
                    pass
            queue.put_nowait(snapshot)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)


def build_payload(config: WatchConfig) -> dict[str, Any]:
    """Build the graph of the repository's uncommitted changes.

    Blocking; the rebuild loop runs it in a worker thread.
    """
    graph_config = GraphConfig(repo_path=config.repo_path, workers=config.workers, output_format="json")
    file_graph, warnings, label = build_file_graph(graph_config)
    if file_graph is None:
        return {
            "clean": True,
            "label": "",
            "graph": {"nodes": [], "edges": [], "cycles": []},
            "mermaid": "",
            "warnings": [],
        }

    options = RenderOptions(label=label)
    return {
        "clean": False,
        "label": label,
        "graph": graph_document(file_graph, options),
        "mermaid": get_formatter("mermaid").format(file_graph, options),
        "warnings": [{"path": w.path, "reason": w.reason} for w in warnings],
    }


class WatchSession:
    """Everything one `watch` server shares between the rebuild loop and the routes."""

    def __init__(self, config: WatchConfig):
        self.config = config
        self.broker = GraphBroker()
        self.started_at = datetime.now(timezone.utc).isoformat()
        self.last_error: str | None = None
        self._version = 0

    @property
    def latest(self) -> GraphSnapshot | None:
        return self.broker.latest

    def publish(self, payload: dict[str, Any]) -> GraphSnapshot:
        self._version += 1
        snapshot = GraphSnapshot(version=self._version, payload=payload)
        self.broker.publish(snapshot)
        self.last_error = None
        logger.info("published graph version %d", snapshot.version)
        return snapshot
