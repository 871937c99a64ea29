"""Development-mode file watching for fragment files and the renderer skeleton."""

from __future__ import annotations

import glob
import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

import httpx

from .build import load_registry, write_fragments
from .components.registry import ComponentRegistry
from .config import PluginConfig
from .errors import FlexPagesError

logger = logging.getLogger(__name__)


@dataclass
class DevServerStatus:
    last_build_ok: bool
    last_error: Optional[str] = None


class PollingWatcher:
    """Lightweight cross-platform polling watcher over glob patterns.

    Patterns are re-expanded on every poll, so files created after the watcher
    started are reported as changes too. Removed files are reported once.
    """

    def __init__(self, patterns: Sequence[str], *, interval: float = 0.75) -> None:
        self._patterns = list(patterns)
        self._interval = interval
        self._listener: Optional[Callable[[List[Path]], None]] = None
        self._thread: Optional[threading.Thread] = None
        self._stop = threading.Event()
        self._snapshot = self._scan()

    def _scan(self) -> Dict[Path, float]:
        snapshot: Dict[Path, float] = {}
        for pattern in self._patterns:
            for match in glob.glob(pattern):
                path = Path(match)
                try:
                    snapshot[path] = path.stat().st_mtime
                except FileNotFoundError:
                    continue
        return snapshot

    def watch(self, listener: Callable[[List[Path]], None]) -> None:
        self._listener = listener

    def poll(self) -> List[Path]:
        """Compare the filesystem with the last snapshot and return changed paths."""
        current = self._scan()
        changed = [path for path, mtime in current.items() if self._snapshot.get(path) != mtime]
        changed.extend(path for path in self._snapshot if path not in current)
        self._snapshot = current
        return sorted(changed)

    def start(self) -> None:
        if self._listener is None:
            raise RuntimeError("PollingWatcher requires a listener before starting")
        if self._thread is not None:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._loop, name="flexpages-watcher", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._stop.set()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=2.0)
        self._thread = None

    def _loop(self) -> None:
        while not self._stop.is_set():
            changed = self.poll()
            if changed and self._listener is not None:
                try:
                    self._listener(changed)
                except Exception:  # pragma: no cover - watcher should not crash
                    logger.exception("File watcher listener failed")
            if self._stop.wait(self._interval):  # pragma: no branch
                break


def request_refresh(url: str, *, client: Optional[httpx.Client] = None) -> bool:
    """Ask the dev server to re-run page creation. Failures are logged, not raised."""
    try:
        if client is not None:
            response = client.post(url)
        else:
            response = httpx.post(url, timeout=10.0)
        response.raise_for_status()
    except httpx.HTTPError as exc:
        logger.warning("Could not refresh dev server at %s: %s", url, exc)
        return False
    logger.info("Requested dev server refresh at %s", url)
    return True


class DevSession:
    """Keeps generated fragments, page renderers and the dev server in step with source edits."""

    def __init__(
        self,
        config: PluginConfig,
        *,
        static: Optional[ComponentRegistry] = None,
        refresh: Optional[Callable[[], object]] = None,
        rebuild: Optional[Callable[[], object]] = None,
    ) -> None:
        self.config = config
        self.static = static
        self.registry: Optional[ComponentRegistry] = None
        self._refresh = refresh or (lambda: request_refresh(config.refresh_url))
        self._rebuild = rebuild
        self._watcher: Optional[PollingWatcher] = None
        self._status = DevServerStatus(last_build_ok=False)
        self._lock = threading.Lock()

    @property
    def status(self) -> DevServerStatus:
        with self._lock:
            return DevServerStatus(
                last_build_ok=self._status.last_build_ok,
                last_error=self._status.last_error,
            )

    def _record(self, ok: bool, error: Optional[str] = None) -> None:
        with self._lock:
            self._status.last_build_ok = ok
            self._status.last_error = error

    @property
    def fragment_pattern(self) -> str:
        return str(self.config.components_dir / "*" / f"*{self.config.fragment_suffix}")

    def start(self) -> None:
        self.regenerate_fragments(initial=True)
        watcher = PollingWatcher(
            [self.fragment_pattern, str(self.config.skeleton_file)],
            interval=self.config.watch_interval,
        )
        watcher.watch(self.handle_changes)
        watcher.start()
        self._watcher = watcher
        logger.info("Watching %s and %s", self.fragment_pattern, self.config.skeleton_file)

    def stop(self) -> None:
        if self._watcher:
            self._watcher.stop()
        self._watcher = None

    def handle_changes(self, paths: Sequence[Path]) -> None:
        """
        React to changed watched files.

        Fragment edits re-aggregate the fragment module. Renderers are rebuilt
        when the skeleton changes or the set of known components changes, and
        the dev server is only asked to refresh after a successful rebuild.
        """
        skeleton = self.config.skeleton_file.resolve()
        skeleton_changed = any(path.resolve() == skeleton for path in paths)
        fragments_changed = any(path.resolve() != skeleton for path in paths)
        needs_rebuild = skeleton_changed
        if fragments_changed:
            before = self.registry.names() if self.registry is not None else None
            if self.regenerate_fragments(initial=False) and self.registry.names() != before:
                needs_rebuild = True
        if skeleton_changed:
            logger.info("Renderer skeleton changed")
        if needs_rebuild and self.rebuild_pages():
            self._refresh()

    def rebuild_pages(self) -> bool:
        """Re-run page creation so every renderer reflects the current sources."""
        if self._rebuild is None:
            return True
        try:
            self._rebuild()
        except FlexPagesError as exc:
            self._record(False, exc.format())
            logger.error("Failed to rebuild pages: %s", exc.format())
            return False
        except httpx.HTTPError as exc:
            self._record(False, f"Content source unreachable: {exc}")
            logger.error("Failed to rebuild pages: %s", exc)
            return False
        self._record(True)
        logger.info("Rebuilt page renderers")
        return True

    def regenerate_fragments(self, *, initial: bool) -> bool:
        """Rebuild the registry from disk and rewrite the aggregated fragments."""
        try:
            registry = load_registry(self.config, static=self.static)
            write_fragments(self.config, registry)
        except FlexPagesError as exc:
            self._record(False, exc.format())
            if initial:
                raise
            logger.error("Failed to regenerate fragments: %s", exc.format())
            return False
        self.registry = registry
        self._record(True)
        return True
