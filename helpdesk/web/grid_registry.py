"""
Mounted list views, one per rendered page.

Each page load mounts its own ListView so width state and resize sessions
never leak between pages or users. The registry is bounded: the least
recently used view is unmounted when a new one would exceed the limit.
"""
import logging
import threading
import uuid
from collections import OrderedDict
from collections.abc import Iterable

from helpdesk.listview.columns import Column
from helpdesk.listview.view import ListView

log = logging.getLogger(__name__)


class GridRegistry:
    """Owns the lifecycle of every mounted ListView in the application."""

    def __init__(self, max_grids: int = 64):
        self.max_grids = max(1, max_grids)
        self._grids: OrderedDict[str, ListView] = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._grids)

    def __contains__(self, grid_id: str) -> bool:
        return grid_id in self._grids

    def mount(self, columns: Iterable[Column]) -> ListView:
        view = ListView(columns, grid_id=f"grid-{uuid.uuid4().hex[:12]}")
        evicted = []
        with self._lock:
            self._grids[view.grid_id] = view
            while len(self._grids) > self.max_grids:
                _, oldest = self._grids.popitem(last=False)
                evicted.append(oldest)
        for old in evicted:
            log.debug("Evicting list view %s", old.grid_id)
            old.close()
        return view

    def get(self, grid_id: str) -> ListView | None:
        with self._lock:
            view = self._grids.get(grid_id)
            if view is not None:
                self._grids.move_to_end(grid_id)
            return view

    def unmount(self, grid_id: str) -> bool:
        with self._lock:
            view = self._grids.pop(grid_id, None)
        if view is None:
            return False
        view.close()
        return True

    def close_all(self) -> None:
        with self._lock:
            views = list(self._grids.values())
            self._grids.clear()
        for view in views:
            view.close()
        if views:
            log.info("Closed %d list view(s)", len(views))
