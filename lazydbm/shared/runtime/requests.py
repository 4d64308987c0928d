"""Request ids for background loads.

Each load takes a fresh id and its completion echoes it back; a view keeps
the id of its latest load and ignores completions carrying any other.
"""

from __future__ import annotations

import itertools
import threading

_counter = itertools.count(1)
_lock = threading.Lock()


def next_request_id() -> int:
    with _lock:
        return next(_counter)
