from __future__ import annotations

import logging
from collections import deque
from itertools import count
from typing import Deque, Iterable, Iterator, List, Optional

from etext_segmenter.models import Line

logger = logging.getLogger(__name__)

MAX_PRELOAD = 2000


def _strip_newline(text: str) -> str:
    return text.rstrip("\r\n")


class LineBuffer:
    """Pushback-capable line source with a bounded lookahead window.

    Lines come from ``source`` (any iterable of strings, such as an open text
    file) and are numbered from 1 in reading order. ``push_back`` places a line
    in front of everything pending so the very next ``pull`` returns it;
    ``preload`` reads ahead into the pending window without consuming lines.
    The underlying source is read at most once and never rewound.
    """

    def __init__(self, source: Iterable[str]) -> None:
        self._source: Iterator[str] = iter(source)
        self._numbers = count(1)
        self._pending: Deque[Line] = deque()
        self._exhausted = False

    def _read(self) -> Optional[Line]:
        if self._exhausted:
            return None
        text = next(self._source, None)
        if text is None:
            self._exhausted = True
            return None
        return Line(_strip_newline(text), next(self._numbers))

    def pull(self) -> Optional[Line]:
        """Return the next line or ``None`` once the input is exhausted."""
        if self._pending:
            return self._pending.popleft()
        return self._read()

    def push_back(self, line: Line) -> None:
        self._pending.appendleft(line)

    def preload(self, max_lines: int = MAX_PRELOAD) -> int:
        """Buffer up to ``max_lines`` lines in total and return the count held."""
        while len(self._pending) < max_lines:
            line = self._read()
            if line is None:
                break
            self._pending.append(line)
        logger.debug("primed buffer, number of lines: %d", len(self._pending))
        return len(self._pending)

    def pending(self) -> List[Line]:
        """Snapshot of buffered lines in delivery order."""
        return list(self._pending)

    def replace_pending(self, lines: Iterable[Line]) -> None:
        self._pending = deque(lines)

    def at_end(self) -> bool:
        if self._pending:
            return False
        if self._exhausted:
            return True
        line = self._read()
        if line is None:
            return True
        self._pending.append(line)
        return False

    def __len__(self) -> int:
        return len(self._pending)

    def __iter__(self) -> Iterator[Line]:
        while (line := self.pull()) is not None:
            yield line
