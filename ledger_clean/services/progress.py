from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""Line-scan progress display with tqdm (TTY only).

In non-TTY environments (CI, pipes, tests) no bar is created, so no ANSI
control sequences end up in captured output.
"""

__all__ = [
    "ScanProgress",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    return sys.stdout.isatty()


class ScanProgress:
    """One bar per scan, advanced once per source line."""

    def __init__(self, total_lines: int, *, description: str = "Scanning") -> None:
        self.total_lines = total_lines
        self.description = description
        self.lines_done = 0
        self.enabled = is_tty_enabled()
        self.pbar: TqdmType[Any] | None
        if self.enabled:
            self.pbar = tqdm(
                total=total_lines,
                desc=description,
                unit="line",
                leave=False,
                ncols=80,
                ascii=True,
                mininterval=0.5,
            )
        else:
            self.pbar = None

    def advance(self) -> None:
        self.lines_done += 1
        if self.pbar is not None:
            self.pbar.update(1)

    def close(self) -> None:
        if self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> ScanProgress:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
