from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""Loading indicator with tqdm (TTY only).

DocumentLoader.init() starts the indicator, the end of build() stops it.
The bar has no total: it shows the load stages ("fetching", "validating",
"sanitizing") as they pass. Disabled outside a TTY so CI logs stay free of
ANSI control sequences.
"""

__all__ = [
    "LoadingIndicator",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    return sys.stdout.isatty()


class LoadingIndicator:
    """Indeterminate progress display for one load."""

    def __init__(self, description: str = "Building your radar", *, enabled: bool | None = None) -> None:
        self.description = description
        self.enabled = is_tty_enabled() if enabled is None else enabled
        self.pbar: TqdmType[Any] | None = None
        self.stages: list[str] = []
        self._started = False

    @property
    def active(self) -> bool:
        return self._started

    def start(self) -> None:
        """Show the indicator. No I/O besides writing to the terminal."""
        self._started = True
        if self.enabled and self.pbar is None:
            self.pbar = tqdm(
                total=None,
                desc=self.description,
                unit="step",
                leave=False,
                ncols=80,
                ascii=True,
            )

    def stage(self, name: str) -> None:
        self.stages.append(name)
        if self.pbar is not None:
            self.pbar.set_postfix_str(name)
            self.pbar.update(1)

    def stop(self) -> None:
        self._started = False
        if self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> LoadingIndicator:
        self.start()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.stop()
