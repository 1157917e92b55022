"""Terminal UI utilities: spinner, transfer progress, styled labels."""

from __future__ import annotations

import contextlib
import itertools
import sys
import threading
import time
from collections.abc import Callable, Iterator
from typing import TextIO

import click

from degit.core.models import RepositoryIdentity


SPINNER_FRAMES = "⠋⠙⠹⠸⠼⠴⠦⠧⠇⠏"
REFRESH_SECONDS = 0.08


@contextlib.contextmanager
def spinner(stream: TextIO | None = None) -> Iterator[Callable[[str], None]]:
    """Yield a callable that updates an inline spinner with status text.

    Nothing is drawn when *stream* is not a terminal.
    """
    out = stream or sys.stderr
    if not out.isatty():
        yield lambda _msg: None
        return

    frames = itertools.cycle(SPINNER_FRAMES)
    latest = [""]
    lock = threading.Lock()
    done = threading.Event()

    def _update(msg: str) -> None:
        with lock:
            latest[0] = msg

    def _draw() -> None:
        while not done.wait(REFRESH_SECONDS):
            with lock:
                text = latest[0]
            if text:
                out.write(f"\r{next(frames)} {text}\033[K")
                out.flush()
        out.write("\r\033[K")
        out.flush()

    drawer = threading.Thread(target=_draw, daemon=True)
    drawer.start()
    try:
        yield _update
    finally:
        done.set()
        drawer.join()


def format_bytes(n: float) -> str:
    for unit in ("B", "KiB", "MiB", "GiB"):
        if n < 1024 or unit == "GiB":
            return f"{n:.0f} {unit}" if unit == "B" else f"{n:.1f} {unit}"
        n /= 1024


def _transfer_line(received: int, started: float) -> str:
    elapsed = max(time.monotonic() - started, 1e-6)
    rate = format_bytes(received / elapsed)
    return f"[{elapsed:5.1f}s] {format_bytes(received)} ({rate}/s)"


class _BarProgress:
    """Determinate byte progress on a click progress bar."""

    def __init__(self) -> None:
        self.bar = None
        self._started = time.monotonic()
        self._received = 0
        self._current = ""
        self.final: str | None = None

    def advance(self, nbytes: int) -> None:
        self._received += nbytes
        self.bar.update(nbytes, self._current)

    def status(self, message: str) -> None:
        self._current = message
        self.bar.update(0, message)

    def finish(self, message: str) -> None:
        self.final = message

    def render(self, item: str | None) -> str:
        """Shown after the bar: elapsed time, transfer rate, current entry."""
        return f"{_transfer_line(self._received, self._started)} {item or ''}".rstrip()


class _SpinnerProgress:
    """Indeterminate progress: bytes received, elapsed time and rate."""

    def __init__(self, update: Callable[[str], None]) -> None:
        self._update = update
        self._started = time.monotonic()
        self._received = 0
        self._current = ""
        self.final: str | None = None

    def advance(self, nbytes: int) -> None:
        self._received += nbytes
        self._refresh()

    def status(self, message: str) -> None:
        self._current = message
        self._refresh()

    def finish(self, message: str) -> None:
        self.final = message

    def _refresh(self) -> None:
        self._update(f"{_transfer_line(self._received, self._started)} {self._current}")


@contextlib.contextmanager
def transfer_progress(total: int | None) -> Iterator[_BarProgress | _SpinnerProgress]:
    """Progress factory handed to the archive pipeline."""
    if total is not None:
        progress = _BarProgress()
        with click.progressbar(
            length=total,
            label="Downloading",
            show_eta=True,
            show_percent=True,
            show_pos=True,
            item_show_func=progress.render,
            file=sys.stderr,
        ) as bar:
            progress.bar = bar
            yield progress
    else:
        with spinner() as update:
            progress = _SpinnerProgress(update)
            yield progress

    if progress.final:
        click.echo(f"> {progress.final}", err=True)


def describe(identity: RepositoryIdentity) -> str:
    """Styled one-line label: owner/name[/subdir][#ref] from Host."""
    project = identity.name
    if identity.subdir:
        project = f"{project}/{identity.subdir}"
    if identity.ref:
        project = f"{project}#{identity.ref}"
    owner = click.style(identity.owner, bold=True, underline=True)
    return (
        f"{owner}/{click.style(project, fg='red')} "
        f"from {click.style(identity.host.label, fg='blue')}"
    )
