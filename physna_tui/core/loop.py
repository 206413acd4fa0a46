"""
Headless event loop.

Read one event, let the controller handle it, render the resulting snapshot.
Failures of the read or render callables are the only fatal errors and are
raised as `FatalIOError`; everything else is recovered inside the controller.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Iterator, List, Optional

from physna_tui.core.controller import ControllerSnapshot, ModeController, Outcome
from physna_tui.core.errors import FatalIOError
from physna_tui.core.keys import KeyEvent

logger = logging.getLogger(__name__)

TEXT_PREFIX = "text:"


def parse_key_script(lines: Iterable[str]) -> List[KeyEvent]:
    """
    Turn a key script into events.

    One key spec per line (``q``, ``enter``, ``ctrl+h``). Blank lines and lines
    starting with ``#`` are skipped. ``text:<chars>`` types each character.
    """
    events: List[KeyEvent] = []
    for raw in lines:
        line = raw.rstrip("\r\n")
        if line.startswith(TEXT_PREFIX):
            events.extend(KeyEvent(code=ch) for ch in line[len(TEXT_PREFIX):])
            continue
        spec = line.strip()
        if not spec or spec.startswith("#"):
            continue
        events.append(KeyEvent.parse(spec))
    return events


def reader(events: Iterable[KeyEvent]) -> Callable[[], Optional[KeyEvent]]:
    """Adapt an iterable into a ``read_event`` callable returning None when exhausted."""
    it: Iterator[KeyEvent] = iter(events)

    def read_event() -> Optional[KeyEvent]:
        return next(it, None)

    return read_event


def run_event_loop(
    controller: ModeController,
    read_event: Callable[[], Optional[KeyEvent]],
    render: Callable[[ControllerSnapshot], None],
) -> Outcome:
    """
    Drive ``controller`` until the quit key is handled or input runs out.

    Returns:
        `Outcome.QUIT` when the quit key ended the loop, `Outcome.CONTINUE`
        when ``read_event`` returned None

    Raises:
        FatalIOError: If reading an event or rendering a frame fails
    """
    _render(render, controller.snapshot())
    while True:
        try:
            event = read_event()
        except Exception as e:
            raise FatalIOError(f"Failed to read input: {e}") from e
        if event is None:
            logger.debug("Input exhausted")
            return Outcome.CONTINUE
        if controller.handle(event) is Outcome.QUIT:
            return Outcome.QUIT
        _render(render, controller.snapshot())


def _render(render: Callable[[ControllerSnapshot], None], snapshot: ControllerSnapshot) -> None:
    try:
        render(snapshot)
    except Exception as e:
        raise FatalIOError(f"Failed to draw frame: {e}") from e


__all__ = ["parse_key_script", "reader", "run_event_loop"]
