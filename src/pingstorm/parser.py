import asyncio
import logging
from collections.abc import AsyncIterator, Callable

from .errors import StreamDecodeError

logger = logging.getLogger(__name__)

SUCCESS_MARKER = "."


def count_markers(line: str) -> int:
    return line.count(SUCCESS_MARKER)


def decode_line(raw: bytes) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise StreamDecodeError(f"undecodable line ({len(raw)} bytes): {e}") from e


async def iter_lines(reader: asyncio.StreamReader) -> AsyncIterator[bytes]:
    """
    Yield newline-terminated chunks until EOF.

    ping -f keeps its progress dots on a single line, so a line longer than
    the reader's buffer limit is yielded in pieces and the unterminated tail
    is yielded at EOF.
    """
    while True:
        try:
            chunk = await reader.readuntil(b"\n")
        except asyncio.IncompleteReadError as e:
            if e.partial:
                yield e.partial
            return
        except asyncio.LimitOverrunError as e:
            chunk = await reader.read(e.consumed)
            if not chunk:
                return
        yield chunk


async def consume_markers(
    reader: asyncio.StreamReader,
    on_markers: Callable[[int], None],
    should_stop: Callable[[], bool] = lambda: False,
    label: str = "",
) -> int:
    """Feed the marker count of every decodable line to on_markers."""
    seen = 0
    async for raw in iter_lines(reader):
        try:
            line = decode_line(raw)
        except StreamDecodeError as e:
            logger.debug(f"{label}Skipping line: {e}")
        else:
            n = count_markers(line)
            if n:
                on_markers(n)
                seen += n
                logger.debug(f"{label}+{n} markers (total {seen})")
        if should_stop():
            logger.debug(f"{label}Stop requested, leaving stdout reader")
            break
    return seen


async def drain_diagnostics(
    reader: asyncio.StreamReader,
    emit: Callable[[str], None],
    should_stop: Callable[[], bool] = lambda: False,
    label: str = "",
) -> int:
    """Pass every decodable non-empty line to emit; returns the number emitted."""
    emitted = 0
    async for raw in iter_lines(reader):
        try:
            line = decode_line(raw).rstrip()
        except StreamDecodeError as e:
            logger.debug(f"{label}Skipping diagnostic line: {e}")
        else:
            if line:
                emit(line)
                emitted += 1
        if should_stop():
            break
    return emitted
