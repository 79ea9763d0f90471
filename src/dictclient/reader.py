# -*- test-case-name: dictclient.test.test_reader -*-
# Copyright (c) dictclient developers.
# See LICENSE for details.

"""
Readers for the multi-entry payloads which follow a 1yz status line.

There are two shapes of payload.  Definitions arrive in I{block mode}: each
entry is a status-style header followed by text lines up to a lone C{"."}.
Catalogs and match lists arrive in I{line mode}: each entry is exactly one
line of atoms.  Both readers finish by draining whatever trailing lines (the
closing status line, stray blank lines) have already arrived, so that the
stream is positioned for the next command.

A stream which fails or ends part way through, or which sends a line too long
to buffer, is not an error here; the reader stops and reports what it got in
a L{ReadResult}.
"""

from __future__ import annotations

from typing import Generic, List, Sequence, TypeVar

from attrs import frozen

from twisted.logger import Logger

from dictclient import error
from dictclient.interfaces import ILineTransport
from dictclient.parse import TERMINATOR, Status, parseStatus, splitAtoms

_log = Logger()

T = TypeVar("T")

# Header codes which introduce a block of text.
BLOCK_CODES = frozenset([151, 131])


@frozen
class ReadResult(Generic[T]):
    """
    The outcome of reading a multi-entry payload.

    @ivar entries: The entries successfully read, in server order.
    @ivar expected: The number of entries the server announced.
    @ivar complete: C{False} if the payload ended, or the stream failed,
        before C{expected} entries had been attempted.
    """

    entries: Sequence[T]
    expected: int
    complete: bool = True

    @property
    def received(self) -> int:
        return len(self.entries)


@frozen
class Block:
    """
    One block mode entry.

    @ivar header: The status line which introduced the block.
    @ivar text: The body, every line followed by a newline.
    """

    header: Status
    text: str


def readBlocks(transport: ILineTransport, count: int) -> ReadResult[Block]:
    """
    Read C{count} block mode entries, then drain the stream.

    Headers with a code other than those in L{BLOCK_CODES} are skipped and
    still count as one of the C{count} attempts.  A header carrying a
    completion code (2yz and above) means the server has finished early.
    Body lines starting with C{".."} have their first dot removed.
    """
    blocks: List[Block] = []
    complete = True
    try:
        for _ in range(count):
            line = transport.readLine()
            if line is None:
                complete = False
                break
            try:
                header = parseStatus(line)
            except error.ProtocolError:
                _log.warn("Skipping malformed block header {line!r}", line=line)
                continue
            if header.code not in BLOCK_CODES:
                if header.code >= 200:
                    complete = False
                    break
                _log.warn(
                    "Skipping block with unexpected header {code} {details}",
                    code=header.code,
                    details=header.details,
                )
                continue
            lines = []
            while True:
                line = transport.readLine()
                if line is None:
                    complete = False
                    break
                if line == TERMINATOR:
                    break
                if line.startswith(".."):
                    line = line[1:]
                lines.append(line + "\n")
            blocks.append(Block(header, "".join(lines)))
            if not complete:
                break
    except (OSError, error.LineTooLongError) as e:
        _log.warn("Stream failed while reading blocks: {error}", error=e)
        complete = False
    drain(transport)
    return ReadResult(blocks, count, complete)


def readLines(transport: ILineTransport, count: int) -> ReadResult[List[str]]:
    """
    Read C{count} line mode entries, each split into atoms with
    L{splitAtoms}, then drain the stream.

    Meeting the payload terminator before C{count} lines have been read ends
    the payload early.
    """
    entries: List[List[str]] = []
    complete = True
    try:
        for _ in range(count):
            line = transport.readLine()
            if line is None or line == TERMINATOR:
                complete = False
                break
            entries.append(splitAtoms(line))
    except (OSError, error.LineTooLongError) as e:
        _log.warn("Stream failed while reading lines: {error}", error=e)
        complete = False
    drain(transport)
    return ReadResult(entries, count, complete)


def drain(transport: ILineTransport) -> int:
    """
    Discard every line which has already arrived, without waiting for more.

    @return: The number of lines discarded.
    """
    drained = 0
    try:
        while transport.hasPendingData():
            line = transport.readLine()
            if line is None:
                break
            _log.debug("Drained {line!r}", line=line)
            drained += 1
    except (OSError, error.LineTooLongError) as e:
        _log.debug("Stream failed while draining: {error}", error=e)
    return drained


__all__ = ["BLOCK_CODES", "ReadResult", "Block", "readBlocks", "readLines", "drain"]
