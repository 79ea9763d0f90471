# -*- test-case-name: dictclient.test.test_parse -*-
# Copyright (c) dictclient developers.
# See LICENSE for details.

"""
Parsing and formatting of individual DICT protocol lines.

Server replies are made of I{atoms} (runs of non-blank characters) and
I{dqstrings} (text between double quotes, which may contain blanks).  Status
lines start with a three digit code.
"""

from __future__ import annotations

import re
from typing import List, Optional

from attrs import frozen

from dictclient import error
from dictclient.interfaces import ILineTransport

# The terminator of every multi-line payload.
TERMINATOR = "."

# Longest command line, CRLF included, a server has to accept.
MAX_COMMAND_LENGTH = 1024

_atomPattern = re.compile(r'"([^"]*)"?|(\S+)')


def splitAtoms(line: str) -> List[str]:
    """
    Split a reply line into its atoms and dqstrings.

    A token starting with a double quote extends to the next double quote
    and may contain blanks; the quotes themselves are dropped.  An
    unterminated dqstring extends to the end of the line.  There is no
    escaping.

    @param line: One line received from the server.

    @return: The tokens, in order.
    """
    atoms = []
    for match in _atomPattern.finditer(line):
        quoted, atom = match.groups()
        if quoted is not None:
            atoms.append(quoted)
        else:
            atoms.append(atom)
    return atoms


def quoteWord(word: str) -> str:
    """
    Prepare a word or phrase for use as a command argument.

    @return: C{word} wrapped in double quotes if it contains a space,
        otherwise C{word} unchanged.
    """
    if " " in word:
        return '"%s"' % (word,)
    return word


def makeCommand(*parts: str) -> str:
    """
    Join command parts into a single command line.

    @raise ValueError: If the line would exceed L{MAX_COMMAND_LENGTH} once
        encoded and terminated.
    """
    command = " ".join(parts)
    if len(command.encode("utf-8")) + 2 > MAX_COMMAND_LENGTH:
        raise ValueError("Command string too long")
    return command


@frozen
class Status:
    """
    A parsed status line.

    @ivar code: The three digit status code.
    @ivar details: Everything after the code and the space following it.
    """

    code: int
    details: str = ""


def parseStatus(line: Optional[str]) -> Status:
    """
    Parse a status line such as C{"220 dict.org ready"}.

    @param line: The line, or L{None} if the stream ended instead.

    @raise error.ProtocolError: If there is no line or it does not begin
        with a three digit code.
    """
    if line is None:
        raise error.ProtocolError("connection closed while awaiting status")
    head, _, details = line.partition(" ")
    if len(head) != 3 or not (head.isascii() and head.isdigit()):
        raise error.ProtocolError("malformed status line: %r" % (line,))
    return Status(int(head), details)


def readStatus(transport: ILineTransport) -> Status:
    """
    Read one line from C{transport} and parse it as a status line.

    @raise error.ProtocolError: See L{parseStatus}.
    @raise OSError: If the transport fails.
    """
    return parseStatus(transport.readLine())


def parseCount(status: Status) -> int:
    """
    Extract the number of entries announced by a status line such as
    C{"150 3 definitions retrieved"}.

    @raise error.ProtocolError: If the details do not start with a count.
    """
    fields = status.details.split(None, 1)
    try:
        return int(fields[0])
    except (IndexError, ValueError):
        raise error.ProtocolError(
            "expected an entry count in %r" % (status.details,), status.code
        ) from None


__all__ = [
    "TERMINATOR",
    "MAX_COMMAND_LENGTH",
    "splitAtoms",
    "quoteWord",
    "makeCommand",
    "Status",
    "parseStatus",
    "readStatus",
    "parseCount",
]
