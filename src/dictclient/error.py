# -*- test-case-name: dictclient.test.test_client -*-
# Copyright (c) dictclient developers.
# See LICENSE for details.

"""
Exceptions raised by L{dictclient}.

Like L{twisted.internet.error}, this module defines a few names which shadow
builtins (L{ConnectionError}); refer to them through the module, as
C{error.ConnectionError}.
"""

from __future__ import annotations

from typing import Optional, Sequence


class DictError(Exception):
    """
    Base class for all errors raised by L{dictclient}.
    """


class ConnectionError(DictError):
    """
    The connection to the DICT server could not be established, was rejected
    during the handshake, or failed while a command was being exchanged.

    @ivar code: The status code the server answered with, if the server said
        anything at all.
    @type code: L{int} or L{None}
    """

    def __init__(self, message: str, code: Optional[int] = None) -> None:
        DictError.__init__(self, message)
        self.code = code


class ProtocolError(DictError):
    """
    The server said something the client did not expect: an unknown status
    code at a decision point or a line which is not a status line at all.

    @ivar code: The three digit status code, or L{None} if the offending line
        did not have one.
    @type code: L{int} or L{None}

    @ivar details: The server supplied text following the status code, or a
        description of what was wrong with the line.
    @type details: L{str}
    """

    def __init__(self, details: str, code: Optional[int] = None) -> None:
        DictError.__init__(self, details, code)
        self.details = details
        self.code = code

    def __str__(self) -> str:
        if self.code is not None:
            return "%.3d %s" % (self.code, self.details)
        return self.details


class IncompleteResponseError(ProtocolError):
    """
    A multi-entry response ended before the number of entries announced in
    its status line had been read.  Only raised by connections created with
    C{strict=True}; otherwise the partial result is returned and a warning is
    logged.

    @ivar partial: The entries which were read before the response ended.
    @ivar expected: The number of entries the server announced.
    """

    def __init__(self, partial: Sequence[object], expected: int) -> None:
        ProtocolError.__init__(
            self,
            "response ended after %d of %d entries" % (len(partial), expected),
        )
        self.partial = partial
        self.expected = expected


class LineTooLongError(ProtocolError):
    """
    The server sent a line longer than the transport is willing to buffer.
    """


__all__ = [
    "DictError",
    "ConnectionError",
    "ProtocolError",
    "IncompleteResponseError",
    "LineTooLongError",
]
