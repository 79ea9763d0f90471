# -*- test-case-name: dictclient.test.test_client -*-
# Copyright (c) dictclient developers.
# See LICENSE for details.

"""
Testing helpers for code which uses L{dictclient}.
"""

from __future__ import annotations

from collections import deque
from typing import Deque, Dict, List, Mapping, Optional, Union

from zope.interface import implementer

from dictclient.interfaces import ILineTransport

Reply = Union[str, List[str]]


@implementer(ILineTransport)
class ScriptedTransport:
    """
    An L{ILineTransport} which plays the part of a DICT server from a script
    of canned replies, entirely in memory.

    L{ScriptedTransport} has a number of attributes which are not part of
    L{ILineTransport}.  They are provided for testing purposes; implementation
    code should not use them.

    @ivar written: Every line written to the transport, in order.

    @ivar replies: Maps a command line to the text the server answers it
        with.  A L{str} value answers the command every time it is sent; a
        L{list} value holds successive answers, each used once.  Commands
        without an answer get none, as if the server had gone quiet.

    @ivar connected: C{False} after L{loseConnection} or L{close}.

    @ivar closed: C{True} after L{close}.

    @ivar failReads: If C{True}, reading past the end of the received data
        raises L{OSError} instead of reporting the end of the stream.
    """

    def __init__(
        self,
        greeting: Optional[str] = "220 dict.example.com ready <auth.mime> <1@example>",
        replies: Optional[Mapping[str, Reply]] = None,
    ) -> None:
        self.written: List[str] = []
        self.replies: Dict[str, Reply] = dict(replies or {})
        self.connected = True
        self.closed = False
        self.failReads = False
        self._received: Deque[str] = deque()
        if greeting is not None:
            self.receive(greeting + "\r\n")

    def receive(self, data: str) -> None:
        """
        Make C{data} available to L{readLine}, as though the server had just
        sent it.  C{data} is split into lines on LF; a CR preceding the LF is
        dropped, and so is anything after the last LF.
        """
        for line in data.split("\n")[:-1]:
            if line.endswith("\r"):
                line = line[:-1]
            self._received.append(line)

    def loseConnection(self) -> None:
        """
        Simulate the server closing the connection: anything not yet read is
        discarded.
        """
        self.connected = False
        self._received.clear()

    def commands(self, command: str) -> int:
        """
        @return: How many times C{command} has been written.
        """
        return self.written.count(command)

    # ILineTransport

    def readLine(self) -> Optional[str]:
        if self._received:
            return self._received.popleft()
        if self.failReads:
            raise OSError("connection reset by peer")
        return None

    def writeLine(self, line: str) -> None:
        if not self.connected:
            raise OSError("transport is not connected")
        self.written.append(line)
        reply = self.replies.get(line)
        if isinstance(reply, list):
            if reply:
                self.receive(reply.pop(0))
        elif reply is not None:
            self.receive(reply)

    def isConnected(self) -> bool:
        return self.connected

    def hasPendingData(self) -> bool:
        return bool(self._received)

    def close(self) -> None:
        self.connected = False
        self.closed = True


__all__ = ["ScriptedTransport"]
