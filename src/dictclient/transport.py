# -*- test-case-name: dictclient.test.test_transport -*-
# Copyright (c) dictclient developers.
# See LICENSE for details.

"""
A blocking TCP implementation of L{ILineTransport}.
"""

from __future__ import annotations

import select
import socket
from typing import Optional

from zope.interface import implementer

from twisted.logger import Logger

from dictclient import error
from dictclient.interfaces import ILineTransport


@implementer(ILineTransport)
class TCPLineTransport:
    """
    Line buffering over a connected stream socket.

    Lines are split on L{delimiter}; a carriage return preceding it is
    removed as well, so servers terminating lines with either CRLF or a bare
    LF are understood.  Outgoing lines are terminated with CRLF.

    @cvar delimiter: The byte sequence ending each received line.

    @cvar MAX_LENGTH: The longest line, in bytes, that will be buffered.  A
        longer line makes L{readLine} raise L{error.LineTooLongError}.

    @cvar encoding: The character encoding of the protocol.  Undecodable
        input is replaced rather than rejected.

    @ivar _buffer: Received bytes not yet returned by L{readLine}.
    """

    delimiter = b"\n"
    MAX_LENGTH = 16384
    encoding = "utf-8"
    readSize = 4096

    _log = Logger()

    def __init__(self, sock: socket.socket) -> None:
        """
        @param sock: A connected stream socket.  The transport takes
            ownership of it.
        """
        self._socket: Optional[socket.socket] = sock
        self._buffer = b""
        self._eof = False

    @classmethod
    def connect(
        cls, host: str, port: int, timeout: Optional[float] = None
    ) -> TCPLineTransport:
        """
        Connect to C{host} on C{port}.

        @param timeout: Seconds to wait for the connection and for each
            subsequent read or write, or L{None} to wait forever.

        @raise OSError: If the connection cannot be made.
        """
        sock = socket.create_connection((host, port), timeout)
        cls._log.debug("Connected to {host}:{port}", host=host, port=port)
        return cls(sock)

    def _receive(self) -> bool:
        """
        Receive one chunk into the buffer.

        @return: C{False} once the peer has closed the stream.
        """
        if self._socket is None or self._eof:
            return False
        data = self._socket.recv(self.readSize)
        if not data:
            self._eof = True
            return False
        self._buffer += data
        return True

    def readLine(self) -> Optional[str]:
        while self.delimiter not in self._buffer:
            if len(self._buffer) > self.MAX_LENGTH:
                self._buffer = b""
                raise error.LineTooLongError(
                    "line longer than %d bytes" % (self.MAX_LENGTH,)
                )
            if not self._receive():
                if not self._buffer:
                    return None
                # The stream ended in the middle of a line.
                line, self._buffer = self._buffer, b""
                break
        else:
            line, self._buffer = self._buffer.split(self.delimiter, 1)
            if len(line) > self.MAX_LENGTH:
                raise error.LineTooLongError(
                    "line longer than %d bytes" % (self.MAX_LENGTH,)
                )
        if line.endswith(b"\r"):
            line = line[:-1]
        return line.decode(self.encoding, "replace")

    def writeLine(self, line: str) -> None:
        if self._socket is None:
            raise OSError("transport is closed")
        self._socket.sendall(line.encode(self.encoding) + b"\r\n")

    def isConnected(self) -> bool:
        return self._socket is not None and not self._eof

    def hasPendingData(self) -> bool:
        """
        Receive whatever has already arrived, without blocking, and report
        whether it completes a line.  A partial line stays buffered.
        """
        while self.delimiter not in self._buffer:
            if self._socket is None or self._eof:
                return bool(self._buffer)
            if len(self._buffer) > self.MAX_LENGTH:
                return True
            readable, _, _ = select.select([self._socket], [], [], 0)
            if not readable:
                return False
            self._receive()
        return True

    def close(self) -> None:
        if self._socket is None:
            return
        sock, self._socket = self._socket, None
        sock.close()


__all__ = ["TCPLineTransport"]
