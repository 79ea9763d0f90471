# -*- test-case-name: dictclient.test.test_client -*-
# Copyright (c) dictclient developers.
# See LICENSE for details.

"""
A blocking client for the DICT protocol (RFC 2229).

A L{DictConnection} owns one connection to a server and runs one command at a
time over it: the protocol has no pipelining, so every public method holds
the connection's lock for its whole request/response exchange.  Connections
may therefore be shared between threads.

Example::

    from dictclient.client import DictConnection

    with DictConnection.open("dict.org") as connection:
        for definition in connection.define("lexicon", "wn"):
            print(definition.text)
"""

from __future__ import annotations

import threading
from enum import Enum, auto
from functools import wraps
from typing import Callable, Dict, List, Optional, Sequence, TypeVar, Union

from zope.interface import implementer

from twisted.logger import Logger

from dictclient import error
from dictclient.interfaces import IDictionaryClient, ILineTransport
from dictclient.parse import (
    Status,
    makeCommand,
    parseCount,
    quoteWord,
    readStatus,
    splitAtoms,
)
from dictclient.reader import ReadResult, drain, readBlocks, readLines
from dictclient.records import (
    ALL_DATABASES,
    DEFAULT_STRATEGY,
    Database,
    Definition,
    MatchingStrategy,
)
from dictclient.transport import TCPLineTransport

DEFAULT_PORT = 2628

T = TypeVar("T")
F = TypeVar("F", bound=Callable[..., object])

TransportFactory = Callable[[str, int, Optional[float]], ILineTransport]


class SessionState(Enum):
    """
    The life cycle of a L{DictConnection}.
    """

    DISCONNECTED = auto()
    CONNECTED = auto()
    CLOSED = auto()


def _exclusive(method: F) -> F:
    """
    Run C{method} with the connection's lock held.
    """

    @wraps(method)
    def exclusively(self, *args, **kwargs):
        with self._lock:
            return method(self, *args, **kwargs)

    return exclusively  # type: ignore[return-value]


def _nameOf(thing: Union[Database, MatchingStrategy, str]) -> str:
    if isinstance(thing, str):
        return thing
    return thing.name


@implementer(IDictionaryClient)
class DictConnection:
    """
    A session with a DICT server.

    @ivar transport: The L{ILineTransport} the session talks over.

    @ivar state: The current L{SessionState}.

    @ivar strict: If C{True}, a multi-entry response which ends before its
        announced number of entries raises
        L{error.IncompleteResponseError}; otherwise the entries which were
        read are returned and a warning is logged.

    @ivar _databases: The database catalog, keyed by short-name, in server
        order.  Fetched on first need and never refreshed; a server whose
        databases change during the session will not be noticed.
    """

    _log = Logger()

    def __init__(self, transport: ILineTransport, strict: bool = False) -> None:
        """
        Wrap an already established transport.  Call L{handshake} before
        anything else, or use L{open}, which does both.
        """
        self.transport = transport
        self.strict = strict
        self.state = SessionState.DISCONNECTED
        self._databases: Dict[str, Database] = {}
        self._lock = threading.Lock()

    @classmethod
    def open(
        cls,
        host: str,
        port: int = DEFAULT_PORT,
        timeout: Optional[float] = None,
        strict: bool = False,
        transportFactory: Optional[TransportFactory] = None,
    ) -> DictConnection:
        """
        Connect to the DICT server at C{host} and C{port} and wait for its
        greeting.

        @param timeout: Passed to C{transportFactory}; for the default TCP
            transport, the number of seconds any network operation may take.

        @param transportFactory: A callable taking C{host}, C{port} and
            C{timeout} and returning a connected L{ILineTransport}.  Defaults
            to L{TCPLineTransport.connect}.

        @raise error.ConnectionError: If the server cannot be reached or does
            not greet the client with a 220 status.
        """
        if transportFactory is None:
            transportFactory = TCPLineTransport.connect
        try:
            transport = transportFactory(host, port, timeout)
        except OSError as e:
            raise error.ConnectionError(
                "Cannot connect to %s:%d: %s" % (host, port, e)
            ) from e
        connection = cls(transport, strict=strict)
        connection.handshake()
        cls._log.info("Connected to {host}:{port}", host=host, port=port)
        return connection

    @_exclusive
    def handshake(self) -> None:
        """
        Read the server's greeting.

        @raise error.ConnectionError: If the greeting is missing, unreadable,
            or anything other than a 220 status.  The transport is closed.
        """
        if self.state is not SessionState.DISCONNECTED:
            raise error.ConnectionError("Handshake already attempted")
        try:
            status = readStatus(self.transport)
        except (OSError, error.ProtocolError) as e:
            self._abort()
            raise error.ConnectionError("No greeting from server: %s" % (e,)) from e
        if status.code != 220:
            self._abort()
            raise error.ConnectionError(status.details, status.code)
        self.state = SessionState.CONNECTED
        self._log.debug("Server greeting: {details}", details=status.details)

    def _abort(self) -> None:
        self.state = SessionState.CLOSED
        try:
            self.transport.close()
        except Exception as e:
            self._log.debug("Error closing transport: {error}", error=e)

    @_exclusive
    def close(self) -> None:
        """
        Send C{QUIT}, wait for the server's farewell and close the transport.
        Errors are logged and otherwise ignored; closing a closed connection
        does nothing.
        """
        if self.state is SessionState.CLOSED:
            return
        self.state = SessionState.CLOSED
        try:
            if self.transport.isConnected():
                self.transport.writeLine("QUIT")
                readStatus(self.transport)
        except Exception as e:
            self._log.debug("Ignoring error while quitting: {error}", error=e)
        finally:
            try:
                self.transport.close()
            except Exception as e:
                self._log.debug("Error closing transport: {error}", error=e)
        self._log.info("Connection closed")

    def __enter__(self) -> DictConnection:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _command(self, *parts: str) -> Status:
        """
        Send one command and read its status line.

        @raise ValueError: If the command is too long; nothing is sent.
        @raise error.ConnectionError: If the session is not connected or the
            transport fails.
        @raise error.ProtocolError: If the reply is not a status line.
        """
        if self.state is not SessionState.CONNECTED:
            raise error.ConnectionError("Not connected")
        if not self.transport.isConnected():
            raise error.ConnectionError("Disconnected")
        command = makeCommand(*parts)
        self._log.debug("Sending {command!r}", command=command)
        try:
            self.transport.writeLine(command)
            status = readStatus(self.transport)
        except OSError as e:
            raise error.ConnectionError(
                "Connection failed during %s: %s" % (parts[0], e)
            ) from e
        except error.ProtocolError:
            drain(self.transport)
            raise
        self._log.debug(
            "Received {code} {details}", code=status.code, details=status.details
        )
        return status

    def _unexpected(self, status: Status) -> error.ProtocolError:
        drain(self.transport)
        return error.ProtocolError(status.details, status.code)

    def _count(self, status: Status) -> int:
        try:
            return parseCount(status)
        except error.ProtocolError:
            drain(self.transport)
            raise

    def _finish(self, result: ReadResult[object], entries: Sequence[T]) -> List[T]:
        entries = list(entries)
        if not result.complete:
            if self.strict:
                raise error.IncompleteResponseError(entries, result.expected)
            self._log.warn(
                "Response ended after {received} of {expected} entries",
                received=result.received,
                expected=result.expected,
            )
        return entries

    def _resolve(self, name: str) -> Database:
        database = self._databases.get(name)
        if database is None:
            self._log.debug("Database {name} is not in the catalog", name=name)
            database = Database(name, name)
        return database

    @_exclusive
    def define(
        self, word: str, database: Union[Database, str] = ALL_DATABASES
    ) -> List[Definition]:
        """
        Retrieve every definition of C{word} in C{database}.

        The database catalog is fetched first if it has not been already, so
        that each definition can refer to its L{Database}.

        @return: The definitions, or an empty list if there are none.

        @raise error.ProtocolError: If the server answers with anything but
            a 150 or 552 status.
        """
        if not self._databases:
            self._fetchDatabases()
        status = self._command("DEFINE", _nameOf(database), quoteWord(word))
        if status.code == 552:
            return []
        if status.code != 150:
            raise self._unexpected(status)
        result = readBlocks(self.transport, self._count(status))
        definitions = []
        for block in result.entries:
            atoms = splitAtoms(block.header.details)
            if len(atoms) < 2:
                self._log.warn(
                    "Definition header without a database: {details!r}",
                    details=block.header.details,
                )
                continue
            definitions.append(
                Definition(atoms[0], self._resolve(atoms[1]), block.text)
            )
        return self._finish(result, definitions)

    @_exclusive
    def match(
        self,
        word: str,
        strategy: Union[MatchingStrategy, str] = DEFAULT_STRATEGY,
        database: Union[Database, str] = ALL_DATABASES,
    ) -> List[str]:
        """
        Retrieve the headwords in C{database} which match C{word} according
        to C{strategy}.

        @return: The headwords in server order with duplicates removed, or
            an empty list if nothing matched.

        @raise error.ProtocolError: If the server answers with anything but
            a 152 or 552 status.
        """
        status = self._command(
            "MATCH", _nameOf(database), _nameOf(strategy), quoteWord(word)
        )
        if status.code == 552:
            return []
        if status.code != 152:
            raise self._unexpected(status)
        result = readLines(self.transport, self._count(status))
        headwords: Dict[str, None] = {}
        for atoms in result.entries:
            if len(atoms) < 2:
                self._log.warn("Skipping short match line {atoms!r}", atoms=atoms)
                continue
            headwords[atoms[1]] = None
        return self._finish(result, headwords)

    @_exclusive
    def getDatabases(self) -> List[Database]:
        """
        Retrieve the databases offered by the server.  Only the first call
        asks the server; later calls answer from the catalog.

        @raise error.ProtocolError: If the server answers with anything but
            a 110 or 554 status.
        """
        return self._fetchDatabases()

    def _fetchDatabases(self) -> List[Database]:
        if self._databases:
            return list(self._databases.values())
        status = self._command("SHOW", "DB")
        if status.code == 554:
            return []
        if status.code != 110:
            raise self._unexpected(status)
        result = readLines(self.transport, self._count(status))
        databases: Dict[str, Database] = {}
        for atoms in result.entries:
            if not atoms:
                self._log.warn("Skipping empty database line")
                continue
            name = atoms[0]
            description = atoms[1] if len(atoms) > 1 else ""
            databases[name] = Database(name, description)
        catalog = self._finish(result, databases.values())
        self._databases = databases
        return catalog

    @_exclusive
    def getStrategies(self) -> List[MatchingStrategy]:
        """
        Retrieve the matching strategies offered by the server.

        @raise error.ProtocolError: If the server answers with anything but
            a 111 or 555 status.
        """
        status = self._command("SHOW", "STRAT")
        if status.code == 555:
            return []
        if status.code != 111:
            raise self._unexpected(status)
        result = readLines(self.transport, self._count(status))
        strategies: Dict[MatchingStrategy, None] = {}
        for atoms in result.entries:
            if not atoms:
                self._log.warn("Skipping empty strategy line")
                continue
            description = atoms[1] if len(atoms) > 1 else ""
            strategies[MatchingStrategy(atoms[0], description)] = None
        return self._finish(result, strategies)


__all__ = ["DEFAULT_PORT", "SessionState", "DictConnection"]
