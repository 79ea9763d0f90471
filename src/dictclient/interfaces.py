# Copyright (c) dictclient developers.
# See LICENSE for details.

"""
Interfaces for L{dictclient}.
"""

from zope.interface import Interface


class ILineTransport(Interface):
    """
    A blocking, line oriented, bidirectional byte stream to a DICT server.

    Implementations own all socket level concerns (address resolution,
    timeouts, character encoding); the client only ever deals in lines of
    text with their terminators removed.
    """

    def readLine():
        """
        Read the next line, blocking until it is available.

        @return: The line without its terminator, or L{None} if the stream
            has been closed by the peer.
        @rtype: L{str} or L{None}

        @raise OSError: If the underlying stream fails.
        """

    def writeLine(line):
        """
        Write C{line} followed by the line terminator.

        @param line: The line to send, without its terminator.
        @type line: L{str}

        @raise OSError: If the underlying stream fails.
        """

    def isConnected():
        """
        @return: C{True} while the stream is believed to be usable.
        @rtype: L{bool}
        """

    def hasPendingData():
        """
        Report, without blocking, whether more input has already arrived.

        @return: C{True} if a call to L{readLine} can make progress without
            waiting for the peer to send anything more.
        @rtype: L{bool}
        """

    def close():
        """
        Close the stream.  Closing a closed stream does nothing.
        """


class IDictionaryClient(Interface):
    """
    A session with a DICT server.

    Every method is a complete request/response exchange; callers on
    different threads may share one provider.
    """

    def define(word, database):
        """
        Look up the definitions of C{word}.

        @param word: The word or phrase to define.
        @type word: L{str}

        @param database: The database to search, or one of the pseudo
            databases L{dictclient.records.ALL_DATABASES} and
            L{dictclient.records.FIRST_MATCH}.
        @type database: L{dictclient.records.Database} or L{str}

        @rtype: L{list} of L{dictclient.records.Definition}
        """

    def match(word, strategy, database):
        """
        Find headwords matching C{word} according to C{strategy}.

        @type word: L{str}
        @type strategy: L{dictclient.records.MatchingStrategy} or L{str}
        @type database: L{dictclient.records.Database} or L{str}

        @return: The matching headwords in the order the server listed them,
            without duplicates.
        @rtype: L{list} of L{str}
        """

    def getDatabases():
        """
        @return: The databases offered by the server.  Fetched once per
            connection.
        @rtype: L{list} of L{dictclient.records.Database}
        """

    def getStrategies():
        """
        @return: The matching strategies offered by the server.
        @rtype: L{list} of L{dictclient.records.MatchingStrategy}
        """

    def close():
        """
        Say goodbye to the server and close the connection.  Never raises.
        """
