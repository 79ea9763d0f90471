# Copyright (c) dictclient developers.
# See LICENSE for details.

"""
Tests for L{dictclient.transport}.
"""

import socket

from zope.interface.verify import verifyObject

from twisted.trial.unittest import SynchronousTestCase

from dictclient import error
from dictclient.interfaces import ILineTransport
from dictclient.transport import TCPLineTransport


class TCPLineTransportTests(SynchronousTestCase):
    """
    Tests for L{TCPLineTransport}, over a connected socket pair.
    """

    def setUp(self):
        clientSocket, self.server = socket.socketpair()
        self.addCleanup(self.server.close)
        self.transport = TCPLineTransport(clientSocket)
        self.addCleanup(self.transport.close)

    def test_interface(self):
        self.assertTrue(verifyObject(ILineTransport, self.transport))

    def test_readLine(self):
        """
        Lines end with LF, optionally preceded by CR; neither is returned.
        """
        self.server.sendall(b"220 ready\r\nfur ball\n")
        self.assertEqual(self.transport.readLine(), "220 ready")
        self.assertEqual(self.transport.readLine(), "fur ball")

    def test_readLineAcrossChunks(self):
        """
        A line split over several reads is reassembled.
        """
        self.transport.readSize = 3
        self.server.sendall(b"150 2 definitions\r\n")
        self.assertEqual(self.transport.readLine(), "150 2 definitions")

    def test_decoding(self):
        """
        Lines are decoded as UTF-8; undecodable bytes are replaced.
        """
        self.server.sendall("caf\N{LATIN SMALL LETTER E WITH ACUTE}\r\n".encode())
        self.server.sendall(b"bad \xff\r\n")
        self.assertEqual(
            self.transport.readLine(), "caf\N{LATIN SMALL LETTER E WITH ACUTE}"
        )
        self.assertEqual(self.transport.readLine(), "bad \N{REPLACEMENT CHARACTER}")

    def test_endOfStream(self):
        """
        Once the peer closes the stream, a final unterminated line is
        returned, then L{None}, and the transport is no longer connected.
        """
        self.server.sendall(b"221 bye")
        self.server.close()
        self.assertTrue(self.transport.isConnected())
        self.assertEqual(self.transport.readLine(), "221 bye")
        self.assertIsNone(self.transport.readLine())
        self.assertFalse(self.transport.isConnected())

    def test_endOfStreamAfterCarriageReturn(self):
        """
        A final line cut off between its CR and LF loses the CR too.
        """
        self.server.sendall(b"221 bye\r")
        self.server.close()
        self.assertEqual(self.transport.readLine(), "221 bye")
        self.assertIsNone(self.transport.readLine())

    def test_lineTooLong(self):
        """
        A line longer than C{MAX_LENGTH} is a L{error.LineTooLongError},
        whether or not its end has arrived.
        """
        self.transport.MAX_LENGTH = 10
        self.server.sendall(b"x" * 20 + b"\r\n")
        self.assertRaises(error.LineTooLongError, self.transport.readLine)

    def test_unterminatedTooLong(self):
        self.transport.MAX_LENGTH = 10
        self.server.sendall(b"x" * 20)
        self.assertRaises(error.LineTooLongError, self.transport.readLine)

    def test_writeLine(self):
        """
        Lines are sent UTF-8 encoded and terminated with CRLF.
        """
        self.transport.writeLine('DEFINE * "ice cream"')
        self.assertEqual(self.server.recv(1024), b'DEFINE * "ice cream"\r\n')

    def test_hasPendingData(self):
        """
        L{TCPLineTransport.hasPendingData} reports, without blocking, whether
        anything has arrived that has not been read.
        """
        self.assertFalse(self.transport.hasPendingData())
        self.server.sendall(b".\r\n250 ok\r\n")
        self.assertTrue(self.transport.hasPendingData())
        self.assertEqual(self.transport.readLine(), ".")
        self.assertTrue(self.transport.hasPendingData())
        self.assertEqual(self.transport.readLine(), "250 ok")
        self.assertFalse(self.transport.hasPendingData())

    def test_partialLineNotPending(self):
        """
        Part of a line is not pending data: reading it would have to wait
        for the rest.  Once the rest arrives the whole line is read.
        """
        self.server.sendall(b"250 o")
        self.assertFalse(self.transport.hasPendingData())
        self.server.sendall(b"k\r\n")
        self.assertTrue(self.transport.hasPendingData())
        self.assertEqual(self.transport.readLine(), "250 ok")

    def test_partialLineAtEndOfStream(self):
        """
        Once the peer has closed the stream a final unterminated line is
        pending, since reading it no longer waits.
        """
        self.server.sendall(b"250 ok")
        self.server.close()
        self.assertTrue(self.transport.hasPendingData())
        self.assertEqual(self.transport.readLine(), "250 ok")
        self.assertFalse(self.transport.hasPendingData())

    def test_close(self):
        """
        Closing disconnects the transport and can be repeated; writing to a
        closed transport is an L{OSError}.
        """
        self.transport.close()
        self.transport.close()
        self.assertFalse(self.transport.isConnected())
        self.assertRaises(OSError, self.transport.writeLine, "QUIT")
        self.assertIsNone(self.transport.readLine())


class ConnectTests(SynchronousTestCase):
    """
    Tests for L{TCPLineTransport.connect}.
    """

    def test_connect(self):
        """
        L{TCPLineTransport.connect} returns a transport connected to the
        given address.
        """
        listener = socket.socket()
        self.addCleanup(listener.close)
        listener.bind(("127.0.0.1", 0))
        listener.listen(1)
        port = listener.getsockname()[1]

        transport = TCPLineTransport.connect("127.0.0.1", port, timeout=5)
        self.addCleanup(transport.close)
        server, _ = listener.accept()
        self.addCleanup(server.close)

        server.sendall(b"220 hello\r\n")
        self.assertEqual(transport.readLine(), "220 hello")

    def test_refused(self):
        """
        Failing to connect is an L{OSError}.
        """
        listener = socket.socket()
        listener.bind(("127.0.0.1", 0))
        port = listener.getsockname()[1]
        listener.close()
        self.assertRaises(
            OSError, TCPLineTransport.connect, "127.0.0.1", port, timeout=5
        )
