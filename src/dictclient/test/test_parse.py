# Copyright (c) dictclient developers.
# See LICENSE for details.

"""
Tests for L{dictclient.parse}.
"""

from twisted.trial.unittest import SynchronousTestCase

from dictclient import error
from dictclient.parse import (
    MAX_COMMAND_LENGTH,
    Status,
    makeCommand,
    parseCount,
    parseStatus,
    quoteWord,
    readStatus,
    splitAtoms,
)
from dictclient.testing import ScriptedTransport


class SplitAtomsTests(SynchronousTestCase):
    """
    Tests for L{splitAtoms}.
    """

    def test_atoms(self):
        """
        Atoms are separated by blanks.
        """
        self.assertEqual(splitAtoms("a b"), ["a", "b"])

    def test_dqstring(self):
        """
        A double quoted string is one token, without its quotes.
        """
        self.assertEqual(splitAtoms('"a b" c'), ["a b", "c"])

    def test_empty(self):
        """
        An empty line has no tokens.
        """
        self.assertEqual(splitAtoms(""), [])

    def test_blankRuns(self):
        """
        Runs of blanks, tabs included, separate tokens, and leading or
        trailing blanks produce no empty tokens.
        """
        self.assertEqual(splitAtoms("  wn \t  gcide  "), ["wn", "gcide"])

    def test_emptyDqstring(self):
        """
        C{""} is an empty token.
        """
        self.assertEqual(splitAtoms('exact ""'), ["exact", ""])

    def test_unterminatedDqstring(self):
        """
        A double quoted string missing its closing quote runs to the end of
        the line.
        """
        self.assertEqual(splitAtoms('wn "WordNet (r'), ["wn", "WordNet (r"])

    def test_definitionHeader(self):
        """
        A definition header splits into headword, database and description.
        """
        self.assertEqual(
            splitAtoms('"ice cream" gcide "The Collaborative International"'),
            ["ice cream", "gcide", "The Collaborative International"],
        )


class QuoteWordTests(SynchronousTestCase):
    """
    Tests for L{quoteWord} and L{makeCommand}.
    """

    def test_single(self):
        """
        A single word is left alone.
        """
        self.assertEqual(quoteWord("word"), "word")

    def test_phrase(self):
        """
        A phrase containing a space is double quoted.
        """
        self.assertEqual(quoteWord("two words"), '"two words"')

    def test_makeCommand(self):
        """
        Parts are joined with single spaces.
        """
        self.assertEqual(
            makeCommand("DEFINE", "wn", quoteWord("two words")),
            'DEFINE wn "two words"',
        )

    def test_longestCommand(self):
        """
        A command which, with CRLF, is exactly L{MAX_COMMAND_LENGTH} bytes
        long is accepted; one byte more is not.
        """
        word = "x" * (MAX_COMMAND_LENGTH - 2 - len("DEFINE * "))
        self.assertEqual(len(makeCommand("DEFINE", "*", word)), 1022)
        self.assertRaises(ValueError, makeCommand, "DEFINE", "*", word + "x")

    def test_lengthInBytes(self):
        """
        The limit applies to the UTF-8 encoding of the command.
        """
        word = "\N{LATIN SMALL LETTER E WITH ACUTE}" * 510
        self.assertRaises(ValueError, makeCommand, "DEFINE", "*", word)


class ParseStatusTests(SynchronousTestCase):
    """
    Tests for L{parseStatus}, L{readStatus} and L{parseCount}.
    """

    def test_ready(self):
        self.assertEqual(parseStatus("220 ready"), Status(220, "ready"))

    def test_noMatch(self):
        self.assertEqual(parseStatus("552 no match"), Status(552, "no match"))

    def test_codeOnly(self):
        """
        A status line with nothing after the code has empty details.
        """
        self.assertEqual(parseStatus("250"), Status(250, ""))

    def test_onlyOneSpaceRemoved(self):
        """
        Only the single space separating the code from the details is
        removed.
        """
        self.assertEqual(parseStatus("250  ok").details, " ok")

    def test_notANumber(self):
        """
        A line not starting with a number is a L{error.ProtocolError}.
        """
        exc = self.assertRaises(error.ProtocolError, parseStatus, "ok then")
        self.assertIsNone(exc.code)
        self.assertIn("ok then", str(exc))

    def test_wrongLength(self):
        """
        Codes have exactly three digits.
        """
        self.assertRaises(error.ProtocolError, parseStatus, "2200 ready")
        self.assertRaises(error.ProtocolError, parseStatus, "22 ready")

    def test_missing(self):
        """
        A missing line, the stream having been closed, is a
        L{error.ProtocolError}.
        """
        self.assertRaises(error.ProtocolError, parseStatus, None)

    def test_readStatus(self):
        """
        L{readStatus} parses the next line from the transport.
        """
        transport = ScriptedTransport(greeting="221 bye")
        self.assertEqual(readStatus(transport), Status(221, "bye"))
        self.assertRaises(error.ProtocolError, readStatus, transport)

    def test_parseCount(self):
        """
        The count is the first field of the details.
        """
        status = parseStatus("150 3 definitions retrieved")
        self.assertEqual(parseCount(status), 3)

    def test_parseCountMissing(self):
        """
        Details not starting with a number are a L{error.ProtocolError}
        carrying the status code.
        """
        for line in ["110 lots of databases", "110"]:
            exc = self.assertRaises(
                error.ProtocolError, parseCount, parseStatus(line)
            )
            self.assertEqual(exc.code, 110)
