# -*- test-case-name: dictclient.test.test_client -*-
# Copyright (c) dictclient developers.
# See LICENSE for details.

"""
Value records returned by L{dictclient.client.DictConnection}.
"""

from __future__ import annotations

from attrs import frozen


@frozen
class Database:
    """
    A database offered by a DICT server.

    @ivar name: The short-name the server knows the database by, for example
        C{"wn"}.
    @ivar description: A human readable description.
    """

    name: str
    description: str = ""


@frozen
class MatchingStrategy:
    """
    A strategy a DICT server can use to match words, for example C{"prefix"}.
    """

    name: str
    description: str = ""


@frozen
class Definition:
    """
    One definition of a word.

    @ivar word: The headword as the server spelled it.
    @ivar database: The database the definition comes from.
    @ivar text: The definition body, each line followed by a newline.
    """

    word: str
    database: Database
    text: str = ""


# Pseudo databases and strategies understood by every server.
ALL_DATABASES = Database("*", "All databases")
FIRST_MATCH = Database("!", "First database with a match")
DEFAULT_STRATEGY = MatchingStrategy(".", "Server default strategy")


__all__ = [
    "Database",
    "MatchingStrategy",
    "Definition",
    "ALL_DATABASES",
    "FIRST_MATCH",
    "DEFAULT_STRATEGY",
]
