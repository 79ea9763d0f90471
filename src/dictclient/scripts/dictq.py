# -*- test-case-name: dictclient.test.test_dictq -*-
# Copyright (c) dictclient developers.
# See LICENSE for details.

"""
dictq: look words up on a DICT server from the command line.
"""

import sys

from twisted.logger import globalLogPublisher, textFileLogObserver
from twisted.python import usage

from dictclient import error
from dictclient.client import DEFAULT_PORT, DictConnection


class _WordOptions(usage.Options):
    synopsis = "WORD..."

    def parseArgs(self, *words):
        if not words:
            raise usage.UsageError("Wrong number of arguments.")
        self["word"] = " ".join(words)


class DefineOptions(_WordOptions):
    longdesc = "Print every definition of WORD."


class MatchOptions(_WordOptions):
    longdesc = "Print the headwords matching WORD."


class DatabasesOptions(usage.Options):
    longdesc = "List the databases offered by the server."


class StrategiesOptions(usage.Options):
    longdesc = "List the matching strategies offered by the server."


class Options(usage.Options):
    synopsis = "dictq [options] <command> [arguments]"
    longdesc = "Query a DICT (RFC 2229) dictionary server."

    optFlags = [
        ["verbose", "v", "Log the conversation with the server to stderr."],
    ]
    optParameters = [
        ["server", "s", "dict.org", "The DICT server to query."],
        ["port", "p", DEFAULT_PORT, "The port the server listens on.",
         usage.portCoerce],
        ["database", "d", "*", "The database to search."],
        ["strategy", "t", ".", "The strategy used by the match command."],
        ["timeout", None, None, "Seconds to wait for the server.", float],
    ]
    subCommands = [
        ["define", None, DefineOptions, "Define a word."],
        ["match", None, MatchOptions, "Find matching words."],
        ["databases", None, DatabasesOptions, "List databases."],
        ["strategies", None, StrategiesOptions, "List matching strategies."],
    ]

    def postOptions(self):
        if self.subCommand is None:
            raise usage.UsageError("Please specify a command.")


def define(connection, config, out):
    word = config.subOptions["word"]
    definitions = connection.define(word, config["database"])
    if not definitions:
        out.write('No definitions found for "%s".\n' % (word,))
    for definition in definitions:
        out.write(
            "From %s [%s]:\n\n"
            % (definition.database.description, definition.database.name)
        )
        out.write(definition.text)
        out.write("\n")


def match(connection, config, out):
    word = config.subOptions["word"]
    headwords = connection.match(word, config["strategy"], config["database"])
    if not headwords:
        out.write('No matches found for "%s".\n' % (word,))
    for headword in headwords:
        out.write(headword + "\n")


def databases(connection, config, out):
    for database in connection.getDatabases():
        out.write("%s\t%s\n" % (database.name, database.description))


def strategies(connection, config, out):
    for strategy in connection.getStrategies():
        out.write("%s\t%s\n" % (strategy.name, strategy.description))


_commands = {
    "define": define,
    "match": match,
    "databases": databases,
    "strategies": strategies,
}


def run(argv=None, stdout=None, stderr=None, connect=DictConnection.open):
    """
    Run dictq.

    @param argv: The command line arguments, excluding the program name.
        Defaults to C{sys.argv[1:]}.

    @param connect: Called with the server, port and timeout to obtain a
        L{DictConnection}.

    @return: The exit status: 0 on success, 1 for a usage error and 2 if
        talking to the server failed.
    """
    if stdout is None:
        stdout = sys.stdout
    if stderr is None:
        stderr = sys.stderr

    config = Options()
    try:
        config.parseOptions(argv)
    except usage.UsageError as e:
        stderr.write("%s\ndictq: %s\n" % (config, e))
        return 1

    observer = None
    if config["verbose"]:
        observer = textFileLogObserver(stderr)
        globalLogPublisher.addObserver(observer)
    try:
        connection = connect(config["server"], config["port"], config["timeout"])
        with connection:
            _commands[config.subCommand](connection, config, stdout)
    except (error.DictError, ValueError) as e:
        stderr.write("dictq: %s\n" % (e,))
        return 2
    finally:
        if observer is not None:
            globalLogPublisher.removeObserver(observer)
    return 0


__all__ = ["Options", "run"]
