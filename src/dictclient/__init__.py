# -*- test-case-name: dictclient -*-
# Copyright (c) dictclient developers.
# See LICENSE for details.

"""
dictclient: a client for the DICT dictionary server protocol (RFC 2229).
"""

from dictclient._version import __version__ as version

__version__ = version.short()
