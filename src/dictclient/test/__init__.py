# Copyright (c) dictclient developers.
# See LICENSE for details.

"""
Tests for L{dictclient}.
"""
