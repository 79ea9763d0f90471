# Copyright (c) dictclient developers.
# See LICENSE for details.

"""
Command-line front ends for L{dictclient}.
"""
