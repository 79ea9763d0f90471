# Copyright (c) dictclient developers.
# See LICENSE for details.

# Make the dictclient package executable, running dictq.

import sys

from dictclient.scripts.dictq import run

if __name__ == "__main__":
    sys.exit(run())
