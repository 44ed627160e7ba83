import sys

from organizer.main import run

sys.exit(run())
