import logging
import sys

from .cli import main

code = main()
logging.shutdown()
sys.exit(code)
