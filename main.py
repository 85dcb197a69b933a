import logging
import sys

from toxiclient.cli import main

if __name__ == '__main__':
    code = main()
    logging.shutdown()
    sys.exit(code)
