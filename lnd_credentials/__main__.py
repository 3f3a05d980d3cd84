import sys

from lnd_credentials.cli import main

sys.exit(main())
