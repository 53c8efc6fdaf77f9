import sys

from client_manager.cli import main

sys.exit(main())
