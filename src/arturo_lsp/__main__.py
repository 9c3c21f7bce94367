import sys

from arturo_lsp.cli import main

sys.exit(main())
