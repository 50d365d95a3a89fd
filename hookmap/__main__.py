"""Allow ``python -m hookmap``."""

from hookmap.cli.main import main

raise SystemExit(main())
