"""Allow ``python -m quiz_round``."""

from .cli import main

raise SystemExit(main())
