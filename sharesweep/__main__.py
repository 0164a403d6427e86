"""Allow ``python -m sharesweep``."""

from .cli import main

if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
