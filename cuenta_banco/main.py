import logging
import sys

from .console import BankSession, ConsoleIO
from .core.config import get_settings


def main() -> int:
    settings = get_settings()
    logging.basicConfig(level=settings.log_level)

    session = BankSession(ConsoleIO(sys.stdin, sys.stdout), settings)
    return session.run()


if __name__ == "__main__":
    raise SystemExit(main())
