from .menu import BankSession
from .prompts import ConsoleIO

__all__ = ["BankSession", "ConsoleIO"]
