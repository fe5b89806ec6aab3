from __future__ import annotations

from decimal import Decimal
from typing import TextIO

from ..models import MAX_AMOUNT, format_amount
from ..services.ledger import to_amount


class ConsoleIO:
    """Input and output streams for one console session."""

    def __init__(self, stdin: TextIO, stdout: TextIO) -> None:
        self.stdin = stdin
        self.stdout = stdout

    def say(self, message: str = "") -> None:
        print(message, file=self.stdout)

    def ask(self, prompt: str) -> str:
        self.stdout.write(prompt)
        self.stdout.flush()
        line = self.stdin.readline()
        if not line:
            raise EOFError("input closed")
        return line.rstrip("\r\n")


def read_positive_amount(console: ConsoleIO, prompt: str) -> Decimal:
    while True:
        text = console.ask(prompt).strip().replace(",", ".")
        amount = to_amount(text)
        if amount is None:
            console.say("Formato no válido. Ejemplo: 1234.56")
        elif amount <= 0:
            console.say("Introduce una cantidad positiva.")
        elif amount > MAX_AMOUNT:
            console.say(f"La cantidad máxima por operación es {format_amount(MAX_AMOUNT)}.")
        else:
            return amount


def read_non_negative_int(console: ConsoleIO, prompt: str) -> int:
    while True:
        text = console.ask(prompt).strip()
        try:
            value = int(text)
        except ValueError:
            console.say("Formato no válido. Ejemplo: 30")
            continue
        if value >= 0:
            return value
        console.say("Introduce un número entero no negativo.")
