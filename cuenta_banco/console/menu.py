from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Optional

from ..core.config import Settings
from ..core.errors import UnknownExportFormatError
from ..models import Owner, format_amount
from ..services import Ledger, LedgerStore, LoadStatus, get_exporter, parse_selectors
from .prompts import ConsoleIO, read_non_negative_int, read_positive_amount


logger = logging.getLogger(__name__)

MENU = """
--- Menú ---
1) Ingresar dinero
2) Retirar dinero
3) Consultar saldo y movimientos
4) Exportar cuenta (CSV, XML, JSON)
0) Salir y guardar"""

FORMAT_MENU = """Elige los formatos de exportación (puedes combinar, separados por coma):
1) CSV
2) XML
3) JSON"""


class BankSession:
    """Console menu around one ledger.

    The ledger is loaded (or created) on start and saved on exit; every other
    option reads or mutates it in memory.
    """

    def __init__(
        self,
        console: ConsoleIO,
        settings: Settings,
        store: Optional[LedgerStore] = None,
    ) -> None:
        self.console = console
        self.settings = settings
        self.store = store or LedgerStore()
        self.ledger: Optional[Ledger] = None

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------
    def run(self) -> int:
        data_dir = self.settings.data_dir
        try:
            data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            logger.error("session.data_dir.failed", extra={"path": str(data_dir), "error": str(exc)})
            self.console.say(f"Error: no se pudo crear la carpeta '{data_dir}/': {exc}. Finalizando.")
            return 1

        try:
            self.ledger = self.open_ledger()
            running = True
            while running:
                self.console.say(MENU)
                running = self.handle_option(self.console.ask("Elige opción: "))
        except EOFError:
            if self.ledger is None:
                self.console.say("\nEntrada terminada antes de crear la cuenta.")
                return 1
            self.console.say("\nEntrada terminada.")
            self.save()
        return 0

    def open_ledger(self) -> Ledger:
        path = self.settings.state_path
        result = self.store.load(path)
        if result.ok and result.ledger is not None:
            self.console.say(f"Cuenta cargada desde '{path}'.")
            return result.ledger

        if result.status is LoadStatus.CORRUPT:
            self.console.say(f"Aviso: la cuenta guardada no se pudo leer ({result.detail}).")
        self.console.say("No se encontró cuenta válida. Creando nueva...")
        return self.create_ledger()

    def create_ledger(self) -> Ledger:
        name = self.console.ask("Nombre del cliente: ")
        identifier = self.console.ask("DNI/NIF del cliente: ")
        age = read_non_negative_int(self.console, "Edad del cliente: ")
        owner = Owner(name=name, identifier=identifier, age=age)
        self.console.say(f"Cuenta creada para: {owner}")
        logger.info("account.created", extra={"owner_identifier": owner.identifier})
        return Ledger(owner)

    def save(self) -> bool:
        path = self.settings.state_path
        result = self.store.save(self._require_ledger(), path)
        if result.ok:
            self.console.say(f"Cuenta guardada en '{path}'.")
        else:
            self.console.say(f"Aviso: no se pudo guardar la cuenta ({result.detail}).")
        return result.ok

    def _require_ledger(self) -> Ledger:
        if self.ledger is None:
            raise RuntimeError("session has no open ledger")
        return self.ledger

    # ------------------------------------------------------------------
    # Menu options
    # ------------------------------------------------------------------
    def handle_option(self, option: str) -> bool:
        """Run one menu option. Returns ``False`` once the session should end."""
        handlers: dict[str, Callable[[], None]] = {
            "1": self.deposit,
            "2": self.withdraw,
            "3": self.inquiry,
            "4": self.export,
        }
        choice = option.strip()
        if choice == "0":
            self.save()
            return False

        handler = handlers.get(choice)
        if handler is None:
            self.console.say("Opción no válida.")
        else:
            handler()
        return True

    def deposit(self) -> None:
        ledger = self._require_ledger()
        amount = read_positive_amount(self.console, "Cantidad a ingresar: ")
        ledger.deposit(amount)
        self.console.say(f"Ingreso realizado. Saldo: {format_amount(ledger.balance())} €")

    def withdraw(self) -> None:
        ledger = self._require_ledger()
        amount = read_positive_amount(self.console, "Cantidad a retirar: ")
        if ledger.withdraw(amount):
            self.console.say(f"Retirada realizada. Saldo: {format_amount(ledger.balance())} €")
        else:
            self.console.say("Operación no realizada: saldo insuficiente o cantidad inválida.")

    def inquiry(self) -> None:
        ledger = self._require_ledger()
        self.console.say(f"\n{ledger}")
        movements = ledger.movements()
        if not movements:
            self.console.say("No hay movimientos.")
            return
        self.console.say("Movimientos:")
        for movement in movements:
            self.console.say(f" - {movement}")

    def export(self) -> None:
        ledger = self._require_ledger()
        base_name = self.console.ask("Nombre base para los archivos de exportación: ").strip()
        if not base_name:
            self.console.say("Nombre inválido, operación cancelada.")
            return

        self.console.say(FORMAT_MENU)
        selectors = parse_selectors(self.console.ask("Opciones (ejemplo: 1,3): "))
        if not selectors:
            self.console.say("No se seleccionó ningún formato. Operación cancelada.")
            return

        exported = False
        for selector in selectors:
            try:
                exporter = get_exporter(selector, self.settings.export_dir)
            except UnknownExportFormatError:
                self.console.say(f"Opción desconocida: {selector}")
                continue

            label = exporter.extension.upper()
            result = exporter.export(ledger, base_name)
            if result.ok:
                self.console.say(f"{label} exportado correctamente: {result.path}")
                exported = True
            else:
                self.console.say(f"No se pudo exportar {label}: {result.detail}")

        self.console.say("Exportación completada." if exported else "No se exportó ningún archivo.")
