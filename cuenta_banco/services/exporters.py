from __future__ import annotations

import csv
import io
import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Union
from xml.sax.saxutils import escape, quoteattr

from ..core.errors import ExportNameError, UnknownExportFormatError
from ..models import OperationResult, format_amount, format_timestamp
from .ledger import Ledger


logger = logging.getLogger(__name__)

DEFAULT_EXPORT_DIR = Path("exportaciones_banco")

_XML_ENTITIES = {'"': "&quot;", "'": "&apos;"}


class ExportFormat(str, Enum):
    CSV = "csv"
    XML = "xml"
    JSON = "json"


# Menu digits used by the console export option.
SELECTORS: dict[str, ExportFormat] = {
    "1": ExportFormat.CSV,
    "2": ExportFormat.XML,
    "3": ExportFormat.JSON,
}


@dataclass(frozen=True)
class MovementRow:
    kind: str
    amount: str
    timestamp: str


@dataclass(frozen=True)
class LedgerSnapshot:
    """Owner fields and movement rows, already formatted for display."""

    owner_name: str
    owner_identifier: str
    owner_age: int
    rows: tuple[MovementRow, ...]

    @classmethod
    def of(cls, ledger: Ledger) -> "LedgerSnapshot":
        owner = ledger.owner
        return cls(
            owner_name=owner.name,
            owner_identifier=owner.identifier,
            owner_age=owner.age,
            rows=tuple(
                MovementRow(
                    kind=movement.kind.value,
                    amount=format_amount(movement.amount),
                    timestamp=format_timestamp(movement.timestamp),
                )
                for movement in ledger.movements()
            ),
        )


class Exporter(ABC):
    """Writes a ledger to ``<export_dir>/<base>.<ext>`` in one text syntax."""

    format: ExportFormat

    def __init__(self, export_dir: Union[str, Path] = DEFAULT_EXPORT_DIR) -> None:
        self.export_dir = Path(export_dir)

    @property
    def extension(self) -> str:
        return self.format.value

    @abstractmethod
    def render(self, snapshot: LedgerSnapshot) -> str:
        raise NotImplementedError

    def target_path(self, base_name: Optional[str]) -> Path:
        name = (base_name or "").strip()
        if not name:
            raise ExportNameError("el nombre del archivo no puede estar vacío")
        if Path(name).name != name or name in (".", "..") or not name.isprintable():
            raise ExportNameError(f"nombre de archivo no válido: {name!r}")
        return self.export_dir / f"{name}.{self.extension}"

    def export(self, ledger: Ledger, base_name: Optional[str]) -> OperationResult:
        try:
            target = self.target_path(base_name)
        except ExportNameError as exc:
            logger.info("export.rejected", extra={"format": self.extension, "reason": str(exc)})
            return OperationResult.failure(str(exc))

        try:
            content = self.render(LedgerSnapshot.of(ledger))
            self.export_dir.mkdir(parents=True, exist_ok=True)
            with target.open("w", encoding="utf-8", newline="") as handle:
                handle.write(content)
        except (OSError, ValueError, ArithmeticError) as exc:
            logger.warning(
                "export.failed",
                extra={"format": self.extension, "path": str(target), "error": str(exc)},
            )
            return OperationResult.failure(
                f"error al escribir {self.extension.upper()}: {exc}", path=target
            )

        logger.info("export.written", extra={"format": self.extension, "path": str(target)})
        return OperationResult.success(target)


class CsvExporter(Exporter):
    format = ExportFormat.CSV

    delimiter = ";"
    header = ("Tipo", "Cantidad", "FechaHora")

    def render(self, snapshot: LedgerSnapshot) -> str:
        buffer = io.StringIO()
        writer = csv.writer(buffer, delimiter=self.delimiter, lineterminator="\n")
        writer.writerow(self.header)
        for row in snapshot.rows:
            writer.writerow((row.kind, row.amount, row.timestamp))
        return buffer.getvalue()


def escape_xml(text: str) -> str:
    return escape(text, _XML_ENTITIES)


class XmlExporter(Exporter):
    format = ExportFormat.XML

    indent = "  "

    def render(self, snapshot: LedgerSnapshot) -> str:
        ind = self.indent
        lines = [
            '<?xml version="1.0" encoding="UTF-8"?>',
            "<cuenta>",
            f"{ind}<titular>",
            f"{ind * 2}<nombre>{escape_xml(snapshot.owner_name)}</nombre>",
            f"{ind * 2}<dni>{escape_xml(snapshot.owner_identifier)}</dni>",
            f"{ind * 2}<edad>{snapshot.owner_age}</edad>",
            f"{ind}</titular>",
            f"{ind}<movimientos>",
        ]
        for row in snapshot.rows:
            lines.extend(
                [
                    f"{ind * 2}<movimiento tipo={quoteattr(row.kind)}>",
                    f"{ind * 3}<cantidad>{row.amount}</cantidad>",
                    f"{ind * 3}<fechaHora>{row.timestamp}</fechaHora>",
                    f"{ind * 2}</movimiento>",
                ]
            )
        lines.extend([f"{ind}</movimientos>", "</cuenta>"])
        return "\n".join(lines) + "\n"


def escape_json(text: str) -> str:
    """Quoted JSON string literal; non-ASCII text is kept as is."""
    return json.dumps(text, ensure_ascii=False)


class JsonExporter(Exporter):
    format = ExportFormat.JSON

    def render(self, snapshot: LedgerSnapshot) -> str:
        # Amounts are written as bare two-decimal numbers, which json.dumps
        # cannot produce from Decimal, so the document is laid out by hand.
        lines = [
            "{",
            '  "titular": {',
            f'    "nombre": {escape_json(snapshot.owner_name)},',
            f'    "dni": {escape_json(snapshot.owner_identifier)},',
            f'    "edad": {snapshot.owner_age}',
            "  },",
            '  "movimientos": [',
        ]
        last = len(snapshot.rows) - 1
        for index, row in enumerate(snapshot.rows):
            lines.extend(
                [
                    "    {",
                    f'      "tipo": {escape_json(row.kind)},',
                    f'      "cantidad": {row.amount},',
                    f'      "fechaHora": {escape_json(row.timestamp)}',
                    "    }," if index < last else "    }",
                ]
            )
        lines.extend(["  ]", "}"])
        return "\n".join(lines) + "\n"


EXPORTERS: dict[ExportFormat, type[Exporter]] = {
    ExportFormat.CSV: CsvExporter,
    ExportFormat.XML: XmlExporter,
    ExportFormat.JSON: JsonExporter,
}


def get_exporter(selector: str, export_dir: Union[str, Path] = DEFAULT_EXPORT_DIR) -> Exporter:
    """Exporter for a menu digit (``"1"``) or a format name (``"csv"``)."""
    key = selector.strip().lower()
    export_format = SELECTORS.get(key)
    if export_format is None:
        try:
            export_format = ExportFormat(key)
        except ValueError as exc:
            raise UnknownExportFormatError(f"opción desconocida: {selector.strip()}") from exc
    return EXPORTERS[export_format](export_dir)


def parse_selectors(raw: str) -> list[str]:
    return [part.strip() for part in raw.split(",") if part.strip()]
