import io
from decimal import Decimal
from pathlib import Path

import pytest

from ..console import BankSession, ConsoleIO
from ..console.prompts import read_non_negative_int, read_positive_amount
from ..core.config import Settings
from ..models import MovementKind, Owner
from ..services import Ledger, LedgerStore, LoadStatus


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        data_dir=tmp_path / "datos",
        export_dir=tmp_path / "exportaciones_banco",
    )


def run_session(settings: Settings, *lines: str) -> tuple[int, str]:
    stdout = io.StringIO()
    console = ConsoleIO(io.StringIO("".join(f"{line}\n" for line in lines)), stdout)
    code = BankSession(console, settings).run()
    return code, stdout.getvalue()


def test_first_run_creates_account_and_saves(settings: Settings) -> None:
    code, output = run_session(
        settings,
        "Ana Pérez", "12345678A", "treinta", "-1", "30",
        "1", "abc", "-5", "100,50",
        "2", "500",
        "2", "40",
        "0",
    )

    assert code == 0
    assert "No se encontró cuenta válida. Creando nueva..." in output
    assert "Formato no válido. Ejemplo: 30" in output
    assert "Introduce un número entero no negativo." in output
    assert "Formato no válido. Ejemplo: 1234.56" in output
    assert "Introduce una cantidad positiva." in output
    assert "Ingreso realizado. Saldo: 100.50 €" in output
    assert "Operación no realizada: saldo insuficiente o cantidad inválida." in output
    assert "Retirada realizada. Saldo: 60.50 €" in output
    assert f"Cuenta guardada en '{settings.state_path}'." in output

    result = LedgerStore().load(settings.state_path)
    assert result.status is LoadStatus.LOADED
    assert result.ledger.owner == Owner(name="Ana Pérez", identifier="12345678A", age=30)
    assert result.ledger.balance() == Decimal("60.50")


def test_second_run_loads_saved_account(settings: Settings) -> None:
    settings.data_dir.mkdir(parents=True)
    ledger = Ledger(Owner(name="Luis", identifier="1X", age=50))
    ledger.deposit(25)
    LedgerStore().save(ledger, settings.state_path)

    code, output = run_session(settings, "3", "0")

    assert code == 0
    assert f"Cuenta cargada desde '{settings.state_path}'." in output
    assert "saldo=25.00€" in output
    assert "Movimientos:" in output
    assert "Ingreso -> 25.00 €" in output


def test_corrupt_state_is_reported_before_new_account(settings: Settings) -> None:
    settings.data_dir.mkdir(parents=True)
    settings.state_path.write_bytes(b"basura")

    code, output = run_session(settings, "", "", "0", "3", "0")

    assert code == 0
    assert "Aviso: la cuenta guardada no se pudo leer" in output
    assert "Cuenta creada para: Cliente{nombre='Sin nombre', dni='00000000X', edad=0}" in output
    assert "No hay movimientos." in output
    assert LedgerStore().load(settings.state_path).status is LoadStatus.LOADED


def test_export_runs_every_known_selector(settings: Settings) -> None:
    code, output = run_session(
        settings,
        "Ana", "1A", "20",
        "1", "10",
        "4", "cta", "1, 9,3",
        "0",
    )

    assert code == 0
    assert "CSV exportado correctamente" in output
    assert "Opción desconocida: 9" in output
    assert "JSON exportado correctamente" in output
    assert "Exportación completada." in output
    assert sorted(p.name for p in settings.export_dir.iterdir()) == ["cta.csv", "cta.json"]


@pytest.mark.parametrize(
    ("answers", "message"),
    [
        (("   ",), "Nombre inválido, operación cancelada."),
        (("cta", ""), "No se seleccionó ningún formato. Operación cancelada."),
        (("cta", "7"), "No se exportó ningún archivo."),
    ],
)
def test_export_cancellations(settings: Settings, answers, message: str) -> None:
    code, output = run_session(settings, "Ana", "1A", "20", "4", *answers, "0")

    assert code == 0
    assert message in output
    assert not settings.export_dir.exists()


def test_unknown_option_and_end_of_input_saves(settings: Settings) -> None:
    code, output = run_session(settings, "Ana", "1A", "20", "x", "1", "5")

    assert code == 0
    assert "Opción no válida." in output
    assert "Entrada terminada." in output
    loaded = LedgerStore().load(settings.state_path).ledger
    assert [m.kind for m in loaded.movements()] == [MovementKind.DEPOSIT]


def test_end_of_input_before_account_exists(settings: Settings) -> None:
    code, output = run_session(settings, "Ana")

    assert code == 1
    assert "Entrada terminada antes de crear la cuenta." in output
    assert not settings.state_path.exists()


def test_data_dir_creation_failure(tmp_path: Path) -> None:
    blocker = tmp_path / "datos"
    blocker.write_text("ocupado", encoding="utf-8")

    code, output = run_session(Settings(data_dir=blocker, export_dir=tmp_path / "exp"))

    assert code == 1
    assert "no se pudo crear la carpeta" in output


def test_prompts_retry_until_valid() -> None:
    stdout = io.StringIO()
    console = ConsoleIO(io.StringIO("0\n1,25\n-3\n7\n"), stdout)

    assert read_positive_amount(console, "Cantidad: ") == Decimal("1.25")
    assert read_non_negative_int(console, "Edad: ") == 7
    assert stdout.getvalue().count("Cantidad: ") == 2


def test_amount_above_limit_is_asked_again(settings: Settings) -> None:
    code, output = run_session(
        settings,
        "Ana", "1A", "20",
        "1", "12345678901234567890123456789", "1e30", "5",
        "0",
    )

    assert code == 0
    assert output.count("La cantidad máxima por operación es 1000000000000.00.") == 2
    loaded = LedgerStore().load(settings.state_path).ledger
    assert loaded is not None
    assert loaded.balance() == Decimal("5")
