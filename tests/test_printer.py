from decimal import Decimal

import pytest

from kiosk import printer
from kiosk.models import AppSettings, Order, OrderItem, PaymentMethod
from kiosk.printer import _two_columns, bill_lines, resolve_printer_font_path


def _order(**kwargs):
    items = [
        OrderItem(id="i1", name="Beer", price=Decimal("10"), quantity=3),
        OrderItem(id="i2", name="Water", price=Decimal("5"), is_courtesy=True),
    ]
    defaults = dict(id="o1", table_or_name="Mesa 5", opened_at="2024-06-01T12:00:00+00:00", items=items)
    defaults.update(kwargs)
    return Order(**defaults)


def test_two_columns_right_aligns():
    line = _two_columns("Subtotal", "R$ 30,00", width=20)
    assert len(line) == 20
    assert line.endswith("R$ 30,00")


def test_two_columns_truncates_long_names():
    line = _two_columns("Porção de batata frita grande", "R$ 45,00", width=20)
    assert len(line) == 20
    assert "…" in line


def test_bill_lines_with_fee_discount_and_split():
    settings = AppSettings(kiosk_name="Estrela do Mar", contact_phone="(21) 99999-0000")
    order = _order(service_fee=True, discount=Decimal("5"), payment_method=PaymentMethod.MONEY)

    lines = bill_lines(order, settings, split_count=2)

    assert lines[0] == "Estrela do Mar"
    assert lines[1] == "(21) 99999-0000"
    assert "Comanda: Mesa 5" in lines
    assert any(line.startswith("3x Beer") and line.endswith("R$ 30,00") for line in lines)
    assert any(line.startswith("1x Water") and line.endswith("CORTESIA") for line in lines)
    assert any(line.startswith("Taxa de serviço") and line.endswith("R$ 3,00") for line in lines)
    assert any(line.startswith("Desconto") and line.endswith("-R$ 5,00") for line in lines)
    assert any(line.startswith("TOTAL") and line.endswith("R$ 28,00") for line in lines)
    assert any(line.startswith("Por pessoa (2)") and line.endswith("R$ 14,00") for line in lines)
    assert lines[-1] == "Pagamento: Dinheiro (Espécie)"


def test_bill_lines_omits_optional_rows():
    lines = bill_lines(_order(), AppSettings())

    assert not any(line.startswith(("Taxa", "Desconto", "Por pessoa", "Pagamento")) for line in lines)
    assert any(line.startswith("TOTAL") and line.endswith("R$ 30,00") for line in lines)


def test_font_env_override(tmp_path, monkeypatch):
    font = tmp_path / "mono.ttf"
    font.write_bytes(b"")
    monkeypatch.setenv("KIOSK_PRINTER_FONT_PATH", str(font))
    assert resolve_printer_font_path() == str(font)


def test_font_missing_raises(monkeypatch):
    monkeypatch.delenv("KIOSK_PRINTER_FONT_PATH", raising=False)
    monkeypatch.setattr(printer, "PRINTER_FONT_PATH", "/nonexistent/font.ttf")
    monkeypatch.setattr(printer, "_LINUX_FONT_FALLBACKS", ())
    with pytest.raises(RuntimeError, match="KIOSK_PRINTER_FONT_PATH"):
        resolve_printer_font_path()
