"""Thermal bill printing for a tab."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from kiosk.config import (
    PRINTER_FONT_PATH,
    PRINTER_FONT_SIZE,
    PRINTER_LEFT_INDENT_PX,
    PRINTER_LINE_CHARS,
    PRINTER_USB_PRODUCT_ID,
    PRINTER_USB_VENDOR_ID,
    PRINTER_WIDTH_PX,
)
from kiosk.models import AppSettings, Order
from kiosk.orders import compute_totals, split_value
from kiosk.rendering import payment_label
from kiosk.utils import format_currency, parse_iso

logger = logging.getLogger(__name__)

_SEPARATOR = "-" * PRINTER_LINE_CHARS
_TAIL_SPACER_PX = 70
_LINE_EXTRA_PX = 10
_FONT_OVERRIDE_ENV = "KIOSK_PRINTER_FONT_PATH"
_LINUX_FONT_FALLBACKS = (
    "/usr/share/fonts/TTF/DejaVuSansMono.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSansMono.ttf",
    "/usr/share/fonts/dejavu/DejaVuSansMono.ttf",
    "/usr/share/fonts/liberation/LiberationMono-Regular.ttf",
)


def _two_columns(left: str, right: str, width: int = PRINTER_LINE_CHARS) -> str:
    """Left text and right-aligned amount on one line, truncating the left side."""
    room = width - len(right) - 1
    if room < 1:
        return f"{left} {right}"
    if len(left) > room:
        left = left[: max(1, room - 1)] + "…"
    return f"{left.ljust(room)} {right}"


def bill_lines(order: Order, settings: AppSettings, split_count: int = 1) -> list[str]:
    """Text layout of the bill, one string per printed line."""
    totals = compute_totals(order.items, order.discount, order.service_fee)
    lines = [settings.kiosk_name]
    if settings.contact_phone:
        lines.append(settings.contact_phone)
    lines.append(_SEPARATOR)
    lines.append(f"Comanda: {order.table_or_name}")
    lines.append(f"Aberta: {parse_iso(order.opened_at).astimezone().strftime('%d/%m %H:%M')}")
    lines.append(_SEPARATOR)

    for item in order.items:
        label = f"{item.quantity}x {item.name}"
        if item.is_courtesy:
            lines.append(_two_columns(label, "CORTESIA"))
        else:
            lines.append(_two_columns(label, format_currency(item.line_total)))

    lines.append(_SEPARATOR)
    lines.append(_two_columns("Subtotal", format_currency(totals.subtotal)))
    if order.service_fee:
        lines.append(_two_columns("Taxa de serviço 10%", format_currency(totals.service_fee_value)))
    if totals.discount > 0:
        lines.append(_two_columns("Desconto", f"-{format_currency(totals.discount)}"))
    lines.append(_two_columns("TOTAL", format_currency(totals.total)))
    if split_count > 1:
        share = split_value(totals.total, split_count)
        lines.append(_two_columns(f"Por pessoa ({split_count})", format_currency(share)))
    if order.payment_method is not None:
        lines.append(f"Pagamento: {payment_label(order.payment_method)}")
    return lines


def resolve_printer_font_path() -> str:
    """
    Resolve a printer font path.

    Resolution order:
    1. KIOSK_PRINTER_FONT_PATH (if set)
    2. PRINTER_FONT_PATH
    3. Known Linux fallbacks
    """
    env_override = os.environ.get(_FONT_OVERRIDE_ENV, "").strip()
    candidates: list[str] = []
    if env_override:
        candidates.append(env_override)
    candidates.append(PRINTER_FONT_PATH)
    candidates.extend(_LINUX_FONT_FALLBACKS)

    seen: set[str] = set()
    for candidate in candidates:
        if not candidate or candidate in seen:
            continue
        seen.add(candidate)
        if Path(candidate).is_file():
            return candidate

    raise RuntimeError(
        f"No usable printer font found. Set {_FONT_OVERRIDE_ENV} to a valid .ttf/.otf file. "
        f"Tried: {', '.join(seen)}"
    )


def check_printer_dependencies() -> tuple[bool, str]:
    """Check whether printer dependencies are importable."""
    try:
        from escpos.printer import Usb  # noqa: F401
        from PIL import ImageFont

        font_path = resolve_printer_font_path()
        ImageFont.truetype(font_path, PRINTER_FONT_SIZE)
    except Exception as exc:
        return (False, f"Printer deps unavailable: {exc}")
    return (True, "Printer ready")


def _render_line(text: str, font: object, bold: bool = False) -> object:
    from PIL import Image, ImageDraw

    canvas_height = PRINTER_FONT_SIZE + _LINE_EXTRA_PX
    img = Image.new("1", (PRINTER_WIDTH_PX, canvas_height), color=1)
    draw = ImageDraw.Draw(img)

    bbox = draw.textbbox((0, 0), text, font=font)
    text_height = bbox[3] - bbox[1]
    # Offset by bbox top so descenders are not clipped.
    y = (canvas_height - text_height) // 2 - bbox[1]
    draw.text((PRINTER_LEFT_INDENT_PX, y), text, font=font, fill=0, stroke_width=1 if bold else 0, stroke_fill=0)
    return img


def _render_spacer(height_px: int) -> object:
    from PIL import Image

    return Image.new("1", (PRINTER_WIDTH_PX, max(1, height_px)), color=1)


def print_bill(order: Order, settings: AppSettings, split_count: int = 1) -> None:
    """Print the bill and cut the paper."""
    try:
        from escpos.printer import Usb
        from PIL import ImageFont
    except Exception as exc:
        raise RuntimeError(f"Printer dependencies unavailable: {exc}") from exc

    printer = Usb(PRINTER_USB_VENDOR_ID, PRINTER_USB_PRODUCT_ID)
    font = ImageFont.truetype(resolve_printer_font_path(), PRINTER_FONT_SIZE)
    lines = bill_lines(order, settings, split_count)
    for idx, line in enumerate(lines):
        bold = idx == 0 or line.startswith("TOTAL")
        printer.image(_render_line(line, font, bold=bold))
    printer.image(_render_spacer(_TAIL_SPACER_PX))
    printer.cut()
    logger.info("bill_printed order=%s lines=%d", order.id, len(lines))
