"""Runtime configuration defaults for persistence, logging, analysis and printing."""

from __future__ import annotations

import os

DB_PATH = os.environ.get("KIOSK_DB_PATH", "data/kiosk.db")

LOG_PATH = os.environ.get("KIOSK_LOG_PATH", "/tmp/kiosk-debug.log")
LOG_LEVEL = os.environ.get("KIOSK_LOG_LEVEL", "INFO")

GEMINI_API_KEY = os.environ.get("GEMINI_API_KEY") or os.environ.get("API_KEY")
GEMINI_MODEL = os.environ.get("KIOSK_GEMINI_MODEL", "gemini-2.5-pro")
GEMINI_ENDPOINT = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"
GEMINI_TIMEOUT_SECONDS = 60.0
GEMINI_TEMPERATURE = 0.7
GEMINI_MAX_OUTPUT_TOKENS = 1000

PRINTER_USB_VENDOR_ID = 0x28E9
PRINTER_USB_PRODUCT_ID = 0x0289
PRINTER_WIDTH_PX = 384
PRINTER_FONT_SIZE = 28
PRINTER_FONT_PATH = "/System/Library/Fonts/SFNS.ttf"
PRINTER_LEFT_INDENT_PX = 8
PRINTER_LINE_CHARS = 32
