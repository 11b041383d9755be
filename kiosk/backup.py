"""Backup export and restore."""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import date
from typing import IO, Any, Iterable

from pydantic import ValidationError

from kiosk.models import AppSettings, Expense, Order
from kiosk.schemas import BackupSchema


class BackupError(ValueError):
    pass


@dataclass
class Backup:
    settings: AppSettings
    expenses: list[Expense]
    orders: list[Order] | None = None


def export_backup(
    settings: AppSettings,
    expenses: Iterable[Expense],
    orders: Iterable[Order] | None = None,
) -> dict[str, Any]:
    data: dict[str, Any] = {
        "settings": settings.to_dict(),
        "expenses": [e.to_dict() for e in expenses],
    }
    if orders is not None:
        data["orders"] = [o.to_dict() for o in orders]
    return data


def dump_backup(data: dict[str, Any], fh: IO[str]) -> None:
    json.dump(data, fh, indent=2, ensure_ascii=False)


def backup_filename(today: date | None = None) -> str:
    return f"backup_quiosque_{(today or date.today()).isoformat()}.json"


def import_backup(raw: str | bytes | dict[str, Any]) -> Backup:
    """Parse and validate a backup blob.

    Every record is checked before anything is returned, so a bad date or
    amount anywhere rejects the whole file.
    """
    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise BackupError("Erro ao ler arquivo.") from exc
    try:
        parsed = BackupSchema.model_validate(raw)
    except ValidationError as exc:
        raise BackupError("Arquivo inválido.") from exc
    return Backup(
        settings=parsed.settings.to_model(),
        expenses=[expense.to_model() for expense in parsed.expenses],
        orders=[order.to_model() for order in parsed.orders] if parsed.orders is not None else None,
    )
