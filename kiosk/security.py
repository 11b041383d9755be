"""Local 4-digit PIN for the finance screen."""

from __future__ import annotations

import hmac

PIN_LENGTH = 4


def is_valid_pin_format(pin: str) -> bool:
    return len(pin) == PIN_LENGTH and pin.isdigit()


def validate_pin(pin: str, stored_pin: str | None) -> bool:
    if not stored_pin:
        return True
    return hmac.compare_digest(pin.encode(), stored_pin.encode())


class PinSetup:
    """Two-step PIN entry: type it, then type it again to confirm."""

    def __init__(self) -> None:
        self.pending: str | None = None

    @property
    def confirming(self) -> bool:
        return self.pending is not None

    def submit(self, pin: str) -> str | None:
        """Feed one entry. Returns the new PIN once confirmed, else None."""
        if self.pending is None:
            if not is_valid_pin_format(pin):
                raise ValueError("PIN deve ter 4 números.")
            self.pending = pin
            return None
        if pin != self.pending:
            self.pending = None
            raise ValueError("PINs não coincidem.")
        confirmed, self.pending = self.pending, None
        return confirmed

    def reset(self) -> None:
        self.pending = None


class FinanceLock:
    """Lock state of the finance view; relocks whenever the view is left."""

    def __init__(self, stored_pin: str | None) -> None:
        self.stored_pin = stored_pin
        self.unlocked = False

    @property
    def locked(self) -> bool:
        return bool(self.stored_pin) and not self.unlocked

    def unlock(self, pin: str) -> bool:
        if validate_pin(pin, self.stored_pin):
            self.unlocked = True
            return True
        return False

    def lock(self) -> None:
        self.unlocked = False

    def set_pin(self, pin: str | None) -> None:
        self.stored_pin = pin
        self.unlocked = False
