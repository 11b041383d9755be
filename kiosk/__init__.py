"""Point of sale, stock and cash ledger for a beach kiosk."""
