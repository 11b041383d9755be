import pytest

from kiosk.security import FinanceLock, PinSetup, is_valid_pin_format, validate_pin


@pytest.mark.parametrize("pin,valid", [("1234", True), ("123", False), ("12345", False), ("12a4", False)])
def test_pin_format(pin, valid):
    assert is_valid_pin_format(pin) is valid


def test_validate_pin():
    assert validate_pin("1234", "1234")
    assert not validate_pin("0000", "1234")
    assert validate_pin("anything", None)


def test_pin_setup_two_steps():
    setup = PinSetup()
    assert setup.submit("4321") is None
    assert setup.confirming
    assert setup.submit("4321") == "4321"
    assert not setup.confirming


def test_pin_setup_errors():
    setup = PinSetup()
    with pytest.raises(ValueError, match="PIN deve ter 4 números."):
        setup.submit("12")

    setup.submit("1111")
    with pytest.raises(ValueError, match="PINs não coincidem."):
        setup.submit("2222")
    assert not setup.confirming


def test_finance_lock():
    lock = FinanceLock("1234")
    assert lock.locked
    assert not lock.unlock("0000")
    assert lock.locked
    assert lock.unlock("1234")
    assert not lock.locked

    lock.lock()
    assert lock.locked

    lock.set_pin(None)
    assert not lock.locked
