"""
Tests para el teclado hexadecimal.
"""

import logging

from chipi8.io.keypad import NUM_KEYS, Keypad


class TestKeypad:
    """Tests del estado de las teclas"""

    def test_all_released_initially(self):
        keypad = Keypad()
        assert keypad.get_state() == [False] * NUM_KEYS
        assert keypad.get_first_pressed() is None

    def test_press_and_release(self):
        keypad = Keypad()
        keypad.press(0xC)
        assert keypad.is_pressed(0xC)
        keypad.release(0xC)
        assert not keypad.is_pressed(0xC)

    def test_set_key(self):
        keypad = Keypad()
        keypad.set_key(0x3, True)
        assert keypad.get_state()[0x3] is True
        keypad.set_key(0x3, False)
        assert keypad.get_state()[0x3] is False

    def test_is_pressed_uses_low_nibble(self):
        keypad = Keypad()
        keypad.press(0x1)
        assert keypad.is_pressed(0x21)

    def test_first_pressed_is_lowest(self):
        keypad = Keypad()
        keypad.press(0xE)
        keypad.press(0x6)
        assert keypad.get_first_pressed() == 0x6

    def test_invalid_key_ignored(self, caplog):
        keypad = Keypad()
        with caplog.at_level(logging.WARNING):
            keypad.press(0x10)
            keypad.release(-1)
        assert keypad.get_state() == [False] * NUM_KEYS
        assert "desconocido" in caplog.text

    def test_state_is_copy(self):
        keypad = Keypad()
        state = keypad.get_state()
        keypad.press(0x0)
        assert state[0] is False


class TestKeyLatch:
    """Tests del latch usado por Fx0A"""

    def test_latch_records_transition(self):
        keypad = Keypad()
        keypad.arm_wait()
        keypad.press(0x8)
        keypad.release(0x8)
        assert keypad.take_latched_press() == 0x8
        assert keypad.take_latched_press() is None

    def test_arm_wait_discards_previous(self):
        keypad = Keypad()
        keypad.press(0x8)
        keypad.arm_wait()
        assert keypad.take_latched_press() is None

    def test_held_key_does_not_relatch(self):
        """Repetir press() sobre una tecla ya pulsada no es una transición"""
        keypad = Keypad()
        keypad.press(0x2)
        keypad.arm_wait()
        keypad.press(0x2)
        assert keypad.take_latched_press() is None

    def test_reset_clears_latch(self):
        keypad = Keypad()
        keypad.press(0x4)
        keypad.reset()
        assert keypad.take_latched_press() is None
        assert keypad.get_first_pressed() is None
