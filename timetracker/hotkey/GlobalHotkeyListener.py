import logging
import sys
import threading
from dataclasses import dataclass
from typing import Callable, FrozenSet, List, Optional, Set, Tuple, Union
from pynput import keyboard

KeyType = Union[keyboard.Key, keyboard.KeyCode]

MODIFIER_NAMES = {
    'ctrl': keyboard.Key.ctrl_l,
    'alt': keyboard.Key.alt_l,
    'shift': keyboard.Key.shift_l,
    'cmd': keyboard.Key.cmd_l,
}

NAMED_KEYS = {
    'space': keyboard.Key.space,
    'enter': keyboard.Key.enter,
    'tab': keyboard.Key.tab,
    'escape': keyboard.Key.esc,
    'esc': keyboard.Key.esc,
    **{f'f{n}': getattr(keyboard.Key, f'f{n}') for n in range(1, 13)},
}

# Generic and right-hand variants collapse onto the left-hand key
_MODIFIER_ALIASES = {
    keyboard.Key.ctrl: keyboard.Key.ctrl_l,
    keyboard.Key.ctrl_l: keyboard.Key.ctrl_l,
    keyboard.Key.ctrl_r: keyboard.Key.ctrl_l,
    keyboard.Key.alt: keyboard.Key.alt_l,
    keyboard.Key.alt_l: keyboard.Key.alt_l,
    keyboard.Key.alt_r: keyboard.Key.alt_l,
    keyboard.Key.alt_gr: keyboard.Key.alt_l,
    keyboard.Key.shift: keyboard.Key.shift_l,
    keyboard.Key.shift_l: keyboard.Key.shift_l,
    keyboard.Key.shift_r: keyboard.Key.shift_l,
    keyboard.Key.cmd: keyboard.Key.cmd_l,
    keyboard.Key.cmd_l: keyboard.Key.cmd_l,
    keyboard.Key.cmd_r: keyboard.Key.cmd_l,
}


def parse_hotkey(hotkey: str) -> Tuple[KeyType, FrozenSet[keyboard.Key]]:
    """
    Split a hotkey string such as 'ctrl+alt+q' into target key and modifiers.

    Raises:
        ValueError: Unknown key names, no target key, or more than one
    """
    modifiers: Set[keyboard.Key] = set()
    target: Optional[KeyType] = None

    for part in (p.strip() for p in hotkey.lower().split('+')):
        if part in MODIFIER_NAMES:
            modifiers.add(MODIFIER_NAMES[part])
            continue

        if part in NAMED_KEYS:
            key: KeyType = NAMED_KEYS[part]
        elif len(part) == 1:
            key = keyboard.KeyCode.from_char(part)
        else:
            raise ValueError(f"Unknown key in hotkey {hotkey!r}: {part!r}")

        if target is not None:
            raise ValueError(f"Multiple non-modifier keys in hotkey: {hotkey!r}")
        target = key

    if target is None:
        raise ValueError(f"No target key found in hotkey: {hotkey!r}")

    return target, frozenset(modifiers)


@dataclass(frozen=True)
class HotkeyBinding:
    hotkey: str
    target: KeyType
    modifiers: FrozenSet[keyboard.Key]
    callback: Callable[[], None]

    def matches(self, key: KeyType, pressed: Set[keyboard.Key]) -> bool:
        return self.modifiers.issubset(pressed) and _same_key(key, self.target)


def _same_key(key: KeyType, target: KeyType) -> bool:
    if key == target:
        return True
    if not (isinstance(key, keyboard.KeyCode) and isinstance(target, keyboard.KeyCode)):
        return False
    if target.char is None:
        return False
    if key.char is None:
        # ctrl+alt+<letter> on Windows arrives with only a virtual key code,
        # which equals the uppercase ASCII code for letters and digits
        return (sys.platform == 'win32' and key.vk is not None
                and target.char.isalnum() and key.vk == ord(target.char.upper()))

    char = key.char
    # Windows reports ctrl+<letter> as the ASCII control character
    if len(char) == 1 and 1 <= ord(char) <= 26:
        char = chr(ord(char) + 96)
    return char.lower() == target.char


class GlobalHotkeyListener:
    """
    One system-wide keyboard hook dispatching to any number of hotkeys.

    Callbacks run on the pynput listener thread and must only schedule
    work on the UI thread.
    """

    def __init__(self, verbose: bool = False) -> None:
        self._verbose = verbose
        self._bindings: List[HotkeyBinding] = []
        self._listener: Optional[keyboard.Listener] = None
        self._pressed_modifiers: Set[keyboard.Key] = set()
        self._lock = threading.Lock()

    @property
    def hotkeys(self) -> List[str]:
        with self._lock:
            return [binding.hotkey for binding in self._bindings]

    def register(self, hotkey: str, callback: Callable[[], None]) -> None:
        """
        Add a hotkey; effective immediately, even while listening.

        Raises:
            ValueError: If hotkey cannot be parsed
        """
        target, modifiers = parse_hotkey(hotkey)
        with self._lock:
            self._bindings.append(HotkeyBinding(hotkey, target, modifiers, callback))

        if self._verbose:
            logging.info(f"GlobalHotkeyListener: registered '{hotkey}' -> "
                         f"key={target}, modifiers={set(modifiers)}")

    def start(self) -> None:
        if self._listener is not None:
            return

        self._listener = keyboard.Listener(
            on_press=self._on_press,
            on_release=self._on_release
        )
        self._listener.daemon = True
        self._listener.start()

        if self._verbose:
            logging.info(f"GlobalHotkeyListener: listening for {self.hotkeys}")

    def stop(self) -> None:
        if self._listener is None:
            return

        self._listener.stop()
        self._listener = None

        with self._lock:
            self._pressed_modifiers.clear()

        if self._verbose:
            logging.info("GlobalHotkeyListener: stopped")

    def _on_press(self, key) -> None:
        modifier = _MODIFIER_ALIASES.get(key)
        with self._lock:
            if modifier is not None:
                self._pressed_modifiers.add(modifier)
                return
            triggered = [b for b in self._bindings if b.matches(key, self._pressed_modifiers)]

        # Callbacks run outside the lock so they may register or stop
        for binding in triggered:
            if self._verbose:
                logging.info(f"GlobalHotkeyListener: '{binding.hotkey}' triggered")
            binding.callback()

    def _on_release(self, key) -> None:
        modifier = _MODIFIER_ALIASES.get(key)
        if modifier is None:
            return
        with self._lock:
            self._pressed_modifiers.discard(modifier)
