import time


class KeySequenceTrigger:
    """
    Fires ``callback`` when ``phrase`` is typed as consecutive keys.

    Keys are compared lower-cased. A pause of ``timeout`` seconds or more
    between two keys empties the buffer, as does a match. Multi-character
    key names (``"Shift"``) are appended as typed, like a browser's
    ``event.key``.
    """

    def __init__(self, phrase, callback, timeout=1.0, clock=time.monotonic):
        if not phrase:
            raise ValueError("phrase must not be empty")
        self.phrase = phrase.lower()
        self.callback = callback
        self.timeout = timeout
        self.clock = clock
        self._buffer = ""
        self._last_at = None

    def press(self, key, at=None):
        """Feed one key; returns True when this key completed the phrase."""
        at = self.clock() if at is None else at
        if self._last_at is not None and at - self._last_at >= self.timeout:
            self._buffer = ""
        self._last_at = at

        self._buffer += str(key).lower()
        if self.phrase in self._buffer:
            self.reset()
            self.callback()
            return True

        # Only the tail that could still start a match is kept
        self._buffer = self._buffer[-(len(self.phrase) - 1):] if len(self.phrase) > 1 else ""
        return False

    def reset(self):
        self._buffer = ""
        self._last_at = None

    def replay(self, keys):
        """Feed recorded ``(key, at)`` pairs; returns how many times the phrase matched."""
        return sum(1 for key, at in keys if self.press(key, at))
