"""Shared listener doubles for the test suite."""


class Recorder:
    """Listener that records every call made to its handler methods."""

    def __init__(self, name: str, calls: list, result=None):
        self.name = name
        self.calls = calls
        self.result = result

    def on_x(self, source, data):
        self.calls.append((self.name, "on_x", data))
        return self.result

    def on_y(self, source, data):
        self.calls.append((self.name, "on_y", data))
        return self.result
