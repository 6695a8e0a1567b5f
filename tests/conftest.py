import pytest


class ScriptedRandom:
    """依序回傳預先排好的骰值，並檢查每次呼叫的範圍。"""

    def __init__(self, values):
        self.values = list(values)
        self.calls = []

    def randint(self, a: int, b: int) -> int:
        self.calls.append((a, b))
        value = self.values.pop(0)
        assert a <= value <= b, f"scripted value {value} outside [{a}, {b}]"
        return value


@pytest.fixture
def scripted():
    return ScriptedRandom
