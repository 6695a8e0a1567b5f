# dicelang/result.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

from dicelang.expr import Dice, Expr


@dataclass(frozen=True)
class Result:
    """
    一次計算的結果節點。
    - source：被計算的運算式
    - value：最終數值
    - rolls：此節點直接擲出的骰面（非骰子節點為空）
    - children：運算元的結果；修飾骰則是每一次嘗試的結果
    - label：顯示用的運算式文字，骰子的顆數/面數已換成實際擲出的數值（例：2d3 + 5d6）
    """
    source: Expr
    value: int
    rolls: Tuple[int, ...] = ()
    children: Tuple["Result", ...] = ()
    label: str = ""
    dice_children: Tuple["Result", ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "rolls", tuple(self.rolls))
        object.__setattr__(self, "children", tuple(self.children))
        if not self.label:
            object.__setattr__(self, "label", str(self.source))
        object.__setattr__(self, "dice_children", _collect_dice(self.children))

    @property
    def is_dice(self) -> bool:
        return isinstance(self.source, Dice)

    def __str__(self) -> str:
        rolls = f" {list(self.rolls)}" if self.rolls else ""
        return f"{self.label} = {self.value}{rolls}".strip()

    def render(self, indent: int = 2) -> str:
        return render(self, indent)


def _collect_dice(children: Tuple[Result, ...]) -> Tuple[Result, ...]:
    # 純算術節點本身不列出，但要往下找骰子
    found = []
    for child in children:
        if child.is_dice:
            found.append(child)
        else:
            found.extend(child.dice_children)
    return tuple(found)


def render(result: Result, indent: int = 2) -> str:
    """把結果連同骰子來源樹展開成多行文字，每深一層縮排 indent 個空白。"""
    lines = [str(result)]
    pad = " " * indent
    for child in result.dice_children:
        lines.extend(pad + line for line in render(child, indent).split("\n"))
    return "\n".join(line.rstrip() for line in lines).strip()
