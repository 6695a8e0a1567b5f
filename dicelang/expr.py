# dicelang/expr.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Union


class Expr:
    """骰式運算樹的節點。所有節點皆為不可變的值物件，以結構比較相等。"""

    def parenthesize(self) -> str:
        return f"({self})"


ExprLike = Union[Expr, int]


def as_expr(value: ExprLike) -> Expr:
    if isinstance(value, Expr):
        return value
    # bool 是 int 的子類，這裡不接受
    if isinstance(value, int) and not isinstance(value, bool):
        return Const(value)
    raise TypeError(f"expected an expression or int, got {type(value).__name__}")


@dataclass(frozen=True)
class Const(Expr):
    value: int

    def __str__(self) -> str:
        return str(self.value)

    def parenthesize(self) -> str:
        return str(self) if self.value >= 0 else f"({self})"


class Operator(Enum):
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    MOD = "%"
    POW = "^"

    @property
    def symbol(self) -> str:
        return self.value


@dataclass(frozen=True)
class BinaryOp(Expr):
    op: Operator
    left: Expr
    right: Expr

    def __post_init__(self):
        object.__setattr__(self, "op", Operator(self.op))
        object.__setattr__(self, "left", as_expr(self.left))
        object.__setattr__(self, "right", as_expr(self.right))

    def __str__(self) -> str:
        return f"{self.left} {self.op.symbol} {self.right}"


def Add(left: ExprLike, right: ExprLike) -> BinaryOp:
    return BinaryOp(Operator.ADD, left, right)


def Sub(left: ExprLike, right: ExprLike) -> BinaryOp:
    return BinaryOp(Operator.SUB, left, right)


def Mul(left: ExprLike, right: ExprLike) -> BinaryOp:
    return BinaryOp(Operator.MUL, left, right)


def Div(left: ExprLike, right: ExprLike) -> BinaryOp:
    return BinaryOp(Operator.DIV, left, right)


def Mod(left: ExprLike, right: ExprLike) -> BinaryOp:
    return BinaryOp(Operator.MOD, left, right)


def Pow(left: ExprLike, right: ExprLike) -> BinaryOp:
    return BinaryOp(Operator.POW, left, right)


# ---------- 骰子 ----------
class Dice(Expr):
    """可擲的一組骰子：NdS、NdF，以及包住另一組骰子的修飾（! / adv / dis）。"""

    @property
    def base(self) -> "Dice":
        """最內層的 BasicDice / FateDice。"""
        return self


@dataclass(frozen=True)
class BasicDice(Dice):
    count: Expr
    sides: Expr

    def __post_init__(self):
        object.__setattr__(self, "count", as_expr(self.count))
        object.__setattr__(self, "sides", as_expr(self.sides))

    def with_counts(self, count: ExprLike, sides: ExprLike) -> "BasicDice":
        """以新的顆數、面數重建同樣型態的骰子；修飾骰會一路保留外層。"""
        return BasicDice(count, sides)

    def __str__(self) -> str:
        return f"{self.count.parenthesize()}d{self.sides.parenthesize()}"


@dataclass(frozen=True)
class FateDice(Dice):
    count: Expr

    def __post_init__(self):
        object.__setattr__(self, "count", as_expr(self.count))

    @property
    def sides(self) -> Expr:
        return Const(0)

    def with_counts(self, count: ExprLike, sides: ExprLike) -> "FateDice":
        return FateDice(count)

    def __str__(self) -> str:
        return f"{self.count.parenthesize()}dF"


@dataclass(frozen=True)
class Modifier(Dice):
    of: Dice
    symbol: ClassVar[str] = ""

    def __post_init__(self):
        if not isinstance(self.of, Dice):
            raise TypeError(f"{type(self).__name__} can only wrap dice, got {self.of!r}")

    @property
    def base(self) -> Dice:
        return self.of.base

    @property
    def count(self) -> Expr:
        return self.base.count

    @property
    def sides(self) -> Expr:
        return self.base.sides

    def with_counts(self, count: ExprLike, sides: ExprLike) -> "Modifier":
        return type(self)(self.of.with_counts(count, sides))

    def __str__(self) -> str:
        return f"{self.of}{self.symbol}"


class Explode(Modifier):
    symbol = "!"


class Advantage(Modifier):
    symbol = "adv"


class Disadvantage(Modifier):
    symbol = "dis"
