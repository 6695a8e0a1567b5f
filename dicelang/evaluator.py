# dicelang/evaluator.py
from __future__ import annotations

import logging
import operator
import random
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Protocol

from dicelang.errors import (
    DivisionByZero,
    InvalidDice,
    InvalidExponent,
    TooManyDice,
    TooManySides,
)
from dicelang.expr import (
    Advantage,
    BasicDice,
    BinaryOp,
    Const,
    Dice,
    Disadvantage,
    Explode,
    Expr,
    FateDice,
    Operator,
)
from dicelang.parser import parse
from dicelang.result import Result

logger = logging.getLogger("dicebot")


class RandomSource(Protocol):
    def randint(self, a: int, b: int) -> int:
        """回傳 [a, b]（含兩端）之間均勻分布的整數。"""
        ...


@dataclass(frozen=True)
class RollLimits:
    """單批骰子的上限；None 代表不限制。"""
    max_dice: Optional[int] = None
    max_sides: Optional[int] = None


# ---------- 四則運算 ----------
def _div(a: int, b: int) -> int:
    if b == 0:
        raise DivisionByZero("/")
    # 向零取整（Python 的 // 是向下取整）
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q


def _mod(a: int, b: int) -> int:
    if b == 0:
        raise DivisionByZero("%")
    # 餘數跟隨被除數的正負號
    r = abs(a) % abs(b)
    return -r if a < 0 else r


def _pow(a: int, b: int) -> int:
    # 經由浮點數計算再向零截斷，大數會有精度損失
    try:
        return int(float(a) ** b)
    except (ZeroDivisionError, OverflowError) as e:
        raise InvalidExponent(a, b) from e


OPERATIONS: Dict[Operator, Callable[[int, int], int]] = {
    Operator.ADD: operator.add,
    Operator.SUB: operator.sub,
    Operator.MUL: operator.mul,
    Operator.DIV: _div,
    Operator.MOD: _mod,
    Operator.POW: _pow,
}


def apply_operator(op: Operator, a: int, b: int) -> int:
    return OPERATIONS[op](a, b)


class Evaluator:
    def __init__(self, rng: Optional[RandomSource] = None, limits: Optional[RollLimits] = None):
        self.rng = rng if rng is not None else random
        self.limits = limits or RollLimits()

    def evaluate(self, expr: Expr) -> Result:
        if isinstance(expr, Const):
            return Result(expr, expr.value)
        if isinstance(expr, BinaryOp):
            left = self.evaluate(expr.left)
            right = self.evaluate(expr.right)
            return Result(
                expr,
                apply_operator(expr.op, left.value, right.value),
                children=(left, right),
                label=f"{left.label} {expr.op.symbol} {right.label}",
            )
        if isinstance(expr, Dice):
            return self.roll_dice(expr)
        raise TypeError(f"cannot evaluate {expr!r}")

    def roll_dice(self, dice: Dice, count: Optional[Result] = None, sides: Optional[Result] = None) -> Result:
        """
        擲一組骰子。count / sides 若已先算好就直接沿用，
        否則在此重新計算（所以 adv/dis 的兩次嘗試各自獨立）。
        """
        if isinstance(dice, Explode):
            return self._explode(dice, count, sides)
        if isinstance(dice, (Advantage, Disadvantage)):
            return self._pick(dice, count, sides)
        if isinstance(dice, BasicDice):
            if count is None:
                count = self.evaluate(dice.count)
            if sides is None:
                sides = self.evaluate(dice.sides)
            n, s = count.value, sides.value
            self._check(n, s)
            rolls = [self.rng.randint(1, s) for _ in range(n)]
            logger.debug("roll %sd%s -> %s", n, s, rolls)
            return Result(dice, sum(rolls), rolls, (count, sides), label=f"{n}d{s}")
        if isinstance(dice, FateDice):
            if count is None:
                count = self.evaluate(dice.count)
            n = count.value
            self._check(n, None)
            rolls = [self.rng.randint(-1, 1) for _ in range(n)]
            logger.debug("roll %sdF -> %s", n, rolls)
            return Result(dice, sum(rolls), rolls, (count,), label=f"{n}dF")
        raise TypeError(f"cannot roll {dice!r}")

    def _check(self, n: int, s: Optional[int]):
        if n < 0:
            raise InvalidDice(f"Cannot roll a negative number of dice ({n})")
        if self.limits.max_dice is not None and n > self.limits.max_dice:
            raise TooManyDice(n, self.limits.max_dice)
        # 0 顆骰子合法，面數不檢查
        if n == 0 or s is None:
            return
        if s < 1:
            raise InvalidDice(f"Cannot roll a die with {s} sides")
        if self.limits.max_sides is not None and s > self.limits.max_sides:
            raise TooManySides(s, self.limits.max_sides)

    def _explode(self, dice: Explode, count: Optional[Result], sides: Optional[Result]) -> Result:
        base = dice.base
        if count is None:
            count = self.evaluate(base.count)
        if sides is None:
            sides = self.evaluate(base.sides)
        s = sides.value

        attempts: List[Result] = [self.roll_dice(dice.of, count, sides)]
        # 面數 <= 1 時每顆都是最大值，不可再爆
        while s > 1 and s in attempts[-1].rolls:
            hits = attempts[-1].rolls.count(s)
            attempts.append(self.roll_dice(dice.of.with_counts(hits, s)))

        rolls = [r for a in attempts for r in a.rolls]
        return Result(dice, sum(rolls), rolls, attempts, label=f"{attempts[0].label}{dice.symbol}")

    def _pick(self, dice: Dice, count: Optional[Result], sides: Optional[Result]) -> Result:
        first = self.roll_dice(dice.of, count, sides)
        second = self.roll_dice(dice.of, count, sides)
        # 平手時保留第一次
        if isinstance(dice, Advantage):
            chosen = second if second.value > first.value else first
        else:
            chosen = second if second.value < first.value else first
        return Result(dice, chosen.value, chosen.rolls, (first, second), label=f"{chosen.label}{dice.symbol}")


def evaluate(expr: Expr, rng: Optional[RandomSource] = None, limits: Optional[RollLimits] = None) -> Result:
    return Evaluator(rng, limits).evaluate(expr)


def roll(text: str, rng: Optional[RandomSource] = None, limits: Optional[RollLimits] = None) -> Result:
    """解析並計算骰式字串。"""
    return evaluate(parse(text), rng, limits)
