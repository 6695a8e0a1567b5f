# dicelang/parser.py
"""
骰式語法（關鍵字不分大小寫）：

    expr      := term (('+'|'-') term)*
    term      := power (('*'|'/'|'%') power)*
    power     := postfix ('^' postfix)*
    postfix   := diceatom ('!' | 'adv' | 'dis')*
    diceatom  := atom ('d' atom)* 'dF'*
    atom      := NUMBER | '(' expr ')'

優先順序由緊到鬆：括號 > d > dF > ! adv dis > ^ > * / % > + -。
同一層一律由左往右結合，^ 也是（2^3^2 == (2^3)^2）。

建樹之前先用 check_reduction 依上面的層級逐層歸約一次 token 列，
錯誤訊息與回報順序都以這一步為準：括號內的錯誤、缺少運算元都比
「剩餘 token」優先，而「修飾只能接在骰子後」要等整串歸約完才檢查。
運算元位置上的運算子會被當成運算元吃掉，通常最後變成剩餘 token。
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from dicelang.errors import (
    DieOperatorMisuse,
    EmptyExpression,
    LeftoverTokens,
    MissingTokenAfter,
    MissingTokenBefore,
    UnconvertibleToken,
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
from dicelang.lexer import Token, TokenKind, tokenize

logger = logging.getLogger("dicebot")

ADDITIVE = {TokenKind.ADD: Operator.ADD, TokenKind.SUB: Operator.SUB}
MULTIPLICATIVE = {TokenKind.MUL: Operator.MUL, TokenKind.DIV: Operator.DIV, TokenKind.MOD: Operator.MOD}
POSTFIX = {TokenKind.EXPLODE: Explode, TokenKind.ADV: Advantage, TokenKind.DIS: Disadvantage}
DIE_OPERATORS = {TokenKind.DIE, TokenKind.FATE, *POSTFIX}

# (運算子, 運算元個數)，由緊到鬆
TIERS = [
    ({TokenKind.DIE}, 2),
    ({TokenKind.FATE}, 1),
    (set(POSTFIX), 1),
    ({TokenKind.POW}, 2),
    (set(MULTIPLICATIVE), 2),
    (set(ADDITIVE), 2),
]


@dataclass(frozen=True)
class Bound:
    """歸約時的複合 token：運算子連同它吃下的運算元。"""
    op: Token
    operands: Tuple["Item", ...]


Item = Union[Token, Bound]


def check_reduction(tokens: List[Token]) -> Item:
    """依優先層級把 token 列歸約成一個複合 token，途中遇到的第一個錯誤直接拋出。"""
    root = _reduce(tokens)
    _check_operands(root)
    return root


def _reduce_groups(tokens: List[Token]) -> List[Item]:
    items: List[Item] = []
    i = 0
    while i < len(tokens):
        if tokens[i].kind is not TokenKind.LPAREN:
            items.append(tokens[i])
            i += 1
            continue
        depth = 0
        end = i + 1
        while end < len(tokens):
            kind = tokens[end].kind
            if kind is TokenKind.RPAREN:
                if depth == 0:
                    break
                depth -= 1
            elif kind is TokenKind.LPAREN:
                depth += 1
            end += 1
        # 沒有對應的 ")" 就一路吃到結尾
        items.append(_reduce(tokens[i + 1:end]))
        i = end + 1
    return items


def _reduce(tokens: List[Token]) -> Item:
    if not tokens:
        raise EmptyExpression()
    items = _reduce_groups(tokens)
    for kinds, arity in TIERS:
        items = _reduce_tier(items, kinds, arity)
    if len(items) > 1:
        raise LeftoverTokens()
    return items[0]


def _reduce_tier(items: List[Item], kinds, arity: int) -> List[Item]:
    items = list(items)
    i = 0
    while i < len(items):
        op = items[i]
        if not (isinstance(op, Token) and op.kind in kinds):
            i += 1
            continue
        if i == 0:
            raise MissingTokenBefore(op.text)
        if arity == 1:
            items[i - 1:i + 1] = [Bound(op, (items[i - 1],))]
            continue
        if i + 1 >= len(items):
            raise MissingTokenAfter(op.text)
        items[i - 1:i + 2] = [Bound(op, (items[i - 1], items[i + 1]))]
    return items


def _check_operands(item: Item):
    if isinstance(item, Token):
        if item.kind is not TokenKind.NUMBER:
            raise UnconvertibleToken(item.text)
        return
    if item.op.kind in POSTFIX:
        inner = item.operands[0]
        if not (isinstance(inner, Bound) and inner.op.kind in DIE_OPERATORS):
            raise DieOperatorMisuse(item.op.text)
    for operand in item.operands:
        _check_operands(operand)


class Parser:
    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.pos = 0

    def peek(self) -> Optional[Token]:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def peek_kind(self) -> Optional[TokenKind]:
        tok = self.peek()
        return tok.kind if tok else None

    def advance(self) -> Token:
        tok = self.tokens[self.pos]
        self.pos += 1
        return tok

    def parse(self) -> Expr:
        check_reduction(self.tokens)
        expr = self.expression()
        if self.pos < len(self.tokens):
            raise LeftoverTokens()
        return expr

    # after：剛吃掉的運算子；None 代表位於（子）運算式開頭
    def expression(self, after: Optional[Token] = None) -> Expr:
        node = self.term(after)
        while self.peek_kind() in ADDITIVE:
            op = self.advance()
            node = BinaryOp(ADDITIVE[op.kind], node, self.term(op))
        return node

    def term(self, after: Optional[Token]) -> Expr:
        node = self.power(after)
        while self.peek_kind() in MULTIPLICATIVE:
            op = self.advance()
            node = BinaryOp(MULTIPLICATIVE[op.kind], node, self.power(op))
        return node

    def power(self, after: Optional[Token]) -> Expr:
        node = self.postfix(after)
        while self.peek_kind() is TokenKind.POW:
            op = self.advance()
            node = BinaryOp(Operator.POW, node, self.postfix(op))
        return node

    def postfix(self, after: Optional[Token]) -> Expr:
        node = self.dice(after)
        while self.peek_kind() in POSTFIX:
            op = self.advance()
            if not isinstance(node, Dice):
                raise DieOperatorMisuse(op.text)
            node = POSTFIX[op.kind](node)
        return node

    def dice(self, after: Optional[Token]) -> Expr:
        node = self.atom(after)
        while self.peek_kind() is TokenKind.DIE:
            op = self.advance()
            node = BasicDice(node, self.atom(op))
        while self.peek_kind() is TokenKind.FATE:
            self.advance()
            node = FateDice(node)
        return node

    def atom(self, after: Optional[Token]) -> Expr:
        tok = self.peek()
        if tok is None:
            if after is None:
                raise EmptyExpression()
            raise MissingTokenAfter(after.text)
        if tok.kind is TokenKind.NUMBER:
            self.advance()
            return Const(int(tok.text))
        if tok.kind is TokenKind.LPAREN:
            self.advance()
            if self.peek_kind() in (TokenKind.RPAREN, None):
                raise EmptyExpression()
            inner = self.expression()
            if self.peek_kind() is TokenKind.RPAREN:
                self.advance()
            elif self.peek() is not None:
                raise LeftoverTokens()
            # 未閉合的括號在輸入結尾視為已閉合
            return inner
        if after is not None:
            raise MissingTokenAfter(after.text)
        if tok.kind is TokenKind.RPAREN:
            raise LeftoverTokens()
        raise MissingTokenBefore(tok.text)


def parse_tokens(tokens: List[Token]) -> Expr:
    return Parser(tokens).parse()


def parse(text: str) -> Expr:
    expr = parse_tokens(tokenize(text))
    logger.debug("parse %r -> %r", text, expr)
    return expr
