# dicelang/lexer.py
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import List

from dicelang.errors import UnexpectedCharacter, UnexpectedToken

logger = logging.getLogger("dicebot")


class TokenKind(Enum):
    NUMBER = "number"
    LPAREN = "("
    RPAREN = ")"
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    MOD = "%"
    POW = "^"
    DIE = "d"
    FATE = "dF"
    EXPLODE = "!"
    ADV = "adv"
    DIS = "dis"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str

    def __str__(self) -> str:
        return self.text


SYMBOLS = {
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    "+": TokenKind.ADD,
    "-": TokenKind.SUB,
    "*": TokenKind.MUL,
    "/": TokenKind.DIV,
    "%": TokenKind.MOD,
    "^": TokenKind.POW,
    "!": TokenKind.EXPLODE,
}

# 字母關鍵字不分大小寫，token 內一律存標準寫法
KEYWORDS = {
    "d": TokenKind.DIE,
    "df": TokenKind.FATE,
    "adv": TokenKind.ADV,
    "dis": TokenKind.DIS,
}

# 字首須為 ASCII 字母，其後連續的 Unicode 字母都算同一個字（例：dé）
TOKEN_RE = re.compile(r"(?P<space>\s+)|(?P<number>[0-9]+)|(?P<word>[A-Za-z][^\W\d_]*)|(?P<other>.)", re.DOTALL)


def tokenize(text: str) -> List[Token]:
    tokens: List[Token] = []
    for m in TOKEN_RE.finditer(text):
        kind = m.lastgroup
        value = m.group()
        if kind == "space":
            continue
        if kind == "number":
            tokens.append(Token(TokenKind.NUMBER, value))
        elif kind == "word":
            word = value.lower()
            if word not in KEYWORDS:
                raise UnexpectedToken(word)
            tk = KEYWORDS[word]
            tokens.append(Token(tk, tk.value))
        elif value in SYMBOLS:
            tokens.append(Token(SYMBOLS[value], value))
        else:
            raise UnexpectedCharacter(value)
    logger.debug("tokenize %r -> %s", text, " ".join(map(str, tokens)))
    return tokens
