'''
Infix and RPN arithmetic.

Converts infix expressions to Reverse Polish Notation by shunting-yard,
evaluates RPN on a stack machine, and renders RPN back to parenthesised
infix. Supports the usual arithmetic operators, a few of their unicode
spellings (× ÷ · √ π τ), unary and binary function calls, and HP calculator
style list literals reduced by statistical functions:

    >>> infix_to_rpn('{ 2, 4, 6, 8 } var')
    '{ 2 4 6 8 } var'
    >>> evaluate_rpn('{ 2 4 6 8 } var')
    5.0

Not a programming language: no variables, no assignment, and malformed
input is mostly dropped rather than diagnosed.
'''

from .cli import CLI
from .converter import Converter, infix_to_rpn
from .lexer import Lexer, Token, TokenKind, tokenize
from .machine import LIST_MARKER, Machine, evaluate_rpn
from .renderer import Renderer, rpn_to_infix
from .symbols import DEFAULT_SYMBOLS, SymbolTable
from .util import RPNError


__all__ = (
    'tokenize', 'infix_to_rpn', 'evaluate_rpn', 'rpn_to_infix',
    'Lexer', 'Converter', 'Machine', 'Renderer', 'CLI',
    'Token', 'TokenKind', 'SymbolTable', 'DEFAULT_SYMBOLS', 'LIST_MARKER',
    'RPNError',
)
