from collections import namedtuple
from enum import Enum
from functools import reduce
import logging
import operator

import regex

from .symbols import DEFAULT_SYMBOLS
from .util import to_text


logger = logging.getLogger(__name__)


class TokenKind(Enum):
    NUMBER = 'number'
    OPERATOR = 'operator'
    UNARY_FUNCTION = 'unary function'
    BINARY_FUNCTION = 'binary function'
    LIST_FUNCTION = 'list function'
    CONSTANT = 'constant'
    LEFT_PAREN = 'left paren'
    RIGHT_PAREN = 'right paren'
    COMMA = 'comma'
    LIST_START = 'list start'
    LIST_END = 'list end'


Token = namedtuple('Token', ['kind', 'text'])


class Lexer:
    '''
    Lexer for infix expressions.

    Never fails: whatever it doesn't recognise is dropped without a token.
    '''
    # C isspace() in the "C" locale
    SPACE = r'[\x09-\x0d\x20]+'
    # No exponents, and as many dots as you like. The machine sorts it out.
    NUMBER = r'[0-9.]+'
    # Only tried where an operand is expected, see OPERAND_POSITION.
    NEGATIVE = r'-[0-9.]+'
    PUNCTUATION = r'[(),{}]'
    OPERATOR = r'[-+*/%^]'
    # Digits allowed after the first letter, for log10 and atan2.
    IDENTIFIER = r'[A-Za-z][A-Za-z0-9]*'
    # Any other single code point: unicode operators, √, π, τ, or junk.
    SYMBOL = r'.'

    # All possible lexemes, in order of preference.
    LEXEME = r'(?<space>' + SPACE + r')|' \
             r'(?<number>' + NUMBER + r')|' \
             r'(?<punctuation>' + PUNCTUATION + r')|' \
             r'(?<operator>' + OPERATOR + r')|' \
             r'(?<identifier>' + IDENTIFIER + r')|' \
             r'(?<symbol>' + SYMBOL + r')'
    GRAMMAR = LEXEME
    # Default regex flags for matching lexemes
    FLAGS = reduce(operator.__or__,
                   {regex.DOTALL,
                    regex.VERSION1},
                   0)

    PUNCTUATION_KINDS = {
        '(': TokenKind.LEFT_PAREN,
        ')': TokenKind.RIGHT_PAREN,
        ',': TokenKind.COMMA,
        '{': TokenKind.LIST_START,
        '}': TokenKind.LIST_END,
    }
    # A '-' after one of these (or at the start) may begin a negative number.
    OPERAND_POSITION = frozenset({
        TokenKind.OPERATOR,
        TokenKind.LEFT_PAREN,
        TokenKind.COMMA,
        TokenKind.LIST_START,
    })

    def __init__(self, symbols=DEFAULT_SYMBOLS):
        self.symbols = symbols
        self._lexeme = regex.compile(type(self).LEXEME,
                                     flags=type(self).FLAGS)
        self._negative = regex.compile(type(self).NEGATIVE,
                                       flags=type(self).FLAGS)

    def lex(self, expression):
        '''
        Yield the tokens of an infix expression, str or UTF-8 bytes.
        '''
        text = to_text(expression)
        position = 0
        previous = None
        while position < len(text):
            if previous is None or previous.kind in self.OPERAND_POSITION:
                match = self._negative.match(text, position)
                if match is not None:
                    position = match.end()
                    previous = Token(TokenKind.NUMBER, match.group(0))
                    yield previous
                    continue
            match = self._lexeme.match(text, position)
            position = match.end()
            token = self._classify(match.lastgroup, match.group(0))
            if token is not None:
                previous = token
                yield token

    def _classify(self, group, lexeme):
        '''
        Turn a matched lexeme into a Token, or None to drop it.
        '''
        if group == 'space':
            return None
        elif group == 'number':
            return Token(TokenKind.NUMBER, lexeme)
        elif group == 'punctuation':
            return Token(type(self).PUNCTUATION_KINDS[lexeme], lexeme)
        elif group == 'operator':
            return Token(TokenKind.OPERATOR, lexeme)
        elif group == 'identifier':
            return self._classify_identifier(lexeme)
        return self._classify_symbol(lexeme)

    def _classify_identifier(self, name):
        symbols = self.symbols
        if symbols.is_constant(name):
            return Token(TokenKind.CONSTANT, name)
        elif symbols.is_unary_function(name):
            return Token(TokenKind.UNARY_FUNCTION, name)
        elif symbols.is_binary_function(name):
            return Token(TokenKind.BINARY_FUNCTION, name)
        elif symbols.is_list_function(name):
            return Token(TokenKind.LIST_FUNCTION, name)
        logger.debug('Dropping unknown identifier %r', name)
        return None

    def _classify_symbol(self, symbol):
        symbols = self.symbols
        # Only non-ASCII code points are looked up
        if ord(symbol) > 0x7f:
            if symbols.is_operator(symbol):
                return Token(TokenKind.OPERATOR, symbol)
            elif symbols.is_unary_function(symbol):
                return Token(TokenKind.UNARY_FUNCTION, symbol)
            elif symbols.is_constant(symbol):
                return Token(TokenKind.CONSTANT, symbol)
        logger.debug('Dropping unknown symbol %r', symbol)
        return None


def tokenize(expression, symbols=DEFAULT_SYMBOLS):
    '''
    Return the list of tokens in an infix expression.
    '''
    return list(Lexer(symbols).lex(expression))
