'''
Infix to RPN conversion, by shunting-yard.

Function calls are deferred on the operator stack until their closing
parenthesis. List literals are copied through to the output as they are
met, braces included, so the machine can find their bounds.
'''

import logging

from .lexer import Lexer, TokenKind
from .symbols import DEFAULT_SYMBOLS


logger = logging.getLogger(__name__)


FUNCTIONS = frozenset({
    TokenKind.UNARY_FUNCTION,
    TokenKind.BINARY_FUNCTION,
    TokenKind.LIST_FUNCTION,
})
# Stack entries that operators and commas never pop past.
SCOPES = frozenset({
    TokenKind.LEFT_PAREN,
    TokenKind.LIST_START,
})


class Converter:
    '''
    Convert infix expressions to space separated RPN.

    Holds no state between conversions.
    '''

    def __init__(self, symbols=DEFAULT_SYMBOLS):
        self.symbols = symbols
        self.lexer = Lexer(symbols)
        self._handlers = {
            TokenKind.NUMBER: self._operand,
            TokenKind.CONSTANT: self._operand,
            TokenKind.UNARY_FUNCTION: self._defer,
            TokenKind.BINARY_FUNCTION: self._defer,
            TokenKind.LIST_FUNCTION: self._defer,
            TokenKind.LEFT_PAREN: self._defer,
            TokenKind.LIST_START: self._list_start,
            TokenKind.OPERATOR: self._operator,
            TokenKind.COMMA: self._comma,
            TokenKind.RIGHT_PAREN: self._right_paren,
            TokenKind.LIST_END: self._list_end,
        }

    def convert(self, expression):
        '''
        Return the RPN for an infix expression.

        Unbalanced brackets are not an error; whatever is left on the operator
        stack at the end is emitted as is.
        '''
        output = []
        stack = []
        for token in self.lexer.lex(expression):
            self._handlers[token.kind](token, output, stack)
        if any(entry.kind in SCOPES for entry in stack):
            logger.debug('Unclosed bracket(s) in %r', expression)
        while stack:
            output.append(stack.pop().text)
        return ' '.join(output)

    def _operand(self, token, output, stack):
        output.append(token.text)

    def _defer(self, token, output, stack):
        stack.append(token)

    def _list_start(self, token, output, stack):
        output.append(token.text)
        stack.append(token)

    def _binds_tighter(self, top, token):
        '''
        Return True if the stacked top must be emitted before operator token.
        '''
        if top.kind in FUNCTIONS:
            return True
        precedence = self.symbols.precedence_of(top.text)
        incoming = self.symbols.precedence_of(token.text)
        return precedence > incoming or \
            precedence == incoming and \
            not self.symbols.is_right_associative(token.text)

    def _operator(self, token, output, stack):
        while stack and stack[-1].kind not in SCOPES and \
                self._binds_tighter(stack[-1], token):
            output.append(stack.pop().text)
        stack.append(token)

    def _pop_scope(self, output, stack):
        '''
        Emit everything down to, not including, the innermost scope.
        '''
        while stack and stack[-1].kind not in SCOPES:
            output.append(stack.pop().text)

    def _comma(self, token, output, stack):
        self._pop_scope(output, stack)

    def _pop_until(self, kind, output, stack):
        '''
        Emit down to the innermost entry of kind, and discard it.
        '''
        while stack and stack[-1].kind is not kind:
            output.append(stack.pop().text)
        if stack:
            stack.pop()
        else:
            logger.debug('Unmatched %s', kind.value)

    def _right_paren(self, token, output, stack):
        self._pop_until(TokenKind.LEFT_PAREN, output, stack)
        if stack and stack[-1].kind in {TokenKind.UNARY_FUNCTION,
                                        TokenKind.BINARY_FUNCTION}:
            output.append(stack.pop().text)

    def _list_end(self, token, output, stack):
        self._pop_until(TokenKind.LIST_START, output, stack)
        output.append(token.text)


def infix_to_rpn(expression, symbols=DEFAULT_SYMBOLS):
    '''
    Return the space separated RPN for an infix expression.
    '''
    return Converter(symbols).convert(expression)
