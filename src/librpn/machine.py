from collections import deque
import logging

import regex

from .symbols import DEFAULT_SYMBOLS
from .util import RPNError, split_rpn, wrap_user_errors


logger = logging.getLogger(__name__)


class ListMarker:
    '''
    Bottom of a list literal on the machine's stack.

    Never equal to any number, NaN included.
    '''

    def __repr__(self):
        return '{'


LIST_MARKER = ListMarker()


class Machine:
    '''
    Arithmetic stack machine (RPN evaluator).

    Takes space separated RPN and runs it, one token at a time.

    evaluate() works on a stack of its own for each call, so one machine can
    serve several threads. feed() without a stack works on the machine's own
    stack, which is not shared safely.
    '''

    LIST_START = '{'
    LIST_END = '}'
    # What C strtod() would accept as the numeric prefix of a token.
    HEX_NUMBER = regex.compile(r'''
                               [+-]?
                               0x
                               (?:
                                   # 0x1f, 0x1., 0x1.8
                                   [0-9a-f]+ (?:\.[0-9a-f]*)?
                                   |
                                   # 0x.8
                                   \.[0-9a-f]+
                               )
                               (?:p[+-]?[0-9]+)?
                               ''', flags=regex.VERBOSE | regex.IGNORECASE)
    NUMBER = regex.compile(r'''
                           [+-]?
                           (?:
                               (?:
                                   # 1, 1., 1.5
                                   [0-9]+ (?:\.[0-9]*)?
                                   |
                                   # .5
                                   \.[0-9]+
                               )
                               (?:[eE][+-]?[0-9]+)?
                               |
                               inf(?:inity)?
                               |
                               nan
                           )
                           ''', flags=regex.VERBOSE | regex.IGNORECASE)

    def __init__(self, symbols=DEFAULT_SYMBOLS):
        '''
        Create empty stack machine.

        :param symbols: SymbolTable of operators, functions and constants.
        '''
        self.symbols = symbols
        self.stack = deque()

    def evaluate(self, expression):
        '''
        Run RPN expression on a fresh stack, and return the top of stack.

        Leftover values under the top are ignored. The machine's own stack
        is left alone.
        '''
        stack = deque()
        for token in split_rpn(expression):
            self.feed(token, stack)
        if len(stack) > 1:
            logger.debug('%d value(s) left under the result of %r',
                         len(stack) - 1, expression)
        return self._number(self._top(stack))

    def feed(self, token, stack=None):
        '''
        Stack or run a single RPN token.

        :param stack: Operand stack to run on, the machine's own by default.
        '''
        if stack is None:
            stack = self.stack
        symbols = self.symbols
        if token == self.LIST_START:
            self._pshstack(stack, LIST_MARKER)
        elif token == self.LIST_END:
            # The list function that follows finds the marker itself.
            pass
        elif symbols.is_operator(token):
            b, a = self._popnumbers(stack, 2)
            self._pshstack(stack, symbols.operators[token].apply(a, b))
        elif symbols.is_unary_function(token):
            a, = self._popnumbers(stack, 1)
            self._pshstack(stack, symbols.unary_functions[token].apply(a))
        elif symbols.is_binary_function(token):
            b, a = self._popnumbers(stack, 2)
            self._pshstack(stack, symbols.binary_functions[token].apply(a, b))
        elif symbols.is_list_function(token):
            values = self._poplist(stack)
            self._pshstack(stack, symbols.list_functions[token].reduce(values))
        elif symbols.is_constant(token):
            self._pshstack(stack, symbols.value_of(token))
        else:
            self._pshstack(stack, self._iconvert(token))

    @wrap_user_errors('Cannot convert {1}')
    def _iconvert(self, number):
        '''
        Convert a literal to float, like strtod: 1.2.3 is 1.2, 0x10 is 16.
        '''
        match = self.HEX_NUMBER.match(number)
        if match is not None:
            return float.fromhex(match.group(0))
        match = self.NUMBER.match(number)
        if match is None:
            raise ValueError(number)
        return float(match.group(0))

    def _pshstack(self, stack, *new):
        '''
        Push all elements onto stack, leftmost at the bottom.
        '''
        stack.extend(new)

    def _popstack(self, stack, n=1):
        '''
        Pop specified number of args from stack, topmost first.
        '''
        if len(stack) < n:
            raise RPNError('Less than {} element(s) on stack'.format(n))
        return [stack.pop() for _ in range(n)]

    def _popnumbers(self, stack, n):
        '''
        Pop n numbers, topmost first.
        '''
        return [self._number(value) for value in self._popstack(stack, n)]

    def _poplist(self, stack):
        '''
        Pop values down to the innermost list marker, in push order.

        The marker is discarded. Without one, the whole stack is the list.
        '''
        values = []
        while stack and stack[-1] is not LIST_MARKER:
            values.append(stack.pop())
        if stack:
            stack.pop()
        else:
            logger.debug('No list marker, reducing the whole stack')
        values.reverse()
        return values

    @wrap_user_errors('Empty stack')
    def _top(self, stack):
        return stack[-1]

    def _number(self, value):
        if value is LIST_MARKER:
            raise RPNError('List marker where a number was expected')
        return value


def evaluate_rpn(expression, symbols=DEFAULT_SYMBOLS):
    '''
    Return the value of a space separated RPN expression.

    Raises RPNError on malformed RPN.
    '''
    return Machine(symbols).evaluate(expression)
