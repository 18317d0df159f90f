from .symbols import DEFAULT_SYMBOLS
from .util import RPNError, split_rpn


class Renderer:
    '''
    Render RPN back to fully parenthesised infix.

    List literals and list functions aren't understood: their tokens are
    stacked verbatim like any operand, so they don't come back as valid infix.
    '''

    def __init__(self, symbols=DEFAULT_SYMBOLS):
        self.symbols = symbols

    def render(self, expression):
        stack = []

        def pop():
            if not stack:
                raise RPNError('Less than 1 element(s) on stack')
            return stack.pop()

        for token in split_rpn(expression):
            if self.symbols.is_operator(token):
                b, a = pop(), pop()
                stack.append('({} {} {})'.format(a, token, b))
            elif self.symbols.is_unary_function(token):
                stack.append('{}({})'.format(token, pop()))
            elif self.symbols.is_binary_function(token):
                b, a = pop(), pop()
                stack.append('{}({}, {})'.format(token, a, b))
            else:
                stack.append(token)
        return pop()


def rpn_to_infix(expression, symbols=DEFAULT_SYMBOLS):
    '''
    Return the parenthesised infix form of a space separated RPN expression.
    '''
    return Renderer(symbols).render(expression)
