'''
Operator, function and constant tables.

Everything the lexer, converter, machine and renderer know about symbols
comes from a SymbolTable. The tables are read-only once built.

Arithmetic follows C/IEEE-754 rather than Python: domain errors and
overflow produce NaN or infinity instead of raising.
'''

from collections import namedtuple
from types import MappingProxyType

import math


OperatorSpec = namedtuple('OperatorSpec',
                          ['precedence', 'right_associative', 'apply'])
UnaryFunctionSpec = namedtuple('UnaryFunctionSpec', ['apply'])
BinaryFunctionSpec = namedtuple('BinaryFunctionSpec', ['apply'])
ListFunctionSpec = namedtuple('ListFunctionSpec', ['reduce'])


def _divide(a, b):
    try:
        return a / b
    except ZeroDivisionError:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)


def _fmod(a, b):
    try:
        return math.fmod(a, b)
    except ValueError:
        # fmod(x, 0) and fmod(inf, y)
        return math.nan


def _is_odd_integer(n):
    return math.isfinite(n) and n == math.floor(n) and n % 2 == 1


def _power(a, b):
    try:
        return math.pow(a, b)
    except OverflowError:
        if a < 0 and _is_odd_integer(b):
            return -math.inf
        return math.inf
    except ValueError:
        if a == 0 and b < 0:
            if _is_odd_integer(b):
                return math.copysign(math.inf, a)
            return math.inf
        # Negative base, non-integral exponent
        return math.nan


def _domain(f, *, zero=math.nan, overflow=math.inf):
    '''
    Wrap a unary math function so its exceptions become IEEE results.

    :param zero: Result when the argument is zero and f refused it (log).
    :param overflow: Result when f overflows.
    '''
    def wrapped(a):
        try:
            return f(a)
        except OverflowError:
            return overflow
        except ValueError:
            if a == 0:
                return zero
            return math.nan
    wrapped.__name__ = f.__name__
    wrapped.__doc__ = f.__doc__
    return wrapped


def _rounding(f):
    '''
    floor/ceil that stay floats and pass infinities and NaN through.
    '''
    def wrapped(a):
        if not math.isfinite(a):
            return a
        return float(f(a))
    wrapped.__name__ = f.__name__
    wrapped.__doc__ = f.__doc__
    return wrapped


def _sum(values):
    total = 0.0
    for value in values:
        total += value
    return total


def _product(values):
    total = 1.0
    for value in values:
        total *= value
    return total


def _mean(values):
    if not values:
        return 0.0
    return _sum(values) / len(values)


def _squared_deviations(values):
    mean = _mean(values)
    return _sum([(value - mean) * (value - mean) for value in values])


def _variance(values):
    if not values:
        return 0.0
    return _squared_deviations(values) / len(values)


def _sample_variance(values):
    if len(values) < 2:
        return 0.0
    return _squared_deviations(values) / (len(values) - 1)


def _stddev(values):
    return math.sqrt(_variance(values))


def _sample_stddev(values):
    return math.sqrt(_sample_variance(values))


def _median(values):
    if not values:
        return 0.0
    ordered = sorted(values)
    middle = len(ordered) // 2
    if len(ordered) % 2 == 0:
        return (ordered[middle - 1] + ordered[middle]) / 2.0
    return ordered[middle]


def _lmax(values):
    if not values:
        return 0.0
    return max(values)


def _lmin(values):
    if not values:
        return 0.0
    return min(values)


def _range(values):
    if not values:
        return 0.0
    return max(values) - min(values)


def _count(values):
    return float(len(values))


_multiply = OperatorSpec(2, False, lambda a, b: a * b)
_quotient = OperatorSpec(2, False, _divide)

OPERATORS = {
    '+': OperatorSpec(1, False, lambda a, b: a + b),
    '-': OperatorSpec(1, False, lambda a, b: a - b),
    '*': _multiply,
    '/': _quotient,
    '%': OperatorSpec(2, False, _fmod),
    '^': OperatorSpec(3, True, _power),
    '\N{MULTIPLICATION SIGN}': _multiply,
    '\N{DIVISION SIGN}': _quotient,
    '\N{MIDDLE DOT}': _multiply,
}

_sqrt = UnaryFunctionSpec(_domain(math.sqrt))
_ln = UnaryFunctionSpec(_domain(math.log, zero=-math.inf))

UNARY_FUNCTIONS = {
    'sqrt': _sqrt,
    'sin': UnaryFunctionSpec(_domain(math.sin)),
    'cos': UnaryFunctionSpec(_domain(math.cos)),
    'tan': UnaryFunctionSpec(_domain(math.tan)),
    # Natural logarithm, like C log()
    'log': _ln,
    'ln': _ln,
    'log10': UnaryFunctionSpec(_domain(math.log10, zero=-math.inf)),
    'abs': UnaryFunctionSpec(math.fabs),
    'exp': UnaryFunctionSpec(_domain(math.exp)),
    'floor': UnaryFunctionSpec(_rounding(math.floor)),
    'ceil': UnaryFunctionSpec(_rounding(math.ceil)),
    '\N{SQUARE ROOT}': _sqrt,
}

BINARY_FUNCTIONS = {
    'pow': BinaryFunctionSpec(_power),
    'max': BinaryFunctionSpec(max),
    'min': BinaryFunctionSpec(min),
    'atan2': BinaryFunctionSpec(math.atan2),
    'mod': BinaryFunctionSpec(_fmod),
}

LIST_FUNCTIONS = {
    'sum': ListFunctionSpec(_sum),
    'product': ListFunctionSpec(_product),
    'mean': ListFunctionSpec(_mean),
    'var': ListFunctionSpec(_variance),
    'svar': ListFunctionSpec(_sample_variance),
    'stddev': ListFunctionSpec(_stddev),
    'sstddev': ListFunctionSpec(_sample_stddev),
    'median': ListFunctionSpec(_median),
    'lmax': ListFunctionSpec(_lmax),
    'lmin': ListFunctionSpec(_lmin),
    'range': ListFunctionSpec(_range),
    'count': ListFunctionSpec(_count),
    # HP calculator spellings
    '\N{GREEK CAPITAL LETTER SIGMA}LIST': ListFunctionSpec(_sum),
    '\N{GREEK CAPITAL LETTER PI}LIST': ListFunctionSpec(_product),
}

CONSTANTS = {
    'pi': math.pi,
    'PI': math.pi,
    '\N{GREEK SMALL LETTER PI}': math.pi,
    'e': math.e,
    'E': math.e,
    '\N{GREEK SMALL LETTER TAU}': math.tau,
}


class SymbolTable:
    '''
    Immutable registry of operators, functions and constants.

    Lookups are exact and case-sensitive.
    '''

    def __init__(self,
                 operators=None,
                 unary_functions=None,
                 binary_functions=None,
                 list_functions=None,
                 constants=None):
        '''
        Build a table, copying the given mappings.

        Any table left out is the default one.
        '''
        def freeze(table, default):
            return MappingProxyType(dict(default if table is None else table))
        self.operators = freeze(operators, OPERATORS)
        self.unary_functions = freeze(unary_functions, UNARY_FUNCTIONS)
        self.binary_functions = freeze(binary_functions, BINARY_FUNCTIONS)
        self.list_functions = freeze(list_functions, LIST_FUNCTIONS)
        self.constants = freeze(constants, CONSTANTS)

    def is_operator(self, symbol):
        return symbol in self.operators

    def precedence_of(self, symbol):
        '''
        Return the operator's precedence, 0 if symbol isn't an operator.
        '''
        spec = self.operators.get(symbol)
        return spec.precedence if spec is not None else 0

    def is_right_associative(self, symbol):
        spec = self.operators.get(symbol)
        return spec is not None and spec.right_associative

    def is_unary_function(self, symbol):
        return symbol in self.unary_functions

    def is_binary_function(self, symbol):
        return symbol in self.binary_functions

    def is_list_function(self, symbol):
        return symbol in self.list_functions

    def is_constant(self, symbol):
        return symbol in self.constants

    def value_of(self, symbol):
        '''
        Return the constant's value.

        Raises KeyError for unknown constants.
        '''
        return self.constants[symbol]

    def names(self):
        '''
        Return every known symbol, sorted, per table.
        '''
        return {
            'operators': sorted(self.operators),
            'unary functions': sorted(self.unary_functions),
            'binary functions': sorted(self.binary_functions),
            'list functions': sorted(self.list_functions),
            'constants': sorted(self.constants),
        }


DEFAULT_SYMBOLS = SymbolTable()
