'''
RPN machine tests
'''

from concurrent.futures import ThreadPoolExecutor
import math

from librpn.machine import LIST_MARKER, Machine, evaluate_rpn
from librpn.util import RPNError

from pytest import approx, mark, raises


@mark.parametrize('rpn, expected', [
    ('1 2 +', 3.0),
    ('5 3 -', 2.0),
    ('4 5 *', 20.0),
    ('10 2 /', 5.0),
    ('7 3 %', 1.0),
    ('1 2 + 3 *', 9.0),
    ('1 2 + 3 4 + *', 21.0),
    ('2 3 2 ^ ^', 512.0),
])
def test_arithmetic(rpn, expected):
    assert evaluate_rpn(rpn) == expected


@mark.parametrize('rpn, expected', [
    ('16 sqrt', 4.0),
    ('-5 abs', 5.0),
    ('0 cos', 1.0),
    ('0 sin', 0.0),
    ('1 exp', approx(math.e)),
    ('1 exp log', approx(1.0)),
    ('1 exp ln', approx(1.0)),
    ('1000 log10', approx(3.0)),
    ('2.5 floor', 2.0),
    ('2.5 ceil', 3.0),
])
def test_unary_functions(rpn, expected):
    assert evaluate_rpn(rpn) == expected


@mark.parametrize('rpn, expected', [
    ('2 10 pow', 1024.0),
    ('3 7 max', 7.0),
    ('10 5 min', 5.0),
    ('17 5 mod', 2.0),
    ('1 1 atan2', approx(math.pi / 4)),
])
def test_binary_functions(rpn, expected):
    assert evaluate_rpn(rpn) == expected


def test_constants():
    assert evaluate_rpn('pi') == approx(math.pi, abs=1e-10)
    assert evaluate_rpn('e') == approx(math.e, abs=1e-10)
    assert evaluate_rpn('π') == approx(3.14159265, abs=1e-8)
    assert evaluate_rpn('τ') == approx(2 * math.pi, abs=1e-10)


def test_unicode_operators():
    assert evaluate_rpn('3 4 ×') == 12.0
    assert evaluate_rpn('8 2 ÷') == 4.0
    assert evaluate_rpn('3 4 ·') == 12.0
    assert evaluate_rpn('16 √') == 4.0


def test_negative_numbers():
    assert evaluate_rpn('-5 3 +') == -2.0
    assert evaluate_rpn('-3 -2 *') == 6.0
    assert evaluate_rpn('-9 abs') == 9.0


@mark.parametrize('rpn, expected', [
    ('{ 1 2 3 4 5 } sum', 15.0),
    ('{ 10 20 30 } sum', 60.0),
    ('{ 1 2 3 } ΣLIST', 6.0),
    ('{ 1 2 3 4 5 } product', 120.0),
    ('{ 2 3 4 } ΠLIST', 24.0),
    ('{ 2 4 6 8 10 } mean', 6.0),
    ('{ 1 3 5 } median', 3.0),
    ('{ 5 1 3 } median', 3.0),
    ('{ 1 2 3 4 } median', 2.5),
    ('{ 3 1 4 1 5 9 2 6 } median', 3.5),
    ('{ 2 4 6 8 } var', 5.0),
    ('{ 2 4 6 8 } svar', approx(20.0 / 3.0)),
    ('{ 2 4 6 8 } stddev', approx(math.sqrt(5.0))),
    ('{ 2 4 6 8 } sstddev', approx(math.sqrt(20.0 / 3.0))),
    ('{ 3 1 4 1 5 9 2 6 } lmax', 9.0),
    ('{ 3 1 4 1 5 9 2 6 } lmin', 1.0),
    ('{ 3 1 4 1 5 9 2 6 } range', 8.0),
    ('{ 10 20 30 } range', 20.0),
    ('{ 1 2 3 4 5 } count', 5.0),
    ('{ 1 2 3 4 5 6 7 8 9 10 } count', 10.0),
])
def test_list_functions(rpn, expected):
    assert evaluate_rpn(rpn) == expected


def test_empty_lists():
    assert evaluate_rpn('{ } sum') == 0.0
    assert evaluate_rpn('{ } product') == 1.0
    assert evaluate_rpn('{ } svar') == 0.0
    assert evaluate_rpn('{ } count') == 0.0


def test_list_functions_combined():
    assert evaluate_rpn('{ 2 4 6 8 } mean { 2 4 6 8 } stddev +') == \
        approx(5.0 + math.sqrt(5.0), abs=1e-10)


def test_computed_list_elements():
    assert evaluate_rpn('{ 1 2 + 2 2 * } sum') == 7.0


def test_nested_lists():
    assert evaluate_rpn('{ 1 { 2 3 } sum 4 } count') == 3.0


def test_list_below_operands():
    assert evaluate_rpn('10 { 1 2 3 } sum +') == 16.0


def test_nan_is_not_a_list_marker():
    assert evaluate_rpn('{ 0 0 / 1 } count') == 2.0
    assert math.isnan(evaluate_rpn('0 0 /'))


def test_list_function_without_marker_takes_stack():
    assert evaluate_rpn('1 2 3 sum') == 6.0


def test_list_end_is_ignored():
    assert evaluate_rpn('{ 1 2 sum') == 3.0
    assert evaluate_rpn('1 }') == 1.0


def test_domain_errors_propagate():
    assert math.isnan(evaluate_rpn('-1 log'))
    assert evaluate_rpn('1 0 /') == math.inf
    assert math.isnan(evaluate_rpn('-1 sqrt 1 +'))


@mark.parametrize('rpn, expected', [
    ('5.', 5.0),
    ('.5', 0.5),
    ('1.2.3', 1.2),
    ('+2', 2.0),
    ('1e3', 1000.0),
    ('12abc', 12.0),
    ('0x10', 16.0),
    ('-0x1.8p1', -3.0),
    ('0X.8', 0.5),
    ('0xg', 0.0),
])
def test_literals_parse_like_strtod(rpn, expected):
    assert evaluate_rpn(rpn) == expected


def test_leftovers_ignored():
    assert evaluate_rpn('1 2') == 2.0


def test_whitespace():
    assert evaluate_rpn('  1\t2\n+  ') == 3.0
    assert evaluate_rpn('3 4 ×'.encode()) == 12.0


def test_underflow():
    with raises(RPNError, match='Less than 2'):
        evaluate_rpn('1 +')
    with raises(RPNError, match='Less than 1'):
        evaluate_rpn('sqrt')


def test_empty():
    with raises(RPNError, match='Empty stack'):
        evaluate_rpn('')


def test_garbage():
    with raises(RPNError, match='Cannot convert foo'):
        evaluate_rpn('foo')
    with raises(RPNError, match='Cannot convert .'):
        evaluate_rpn('.')


def test_marker_is_not_a_number():
    with raises(RPNError, match='List marker'):
        evaluate_rpn('{ 1 +')
    with raises(RPNError, match='List marker'):
        evaluate_rpn('{')


def test_machine_reusable(machine):
    assert machine.evaluate('1 2 3') == 3.0
    assert machine.evaluate('4 5 +') == 9.0
    assert list(machine.stack) == []


def test_evaluate_leaves_fed_stack_alone(machine):
    machine.feed('7')
    assert machine.evaluate('1 2 +') == 3.0
    assert list(machine.stack) == [7.0]


def test_evaluate_shared_across_threads(machine):
    expressions = ['{ ' + ' '.join(map(str, range(n))) + ' } sum'
                   for n in range(1, 200)]
    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(machine.evaluate, expressions))
    assert results == [float(n * (n - 1) // 2) for n in range(1, 200)]


def test_feed(machine):
    for token in ['{', '1', '2', '}']:
        machine.feed(token)
    assert list(machine.stack) == [LIST_MARKER, 1.0, 2.0]
    machine.feed('sum')
    assert list(machine.stack) == [3.0]


def test_custom_symbols():
    from librpn.symbols import SymbolTable
    machine = Machine(SymbolTable(constants={'answer': 42.0}))
    assert machine.evaluate('answer 2 /') == 21.0
    with raises(RPNError):
        machine.evaluate('pi')
