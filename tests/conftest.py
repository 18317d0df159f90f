from pytest import Item, fixture

from librpn import Converter, Lexer, Machine, Renderer


def pytest_assertion_pass(item: Item,
                          lineno: int,
                          orig: str,
                          expl: str) -> None:
    '''
    Log every assertion, in case we later need to audit a run.

    Needs enable_assertion_pass_hook; use with pytest -rP.
    '''
    print('given', item.name + ':' + str(lineno), str(orig))
    print('actual', item.name + ':' + str(lineno),
          '\n'.join(str(expl).splitlines()[:-2]))


@fixture
def lexer() -> Lexer:
    return Lexer()


@fixture
def converter() -> Converter:
    return Converter()


@fixture
def machine() -> Machine:
    return Machine()


@fixture
def renderer() -> Renderer:
    return Renderer()
