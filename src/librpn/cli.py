from os import isatty
import sys
from argparse import ArgumentParser, REMAINDER, OPTIONAL
import logging

from prompt_toolkit import PromptSession
from prompt_toolkit.history import InMemoryHistory

from .converter import Converter
from .lexer import Lexer
from .machine import Machine
from .renderer import Renderer
from .symbols import DEFAULT_SYMBOLS
from .util import RPNError


logger = logging.getLogger(__name__)


# Sample expressions for --demo.
DEMO_INFIX = [
    '(1 + 2) * (3 + 4)',
    'sqrt(16) + 2',
    # Right associative: 2^(3^2)
    '2 ^ 3 ^ 2',
    'sqrt(abs(-9)) * cos(0) + log(exp(1))',
    '3 \N{MULTIPLICATION SIGN} 4 \N{DIVISION SIGN} 2',
    '\N{SQUARE ROOT}(16) + \N{GREEK SMALL LETTER PI}',
    '2 \N{MULTIPLICATION SIGN} \N{GREEK SMALL LETTER PI} '
    '\N{MULTIPLICATION SIGN} 3',
    'pow(2, 10)',
    'max(3, 7) + min(10, 5)',
    'atan2(1, 1)',
    'mod(17, 5)',
    'pow(sqrt(16), 3)',
    'max(pow(2, 3), min(10, 5))',
    '{ 10, 20, 30, 40, 50 } mean',
]
DEMO_RPN = [
    '1 2 + 3 4 + *',
    '16 sqrt 2 +',
    '4 3 2 ^ ^',
    '3 4 \N{MULTIPLICATION SIGN} 2 \N{DIVISION SIGN}',
    '{ 1 2 3 4 5 } sum',
    '{ 1 2 3 4 5 } product',
    '{ 2 4 6 8 10 } mean',
    '{ 3 1 4 1 5 9 2 6 } median',
    '{ 2 4 6 8 } var',
    '{ 2 4 6 8 } sstddev',
    '{ 3 1 4 1 5 9 2 6 } range',
    '{ 1 2 3 4 5 6 7 8 9 10 } count',
    '{ 2 4 6 8 } mean { 2 4 6 8 } stddev +',
]


class InteractiveInput:
    def __init__(self, prompt):
        self.prompt = prompt

    def __iter__(self):
        try:
            session = PromptSession(message=self.prompt,
                                    enable_suspend=True,
                                    history=InMemoryHistory(),
                                    prompt_continuation=' ' * len(self.prompt),
                                    erase_when_done=False)
            while True:
                yield session.prompt()
        except EOFError:
            return


class CLI:
    '''
    Command line interface to the converter and machine.
    '''

    DEFAULT_PROMPT = '> '

    def _lines(self):
        '''
        Yield non-blank input lines, stripped.
        '''
        for line in self.args.expressions:
            line = line.strip()
            if line:
                yield line

    def _each(self, f):
        '''
        Print f(line) for every line, reporting RPNErrors on stderr.

        Carries on with the next line after an error.
        '''
        for line in self._lines():
            try:
                print(f(line))
            except RPNError as e:
                self.failed = True
                print(e.args[0], file=sys.stderr)
                if self.args.verbose:
                    logger.exception('Failed on %r', line)

    def executor(self):
        '''
        Convert infix lines to RPN and print their value.
        '''
        converter = Converter(self.symbols)
        machine = Machine(self.symbols)
        self._each(lambda line: machine.evaluate(converter.convert(line)))

    def rpn_executor(self):
        '''
        Print the value of RPN lines.
        '''
        machine = Machine(self.symbols)
        self._each(machine.evaluate)

    def to_rpn(self):
        '''
        Print infix lines as RPN.
        '''
        self._each(Converter(self.symbols).convert)

    def to_infix(self):
        '''
        Print RPN lines as parenthesised infix.
        '''
        self._each(Renderer(self.symbols).render)

    def dumper(self):
        '''
        Dump all tokens of infix lines.
        '''
        lexer = Lexer(self.symbols)
        print('<kind>\t<repr(text)>')
        for line in self._lines():
            for token in lexer.lex(line):
                print(token.kind.value, repr(token.text), sep='\t')

    def raw_grammar(self):
        '''
        Print current internally defined lexer grammar.
        '''
        print(Lexer.GRAMMAR)

    def list_symbols(self):
        '''
        Print all known operators, functions and constants.
        '''
        for table, names in self.symbols.names().items():
            print(table + ':', *names)

    def demo(self):
        '''
        Print sample conversions and evaluations.
        '''
        converter = Converter(self.symbols)
        machine = Machine(self.symbols)
        renderer = Renderer(self.symbols)
        for infix in DEMO_INFIX:
            rpn = converter.convert(infix)
            print('Infix:', infix)
            print('RPN:', rpn)
            print('Result:', machine.evaluate(rpn))
            print()
        for rpn in DEMO_RPN:
            print('RPN:', rpn)
            print('Infix:', renderer.render(rpn))
            print('Result:', machine.evaluate(rpn))
            print()

    def _prompting_input(self):
        '''
        Return prompting stdin.__iter__ decorator...

        If either:
        - prompt explicitly specified.
        - both stdin/out are a tty
        '''
        if self.args.prompt or \
           isatty(sys.stdin.fileno()) and isatty(sys.stdout.fileno()):
            return InteractiveInput(prompt=self.args.prompt or
                                    self.DEFAULT_PROMPT)
        else:
            return sys.stdin

    def __init__(self, symbols=DEFAULT_SYMBOLS):
        '''
        Create ready to run CLI.

        Does not run or parse command line arguments.
        '''
        self.symbols = symbols
        self.failed = False
        self.argument_parser = ArgumentParser(
            description='Infix and RPN calculator')
        self.argument_parser.add_argument('-v', '--verbose',
                                          action='store_true')
        int_nonint_groups = self.argument_parser.add_mutually_exclusive_group()
        int_nonint_groups.add_argument('-e', '--expression',
                                       nargs=REMAINDER,
                                       dest='expressions')
        int_nonint_groups.add_argument('-p', '--prompt',
                                       nargs=OPTIONAL,
                                       const=self.DEFAULT_PROMPT)
        main_groups = self.argument_parser.add_mutually_exclusive_group()
        for short_, long_, action in [('-r', '--rpn', self.rpn_executor),
                                      ('-t', '--to-rpn', self.to_rpn),
                                      ('-i', '--to-infix', self.to_infix),
                                      ('-D', '--dump', self.dumper),
                                      ('-G', '--raw-grammar',
                                       self.raw_grammar),
                                      ('-S', '--symbols', self.list_symbols),
                                      (None, '--demo', self.demo)]:
            flags = [flag for flag in (short_, long_) if flag]
            main_groups.add_argument(*flags,
                                     action='store_const',
                                     const=action,
                                     dest='action')
        self.argument_parser.set_defaults(action=self.executor,
                                          expressions=sys.stdin)

    def run(self, *, args=None):
        '''
        Run CLI, given these args, or previously passed CLI args.

        Return the exit status: 1 if any line failed.
        '''
        self.args = self.argument_parser.parse_args(args)
        logging.basicConfig(level=logging.DEBUG if self.args.verbose
                            else logging.WARNING)
        if self.args.expressions is sys.stdin:
            self.args.expressions = self._prompting_input()
        self.failed = False
        try:
            self.args.action()
        except KeyboardInterrupt:
            return 1
        return 1 if self.failed else 0
