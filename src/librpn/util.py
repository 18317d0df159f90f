from functools import wraps

import regex


# C isspace() in the "C" locale; RPN is never split on other whitespace.
_SEPARATOR = regex.compile(r'[\x09-\x0d\x20]+')
# One code point's worth of UTF-8, by lead byte: 110xxxxx takes two bytes,
# 1110xxxx three, 11110xxx four. Anything else, or a sequence cut short by
# the end of input, is one byte.
_UTF8_UNIT = regex.compile(rb'''
                           [\xc0-\xdf].
                           |
                           [\xe0-\xef]..
                           |
                           [\xf0-\xf7]...
                           |
                           .
                           ''', flags=regex.VERBOSE | regex.DOTALL)


class RPNError(Exception):
    pass


def wrap_user_errors(fmt):
    '''
    Decorator that converts stray exceptions into RPNErrors.

    Passes through RPNErrors.
    '''
    def decorator(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            try:
                return f(*args, **kwargs)
            except RPNError:
                raise
            except Exception as e:
                raise RPNError(fmt.format(*args, **kwargs), e) from e
        return wrapper
    return decorator


def _decode_unit(unit):
    try:
        return unit.decode('utf-8')
    except UnicodeDecodeError:
        return '\N{REPLACEMENT CHARACTER}'


def to_text(expression):
    '''
    Return expression as str, decoding UTF-8 bytes.

    Bytes are cut into code points by the length their lead byte announces,
    whatever follows it; an invalid lead byte is a unit of its own. Units
    that don't decode become a single U+FFFD, which no table knows, so they
    are skipped like any other unknown code point.
    '''
    if isinstance(expression, (bytes, bytearray)):
        return ''.join(_decode_unit(unit)
                       for unit
                       in _UTF8_UNIT.findall(bytes(expression)))
    return expression


def split_rpn(expression):
    '''
    Split an RPN string into its space separated tokens.
    '''
    return [token
            for token
            in _SEPARATOR.split(to_text(expression))
            if token]
