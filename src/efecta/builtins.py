## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from . import operators
from . import combinators as C
from .loader import get_efecta_name
from .library import Library


def load_builtins_library():
    # Combinators
    combinators = {
        'RETURN': C.comb_return,
        'ARG': C.comb_arg,
        'SET': C.comb_set,
        'IF': C.comb_if,
        'RUN': C.comb_run,
        'PUSH': C.comb_push,
        'RECEIVE': C.comb_receive,
        'QUEUE-SIZE': C.comb_queue_size,
        'REF': C.comb_ref,
        'BIND': C.comb_bind,
        'INVOKE': C.comb_invoke,
        'NEW': C.comb_new,
        'DEFINE': C.comb_define,
        'FIELD': C.comb_field,
    }
    aliases = {
        '+': 'ADD', '-': 'SUB', '/': 'DIV', '%': 'MOD',
        '=': 'EQ', '!=': 'NE', '>': 'GT', '>=': 'GTE', '<': 'LT', '<=': 'LTE',
    }

    lib = Library(procedures=[], aliases=aliases)

    # Functions (wrapped via Library helper)
    for k in dir(operators):
        if not k.startswith('op_'): continue
        lib.add_function(get_efecta_name(k), getattr(operators, k))
    for name, fn in combinators.items():
        lib.add_function(name, fn)

    lib.ensure_consistent()
    return lib
