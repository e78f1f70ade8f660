## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘


class EfectaError(Exception):
    kind = 'error'

    def __init__(self, message: str = "", *, efecta_token=None, efecta_meta=None):
        """Base class for all Efecta-raised errors."""
        super().__init__(message)
        self.efecta_token: str = efecta_token
        self.efecta_meta: dict = efecta_meta

class EfectaParseError(EfectaError):
    kind = 'structure'

    def __init__(self, message, *, filename=None, line=None, column=None, token=None, efecta_meta=None):
        super().__init__(message, efecta_token=token, efecta_meta=efecta_meta)
        self.filename = filename
        self.line = line
        self.column = column
        self.token = token

class EfectaStructureError(EfectaParseError):
    """Malformed block tree: directive arity or order, nesting depth, call markers."""
    pass


class EfectaNameError(EfectaError, NameError):
    kind = 'lookup'

class EfectaLookupError(EfectaError, LookupError):
    """Queue underflow, list index or map key out of range."""
    kind = 'lookup'


class EfectaTypeError(EfectaError, TypeError):
    kind = 'type'

class EfectaTypeMissing(EfectaTypeError):
    """Loading-time problems from Python-side operation signatures."""
    pass

class EfectaArityError(EfectaError, TypeError):
    kind = 'arity'

class EfectaValueError(EfectaError, ValueError):
    kind = 'value'
