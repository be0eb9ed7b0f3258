class CellispError(Exception):
    """ Base class for all Cellisp errors"""
    pass

class CellispSyntaxError(CellispError):
    """ Raised when the reader or a special form meets malformed input"""

class CellispInvalidSymbol(CellispSyntaxError):
    """ Raised when a non-symbol is used where a name is required"""

class CellispUnboundSymbol(CellispError):
    """ Raised when a symbol is used before it is bound"""

class CellispArityError(CellispError):
    """ Raised when the number of arguments passed to a procedure is incorrect"""

class CellispTypeError(CellispError):
    """ Raised when the types of arguments passed to a primitive are incorrect"""

class CellispNotApplicable(CellispError):
    """ Raised when a value that is not a procedure is applied"""

class CellispDivisionByZero(CellispError):
    """ Raised when an integer is divided by zero"""

class CellispIntegerOverflow(CellispError):
    """ Raised when an arithmetic result does not fit in 64 signed bits"""

class CellispResourceExhausted(CellispError):
    """ Raised when the heap cannot grow or the native call stack runs out"""

class CellispHeapError(CellispError):
    """ Raised when a handle refers to a cell that has been reclaimed"""
