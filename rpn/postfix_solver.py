from enum import Enum
import logging
import math
import re

from .frozen import FrozenList

logger = logging.getLogger(__name__)

###########
# Library #
###########

# Postfix expressions are read character by character into a canonical token string,
# then evaluated with two parallel stacks: one holding numbers and one holding the
# infix trees built so far. A well formed line leaves exactly one entry on each.

# Utils


def str_match(string: str, m: str, l=None):
    l = l or (lambda x: x)
    if len(string) == 0:
        return None
    if string.startswith(m):
        return l(string[: len(m)]), len(m)
    return None


def re_match(string, r, l=None):
    l = l or (lambda x: x.group(0))
    m = re.match(r, string)
    if m:
        return l(m), m.end()
    return None


class IToken:
    m_re = None
    m_str = None

    re_l = None
    str_l = None

    def __init__(self, value, start, end):
        self.value = value
        self.start = start
        self.end = end

    @classmethod
    def match(cls, string):
        """
        A match function returns
        (value, length)
        """
        if cls.m_re:
            return re_match(string, cls.m_re, cls.re_l)
        elif cls.m_str:
            return str_match(string, cls.m_str, cls.str_l)
        raise NotImplementedError()

    def __repr__(self):
        return f"<{self.__class__.__name__} {self.value.__repr__()}>"


class WhitespaceToken(IToken):
    pass


class ConstantToken(IToken):
    pass


class BinaryOperatorToken(IToken):
    """
    Operands are given in their written order, lhs first
    """

    arity = 2

    @property
    def symbol(self):
        return self.m_str

    def exec(self, lhs, rhs):
        raise NotImplementedError()


##########
# Errors #
##########


class SolverError(Exception):
    pass


class ParseError(SolverError):
    def __init__(self, err, start, end, line_number=None):
        super().__init__(err)
        self.err = err
        self.start = start
        self.end = end
        self.line_number = line_number

    def __str__(self):
        where = f"@[{self.start}, {self.end}]"
        if self.line_number is not None:
            where = f"line {self.line_number} {where}"
        return f"{where}: {self.err}"


class InvalidCharacter(ParseError):
    pass


class InvalidNumber(ParseError):
    pass


class StructuralError(SolverError):
    def __init__(self, err, expression, line_number=None):
        super().__init__(err)
        self.err = err
        self.expression = expression
        self.line_number = line_number

    def __str__(self):
        message = f"{self.err}: '{self.expression}'"
        if self.line_number is not None:
            message = f"line {self.line_number}: {message}"
        return message


#############
# Tokenizer #
#############


class Tokenizer:
    def __init__(self, tokens):
        for token in tokens:
            if not issubclass(token, IToken):
                raise Exception(token, "is not a token")
        self.tokens = tokens

    def tokenize(self, string, line_number=None):
        pointer = 0
        while string:
            for token in self.tokens:
                if m := token.match(string):
                    v, l = m
                    if not issubclass(token, WhitespaceToken):
                        yield token(v, pointer, pointer + l)
                    pointer += l
                    string = string[l:]
                    break
            else:
                raise InvalidCharacter(
                    f"invalid character {string[0]!r}",
                    pointer,
                    pointer + 1,
                    line_number,
                )

    def clean(self, line, line_number=None):
        """
        Canonical form of a raw line: every number and operator separated by a single space.
        Blank lines clean to an empty string
        """
        return " ".join(t.value for t in self.tokenize(line, line_number))


########
# Tree #
########


class IExpression:
    def render(self, top_level=False):
        raise NotImplementedError()

    def __str__(self):
        return self.render(top_level=True)


class Literal(IExpression):
    def __init__(self, text):
        self.text = text

    def render(self, top_level=False):
        return self.text

    def __repr__(self):
        return f"Literal({self.text!r})"


class BinaryOperation(IExpression):
    def __init__(self, op, lhs, rhs):
        self.op = op
        self.lhs = lhs
        self.rhs = rhs

    def render(self, top_level=False):
        inner = f"{self.lhs.render()} {self.op.symbol} {self.rhs.render()}"
        # Only the outermost operation drops its parentheses
        return inner if top_level else f"( {inner} )"

    def __repr__(self):
        return f"{self.op.__repr__()}({self.lhs.__repr__()}, {self.rhs.__repr__()})"


#############
# Evaluator #
#############


class Evaluation:
    def __init__(self, value, tree):
        self.value = value
        self.tree = tree

    @property
    def infix(self):
        return self.tree.render(top_level=True)

    def __repr__(self):
        return f"Evaluation({self.infix!r} = {self.value!r})"


def _pop_operands(stack, op, expression, line_number=None):
    if len(stack) < op.arity:
        raise StructuralError(
            f"insufficient operands for '{op.symbol}' at column {op.start}",
            expression,
            line_number,
        )
    rhs = stack.pop()
    lhs = stack.pop()
    return lhs, rhs


def evaluate(postfix, operators=None, line_number=None):
    """
    Evaluates a canonical postfix string (or a sequence of its tokens)

    Returns an Evaluation holding the numeric result and the infix tree
    """
    operators = operators or OPERATORS

    if not isinstance(postfix, str):
        postfix = " ".join(postfix)

    values = []
    fragments = []

    for m in re.finditer(r"\S+", postfix):
        text = m.group(0)
        op_cls = operators.get(text)

        if op_cls is None:
            # float() alone would also take inf, nan and exponents
            if not re.fullmatch(Number.m_re, text):
                raise InvalidNumber(
                    f"{text!r} is not a number", m.start(), m.end(), line_number
                )
            try:
                value = float(text)
            except ValueError:
                raise InvalidNumber(
                    f"{text!r} is not a number", m.start(), m.end(), line_number
                ) from None
            values.append(value)
            fragments.append(Literal(text))
            continue

        op = op_cls(text, m.start(), m.end())
        lhs, rhs = _pop_operands(values, op, postfix, line_number)
        lhs_fragment, rhs_fragment = _pop_operands(fragments, op, postfix, line_number)

        values.append(op.exec(lhs, rhs))
        fragments.append(BinaryOperation(op, lhs_fragment, rhs_fragment))

    if len(values) != 1 or len(fragments) != 1:
        if not values:
            raise StructuralError("empty expression", postfix, line_number)
        raise StructuralError(
            f"malformed expression: {len(values)} operands left on the stack",
            postfix,
            line_number,
        )

    result = Evaluation(values[0], fragments[0])
    logger.debug("evaluated %r -> %r", postfix, result)
    return result


class Expression:
    """
    One line of postfix input

    The token sequence is frozen at construction and evaluated at most once
    """

    def __init__(self, postfix, line_number=None):
        self.postfix = FrozenList(postfix.split())
        self.line_number = line_number
        self._evaluation = None

    @classmethod
    def from_line(cls, line, line_number=None, tokenizer=None):
        """
        Returns None for lines without any tokens
        """
        tokenizer = tokenizer or default_tokenizer
        canonical = tokenizer.clean(line, line_number)
        if not canonical:
            return None
        return cls(canonical, line_number)

    @property
    def canonical(self):
        return " ".join(self.postfix)

    def solve(self):
        if self._evaluation is None:
            self._evaluation = evaluate(self.postfix, line_number=self.line_number)
        return self._evaluation

    @property
    def value(self):
        return self.solve().value

    @property
    def infix(self):
        return self.solve().infix

    def format(self):
        return f"{self.infix} = {self.value!r}"

    def __repr__(self):
        return f"Expression({self.canonical!r})"


def solve(line):
    """
    Clean and evaluate a single raw line
    """
    return evaluate(default_tokenizer.clean(line))


############
# Ordering #
############


def _sort_key(expression):
    value = expression.value
    # nan compares false against everything, keep it at the end
    return (math.isnan(value), value)


def sort_expressions(expressions):
    return sorted(expressions, key=_sort_key)


# Built in tokens


class Number(ConstantToken):
    m_re = r"[0-9.]+"


class Whitespace(WhitespaceToken):
    m_re = r"\s+"


class Addition(BinaryOperatorToken):
    m_str = "+"

    def exec(self, lhs, rhs):
        return lhs + rhs


class Subtraction(BinaryOperatorToken):
    m_str = "-"

    def exec(self, lhs, rhs):
        return lhs - rhs


class Multiplication(BinaryOperatorToken):
    m_str = "*"

    def exec(self, lhs, rhs):
        return lhs * rhs


class Division(BinaryOperatorToken):
    m_str = "/"

    def exec(self, lhs, rhs):
        try:
            return lhs / rhs
        except ZeroDivisionError:
            # IEEE-754 semantics instead of Python's exception
            if lhs == 0 or math.isnan(lhs):
                return math.nan
            return math.copysign(math.inf, lhs) * math.copysign(1.0, rhs)


class ITokenCollection(Enum):
    @classmethod
    def list(cls):
        return list(map(lambda c: c.value, cls))


class BaseTokens(ITokenCollection):
    WHITESPACE = Whitespace


class ArithmeticTokens(ITokenCollection):
    ADDITION = Addition
    SUBTRACTION = Subtraction
    MULTIPLICATION = Multiplication
    DIVISION = Division


class NumericTokens(ITokenCollection):
    NUMBER = Number


class Tokenlib:
    arithmetic = ArithmeticTokens
    base = BaseTokens
    numeric = NumericTokens

    @staticmethod
    def load(*args):
        # Keeps the order given, the tokenizer tries tokens first to last
        return list(dict.fromkeys(t for arg in args for t in arg.list()))


OPERATORS = {op.m_str: op for op in Tokenlib.arithmetic.list()}

default_tokenizer = Tokenizer(
    Tokenlib.load(Tokenlib.base, Tokenlib.numeric, Tokenlib.arithmetic)
)
