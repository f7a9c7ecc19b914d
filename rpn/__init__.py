from .postfix_solver import (
    BinaryOperation,
    Evaluation,
    Expression,
    InvalidCharacter,
    InvalidNumber,
    Literal,
    ParseError,
    SolverError,
    StructuralError,
    default_tokenizer,
    evaluate,
    solve,
    sort_expressions,
)
