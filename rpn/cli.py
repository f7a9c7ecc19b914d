import logging
import os
import sys

from .postfix_solver import Expression, SolverError, sort_expressions
from .table import print_results_table

logger = logging.getLogger(__name__)

USAGE = "usage: rpn-solve <input file> <output file>"

LOG_LEVEL_ENV = "RPN_LOG_LEVEL"


def configure_logging():
    level = os.environ.get(LOG_LEVEL_ENV, "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def build_expression_list(path):
    """
    Reads every line of the input file into an Expression. Blank lines are skipped
    """
    expressions = []
    with open(path, "r", encoding="utf-8") as file:
        for line_number, line in enumerate(file, start=1):
            expression = Expression.from_line(line, line_number)
            if expression is None:
                continue
            logger.debug("line %d: %r", line_number, expression.canonical)
            expressions.append(expression)
    return expressions


def solve_list(expressions):
    for expression in expressions:
        expression.solve()
    return expressions


def write_results(path, expressions):
    with open(path, "w", encoding="utf-8") as file:
        for expression in expressions:
            file.write(expression.format() + "\n")
    logger.info("wrote %d expressions to %s", len(expressions), path)


def run(input_path, output_path):
    # Everything is solved and sorted before the output file is touched
    expressions = sort_expressions(solve_list(build_expression_list(input_path)))
    write_results(output_path, expressions)
    return expressions


def main(argv=None):
    """
    Always returns 0, errors are reported on stdout
    """
    argv = sys.argv[1:] if argv is None else argv
    configure_logging()

    if len(argv) != 2:
        print(USAGE)
        return 0

    input_path, output_path = argv
    logger.debug("input file is: %s", input_path)
    logger.debug("output file is: %s", output_path)

    try:
        expressions = run(input_path, output_path)
    except SolverError as e:
        print(f"Malformed input in {input_path}: {e}")
        return 0
    except (OSError, UnicodeDecodeError) as e:
        print(f"File error: {e}")
        return 0

    print_results_table(expressions)
    return 0
