import pandas as pd

COLUMNS = ["postfix", "infix", "value"]


def generate_results_table(expressions):
    """
    Returns pandas dataframe
    """
    rows = [[e.canonical, e.infix, e.value] for e in expressions]

    return pd.DataFrame(rows, columns=COLUMNS)


def print_results_table(expressions):
    s = generate_results_table(expressions).to_string(index=False)

    print(s)
