from rpn.cli import *
from rpn.table import generate_results_table


def write_input(tmp_path, text):
    path = tmp_path / "input.txt"
    path.write_text(text, encoding="utf-8")
    return path


def test_usage(capsys):
    assert main([]) == 0
    assert main(["only-one"]) == 0
    assert main(["a", "b", "c"]) == 0

    out = capsys.readouterr().out
    assert out.count(USAGE) == 3


def test_solves_and_sorts(tmp_path, capsys):
    input_path = write_input(tmp_path, "4 5 +\n\n   \n1 2-\n5 1 2 + 4 * + 3 -\n6 3 /\n")
    output_path = tmp_path / "output.txt"

    assert main([str(input_path), str(output_path)]) == 0

    assert output_path.read_text(encoding="utf-8").splitlines() == [
        "1 - 2 = -1.0",
        "6 / 3 = 2.0",
        "4 + 5 = 9.0",
        "( 5 + ( ( 1 + 2 ) * 4 ) ) - 3 = 14.0",
    ]
    assert "( 1 + 2 ) * 4" in capsys.readouterr().out


def test_output_is_truncated(tmp_path):
    input_path = write_input(tmp_path, "1 1 +\n")
    output_path = tmp_path / "output.txt"
    output_path.write_text("stale\nstale\nstale\n", encoding="utf-8")

    main([str(input_path), str(output_path)])

    assert output_path.read_text(encoding="utf-8") == "1 + 1 = 2.0\n"


def test_invalid_character_writes_nothing(tmp_path, capsys):
    input_path = write_input(tmp_path, "1 2 +\n3 $ 4 +\n")
    output_path = tmp_path / "output.txt"

    assert main([str(input_path), str(output_path)]) == 0

    assert not output_path.exists()
    out = capsys.readouterr().out
    assert "Malformed input" in out
    assert "line 2" in out


def test_structural_error_writes_nothing(tmp_path, capsys):
    input_path = write_input(tmp_path, "1 2 +\n3 4\n")
    output_path = tmp_path / "output.txt"

    assert main([str(input_path), str(output_path)]) == 0

    assert not output_path.exists()
    assert "operands left" in capsys.readouterr().out


def test_missing_input_file(tmp_path, capsys):
    output_path = tmp_path / "output.txt"

    assert main([str(tmp_path / "missing.txt"), str(output_path)]) == 0

    assert not output_path.exists()
    assert "File error" in capsys.readouterr().out


def test_uncreatable_output_file(tmp_path, capsys):
    input_path = write_input(tmp_path, "1 1 +\n")

    assert main([str(input_path), str(tmp_path / "no-dir" / "out.txt")]) == 0

    assert "File error" in capsys.readouterr().out


def test_build_expression_list_skips_blank_lines(tmp_path):
    input_path = write_input(tmp_path, "\n3 4+\n\n\n2 2 *\n")

    expressions = build_expression_list(input_path)

    assert [e.canonical for e in expressions] == ["3 4 +", "2 2 *"]
    assert [e.line_number for e in expressions] == [2, 5]


def test_results_table(tmp_path):
    input_path = write_input(tmp_path, "3 4 +\n6 3 /\n")

    table = generate_results_table(solve_list(build_expression_list(input_path)))

    assert list(table.columns) == ["postfix", "infix", "value"]
    assert table["infix"].tolist() == ["3 + 4", "6 / 3"]
    assert table["value"].tolist() == [7.0, 2.0]


def test_undecodable_input_file(tmp_path, capsys):
    input_path = tmp_path / "input.txt"
    input_path.write_bytes(b"1 2 +\n\xff\xfe 3 +\n")
    output_path = tmp_path / "output.txt"

    assert main([str(input_path), str(output_path)]) == 0

    assert not output_path.exists()
    assert "File error" in capsys.readouterr().out


def test_structural_error_names_the_line(tmp_path, capsys):
    input_path = write_input(tmp_path, "1 2 +\n\n3 +\n")
    output_path = tmp_path / "output.txt"

    assert main([str(input_path), str(output_path)]) == 0

    assert "line 3: insufficient operands" in capsys.readouterr().out
