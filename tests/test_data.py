import pytest

from tsp_engine import DistanceMatrix, ProblemSourceUnavailable
from tsp_engine.data import (
    format_matrix,
    load_instances,
    load_matrix,
    load_problem,
    parse_matrix,
    save_matrix,
)

TSPLIB_TEXT = """NAME: tiny
TYPE: TSP
COMMENT: four cities
DIMENSION: 4
EDGE_WEIGHT_TYPE: EXPLICIT
EDGE_WEIGHT_FORMAT: FULL_MATRIX
EDGE_WEIGHT_SECTION
0 10 15 20
10 0 35 25
15 35 0 30
20 25 30 0
EOF
"""

TRUNCATED_TSPLIB_TEXT = """NAME: bad
TYPE: TSP
DIMENSION: 3
EDGE_WEIGHT_TYPE: EXPLICIT
EDGE_WEIGHT_FORMAT: FULL_MATRIX
EDGE_WEIGHT_SECTION
0 1
"""


def test_parse_matrix(scenario):
    text = "4\n0 10 15 20\n10 0 35 25\n15 35 0 30\n20 25 30 0\n"
    assert parse_matrix(text) == scenario


def test_parse_ignores_layout():
    assert parse_matrix("2 0 3\n4 0").rows == [[0, 3], [4, 0]]


@pytest.mark.parametrize("text", ["", "3 1 2 3", "2 0 x 1 0", "-1"])
def test_parse_rejects_malformed(text):
    with pytest.raises(ValueError):
        parse_matrix(text)


def test_parse_zero_size_is_empty():
    assert parse_matrix("0").empty


def test_save_and_load(tmp_path, scenario):
    path = tmp_path / "nested" / "tsp_4.txt"
    save_matrix(scenario, path)
    assert path.read_text() == format_matrix(scenario)
    assert load_matrix(path) == scenario
    assert load_problem(str(path)) == scenario


def test_missing_file_is_reported(tmp_path):
    with pytest.raises(ProblemSourceUnavailable):
        load_matrix(tmp_path / "missing.txt")
    with pytest.raises(FileNotFoundError):
        load_problem(tmp_path / "missing.tsp")


def test_load_tsplib(tmp_path, scenario):
    path = tmp_path / "tiny.tsp"
    path.write_text(TSPLIB_TEXT)
    assert load_problem(path) == scenario


def test_load_instances(tmp_path, scenario):
    save_matrix(scenario, tmp_path / "b.txt")
    save_matrix(DistanceMatrix.random(3, seed=1), tmp_path / "a.txt")
    (tmp_path / "notes.md").write_text("not a problem")
    instances = load_instances(tmp_path)
    assert [i.name for i in instances] == ["a", "b"]
    assert instances[1].problem == scenario
    with pytest.raises(ProblemSourceUnavailable):
        load_instances(tmp_path / "nope")


def test_truncated_tsplib_is_malformed(tmp_path):
    path = tmp_path / "bad.tsp"
    path.write_text(TRUNCATED_TSPLIB_TEXT)
    with pytest.raises(ValueError, match="Malformed TSPLIB"):
        load_problem(path)
