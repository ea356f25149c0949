import pytest

from chquery.builder import InvalidParamsError, SqlBuilder, join_column_names

ROW = ["a", "b"]
UNNAMED: list[str] = []


def test_bound_args():
    sql = SqlBuilder("SELECT ?fields FROM test WHERE a = ? AND b < ?")
    assert str(sql) == "SELECT ?fields FROM test WHERE a = ? AND b < ?"

    sql.bind_arg("foo")
    assert str(sql) == "SELECT ?fields FROM test WHERE a = 'foo' AND b < ?"

    sql.bind_arg(42)
    assert str(sql) == "SELECT ?fields FROM test WHERE a = 'foo' AND b < 42"

    sql.bind_fields(ROW)
    assert str(sql) == "SELECT `a`,`b` FROM test WHERE a = 'foo' AND b < 42"

    assert sql.finish() == "SELECT `a`,`b` FROM test WHERE a = 'foo' AND b < 42"


@pytest.mark.parametrize(
    "count, expected",
    [
        (0, "SELECT `a`,`b` FROM test WHERE a IN []"),
        (1, "SELECT `a`,`b` FROM test WHERE a IN ['bar']"),
        (2, "SELECT `a`,`b` FROM test WHERE a IN ['bar','baz']"),
        (3, "SELECT `a`,`b` FROM test WHERE a IN ['bar','baz','foobar']"),
    ],
)
def test_in_clause(count, expected):
    args = ["bar", "baz", "foobar"]
    sql = SqlBuilder("SELECT ?fields FROM test WHERE a IN ?")
    sql.bind_arg(args[:count])
    sql.bind_fields(ROW)
    assert sql.finish() == expected


def test_question_marks_inside():
    sql = SqlBuilder("SELECT 1 FROM test WHERE a IN ? AND b = ?")
    sql.bind_arg(["a?b", "c?"])
    sql.bind_arg("a?")
    assert sql.finish() == "SELECT 1 FROM test WHERE a IN ['a?b','c?'] AND b = 'a?'"


def test_question_escape():
    sql = SqlBuilder("SELECT 1 FROM test WHERE a IN 'a??b'")
    assert sql.finish() == "SELECT 1 FROM test WHERE a IN 'a?b'"


def test_option_as_null():
    sql = SqlBuilder("SELECT 1 FROM test WHERE a = ?")
    sql.bind_arg(None)
    assert sql.finish() == "SELECT 1 FROM test WHERE a = NULL"


def test_option_as_value():
    sql = SqlBuilder("SELECT 1 FROM test WHERE a = ?")
    sql.bind_arg(1)
    assert sql.finish() == "SELECT 1 FROM test WHERE a = 1"


def test_failure_all_bound():
    sql = SqlBuilder("SELECT 1")
    sql.bind_arg(42)
    with pytest.raises(InvalidParamsError) as info:
        sql.finish()
    assert "all arguments are already bound" in str(info.value)


def test_failure_fields_with_non_struct():
    sql = SqlBuilder("SELECT ?fields")
    sql.bind_fields(UNNAMED)
    with pytest.raises(InvalidParamsError) as info:
        sql.finish()
    assert "argument ?fields cannot be used with non-struct row types" in str(info.value)


def test_failure_unbound_argument():
    sql = SqlBuilder("SELECT a FROM test WHERE b = ? AND c = ?")
    sql.bind_arg(42)
    with pytest.raises(InvalidParamsError) as info:
        sql.finish()
    assert "unbound query argument" in str(info.value)


def test_failure_unbound_fields():
    sql = SqlBuilder("SELECT ?fields FROM test WHERE b = ?")
    sql.bind_arg(42)
    with pytest.raises(InvalidParamsError) as info:
        sql.finish()
    assert "unbound query argument ?fields" in str(info.value)


def test_invalid_argument_is_reported():
    sql = SqlBuilder("SELECT ?")
    sql.bind_arg({"a": 1})
    assert str(sql).startswith("invalid SQL: invalid argument:")
    with pytest.raises(InvalidParamsError, match="serialize_map is unsupported"):
        sql.finish()


def test_first_error_wins():
    sql = SqlBuilder("SELECT 1")
    sql.bind_arg(1)
    sql.bind_arg({"a": 1})
    with pytest.raises(InvalidParamsError, match="already bound"):
        sql.finish()


def test_output_format():
    sql = SqlBuilder("SELECT ?")
    sql.set_output_format("RowBinary")
    assert str(sql) == "SELECT ? FORMAT RowBinary"
    sql.bind_arg(7)
    assert sql.finish() == "SELECT 7 FORMAT RowBinary"


def test_fields_without_placeholder_is_fine_for_non_struct():
    sql = SqlBuilder("SELECT 1")
    sql.bind_fields(UNNAMED)
    assert sql.finish() == "SELECT 1"


def test_fields_replaced_everywhere():
    sql = SqlBuilder("SELECT ?fields, ?fields")
    sql.bind_fields(["x"])
    assert sql.finish() == "SELECT `x`, `x`"


def test_join_column_names():
    assert join_column_names(["a", "b"]) == "`a`,`b`"
    assert join_column_names([]) is None