from deno_babel.deno_datatypes import (
    Scalar, Sequence, Record, Binding, binding_value, make_binding, to_value,
)


def test_scalars_stay_scalars():
    assert to_value(1) == Scalar(1)
    assert to_value("x", ["a"], as_record=True) == Scalar("x")


def test_sequence_without_names():
    assert to_value([1, [2]]) == Sequence((Scalar(1), Sequence((Scalar(2),))))


def test_record_zips_by_position():
    assert to_value([1, 2], ["a", "b"], as_record=True) == Record(("a", "b"), (Scalar(1), Scalar(2)))


def test_record_truncates_to_shorter_side():
    assert to_value([1, 2, 3], ["a"], as_record=True) == Record(("a",), (Scalar(1),))


def test_binding_value_flat_list_with_names_is_record():
    assert binding_value([1, 2], ["a", "b"]) == Record(("a", "b"), (Scalar(1), Scalar(2)))


def test_binding_value_table_with_names_is_rows_of_records():
    value = binding_value([[1, 2], [3, 4]], ["a", "b"])
    assert value == Sequence((
        Record(("a", "b"), (Scalar(1), Scalar(2))),
        Record(("a", "b"), (Scalar(3), Scalar(4))),
    ))


def test_binding_value_without_names_is_plain():
    assert binding_value([1, 2], []) == Sequence((Scalar(1), Scalar(2)))
    assert binding_value("text", ["a"]) == Scalar("text")


def test_make_binding():
    assert make_binding("x", 5) == Binding("x", Scalar(5))
