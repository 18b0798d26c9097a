import pytest

from imgvariant.ops.pipeline import Operation, normalize_transformations


def test_mapping_keeps_order():
    operations = normalize_transformations({"resize_to_limit": [100, 100], "rotate": 90})
    assert operations == [Operation("resize_to_limit", [100, 100]), Operation("rotate", 90)]


def test_pairs_and_operations():
    operations = normalize_transformations(
        [("crop", [0, 0, 10, 10]), Operation("flip", True), {"rotate": 90}]
    )
    assert [op.name for op in operations] == ["crop", "flip", "rotate"]
    assert operations[0].arguments == [0, 0, 10, 10]


def test_list_pairs():
    assert normalize_transformations([["rotate", 180]]) == [Operation("rotate", 180)]


def test_empty():
    assert normalize_transformations([]) == []
    assert normalize_transformations({}) == []


def test_operation_is_frozen():
    operation = Operation("rotate", 90)
    with pytest.raises(AttributeError):
        operation.name = "flip"


@pytest.mark.parametrize("transformations", ["rotate", [42], [("rotate", 90, "extra")]])
def test_unsupported_shapes(transformations):
    with pytest.raises(TypeError):
        normalize_transformations(transformations)
