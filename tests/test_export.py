from card_sorter.export import dataset_to_csv, serialize_dataset
from card_sorter.ingest import read_csv
from card_sorter.records import Dataset


def test_serialize_uses_column_order():
    dataset = Dataset(columns=["b", "a"], records=[{"a": "1", "b": "2"}])
    assert dataset_to_csv(dataset) == "b,a\r\n2,1\r\n"


def test_typed_cells_are_rendered():
    dataset = Dataset(
        columns=["flag", "whole", "part", "gone"],
        records=[{"flag": True, "whole": 2.0, "part": 1.5, "gone": None}],
    )
    assert dataset_to_csv(dataset) == "flag,whole,part,gone\r\ntrue,2,1.5,\r\n"


def test_round_trip_preserves_text_values():
    dataset = Dataset(
        columns=["name", "note"],
        records=[
            {"name": "Blue-Eyes, White Dragon", "note": 'says "hi"'},
            {"name": "Dark Magician", "note": "line one\nline two"},
            {"name": "  padded  ", "note": ""},
        ],
    )
    parsed = read_csv(serialize_dataset(dataset))
    assert parsed.dataset.columns == dataset.columns
    assert parsed.dataset.records == dataset.records


def test_round_trip_with_typing():
    dataset = Dataset(columns=["n", "ok"], records=[{"n": 3, "ok": False}, {"n": 0.25, "ok": True}])
    parsed = read_csv(serialize_dataset(dataset), dynamic_typing=True)
    assert parsed.dataset.records == dataset.records


def test_header_only_export():
    assert serialize_dataset(Dataset(columns=["a", "b"])) == b"a,b\r\n"
