from plugins.automl_wizard.core import parse_table, profile_columns


def _stats_by_name(rows):
    return {stat.name: stat for stat in profile_columns(rows)}


def test_profile_columns_reports_types_missing_and_uniques():
    rows = parse_table("a,b,c\n1,x,\n2,y,\n3,x,\n,z,")
    stats = _stats_by_name(rows)

    assert [stat.name for stat in profile_columns(rows)] == ["a", "b", "c"]

    assert stats["a"].inferred_type == "number"
    assert stats["a"].missing_count == 1
    assert stats["a"].unique_count == 3
    assert stats["a"].sample == (1.0, 2.0, 3.0)

    assert stats["b"].inferred_type == "string"
    assert stats["b"].missing_count == 0
    assert stats["b"].unique_count == 3


def test_all_missing_column_is_string():
    rows = parse_table("a,b\n1,\n2,")
    stat = _stats_by_name(rows)["b"]
    assert stat.inferred_type == "string"
    assert stat.missing_count == 2
    assert stat.unique_count == 0
    assert stat.sample == ()


def test_numeric_share_must_exceed_threshold():
    four_of_five = parse_table("v\n1\n2\n3\n4\nx")
    five_of_six = parse_table("v\n1\n2\n3\n4\n5\nx")
    assert profile_columns(four_of_five)[0].inferred_type == "string"
    assert profile_columns(five_of_six)[0].inferred_type == "number"


def test_sample_keeps_first_five_present_values_in_order():
    rows = parse_table("v\n9\n\n8\n7\n6\n5\n4\n3")
    assert profile_columns(rows)[0].sample == (9.0, 8.0, 7.0, 6.0, 5.0)


def test_unique_count_does_not_coerce_types():
    rows = [{"a": 1.0}, {"a": "1"}, {"a": ""}, {"a": 1.0}]
    stat = profile_columns(rows)[0]
    assert stat.unique_count == 2
    assert stat.missing_count == 1


def test_profile_columns_empty_input():
    assert profile_columns([]) == []


def test_counts_never_exceed_row_count():
    rows = parse_table("a,b\n1,x\n1,\n,y\n2,y")
    for stat in profile_columns(rows):
        assert stat.missing_count + stat.unique_count <= len(rows)


def test_to_dict_is_json_friendly():
    stat = profile_columns(parse_table("a\n1\n2"))[0]
    assert stat.to_dict() == {
        "name": "a",
        "type": "number",
        "missing_count": 0,
        "unique_count": 2,
        "sample": [1.0, 2.0],
    }
