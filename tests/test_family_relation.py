"""
Relation Ingester Tests
=======================

Parent,Children CSV -> Relation, including unquoted rows and bad input.
"""

import pytest

from family_relation import (
    BAD_HEADER_MESSAGE,
    NO_DATA_MESSAGE,
    RelationParseError,
    parse_relation_csv,
    relation_entities,
    relation_to_frame,
    split_children,
)


class TestParseRelationCsv:

    def test_quoted_children(self):
        text = 'Parent,Children\nJagdishbhai,"Meet, Kruti"\nNiteenbhai,"Het,Heli"\n'
        assert parse_relation_csv(text) == {
            "Jagdishbhai": ["Meet", "Kruti"],
            "Niteenbhai": ["Het", "Heli"],
        }

    def test_unquoted_children(self):
        text = ("Parent,Children\n"
                "Parshottambhai,Batukbhai,Meghajibhai,Velajibhai,Premjibhai\n"
                "Jagdishbhai,Meet,Kruti\n")
        tree = parse_relation_csv(text)
        assert tree["Parshottambhai"] == ["Batukbhai", "Meghajibhai", "Velajibhai", "Premjibhai"]
        assert tree["Jagdishbhai"] == ["Meet", "Kruti"]

    def test_order_kept(self):
        tree = parse_relation_csv("Parent,Children\nX,\"Z, Y\"\nA,B\n")
        assert list(tree) == ["X", "A"]
        assert tree["X"] == ["Z", "Y"]

    def test_whitespace_and_empty_tokens(self):
        tree = parse_relation_csv('Parent,Children\n  Mum  ," Ann , ,Bob,, "\n')
        assert tree == {"Mum": ["Ann", "Bob"]}

    def test_parent_without_children(self):
        tree = parse_relation_csv("Parent,Children\nLonely,\nSolo\n")
        assert tree == {"Lonely": [], "Solo": []}

    def test_blank_parent_dropped(self):
        tree = parse_relation_csv("Parent,Children\n,Orphan\nA,B\n")
        assert tree == {"A": ["B"]}

    def test_blank_lines_skipped(self):
        tree = parse_relation_csv("Parent,Children\n\nA,B\n\n\nC,D\n")
        assert tree == {"A": ["B"], "C": ["D"]}

    def test_repeated_parent_last_row_wins(self):
        tree = parse_relation_csv("Parent,Children\nA,B\nA,C\n")
        assert tree == {"A": ["C"]}

    def test_names_that_look_like_missing_values(self):
        tree = parse_relation_csv("Parent,Children\nNA,None\n")
        assert tree == {"NA": ["None"]}

    def test_bytes_with_bom(self):
        tree = parse_relation_csv("\ufeffParent,Children\nA,B\n".encode("utf-8"))
        assert tree == {"A": ["B"]}

    def test_crlf_line_endings(self):
        tree = parse_relation_csv("Parent,Children\r\nA,\"B,C\"\r\n")
        assert tree == {"A": ["B", "C"]}

    def test_trailing_empty_header_columns(self):
        """Spreadsheet exports pad the header with empty columns."""
        assert parse_relation_csv("Parent,Children,,\nA,B,C,\nD,E,,\n") == {"A": ["B", "C"], "D": ["E"]}
        assert parse_relation_csv("Parent,Children,\nA,B\n") == {"A": ["B"]}

    def test_extra_header_column(self):
        """Only the first two header cells are checked; later cells join the children."""
        assert parse_relation_csv("Parent,Children,Notes\nA,B,x\n") == {"A": ["B", "x"]}

    def test_unquoted_children_past_wide_header(self):
        tree = parse_relation_csv("Parent,Children,\nA,B,C,D\n")
        assert tree == {"A": ["B", "C", "D"]}

    @pytest.mark.parametrize("text", [
        "Name,Kids\nA,B\n",
        "Children,Parent\nA,B\n",
        "Parent\nA\n",
        "Kids,Parent,Children\nA,B,C\n",
    ])
    def test_wrong_header(self, text):
        with pytest.raises(RelationParseError) as exc:
            parse_relation_csv(text)
        assert str(exc.value) == BAD_HEADER_MESSAGE

    @pytest.mark.parametrize("text", ["", "   \n", "Parent,Children\n", "Parent,Children\n,x\n"])
    def test_no_data(self, text):
        with pytest.raises(RelationParseError) as exc:
            parse_relation_csv(text)
        assert str(exc.value) == NO_DATA_MESSAGE

    def test_undecodable_bytes(self):
        with pytest.raises(RelationParseError):
            parse_relation_csv(b"\xff\xfe\x00P\x00a")


class TestRelationHelpers:

    def test_split_children(self):
        assert split_children(" a, b ,,c ") == ["a", "b", "c"]
        assert split_children("") == []
        assert split_children(None) == []

    def test_entities_in_first_seen_order(self):
        relation = {"A": ["B", "C"], "B": ["D"], "E": []}
        assert relation_entities(relation) == ["A", "B", "C", "D", "E"]

    def test_relation_to_frame(self):
        df = relation_to_frame({"A": ["B", "C"]})
        assert list(df.columns) == ["Parent", "Children"]
        assert df.iloc[0].tolist() == ["A", "B, C"]
        assert relation_to_frame({}).empty
