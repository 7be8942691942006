import csv
from io import StringIO
from typing import Dict, List, Union

import pandas as pd

from family_logger import logger

# Parent -> ordered children, as uploaded
Relation = Dict[str, List[str]]

HEADER = ["Parent", "Children"]

NO_DATA_MESSAGE = "No data found in CSV or error during parsing."
BAD_HEADER_MESSAGE = 'Invalid CSV header. Expected "Parent,Children"'
BAD_FORMAT_MESSAGE = "Error parsing CSV file. Please check the format."


class RelationParseError(ValueError):
    """The uploaded table could not be turned into a Relation."""


def split_children(value) -> List[str]:
    if value is None or pd.isna(value):
        return []
    return [child.strip() for child in str(value).split(",") if child.strip()]


def _fold_extra_fields(width: int):
    # Unquoted rows like "Parent,Child1,Child2" spill children past the header width
    def fold(fields: List[str]) -> List[str]:
        return fields[:width - 1] + [",".join(fields[width - 1:])]
    return fold


def _read_rows(text: str, **kwargs) -> pd.DataFrame:
    return pd.read_csv(
        StringIO(text),
        header=None,
        dtype=str,
        keep_default_na=False,
        skip_blank_lines=True,
        skipinitialspace=True,
        engine="python",
        **kwargs,
    )


def parse_relation_csv(data: Union[str, bytes]) -> Relation:
    """Parse a ``Parent,Children`` table into a Relation.

    Only the first two header cells are checked; any further columns, and
    unquoted trailing fields, are folded into the children list. Blank
    parents are dropped and a repeated parent keeps its last row.
    """
    if isinstance(data, bytes):
        try:
            data = data.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise RelationParseError(BAD_FORMAT_MESSAGE) from e
    text = (data or "").lstrip("\ufeff")
    if not text.strip():
        raise RelationParseError(NO_DATA_MESSAGE)

    # The header is read as an ordinary row so extra columns never become an index
    try:
        width = _read_rows(text, nrows=1).shape[1]
        df = _read_rows(text, on_bad_lines=_fold_extra_fields(width))
    except pd.errors.EmptyDataError as e:
        raise RelationParseError(NO_DATA_MESSAGE) from e
    except (pd.errors.ParserError, csv.Error) as e:
        logger.warning(f"CSV parse failed: {e}")
        raise RelationParseError(BAD_FORMAT_MESSAGE) from e

    df = df.fillna("")
    if df.empty:
        raise RelationParseError(NO_DATA_MESSAGE)
    header = [str(v).strip() for v in df.iloc[0]]
    if header[:2] != HEADER:
        raise RelationParseError(BAD_HEADER_MESSAGE)
    rows = df.iloc[1:]

    tree: Relation = {}
    for _, row in rows.iterrows():
        parent = str(row.iloc[0]).strip()
        if not parent:
            continue
        tree[parent] = split_children(",".join(str(v) for v in row.iloc[1:]))

    if not tree:
        raise RelationParseError(NO_DATA_MESSAGE)
    logger.info(f"Parsed relation with {len(tree)} parents")
    return tree


def relation_entities(relation: Relation) -> List[str]:
    """Every id in the relation, keys and children, in first-seen order."""
    seen = {}
    for parent, children in relation.items():
        seen.setdefault(parent, None)
        for child in children:
            seen.setdefault(child, None)
    return list(seen)


def relation_to_frame(relation: Relation) -> pd.DataFrame:
    if not relation:
        return pd.DataFrame(columns=HEADER)
    rows = [{"Parent": p, "Children": ", ".join(c)} for p, c in relation.items()]
    return pd.DataFrame(rows, columns=HEADER)
