import logging

import pandas as pd

from row_schema import COLUMNS, FIELDS, Row, coerce_field_value, new_row_id


logger = logging.getLogger(__name__)


def _as_flag(value) -> bool:
    if value is None or value is pd.NA:
        return False
    if isinstance(value, float) and value != value:
        return False
    return bool(value)


class RecordStore:
    """Ordered collection of editable rows.

    Rows live in a DataFrame with one column per schema field plus ``id`` and
    ``selected``. Every mutation notifies subscribers with a short reason
    string; lookups against ids that no longer exist are quiet no-ops.
    """

    def __init__(self, rows=None):
        self._listeners = []
        self._df = self._frame(rows if rows is not None else [])

    # ---------- construction ----------
    @staticmethod
    def _frame(rows) -> pd.DataFrame:
        if isinstance(rows, pd.DataFrame):
            df = rows.reindex(columns=list(COLUMNS)).copy(deep=True)
        else:
            records = []
            for row in rows:
                if not isinstance(row, Row):
                    row = Row.from_mapping(row)
                records.append(row.flat())
            df = pd.DataFrame(records, columns=list(COLUMNS))
        df = df.reset_index(drop=True)
        df["id"] = pd.Series(list(df["id"]), index=df.index, dtype=object)
        for name in FIELDS:
            df[name] = pd.Series(
                [coerce_field_value(v) for v in df[name]], index=df.index, dtype=object
            )
        df["selected"] = pd.Series(
            [_as_flag(v) for v in df["selected"]], index=df.index, dtype=bool
        )
        return df

    # ---------- listeners ----------
    def subscribe(self, callback):
        self._listeners.append(callback)

    def unsubscribe(self, callback):
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _notify(self, reason: str):
        for cb in list(self._listeners):
            cb(reason)

    # ---------- reads ----------
    @property
    def df(self) -> pd.DataFrame:
        return self._df

    def __len__(self) -> int:
        return len(self._df)

    def ids(self) -> list[str]:
        return list(self._df["id"])

    def row_id_at(self, index: int) -> str | None:
        if index < 0 or index >= len(self._df):
            return None
        return self._df.at[index, "id"]

    def index_of(self, row_id) -> int | None:
        matches = self._df.index[self._df["id"] == row_id]
        if len(matches) == 0:
            return None
        return int(matches[0])

    def value(self, index: int, field: str) -> str:
        if field not in FIELDS or index < 0 or index >= len(self._df):
            return ""
        return self._df.at[index, field]

    def get(self, row_id, field: str) -> str | None:
        idx = self.index_of(row_id)
        if idx is None or field not in FIELDS:
            return None
        return self._df.at[idx, field]

    def rows(self) -> list[Row]:
        return [
            Row(
                id=rec["id"],
                fields={name: rec[name] for name in FIELDS},
                selected=bool(rec["selected"]),
            )
            for rec in self._df.to_dict("records")
        ]

    def matrix(self) -> list[list[str]]:
        return [list(values) for values in self._df[list(FIELDS)].itertuples(index=False)]

    def selected_ids(self) -> list[str]:
        return list(self._df.loc[self._df["selected"], "id"])

    # ---------- mutations ----------
    def append(self, row: Row | None = None) -> str:
        row = row if row is not None else Row.blank()
        if self.index_of(row.id) is not None:
            row = Row(id=new_row_id(), fields=dict(row.fields), selected=row.selected)
        extra = self._frame([row])
        if len(self._df) == 0:
            self._df = extra
        else:
            self._df = pd.concat([self._df, extra], ignore_index=True)
        self._notify("append")
        return row.id

    def remove(self, ids) -> int:
        targets = set(ids)
        mask = self._df["id"].isin(targets)
        removed = int(mask.sum())
        if removed == 0:
            logger.debug("remove: no rows matched %d id(s)", len(targets))
            return 0
        self._df = self._df.loc[~mask].reset_index(drop=True)
        self._notify("remove")
        return removed

    def update(self, row_id, field: str, value) -> bool:
        if field not in FIELDS:
            return False
        idx = self.index_of(row_id)
        if idx is None:
            logger.debug("update: row %s no longer exists", row_id)
            return False
        self._df.at[idx, field] = coerce_field_value(value)
        self._notify("update")
        return True

    def set_selected(self, row_id, flag: bool) -> bool:
        idx = self.index_of(row_id)
        if idx is None:
            return False
        self._df.at[idx, "selected"] = bool(flag)
        self._notify("select")
        return True

    def set_selected_many(self, ids, flag: bool) -> int:
        mask = self._df["id"].isin(set(ids))
        count = int(mask.sum())
        if count:
            self._df.loc[mask, "selected"] = bool(flag)
            self._notify("select")
        return count

    def replace_all(self, rows, keep_selected: bool = False):
        """Swap in ``rows`` wholesale.

        With ``keep_selected`` the checked flags of rows that exist both before
        and after keep their current value.
        """
        current = dict(zip(self._df["id"], self._df["selected"])) if keep_selected else {}
        df = self._frame(rows)
        if current:
            known = df["id"].isin(set(current))
            df.loc[known, "selected"] = [bool(current[i]) for i in df.loc[known, "id"]]
        self._df = df
        self._notify("replace")

    def snapshot(self) -> pd.DataFrame:
        return self._df.copy(deep=True)
