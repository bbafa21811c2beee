"""
Адаптеры внешних источников структурированных записей.

Пайплайн не определяет семантику запросов: он получает записи и берёт из
каждой значения выбранных полей. Здесь собраны тонкие адаптеры для
DataFrame, табличных файлов (CSV/Excel) и таблиц SQLite.
"""

import logging
import sqlite3
from contextlib import closing
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

import pandas as pd

from ..errors import SourceFileNotFound
from ..interfaces.pipeline import RecordProvider, RecordQuery

logger = logging.getLogger(__name__)


def _as_values(values: Any) -> List[Any]:
    if isinstance(values, (list, tuple, set, frozenset)):
        return list(values)
    return [values]


class DataFrameRecordProvider(RecordProvider):
    """Записи из pandas DataFrame: строки = записи, колонки = поля."""

    def __init__(self, frame: pd.DataFrame):
        self.frame = frame

    def fetch(self, query: RecordQuery) -> List[Dict[str, Any]]:
        df = self.frame
        for column, values in query.where.items():
            if column not in df.columns:
                raise KeyError(f"Поле условия отсутствует в данных: {column}")
            df = df[df[column].isin(_as_values(values))]

        missing = [f for f in query.fields if f not in df.columns]
        if missing:
            raise KeyError(f"Запрошенные поля отсутствуют в данных: {missing}")

        subset = df.loc[:, list(query.fields)].astype(object)
        # NaN → None, чтобы пустые ячейки не превращались в токен "nan"
        subset = subset.where(pd.notna(subset), None)
        return subset.to_dict("records")


class SpreadsheetRecordProvider(RecordProvider):
    """Записи из CSV или Excel файла (читается один раз при первом запросе)."""

    def __init__(self, path: Union[str, Path], sheet_name: Union[str, int, None] = None):
        self.path = Path(path).expanduser()
        self.sheet_name = sheet_name
        self._provider: Optional[DataFrameRecordProvider] = None

    def _load(self) -> DataFrameRecordProvider:
        if self._provider is None:
            if not self.path.is_file():
                raise SourceFileNotFound(f"Табличный файл не найден: {self.path}")
            if self.path.suffix.lower() in (".csv", ".txt"):
                frame = pd.read_csv(self.path)
            else:
                frame = pd.read_excel(self.path, sheet_name=self.sheet_name or 0, engine="openpyxl")
            logger.debug(f"Загружено {len(frame)} записей из {self.path}")
            self._provider = DataFrameRecordProvider(frame)
        return self._provider

    def fetch(self, query: RecordQuery) -> List[Dict[str, Any]]:
        return self._load().fetch(query)


def _quote(identifier: str) -> str:
    return '"' + identifier.replace('"', '""') + '"'


class SqliteRecordProvider(RecordProvider):
    """Записи из таблицы SQLite.

    Принимает открытое соединение или путь к файлу базы (открывается
    только для чтения на время запроса).
    """

    def __init__(self, database: Union[str, Path, sqlite3.Connection], table: str):
        self.database = database
        self.table = table

    def build_sql(self, query: RecordQuery) -> Tuple[str, List[Any]]:
        """Строит SELECT с параметрами для условий where."""
        columns = ", ".join(_quote(f) for f in query.fields)
        sql = f"SELECT {columns} FROM {_quote(self.table)}"
        params: List[Any] = []
        conditions = []
        for column, values in query.where.items():
            values = _as_values(values)
            placeholders = ", ".join("?" for _ in values)
            conditions.append(f"{_quote(column)} IN ({placeholders})")
            params.extend(values)
        if conditions:
            sql += " WHERE " + " AND ".join(conditions)
        return sql, params

    def _rows(self, conn: sqlite3.Connection, query: RecordQuery) -> List[Dict[str, Any]]:
        sql, params = self.build_sql(query)
        logger.debug(f"SQLite запрос: {sql} {params}")
        with closing(conn.execute(sql, params)) as cursor:
            names = [d[0] for d in cursor.description]
            return [dict(zip(names, row)) for row in cursor.fetchall()]

    def fetch(self, query: RecordQuery) -> List[Dict[str, Any]]:
        if isinstance(self.database, sqlite3.Connection):
            return self._rows(self.database, query)

        path = Path(self.database).expanduser()
        if not path.is_file():
            raise SourceFileNotFound(f"База SQLite не найдена: {path}")
        with closing(sqlite3.connect(f"{path.resolve().as_uri()}?mode=ro", uri=True)) as conn:
            return self._rows(conn, query)


def record_values(rows: Iterable[Mapping[str, Any]], fields: Sequence[str]) -> List[str]:
    """Значения выбранных полей всех записей по порядку (None пропускается)."""
    values = []
    for row in rows:
        for name in fields:
            value = row.get(name)
            if value is None:
                continue
            values.append(value if isinstance(value, str) else str(value))
    return values
