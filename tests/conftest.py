import os
import sqlite3
import sys
from pathlib import Path

import pandas as pd
import pytest

# В тестах явно добавляем путь к src, чтобы импортировать пакет без установки
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from .fixtures.sample_texts import BASE_TEXT, TESTDATA_ROWS  # noqa: E402

TESTDATA_COLUMNS = ["id", "col1", "col2", "col3"]


@pytest.fixture
def temp_directory(tmp_path: Path) -> Path:
    """Временная директория для тестов.

    Возвращает уникальную директорию для каждого теста.
    """
    return tmp_path


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Убирает WORD_FREQUENCY_* из окружения, чтобы настройки пользователя не влияли на тесты."""
    for key in list(os.environ):
        if key.startswith("WORD_FREQUENCY_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def base_text() -> str:
    return BASE_TEXT


@pytest.fixture
def testdata_frame() -> pd.DataFrame:
    """Таблица testdata в виде DataFrame."""
    return pd.DataFrame(TESTDATA_ROWS, columns=TESTDATA_COLUMNS)


@pytest.fixture
def testdata_db(tmp_path: Path) -> Path:
    """Файл SQLite с таблицей testdata."""
    db_path = tmp_path / "testdata.db"
    conn = sqlite3.connect(db_path)
    try:
        conn.execute("CREATE TABLE testdata (id INTEGER PRIMARY KEY, col1 TEXT, col2 TEXT, col3 TEXT)")
        conn.executemany(
            "INSERT INTO testdata (id, col1, col2, col3) VALUES (:id, :col1, :col2, :col3)",
            TESTDATA_ROWS,
        )
        conn.commit()
    finally:
        conn.close()
    return db_path


@pytest.fixture
def assets_dir(tmp_path: Path) -> Path:
    """Каталог с собственными файлами списков."""
    assets = tmp_path / "assets"
    assets.mkdir()
    (assets / "stop.txt").write_text("this\n\n  is  \n", encoding="utf-8")
    (assets / "more_stop.txt").write_text("a\n", encoding="utf-8")
    (assets / "patterns.txt").write_text("#^s#\n\n/T/i\n", encoding="utf-8")
    (assets / "swap.yaml").write_text("'.': '!'\nstring: rope\n", encoding="utf-8")
    (assets / "swap.json").write_text('{"rope": "cord"}', encoding="utf-8")
    (assets / "not_a_mapping.yaml").write_text("- just\n- a list\n", encoding="utf-8")
    return assets


def pytest_configure(config):
    """Регистрируем маркеры для проекта."""
    config.addinivalue_line("markers", "integration: интеграционные тесты")
    config.addinivalue_line("markers", "cli: тесты командной строки")
