#!/usr/bin/env python3
"""
Интерфейс командной строки для Word Frequency

Строит таблицу частот по текстам из аргументов и файлов и печатает её.
Настройки берутся из config.yaml и переопределяются аргументами.
"""

import argparse
import logging
import os
from typing import Any, Iterable, List, Optional

from .components.filters import ListFilterSpec, file_list, flatten_terms
from .config import Config, config as default_config
from .errors import WordFrequencyError
from .frequency_pipeline import WordFrequency

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="word_frequency",
        description="Word Frequency - таблица частотности токенов",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Примеры использования:
  python -m word_frequency.cli "This is a test string"
  python -m word_frequency.cli --file notes.txt --blacklist-file blacklist_en.txt
  python -m word_frequency.cli --file notes.txt --case lower --sort-frequency -1 --top 20
  python -m word_frequency.cli --config my_config.yaml
        """
    )

    parser.add_argument('texts', nargs='*', help='Тексты-источники')
    parser.add_argument('--file', action='append', default=[], dest='files',
                        help='Текстовый файл-источник (можно указать несколько раз)')
    parser.add_argument('--config', help='Путь к YAML файлу конфигурации')
    parser.add_argument('--assets', help='Каталог файлов списков')

    filters = parser.add_argument_group('фильтры')
    filters.add_argument('--blacklist', action='append', default=[], metavar='TERM',
                         help='Исключить токен')
    filters.add_argument('--blacklist-file', action='append', default=[], metavar='FILE',
                         help='Файл чёрного списка (путь относительно assets)')
    filters.add_argument('--regex-blacklist', action='append', default=[], metavar='PATTERN',
                         help='Исключить токены по регулярному выражению, например "#^[0-9]#"')
    filters.add_argument('--whitelist', action='append', default=[], metavar='TERM',
                         help='Оставить только указанные токены')
    filters.add_argument('--regex-whitelist', action='append', default=[], metavar='PATTERN',
                         help='Оставить токены по регулярному выражению')
    filters.add_argument('--substitution-file', action='append', default=[], metavar='FILE',
                         help='YAML файл замен (путь относительно assets)')
    filters.add_argument('--case-sensitive', action='store_true',
                         help='Чёрный и белый списки с учётом регистра')

    output = parser.add_argument_group('токены и сортировка')
    output.add_argument('--delimiter', help='Разделитель токенов (по умолчанию пробел)')
    output.add_argument('--case', choices=['upper', 'lower', 'none'],
                        help='Привести регистр токенов')
    output.add_argument('--remove-numeric', action='store_true',
                        help='Удалить числовые токены')
    output.add_argument('--strip-html', action='store_true',
                        help='Извлекать текст из HTML перед разбиением')
    output.add_argument('--sort-token', type=int,
                        help='Сортировка по токену: 1 по возрастанию, -1 по убыванию')
    output.add_argument('--sort-frequency', type=int,
                        help='Сортировка по частоте: 1 по возрастанию, -1 по убыванию')
    output.add_argument('--locale', help='Локаль для сравнения токенов, например de_DE')
    output.add_argument('--top', type=int, help='Показать только первые N строк таблицы')
    return parser


def _extend_slot(spec: ListFilterSpec, slot: str, values: Iterable[Any]) -> None:
    values = list(values)
    if values:
        setattr(spec, slot, flatten_terms(getattr(spec, slot)) + values)


def _extend_files(spec: ListFilterSpec, slot: str, values: Iterable[Any]) -> None:
    values = list(values)
    if values:
        setattr(spec, slot, file_list(getattr(spec, slot)) + values)


def build_pipeline(args: argparse.Namespace, cfg: Config) -> WordFrequency:
    """Создаёт пайплайн из конфигурации и аргументов командной строки"""
    pipeline = WordFrequency.from_config(cfg)

    if args.delimiter is not None:
        pipeline.delimiter = args.delimiter
    if args.case is not None:
        pipeline.force_case = args.case
    if args.remove_numeric:
        pipeline.remove_numeric = True
    if args.strip_html:
        pipeline.strip_html = True
    if args.sort_token is not None:
        pipeline.sort_by_token = args.sort_token
    if args.sort_frequency is not None:
        pipeline.sort_by_frequency = args.sort_frequency
    if args.locale:
        pipeline.locale = args.locale
    if args.assets:
        pipeline.assets_path = args.assets

    _extend_slot(pipeline.black_list, 'items', args.blacklist)
    _extend_files(pipeline.black_list, 'files', args.blacklist_file)
    _extend_slot(pipeline.black_list, 'patterns', args.regex_blacklist)
    _extend_slot(pipeline.white_list, 'items', args.whitelist)
    _extend_slot(pipeline.white_list, 'patterns', args.regex_whitelist)
    _extend_files(pipeline.substitution_list, 'files', args.substitution_file)
    if args.case_sensitive:
        pipeline.black_list.case_sensitive = True
        pipeline.white_list.case_sensitive = True

    for text in args.texts:
        pipeline.add_source(text)
    for path in args.files:
        pipeline.add_file_source(path)
    return pipeline


def run_pipeline(pipeline: WordFrequency) -> None:
    """Выполняет все настроенные этапы в стандартном порядке"""
    pipeline.accumulate_sources()
    if pipeline.black_list.is_configured():
        pipeline.run_black_list_filter()
    if pipeline.white_list.is_configured():
        pipeline.run_white_list_filter()
    if pipeline.substitution_list.is_configured():
        pipeline.run_substitution_list_filter()
    pipeline.generate()


def format_table(pipeline: WordFrequency, top: Optional[int] = None) -> str:
    frame = pipeline.frequency_table.to_dataframe()
    if top is not None:
        frame = frame.head(top)
    if frame.empty:
        return "(пусто)"
    return frame.to_string(index=False)


def main(argv: Optional[List[str]] = None) -> int:
    """Основная функция CLI"""
    parser = build_parser()
    args = parser.parse_args(argv)

    cfg = Config(args.config) if args.config else default_config
    if os.environ.get('WORD_FREQUENCY_DEBUG') == '1':
        cfg.set('logging.level', 'DEBUG')
    cfg.configure_logging(force=True)

    try:
        pipeline = build_pipeline(args, cfg)
        run_pipeline(pipeline)
    except (WordFrequencyError, ValueError) as e:
        logger.error(f"Ошибка пайплайна: {e}")
        print(f"❌ {e}")
        return 1

    print(format_table(pipeline, args.top))
    stats = pipeline.get_summary_stats()
    print(f"\n📊 Токенов: {stats['total_tokens']}, уникальных: {stats['unique_tokens']}")
    if pipeline.warnings:
        print(f"⚠️ Предупреждений: {len(pipeline.warnings)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
