# === FILE: webtree/cli.py ===
#!/usr/bin/env python3
"""
Точка входа для запуска краулера WebTree через командную строку.

Команды:
  crawl     Обойти сайт от стартового URL и вывести/сохранить дерево
  config    Показать текущую конфигурацию

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (по умолчанию configs/default.yaml)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (только stderr, если не указан)
  --log-format FORMAT Формат логирования

Команда crawl опции:
  URL                 Стартовый URL (перекрывает base_url из конфига)
  --depth INT         Максимальное число слоёв (override max_depth)
  --limit INT         Лимит совпадений на страницу (override child_limit)
  --mode MODE         Извлечение ссылок: regex или html
  --dedupe-frontier   Убирать дубли страниц внутри слоя
  --json PATH         Сохранить JSON-отчёт в файл
  --html PATH         Сохранить HTML-отчёт в файл
  --template DIR      Папка с Jinja2-шаблоном report.html.j2
  --pretty            Преформатировать JSON-вывод (отступ 2)
  --crawl-timeout SEC Таймаут всего обхода (секунд)

Пример:
  webtree crawl https://www.pravda.ru/ --depth 3 --json tree.json
"""
import asyncio
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from webtree import __version__
from webtree.aggregator import aggregate_results
from webtree.config import CrawlerConfig, load_config
from webtree.engine import start_crawl
from webtree.logger import init_logging
from webtree.report import render_html, render_json

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def _build_config(config_path, **overrides) -> CrawlerConfig:
    """Конфиг из файла (или configs/default.yaml) с опциями поверх.

    Без --config и без файла по умолчанию собираем конфиг только из опций.
    """
    try:
        return load_config(config_path, **overrides)
    except FileNotFoundError:
        if config_path is not None:
            raise
    return CrawlerConfig(**{k: v for k, v in overrides.items() if v is not None})


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='WebTree, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML/JSON.'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Уровень логирования'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Путь к файлу логов (только stderr, если не указан)'
)
@click.option(
    '--log-format', 'log_format',
    default='%(asctime)s %(levelname)s %(message)s',
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """Группа команд WebTree CLI."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config_path


@cli.command('crawl', context_settings=CONTEXT_SETTINGS)
@click.argument('url', required=False)
@click.option('--depth', '-d', 'max_depth', type=click.IntRange(min=0), default=None,
              help='Максимальное число слоёв (override max_depth)')
@click.option('--limit', '-l', 'child_limit', type=click.IntRange(min=1), default=None,
              help='Лимит совпадений на страницу (override child_limit)')
@click.option('--mode', 'extractor', type=click.Choice(['regex', 'html']), default=None,
              help='Способ извлечения ссылок')
@click.option('--dedupe-frontier', 'dedupe_frontier', is_flag=True,
              help='Убирать дубли страниц внутри одного слоя')
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить JSON-отчёт в файл'
)
@click.option(
    '--html', 'html_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить HTML-отчёт в файл'
)
@click.option(
    '--template', '-t', 'template_dir',
    default=None,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help='Папка с Jinja2-шаблоном report.html.j2 (по умолчанию встроенный)'
)
@click.option('--pretty', is_flag=True, help='Преформатировать JSON-вывод (отступ 2)')
@click.option(
    '--crawl-timeout', 'crawl_timeout',
    type=float,
    default=None,
    help='Таймаут всего обхода (секунд)'
)
@click.pass_context
def crawl(ctx, url, max_depth, child_limit, extractor, dedupe_frontier,
          json_output, html_output, template_dir, pretty, crawl_timeout):
    """Обойти сайт и сгенерировать отчёты."""
    try:
        cfg = _build_config(
            ctx.obj['config_path'],
            base_url=url,
            max_depth=max_depth,
            child_limit=child_limit,
            extractor=extractor,
            dedupe_frontier=dedupe_frontier or None,
        )
    except ValidationError as e:
        print_error(f'Неверная конфигурация: {e}')
    except Exception as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')

    click.echo(f'Starting crawl: {cfg.base_url}', err=True)
    try:
        if crawl_timeout:
            tree = asyncio.run(
                asyncio.wait_for(start_crawl(cfg), timeout=crawl_timeout)
            )
        else:
            tree = asyncio.run(start_crawl(cfg))
    except asyncio.TimeoutError:
        print_error(f'Обход не завершён за {crawl_timeout} секунд')
    except Exception as e:
        print_error(f'Ошибка при обходе: {e}')

    report = aggregate_results(tree)

    # Без файлов отчёта печатаем JSON в stdout
    if not json_output and not html_output:
        click.echo(report.json(pretty=pretty))
        return

    if json_output:
        try:
            saved_json = render_json(report, json_output, pretty=pretty)
            click.echo(f'JSON report: {saved_json}')
        except Exception as e:
            print_error(f'Ошибка при сохранении JSON: {e}')

    if html_output:
        try:
            saved_html = render_html(report, template_dir, html_output)
            click.echo(f'HTML report: {saved_html}')
        except Exception as e:
            print_error(f'Ошибка при сохранении HTML: {e}')


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON."""
    try:
        cfg = load_config(ctx.obj['config_path'])
    except Exception as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
