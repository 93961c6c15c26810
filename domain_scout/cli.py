# === FILE: domain_scout/cli.py ===
#!/usr/bin/env python3
"""
Точка входа для запуска DomainScout через командную строку.

Команды:
  scan      Получить список доменов из реестра, опросить каждый и сохранить результаты
  config    Показать текущую конфигурацию
  show      Вывести сохранённые результаты

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (default: configs/default.yaml, если есть)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stdout, если не указан)
  --log-format FORMAT Формат логирования

Команда scan опции:
  --output PATH              Файл результатов
  --concurrency INT          Число воркеров
  --timeout SEC              Таймаут на один домен
  --compress/--no-compress   Сжимать результаты gzip
  --persist [eager|batch]    Когда сохранять результаты
  --resume/--no-resume       Продолжить с сохранённого снимка
  --scan-timeout SEC         Таймаут всего прогона (секунд)

Пример:
  domain-scout scan --concurrency 50 --timeout 3 --output out/domains.json.gz --compress
"""
import asyncio
import sys
from pathlib import Path

import click

from domain_scout import __version__
from domain_scout.config import load_config
from domain_scout.engine import start_scan
from domain_scout.logger import setup_logging
from domain_scout.persist import Persister
from domain_scout.registry import RegistryError

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='DomainScout, version %(version)s')
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
    help='Путь к файлу логов (stdout, если не указан)'
)
@click.option(
    '--log-format', 'log_format',
    default='%(asctime)s %(levelname)s %(message)s',
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """Группа команд DomainScout CLI."""
    setup_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('scan', context_settings=CONTEXT_SETTINGS)
@click.option(
    '--output', '-o', 'output',
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help='Файл для сохранения результатов'
)
@click.option(
    '--concurrency', '-n', 'concurrency',
    default=None,
    type=click.IntRange(min=1),
    help='Число одновременно работающих воркеров'
)
@click.option(
    '--timeout', '-t', 'timeout',
    default=None,
    type=click.FloatRange(min=0, min_open=True),
    help='Таймаут на один домен (секунд)'
)
@click.option(
    '--compress/--no-compress', 'compress',
    default=None,
    help='Сжимать файл результатов gzip'
)
@click.option(
    '--persist', 'persist_mode',
    default=None,
    type=click.Choice(['eager', 'batch']),
    help='eager: сохранять после каждого домена; batch: один раз в конце'
)
@click.option(
    '--resume/--no-resume', 'resume',
    default=None,
    help='Пропустить домены, уже сохранённые в файле результатов'
)
@click.option(
    '--scan-timeout', 'scan_timeout',
    type=float,
    default=None,
    help='Таймаут всего прогона (секунд)'
)
@click.pass_context
def scan(ctx, output, concurrency, timeout, compress, persist_mode, resume, scan_timeout):
    """Опросить все домены реестра и сохранить результаты."""
    overrides = {
        'output': output,
        'concurrency': concurrency,
        'timeout': timeout,
        'compress': compress,
        'persist_mode': persist_mode,
        'resume': resume,
    }
    cfg = ctx.obj['config'].model_copy(
        update={k: v for k, v in overrides.items() if v is not None}
    )
    click.echo(f'Starting scan of {cfg.registry_url}')
    try:
        if scan_timeout:
            store = asyncio.run(
                asyncio.wait_for(start_scan(cfg), timeout=scan_timeout)
            )
        else:
            store = asyncio.run(start_scan(cfg))
    except asyncio.TimeoutError:
        print_error(f'Прогон не завершён за {scan_timeout} секунд')
    except RegistryError as e:
        print_error(f'Не удалось получить список доменов: {e}')
    except OSError as e:
        print_error(f'Не удалось сохранить результаты: {e}')

    outcomes = store.outcomes()
    ok = sum(1 for o in outcomes if o.ok)
    click.echo(f'Probed {len(outcomes)} domains: {ok} ok, {len(outcomes) - ok} failed -> {cfg.output}')


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


@cli.command('show', context_settings=CONTEXT_SETTINGS)
@click.argument(
    'path',
    required=False,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    '--compressed/--plain', 'compressed',
    default=None,
    help='Файл сжат gzip (по умолчанию как в конфиге)'
)
@click.pass_context
def show(ctx, path, compressed):
    """Вывести сохранённые результаты, по строке на домен."""
    cfg = ctx.obj['config']
    path = path or cfg.output
    if not path.exists():
        print_error(f'Файл результатов не найден: {path}')
    store = Persister(path, compress=cfg.compress if compressed is None else compressed).load()
    if not len(store):
        click.echo('No results')
        return
    for domain in sorted(store):
        outcome = store.get(domain)
        if outcome.data is not None:
            click.echo(f'{domain}\t{outcome.data.status}\t{outcome.data.title or ""}')
        else:
            click.echo(f'{domain}\tERROR\t{outcome.error}')


if __name__ == "__main__":
    cli()
