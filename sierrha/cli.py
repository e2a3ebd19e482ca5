# File: sierrha/cli.py
"""
Точка входа для проверки обработчиков ошибок Sierrha через командную строку.

Команды:
  render STATUS   Вывести страницу ошибки для кода STATUS
  resolve STATUS  Показать URL, который будет загружен для кода STATUS
  config          Показать текущую конфигурацию

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (default: configs/sierrha.yaml)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stderr, если не указан)
  --log-format FORMAT Формат логирования (e.g. "%(levelname)s %(message)s")

Опции контекста запроса (render, resolve):
  --locale CODE        Код ISO 639-1 (default: en)
  --language-tag TAG   Тег IETF BCP 47 (default: en-US)
  --language KEY       Язык каталога надписей (default: default)
  --site ID            Идентификатор сайта
  --remote-addr IP     Адрес клиента (для маски разработчиков)

Дополнительно:
  --version, -v       Показать версию Sierrha

Пример:
  sierrha --config configs/sierrha.yaml render 404 --locale de --language-tag de-AT --site main
"""
import sys
from pathlib import Path

import click

from sierrha import __version__
from sierrha.config import load_config
from sierrha.exceptions import ImmediateAbort
from sierrha.handler import build_handler
from sierrha.logger import DEFAULT_FORMAT, configure
from sierrha.models import RequestContext
from sierrha.sites import SiteDirectory
from sierrha.transport import AiohttpTransport

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def request_options(func):
    """Общие опции контекста запроса для render и resolve."""
    options = [
        click.argument('status', type=click.IntRange(400, 599)),
        click.option('--locale', default='en', show_default=True, help='Код ISO 639-1'),
        click.option('--language-tag', 'language_tag', default='en-US', show_default=True, help='Тег IETF BCP 47'),
        click.option('--language', default='default', show_default=True, help='Язык каталога надписей'),
        click.option('--site', 'site_id', default=None, help='Идентификатор сайта'),
        click.option('--remote-addr', 'remote_addr', default='', help='Адрес клиента'),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def make_context(cfg, locale, language_tag, language, site_id, remote_addr) -> RequestContext:
    site = SiteDirectory.from_config(cfg.sites).get_site(site_id) if site_id else None
    if site is not None and language == 'default':
        # язык надписей берётся из настроек языка сайта
        language = site.get_language(locale).label_language
    return RequestContext(
        locale=locale,
        language_tag=language_tag,
        site=site,
        language=language,
        remote_addr=remote_addr,
    )


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='Sierrha, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML/JSON (default: configs/sierrha.yaml).'
)
@click.option(
    '--log-level', 'log_level',
    default='WARNING', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Уровень логирования'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Путь к файлу логов (stderr, если не указан)'
)
@click.option(
    '--log-format', 'log_format',
    default=DEFAULT_FORMAT,
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """Группа команд Sierrha CLI."""
    configure(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format,
    )
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('render', context_settings=CONTEXT_SETTINGS)
@request_options
@click.pass_context
def render(ctx, status, locale, language_tag, language, site_id, remote_addr):
    """Вывести страницу ошибки для кода STATUS."""
    cfg = ctx.obj['config']
    try:
        handler = build_handler(status, cfg, transport=AiohttpTransport(timeout=cfg.request_timeout))
        context = make_context(cfg, locale, language_tag, language, site_id, remote_addr)
        response = handler.handle_page_error(context, message=f'CLI request for {status}')
    except ImmediateAbort as abort:
        click.echo(abort.response.body)
        print_error(f'Немедленный ответ со статусом {abort.response.status_code}')
    except Exception as e:
        print_error(f'Ошибка при обработке: {e}')
    click.echo(response.body)


@cli.command('resolve', context_settings=CONTEXT_SETTINGS)
@request_options
@click.pass_context
def resolve(ctx, status, locale, language_tag, language, site_id, remote_addr):
    """Показать URL страницы ошибки для кода STATUS."""
    cfg = ctx.obj['config']
    try:
        handler = build_handler(status, cfg, transport=AiohttpTransport(timeout=cfg.request_timeout))
        context = make_context(cfg, locale, language_tag, language, site_id, remote_addr)
        resolved = handler.resolve(context)
    except Exception as e:
        print_error(f'Ошибка при разрешении ссылки: {e}')
    click.echo(resolved.url)
    if resolved.page_id:
        click.echo(f'page id: {resolved.page_id}')


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
