"""
CLI интерфейс для htmlview.

Использование:
    htmlview render comment.html --linkify
    htmlview preprocess comment.html
    htmlview show comment.html
    htmlview config set-linkify true
"""

import json
import logging
import sys

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from htmlview.config import get_config_manager
from htmlview.exceptions import ConfigError
from htmlview.models import DisplayNode
from htmlview.compiler import TreeCompiler
from htmlview.pipeline import prepare_markup, process_html

console = Console()


def error(message: str) -> None:
    """Вывести ошибку."""
    console.print(f"[red]✗[/red] {message}")


def success(message: str) -> None:
    """Вывести успех."""
    console.print(f"[green]✓[/green] {message}")


def info(message: str) -> None:
    """Вывести информацию."""
    console.print(f"[blue]ℹ[/blue] {message}")


def _noop(url: str) -> None:
    pass


def _configured_linkify() -> bool:
    return get_config_manager().get_config().linkify


def _add_branch(tree: Tree, node: DisplayNode) -> None:
    label = f"[bold]{node.style_key.value}[/bold]"
    if node.container.value != "text":
        label += f" [magenta]({node.container.value})[/magenta]"
    if node.handlers is not None:
        label += f" [blue]→ {escape(node.handlers.href)}[/blue]"
    if node.is_leaf:
        tree.add(f"{label} [green]{escape(repr(node.content))}[/green]")
        return
    branch = tree.add(label)
    for child in node.content:
        _add_branch(branch, child)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Показывать сообщения лога")
@click.pass_context
def main(ctx, verbose: bool):
    """htmlview - компилятор HTML в нативное дерево отображения."""
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.argument("source", type=click.File("r", encoding="utf-8"))
@click.option("--linkify/--no-linkify", default=_configured_linkify, envvar="HTMLVIEW_LINKIFY",
              help="Оборачивать голые URL в ссылки (по умолчанию: из конфига)")
@click.option("--json", "as_json", is_flag=True, help="Вывести дерево в JSON")
def render(source, linkify: bool, as_json: bool):
    """Скомпилировать SOURCE и вывести дерево отображения."""
    html = source.read()
    # Жесты по ссылкам здесь не нужны
    compiler = TreeCompiler(on_open=_noop, on_share=_noop)
    nodes = process_html(html, linkify, compiler) or []

    if as_json:
        click.echo(json.dumps([node.to_dict() for node in nodes], indent=2, ensure_ascii=False))
        return

    if not nodes:
        info("Нечего отображать")
        return

    tree = Tree(f"[bold]{escape(source.name)}[/bold]")
    for node in nodes:
        _add_branch(tree, node)
    console.print(tree)


@main.command()
@click.argument("source", type=click.File("r", encoding="utf-8"))
@click.option("--linkify/--no-linkify", default=_configured_linkify, envvar="HTMLVIEW_LINKIFY",
              help="Оборачивать голые URL в ссылки (по умолчанию: из конфига)")
def preprocess(source, linkify: bool):
    """Вывести SOURCE в том виде, в каком он уходит парсеру."""
    click.echo(prepare_markup(source.read(), linkify))


@main.command()
@click.argument("source", type=click.File("r", encoding="utf-8"), required=False)
@click.option("--linkify/--no-linkify", default=_configured_linkify, help="Начальное состояние linkify")
def show(source, linkify: bool):
    """Открыть окно живого предпросмотра."""
    from htmlview.gui import run_gui

    run_gui(source.read() if source else "", linkify)


# ===== CONFIG COMMANDS =====

@main.group()
def config():
    """Настройки просмотрщика."""
    pass


@config.command("show")
def config_show():
    """Показать текущую конфигурацию."""
    manager = get_config_manager()
    current = manager.get_config()

    table = Table(title="Конфигурация htmlview")
    table.add_column("Параметр", style="cyan")
    table.add_column("Значение")
    for key, value in current.model_dump().items():
        table.add_row(key, str(value))
    console.print(table)
    info(f"Файл: {manager.config_file}")


@config.command("set-linkify")
@click.argument("enabled", type=click.BOOL)
def config_set_linkify(enabled: bool):
    """Установить флаг linkify по умолчанию."""
    get_config_manager().set_linkify(enabled)
    success(f"linkify = {enabled}")


@config.command("set-dark")
@click.argument("enabled", type=click.BOOL)
def config_set_dark(enabled: bool):
    """Включить или выключить тёмную тему."""
    get_config_manager().set_dark_mode(enabled)
    success(f"dark_mode = {enabled}")


@config.command("set-pre-ratio")
@click.argument("ratio", type=float)
def config_set_pre_ratio(ratio: float):
    """Максимальная высота блоков кода как доля высоты экрана."""
    try:
        get_config_manager().set_pre_max_height_ratio(ratio)
    except ConfigError as e:
        error(f"{e.message}")
        sys.exit(1)
    success(f"pre_max_height_ratio = {ratio}")


@config.command("reset")
def config_reset():
    """Сбросить конфигурацию по умолчанию."""
    get_config_manager().reset()
    success("Конфигурация сброшена")


if __name__ == "__main__":
    main()
