# cli.py: CLI оболочка поверх DataFile
from __future__ import annotations

import json
import re
from typing import Any

import click

from jsondatafile import __version__
from jsondatafile.core.datafile import DataFile
from jsondatafile.core.errors import DataFileError, InvalidArgument
from jsondatafile.core.options import DataFileOptions, load_options

_INT_KEY_RE = re.compile(r"-?\d+", re.ASCII)


def _parse_value(text: str) -> Any:
    # "5" -> 5, '{"a":1}' -> dict, всё прочее остаётся строкой
    try:
        return json.loads(text)
    except ValueError:
        return text


def _parse_key(text: str | None) -> str | int | None:
    if text is None:
        return None
    return int(text) if _INT_KEY_RE.fullmatch(text) else text


def _open(ctx: click.Context, path: str) -> DataFile:
    try:
        return DataFile(path, options=ctx.obj)
    except InvalidArgument as e:
        raise click.BadParameter(str(e), ctx=ctx, param_hint="PATH") from e


def _save(df: DataFile) -> None:
    try:
        df.save()
    except DataFileError as e:
        raise click.ClickException(str(e)) from e


path_argument = click.argument("path", type=click.Path(dir_okay=False))


@click.group()
@click.version_option(__version__, prog_name="jsondatafile")
@click.option(
    "--config",
    type=click.Path(exists=True, dir_okay=False),
    help="YAML-файл с опциями (encode_spec_chars, raw_text).",
)
@click.option("--raw-text/--no-raw-text", default=None, help="Не экранировать '/' и не-ASCII.")
@click.option(
    "--encode-spec-chars/--no-encode-spec-chars",
    default=None,
    help="Экранировать < > & ' \" как \\uXXXX.",
)
@click.pass_context
def main(ctx: click.Context, config, raw_text, encode_spec_chars):
    """jsondatafile CLI: чтение и правка JSON-файла данных."""
    try:
        opts: DataFileOptions = load_options(config)
    except InvalidArgument as e:
        raise click.BadParameter(str(e), ctx=ctx, param_hint="--config") from e
    if raw_text is not None:
        opts.raw_text = raw_text
    if encode_spec_chars is not None:
        opts.encode_spec_chars = encode_spec_chars
    ctx.obj = opts


@main.command()
@path_argument
@click.pass_context
def show(ctx, path):
    """Print the whole record as JSON."""
    click.echo(_open(ctx, path).serialize())


@main.command()
@path_argument
@click.argument("name")
@click.option("--default", "default", default=None, help="JSON-значение, если члена нет.")
@click.pass_context
def get(ctx, path, name, default):
    """Print one member as JSON."""
    df = _open(ctx, path)
    fallback = _parse_value(default) if default is not None else None
    click.echo(json.dumps(df.get(name, fallback), ensure_ascii=False))


@main.command(name="set")
@path_argument
@click.argument("name")
@click.argument("value")
@click.pass_context
def set_(ctx, path, name, value):
    """Set member NAME to VALUE (parsed as JSON, else kept as string) and save."""
    df = _open(ctx, path)
    df.set(name, _parse_value(value))
    _save(df)


@main.command()
@path_argument
@click.argument("name")
@click.pass_context
def remove(ctx, path, name):
    """Remove member NAME and save."""
    df = _open(ctx, path)
    df.remove(name)
    _save(df)


@main.command(name="array-add")
@path_argument
@click.argument("array_name")
@click.argument("value")
@click.option("--key", default=None, help="Позиция (целое) или ключ объекта.")
@click.option("--force", is_flag=True, default=False, help="Перезаписать существующий элемент (array_set).")
@click.pass_context
def array_add(ctx, path, array_name, value, key, force):
    """Add VALUE to member ARRAY_NAME and save."""
    df = _open(ctx, path)
    op = df.array_set if force else df.array_add
    op(array_name, _parse_value(value), _parse_key(key))
    _save(df)


@main.command(name="array-remove")
@path_argument
@click.argument("array_name")
@click.option("--key", default=None, help="Удалить элемент по позиции/ключу.")
@click.option("--value", default=None, help="Удалить первое вхождение JSON-значения.")
@click.pass_context
def array_remove(ctx, path, array_name, key, value):
    """Remove one element from member ARRAY_NAME and save."""
    if (key is None) == (value is None):
        raise click.UsageError("Exactly one of --key or --value is required.", ctx=ctx)
    df = _open(ctx, path)
    if key is not None:
        df.array_remove(array_name, _parse_key(key))
    else:
        df.array_remove_value(array_name, _parse_value(value))
    _save(df)


if __name__ == "__main__":
    main()
