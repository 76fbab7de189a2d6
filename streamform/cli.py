"""Command line encoder: ``streamform encode -F name=value -F file=@path``."""

from __future__ import annotations

import logging
import mimetypes
import os

import click

from .boundary import random_boundary
from .errors import StreamFormError
from .fields import FieldSet, StreamContent
from .reader import DEFAULT_CHUNK_SIZE
from .sources import close_source


def _split_options(value: str) -> tuple[str, dict[str, str]]:
    """Split ``path;type=text/plain;filename=a.txt`` into the path and its options."""
    path, *pairs = value.split(";")
    options: dict[str, str] = {}
    for pair in pairs:
        key, sep, val = pair.partition("=")
        if not sep:
            raise click.BadParameter(f"expected KEY=VALUE after ';', got {pair!r}", param_hint="'-F'")
        options[key.strip().lower()] = val
    return path, options


def add_form_arg(form: FieldSet, value: str) -> None:
    """
    Add one curl-style -F argument to `form`.

    NAME=VALUE adds a text field, NAME=<PATH a text field read from PATH, and
    NAME=@PATH[;type=MIME][;filename=NAME] streams PATH as a file field.
    """
    name, sep, rest = value.partition("=")
    if not sep or not name:
        raise click.BadParameter(f"expected NAME=VALUE, got {value!r}", param_hint="'-F'")

    if rest.startswith("@"):
        path, options = _split_options(rest[1:])
        content_type = options.pop("type", None) or mimetypes.guess_type(path)[0]
        filename = options.pop("filename", os.path.basename(path))
        if options:
            unknown = ", ".join(sorted(options))
            raise click.BadParameter(f"unknown option(s) for {name!r}: {unknown}", param_hint="'-F'")
        try:
            handle = open(path, "rb")
        except OSError as exc:
            raise click.BadParameter(f"cannot open {path!r}: {exc.strerror}", param_hint="'-F'")
        form.add_stream(name, handle, filename=filename, content_type=content_type)
    elif rest.startswith("<"):
        path = rest[1:]
        try:
            with open(path, encoding="utf-8") as f:
                text = f.read()
        except OSError as exc:
            raise click.BadParameter(f"cannot read {path!r}: {exc.strerror}", param_hint="'-F'")
        form.add_text(name, text)
    else:
        form.add_text(name, rest)


def close_fields(form: FieldSet) -> None:
    """Close the payloads of fields that never made it into a body."""
    for field in form:
        if isinstance(field.content, StreamContent):
            close_source(field.content.payload)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log encoder activity to stderr.")
def main(verbose: bool) -> None:
    """Stream multipart/form-data bodies."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")


@main.command()
@click.option("-F", "--form", "forms", multiple=True, metavar="NAME=VALUE", help="Form field (curl syntax).")
@click.option("-o", "--output", type=click.File("wb"), default="-", help="Body destination (default: stdout).")
@click.option("--chunk-size", type=click.IntRange(min=1), default=DEFAULT_CHUNK_SIZE, show_default=True)
@click.option("--legacy-stream-order", is_flag=True, help="Emit file fields last-added first.")
@click.option("--boundary", default=None, help="Fixed 16-character alphanumeric boundary.")
def encode(forms, output, chunk_size, legacy_stream_order, boundary) -> None:
    """Write an encoded body and print its Content-Type on stderr."""
    form = FieldSet(
        boundary_source=(lambda _length: boundary) if boundary else None,
        legacy_stream_order=legacy_stream_order,
    )
    try:
        for value in forms:
            add_form_arg(form, value)
        body = form.prepare()
    except click.UsageError:
        close_fields(form)
        raise
    except StreamFormError as exc:
        close_fields(form)
        raise click.ClickException(str(exc))

    with body:
        try:
            for chunk in body.iter_bytes(chunk_size):
                output.write(chunk)
        except OSError as exc:
            raise click.ClickException(f"reading payload failed: {exc}")
    output.flush()
    click.echo(f"Content-Type: {body.content_type}", err=True)


@main.command("boundary")
def boundary_cmd() -> None:
    """Print a fresh random boundary token."""
    click.echo(random_boundary())


if __name__ == "__main__":
    main()
