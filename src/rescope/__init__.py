import logging
import sys
from contextlib import contextmanager
from enum import StrEnum
from pathlib import Path
from textwrap import dedent
from typing import Annotated

import typer
from rich.console import Console
from rich.text import Text

from rescope.ast import PrettyAST, PrettyCST, Span
from rescope.model import AnalyzerOptions, Document, identify, load, rename
from rescope.parsing import JsSyntaxError, SourceText, parse_javascript
from rescope.scope import PrettyScope
from rescope.server import server

app = typer.Typer(
    no_args_is_help=True,
    rich_markup_mode="markdown",
)

log = logging.root


class LogLevel(StrEnum):
    Debug = "DEBUG"
    Info = "INFO"
    Warning = "WARNING"
    Error = "ERROR"


@app.callback()
def main(
    log_file: Annotated[
        Path,
        typer.Option(help="The file to write logs to.", dir_okay=False),
    ] = Path("/tmp/rescope.log"),
    log_level: Annotated[
        LogLevel,
        typer.Option(help="The minimum level of messages to log."),
    ] = LogLevel.Info,
):
    logging.basicConfig(
        filename=log_file,
        filemode="w",
        level=log_level.value,
    )


PathArgument = Annotated[
    Path,
    typer.Argument(
        help="The JavaScript file to read, or `-` for stdin.",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        allow_dash=True,
    ),
]

OffsetArgument = Annotated[
    int,
    typer.Argument(
        help="The character offset of the first character of a name.",
        min=0,
    ),
]

StrictOption = Annotated[
    bool,
    typer.Option("--strict", help="Analyze the source as strict mode code."),
]


def read_source(path: Path) -> str:
    return sys.stdin.read() if path == Path("-") else path.read_text()


@contextmanager
def exit_on_syntax_error():
    try:
        yield
    except JsSyntaxError as error:
        typer.echo(str(error), err=True)
        raise typer.Exit(code=2)


def load_or_exit(source: str, strict: bool) -> Document:
    with exit_on_syntax_error():
        return load(source, AnalyzerOptions(implied_strict=strict))


def highlight(source: str, spans: list[tuple[Span, str]]) -> Text:
    text = Text(source)
    for span, style in spans:
        text.stylize(style, span.start, span.end)
    return text


@app.command()
def serve():
    server.start_io()


class TreeType(StrEnum):
    AST = "a"
    TreeSitter = "c"
    Scope = "s"


@app.command()
def tree(
    path: PathArgument,
    tree_type: Annotated[
        TreeType,
        typer.Option(
            "-t",
            "--tree-type",
            help=dedent(
                """\
                The type of tree to print:
                - `a`: The JavaScript AST
                - `c`: The tree-sitter CST
                - `s`: The scope tree
                """
            ),
        ),
    ] = TreeType.AST,
    strict: StrictOption = False,
):
    source = read_source(path)

    match tree_type:
        case TreeType.AST:
            tree = PrettyAST(load_or_exit(source, strict).tree)
        case TreeType.TreeSitter:
            with exit_on_syntax_error():
                tree = PrettyCST(parse_javascript(SourceText(source)))
        case TreeType.Scope:
            tree = PrettyScope(load_or_exit(source, strict).scopes.global_scope)

    Console(markup=False).print(tree)


@app.command("identify")
def identify_command(
    path: PathArgument,
    offset: OffsetArgument,
    strict: StrictOption = False,
):
    """Prints the declaration and the references of the name starting at OFFSET."""
    source = read_source(path)
    identification = identify(load_or_exit(source, strict), offset)

    if identification is None:
        typer.echo(f"No identifiable name at offset {offset}", err=True)
        raise typer.Exit(code=1)

    id, declaration = identification.identifier, identification.declaration
    console = Console(markup=False, highlight=False)
    console.print(f'Identifier: "{id.name}" [{id.span}]')
    console.print(
        "Declaration:",
        "none" if declaration is None else f"[{declaration.span}]",
    )
    console.print(
        "References:",
        ", ".join(f"[{ref.span}]" for ref in identification.references) or "none",
    )
    console.print(
        highlight(
            source,
            [(ref.span, "underline") for ref in identification.references]
            + [(id.span, "bold yellow")]
            + [(d.span, "bold green") for d in [declaration] if d is not None],
        )
    )


@app.command("rename")
def rename_command(
    path: PathArgument,
    offset: OffsetArgument,
    new_name: Annotated[str, typer.Argument(help="The new name.")],
    strict: StrictOption = False,
    write: Annotated[
        bool,
        typer.Option("-w", "--write", help="Write the result back to PATH."),
    ] = False,
):
    """Renames the name starting at OFFSET, with all of its occurrences, to NEW_NAME."""
    source = read_source(path)
    document = load_or_exit(source, strict)
    identification = identify(document, offset)

    if identification is None:
        typer.echo(f"No identifiable name at offset {offset}", err=True)
        raise typer.Exit(code=1)

    renamed = rename(document, identification, new_name)
    assert isinstance(renamed, str)
    log.info(
        'Renamed "%s" to "%s" in %s',
        identification.identifier.name,
        new_name,
        path,
    )

    if write and path != Path("-"):
        path.write_text(renamed)
    else:
        typer.echo(renamed, nl=False)


if __name__ == "__main__":
    app()
