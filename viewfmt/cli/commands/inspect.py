"""
Inspection commands: dump the token stream or node tree of a template.
"""

import argparse

from rich.console import Console
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from ...parser import (
    Comment,
    Doctype,
    Element,
    Node,
    PhpBlock,
    PhpEcho,
    Token,
    TokenKind,
    parse,
    tokenize,
)
from ..context import read_template, resolve_template_paths
from ..errors import handle_cli_exception

_PREVIEW_LIMIT = 60


def _preview(text: str) -> str:
    flat = text.replace("\n", "\\n")
    if len(flat) <= _PREVIEW_LIMIT:
        return flat
    return f"{flat[:_PREVIEW_LIMIT - 3]}..."


def _token_detail(token: Token) -> str:
    if token.kind in (TokenKind.OPEN_TAG, TokenKind.SELF_CLOSING, TokenKind.CLOSE_TAG):
        attrs = " ".join(
            attr.name if attr.value is None else f"{attr.name}={attr.value!r}"
            for attr in token.attributes
        )
        return f"{token.name} {attrs}".rstrip()
    return _preview(token.value)


def build_token_table(tokens, title: str) -> Table:
    table = Table(title=title)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Kind", style="bold blue")
    table.add_column("Value", style="white")
    for index, token in enumerate(tokens):
        table.add_row(str(index), token.kind.value, Text(_token_detail(token)))
    return table


def _node_label(node: Node) -> Text:
    if isinstance(node, Element):
        attrs = "".join(
            f" {attr.name}" if attr.value is None else f' {attr.name}="{attr.value}"'
            for attr in node.attributes
        )
        return Text(f"<{node.name}{attrs}>", style="bold green")
    if isinstance(node, PhpBlock):
        return Text(f"php: {_preview(node.code)}", style="magenta")
    if isinstance(node, PhpEcho):
        return Text(f"echo: {_preview(node.code)}", style="cyan")
    if isinstance(node, Doctype):
        return Text(f"doctype: {node.text}", style="yellow")
    if isinstance(node, Comment):
        return Text(f"comment: {_preview(node.text.strip())}", style="dim")
    return Text(f"text: {_preview(node.text)!r}")


def _add_nodes(branch: Tree, nodes) -> None:
    for node in nodes:
        child = branch.add(_node_label(node))
        if isinstance(node, Element):
            _add_nodes(child, node.children)


def build_node_tree(nodes, title: str) -> Tree:
    tree = Tree(Text(title, style="bold"))
    _add_nodes(tree, nodes)
    return tree


def cmd_tokens(args: argparse.Namespace) -> None:
    """Handle the 'tokens' subcommand by printing one token table per file."""
    console = Console()
    try:
        for path in resolve_template_paths(args.paths, args.cli_context):
            tokens = tokenize(read_template(path))
            console.print(build_token_table(tokens, str(path)))
    except Exception as exc:
        handle_cli_exception(exc, verbose=getattr(args, "verbose", False))


def cmd_tree(args: argparse.Namespace) -> None:
    """Handle the 'tree' subcommand by printing the node tree of each file."""
    console = Console()
    try:
        for path in resolve_template_paths(args.paths, args.cli_context):
            nodes = parse(tokenize(read_template(path)))
            console.print(build_node_tree(nodes, str(path)))
    except Exception as exc:
        handle_cli_exception(exc, verbose=getattr(args, "verbose", False))
