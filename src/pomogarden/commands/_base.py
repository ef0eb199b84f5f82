"""Click base classes that carry an ``--examples`` flag.

``examples`` is plain text, one invocation per line. Passing
``--examples`` prints it and exits before any argument is validated, so
``pomogarden garden name --examples`` works without an ITEM_ID.
"""

from __future__ import annotations

from typing import Any

import click


def _print_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
    if not value or ctx.resilient_parsing:
        return
    command = ctx.command
    click.echo(f"Examples for '{ctx.command_path}':\n")
    click.echo(getattr(command, "examples", "") or "")
    ctx.exit(0)


def examples_option() -> click.Option:
    """The eager ``--examples`` flag shared by every pomogarden command."""
    return click.Option(
        ["--examples"],
        is_flag=True,
        expose_value=False,
        is_eager=True,
        callback=_print_examples,
        help="Show usage examples and exit.",
    )


class _ExamplesMixin:
    examples: str | None

    def _attach_examples(self, examples: str | None) -> None:
        self.examples = examples
        if examples:
            self.params.append(examples_option())  # type: ignore[attr-defined]


class PomoCommand(_ExamplesMixin, click.Command):
    """A command accepting ``examples=``."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._attach_examples(examples)


class PomoGroup(_ExamplesMixin, click.Group):
    """A group accepting ``examples=``; its subcommands are :class:`PomoCommand`."""

    command_class = PomoCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._attach_examples(examples)
