"""Entry point for ``python -m treeweave`` and the ``treeweave`` console script."""

from __future__ import annotations

from typing import Iterable

import click
import typer

from treeweave.cli.main import app


def main(argv: Iterable[str] | None = None) -> int:
    """Execute the treeweave CLI and return its exit code."""

    args = list(argv) if argv is not None else None
    try:
        return app(prog_name="treeweave", args=args, standalone_mode=False) or 0
    except typer.Exit as exc:
        return exc.exit_code
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.exceptions.Abort:
        click.echo("Aborted!", err=True)
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
