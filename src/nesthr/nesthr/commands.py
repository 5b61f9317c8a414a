from __future__ import annotations

import json

import click
from flask import Flask

from .container import Container
from .core.exceptions import DomainError


def register_commands(app: Flask, container: Container) -> None:
    @app.cli.command("carry-forward")
    @click.argument("org_id")
    @click.argument("from_year", type=int)
    def carry_forward_command(org_id: str, from_year: int):
        """Roll ORG_ID's leave balances over from FROM_YEAR into the next year.

        Exits 1 when some employees failed (re-run to retry them) and 2 when
        the run was refused.
        """

        ctx = click.get_current_context()
        try:
            report = container.carry_forward_service.run(org_id=org_id, from_year=from_year)
        except DomainError as e:
            click.echo(click.style(f"{e.code}: {e}", fg="red"), err=True)
            ctx.exit(2)

        click.echo(json.dumps(report.to_dict(), indent=2))
        if report.failed:
            click.echo(
                click.style(f"{len(report.failed)} employee(s) failed: {', '.join(report.failed_employee_ids)}", fg="yellow"),
                err=True,
            )
            ctx.exit(1)
