"""CLI helpers for entity resolution."""

from __future__ import annotations

import click
from finstate.cli.error_handling import handle_domain_error
from finstate.domain.entity import EntityService
from finstate.domain.errors import NotFoundError


def resolve_entity_or_exit(ctx: click.Context, entity: str) -> int:
    """Resolve entity name or ID, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return EntityService(ctx.obj["db"]).resolve_entity(entity)
    except NotFoundError as exc:
        handle_domain_error(ctx, exc)
