# sitebuilder/cli.py
import click
from flask.cli import AppGroup

from sitebuilder.application.cms.search_index import SearchIndexSynchronizer
from sitebuilder.extensions import db
from sitebuilder.models.tenant import Tenant

search_cli = AppGroup("search", help="Search index maintenance.")


@search_cli.command("reindex")
@click.argument("tenant_id")
def reindex_tenant(tenant_id):
    """Regenerate every index entry of TENANT_ID from its blocks."""
    if db.session.get(Tenant, tenant_id) is None:
        raise click.ClickException(f"Unknown tenant: {tenant_id}")

    count = SearchIndexSynchronizer(db.session).rebuild_tenant(tenant_id)
    click.echo(f"Reindexed {count} page(s) for tenant {tenant_id}")


def register_cli(app):
    app.cli.add_command(search_cli)
