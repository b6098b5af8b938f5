import sys

import click

from sg_sync import fanout
from sg_sync.config import SyncConfig, load_env
from sg_sync.errors import SgSyncError, UsageError
from sg_sync.locator import resolve
from sg_sync.public_ip import IP_SERVICE_URL, AddressResolver, host_cidr
from sg_sync.pylog import get_logger, setup_logging
from sg_sync.sentry import setup_sentry
from sg_sync.session import ec2_client, load_session

logger = get_logger("cli")

RULE = "-" * 83


def sync(config, cancel_event=None):
    """Discover the address, resolve the groups, then fan out.

    Setup steps run one after another and raise SetupError before any
    rule is touched. Returns ``(target_cidr, region, BatchResult)``.
    """
    address = AddressResolver(config.ip_url).resolve()
    target_cidr = host_cidr(address)

    session = load_session(config.profile, config.region)
    client = ec2_client(session)

    logger.info("Resolving and validating target Security Group(s)")
    group_ids = resolve(
        client,
        group_ids=config.group_ids,
        tag_names=config.tag_names,
        max_workers=config.max_workers,
    )
    logger.info("Resolved %s unique Security Group ID(s) to process: %s", len(group_ids), group_ids)

    result = fanout.run(
        client,
        group_ids,
        target_cidr,
        config.description,
        max_workers=config.max_workers,
        cancel_event=cancel_event,
    )
    return target_cidr, session.region_name, result


def print_summary(config, target_cidr, region, result):
    click.echo(RULE)
    click.echo("Sync Process Summary:")
    click.echo(f"  Allowed TCP traffic from: {target_cidr}")
    click.echo(f"  Rule description: {config.description}")
    click.echo(f"  Using AWS Profile: {config.profile}")
    click.echo(f"  Using AWS Region: {region or ''}")
    click.echo(f"  Total Security Groups Processed: {result.total}")
    click.echo(f"  Successfully Synced: {result.success_count}")
    click.echo(f"  Failed: {len(result.failures)}")
    if result.failures:
        click.echo("  Errors Encountered:")
        for group_id, error in result.failures:
            click.echo(f"    - [{group_id}] {error}")
        click.echo(RULE)
    else:
        click.echo(RULE)
        click.echo("All specified Security Groups synced successfully.")


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("--my-name", help="Rule description identifying this host's entry (required)")
@click.option(
    "--profile",
    default="default",
    show_default=True,
    envvar="SG_SYNC_PROFILE",
    help="AWS profile name from credentials",
)
@click.option("--sg-id", help="Comma-separated list of target Security Group IDs")
@click.option("--sg-tag-name", help="Comma-separated list of target Security Group tag 'Name' values")
@click.option("--region", envvar="SG_SYNC_REGION", help="AWS region, overrides the profile's")
@click.option("--ip-url", default=IP_SERVICE_URL, show_default=True, help="Public IP lookup service")
@click.option("--max-workers", type=int, default=10, show_default=True, help="Groups synced in parallel")
@click.option("--debug", is_flag=True, envvar="DEBUG", help="Verbose logging")
@click.pass_context
def main(ctx, my_name, profile, sg_id, sg_tag_name, region, ip_url, max_workers, debug):
    """Allow TCP ingress from this host's public IP on AWS security groups."""
    try:
        config = SyncConfig.from_flags(
            my_name,
            sg_id=sg_id,
            sg_tag_name=sg_tag_name,
            profile=profile,
            region=region,
            ip_url=ip_url,
            max_workers=max_workers,
            debug=debug,
        )
    except UsageError as e:
        click.echo(f"Error: {e}", err=True)
        click.echo(ctx.get_usage(), err=True)
        ctx.exit(1)

    setup_logging(config.debug)
    setup_sentry(debug=config.debug)

    try:
        target_cidr, region, result = sync(config)
    except SgSyncError as e:
        logger.error("%s", e)
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    print_summary(config, target_cidr, region, result)
    ctx.exit(0 if result.ok else 1)


def cli(args=None):
    load_env()
    try:
        code = main.main(args=args, prog_name="sg-sync", standalone_mode=False)
    except click.exceptions.Abort:
        click.echo("Aborted!", err=True)
        code = 1
    except click.ClickException as e:
        e.show()
        code = 1
    sys.exit(code or 0)


if __name__ == "__main__":
    cli()
