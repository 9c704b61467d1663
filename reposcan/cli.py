#!/usr/bin/env python3

import click
import yaml
import sys

from reposcan.config import load_config, configure_logging, logger
from reposcan.errors import ReposcanError
from reposcan.exit_codes import SUCCESS, get_exit_code_for_exception
from reposcan.render import render_records_table
from reposcan.services import DiscoveryService, StaleBranchService
from reposcan.services.stale_branches import group_reports, summary_lines
from reposcan.slug import parse_slug, slug_from_repo_path


def _fail(exc: Exception):
    """Report an error on stderr and exit with its mapped code."""
    click.echo(f"Error: {exc}", err=True)
    sys.exit(get_exit_code_for_exception(exc))


@click.group()
@click.version_option(package_name="reposcan")
@click.option('-v', '--verbose', count=True, help='Increase log verbosity (-vv for debug)')
@click.pass_context
def cli(ctx, verbose):
    """reposcan - find local git repositories and their GitHub slugs."""
    ctx.ensure_object(dict)
    config = load_config()
    ctx.obj['config'] = config

    level = config.get('logging', {}).get('level', 'WARNING')
    if verbose == 1:
        level = 'INFO'
    elif verbose > 1:
        level = 'DEBUG'
    configure_logging(level)


@cli.command('discover')
@click.argument('paths', nargs=-1, type=click.Path())
@click.option('--strict', is_flag=True, help='Fail on the first missing or unreadable root')
@click.option('--workers', '-j', type=int, default=None, help='Scan this many roots concurrently')
@click.option('--no-slugs', is_flag=True, help='Do not read remote URLs')
@click.option('--remote', default=None, help='Remote that provides the slug (default: origin)')
@click.option('--pretty', is_flag=True, help='Display as a table')
@click.pass_context
def discover_handler(ctx, paths, strict, workers, no_slugs, remote, pretty):
    """Discover git repositories under PATHS (default: configured directories).

    Each PATH is either a repository, a directory of repositories, or a
    directory of organization directories holding repositories.
    Output is one JSON object per repository.
    """
    service = DiscoveryService(config=ctx.obj['config'])
    try:
        result = service.discover(
            list(paths) if paths else None,
            strict=True if strict else None,
            resolve_slugs=False if no_slugs else None,
            workers=workers,
            remote=remote,
        )
    except ReposcanError as e:
        _fail(e)

    if pretty:
        render_records_table(result.records)
    else:
        for record in result:
            click.echo(record.to_jsonl())

    if not result.records and not result.warnings:
        logger.info("No repositories found")
    sys.exit(SUCCESS)


@cli.command('slug')
@click.argument('directory', default='.', type=click.Path())
@click.option('--remote', default=None, help='Remote to read (default: origin)')
@click.pass_context
def slug_handler(ctx, directory, remote):
    """Print the org/repo slug of the repository containing DIRECTORY."""
    config = ctx.obj['config']
    remote = remote or config.get('general', {}).get('remote', 'origin')
    try:
        slug = slug_from_repo_path(directory, remote=remote)
    except ReposcanError as e:
        _fail(e)
    click.echo(slug)


@cli.command('parse')
@click.argument('url')
def parse_handler(url):
    """Print the org/repo slug of a remote URL."""
    slug = parse_slug(url)
    if slug is None:
        _fail(ValueError(f"Not a recognized remote URL: {url}"))
    click.echo(slug)


@cli.command('stale')
@click.argument('days', type=click.IntRange(min=0))
@click.argument('paths', nargs=-1, type=click.Path())
@click.option('--ref', 'ref', default=None, help='Refs to check (default: refs/remotes/<remote>)')
@click.option('--remote', default=None, help='Remote to fetch and strip from branch names (default: origin)')
@click.option('--no-fetch', is_flag=True, help='Do not run git fetch --prune first')
@click.option('--workers', '-j', type=int, default=None, help='Check this many repositories concurrently')
@click.option('--detailed', is_flag=True, help='Print every branch as YAML')
@click.pass_context
def stale_handler(ctx, days, paths, ref, remote, no_fetch, workers, detailed):
    """List remote branches with no commits in the last DAYS days.

    Repositories are discovered under PATHS (default: configured
    directories). The summary shows, per repository, each committer
    with their stale branch count and the age of their oldest branch.
    """
    config = ctx.obj['config']
    remote = remote or config.get('general', {}).get('remote', 'origin')
    ref = ref or f"refs/remotes/{remote}"

    service = DiscoveryService(config=config)
    try:
        result = service.discover(list(paths) if paths else None, workers=workers, remote=remote)
    except ReposcanError as e:
        _fail(e)

    reports = StaleBranchService(config=config).scan(
        result.records,
        days,
        ref=ref,
        fetch=not no_fetch,
        remote=remote,
        workers=service.worker_count(workers),
    )

    if not reports:
        logger.info(f"No branches older than {days} days")
    elif detailed:
        click.echo(yaml.safe_dump(group_reports(reports), default_flow_style=False, sort_keys=False), nl=False)
    else:
        for line in summary_lines(reports):
            click.echo(line)
    sys.exit(SUCCESS)


def main():
    cli()

if __name__ == "__main__":
    main()
