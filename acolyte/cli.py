"""
Acolyte CLI - authoring tools for rule element content.

Usage:
    acolyte validate FILE     Check a rules YAML file
    acolyte template          Print the empty rules template
    acolyte fmt FILE          Re-dump a rules file in canonical form
    acolyte keys              List the registered rule element keys
    acolyte prepare FILE      Prepare an actor file and resolve a domain
"""

import logging
import sys
from pathlib import Path

import click
import yaml

from acolyte import __version__
from acolyte.config import RulesConfig
from acolyte.engine.documents import Actor
from acolyte.engine.errors import AuthoringError
from acolyte.engine.rules import get_all_rule_elements
from acolyte.engine.systems.authoring import YAML_TEMPLATE, check_text, from_text, to_text
from acolyte.engine.systems.preparation import PreparationPass


@click.group()
@click.version_option(version=__version__, prog_name="acolyte")
@click.option("--log-level", default=None, help="Logging level (default: ACOLYTE_LOG_LEVEL or WARNING)")
@click.pass_context
def main(ctx: click.Context, log_level: str | None):
    """Acolyte - rule element tooling."""
    config = RulesConfig.from_env()
    if log_level:
        config.log_level = log_level.upper()

    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    ctx.obj = config


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--strict", is_flag=True, help="Treat warnings as errors (or set ACOLYTE_STRICT_AUTHORING)")
@click.pass_obj
def validate(config: RulesConfig, file: Path, strict: bool):
    """Validate the rules list in FILE.

    Exits with status 1 if any error is found.
    """
    strict = strict or config.strict_authoring
    report = check_text(file.read_text(encoding="utf-8"), strict=strict)

    for error in report.errors:
        click.echo(click.style(f"❌ {error}", fg="red"))
    for warning in report.warnings:
        click.echo(click.style(f"⚠️  {warning}", fg="yellow"))

    if not report.is_valid:
        sys.exit(1)

    click.echo(click.style(f"✅ {file.name}: {report.rule_count} rule(s) OK", fg="green"))


@main.command()
def template():
    """Print the empty rules template."""
    click.echo(YAML_TEMPLATE, nl=False)


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--write", "-w", is_flag=True, help="Rewrite FILE in place instead of printing")
def fmt(file: Path, write: bool):
    """Re-dump the rules list in FILE in canonical form."""
    try:
        rules = from_text(file.read_text(encoding="utf-8"))
    except AuthoringError as e:
        click.echo(click.style(f"❌ {e}", fg="red"), err=True)
        sys.exit(1)

    text = to_text(rules)
    if write:
        file.write_text(text, encoding="utf-8")
        click.echo(f"Formatted {file}")
    else:
        click.echo(text, nl=False)


@main.command()
def keys():
    """List the registered rule element keys."""
    for key, element_cls in get_all_rule_elements().items():
        click.echo(f"{key:<20} {element_cls.description}")


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--domain", "-d", "domains", multiple=True, required=True, help="Domain to resolve")
@click.option("--option", "-o", "options", multiple=True, help="Extra roll option for this check")
@click.pass_obj
def prepare(config: RulesConfig, file: Path, domains: tuple[str, ...], options: tuple[str, ...]):
    """Prepare the actor in FILE and print resolved domains.

    FILE is YAML with name, system and items (each with system.rules).

    Examples:
        acolyte prepare acolyte.yaml -d characteristic:bs -o self:aim:full
    """
    try:
        data = yaml.safe_load(file.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        click.echo(click.style(f"❌ YAML parse error: {e}", fg="red"), err=True)
        sys.exit(1)
    if not isinstance(data, dict):
        click.echo(click.style("❌ Actor file must be a mapping", fg="red"), err=True)
        sys.exit(1)

    actor = Actor.from_data(data)
    preparation = PreparationPass(config)
    synthetics = preparation.run(actor)

    for domain in domains:
        resolution = preparation.resolve(actor, domain, options)
        click.echo(click.style(f"{domain}: {resolution.total:+d}", bold=True))
        for modifier in resolution.applied:
            click.echo(f"  {modifier.value:+d}  {modifier.label} ({modifier.source})")

    if synthetics.roll_options:
        click.echo(f"roll options: {', '.join(sorted(synthetics.roll_options))}")
