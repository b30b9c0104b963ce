"""
Command Line Interface for run-on-arch.
"""
import os
import click
from ..PARSERS.input_parser import InputParser
from ..MANAGERS.build_orchestrator import BuildOrchestrator
from ..MODELS.action_layout import ActionLayout
from ..errors import RunOnArchError


@click.group()
@click.option('--action-dir', '-C', envvar='RUN_ON_ARCH_HOME', default='.',
              type=click.Path(file_okay=False), help='Root of the action checkout')
@click.option('--env-file', '-e', type=click.Path(exists=True, dir_okay=False),
              help='Dotenv file with INPUT_* and GITHUB_* values')
@click.pass_context
def cli(ctx, action_dir, env_file):
    """
    run-on-arch - run CI builds on emulated architectures.

    Inputs are read from INPUT_* environment variables, as provided by the
    CI platform.
    """
    ctx.ensure_object(dict)
    ctx.obj['layout'] = ActionLayout(root=os.path.abspath(action_dir))
    if env_file:
        ctx.obj['parser'] = InputParser.from_env_file(env_file)
    else:
        ctx.obj['parser'] = InputParser()


def _orchestrator(ctx) -> BuildOrchestrator:
    parser = ctx.obj['parser']
    config = parser.parse()
    return BuildOrchestrator(config, ctx.obj['layout'], base_env=parser.environ)


def escape_annotation(message: str) -> str:
    """Encodes a message so the CI platform shows it as one annotation."""
    return message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def _fail(ctx, error: RunOnArchError):
    click.echo(f"::error::{escape_annotation(str(error))}")
    ctx.exit(1)


@cli.command()
@click.pass_context
def run(ctx):
    """Generate the build files and run the build container."""
    try:
        _orchestrator(ctx).run()
    except RunOnArchError as e:
        _fail(ctx, e)


@cli.command()
@click.pass_context
def plan(ctx):
    """Generate the build files and print the driver command without running it."""
    try:
        execution_plan = _orchestrator(ctx).prepare()
    except RunOnArchError as e:
        _fail(ctx, e)
        return

    click.echo(f"{'DOCKERFILE':12} {execution_plan.image_definition}")
    click.echo(f"{'CONTAINER':12} {execution_plan.container_name}")
    click.echo(f"{'COMMAND':12} {' '.join(execution_plan.command())}")


def main():
    """
    Main entry point for the CLI.
    """
    cli(obj={})


if __name__ == '__main__':
    main()
