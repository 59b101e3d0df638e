import click

from nsidc.linebuffer import config
from nsidc.linebuffer import linebuffer


@click.group(epilog="For detailed help on each command, run: linebuffer COMMAND --help")
def cli():
    """The linebuffer utility reports every indexed point lying within a
    given distance of a polyline, using only circular radius queries
    against the point index."""
    pass


@cli.command()
@click.option("-c", "--config", help="Path to configuration file to create or replace")
def init(config):
    """Populates a configuration file based on user input."""
    click.echo(linebuffer.banner())
    config = linebuffer.init_config(config)
    click.echo(f"Initialized the linebuffer configuration file {config}")


@cli.command()
@click.option("-c", "--config", "config_filename", help="Path to configuration file to display", required=True)
def info(config_filename):
    """Summarizes the contents of a configuration file."""
    click.echo(linebuffer.banner())
    linebuffer.init_logging()
    configuration = config.configuration(config.config_parser_factory(config_filename), {})
    configuration.show()


@cli.command()
@click.option("-c", "--config", "config_filename", help="Path to configuration file", required=True)
@click.option("-w", "--width", "buffer_width", type=float, help="Buffer width in meters.", required=False)
@click.option("-o", "--output", "output_file", help="GeoJSON file to write results to.", required=False)
def analyze(config_filename, buffer_width, output_file):
    """Runs a buffer analysis based on configuration file contents."""
    click.echo(linebuffer.banner())
    overrides = {
        "buffer_width": buffer_width,
        "output_file": output_file,
    }
    try:
        configuration = config.configuration(config.config_parser_factory(config_filename), overrides)
        linebuffer.init_logging()
        configuration.show()
        linebuffer.process(configuration)
    except Exception as e:
        click.echo(f"\nUnable to run the analysis: {e}", err=True)
        raise SystemExit(1)
    click.echo(f"Analyzed legs using the configuration file {config_filename}")


if __name__ == "__main__":
    cli()
