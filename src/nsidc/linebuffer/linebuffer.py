import asyncio
import configparser
import logging
import os.path
import sys
from typing import List

from funcy import decorator
from pyfiglet import Figlet
from rich.console import Console
from rich.prompt import Confirm, Prompt
from rich.table import Table

from nsidc.linebuffer import config, constants, io
from nsidc.linebuffer.analyzer import BufferAnalyzer
from nsidc.linebuffer.index import SubscriptionIndex
from nsidc.linebuffer.models import LegResult, unique_matches

CONSOLE_FORMAT = "%(message)s"
LOGFILE_FORMAT = "%(asctime)s|%(levelname)s|%(name)s|%(message)s"


def init_logging():
    logger = logging.getLogger("linebuffer")
    logger.setLevel(logging.DEBUG)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console_handler)

    logfile_handler = logging.FileHandler("linebuffer.log", "w")
    logfile_handler.setLevel(logging.DEBUG)
    logfile_handler.setFormatter(logging.Formatter(LOGFILE_FORMAT))
    logger.addHandler(logfile_handler)

    # Library modules log under nsidc.linebuffer.*
    logging.getLogger("nsidc.linebuffer").setLevel(logging.DEBUG)
    logging.getLogger("nsidc.linebuffer").addHandler(logfile_handler)


@decorator
def log(call):
    logging.getLogger("linebuffer").debug(call._func.__name__)
    return call()


def banner():
    """
    Displays the name of this utility using incredible ASCII-art.
    """
    f = Figlet(font="slant")
    return f.renderText("linebuffer")


def init_config(configuration_file):
    """
    Prompts the user for configuration values and then creates a valid configuration file.
    """
    print(
        """This utility will create a buffer analysis configuration file by prompting """
        """you for values for each of the configuration parameters."""
    )
    print()
    if not configuration_file:
        configuration_file = Prompt.ask("configuration file name", default="example.ini")
    else:
        print(f"Creating configuration file {configuration_file}")
        print()

    if os.path.exists(configuration_file):
        print(f"WARNING: The {configuration_file} already exists.")
        overwrite = Confirm.ask("Overwrite?")
        if not overwrite:
            print("Not overwriting existing file. Exiting.")
            exit(1)

    cfg_parser = configparser.ConfigParser()

    print()
    print(f"{constants.SOURCE_SECTION_NAME} Data Parameters")
    print("--------------------------------------------------")
    cfg_parser.add_section(constants.SOURCE_SECTION_NAME)
    cfg_parser.set(constants.SOURCE_SECTION_NAME, "index_file", Prompt.ask("Indexed points CSV file", default="points.csv"))
    cfg_parser.set(constants.SOURCE_SECTION_NAME, "legs_file", Prompt.ask("Legs JSON file", default="legs.json"))

    print()
    print(f"{constants.ANALYSIS_SECTION_NAME} Parameters")
    print("--------------------------------------------------")
    cfg_parser.add_section(constants.ANALYSIS_SECTION_NAME)
    cfg_parser.set(constants.ANALYSIS_SECTION_NAME, "buffer_width", Prompt.ask("Buffer width in meters", default=str(constants.DEFAULT_BUFFER_WIDTH)))

    print()
    print(f"{constants.DESTINATION_SECTION_NAME} Parameters")
    print("--------------------------------------------------")
    cfg_parser.add_section(constants.DESTINATION_SECTION_NAME)
    cfg_parser.set(constants.DESTINATION_SECTION_NAME, "output_file", Prompt.ask("GeoJSON output file", default=constants.DEFAULT_OUTPUT_FILE))

    print()
    print(f"{constants.SETTINGS_SECTION_NAME} Parameters")
    print("--------------------------------------------------")
    cfg_parser.add_section(constants.SETTINGS_SECTION_NAME)
    cfg_parser.set(constants.SETTINGS_SECTION_NAME, "query_timeout", Prompt.ask("Query timeout in seconds (0 for none)", default=str(constants.DEFAULT_QUERY_TIMEOUT)))

    print()
    print(f"Saving new configuration: {configuration_file}")
    with open(configuration_file, "tw") as file:
        cfg_parser.write(file)

    return configuration_file


def process(configuration: config.Config) -> List[LegResult]:
    """
    Runs a buffer analysis of the configured legs against the configured
    index and writes the results.
    """
    valid, errors = config.validate(configuration)
    if not valid:
        raise ValueError(" ".join(errors))

    index = load_index(configuration)
    legs = load_legs(configuration)
    results = asyncio.run(run_analysis(configuration, index, legs))
    write_results(configuration, results)
    summarize_results(results)
    return results


@log
def load_index(configuration: config.Config):
    return io.load_index(configuration.index_file)


@log
def load_legs(configuration: config.Config):
    return io.load_legs(configuration.legs_file)


async def run_analysis(configuration: config.Config, index, legs) -> List[LegResult]:
    analyzer = BufferAnalyzer(SubscriptionIndex(index))
    pending = analyzer.analyze(legs, configuration.buffer_width)
    if configuration.query_timeout > 0:
        return await asyncio.wait_for(pending, configuration.query_timeout)
    return await pending


@log
def write_results(configuration: config.Config, results: List[LegResult]) -> None:
    io.write_results(results, configuration.output_file)


def summarize_results(results: List[LegResult]) -> None:
    logger = logging.getLogger("linebuffer")

    table = Table(title="Buffer analysis")
    table.add_column("Leg", justify="right")
    table.add_column("Length (m)", justify="right")
    table.add_column("Queries", justify="right")
    table.add_column("Matches", justify="right")
    for n, result in enumerate(results):
        section = result.query_section
        table.add_row(
            str(n),
            f"{section.distance:.1f}",
            str(len(section.sample_points)),
            str(len(result.matches)),
        )
    Console().print(table)

    logger.info(f"Unique matches: {len(unique_matches(results))}")
