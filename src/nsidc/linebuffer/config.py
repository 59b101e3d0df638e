import configparser
import dataclasses
import logging
import os.path

from nsidc.linebuffer import constants


@dataclasses.dataclass
class Config:
    index_file: str
    legs_file: str
    buffer_width: float
    output_file: str
    query_timeout: float

    def show(self):
        logger = logging.getLogger("linebuffer")
        logger.info("")
        logger.info("Using configuration:")
        for k, v in self.__dict__.items():
            logger.info(f"  + {k}: {v}")


def config_parser_factory(configuration_file):
    """
    Returns a ConfigParser by reading the specified file.
    """
    if configuration_file is None or not os.path.exists(configuration_file):
        raise ValueError(f"Unable to find configuration file {configuration_file}")
    cfg_parser = configparser.ConfigParser(
        interpolation=configparser.ExtendedInterpolation()
    )
    cfg_parser.read(configuration_file)
    return cfg_parser


def _get_configuration_value(section, name, value_type, config_parser, overrides):
    """
    Returns a value from the provided config parser; any value for the key that
    is provided in the 'overrides' dictionary will take precedence.
    """
    if overrides.get(name) is None:
        if value_type is float:
            return config_parser.getfloat(section, name)
        else:
            return config_parser.get(section, name)
    else:
        return overrides.get(name)


def configuration(config_parser, overrides):
    """
    Returns a valid Config object that is populated from the provided config
    parser, with values overriden with anything provided in 'overrides'.
    """
    config_parser["DEFAULT"] = {
        "buffer_width": constants.DEFAULT_BUFFER_WIDTH,
        "output_file": constants.DEFAULT_OUTPUT_FILE,
        "query_timeout": constants.DEFAULT_QUERY_TIMEOUT,
    }
    # Defaults only apply to sections that exist
    for section in [
        constants.SOURCE_SECTION_NAME,
        constants.ANALYSIS_SECTION_NAME,
        constants.DESTINATION_SECTION_NAME,
        constants.SETTINGS_SECTION_NAME,
    ]:
        if not config_parser.has_section(section):
            config_parser.add_section(section)

    try:
        return Config(
            _get_configuration_value(
                constants.SOURCE_SECTION_NAME, "index_file", str, config_parser, overrides
            ),
            _get_configuration_value(
                constants.SOURCE_SECTION_NAME, "legs_file", str, config_parser, overrides
            ),
            _get_configuration_value(
                constants.ANALYSIS_SECTION_NAME, "buffer_width", float, config_parser, overrides
            ),
            _get_configuration_value(
                constants.DESTINATION_SECTION_NAME, "output_file", str, config_parser, overrides
            ),
            _get_configuration_value(
                constants.SETTINGS_SECTION_NAME, "query_timeout", float, config_parser, overrides
            ),
        )
    except (configparser.Error, ValueError) as e:
        raise ValueError(f"Unable to read the configuration file: {e}") from e


def validate(configuration):
    """
    Validates each value in the configuration.
    """
    validations = [
        ["index_file", lambda f: os.path.exists(f), "The index_file does not exist."],
        ["legs_file", lambda f: os.path.exists(f), "The legs_file does not exist."],
        [
            "buffer_width",
            lambda w: w >= constants.MIN_BUFFER_WIDTH,
            f"The buffer_width must be at least {constants.MIN_BUFFER_WIDTH} meters.",
        ],
        ["query_timeout", lambda t: t >= 0, "The query_timeout cannot be negative."],
    ]
    errors = [
        msg for name, fn, msg in validations if not fn(getattr(configuration, name))
    ]
    return len(errors) == 0, errors
