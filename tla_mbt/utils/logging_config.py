import logging

import colorlog

LOG_FORMAT = '%(log_color)s[%(levelname)s] %(asctime)s %(name)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
LOG_COLORS = {
    'DEBUG': 'blue',
    'INFO': 'green',
    'WARNING': 'yellow',
    'ERROR': 'red',
    'CRITICAL': 'bold_red',
}


def setup_logging(level: int = logging.INFO) -> None:
    """Configure colored logging for the tla_mbt command line."""
    colorlog.basicConfig(
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        level=level,
        log_colors=LOG_COLORS,
    )
