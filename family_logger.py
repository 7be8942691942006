import logging
import sys

console_handler = logging.StreamHandler(sys.stdout)
console_handler.setFormatter(logging.Formatter(
    '%(asctime)s - %(filename)s:%(lineno)d - %(levelname)s - %(message)s',
    '%Y-%m-%d %H:%M:%S'
))

# Streamlit installs its own root handlers; only the app logger is ours
logger = logging.getLogger('family_hierarchy')
logger.setLevel(logging.INFO)
if not logger.handlers:
    logger.addHandler(console_handler)
logger.propagate = False

noisy_loggers = ['urllib3', 'matplotlib', 'PIL', 'watchdog', 'fsevents']

for log_name in noisy_loggers:
    logging.getLogger(log_name).setLevel(logging.WARNING)


def set_log_level(level) -> None:
    """Set the logging level for the application logger."""
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level}")
        level = resolved
    logger.setLevel(level)
