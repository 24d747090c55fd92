# logging_config.py
import logging
import logging.config
from pathlib import Path

# third-party loggers routed through our handlers, with their own floor
_LIBRARY_LEVELS = {
    'uvicorn': 'INFO',
    'uvicorn.error': 'INFO',
    'uvicorn.access': 'INFO',
    'apscheduler': 'WARNING',  # janitor jobs log their own results
    'pymongo': 'WARNING',
}

def setup_logging(log_level: str = "INFO", log_file: str = None):
    """
    Configure console logging, plus a rotating file when `log_file` is given.

    Args:
        log_level: Level for the application's own loggers
        log_file: Optional path; rotated at 10MB, 5 backups kept
    """
    handlers = ['console']
    config = {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'standard': {
                'format': '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
                'datefmt': '%Y-%m-%d %H:%M:%S'
            },
            'detailed': {
                'format': '%(asctime)s [%(levelname)s] %(name)s:%(lineno)d: %(message)s',
                'datefmt': '%Y-%m-%d %H:%M:%S'
            }
        },
        'handlers': {
            'console': {
                'level': log_level,
                'class': 'logging.StreamHandler',
                'formatter': 'standard',
                'stream': 'ext://sys.stdout'
            }
        },
    }

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        config['handlers']['file'] = {
            'level': log_level,
            'class': 'logging.handlers.RotatingFileHandler',
            'formatter': 'detailed',
            'filename': log_file,
            'maxBytes': 10485760,  # 10MB
            'backupCount': 5
        }
        handlers.append('file')

    loggers = {'': {'handlers': list(handlers), 'level': log_level, 'propagate': False}}
    for name, level in _LIBRARY_LEVELS.items():
        loggers[name] = {'handlers': list(handlers), 'level': level, 'propagate': False}
    config['loggers'] = loggers

    logging.config.dictConfig(config)

    logger = logging.getLogger(__name__)
    logger.info(f"Logging configured with level: {log_level}")
    if log_file:
        logger.info(f"Log file: {log_file}")
