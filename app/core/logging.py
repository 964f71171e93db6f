import logging
import logging.config
from pathlib import Path
from app.core.config import settings

LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {
            "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        },
        "detailed": {
            "format": "%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(lineno)d - %(message)s"
        }
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "level": "INFO",
            "formatter": "default",
            "stream": "ext://sys.stdout"
        }
    },
    "root": {
        "level": "INFO",
        "handlers": ["console"]
    },
    "loggers": {
        "app": {
            "level": "INFO",
            "handlers": ["console"],
            "propagate": False
        },
        "app.middleware.logging": {
            "level": "INFO",
            "handlers": ["console"],
            "propagate": False
        },
        "uvicorn.access": {
            "level": "WARNING",
            "handlers": ["console"],
            "propagate": False
        }
    }
}

def _file_handlers(log_dir: Path) -> dict:
    return {
        "file": {
            "class": "logging.handlers.RotatingFileHandler",
            "level": "INFO",
            "formatter": "detailed",
            "filename": str(log_dir / "app.log"),
            "maxBytes": 10485760,
            "backupCount": 5
        },
        "error_file": {
            "class": "logging.handlers.RotatingFileHandler",
            "level": "ERROR",
            "formatter": "detailed",
            "filename": str(log_dir / "error.log"),
            "maxBytes": 10485760,
            "backupCount": 5
        }
    }

def configure_logging():
    config = {
        **LOGGING_CONFIG,
        "handlers": dict(LOGGING_CONFIG["handlers"]),
        "root": dict(LOGGING_CONFIG["root"]),
        "loggers": {name: dict(cfg) for name, cfg in LOGGING_CONFIG["loggers"].items()},
    }
    config["root"]["level"] = settings.LOG_LEVEL
    config["loggers"]["app"]["level"] = settings.LOG_LEVEL

    if settings.LOG_TO_FILE:
        log_dir = Path(settings.LOG_DIR)
        log_dir.mkdir(exist_ok=True)
        config["handlers"].update(_file_handlers(log_dir))
        config["root"]["handlers"] = ["console", "file", "error_file"]
        for name in ("app", "app.middleware.logging"):
            config["loggers"][name]["handlers"] = ["console", "file"]

    logging.config.dictConfig(config)
