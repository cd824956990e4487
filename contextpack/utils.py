import os
import re
import json
import datetime as dt
import logging
from logging.handlers import TimedRotatingFileHandler
from typing import Optional

import yaml
from jsonschema import validate, Draft202012Validator
from jsonschema.exceptions import ValidationError

# ---------- Config loading ----------

def load_file(path: str) -> str:
    with open(path, "r", encoding="utf-8") as f:
        return f.read()

def validate_config(cfg: dict):
    here = os.path.dirname(os.path.abspath(__file__))
    schema_path = os.path.join(here, "schemas", "config.schema.json")
    schema = json.loads(load_file(schema_path))
    try:
        validate(instance=cfg, schema=schema, cls=Draft202012Validator)
    except ValidationError as e:
        raise ValueError(f"Config validation error: {e.message} at {list(e.path)}") from e

def load_config(path: Optional[str]) -> dict:
    """Read and validate a YAML config file. A missing path yields an empty config."""
    if not path:
        return {}
    cfg = yaml.safe_load(load_file(path)) or {}
    validate_config(cfg)
    return cfg

# ---------- Logging ----------

_LOGGER_INITIALIZED = False

class JsonFormatter(logging.Formatter):
    def format(self, record):
        payload = {
            "ts": dt.datetime.fromtimestamp(record.created, dt.timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)

def _build_logger():
    global _LOGGER_INITIALIZED
    if _LOGGER_INITIALIZED:
        return

    level = os.getenv("LOG_LEVEL", "INFO").upper()
    # File logging is opt-in so library callers stay free of filesystem writes
    log_dir = os.getenv("LOG_DIR")
    json_mode = os.getenv("LOG_JSON", "false").lower() == "true"

    logger = logging.getLogger()
    logger.setLevel(getattr(logging, level, logging.INFO))

    if json_mode:
        fmt = JsonFormatter()
    else:
        fmt = logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")

    ch = logging.StreamHandler()
    ch.setLevel(logger.level)
    ch.setFormatter(fmt)
    logger.addHandler(ch)

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        fh = TimedRotatingFileHandler(os.path.join(log_dir, "contextpack.log"), when="D", backupCount=7, encoding="utf-8")
        fh.setLevel(logger.level)
        fh.setFormatter(fmt)
        logger.addHandler(fh)

    _LOGGER_INITIALIZED = True

def get_logger(name: str = None) -> logging.Logger:
    _build_logger()
    return logging.getLogger(name if name else __name__)

# ---------- Secret redaction ----------

def redact_secrets(s: str) -> str:
    """Redact sensitive information from strings for safe logging."""
    if not s:
        return s

    env_keys = ["BRAVE_API_KEY"]

    redacted = s
    for k in env_keys:
        v = os.getenv(k)
        if v and len(v) > 3:
            redacted = redacted.replace(v, "***")

    pattern_flags = re.IGNORECASE
    redacted = re.sub(r"(x-subscription-token[\"']?\s*[:=]\s*[\"']?)[^\s\"',}]+", r"\1***", redacted, flags=pattern_flags)
    redacted = re.sub(r"(api_key=)([^\s&]+)", r"\1***", redacted, flags=pattern_flags)
    redacted = re.sub(r"(token=)([^\s&]+)", r"\1***", redacted, flags=pattern_flags)

    return redacted
