import json
import logging
import os

HOME = os.path.expanduser("~")
XDG_CONFIG_HOME = os.environ.get("XDG_CONFIG_HOME")
CONFIG_HOME = XDG_CONFIG_HOME if XDG_CONFIG_HOME else os.path.join(HOME, ".config")
CONFIG_DIR = os.path.join(CONFIG_HOME, "tsvgrid")
CONFIG_JSON = os.path.join(CONFIG_DIR, "config.json")
LOG_PATH = os.path.join(CONFIG_DIR, "tsvgrid.log")

logger = logging.getLogger("tsvgrid.config")

# default settings
ENABLED_DEFAULT = True
TREAT_FIRST_ROW_AS_HEADER_DEFAULT = True
ADD_SERIAL_INDEX_DEFAULT = False
CHUNK_SIZE_DEFAULT = 1000
RELOAD_DEBOUNCE_SECONDS_DEFAULT = 0.25
CLIPBOARD_INTERFACE_COMMAND_DEFAULT = None

BOOLEAN_SETTINGS = ("enabled", "treat_first_row_as_header", "add_serial_index")


def ensure_config_dirs():
    os.makedirs(CONFIG_DIR, exist_ok=True)


def default_config():
    return {
        "enabled": ENABLED_DEFAULT,
        "treat_first_row_as_header": TREAT_FIRST_ROW_AS_HEADER_DEFAULT,
        "add_serial_index": ADD_SERIAL_INDEX_DEFAULT,
        "chunk_size": CHUNK_SIZE_DEFAULT,
        "reload_debounce_seconds": RELOAD_DEBOUNCE_SECONDS_DEFAULT,
        "clipboard_interface_command": CLIPBOARD_INTERFACE_COMMAND_DEFAULT,
    }


def load_config():
    cfg = default_config()

    if not os.path.exists(CONFIG_JSON):
        return cfg

    try:
        with open(CONFIG_JSON, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as exc:
        logger.warning("Ignoring unreadable config %s: %s", CONFIG_JSON, exc)
        return cfg

    if not isinstance(data, dict):
        return cfg

    for key in BOOLEAN_SETTINGS:
        if isinstance(data.get(key), bool):
            cfg[key] = data[key]

    chunk = data.get("chunk_size")
    if isinstance(chunk, int) and not isinstance(chunk, bool) and chunk > 0:
        cfg["chunk_size"] = chunk

    delay = data.get("reload_debounce_seconds")
    if isinstance(delay, (int, float)) and not isinstance(delay, bool) and delay >= 0:
        cfg["reload_debounce_seconds"] = float(delay)

    clip_cmd = data.get("clipboard_interface_command")
    if (
        isinstance(clip_cmd, list)
        and clip_cmd
        and all(isinstance(item, str) for item in clip_cmd)
    ):
        cfg["clipboard_interface_command"] = clip_cmd

    return cfg


def save_config(cfg):
    ensure_config_dirs()
    with open(CONFIG_JSON, "w", encoding="utf-8") as f:
        json.dump(cfg, f, indent=2)
        f.write("\n")


def toggle_setting(key: str, cfg=None, saver=None) -> bool:
    """Flip a boolean setting in cfg (the stored config by default) and persist it."""
    if key not in BOOLEAN_SETTINGS:
        raise KeyError(f"Not a toggleable setting: {key}")
    cfg = load_config() if cfg is None else cfg
    cfg[key] = not cfg.get(key, default_config()[key])
    (saver or save_config)(cfg)
    logger.info("%s set to %s", key, cfg[key])
    return cfg[key]
