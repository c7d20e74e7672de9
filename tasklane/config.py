# Tasklane CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Configuration file discovery, loading, and merging.

Option values can come from three places, in increasing priority:

1. Declared defaults (literals, or callables that receive the resolved values).
2. Configuration files found by walking from the working directory up to the
   home directory. Files closer to the working directory win.
3. The command line.

For a program named `app`, these files are picked up in every directory
visited: `.apprc`, `.apprc.<ext>`, `.app.config.<ext>`, and the `[tool.app]`
table of `pyproject.toml`. `<ext>` is any extension in the loader table. A
file given with `--config` replaces discovery entirely.

Loaders are plain `(path, contents) -> dict` functions keyed by extension,
so callers can register extra formats without touching discovery. Only
config-visible options are taken from files. Every value is rendered back to
command-line text and coerced with the option's type, so a file value goes
through the same conversion as a command-line value.
"""
from __future__ import annotations

import configparser
import json
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping

import toml
import yaml

from tasklane.exceptions import ConfigError
from tasklane.logger import logger
from tasklane.parser.option_types import convert, is_choice, stringify, validate
from tasklane.parser.schema import Option, find_item

Loader = Callable[[Path, str], "dict[str, Any] | None"]

NO_EXT = ""
PYPROJECT = "pyproject.toml"
INI_ROOT = "__root__"


def load_json(path: Path, contents: str) -> dict[str, Any]:
    return json.loads(contents)


def load_yaml(path: Path, contents: str) -> dict[str, Any] | None:
    return yaml.safe_load(contents)


def load_toml(path: Path, contents: str) -> dict[str, Any]:
    return toml.loads(contents)


def load_ini(path: Path, contents: str) -> dict[str, Any]:
    """
    Parse INI text. Keys before the first section header become top-level
    keys, and each section becomes a nested mapping.
    """
    parser = configparser.ConfigParser(interpolation=None)
    parser.optionxform = str  # type: ignore[assignment,method-assign]
    parser.read_string(f"[{INI_ROOT}]\n{contents}", source=str(path))
    result: dict[str, Any] = dict(parser[INI_ROOT])
    for section in parser.sections():
        if section != INI_ROOT:
            result[section] = dict(parser[section])
    return result


def load_no_ext(path: Path, contents: str) -> dict[str, Any] | None:
    """Sniff the format of a file that has no telling extension."""
    if contents.strip().startswith("{"):
        return load_json(path, contents)
    if "=" in contents:
        return load_ini(path, contents)
    return load_yaml(path, contents)


DEFAULT_LOADERS: dict[str, Loader] = {
    NO_EXT: load_no_ext,
    ".json": load_json,
    ".yaml": load_yaml,
    ".yml": load_yaml,
    ".toml": load_toml,
    ".ini": load_ini,
}


def _loaders(extra: Mapping[str, Loader] | None) -> dict[str, Loader]:
    return {**DEFAULT_LOADERS, **(extra or {})}


def config_file_names(name: str, loaders: Mapping[str, Loader] | None = None) -> set[str]:
    """Every file name that discovery picks up for program `name`."""
    names = {PYPROJECT}
    for base in (f".{name}rc", f".{name}.config"):
        for ext in _loaders(loaders):
            names.add(base + ext)
    return names


def discover_config_files(
    name: str,
    cwd: Path | str | None = None,
    stop: Path | str | None = None,
    loaders: Mapping[str, Loader] | None = None,
) -> list[Path]:
    """
    Return config files from `cwd` up to and including `stop` (the home
    directory by default), closest first. Discovery ends at the filesystem
    root when `cwd` is not below `stop`.
    """
    directory = Path(cwd or Path.cwd()).resolve()
    stop_at = Path(stop or Path.home()).resolve()
    wanted = config_file_names(name, loaders)
    found: list[Path] = []
    while True:
        try:
            entries = sorted(directory.iterdir())
        except OSError as error:
            logger.debug("Skipping unreadable directory %s: %s", directory, error)
            entries = []
        found.extend(entry for entry in entries if entry.name in wanted and entry.is_file())
        if directory == stop_at or directory.parent == directory:
            break
        directory = directory.parent
    return found


def read_config_file(
    path: Path | str, name: str, loaders: Mapping[str, Loader] | None = None
) -> dict[str, Any]:
    """
    Load the raw mapping stored in one config file.

    Raises:
        ConfigError: If the file cannot be read, has no loader, or does not
            hold a mapping.
    """
    path = Path(path)
    table = _loaders(loaders)
    try:
        contents = path.read_text(encoding="UTF-8")
    except OSError as error:
        raise ConfigError(f"Could not read config file {path}: {error}") from error

    try:
        if path.name == PYPROJECT:
            data = load_toml(path, contents).get("tool", {}).get(name)
        else:
            ext = path.suffix
            if ext in ("", ".config", ".cfg") or path.name == f".{name}rc":
                ext = NO_EXT
            loader = table.get(ext)
            if loader is None:
                raise ConfigError(f"No loader for config file {path}")
            data = loader(path, contents)
    except ConfigError:
        raise
    except Exception as error:
        raise ConfigError(f"Could not parse config file {path}: {error}") from error

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return data


async def coerce_config(
    raw: Mapping[str, Any], options: Iterable[Option], source: str = "config"
) -> dict[str, Any]:
    """
    Keep the values of config-visible options and coerce them by type.

    Raises:
        ConfigError: A value does not fit its option's type or choices.
    """
    visible = [option for option in options if option.config]
    result: dict[str, Any] = {}
    for key, value in raw.items():
        option = find_item(visible, key)
        if option is None:
            logger.debug("Ignoring unknown config key '%s' from %s", key, source)
            continue
        if option.array:
            parts = value if isinstance(value, (list, tuple)) else stringify(value).split(", ")
            texts = [stringify(part) for part in parts]
        else:
            texts = [stringify(value)]
        for text in texts:
            if not (
                await validate(option.type, text)
                and await is_choice(option.type, text, option.choices)
            ):
                raise ConfigError(
                    f"Invalid value '{text}' for option {option.name} in {source}"
                )
        converted = [await convert(option.type, text) for text in texts]
        result[option.name] = converted if option.array else converted[0]
    return result


async def load_config_file(
    path: Path | str,
    name: str,
    options: Iterable[Option],
    loaders: Mapping[str, Loader] | None = None,
) -> dict[str, Any]:
    """Load and coerce a single config file."""
    raw = read_config_file(path, name, loaders)
    logger.debug("Loaded %d config key(s) from %s", len(raw), path)
    return await coerce_config(raw, options, str(path))


async def load_config(
    name: str,
    options: Iterable[Option],
    cwd: Path | str | None = None,
    stop: Path | str | None = None,
    loaders: Mapping[str, Loader] | None = None,
) -> dict[str, Any]:
    """Merge every discovered config file. Closer files win."""
    options = list(options)
    merged: dict[str, Any] = {}
    for path in reversed(discover_config_files(name, cwd, stop, loaders)):
        merged.update(await load_config_file(path, name, options, loaders))
    return merged


def get_defaults(
    options: Iterable[Option],
    context: Mapping[str, Any] | None = None,
    only_config: bool = True,
) -> dict[str, Any]:
    """Resolve the declared default of each option against `context`."""
    context = dict(context or {})
    return {
        option.name: option.default_for(context)
        for option in options
        if option.config or not only_config
    }


async def load_sources(
    name: str,
    options: Iterable[Option],
    config_path: Path | str | None = None,
    cwd: Path | str | None = None,
    stop: Path | str | None = None,
    loaders: Mapping[str, Loader] | None = None,
) -> dict[str, Any]:
    """Values from config files: the `--config` file if given, else discovery."""
    if config_path:
        return await load_config_file(config_path, name, options, loaders)
    return await load_config(name, options, cwd, stop, loaders)


def merge_defaults(options: Iterable[Option], provided: Mapping[str, Any]) -> dict[str, Any]:
    """Fill every option missing from `provided` with its default."""
    defaults = get_defaults(options, provided, only_config=False)
    return {**defaults, **provided}


def config_target(
    name: str,
    config_path: Path | str | None = None,
    use_global: bool = False,
    cwd: Path | str | None = None,
) -> Path:
    """Where `config set` and `config setup` write."""
    if config_path and Path(config_path).suffix == ".json":
        return Path(config_path)
    file_name = f".{name}rc.json"
    if use_global:
        return Path.home() / file_name
    return Path(cwd or Path.cwd()) / file_name


def save_config(path: Path | str, values: Mapping[str, Any]) -> dict[str, Any]:
    """Merge `values` into the JSON config at `path` and write it back."""
    path = Path(path)
    try:
        current = json.loads(path.read_text(encoding="UTF-8"))
        if not isinstance(current, dict):
            current = {}
    except (OSError, ValueError):
        current = {}
    current.update({key: _serializable(value) for key, value in values.items()})
    logger.info("Writing config to %s", path)
    path.write_text(json.dumps(current, indent=2) + "\n", encoding="UTF-8")
    return current


def _serializable(value: Any) -> Any:
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, (list, tuple)):
        return [_serializable(item) for item in value]
    return stringify(value)
