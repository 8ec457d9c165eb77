"""Structured logging and profiling for codepad, backed by telelog.

Every store write, archive append, diff, format pass and preview render
runs inside ``span``; one-off facts (a version saved, an archive found
corrupted) go through ``record_event``. Component names are scoped under
``codepad.`` so a shared telelog sink can tell playground work apart.

Environment (all prefixed with ``CODEPAD_``): ``LOG_LEVEL``, ``LOG_FILE``,
``LOG_JSON``, ``LOG_BUFFERED``, ``LOG_BUFFER_SIZE``, ``DISABLE_CONSOLE``,
``NO_COLOR``, ``LOGGER``.
"""

from __future__ import annotations

import os
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, MutableMapping, NamedTuple, Optional, cast

import telelog  # type: ignore[import]

tl = cast(Any, telelog)

ENV_PREFIX = "CODEPAD_"
DEFAULT_LOGGER_NAME = os.getenv(f"{ENV_PREFIX}LOGGER", "codepad")
COMPONENT_PREFIX = "codepad."

_TRUTHY = {"1", "true", "yes", "on"}
_LOGGERS: MutableMapping[str, Any] = {}
_config: Optional[Any] = None


class Preset(NamedTuple):
    level: str
    console: bool
    log_file: Optional[str]
    buffered: bool = False


# ``quiet`` is what the Textual app uses: the terminal belongs to the UI, so
# only warnings are kept and only in CODEPAD_LOG_FILE when one is set.
PRESETS: Dict[str, Preset] = {
    "development": Preset("DEBUG", console=True, log_file=None),
    "production": Preset("INFO", console=False, log_file="codepad.log", buffered=True),
    "quiet": Preset("WARNING", console=False, log_file=None),
}


def _env(name: str) -> Optional[str]:
    return os.getenv(f"{ENV_PREFIX}{name}")


def _flag(name: str) -> bool:
    raw = _env(name)
    return raw is not None and raw.lower() in _TRUTHY


def _text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list, tuple, set)):
        return repr(value)
    return str(value)


def _from_preset(name: str) -> Any:
    try:
        preset = PRESETS[name.lower()]
    except KeyError:
        known = ", ".join(sorted(PRESETS))
        raise ValueError(f"Unknown telemetry preset '{name}' (known: {known}).") from None
    config = tl.Config()
    config.with_min_level(preset.level)
    config.with_console_output(preset.console)
    if preset.console:
        config.with_colored_output(True)
    log_file = _env("LOG_FILE") or preset.log_file
    if log_file:
        config.with_file_output(log_file)
    if preset.buffered:
        config.with_buffering(True)
    return config


def _from_environment() -> Any:
    config = tl.Config()
    config.with_min_level((_env("LOG_LEVEL") or "INFO").upper())
    console = not _flag("DISABLE_CONSOLE")
    config.with_console_output(console)
    if console:
        config.with_colored_output(not _flag("NO_COLOR"))
    if _flag("LOG_JSON"):
        config.with_json_format(True)
    log_file = _env("LOG_FILE")
    if log_file:
        config.with_file_output(log_file)
    if _flag("LOG_BUFFERED"):
        config.with_buffering(True)
        config.with_buffer_size(int(_env("LOG_BUFFER_SIZE") or "2048"))
    return config


def configure(*, config: Optional[Any] = None, preset: Optional[str] = None) -> None:
    """Replace the active telelog configuration.

    ``preset`` names an entry of ``PRESETS``; ``config`` is an explicit
    ``telelog.Config``. With neither, settings are read from the
    environment. Profiling is always switched on because ``span`` relies
    on it.
    """

    global _config
    if config is not None and preset is not None:
        raise ValueError("Provide either `config` or `preset`, not both.")
    if preset is not None:
        config = _from_preset(preset)
    elif config is None:
        config = _from_environment()
    config.with_profiling(True)
    _config = config
    _LOGGERS.clear()


def get_logger(name: Optional[str] = None) -> Any:
    if _config is None:
        configure()
    logger_name = name or DEFAULT_LOGGER_NAME
    logger = _LOGGERS.get(logger_name)
    if logger is None:
        logger = tl.Logger.with_config(logger_name, _config)
        _LOGGERS[logger_name] = logger
    return logger


def _emit(logger: Any, level: str, message: str, payload: Dict[str, Any]) -> None:
    name = level.lower()
    structured = getattr(logger, f"{name}_with", None)
    if structured is not None:
        structured(message, [(str(key), _text(value)) for key, value in payload.items()])
        return
    plain = getattr(logger, name, None)
    if plain is None:
        raise ValueError(f"Unsupported log level '{level}'.")
    plain(f"{message} {payload}")


def record_event(
    name: str,
    *,
    level: str = "info",
    data: Optional[Dict[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    """Emit ``event::<name>`` with ``data`` attached as key/value pairs."""

    _emit(get_logger(logger_name), level, f"event::{name}", {"event": name, **(data or {})})


@dataclass
class SpanHandle:
    """Yielded by ``span``; metadata added here is reported if the block fails."""

    logger: Any
    span_name: str
    component_name: Optional[str] = None
    metadata: Dict[str, str] = field(default_factory=dict)

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = _text(value)

    def fail(self, reason: str) -> None:
        payload: Dict[str, Any] = {"span": self.span_name, **self.metadata}
        if self.component_name:
            payload["component"] = self.component_name
        payload["reason"] = reason
        _emit(self.logger, "error", "span::fail", payload)


@contextmanager
def span(
    name: str,
    *,
    logger_name: Optional[str] = None,
    component: Optional[str | bool] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Iterator[SpanHandle]:
    """Profile the enclosed block under ``name``.

    ``component`` names the area the block belongs to (``"archive"``,
    ``"preview"``); it is tracked as ``codepad.<component>``. ``True`` reuses
    ``name``. ``metadata`` is pushed onto the logger context for the
    duration of the block.
    """

    logger = get_logger(logger_name)
    if component is True:
        component_name: Optional[str] = COMPONENT_PREFIX + name
    elif isinstance(component, str):
        component_name = COMPONENT_PREFIX + component
    else:
        component_name = None

    context = {key: _text(value) for key, value in (metadata or {}).items()}
    for key, value in context.items():
        logger.add_context(key, value)

    try:
        with ExitStack() as stack:
            if component_name:
                stack.enter_context(logger.track_component(component_name))
            stack.enter_context(logger.profile(name))
            handle = SpanHandle(
                logger=logger,
                span_name=name,
                component_name=component_name,
                metadata=dict(context),
            )
            try:
                yield handle
            except Exception as exc:
                handle.fail(str(exc))
                raise
    finally:
        for key in context:
            logger.remove_context(key)


__all__ = [
    "PRESETS",
    "Preset",
    "SpanHandle",
    "configure",
    "get_logger",
    "record_event",
    "span",
]
