"""Structured logging for the search engine, on top of telelog.

Search runs inside a host editor, so by default only warnings reach the
console (a regex fault is the usual one). Hosts raise the level or pick a
preset through ``EDITOR_SEARCH_*`` variables or :func:`configure`.

``record_event(name, ...)`` writes one ``event::<name>`` line with key/value
data; ``span(name, ...)`` profiles a command and reports its outcome.
"""

from __future__ import annotations

import os
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, MutableMapping, Optional, Tuple, cast

import telelog  # type: ignore[import]

tl = cast(Any, telelog)

ENV_PREFIX = "EDITOR_SEARCH_"

_LOGGER_CACHE: MutableMapping[str, Any] = {}
_ACTIVE_CONFIG: Optional[Any] = None


def env(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


def env_flag(name: str, default: bool) -> bool:
    raw = env(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True, slots=True)
class LogSettings:
    """Logging knobs read from the environment."""

    logger_name: str = "editor_search"
    level: str = "WARNING"
    log_file: str = ""
    console: bool = True
    color: bool = True
    json: bool = False
    profile: bool = False
    buffered: bool = False

    @classmethod
    def from_env(cls) -> "LogSettings":
        return cls(
            logger_name=env("LOGGER") or "editor_search",
            level=(env("LOG_LEVEL") or "WARNING").upper(),
            log_file=env("LOG_FILE") or "",
            console=not env_flag("DISABLE_CONSOLE", False),
            color=not env_flag("NO_COLOR", False),
            json=env_flag("LOG_JSON", False),
            profile=env_flag("PROFILE", False),
            buffered=env_flag("LOG_BUFFERED", False),
        )


SETTINGS = LogSettings.from_env()


def _settings_config(settings: LogSettings) -> Any:
    config = tl.Config()
    config.with_min_level(settings.level)
    config.with_console_output(settings.console)
    if settings.console:
        config.with_colored_output(settings.color)
    config.with_json_format(settings.json)
    if settings.log_file:
        config.with_file_output(settings.log_file)
    if settings.buffered:
        config.with_buffering(True)
    config.with_profiling(settings.profile)
    return config


def _debug_preset(settings: LogSettings) -> Any:
    config = _settings_config(settings)
    config.with_min_level("DEBUG")
    config.with_console_output(True)
    config.with_profiling(True)
    return config


def _silent_preset(settings: LogSettings) -> Any:
    config = _settings_config(settings)
    config.with_min_level("ERROR")
    config.with_console_output(False)
    return config


def _profile_preset(settings: LogSettings) -> Any:
    config = _settings_config(settings)
    config.with_min_level("DEBUG")
    config.with_console_output(False)
    config.with_json_format(True)
    config.with_buffering(True)
    config.with_file_output(settings.log_file or "editor_search-profile.log")
    config.with_profiling(True)
    return config


_PRESETS: Dict[str, Callable[[LogSettings], Any]] = {
    "debug": _debug_preset,
    "silent": _silent_preset,
    "profile": _profile_preset,
}


def configure(*, config: Optional[Any] = None, preset: Optional[str] = None) -> None:
    """Swap the active telelog configuration; cached loggers are rebuilt.

    ``preset`` is one of ``"debug"``, ``"silent"`` or ``"profile"``. Passing
    neither argument restores the environment-derived defaults.
    """

    global _ACTIVE_CONFIG
    if config is not None and preset:
        raise ValueError("Provide either `config` or `preset`, not both.")
    if preset:
        builder = _PRESETS.get(preset.lower())
        if builder is None:
            raise ValueError(f"Unknown preset '{preset}'.")
        config = builder(SETTINGS)
    elif config is None:
        config = _settings_config(SETTINGS)
    _ACTIVE_CONFIG = config
    _LOGGER_CACHE.clear()


def get_logger(name: Optional[str] = None) -> Any:
    if _ACTIVE_CONFIG is None:
        configure()
    logger_name = name or SETTINGS.logger_name
    log = _LOGGER_CACHE.get(logger_name)
    if log is None:
        log = _LOGGER_CACHE[logger_name] = tl.Logger.with_config(logger_name, _ACTIVE_CONFIG)
    return log


def _text(value: Any) -> str:
    if isinstance(value, str):
        return value
    return repr(value) if isinstance(value, (dict, list, tuple, set)) else str(value)


def _level_method(log: Any, level: str) -> Tuple[Callable[..., None], bool]:
    name = str(level).lower()
    structured = getattr(log, f"{name}_with", None)
    if structured is not None:
        return structured, True
    plain = getattr(log, name, None)
    if plain is None:
        raise ValueError(f"Unsupported log level '{level}'.")
    return plain, False


def _emit(log: Any, level: str, message: str, payload: Dict[str, Any]) -> None:
    method, structured = _level_method(log, level)
    if structured:
        method(message, [(str(key), _text(value)) for key, value in payload.items()])
    else:
        method(f"{message} {payload}")


def record_event(
    name: str,
    *,
    level: str = "info",
    data: Optional[Dict[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    _emit(get_logger(logger_name), level, f"event::{name}", {"event": name, **(data or {})})


@dataclass
class SpanHandle:
    """Collects outcome metadata for the command running inside ``span``."""

    logger: Any
    span_name: str
    component_name: Optional[str] = None
    metadata: Dict[str, str] = field(default_factory=dict)

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = _text(value)

    def _report(self, level: str, message: str, **extra: Any) -> None:
        payload: Dict[str, Any] = {"span": self.span_name, **self.metadata}
        if self.component_name:
            payload["component"] = self.component_name
        payload.update(extra)
        _emit(self.logger, level, message, payload)

    def fail(self, reason: str) -> None:
        self._report("error", "span::fail", reason=reason)

    def finish(self) -> None:
        self._report("debug", "span::finish")


@contextmanager
def span(
    name: str,
    *,
    logger_name: Optional[str] = None,
    component: Optional[str | bool] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Iterator[SpanHandle]:
    """Profile a block, tracking it under ``component`` when one is given.

    ``metadata`` is attached as logger context for the duration of the
    block. An exception escaping the block is reported and re-raised.
    """

    log = get_logger(logger_name)
    component_name = name if component is True else component or None
    context = {key: _text(value) for key, value in (metadata or {}).items()}
    for key, value in context.items():
        log.add_context(key, value)

    with ExitStack() as stack:
        if component_name:
            stack.enter_context(log.track_component(component_name))
        stack.enter_context(log.profile(name))
        handle = SpanHandle(log, name, component_name, dict(context))
        try:
            yield handle
        except Exception as exc:
            handle.fail(f"{type(exc).__name__}: {exc}")
            raise
        else:
            handle.finish()
        finally:
            for key in context:
                log.remove_context(key)


__all__ = [
    "ENV_PREFIX",
    "LogSettings",
    "SETTINGS",
    "SpanHandle",
    "configure",
    "env",
    "env_flag",
    "get_logger",
    "record_event",
    "span",
]
