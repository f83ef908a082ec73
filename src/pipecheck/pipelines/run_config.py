"""
Run configuration and the process-wide global configuration.

A RunConfig is passed to every unit of a run. Options left unset fall back to
the global configuration (``set_global_config``) and then to the settings
defaults (``PIPECHECK_DEFAULT_LANG``, ``PIPECHECK_ABORT_EARLY``, ...).
"""

from typing import Any, Callable, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pipecheck.config import get_settings

from .types import PathItem

ConfigInput = Optional[Union["RunConfig", Mapping[str, Any]]]


class RunConfig(BaseModel):
    """
    Options of one validation run.

    Args:
        abort_early: Stop the entire run at the first issue
        abort_pipe_early: Stop only the current pipe at the first issue
        lang: Message language
        message: Message override used for every issue without a more
            specific message (string or callable taking the issue)
        path: Path prefix prepended to every issue of the result; items may
            be PathItem instances or bare keys and indices
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        arbitrary_types_allowed=True,
        extra="forbid",
    )

    abort_early: Optional[bool] = Field(default=None, alias="abortEarly")
    abort_pipe_early: Optional[bool] = Field(default=None, alias="abortPipeEarly")
    lang: Optional[str] = None
    message: Optional[Union[str, Callable[..., str]]] = None
    path: Tuple[PathItem, ...] = ()

    @field_validator("path", mode="before")
    @classmethod
    def normalize_path(cls, v: Any) -> Tuple[PathItem, ...]:
        """Accept bare keys/indices as path segments."""
        if v is None:
            return ()
        if isinstance(v, (str, int, PathItem)):
            v = (v,)
        return tuple(
            item if isinstance(item, PathItem) else PathItem.from_key(item)
            for item in v
        )

    @field_validator("lang")
    @classmethod
    def validate_lang(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("lang cannot be empty")
        return v.strip() if v is not None else v


_global_config: Optional[RunConfig] = None


def set_global_config(config: Union[RunConfig, Mapping[str, Any]]) -> None:
    """Set process-wide defaults for abort policy, language and message."""
    global _global_config
    _global_config = to_run_config(config)


def delete_global_config() -> None:
    global _global_config
    _global_config = None


def to_run_config(config: ConfigInput) -> RunConfig:
    if config is None:
        return RunConfig()
    if isinstance(config, RunConfig):
        return config
    return RunConfig.model_validate(dict(config))


def get_global_config(config: ConfigInput = None) -> RunConfig:
    """
    Merge a run config over the global config and the settings defaults.

    ``message`` and ``path`` are per-run options and never inherited from the
    global config.
    """
    run_config = to_run_config(config)
    store = _global_config or RunConfig()
    settings = get_settings()

    def pick(name: str, default: Any) -> Any:
        value = getattr(run_config, name)
        if value is None:
            value = getattr(store, name)
        return default if value is None else value

    return RunConfig(
        abort_early=pick("abort_early", settings.abort_early or None),
        abort_pipe_early=pick("abort_pipe_early", settings.abort_pipe_early or None),
        lang=pick("lang", settings.default_lang),
        message=run_config.message,
        path=run_config.path,
    )
