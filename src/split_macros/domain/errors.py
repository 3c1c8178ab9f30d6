from dataclasses import dataclass


@dataclass(frozen=True)
class SplitsError:
    message: str


@dataclass(frozen=True)
class MalformedRequest(SplitsError):
    field: str


@dataclass(frozen=True)
class PathNotFound(SplitsError):
    key: str
    path: str


@dataclass(frozen=True)
class ConfigError(SplitsError):
    unrecognized_keys: tuple[str, ...] = ()
