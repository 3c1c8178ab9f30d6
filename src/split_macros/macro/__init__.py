from split_macros.macro.paths import CompactionOptions, compact, resolve

__all__ = ["CompactionOptions", "compact", "resolve"]
