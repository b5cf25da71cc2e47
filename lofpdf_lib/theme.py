# --- lofpdf_lib/theme.py ---
"""
lofpdf_lib/theme.py: Read-only style resolution backed by an INI theme file.

Keys are addressed as "section.key". Empty values count as unset so lookups
can cascade (e.g. "lof.indent" falls back to "toc.indent").
"""
import configparser
import logging

from .constants import THEME_DEFAULTS

log = logging.getLogger("lofpdf.theme")

_MISSING = object()
_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _unquote(value: str) -> str:
    """Allows values with significant whitespace to be written as "quoted"."""
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return value[1:-1]
    return value


class Theme:
    """Resolves style values from built-in defaults overlaid by an optional file."""

    def __init__(self, overrides: dict = None):
        self._values: dict[str, dict[str, str]] = {
            section: dict(values) for section, values in THEME_DEFAULTS.items()
        }
        for section, values in (overrides or {}).items():
            self._values.setdefault(section, {}).update(
                {k: str(v) for k, v in values.items()}
            )

    @classmethod
    def load(cls, path: str = None) -> "Theme":
        """Reads a theme file, applying defaults for anything it leaves out."""
        if not path:
            return cls()
        config = configparser.ConfigParser(interpolation=None)
        if not config.read(path, encoding="utf-8"):
            raise FileNotFoundError(f"Theme file not found: {path}")
        overrides = {
            s: {k: _unquote(v) for k, v in config.items(s)} for s in config.sections()
        }
        log.info("Loaded theme from %s (%d sections)", path, len(overrides))
        return cls(overrides)

    def save(self, path: str):
        """Writes the effective theme to an INI file."""
        config = configparser.ConfigParser(interpolation=None)
        for section, values in self._values.items():
            config[section] = {
                k: f'"{v}"' if v != v.strip() else v for k, v in values.items()
            }
        with open(path, "w", encoding="utf-8") as fh:
            config.write(fh)
        log.info("Theme written to %s", path)

    def resolve(self, *keys, default=_MISSING, keep_empty=False):
        """Returns the first non-empty value among `keys`.

        With `keep_empty`, an explicitly empty value stops the cascade.
        """
        for key in keys:
            section, _, name = key.partition(".")
            value = self._values.get(section, {}).get(name)
            if value is not None and (value != "" or keep_empty):
                return value
        if default is _MISSING:
            raise KeyError(f"No theme value for any of: {', '.join(keys)}")
        return default

    def resolve_float(self, *keys, default=_MISSING) -> float:
        value = self.resolve(*keys, default=default)
        try:
            return float(value)
        except (TypeError, ValueError):
            raise ValueError(f"Theme value for {keys[0]} is not a number: {value!r}")

    def resolve_int(self, *keys, default=_MISSING) -> int:
        return int(self.resolve_float(*keys, default=default))

    def resolve_bool(self, *keys, default=_MISSING) -> bool:
        value = self.resolve(*keys, default=default)
        if isinstance(value, bool):
            return value
        lowered = str(value).strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
        raise ValueError(f"Theme value for {keys[0]} is not a boolean: {value!r}")

    def as_dict(self) -> dict:
        return {s: dict(v) for s, v in self._values.items()}

    def derive(self, overrides: dict) -> "Theme":
        """A copy of this theme with some values replaced."""
        values = self.as_dict()
        for section, section_values in overrides.items():
            values.setdefault(section, {}).update(section_values)
        return Theme(values)
