"""Flat key/value storage used to persist :class:`snotes.models.Query` and :class:`snotes.models.Template` settings.

Keys are plain strings; related settings share a prefix (for example ``contextQuery.yearFilter``).
Getters take a fallback value that is returned when the key is absent.
"""

from io import StringIO
from typing import Dict, Iterator, Optional

import yaml


class Props:
    """Base class for key/value stores. Subclasses implement :meth:`_get`, :meth:`_set` and :meth:`keys`."""

    def _get(self, key: str) -> Optional[object]:
        raise NotImplementedError()

    def _set(self, key: str, value: object) -> None:
        raise NotImplementedError()

    def keys(self) -> Iterator[str]:
        raise NotImplementedError()

    def __contains__(self, key: str) -> bool:
        return self._get(key) is not None

    def get_string(self, key: str, default: str = '') -> str:
        value = self._get(key)
        if value is None:
            return default
        return value if isinstance(value, str) else str(value)

    def set_string(self, key: str, value: Optional[str]) -> None:
        self._set(key, '' if value is None else value)

    def get_bool(self, key: str, default: bool = False) -> bool:
        value = self._get(key)
        if value is None:
            return default
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() == 'true'

    def set_bool(self, key: str, value: bool) -> None:
        self._set(key, bool(value))


class DictProps(Props):
    """Keeps values in memory.

    .. attribute:: values
       :type: Dict[str, object]
    """

    def __init__(self, values: Dict[str, object] = None):
        self.values = dict(values or {})

    def _get(self, key: str) -> Optional[object]:
        return self.values.get(key)

    def _set(self, key: str, value: object) -> None:
        self.values[key] = value

    def keys(self) -> Iterator[str]:
        return iter(sorted(self.values))

    def dump(self) -> str:
        """Returns the values as a YAML mapping."""
        sio = StringIO()
        yaml.safe_dump(self.values, sio, default_flow_style=False, sort_keys=True)
        return sio.getvalue()


class YamlProps(DictProps):
    """Keeps values in memory, and can load them from or save them to a YAML file holding a single mapping.

    Raises :exc:`yaml.YAMLError` for unparseable files and :exc:`ValueError` if the document is not a mapping.
    """

    def __init__(self, path: str, encoding: str = 'utf-8'):
        super().__init__()
        self.path = path
        self.encoding = encoding

    def load(self) -> None:
        with open(self.path, 'r', encoding=self.encoding) as file:
            loaded = yaml.safe_load(file)
        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ValueError(f'Expected a mapping in {self.path}')
        self.values = {str(k): v for k, v in loaded.items()}

    def save(self) -> None:
        with open(self.path, 'w', encoding=self.encoding) as file:
            file.write(self.dump())
