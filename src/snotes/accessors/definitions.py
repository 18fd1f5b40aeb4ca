"""Reads and writes saved :class:`snotes.models.Query` and :class:`snotes.models.Template` definitions.

A definition file is a YAML mapping of the keys used by ``load_from_props``/``save_to_props``, for example:

.. code-block:: yaml

   name: Work this month
   yearFilter: '2024'
   monthFilter: '03'
   tagString: work
"""

import yaml

from snotes.accessors.base import Accessor, MalformedFileError
from snotes.models import Query, Template, ValidationError
from snotes.props import YamlProps

QUERY_SUFFIX = '.query.yml'
TEMPLATE_SUFFIX = '.template.yml'


class _DefinitionAccessor(Accessor):
    def _props(self) -> YamlProps:
        props = YamlProps(self.path, self.encoding)
        try:
            props.load()
        except (yaml.YAMLError, ValueError) as e:
            raise MalformedFileError('Definition file is not a YAML mapping.', self.path, e)
        return props

    def _load(self) -> None:
        props = self._props()
        self._value = self._create()
        try:
            self._value.load_from_props(props)
        except ValidationError as e:
            raise MalformedFileError(f'Invalid definition: {e}', self.path, e)

    def _read(self):
        return self._value

    def _write(self, value) -> None:
        props = YamlProps(self.path, self.encoding)
        value.save_to_props(props)
        props.save()

    def _create(self):
        raise NotImplementedError()


class QueryAccessor(_DefinitionAccessor):
    """Parses and writes ``*.query.yml`` files."""
    def _create(self) -> Query:
        return Query()


class TemplateAccessor(_DefinitionAccessor):
    """Parses and writes ``*.template.yml`` files."""
    def _create(self) -> Template:
        return Template()
