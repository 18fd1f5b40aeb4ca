from __future__ import annotations
from dataclasses import dataclass, replace
import os.path
from typing import Callable


IGNORED_NAMES = {'.hg', 'to_import'}


def default_ignore(parentpath: str, filename: str) -> bool:
    """Skips Mercurial metadata folders and the ``to_import`` staging folder, wherever they appear."""
    return filename in IGNORED_NAMES


@dataclass
class SnotesConf:
    root_path: str
    """The notes directory. It is scanned recursively for notes, and new notes are saved under it by default."""

    ignore: Callable[[str, str], bool] = default_ignore
    """Use this to indicate files or folders that should not be scanned at all.

    The first argument is the path to the directory containing the file/folder, and the second argument is
    the filename. If this function returns True for a given path, neither that path nor any of its child paths
    will be loaded.

    The default behavior ignores anything named ``.hg`` or ``to_import``.
    """

    encoding: str = 'utf-8'
    """Text encoding for reading and writing note and definition files."""

    definitions_dir: str = '.snotes'
    """Folder, relative to :attr:`root_path`, where :meth:`snotes.api.Snotes.save_query` and
    :meth:`snotes.api.Snotes.save_template` write their files.

    Saved definitions are found wherever they are under the root, so moving them elsewhere is fine.
    """

    @classmethod
    def user_config_path(cls) -> str:
        return os.path.expanduser(os.path.join('~', '.snotes.conf.py'))

    @classmethod
    def for_user(cls) -> SnotesConf:
        """Loads the config by running ``~/.snotes.conf.py``, which must assign a SnotesConf to ``conf``.

        For example:

        .. code-block:: python

           from snotes.conf import *
           conf = SnotesConf(root_path='~/Documents/snotes')
        """
        path = cls.user_config_path()
        if not os.path.exists(path):
            raise Exception(f'You need to create the config file: {path}')
        with open(path, 'r') as file:
            conf_script = file.read()
        context = {}
        exec(conf_script, context)
        if 'conf' not in context or not isinstance(context['conf'], cls):
            raise Exception('You need to assign an instance of SnotesConf to the variable `conf` '
                            f'in your config file: {path}')
        return context['conf']

    def definitions_path(self) -> str:
        return os.path.join(self.root_path, self.definitions_dir)

    def standardize(self):
        return replace(
            self,
            root_path=os.path.realpath(os.path.expanduser(self.root_path))
        )

    def instantiate(self):
        from snotes.api import Snotes
        return Snotes(self.standardize())
