# Copyright The Mailusers Authors
# SPDX-License-Identifier: Apache-2.0
from typing import Optional
import logging
import os

class ConfigFile:
    path : str
    content : str
    # the file is created with this mode and existing files are
    # chmod'd before writing, if set
    mode : Optional[int] = None

    def __init__(self, path : str, content : str,
                 mode : Optional[int] = None):
        self.path = path
        self.content = content
        self.mode = mode

    def __repr__(self):
        return 'ConfigFile %s mode=%s' % (
            self.path, oct(self.mode) if self.mode is not None else None)

    # returns True if the file was (re)written
    def write(self) -> bool:
        changed = True
        if os.path.exists(self.path):
            if self.mode is not None:
                os.chmod(self.path, self.mode)
            with open(self.path, 'r') as f:
                changed = f.read() != self.content
        if not changed:
            return False
        dirname = os.path.dirname(self.path)
        if dirname:
            os.makedirs(dirname, exist_ok=True)
        if self.mode is None:
            f = open(self.path, 'w')
        else:
            fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC,
                         self.mode)
            # os.open() applies the umask
            os.fchmod(fd, self.mode)
            f = os.fdopen(fd, 'w')
        with f:
            f.write(self.content)
        logging.info('wrote %s', self.path)
        return True
