# Copyright The Mailusers Authors
# SPDX-License-Identifier: Apache-2.0
from typing import List, Optional
import logging
import os

import yaml

DEFAULT_STORAGE_ROOT = '/home/user-data'

class Config:
    root_yaml : dict

    def __init__(self, root_yaml : Optional[dict] = None):
        self.root_yaml = root_yaml if root_yaml else {}

    @staticmethod
    def load(filename : str) -> 'Config':
        with open(filename, 'r') as yaml_file:
            root_yaml = yaml.load(yaml_file, Loader=yaml.SafeLoader)
        if root_yaml is not None and not isinstance(root_yaml, dict):
            raise ValueError('%s: expected a mapping at top level' % filename)
        logging.debug('Config.load %s %s', filename, root_yaml)
        return Config(root_yaml)

    def _section(self, name : str) -> dict:
        return self.root_yaml.get(name, None) or {}

    def storage_root(self) -> str:
        return self.root_yaml.get('storage_root', DEFAULT_STORAGE_ROOT)

    def db_path(self) -> str:
        return self._section('storage').get(
            'db_path', os.path.join(self.storage_root(), 'mail', 'users.sqlite'))

    def mailbox_root(self) -> str:
        return os.path.join(self.storage_root(), 'mail', 'mailboxes')

    def dovecot_conf_dir(self) -> str:
        return self._section('dovecot').get('conf_dir', '/etc/dovecot')

    def postfix_conf_dir(self) -> str:
        return self._section('postfix').get('conf_dir', '/etc/postfix')

    # absolute path of the dovecot auth listener
    def sasl_socket(self) -> str:
        return self._section('postfix').get(
            'sasl_socket', '/var/spool/postfix/private/auth')

    # the same socket relative to the postfix queue directory
    def sasl_path(self) -> str:
        return self._section('postfix').get('sasl_path', 'private/auth')

    def services(self) -> List[str]:
        return self._section('supervisor').get(
            'services', ['postfix', 'dovecot'])

    def dry_run(self) -> bool:
        return bool(self._section('supervisor').get('dry_run', False))

    def restart_command(self) -> Optional[List[str]]:
        return self._section('supervisor').get('command', None)

    def logging_yaml(self) -> Optional[dict]:
        return self.root_yaml.get('logging', None)
