# Copyright The Mailusers Authors
# SPDX-License-Identifier: Apache-2.0
from typing import List, Optional
import logging

from mailusers.config import Config
from mailusers.config_file import ConfigFile
from mailusers.dovecot_config import DovecotConfig
from mailusers.editconf import edit_file
from mailusers.postfix_config import PostfixConfig
from mailusers.store import Store
from mailusers.supervisor import (
    RecordingSupervisor,
    ServiceCommandSupervisor,
    ServiceSupervisor )

# Wires postfix (smtp) and dovecot (imap/pop, smtp auth) to the users
# db: creates the db if needed, writes the daemon configs and lookup
# maps and then asks the supervisor to restart the daemons.
class Provisioner:
    config : Config
    store : Store
    supervisor : ServiceSupervisor
    dovecot : DovecotConfig
    postfix : PostfixConfig

    def __init__(self, config : Config,
                 store : Optional[Store] = None,
                 supervisor : Optional[ServiceSupervisor] = None):
        self.config = config
        db_path = config.db_path()
        self.store = store if store else Store.connect_path(db_path)
        if supervisor is not None:
            self.supervisor = supervisor
        elif config.dry_run():
            self.supervisor = RecordingSupervisor()
        else:
            self.supervisor = ServiceCommandSupervisor(
                config.restart_command())
        self.dovecot = DovecotConfig(
            config.dovecot_conf_dir(), db_path, config.mailbox_root(),
            config.sasl_socket())
        self.postfix = PostfixConfig(
            config.postfix_conf_dir(), db_path, config.sasl_path())

    def config_files(self) -> List[ConfigFile]:
        return self.dovecot.files() + self.postfix.map_files()

    # returns the paths that changed
    def write_config(self) -> List[str]:
        changed = [f.path for f in self.config_files() if f.write()]
        if self.dovecot.edit_auth_conf():
            changed.append(self.dovecot.auth_conf_path())
        if edit_file(self.postfix.main_cf_path(),
                     self.postfix.main_cf_settings()):
            changed.append(self.postfix.main_cf_path())
        return changed

    def run(self) -> List[str]:
        self.store.initialize()
        changed = self.write_config()
        logging.info('Provisioner: %d config files changed', len(changed))
        self.supervisor.on_store_ready(self.config.services())
        return changed
