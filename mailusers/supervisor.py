# Copyright The Mailusers Authors
# SPDX-License-Identifier: Apache-2.0
from typing import List, Optional
from abc import ABC, abstractmethod
import logging
import subprocess

# Notified once the users db and the daemon configs are in place so
# that postfix/dovecot pick them up.
class ServiceSupervisor(ABC):
    @abstractmethod
    def on_store_ready(self, services : List[str]):
        raise NotImplementedError


class ServiceCommandSupervisor(ServiceSupervisor):
    # argv prefix, the service name and 'restart' are appended
    command : List[str]

    def __init__(self, command : Optional[List[str]] = None):
        self.command = list(command) if command else ['service']

    def on_store_ready(self, services : List[str]):
        for service in services:
            argv = self.command + [service, 'restart']
            logging.info('restarting %s: %s', service, ' '.join(argv))
            res = subprocess.run(argv, capture_output=True, text=True)
            if res.returncode != 0:
                logging.error('restart %s failed: %d %s', service,
                              res.returncode, res.stderr.strip())
                raise RuntimeError('restart %s failed' % service)


# dry run: log and remember what would have been restarted
class RecordingSupervisor(ServiceSupervisor):
    restarted : List[str]

    def __init__(self):
        self.restarted = []

    def on_store_ready(self, services : List[str]):
        logging.info('RecordingSupervisor would restart %s', services)
        self.restarted.extend(services)
