# Copyright The Mailusers Authors
# SPDX-License-Identifier: Apache-2.0
from typing import List
import logging
import os
import re

from mailusers.config_file import ConfigFile
from mailusers.password import PASS_SCHEME

# dovecot expands %u itself, with sql escaping
PASSWORD_QUERY = "SELECT email as user, password FROM users WHERE email='%u';"

AUTH_SQL_CONF = """passdb {
  driver = sql
  args = %(sql_conf)s
}
userdb {
  driver = static
  args = uid=mail gid=mail home=%(mailbox_root)s/%%d/%%n
}
"""

SQL_CONF = """driver = sqlite
connect = %(db_path)s
default_pass_scheme = %(scheme)s
password_query = %(query)s
"""

# lets postfix use dovecot for smtp auth
LOCAL_AUTH_CONF = """service auth {
  unix_listener %(socket)s {
    mode = 0666
    user = postfix
    group = postfix
  }
}
"""

_SYSTEM_INCLUDE_RE = re.compile(r'^#*(!include auth-system\.conf\.ext)',
                                re.MULTILINE)
_SQL_INCLUDE_RE = re.compile(r'^#(!include auth-sql\.conf\.ext)',
                             re.MULTILINE)

# query the users db rather than system users for authentication
def toggle_auth_includes(auth_conf : str) -> str:
    auth_conf = _SYSTEM_INCLUDE_RE.sub(r'#\1', auth_conf)
    return _SQL_INCLUDE_RE.sub(r'\1', auth_conf)


class DovecotConfig:
    conf_dir : str
    db_path : str
    mailbox_root : str
    sasl_socket : str

    def __init__(self, conf_dir : str, db_path : str, mailbox_root : str,
                 sasl_socket : str):
        self.conf_dir = conf_dir
        self.db_path = db_path
        self.mailbox_root = mailbox_root
        self.sasl_socket = sasl_socket

    def sql_conf_path(self) -> str:
        return os.path.join(self.conf_dir, 'dovecot-sql.conf.ext')

    def auth_conf_path(self) -> str:
        return os.path.join(self.conf_dir, 'conf.d', '10-auth.conf')

    def files(self) -> List[ConfigFile]:
        conf_d = os.path.join(self.conf_dir, 'conf.d')
        return [
            ConfigFile(os.path.join(conf_d, 'auth-sql.conf.ext'),
                       AUTH_SQL_CONF % {
                           'sql_conf': self.sql_conf_path(),
                           'mailbox_root': self.mailbox_root }),
            # contains the db path, per dovecot instructions
            ConfigFile(self.sql_conf_path(),
                       SQL_CONF % {
                           'db_path': self.db_path,
                           'scheme': PASS_SCHEME,
                           'query': PASSWORD_QUERY },
                       mode=0o600),
            ConfigFile(os.path.join(conf_d, '99-local-auth.conf'),
                       LOCAL_AUTH_CONF % { 'socket': self.sasl_socket }),
        ]

    # returns True if 10-auth.conf changed
    def edit_auth_conf(self) -> bool:
        path = self.auth_conf_path()
        if not os.path.exists(path):
            logging.warning('%s missing, not switching auth includes', path)
            return False
        with open(path, 'r') as f:
            orig = f.read()
        edited = toggle_auth_includes(orig)
        if edited == orig:
            return False
        with open(path, 'w') as f:
            f.write(edited)
        logging.info('enabled sql auth in %s', path)
        return True
