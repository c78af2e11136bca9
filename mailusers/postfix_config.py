# Copyright The Mailusers Authors
# SPDX-License-Identifier: Apache-2.0
"""Postfix sqlite_table(5) lookup maps over the users db.

These are the text forms of the queries in mailusers.resolver; postfix
substitutes (and quotes) the lookup key for %s and '%%' is a literal
'%'.
"""
from typing import List, Tuple
import os

from mailusers.config_file import ConfigFile

DOMAINS_QUERY = (
    "SELECT 1 FROM users WHERE email LIKE '%%@%s' "
    "UNION SELECT 1 FROM aliases WHERE source LIKE '%%@%s'")

MAILBOX_QUERY = "SELECT 1 FROM users WHERE email='%s'"

# alias (priority 0) ranked ahead of the user as alias of itself
# (priority 1), see resolver.destination_query()
DESTINATION_QUERY = (
    "SELECT destination from ("
    "SELECT destination, 0 as priority FROM aliases WHERE source='%s' "
    "UNION "
    "SELECT email as destination, 1 as priority FROM users WHERE email='%s'"
    ") ORDER BY priority LIMIT 1;")

MAP_CONF = """dbpath=%(db_path)s
query = %(query)s
"""

SENDER_LOGIN_MAPS = 'sender-login-maps.cf'
VIRTUAL_MAILBOX_DOMAINS = 'virtual-mailbox-domains.cf'
VIRTUAL_MAILBOX_MAPS = 'virtual-mailbox-maps.cf'
VIRTUAL_ALIAS_MAPS = 'virtual-alias-maps.cf'

class PostfixConfig:
    conf_dir : str
    db_path : str
    # relative to the postfix queue directory
    sasl_path : str

    def __init__(self, conf_dir : str, db_path : str,
                 sasl_path : str = 'private/auth'):
        self.conf_dir = conf_dir
        self.db_path = db_path
        self.sasl_path = sasl_path

    def main_cf_path(self) -> str:
        return os.path.join(self.conf_dir, 'main.cf')

    def _map_path(self, name : str) -> str:
        return os.path.join(self.conf_dir, name)

    def _sqlite_map(self, name : str) -> str:
        return 'sqlite:' + self._map_path(name)

    def map_files(self) -> List[ConfigFile]:
        # the sender login map is the same lookup as the alias map: a
        # user may send as any address that routes to them
        return [
            ConfigFile(self._map_path(name),
                       MAP_CONF % {'db_path': self.db_path, 'query': query})
            for name, query in [
                    (SENDER_LOGIN_MAPS, DESTINATION_QUERY),
                    (VIRTUAL_MAILBOX_DOMAINS, DOMAINS_QUERY),
                    (VIRTUAL_MAILBOX_MAPS, MAILBOX_QUERY),
                    (VIRTUAL_ALIAS_MAPS, DESTINATION_QUERY)] ]

    def main_cf_settings(self) -> List[Tuple[str, str]]:
        return [
            # smtp auth via dovecot
            ('smtpd_sasl_type', 'dovecot'),
            ('smtpd_sasl_path', self.sasl_path),
            ('smtpd_sasl_auth_enable', 'yes'),
            # for reject_authenticated_sender_login_mismatch
            ('smtpd_sender_login_maps',
             self._sqlite_map(SENDER_LOGIN_MAPS)),
            ('virtual_mailbox_domains',
             self._sqlite_map(VIRTUAL_MAILBOX_DOMAINS)),
            ('virtual_mailbox_maps',
             self._sqlite_map(VIRTUAL_MAILBOX_MAPS)),
            ('virtual_alias_maps',
             self._sqlite_map(VIRTUAL_ALIAS_MAPS)),
            ('local_recipient_maps', '$virtual_mailbox_maps'),
        ]
