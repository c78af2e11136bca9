# Copyright The Mailusers Authors
# SPDX-License-Identifier: Apache-2.0
import logging

from mailusers.store import Store

# postfix smtpd_sender_login_maps: the owner of a sender address is
# whatever it resolves to via the same lookup as virtual_alias_maps,
# i.e. a user may send as any address that routes to them.
class SenderAuthorization:
    store : Store

    def __init__(self, store : Store):
        self.store = store

    def may_use_sender_address(self, principal : str,
                               from_address : str) -> bool:
        owner = self.store.resolve_destination(from_address)
        allowed = owner is not None and owner == principal
        logging.debug('SenderAuthorization %s as %s owner=%s allowed=%s',
                      principal, from_address, owner, allowed)
        return allowed
