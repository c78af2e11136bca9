# Copyright The Mailusers Authors
# SPDX-License-Identifier: Apache-2.0
from typing import Optional, Tuple
import logging

from mailusers.address import domain_from_address
from mailusers.response import Response
from mailusers.sender_auth import SenderAuthorization
from mailusers.store import Store
from mailusers.store_schema import StoreUnavailable

def _unavailable(e : StoreUnavailable) -> Response:
    logging.warning('user database unavailable: %s', e)
    return Response(451, '4.3.0 user database temporarily unavailable')

# In-process equivalent of postfix's virtual_mailbox_domains,
# virtual_alias_maps and virtual_mailbox_maps lookups for an inbound
# recipient.
class RecipientPolicy:
    store : Store

    def __init__(self, store : Store):
        self.store = store

    # Returns the final destination address or an error Response.
    # Like postfix, the full address is tried before the '@domain'
    # catchall and the first hit wins.
    def destination_for_rcpt(self, rcpt : str) -> Tuple[
            Optional[str], Optional[Response]]:
        domain = domain_from_address(rcpt)
        try:
            if domain is None or not self.store.domain_has_any_recipient(
                    domain):
                return None, Response(454, '4.7.1 relay access denied')
            for key in [rcpt, '@' + domain]:
                dest = self.store.resolve_destination(key)
                if dest is not None:
                    logging.debug('RecipientPolicy %s -> %s via %s',
                                  rcpt, dest, key)
                    return dest, None
        except StoreUnavailable as e:
            return None, _unavailable(e)
        return None, Response(550, '5.1.1 mailbox does not exist')

    def check_rcpt(self, rcpt : str) -> Optional[Response]:
        dest, err = self.destination_for_rcpt(rcpt)
        return err


# reject_authenticated_sender_login_mismatch
class SenderPolicy:
    sender_auth : SenderAuthorization

    def __init__(self, store : Store):
        self.sender_auth = SenderAuthorization(store)

    def check_mail_from(self, principal : Optional[str],
                        mail_from : str) -> Optional[Response]:
        if not principal:
            return Response(550, '5.7.1 not authorized')
        try:
            if self.sender_auth.may_use_sender_address(principal, mail_from):
                return None
        except StoreUnavailable as e:
            return _unavailable(e)
        return Response(
            553, '5.7.1 <%s>: sender address rejected: not owned by user %s' %
            (mail_from, principal))
