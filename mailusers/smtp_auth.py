# Copyright The Mailusers Authors
# SPDX-License-Identifier: Apache-2.0
import logging

from aiosmtpd.smtp import AuthResult, LoginPassword

from mailusers.password import verify_password
from mailusers.store import Store
from mailusers.store_schema import StoreUnavailable

# aiosmtpd authenticator checking LOGIN/PLAIN credentials against the
# users table, the same passdb dovecot is configured with.
class Authenticator:
    store : Store

    def __init__(self, store : Store):
        self.store = store

    def __call__(self, server, session, envelope, mechanism, auth_data):
        fail_nothandled = AuthResult(success=False, handled=False)
        if mechanism not in ("LOGIN", "PLAIN"):
            return fail_nothandled
        if not isinstance(auth_data, LoginPassword):
            return fail_nothandled
        try:
            login = auth_data.login.decode('utf-8')
            password = auth_data.password.decode('utf-8')
        except UnicodeDecodeError:
            logging.info('Authenticator: credentials are not utf-8')
            return fail_nothandled
        if not self.check(login, password):
            return fail_nothandled
        return AuthResult(success=True, auth_data=auth_data.login)

    def check(self, user : str, passwd : str) -> bool:
        try:
            stored_hash = self.store.find_user_password(user)
        except StoreUnavailable:
            logging.warning('Authenticator.check %s: store unavailable', user)
            return False
        if stored_hash is None:
            logging.info('Authenticator.check unknown user %s', user)
            return False
        ok = verify_password(passwd, stored_hash)
        logging.info('Authenticator.check %s %s', user,
                     'ok' if ok else 'failed')
        return ok
