# Copyright The Mailusers Authors
# SPDX-License-Identifier: Apache-2.0
from typing import Optional
import logging

from passlib.hash import sha512_crypt

# dovecot default_pass_scheme for the users table
PASS_SCHEME = 'SHA512-CRYPT'
_SCHEME_PREFIX = '{%s}' % PASS_SCHEME

# glibc crypt(3)/doveadm pw default, the hash omits the rounds= field
_sha512_crypt = sha512_crypt.using(rounds=5000)

def hash_password(password : str) -> str:
    return _sha512_crypt.hash(password)

# dovecot accepts hashes with or without the {SCHEME} prefix
def verify_password(password : str, stored_hash : Optional[str]) -> bool:
    if not password or not stored_hash:
        return False
    if stored_hash.startswith(_SCHEME_PREFIX):
        stored_hash = stored_hash[len(_SCHEME_PREFIX):]
    if not sha512_crypt.identify(stored_hash):
        logging.info('verify_password: unrecognized hash scheme')
        return False
    return sha512_crypt.verify(password, stored_hash)
