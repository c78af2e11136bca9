# Copyright The Mailusers Authors
# SPDX-License-Identifier: Apache-2.0
from sqlalchemy import (
    Column,
    Integer,
    MetaData,
    Table,
    Text,
    text )

class StoreError(Exception):
    pass

# insert of a duplicate unique key: users.email or aliases.source
class ConstraintViolation(StoreError):
    pass

# the database file is missing, unreadable, locked, corrupt, etc
# callers must treat this as deny/defer, never allow
class StoreUnavailable(StoreError):
    pass

metadata = MetaData()

# authenticated users i.e. who have mailboxes
users = Table(
    'users', metadata,
    Column('id', Integer, primary_key=True, autoincrement=True),
    Column('email', Text, nullable=False, unique=True),
    Column('password', Text, nullable=False),
    Column('extra', Text),
    Column('privileges', Text, nullable=False, server_default=text("''")),
    sqlite_autoincrement=True)

# forwarders, source may be a catchall '@domain'
aliases = Table(
    'aliases', metadata,
    Column('id', Integer, primary_key=True, autoincrement=True),
    Column('source', Text, nullable=False, unique=True),
    Column('destination', Text, nullable=False),
    sqlite_autoincrement=True)

def split_privileges(privileges : str):
    return [p for p in privileges.replace(',', ' ').split() if p]
