# Copyright The Mailusers Authors
# SPDX-License-Identifier: Apache-2.0
from typing import List, Optional, Tuple
import logging
import os
from contextlib import contextmanager
from threading import Lock

from sqlalchemy import create_engine, delete, event, insert, select, update
from sqlalchemy.engine import CursorResult, Engine
from sqlalchemy.exc import DatabaseError, IntegrityError, OperationalError

from mailusers.address import is_valid_address
from mailusers import resolver
from mailusers.store_schema import (
    ConstraintViolation,
    StoreUnavailable,
    aliases,
    metadata,
    users )

def rowcount(res : CursorResult) -> int:
    count = res.rowcount
    assert isinstance(count, int)
    return count

class Store:
    engine : Engine
    # serializes writers, readers rely on the db's own isolation
    write_lock : Lock

    def __init__(self, engine : Engine):
        self.engine = engine
        self.write_lock = Lock()

    @staticmethod
    def _sqlite_pragma(dbapi_conn, con_record):
        # readers don't block on the (single) writer
        dbapi_conn.execute("PRAGMA journal_mode=WAL")
        # https://www.sqlite.org/pragma.html#pragma_synchronous
        # FULL=2, flush WAL on every write
        dbapi_conn.execute("PRAGMA synchronous=2")

    @staticmethod
    def connect(url : str) -> 'Store':
        engine = create_engine(url)
        if 'sqlite' in url:
            event.listen(engine, 'connect', Store._sqlite_pragma)
        return Store(engine)

    @staticmethod
    def connect_path(db_path : str) -> 'Store':
        return Store.connect('sqlite+pysqlite:///' + db_path)

    def db_path(self) -> Optional[str]:
        if self.engine.url.get_backend_name() != 'sqlite':
            return None
        return self.engine.url.database

    @contextmanager
    def _read(self):
        try:
            with self.engine.connect() as conn:
                yield conn
        except (OperationalError, DatabaseError) as e:
            logging.error('Store read failed %s', e)
            raise StoreUnavailable(str(e)) from e

    @contextmanager
    def _write(self):
        with self.write_lock:
            try:
                with self.engine.begin() as db_tx:
                    yield db_tx
            except IntegrityError as e:
                logging.info('Store write constraint violation %s', e.orig)
                raise ConstraintViolation(str(e.orig)) from e
            except (OperationalError, DatabaseError) as e:
                logging.error('Store write failed %s', e)
                raise StoreUnavailable(str(e)) from e

    # creates the db file if missing and the tables if absent
    def initialize(self):
        path = self.db_path()
        if path and path != ':memory:':
            dirname = os.path.dirname(path)
            if dirname:
                os.makedirs(dirname, exist_ok=True)
            if not os.path.exists(path):
                logging.info('Creating new user database: %s', path)
        with self._write() as db_tx:
            metadata.create_all(db_tx, checkfirst=True)

    def dispose(self):
        self.engine.dispose()

    # lookups

    def find_user_password(self, email : str) -> Optional[str]:
        with self._read() as conn:
            row = conn.execute(resolver.password_query(email)).fetchone()
        if row is None:
            return None
        return row[0]

    def domain_has_any_recipient(self, domain : str) -> bool:
        with self._read() as conn:
            row = conn.execute(resolver.domain_query(domain)).fetchone()
        logging.debug('Store.domain_has_any_recipient %s %s',
                      domain, row is not None)
        return row is not None

    def user_exists(self, email : str) -> bool:
        with self._read() as conn:
            row = conn.execute(resolver.mailbox_query(email)).fetchone()
        return row is not None

    def resolve_destination(self, address : str) -> Optional[str]:
        with self._read() as conn:
            row = conn.execute(resolver.destination_query(address)).fetchone()
        dest = row[0] if row is not None else None
        logging.debug('Store.resolve_destination %s -> %s', address, dest)
        return dest

    # administration

    def add_user(self, email : str, password_hash : str,
                 extra : Optional[str] = None,
                 privileges : str = '') -> int:
        if not is_valid_address(email):
            raise ValueError('invalid email address %s' % email)
        with self._write() as db_tx:
            res = db_tx.execute(
                insert(users).values(
                    email=email, password=password_hash, extra=extra,
                    privileges=privileges))
            user_id = res.inserted_primary_key[0]
        logging.info('Store.add_user %s id=%d', email, user_id)
        return user_id

    def set_password(self, email : str, password_hash : str) -> bool:
        with self._write() as db_tx:
            res = db_tx.execute(
                update(users).values(password=password_hash)
                .where(users.c.email == email))
            return rowcount(res) == 1

    def get_privileges(self, email : str) -> Optional[str]:
        with self._read() as conn:
            row = conn.execute(
                select(users.c.privileges).where(users.c.email == email)
            ).fetchone()
        if row is None:
            return None
        return row[0]

    def set_privileges(self, email : str, privileges : str) -> bool:
        with self._write() as db_tx:
            res = db_tx.execute(
                update(users).values(privileges=privileges)
                .where(users.c.email == email))
            return rowcount(res) == 1

    def remove_user(self, email : str) -> bool:
        with self._write() as db_tx:
            res = db_tx.execute(delete(users).where(users.c.email == email))
            removed = rowcount(res) == 1
        logging.info('Store.remove_user %s removed=%s', email, removed)
        return removed

    def add_alias(self, source : str, destination : str) -> int:
        if not source or not destination:
            raise ValueError('empty alias source or destination')
        with self._write() as db_tx:
            res = db_tx.execute(
                insert(aliases).values(source=source, destination=destination))
            alias_id = res.inserted_primary_key[0]
        logging.info('Store.add_alias %s -> %s id=%d',
                     source, destination, alias_id)
        return alias_id

    def remove_alias(self, source : str) -> bool:
        with self._write() as db_tx:
            res = db_tx.execute(
                delete(aliases).where(aliases.c.source == source))
            removed = rowcount(res) == 1
        logging.info('Store.remove_alias %s removed=%s', source, removed)
        return removed

    def list_users(self) -> List[Tuple[str, str]]:
        with self._read() as conn:
            res = conn.execute(
                select(users.c.email, users.c.privileges)
                .order_by(users.c.email))
            return [(row.email, row.privileges) for row in res]

    def list_aliases(self) -> List[Tuple[str, str]]:
        with self._read() as conn:
            res = conn.execute(
                select(aliases.c.source, aliases.c.destination)
                .order_by(aliases.c.source))
            return [(row.source, row.destination) for row in res]
