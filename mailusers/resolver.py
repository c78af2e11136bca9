# Copyright The Mailusers Authors
# SPDX-License-Identifier: Apache-2.0
"""Lookup queries an MTA issues against the user/alias store.

Postfix consults virtual_alias_maps before virtual_mailbox_maps and
tries the full address before the catchall '@domain' form; the first
lookup that returns something wins. So that a catchall or domain alias
doesn't swallow mail for users defined on that domain, users are also
returned as aliases of themselves. If an address is both a user and an
alias source, the alias row is ranked first to preserve postfix's
preference for aliases of whole addresses.

Resolution is single-hop: a destination that is itself an alias
source is returned as-is and left for the MTA to expand.
"""
from sqlalchemy import literal, select, union
from sqlalchemy.sql.expression import CompoundSelect, Select

from mailusers.store_schema import aliases, users

ALIAS_PRIORITY = 0
SELF_ALIAS_PRIORITY = 1

def destination_query(address : str) -> Select:
    candidates = union(
        select(aliases.c.destination.label('destination'),
               literal(ALIAS_PRIORITY).label('priority'))
        .where(aliases.c.source == address),
        select(users.c.email.label('destination'),
               literal(SELF_ALIAS_PRIORITY).label('priority'))
        .where(users.c.email == address)).subquery()
    return (select(candidates.c.destination)
            .order_by(candidates.c.priority)
            .limit(1))

# existence of any user or alias source ending in @domain
# (sqlite LIKE: case-insensitive for ascii)
def domain_query(domain : str) -> CompoundSelect:
    suffix = '@' + domain
    return union(
        select(literal(1)).select_from(users)
        .where(users.c.email.endswith(suffix, autoescape=True)),
        select(literal(1)).select_from(aliases)
        .where(aliases.c.source.endswith(suffix, autoescape=True))
    ).limit(1)

# aliases never count as mailboxes
def mailbox_query(email : str) -> Select:
    return select(literal(1)).where(users.c.email == email)

def password_query(email : str) -> Select:
    return select(users.c.password).where(users.c.email == email)
