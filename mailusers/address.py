# Copyright The Mailusers Authors
# SPDX-License-Identifier: Apache-2.0
from typing import Optional

from email import _header_value_parser
from email.errors import HeaderParseError


def _parse(addr : str):
    try:
        spec = _header_value_parser.get_addr_spec(addr)
    except (HeaderParseError, IndexError):
        return None
    # trailing garbage after the addr-spec
    if len(spec) != 2 or spec[0].all_defects or spec[1]:
        return None
    return spec[0]


def domain_from_address(addr : str) -> Optional[str]:
    spec = _parse(addr)
    if spec is None or not spec.domain:
        return None
    return spec.domain


def is_valid_address(addr : str) -> bool:
    spec = _parse(addr)
    return (spec is not None and bool(spec.local_part)
            and bool(spec.domain))
