# Copyright The Mailusers Authors
# SPDX-License-Identifier: Apache-2.0
from typing import Tuple
from tempfile import TemporaryDirectory
import os

from mailusers.store import Store

def create_temp_store_for_test() -> Tuple[TemporaryDirectory, Store]:
    dir = TemporaryDirectory()
    store = Store.connect_path(os.path.join(dir.name, 'users.sqlite'))
    store.initialize()
    return dir, store
