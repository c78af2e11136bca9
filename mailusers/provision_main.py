# Copyright The Mailusers Authors
# SPDX-License-Identifier: Apache-2.0
import logging
import logging.config
import sys

from mailusers.config import Config
from mailusers.provision import Provisioner

def main(argv) -> int:
    logging.basicConfig(
        level=logging.DEBUG,
        format='%(asctime)s [%(process)d] [%(thread)d] '
        '%(filename)s:%(lineno)d %(message)s')

    provisioner = None
    try:
        config = Config.load(argv[1]) if len(argv) > 1 else Config()
        if (logging_yaml := config.logging_yaml()) is not None:
            logging.config.dictConfig(logging_yaml)
        provisioner = Provisioner(config)
        provisioner.run()
    except Exception:
        logging.exception('provisioning failed')
        return 1
    finally:
        if provisioner is not None:
            provisioner.store.dispose()
    return 0

def cli():
    sys.exit(main(sys.argv))

if __name__ == '__main__':
    cli()
