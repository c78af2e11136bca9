# Copyright The Mailusers Authors
# SPDX-License-Identifier: Apache-2.0
import unittest
import logging

from mailusers.password import hash_password, verify_password

class PasswordTest(unittest.TestCase):
    def setUp(self):
        logging.basicConfig(level=logging.DEBUG,
                            format='%(asctime)s %(message)s')

    def test_smoke(self):
        h = hash_password('correct horse')
        self.assertTrue(h.startswith('$6$'))
        # salted
        self.assertNotEqual(h, hash_password('correct horse'))
        self.assertTrue(verify_password('correct horse', h))
        self.assertFalse(verify_password('wrong', h))

    def test_scheme_prefix(self):
        h = '{SHA512-CRYPT}' + hash_password('secret')
        self.assertTrue(verify_password('secret', h))
        self.assertFalse(verify_password('Secret', h))

    def test_bad_hash(self):
        self.assertFalse(verify_password('secret', None))
        self.assertFalse(verify_password('secret', ''))
        self.assertFalse(verify_password('secret', 'plaintext'))
        self.assertFalse(verify_password('', hash_password('secret')))

if __name__ == '__main__':
    unittest.main()
