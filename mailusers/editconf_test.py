# Copyright The Mailusers Authors
# SPDX-License-Identifier: Apache-2.0
import os
import unittest
import logging
from tempfile import TemporaryDirectory

from mailusers.editconf import edit_file, edit_lines, main, parse_settings

class EditConfTest(unittest.TestCase):
    def setUp(self):
        logging.basicConfig(level=logging.DEBUG,
                            format='%(asctime)s %(message)s')

    def test_parse(self):
        self.assertEqual(parse_settings(['a=b', 'c = d=e', 'f=']),
                         [('a', 'b'), ('c', 'd=e'), ('f', '')])
        with self.assertRaises(ValueError):
            parse_settings(['novalue'])
        with self.assertRaises(ValueError):
            parse_settings(['=x'])

    def test_edit_lines(self):
        lines = ['# comment',
                 'smtpd_sasl_type = cyrus',
                 '#smtpd_sasl_path = smtpd',
                 'smtpd_sasl_type=other',
                 'myhostname = mail.ex.com',
                 '    continuation']
        out = edit_lines(lines, [('smtpd_sasl_type', 'dovecot'),
                                 ('smtpd_sasl_path', 'private/auth'),
                                 ('smtpd_sasl_auth_enable', 'yes')])
        self.assertEqual(out, ['# comment',
                               'smtpd_sasl_type=dovecot',
                               'smtpd_sasl_path=private/auth',
                               '#smtpd_sasl_type=other',
                               'myhostname = mail.ex.com',
                               '    continuation',
                               'smtpd_sasl_auth_enable=yes'])
        # idempotent
        self.assertEqual(out, edit_lines(out, [
            ('smtpd_sasl_type', 'dovecot'),
            ('smtpd_sasl_path', 'private/auth'),
            ('smtpd_sasl_auth_enable', 'yes')]))

    def test_continuation(self):
        lines = ['virtual_alias_maps = hash:/etc/postfix/virtual,',
                 '    hash:/etc/postfix/other',
                 'myhostname = x']
        settings = [('virtual_alias_maps',
                     'sqlite:/etc/postfix/virtual-alias-maps.cf')]
        out = edit_lines(lines, settings)
        self.assertEqual(out, [
            'virtual_alias_maps=sqlite:/etc/postfix/virtual-alias-maps.cf',
            'myhostname = x'])
        self.assertEqual(out, edit_lines(out, settings))

        # a later duplicate is commented out along with its continuation
        out = edit_lines(['virtual_alias_maps = a',
                          'virtual_alias_maps = b,',
                          '\tc',
                          '',
                          '    d'], [('virtual_alias_maps', 'e')])
        self.assertEqual(out, ['virtual_alias_maps=e',
                               '#virtual_alias_maps = b,',
                               '#\tc',
                               '',
                               '    d'])

    def test_prefix_key(self):
        out = edit_lines(['virtual_mailbox_maps_x = a'],
                         [('virtual_mailbox_maps', 'b')])
        self.assertEqual(out, ['virtual_mailbox_maps_x = a',
                               'virtual_mailbox_maps=b'])

    def test_edit_file(self):
        dir = TemporaryDirectory()
        filename = os.path.join(dir.name, 'main.cf')
        with open(filename, 'w') as f:
            f.write('myhostname = mail.ex.com\n')
        self.assertTrue(edit_file(
            filename, [('local_recipient_maps', '$virtual_mailbox_maps')]))
        self.assertFalse(edit_file(
            filename, [('local_recipient_maps', '$virtual_mailbox_maps')]))
        with open(filename, 'r') as f:
            self.assertEqual(f.read(),
                             'myhostname = mail.ex.com\n'
                             'local_recipient_maps=$virtual_mailbox_maps\n')

        self.assertEqual(main(['editconf', filename, 'myhostname=mx.ex.com']),
                         0)
        with open(filename, 'r') as f:
            self.assertEqual(f.readline(), 'myhostname=mx.ex.com\n')
        self.assertEqual(main(['editconf']), 1)
        dir.cleanup()

if __name__ == '__main__':
    unittest.main()
