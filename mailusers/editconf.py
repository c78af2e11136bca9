# Copyright The Mailusers Authors
# SPDX-License-Identifier: Apache-2.0
"""Set key=value settings in a config file such as postfix main.cf.

The first definition of each key, including a commented-out one, is
replaced in place; later active definitions of the same key are
commented out and keys not present are appended. A value folded onto
whitespace-led continuation lines goes with its key: the continuation
lines are dropped when the key is replaced and commented out along
with it. Everything else in the file is left alone.

usage: python -m mailusers.editconf main.cf key=value [key=value ...]
"""
from typing import List, Tuple
import logging
import os
import re
import sys


def parse_settings(args : List[str]) -> List[Tuple[str, str]]:
    out = []
    for arg in args:
        key, eq, value = arg.partition('=')
        key = key.strip()
        if not eq or not key:
            raise ValueError('invalid setting %r, expected key=value' % arg)
        out.append((key, value.strip()))
    return out


def _setting_re(key : str, comment_char : str) -> re.Pattern:
    return re.compile(
        r'^(?P<comment>' + re.escape(comment_char) + r'\s*)?' +
        re.escape(key) + r'\s*=(?P<value>.*)$')


def edit_lines(lines : List[str], settings : List[Tuple[str, str]],
               comment_char : str = '#') -> List[str]:
    out = list(lines)
    for key, value in settings:
        setting_re = _setting_re(key, comment_char)
        new_line = '%s=%s' % (key, value)
        found = False
        edited = []
        # what to do with the whitespace-led continuation lines of the
        # setting just seen: None (keep), 'drop' or 'comment'
        continuation = None
        for line in out:
            if continuation and line[:1].isspace() and line.strip():
                if continuation == 'comment':
                    edited.append(comment_char + line)
                continue
            continuation = None
            m = setting_re.match(line)
            if m is None:
                edited.append(line)
            elif not found:
                edited.append(new_line)
                found = True
                if not m.group('comment'):
                    continuation = 'drop'
            elif not m.group('comment'):
                edited.append(comment_char + line)
                continuation = 'comment'
            else:
                edited.append(line)
        if not found:
            edited.append(new_line)
        out = edited
    return out

# returns True if the file contents changed
def edit_file(filename : str, settings : List[Tuple[str, str]],
              comment_char : str = '#') -> bool:
    lines : List[str] = []
    if os.path.exists(filename):
        with open(filename, 'r') as f:
            lines = f.read().splitlines()
    edited = edit_lines(lines, settings, comment_char)
    if edited == lines:
        logging.debug('editconf %s unchanged', filename)
        return False
    with open(filename, 'w') as f:
        f.write('\n'.join(edited) + '\n')
    logging.info('editconf %s %s', filename,
                 ' '.join('%s=%s' % kv for kv in settings))
    return True


def main(argv):
    if len(argv) < 3:
        print(__doc__, file=sys.stderr)
        return 1
    edit_file(argv[1], parse_settings(argv[2:]))
    return 0

if __name__ == '__main__':
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s [%(process)d] %(filename)s:%(lineno)d '
        '%(message)s')
    sys.exit(main(sys.argv))
