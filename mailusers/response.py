# Copyright The Mailusers Authors
# SPDX-License-Identifier: Apache-2.0
import logging

def ok_smtp_code(code):
    return code >= 200 and code <= 299

# smtp response handed back to the mta for a policy decision
class Response:
    code : int
    message : str

    def __init__(self, code=250, mess=None):
        self.code = code
        if mess is None:
            if self.ok():
                mess = 'ok'
            elif self.temp():
                mess = 'temporary error'
            elif self.perm():
                mess = 'permanent error'
            else:
                logging.warning('%s', code, stack_info=True)
                mess = 'internal error'
        self.message = mess

    def __str__(self):
        return '%d %s' % (self.code, self.message)

    def __repr__(self):
        return str(self)

    def ok(self):
        return ok_smtp_code(self.code)

    def perm(self):
        return self.code >= 500 and self.code <= 599

    def temp(self):
        return self.code >= 400 and self.code <= 499

    def __eq__(self, r):
        if not isinstance(r, Response):
            return False
        return self.code == r.code and self.message == r.message
