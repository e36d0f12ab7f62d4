# Copyright (C) 2008-2011 Dejan Muhamedagic <dmuhamedagic@suse.de>
# See COPYING for license information.

import os
import functools


def memoize(function):
    "Decorator to invoke a function once only for any argument"
    memoized = {}

    @functools.wraps(function)
    def inner(*args):
        if args in memoized:
            return memoized[args]
        r = function(*args)
        memoized[args] = r
        return r
    return inner


@memoize
def this_node():
    'returns name of this node (hostname)'
    return os.uname()[1]


def is_program(prog):
    """Is this program available?"""
    def isexec(filename):
        return os.path.isfile(filename) and os.access(filename, os.X_OK)
    for p in os.getenv("PATH", "").split(os.pathsep) + ['/usr/sbin', '/sbin']:
        f = os.path.join(p, prog)
        if isexec(f):
            return f
    return None


def verify_boolean(opt):
    return opt.lower() in ("yes", "true", "on", "1") or \
        opt.lower() in ("no", "false", "off", "0")


def is_boolean_true(opt):
    if opt in (None, False):
        return False
    if opt is True:
        return True
    return str(opt).lower() in ("yes", "true", "on", "1")


def strip_prefix(s, prefix):
    if s.startswith(prefix):
        return s[len(prefix):]
    return s


def quote(s):
    "Quote a single shell word"
    return "'{}'".format(s.replace("'", "'\\''"))
