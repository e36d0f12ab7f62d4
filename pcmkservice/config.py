# Copyright (C) 2013 Kristoffer Gronlund <kgronlund@suse.com>
# See COPYING for license information.
'''
Holds user-configurable options.
'''

import os
import configparser

from . import constants
from . import modes
from . import utils


_SYSTEMWIDE = '/etc/pcmkservice/pcmkservice.conf'
_PERUSER = os.getenv("PCMKSERVICE_CONFIG_FILE") or \
    os.path.join(os.getenv("XDG_CONFIG_HOME") or os.path.expanduser("~/.config"), 'pcmkservice', 'pcmkservice.conf')


# opt_ classes
# members: default, completions, validate()

class opt_string(object):
    def __init__(self, value):
        self.default = value
        self.completions = ()

    def validate(self, val):
        return True

    def get(self, value):
        return value


class opt_choice(object):
    def __init__(self, dflt, choices):
        self.default = dflt
        self.completions = choices

    def validate(self, val):
        if val not in self.completions:
            raise ValueError("%s not in %s" % (val, ', '.join(self.completions)))

    def get(self, value):
        return value


class opt_boolean(object):
    def __init__(self, dflt):
        self.default = dflt
        self.completions = ('yes', 'true', 'on', '1', 'no', 'false', 'off', '0')

    def validate(self, val):
        if val is True:
            val = 'true'
        elif val is False:
            val = 'false'
        if not utils.verify_boolean(val):
            raise ValueError("Not a boolean: %s (try one of: %s)" % (
                val, ', '.join(self.completions)))

    def get(self, value):
        return utils.is_boolean_true(value)


class opt_list(object):
    def __init__(self, deflist):
        self.default = ' '.join(deflist)
        self.completions = deflist

    def validate(self, val):
        pass

    def get(self, value):
        return [s.rstrip(',') for s in value.split(' ') if s.rstrip(',')]


def _mode_default(name):
    return str(getattr(modes.ModeConfig, name))


DEFAULTS = {
    'core': {
        'debug': opt_boolean('no'),
        'profile': opt_string(constants.DEFAULT_PROFILE_NAME),
        'profiles_file': opt_string(''),
    },
    'service': {
        'start_mode_simple': opt_choice(_mode_default('start_mode_simple'), constants.MODES),
        'start_mode_clone': opt_choice(_mode_default('start_mode_clone'), constants.MODES),
        'start_mode_multistate': opt_choice(_mode_default('start_mode_multistate'), constants.MODES),
        'stop_mode_simple': opt_choice(_mode_default('stop_mode_simple'), constants.MODES),
        'stop_mode_clone': opt_choice(_mode_default('stop_mode_clone'), constants.MODES),
        'stop_mode_multistate': opt_choice(_mode_default('stop_mode_multistate'), constants.MODES),
        'status_mode_simple': opt_choice(_mode_default('status_mode_simple'), constants.MODES),
        'status_mode_clone': opt_choice(_mode_default('status_mode_clone'), constants.MODES),
        'status_mode_multistate': opt_choice(_mode_default('status_mode_multistate'), constants.MODES),
        'add_location_constraint': opt_boolean('yes'),
        'cleanup_on_start': opt_boolean('yes'),
        'cleanup_on_stop': opt_boolean('yes'),
        'cleanup_on_status': opt_boolean('yes'),
        'cleanup_only_if_failures': opt_boolean('yes'),
        'restart_only_if_local': opt_boolean('no'),
        'disable_basic_service_on_start': opt_boolean('yes'),
        'disable_basic_service_on_stop': opt_boolean('yes'),
        'disable_basic_service_on_status': opt_boolean('yes'),
        'native_based_primitive_classes': opt_list(constants.NATIVE_BASED_PRIMITIVE_CLASSES),
        'disabled_basic_service_providers': opt_list(()),
    },
}


def _stringify(val):
    if val is True:
        return 'true'
    elif val is False:
        return 'false'
    elif isinstance(val, str):
        return val
    else:
        return str(val)


class _Configuration(object):
    def __init__(self):
        self._defaults = None
        self._systemwide = None
        self._user = None

    def load(self):
        self._defaults = configparser.ConfigParser()
        for section, keys in DEFAULTS.items():
            self._defaults.add_section(section)
            for key, opt in keys.items():
                self._defaults.set(section, key, opt.default)

        self._systemwide = None
        if os.path.isfile(_SYSTEMWIDE):
            self._systemwide = configparser.ConfigParser()
            self._systemwide.read([_SYSTEMWIDE])
        self._user = None
        if os.path.isfile(_PERUSER):
            self._user = configparser.ConfigParser()
            self._user.read([_PERUSER])

    def get_impl(self, section, name):
        try:
            if self._user and self._user.has_option(section, name):
                return self._user.get(section, name) or ''
            if self._systemwide and self._systemwide.has_option(section, name):
                return self._systemwide.get(section, name) or ''
            return self._defaults.get(section, name) or ''
        except (configparser.NoOptionError, configparser.NoSectionError) as e:
            raise ValueError(e)

    def get(self, section, name, raw=False):
        if raw:
            return self.get_impl(section, name)
        return DEFAULTS[section][name].get(self.get_impl(section, name))

    def set(self, section, name, value):
        if section not in DEFAULTS:
            raise ValueError("Setting invalid section " + str(section))
        if not self._defaults.has_option(section, name):
            raise ValueError("Setting invalid option %s.%s" % (section, name))
        DEFAULTS[section][name].validate(value)
        if self._user is None:
            self._user = configparser.ConfigParser()
        if not self._user.has_section(section):
            self._user.add_section(section)
        self._user.set(section, name, _stringify(value))

    def configured_keys(self, section):
        ret = []
        if self._systemwide and self._systemwide.has_section(section):
            ret += self._systemwide.options(section)
        if self._user and self._user.has_section(section):
            ret += self._user.options(section)
        return list(set(ret))


_configuration = _Configuration()


class _Section(object):
    def __init__(self, section):
        object.__setattr__(self, 'section', section)

    def __getattr__(self, name):
        return _configuration.get(self.section, name)

    def __setattr__(self, name, value):
        _configuration.set(self.section, name, value)


def load():
    _configuration.load()


def set_option(section, option, value):
    _configuration.set(section, option, value)


def get_option(section, option, raw=False):
    '''
    Return the given option.
    If raw is True, return the configured value.
    Example: for a boolean, returns "yes", not True
    '''
    return _configuration.get(section, option, raw=raw)


def get_mode_config():
    '''
    Build the mode configuration

    Options from the YAML profiles file (core.profiles_file, core.profile)
    are the base, options set in the service section of the
    configuration files override them
    '''
    base = modes.ModeConfig()
    if core.profiles_file:
        base = modes.load_profile(core.profiles_file, core.profile)
    data = {f: getattr(base, f) for f in modes.ModeConfig.field_names()}
    for key in _configuration.configured_keys('service'):
        if key in DEFAULTS['service']:
            data[key] = get_option('service', key)
    return modes.ModeConfig(**data)


load()
core = _Section('core')
service = _Section('service')
