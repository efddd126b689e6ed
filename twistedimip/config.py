##
# Copyright (c) 2005-2017 Apple Inc. All rights reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
# http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
##


"""
Configuration data for iMIP delivery.

Settings are nested dictionaries that read and write with attribute syntax,
so code says C{config.Scheduling.iMIP.Sending.Server} rather than
C{config["Scheduling"]["iMIP"]["Sending"]["Server"]}.

A L{Config} starts out as a copy of its defaults.  L{Config.load} merges a
configuration file on top of them, and post-update hooks then resolve
relative paths, parse dates and fill in derived values.  See
L{twistedimip.stdconfig} for the defaults and hooks used in production.
"""

__all__ = [
    "Config",
    "ConfigDict",
    "ConfigurationError",
    "fullServerPath",
    "mergeData",
]

import copy
import os


class ConfigurationError(RuntimeError):
    """
    Invalid configuration.
    """



class ConfigDict(dict):
    """
    Dictionary with attribute access to its keys.  Nested dictionaries are
    converted when stored.  Keys beginning with C{"_"} are not allowed.
    """

    def __init__(self, mapping=None):
        dict.__init__(self)
        if mapping is not None:
            for key, value in mapping.items():
                self[key] = value


    def __repr__(self):
        return "*" + dict.__repr__(self)


    def __setitem__(self, key, value):
        if key.startswith("_"):
            raise KeyError("Keys may not begin with '_': %s" % (key,))
        if isinstance(value, dict) and not isinstance(value, ConfigDict):
            value = ConfigDict(value)
        dict.__setitem__(self, key, value)


    def __getattr__(self, attr):
        try:
            return self[attr]
        except KeyError:
            raise AttributeError(attr)


    def __setattr__(self, attr, value):
        self[attr] = value



class Config(object):
    """
    The effective configuration: defaults, overlaid with a configuration
    file, normalized by post-update hooks.  Pending updates are applied the
    next time a setting is read.

    @ivar _loader: callable taking an absolute file name and returning a
        mapping of the settings in that file, or C{None} when this
        configuration cannot be loaded from a file.
    """

    def __init__(self, defaults, loader=None):
        self._defaults = copy.deepcopy(defaults)
        self._loader = loader
        self._postUpdateHooks = []
        self.reset()


    def __getattr__(self, attr):
        if attr.startswith("_"):
            raise AttributeError(attr)
        if self._dirty:
            self.update()
        try:
            return self._data[attr]
        except KeyError:
            raise AttributeError(attr)


    def __str__(self):
        return str(self._data)


    def addPostUpdateHooks(self, hooks):
        """
        @param hooks: callables run with the settings L{ConfigDict} after
            every update; they may modify it in place and raise
            L{ConfigurationError}.
        """
        self._postUpdateHooks.extend(hooks)
        self._dirty = True


    def update(self, items=None):
        if items:
            mergeData(self._data, ConfigDict(items))
        for hook in self._postUpdateHooks:
            hook(self._data)
        self._dirty = False


    def load(self, configFile):
        """
        Merge the settings in C{configFile}.

        @raise ConfigurationError: if the file cannot be read or its
            settings are invalid.
        """
        if self._loader is None:
            raise ConfigurationError("Cannot load configuration from %s" % (configFile,))
        self.update(self._loader(os.path.abspath(configFile)))


    def reset(self):
        """
        Go back to the defaults.
        """
        self._data = ConfigDict(copy.deepcopy(self._defaults))
        self._dirty = True



def mergeData(oldData, newData):
    """
    Merge C{newData} into C{oldData}, descending into nested dictionaries.

    @type oldData: L{ConfigDict}
    @type newData: L{ConfigDict}
    """
    for key, value in newData.items():
        if isinstance(value, dict):
            if key not in oldData:
                oldData[key] = {}
            elif not isinstance(oldData[key], ConfigDict):
                raise ConfigurationError("%s must not be a dictionary" % (key,))
            mergeData(oldData[key], value)
        else:
            oldData[key] = value



def fullServerPath(base, path):
    """
    @return: C{path} relative to C{base}, unless it is empty or starts with
        C{"/"} or C{"."}.
    """
    if isinstance(path, str) and path and path[0] not in ("/", "."):
        return os.path.join(base, path)
    return path
