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
Default settings and plist file handling for iMIP delivery.
"""

__all__ = [
    "DEFAULT_CONFIG",
    "POST_UPDATE_HOOKS",
    "config",
    "loadPlistConfig",
]

import os
import plistlib

from twisted.logger import Logger

from twistedimip.config import Config, ConfigDict, ConfigurationError
from twistedimip.config import mergeData, fullServerPath
from twistedimip.dateops import parseDateTime

log = Logger()

DEFAULT_CONFIG = {
    # Root for relative paths
    "ServerRoot": "/var/lib/twistedimip",

    "Localization": {
        "LocalesDirectory": "locales",  # will be relative to ServerRoot
        "Language": "",  # Server language, the fallback for DefaultLanguage
    },

    "Scheduling": {
        "iMIP": {
            "Enabled": False,  # Server-to-iMIP protocol
            "AppName": "dav",  # Translation domain for message bodies
            "DefaultLanguage": "",  # When the ATTENDEE has no LANGUAGE; Localization.Language, then "en"
            "MaxDate": "2038-01-01",  # Ceiling for expanding recurring events, parsed to a UTC datetime
            "MailTemplatesDirectory": "",  # Directory containing <name>-plain.txt templates
            "Sending": {
                "Server": "",  # SMTP server to relay messages through
                "Port": 587,  # SMTP server port to relay messages through
                "Address": "",  # 'From' address for server
                "UseSSL": True,  # Require STARTTLS
                "Username": "",  # For account sending mail
                "Password": "",  # For account sending mail
            },
        },
    },
}



def loadPlistConfig(fileName, defaults=DEFAULT_CONFIG):
    """
    Read a plist configuration file along with the files named in its
    C{Includes} array, in order.  Unknown top-level keys are dropped unless
    C{TWISTEDIMIP_CONFIG_VALIDATION} is C{"loose"}.

    @return: the merged settings
    @rtype: L{ConfigDict}
    @raise ConfigurationError: if a file cannot be read or parsed.
    """
    configDict = ConfigDict(_parsePlist(fileName, defaults))

    includes = configDict.pop("Includes", [])
    for include in includes:
        path = fullServerPath(configDict.get("ServerRoot", ""), include)
        if os.path.exists(path):
            mergeData(configDict, loadPlistConfig(path, defaults))
        else:
            log.warn("Included configuration file is missing: {f}", f=path)

    return configDict



def _parsePlist(fileName, defaults):
    try:
        with open(fileName, "rb") as f:
            configDict = plistlib.load(f)
    except (IOError, OSError):
        log.error("Configuration file does not exist or is inaccessible: {f}", f=fileName)
        raise ConfigurationError("Configuration file does not exist or is inaccessible: %s" % (fileName,))
    except plistlib.InvalidFileException:
        log.error("Configuration file is not a valid plist: {f}", f=fileName)
        raise ConfigurationError("Configuration file is not a valid plist: %s" % (fileName,))

    if not isinstance(configDict, dict):
        raise ConfigurationError("Configuration file is not a dictionary: %s" % (fileName,))
    return _cleanup(configDict, defaults)



def _cleanup(configDict, defaults):
    if os.environ.get("TWISTEDIMIP_CONFIG_VALIDATION") == "loose":
        return configDict

    cleanDict = {}
    for key, value in configDict.items():
        if key in defaults or key == "Includes":
            cleanDict[key] = value
        else:
            log.error("Ignoring unknown configuration option: {k}", k=key)
    return cleanDict



RELATIVE_PATHS = [
    ("ServerRoot", ("Localization", "LocalesDirectory",)),
    ("ServerRoot", ("Scheduling", "iMIP", "MailTemplatesDirectory",)),
]


def _updateDataStore(configDict):
    """
    Post-update configuration hook for making all configured paths relative to
    their respective root directories rather than the current working directory.
    """
    configDict.ServerRoot = configDict.ServerRoot.rstrip("/")

    for root, relativePath in RELATIVE_PATHS:
        inDict = configDict
        for segment in relativePath[:-1]:
            inDict = inDict[segment]
        lastPath = relativePath[-1]
        inDict[lastPath] = fullServerPath(configDict[root], inDict[lastPath])



def _updateIMIP(configDict):
    """
    Post-update configuration hook for the iMIP section: C{MaxDate} becomes
    a UTC L{datetime.datetime}.
    """
    service = configDict.Scheduling.iMIP

    try:
        service.MaxDate = parseDateTime(service.MaxDate)
    except (TypeError, ValueError):
        raise ConfigurationError("Invalid Scheduling.iMIP.MaxDate: %r" % (service.MaxDate,))

    if service.Enabled and not service.Sending.Server:
        log.warn("iMIP is enabled but no Sending.Server is configured")


POST_UPDATE_HOOKS = (
    _updateDataStore,
    _updateIMIP,
)

config = Config(DEFAULT_CONFIG, loadPlistConfig)
config.addPostUpdateHooks(POST_UPDATE_HOOKS)
