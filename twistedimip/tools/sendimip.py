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
Send an iCalendar file as an iMIP message.
"""

import os
import sys
from getopt import getopt, GetoptError

from twisted.internet.defer import inlineCallbacks
from twisted.internet.task import react
from twisted.logger import globalLogBeginner, textFileLogObserver

from twistedimip.config import ConfigurationError
from twistedimip.ical import Component, InvalidICalendarDataError
from twistedimip.scheduling.imip.outbound import makeIMipPlugin
from twistedimip.scheduling.itip import SchedulingMessage
from twistedimip.stdconfig import config


def usage(e=None):
    if e:
        print(e)
        print("")

    name = os.path.basename(sys.argv[0])
    print("usage: %s [options] ics_file originator recipient" % (name,))
    print("")
    print("  Sends the iTIP message in ics_file from originator to recipient")
    print("  via iMIP.  Both addresses must be mailto: URIs.")
    print("")
    print("options:")
    print("  -h --help: print this help and exit")
    print("  -f --config <path>: Specify a plist configuration file")
    print("  -m --method <method>: iTIP method (default: METHOD of ics_file)")
    print("  -v --verbose: log to stdout")
    print("")

    if e:
        sys.exit(64)
    else:
        sys.exit(0)



@inlineCallbacks
def sendICalendarFile(reactor, plugin, inputFileName, originator, recipient, method=None):
    """
    Schedule the calendar data in C{inputFileName} and return the resulting
    schedule status.
    """
    with open(inputFileName, "rb") as inputFile:
        calendar = Component.fromStream(inputFile)

    if method is None:
        method = calendar.propertyValue("METHOD") or "REQUEST"

    message = SchedulingMessage(method, originator, recipient, calendar)
    yield plugin.schedule(message)
    return message.scheduleStatus



@inlineCallbacks
def runSendIMip(reactor, plugin, inputFileName, originator, recipient, method=None):
    """
    Send C{inputFileName} and report the schedule status on stdout.  An
    unreadable or invalid file is reported on stderr and ends the process
    with exit status 1.
    """
    try:
        status = yield sendICalendarFile(reactor, plugin, inputFileName,
                                         originator, recipient, method)
    except (InvalidICalendarDataError, IOError) as e:
        sys.stderr.write("Unable to read %s: %s\n" % (inputFileName, e,))
        raise SystemExit(1)

    print("Schedule status: %s" % (status or "none (not applicable)",))



def main():
    try:
        (optargs, args) = getopt(
            sys.argv[1:], "hf:m:v", [
                "help",
                "config=",
                "method=",
                "verbose",
            ],
        )
    except GetoptError as e:
        usage(e)

    configFileName = None
    method = None
    verbose = False

    for opt, arg in optargs:
        if opt in ("-h", "--help"):
            usage()
        elif opt in ("-f", "--config"):
            configFileName = arg
        elif opt in ("-m", "--method"):
            method = arg.upper()
        elif opt in ("-v", "--verbose"):
            verbose = True

    try:
        inputFileName, originator, recipient = args
    except ValueError:
        if len(args) > 3:
            many = "many"
        else:
            many = "few"
        usage("Too %s arguments" % (many,))

    if verbose:
        globalLogBeginner.beginLoggingTo([textFileLogObserver(sys.stdout)])

    try:
        if configFileName:
            config.load(configFileName)
    except ConfigurationError as e:
        sys.stderr.write("Invalid configuration: %s\n" % (e,))
        sys.exit(1)

    plugin = makeIMipPlugin(config)
    if plugin is None:
        sys.stderr.write("iMIP is not enabled (Scheduling.iMIP.Enabled)\n")
        sys.exit(1)

    react(runSendIMip, (plugin, inputFileName, originator, recipient, method))


if __name__ == "__main__":
    main()
