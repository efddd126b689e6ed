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
Decides whether an event being scheduled has already taken place.
"""

__all__ = [
    "ExpiryEvaluator",
]

from twisted.logger import Logger

from twistedimip.dateops import normalizeToUTC, parseDateTime, posixTime
from twistedimip.instance import EventIterator

log = Logger()


class ExpiryEvaluator(object):
    """
    Computes the end of the last occurrence of an event and compares it with
    the current time.

    @ivar clock: provides the current time via C{seconds()}
    @type clock: L{twisted.internet.interfaces.IReactorTime}

    @ivar maxDate: ceiling used in place of the end of unbounded recurring
        events, and at which expansion of bounded ones stops.
    @type maxDate: aware L{datetime.datetime}
    """

    def __init__(self, clock, maxDate):
        self.clock = clock
        if not hasattr(maxDate, "tzinfo"):
            maxDate = parseDateTime(maxDate)
        self.maxDate = normalizeToUTC(maxDate)


    def lastOccurrenceEnd(self, component):
        """
        @param component: the VEVENT to examine
        @type component: L{twistedimip.ical.Component}

        @return: the end of the last occurrence in UTC
        @rtype: L{datetime.datetime}
        """
        dtstart = component.propertyValue("DTSTART")

        if not component.isRecurring():
            dtend = component.propertyValue("DTEND")
            if dtend is not None:
                return normalizeToUTC(dtend)

            iterator = EventIterator(component)
            return iterator.start + iterator.duration

        iterator = EventIterator(component)
        if iterator.isInfinite():
            return self.maxDate

        end = iterator.start + iterator.duration
        for _ignore_start, end in iterator.occurrences(self.maxDate):
            pass

        log.debug(
            "Last occurrence of {uid} (starting {start}) ends {end}",
            uid=component.propertyValue("UID"), start=dtstart, end=end,
        )
        return end


    def isEventInThePast(self, calendar):
        """
        Check if the event in an iTIP message took place in the past already.

        @param calendar: the iTIP calendar object
        @type calendar: L{twistedimip.ical.Component}
        @rtype: C{bool}
        """
        lastOccurrence = posixTime(self.lastOccurrenceEnd(calendar.mainComponent()))
        return lastOccurrence < self.clock.seconds()
