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
iCalendar Recurrence Expansion Utilities
"""

__all__ = [
    "EventIterator",
]

import datetime

from dateutil.rrule import rruleset, rrulestr
from icalendar.prop import vRecur
import pytz

from twistedimip.dateops import isDateOnly, normalizeToUTC


class EventIterator(object):
    """
    Expands the occurrences of a single (master) event component.

    Expansion happens in the wall-clock time of DTSTART so that recurrences
    keep their local time across daylight saving transitions; every
    occurrence is handed out as a pair of UTC date-times. There is no way to
    iterate without a ceiling.
    """

    def __init__(self, component):
        """
        @param component: the VEVENT to expand
        @type component: L{twistedimip.ical.Component}
        """
        self.component = component

        dtstart = component.propertyValue("DTSTART")
        if dtstart is None:
            raise ValueError("Cannot expand %r without a DTSTART" % (component,))

        self.dateOnly = isDateOnly(dtstart)
        if self.dateOnly or dtstart.tzinfo is None:
            self.tzinfo = None
            self.wallStart = datetime.datetime(
                dtstart.year, dtstart.month, dtstart.day,
                *((0, 0, 0) if self.dateOnly else (dtstart.hour, dtstart.minute, dtstart.second))
            )
        else:
            self.tzinfo = dtstart.tzinfo
            self.wallStart = dtstart.replace(tzinfo=None)

        self.start = normalizeToUTC(dtstart)
        self.duration = self._occurrenceDuration(dtstart)
        self.periods = {}
        self.recurrenceSet = self._buildRecurrenceSet()


    def _occurrenceDuration(self, dtstart):
        dtend = self.component.propertyValue("DTEND")
        if dtend is not None:
            return normalizeToUTC(dtend) - normalizeToUTC(dtstart)

        duration = self.component.propertyValue("DURATION")
        if duration is not None:
            return duration

        if self.dateOnly:
            return datetime.timedelta(days=1)
        return datetime.timedelta(0)


    def _buildRecurrenceSet(self):
        recurrenceSet = rruleset()

        for rrule in self.component.properties("RRULE"):
            recurrenceSet.rrule(self._ruleFromRecur(rrule.value()))

        for rdate in self.component.properties("RDATE"):
            for value in rdate.value():
                if isinstance(value, tuple):
                    value = self._addPeriod(*value)
                recurrenceSet.rdate(self._toWallClock(value))

        for exdate in self.component.properties("EXDATE"):
            for value in exdate.value():
                recurrenceSet.exdate(self._toWallClock(value))

        # DTSTART is always the first instance
        recurrenceSet.rdate(self.wallStart)

        return recurrenceSet


    def _addPeriod(self, start, endOrDuration):
        """
        Record the duration of a PERIOD valued RDATE instance.

        @return: the start of the period
        """
        if isinstance(endOrDuration, datetime.timedelta):
            duration = endOrDuration
        else:
            duration = normalizeToUTC(endOrDuration) - normalizeToUTC(start)
        self.periods[self._toWallClock(start)] = duration
        return start


    def _ruleFromRecur(self, recur):
        recur = vRecur(recur)
        until = recur.pop("UNTIL", None)
        rule = rrulestr(recur.to_ical().decode("ascii"), dtstart=self.wallStart)
        if until:
            rule = rule.replace(until=self._toWallClock(until[0], endOfDay=True))
        return rule


    def _toWallClock(self, value, endOfDay=False):
        """
        Convert a date or date-time into a naive date-time in the same
        wall-clock time as DTSTART.
        """
        if isDateOnly(value):
            if endOfDay and not self.dateOnly:
                return datetime.datetime.combine(value, datetime.time(23, 59, 59))
            return datetime.datetime(value.year, value.month, value.day)
        elif value.tzinfo is None:
            return value
        elif self.tzinfo is None:
            return value.astimezone(pytz.utc).replace(tzinfo=None)
        else:
            return value.astimezone(self.tzinfo).replace(tzinfo=None)


    def _fromWallClock(self, value):
        if self.tzinfo is None:
            return pytz.utc.localize(value)
        elif hasattr(self.tzinfo, "localize"):
            # pytz zones need localize() to pick the right offset
            return self.tzinfo.localize(value).astimezone(pytz.utc)
        else:
            return value.replace(tzinfo=self.tzinfo).astimezone(pytz.utc)


    def isInfinite(self):
        """
        @return: C{True} if any recurrence rule has neither COUNT nor UNTIL.
        """
        return self.component.isRecurringUnbounded()


    def occurrences(self, ceiling):
        """
        Generate C{(start, end)} UTC date-time pairs for each occurrence, in
        order. Generation stops once the recurrence set is exhausted or after
        the first occurrence whose end is at or beyond C{ceiling}.

        @param ceiling: the expansion limit
        @type ceiling: aware L{datetime.datetime}
        """
        for wallStart in self.recurrenceSet:
            start = self._fromWallClock(wallStart)
            end = start + self.periods.get(wallStart, self.duration)
            yield start, end
            if end >= ceiling:
                break
