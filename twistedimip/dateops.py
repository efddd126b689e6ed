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
Date/time Utilities
"""

__all__ = [
    "isDateOnly",
    "normalizeToUTC",
    "parseDateTime",
    "posixTime",
]

import calendar
import datetime

from dateutil.parser import isoparse
import pytz


def isDateOnly(value):
    """
    @return: C{True} if C{value} is an iCalendar DATE (no time-of-day).
    """
    return isinstance(value, datetime.date) and not isinstance(value, datetime.datetime)



def normalizeToUTC(value):
    """
    Normalize a date or date-time to an aware date-time in UTC. Date-only
    values become midnight UTC and floating date-times are treated as UTC.

    @param value: the value to normalize
    @type value: L{datetime.date} or L{datetime.datetime}
    @rtype: L{datetime.datetime}
    """
    if isDateOnly(value):
        return datetime.datetime(value.year, value.month, value.day, tzinfo=pytz.utc)
    elif not isinstance(value, datetime.datetime):
        raise TypeError("%r is not a date or datetime instance" % (value,))
    elif value.tzinfo is None:
        return pytz.utc.localize(value)
    else:
        return value.astimezone(pytz.utc)



def posixTime(value):
    """
    Seconds since the epoch for a date or date-time, see L{normalizeToUTC}.
    """
    return calendar.timegm(normalizeToUTC(value).utctimetuple())



def parseDateTime(text):
    """
    Parse an ISO 8601 date or date-time string (as used for configuration
    values such as C{MaxDate}) into a UTC date-time.

    @raise ValueError: if C{text} cannot be parsed.
    """
    if isinstance(text, datetime.date):
        # plist <date> values arrive already parsed
        return normalizeToUTC(text)
    return normalizeToUTC(isoparse(text))
