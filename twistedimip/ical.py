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
iCalendar Utilities
"""

__all__ = [
    "InvalidICalendarDataError",
    "Property",
    "Component",
]

import codecs

from icalendar import Calendar as iCalendar
from icalendar.prop import vDDDTypes, vDDDLists

ignoredComponents = ("VTIMEZONE",)


class InvalidICalendarDataError(ValueError):
    pass



class Property (object):
    """
    iCalendar Property
    """
    def __init__(self, name, icalendar, parent=None):
        """
        @param name: the property's name
        @param icalendar: the underlying C{icalendar} property value
        """
        self._name = name.upper()
        self._icalendar = icalendar
        self._parent = parent


    def __repr__(self):
        return "<%s: %r: %r>" % (self.__class__.__name__, self.name(), self.value())


    def name(self):
        return self._name


    def value(self):
        """
        @return: a L{datetime.date}, L{datetime.datetime} or L{datetime.timedelta}
            for date/time valued properties, a list of those for RDATE/EXDATE,
            the C{icalendar} recurrence mapping for RRULE, and a C{str}
            otherwise.
        """
        if isinstance(self._icalendar, vDDDTypes):
            return self._icalendar.dt
        elif isinstance(self._icalendar, vDDDLists):
            return [item.dt for item in self._icalendar.dts]
        elif isinstance(self._icalendar, str):
            return str(self._icalendar)
        else:
            return self._icalendar


    def parameterValue(self, name, default=None):
        """
        Returns a single value for the given parameter.  Raises
        InvalidICalendarDataError if the parameter has more than one value.
        """
        params = getattr(self._icalendar, "params", {})
        value = params.get(name, default)
        if isinstance(value, (list, tuple)):
            if len(value) > 1:
                raise InvalidICalendarDataError("More than one %s parameter in property %r" % (name, self))
            value = value[0] if value else default
        return value



class Component (object):
    """
    X{iCalendar} component.
    """

    @classmethod
    def fromString(clazz, string):
        """
        Construct a L{Component} from a string.
        @param string: a string containing iCalendar data.
        @return: a L{Component} representing the first component described by
            C{string}.
        """
        if isinstance(string, bytes):
            # No BOMs please
            if string[:3] == codecs.BOM_UTF8:
                string = string[3:]
            # Valid utf-8 please
            string = string.decode("utf-8")
        elif string[:1] == u"\ufeff":
            string = string[1:]

        try:
            calendar = iCalendar.from_ical(string)
        except ValueError as e:
            raise InvalidICalendarDataError("%s\n%s" % (e, string,))
        return clazz(calendar)


    @classmethod
    def fromStream(clazz, stream):
        """
        Construct a L{Component} from a stream.
        @param stream: a C{read()}able stream containing iCalendar data.
        """
        return clazz.fromString(stream.read())


    def __init__(self, icalendar, parent=None):
        """
        @param icalendar: the underlying C{icalendar} component.
        """
        self._icalendar = icalendar
        self._parent = parent


    def __str__(self):
        cachedCopy = getattr(self, "_cachedCopy", None)
        if cachedCopy is not None:
            return cachedCopy
        self._cachedCopy = self._icalendar.to_ical().decode("utf-8")
        return self._cachedCopy


    def __repr__(self):
        return "<%s: %r>" % (self.__class__.__name__, self.name(),)


    def name(self):
        """
        @return: the name of the iCalendar type of this component.
        """
        return self._icalendar.name


    def subcomponents(self):
        """
        @return: an iterable of L{Component} objects, one for each subcomponent
            of this component.
        """
        return (
            Component(c, parent=self)
            for c in self._icalendar.subcomponents
        )


    def mainComponent(self):
        """
        Return the primary iCal component in this calendar. If a master component exists, use that,
        otherwise use the first override.

        @return: the L{Component} of the primary type.
        """
        assert self.name() == "VCALENDAR", "Must be a VCALENDAR: %r" % (self,)

        result = None
        for component in self.subcomponents():
            if component.name() in ignoredComponents:
                continue
            if not component.hasProperty("RECURRENCE-ID"):
                return component
            elif result is None:
                result = component

        return result


    def hasProperty(self, name):
        """
        @param name: the name of the property whose existence is being tested.
        @return: True if the named property exists, False otherwise.
        """
        return name in self._icalendar


    def properties(self, name=None):
        """
        @param name: if given and not C{None}, restricts the returned properties
            to those with the given C{name}.
        @return: an iterable of L{Property} objects, one for each property of
            this component.
        """
        if name is None:
            items = self._icalendar.items()
        elif name in self._icalendar:
            items = ((name, self._icalendar[name]),)
        else:
            items = ()

        for pname, values in items:
            if not isinstance(values, list):
                values = [values]
            for value in values:
                yield Property(pname, value, parent=self)


    def propertyValue(self, name):
        properties = tuple(self.properties(name))
        if len(properties) == 1:
            return properties[0].value()
        if len(properties) > 1:
            raise InvalidICalendarDataError("More than one %s property in component %r" % (name, self))
        return None


    def getAllAttendeeProperties(self):
        """
        Yield all attendees as Property objects.  Works on either a VCALENDAR or
        on a component.
        @return: a generator yielding Property objects
        """

        # Extract appropriate sub-component if this is a VCALENDAR
        if self.name() == "VCALENDAR":
            for component in self.subcomponents():
                if component.name() not in ignoredComponents:
                    for attendee in component.getAllAttendeeProperties():
                        yield attendee
        else:
            # Find the primary subcomponent
            for attendee in self.properties("ATTENDEE"):
                yield attendee


    def isRecurring(self):
        """
        Check whether any recurrence rule is present on this component.
        """
        return self.hasProperty("RRULE")


    def isRecurringUnbounded(self):
        """
        Check for unbounded recurrence.
        """
        for rrule in self.properties("RRULE"):
            recur = rrule.value()
            if "COUNT" not in recur and "UNTIL" not in recur:
                return True
        return False
