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
Localization module

How to use:

    factory = L10NFactory(localeDir)
    l = factory.get("dav", "de")
    print(l.translate("Hello %s", "Dora"))
    print(l.translate("The event will last %(days)d days", {"days": 4}))

    ... Hallo Dora
    ... Die Veranstaltung dauert 4 Tage

Before you can actually get translated text, you need to:

    1) Choose a "domain" for your code, such as 'dav'
    2) Run xgettext on your source to generate a <domain>.po file.
    3) For each language, give the .po file to the person
       who is doing the translation for editing
    4) Run msgfmt.py on the translated .po to generate a binary .mo
    5) Put the .mo into locales/<lang>/LC_MESSAGES/<domain>.mo

If a translation file cannot be found for the specified language, it will fall
back to 'en', and failing that to the untranslated text.

A translation also has helper methods for date formatting:

    l.dtDate(datetime.date(2008, 10, 23))

    ... Thursday, October 23, 2008
"""

__all__ = [
    "L10NFactory",
    "translationTo",
]

import gettext

from twisted.logger import Logger
from zope.interface import implementer

from twistedimip.interfaces import IL10NFactory, ITranslation

log = Logger()


@implementer(ITranslation)
class translationTo(object):

    translations = {}

    def __init__(self, lang, domain="dav", localeDir=None):

        self.language = lang

        # Cache gettext translation objects in class.translations
        key = (lang, domain, localeDir)
        self.translation = self.translations.get(key, None)
        if self.translation is None:
            self.translation = gettext.translation(domain=domain,
                localedir=localeDir, languages=[lang, "en"], fallback=True)
            if type(self.translation) is gettext.NullTranslations:
                log.debug("No {domain} translation for {lang} in {dir}",
                    domain=domain, lang=lang, dir=localeDir)
            self.translations[key] = self.translation


    def translate(self, format, *args):
        text = self.translation.gettext(format)
        if not args:
            return text
        if len(args) == 1 and isinstance(args[0], dict):
            return text % args[0]
        return text % args


    def dtDate(self, val):
        # Bind to '_' so pygettext.py will pick this up for translation
        _ = self.translation.gettext

        return (
            _("%(dayName)s, %(monthName)s %(dayNumber)d, %(yearNumber)d")
            % {
                'dayName'    : _(daysFull[val.weekday()]),
                'monthName'  : _(monthsFull[val.month]),
                'dayNumber'  : val.day,
                'yearNumber' : val.year,
            }
        )


    def dtTime(self, val, includeTimezone=True):
        if not hasattr(val, "hour"):
            return ""

        # Bind to '_' so pygettext.py will pick this up for translation
        _ = self.translation.gettext

        ampm = _("AM") if val.hour < 12 else _("PM")
        hour12 = val.hour % 12
        if hour12 == 0:
            hour12 = 12

        result = (
            _("%(hour12Number)d:%(minuteNumber)02d %(ampm)s")
            % {
                'hour24Number' : val.hour, # 0-23
                'hour12Number' : hour12, # 1-12
                'minuteNumber' : val.minute, # 0-59
                'ampm'         : ampm,
            }
        )

        if includeTimezone and val.tzinfo is not None:
            result += " %s" % (val.tzname(),)

        return result



@implementer(IL10NFactory)
class L10NFactory(object):
    """
    Hands out L{translationTo} objects for a locales directory.
    """

    def __init__(self, localeDir=None):
        self.localeDir = localeDir


    def get(self, appName, language):
        return translationTo(language, domain=appName, localeDir=self.localeDir)


# The strings below are wrapped in _( ) for the benefit of pygettext.  We don't
# actually want them translated until they're used.

_ = lambda x: x

daysFull = [
    _("Monday"),
    _("Tuesday"),
    _("Wednesday"),
    _("Thursday"),
    _("Friday"),
    _("Saturday"),
    _("Sunday"),
]

monthsFull = [
    "month is 1-based",
    _("January"),
    _("February"),
    _("March"),
    _("April"),
    _("May"),
    _("June"),
    _("July"),
    _("August"),
    _("September"),
    _("October"),
    _("November"),
    _("December"),
]
