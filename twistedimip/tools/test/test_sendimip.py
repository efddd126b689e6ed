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


from io import StringIO
import sys

from twisted.internet.task import Clock
from twisted.trial import unittest

from twistedimip.ical import InvalidICalendarDataError
from twistedimip.localization import L10NFactory
from twistedimip.scheduling.imip.outbound import IMipPlugin
from twistedimip.scheduling.imip.templates import TemplateRenderer
from twistedimip.scheduling.itip import iTIPRequestStatus
from twistedimip.tools.sendimip import runSendIMip, sendICalendarFile

cancelText = b"""BEGIN:VCALENDAR
VERSION:2.0
METHOD:CANCEL
PRODID:-//CALENDARSERVER.ORG//NONSGML Version 1//EN
BEGIN:VEVENT
UID:4F2C1D0B-9C0E-4D5A-8F1B-0B4B4C6E9A11
DTSTAMP:20200101T000000Z
DTSTART:20200325T154500Z
DTEND:20200325T164500Z
ATTENDEE:mailto:attendee@example.com
ORGANIZER:mailto:organizer@example.com
SUMMARY:Team Sync
END:VEVENT
END:VCALENDAR
""".replace(b"\n", b"\r\n")


class RecordingMailer(object):

    def __init__(self):
        self.messages = []


    def send(self, message):
        self.messages.append(message)
        return []



class SendICalendarFileTests(unittest.TestCase):

    def setUp(self):
        self.mailer = RecordingMailer()
        self.plugin = IMipPlugin("dav", self.mailer, L10NFactory(),
                                 TemplateRenderer(), clock=Clock())


    def writeFile(self, data):
        path = self.mktemp()
        with open(path, "wb") as f:
            f.write(data)
        return path


    def test_methodFromCalendar(self):
        status = self.successResultOf(sendICalendarFile(
            None, self.plugin, self.writeFile(cancelText),
            "mailto:organizer@example.com", "mailto:attendee@example.com",
        ))
        self.assertEqual(status, iTIPRequestStatus.MESSAGE_SENT)
        self.assertEqual(self.mailer.messages[0]["Subject"], "Cancelled: Team Sync")


    def test_methodOverride(self):
        self.successResultOf(sendICalendarFile(
            None, self.plugin, self.writeFile(cancelText),
            "mailto:organizer@example.com", "mailto:attendee@example.com",
            method="REQUEST",
        ))
        self.assertEqual(self.mailer.messages[0]["Subject"], "Team Sync")


    def test_notApplicable(self):
        status = self.successResultOf(sendICalendarFile(
            None, self.plugin, self.writeFile(cancelText),
            "mailto:organizer@example.com", "urn:x-uid:attendee",
        ))
        self.assertIdentical(status, None)
        self.assertEqual(self.mailer.messages, [])


    def test_invalidFile(self):
        self.failureResultOf(sendICalendarFile(
            None, self.plugin, self.writeFile(b"not calendar data"),
            "mailto:organizer@example.com", "mailto:attendee@example.com",
        ), InvalidICalendarDataError)


    def test_runReportsStatus(self):
        stdout = StringIO()
        self.patch(sys, "stdout", stdout)
        self.successResultOf(runSendIMip(
            None, self.plugin, self.writeFile(cancelText),
            "mailto:organizer@example.com", "mailto:attendee@example.com",
        ))
        self.assertEqual(stdout.getvalue(),
                         "Schedule status: %s\n" % (iTIPRequestStatus.MESSAGE_SENT,))


    def test_runInvalidFileExits(self):
        """
        An invalid calendar file is reported and ends the run with a
        non-zero exit status.
        """
        stderr = StringIO()
        self.patch(sys, "stderr", stderr)
        path = self.writeFile(b"not calendar data")
        failure = self.failureResultOf(runSendIMip(
            None, self.plugin, path,
            "mailto:organizer@example.com", "mailto:attendee@example.com",
        ), SystemExit)
        self.assertEqual(failure.value.code, 1)
        self.assertIn("Unable to read %s" % (path,), stderr.getvalue())
        self.assertEqual(self.mailer.messages, [])


    def test_runMissingFileExits(self):
        self.patch(sys, "stderr", StringIO())
        failure = self.failureResultOf(runSendIMip(
            None, self.plugin, self.mktemp(),
            "mailto:organizer@example.com", "mailto:attendee@example.com",
        ), SystemExit)
        self.assertEqual(failure.value.code, 1)
