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


import os

from twisted.trial import unittest
from zope.interface.verify import verifyObject

from twistedimip.interfaces import ITemplateRenderer
from twistedimip.localization import translationTo
from twistedimip.scheduling.imip.templates import TemplateRenderer, builtinTemplates


def templateParams(**kwargs):
    params = {
        "l": translationTo("en"),
        "attendee_name": u"The Attendee",
        "invitee_name": u"The Organizer",
        "meeting_title": u"Team Sync",
        "meeting_description": u"",
        "meeting_location": u"Room 1",
        "meeting_start": u"Wednesday, March 25, 2020 3:45 PM UTC",
        "meeting_end": u"Wednesday, March 25, 2020 4:45 PM UTC",
        "meeting_url": u"",
    }
    params.update(kwargs)
    return params



class TemplateRendererTests(unittest.TestCase):

    def test_interface(self):
        self.assertTrue(verifyObject(ITemplateRenderer, TemplateRenderer()))


    def test_builtinTemplates(self):
        self.assertEqual(sorted(builtinTemplates), ["cancel", "reply", "request"])


    def test_request(self):
        body = TemplateRenderer().render("request", templateParams())
        self.assertTrue(body.startswith(u"Hello The Attendee,\n"))
        self.assertIn(u"The Organizer has invited you to a meeting.", body)
        self.assertIn(u"Location: Room 1", body)
        self.assertNotIn(u"%(", body)


    def test_reply(self):
        body = TemplateRenderer().render("reply", templateParams())
        self.assertIn(u"The Organizer has replied to your meeting invitation.", body)


    def test_cancel(self):
        body = TemplateRenderer().render("cancel", templateParams())
        self.assertIn(u"The Organizer has cancelled the meeting.", body)
        self.assertIn(u"Title: Team Sync", body)


    def test_unknownTemplate(self):
        self.assertRaises(ValueError, TemplateRenderer().loadTemplate, "counter")


    def test_templatesDirectory(self):
        """
        A C{<name>-plain.txt} file in the templates directory replaces the
        built-in template of the same name only.
        """
        directory = self.mktemp()
        os.mkdir(directory)
        with open(os.path.join(directory, "cancel-plain.txt"), "w", encoding="utf-8") as f:
            f.write(u"%(meeting_title)s ist abgesagt.\n")

        renderer = TemplateRenderer(directory)
        self.assertEqual(renderer.render("cancel", templateParams()),
                         u"Team Sync ist abgesagt.\n")
        self.assertEqual(renderer.loadTemplate("request"),
                         builtinTemplates["request"])


    def test_missingTemplatesDirectory(self):
        renderer = TemplateRenderer(os.path.abspath(self.mktemp()))
        self.assertEqual(renderer.loadTemplate("reply"), builtinTemplates["reply"])
