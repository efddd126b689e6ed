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
Plain-text bodies for outbound iMIP messages.
"""

__all__ = [
    "TemplateRenderer",
]

import os

from twisted.logger import Logger
from zope.interface import implementer

from twistedimip.interfaces import ITemplateRenderer

log = Logger()

#
# Templates
#

plainRequestTemplate = u"""Hello %(attendee_name)s,

%(invitee_name)s has invited you to a meeting.

      Title: %(meeting_title)s
Description: %(meeting_description)s
   Location: %(meeting_location)s
      Start: %(meeting_start)s
        End: %(meeting_end)s
        URL: %(meeting_url)s
"""

plainReplyTemplate = u"""Hello %(attendee_name)s,

%(invitee_name)s has replied to your meeting invitation.

      Title: %(meeting_title)s
      Start: %(meeting_start)s
        End: %(meeting_end)s
"""

plainCancelTemplate = u"""Hello %(attendee_name)s,

%(invitee_name)s has cancelled the meeting.

      Title: %(meeting_title)s
      Start: %(meeting_start)s
        End: %(meeting_end)s
"""

builtinTemplates = {
    "request": plainRequestTemplate,
    "reply": plainReplyTemplate,
    "cancel": plainCancelTemplate,
}



@implementer(ITemplateRenderer)
class TemplateRenderer(object):
    """
    Renders the C{request}, C{reply} and C{cancel} plain-text templates.

    A template named C{<name>-plain.txt} in C{templatesDirectory} replaces
    the built-in template of that name.  Templates use C{%(name)s} slots
    and are passed through the translation in C{params["l"]} before being
    filled in.
    """

    def __init__(self, templatesDirectory=None):
        self.templatesDirectory = templatesDirectory


    def loadTemplate(self, templateName):
        if templateName not in builtinTemplates:
            raise ValueError("Unknown mail template: %r" % (templateName,))

        if self.templatesDirectory:
            templatePath = os.path.join(
                self.templatesDirectory, "%s-plain.txt" % (templateName,)
            )
            if os.path.exists(templatePath):
                with open(templatePath, encoding="utf-8") as templateFile:
                    return templateFile.read()
            log.debug("No {path}, using built-in template", path=templatePath)

        # Fall back to built-in simple templates
        return builtinTemplates[templateName]


    def render(self, templateName, params):
        template = self.loadTemplate(templateName)
        return params["l"].translate(template, params)
