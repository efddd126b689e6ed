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
Interfaces of the collaborators used by iMIP delivery.
"""

__all__ = [
    "IMailer",
    "ITranslation",
    "IL10NFactory",
    "ITemplateRenderer",
    "IMessageBuilder",
]

from zope.interface import Attribute, Interface


class IMailer(Interface):
    """
    Outbound mail transport.
    """

    def send(message): #@NoSelf
        """
        Send a message.

        @param message: the message to send; its C{To} header names the
            recipients.
        @type message: L{email.message.Message}

        @return: a C{list} of the recipient addresses that could not be
            delivered to (empty when everything was accepted), or a
            L{Deferred} firing with such a list.
        @raise Exception: (or errback) when the transport itself failed.
        """



class ITranslation(Interface):
    """
    Localized strings for a single language.
    """

    language = Attribute("The language tag this translation is for.")

    def translate(format, *args): #@NoSelf
        """
        Translate C{format} and fill it in with C{args}.  A single mapping
        argument fills C{%(name)s} slots.

        @rtype: C{str}
        """


    def dtDate(val): #@NoSelf
        """
        @param val: a L{datetime.date} or L{datetime.datetime}
        @return: the localized date, e.g. C{"Thursday, October 23, 2008"}
        """


    def dtTime(val, includeTimezone=True): #@NoSelf
        """
        @param val: a L{datetime.datetime}
        @return: the localized time of day, empty for a date-only value
        """



class IL10NFactory(Interface):
    """
    Provider of L{ITranslation}s.
    """

    def get(appName, language): #@NoSelf
        """
        @param appName: the translation domain
        @param language: a language tag such as C{"de"}
        @rtype: L{ITranslation}
        """



class ITemplateRenderer(Interface):
    """
    Renders message bodies.
    """

    def render(templateName, params): #@NoSelf
        """
        @param templateName: one of C{"request"}, C{"reply"}, C{"cancel"}
        @param params: template parameters; C{params["l"]} is the
            L{ITranslation} to use.
        @return: the rendered plain-text body
        @rtype: C{str}
        """



class IMessageBuilder(Interface):
    """
    Builds the email carrying an iTIP message.  Provide an alternative
    implementation to customize the email that gets sent out.
    """

    def buildMessage(sender, senderName, recipient, recipientName, subject,
                     plainBody, calendarText, method): #@NoSelf
        """
        @param sender: bare email address of the originator (Reply-To)
        @param recipient: bare email address of the recipient (To)
        @param calendarText: serialized iCalendar data to attach
        @param method: the iTIP method, upper case
        @rtype: L{email.message.Message}
        """
