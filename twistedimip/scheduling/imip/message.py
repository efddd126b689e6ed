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
MIME construction of outbound iMIP messages.
"""

__all__ = [
    "MessageBuilder",
]

from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
import email.utils

from twisted.logger import Logger
from zope.interface import implementer

from twistedimip.interfaces import IMessageBuilder


@implementer(IMessageBuilder)
class MessageBuilder(object):
    """
    Generates a C{multipart/mixed} message with a plain-text body and the
    iTIP data as an C{event.ics} attachment.
    """
    log = Logger()

    attachmentName = "event.ics"

    def __init__(self, serverAddress=None):
        """
        @param serverAddress: address for the C{From} header; the sender's
            own address is used when not set.
        @type serverAddress: C{str}
        """
        self.serverAddress = serverAddress


    def buildMessage(self, sender, senderName, recipient, recipientName,
                     subject, plainBody, calendarText, method):
        """
        Generate MIME text containing an iMIP invitation, cancellation or
        reply.

        @return: the message, ready for transport over SMTP
        @rtype: L{email.mime.multipart.MIMEMultipart}
        """
        msg = MIMEMultipart()
        msg["From"] = self.serverAddress or email.utils.formataddr((senderName, sender))
        msg["Reply-To"] = email.utils.formataddr((senderName, sender))
        msg["To"] = email.utils.formataddr((recipientName, recipient))
        msg["Subject"] = subject
        msg["Date"] = email.utils.formatdate()
        msg["Message-ID"] = email.utils.make_msgid()

        # plain version
        msgPlain = MIMEText(plainBody, "plain", "UTF-8")
        msg.attach(msgPlain)

        # the icalendar attachment
        self.log.debug("Mail gateway sending calendar body: {body}",
                       body=calendarText)
        msgIcal = MIMEText(calendarText, "calendar", "UTF-8")
        msgIcal.set_param("method", method)
        msgIcal.add_header("Content-Disposition", "attachment",
                           filename=self.attachmentName)
        msg.attach(msgIcal)

        return msg
