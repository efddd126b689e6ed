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
Outbound iMIP mail handling.

This module is responsible for sending out iMIP messages.  iMIP is the
email-based transport for iTIP.  iTIP deals with scheduling operations for
iCalendar objects.
"""

__all__ = [
    "IMipPlugin",
    "makeIMipPlugin",
]

import datetime

from twisted.internet.defer import inlineCallbacks, maybeDeferred
from twisted.logger import Logger, LogLevel

from twistedimip.dateops import isDateOnly
from twistedimip.localization import L10NFactory
from twistedimip.scheduling.imip.expiry import ExpiryEvaluator
from twistedimip.scheduling.imip.message import MessageBuilder
from twistedimip.scheduling.imip.smtpsender import SMTPSender
from twistedimip.scheduling.imip.templates import TemplateRenderer
from twistedimip.scheduling.itip import iTIPRequestStatus


def _stripMailto(address):
    return address[7:]



def _isMailto(address):
    return address is not None and address.lower().startswith("mailto:")



class IMipPlugin(object):
    """
    Turns iTIP scheduling messages into emails and hands them to a mailer.

    @ivar appName: translation domain passed to the localization provider
    @ivar mailer: an L{twistedimip.interfaces.IMailer}
    @ivar l10nFactory: an L{twistedimip.interfaces.IL10NFactory}
    @ivar renderer: an L{twistedimip.interfaces.ITemplateRenderer}
    @ivar messageBuilder: an L{twistedimip.interfaces.IMessageBuilder}
    @ivar evaluator: the L{ExpiryEvaluator} used to skip past events
    """
    log = Logger()

    def __init__(self, appName, mailer, l10nFactory, renderer, clock=None,
                 maxDate="2038-01-01", defaultLanguage="en",
                 messageBuilder=None, logger=None):
        if clock is None:
            from twisted.internet import reactor as clock
        self.appName = appName
        self.mailer = mailer
        self.l10nFactory = l10nFactory
        self.renderer = renderer
        self.defaultLanguage = defaultLanguage
        self.evaluator = ExpiryEvaluator(clock, maxDate)
        self.messageBuilder = MessageBuilder() if messageBuilder is None else messageBuilder
        if logger is not None:
            self.log = logger


    @inlineCallbacks
    def schedule(self, schedulingMessage):
        """
        Deliver one iTIP message via email and set its C{scheduleStatus}.

        Messages for insignificant changes are acknowledged without sending
        anything.  Messages that cannot be routed by email, or that are
        about events already over, are left alone without a status.

        @param schedulingMessage: the message to deliver
        @type schedulingMessage: L{twistedimip.scheduling.itip.SchedulingMessage}
        @return: a L{Deferred} that fires with C{None}; it never fails
            because of a delivery problem.
        """

        # Not sending any emails if the system considers the update
        # insignificant.
        if not schedulingMessage.significantChange:
            if not schedulingMessage.scheduleStatus:
                schedulingMessage.scheduleStatus = iTIPRequestStatus.NOT_SIGNIFICANT
            return

        if not _isMailto(schedulingMessage.sender):
            self.log.debug("Not sending iMIP message from non-mailto originator {sender}",
                           sender=schedulingMessage.sender)
            return

        if not _isMailto(schedulingMessage.recipient):
            self.log.debug("Not sending iMIP message to non-mailto recipient {recipient}",
                           recipient=schedulingMessage.recipient)
            return

        calendar = schedulingMessage.message

        # don't send out mails for events that already took place
        if self.evaluator.isEventInThePast(calendar):
            self.log.debug("Skipping iMIP message for old event {message!r}",
                           message=schedulingMessage)
            return

        component = calendar.mainComponent()
        summary = component.propertyValue("SUMMARY") or u""

        sender = _stripMailto(schedulingMessage.sender)
        recipient = _stripMailto(schedulingMessage.recipient)

        senderName = schedulingMessage.senderName or None
        recipientName = schedulingMessage.recipientName or None

        method = (schedulingMessage.method or "REQUEST").upper()
        if method == "REPLY":
            subject = u"Re: " + summary
            templateName = "reply"
        elif method == "CANCEL":
            subject = u"Cancelled: " + summary
            templateName = "cancel"
        else:
            # Treat 'REQUEST' as the default
            subject = summary
            templateName = "request"

        attendee = self.getCurrentAttendee(schedulingMessage)
        lang = self.getAttendeeLangOrDefault(attendee, self.defaultLanguage)
        l10n = self.l10nFactory.get(self.appName, lang)

        params = self.getEventDetails(component, l10n)
        params.update(
            l=l10n,
            attendee_name=recipientName or recipient,
            invitee_name=senderName or sender,
        )
        plainBody = self.renderer.render(templateName, params)

        message = self.messageBuilder.buildMessage(
            sender, senderName, recipient, recipientName, subject, plainBody,
            str(calendar), method,
        )

        try:
            failed = yield maybeDeferred(self.mailer.send, message)
        except Exception:
            self.log.failure(
                "Unable to send iMIP message to {recipient}",
                level=LogLevel.error, recipient=recipient,
            )
            status = iTIPRequestStatus.DELIVERY_FAILED
        else:
            if failed:
                self.log.error("Unable to deliver message to {failed}",
                               failed=", ".join(failed))
                status = iTIPRequestStatus.DELIVERY_FAILED
            else:
                status = iTIPRequestStatus.MESSAGE_SENT

        schedulingMessage.scheduleStatus = status


    def getCurrentAttendee(self, schedulingMessage):
        """
        @return: the ATTENDEE L{Property} matching the message recipient, or
            C{None}.
        """
        recipient = schedulingMessage.recipient.lower()
        for attendee in schedulingMessage.message.getAllAttendeeProperties():
            if attendee.value().lower() == recipient:
                return attendee
        return None


    def getAttendeeLangOrDefault(self, attendee, default):
        if attendee is not None:
            lang = attendee.parameterValue("LANGUAGE")
            if lang:
                return lang
        return default


    def getEventDetails(self, component, l10n):
        """
        Create a dictionary mapping template parameter names to localized
        text for the event being scheduled.

        @param component: the main component of the iTIP message
        @type component: L{twistedimip.ical.Component}
        @param l10n: translation for the recipient
        @type l10n: L{twistedimip.interfaces.ITranslation}
        @rtype: C{dict}
        """
        results = {}
        for propertyName, paramName in (
            ("SUMMARY", "meeting_title"),
            ("DESCRIPTION", "meeting_description"),
            ("LOCATION", "meeting_location"),
            ("URL", "meeting_url"),
        ):
            value = component.propertyValue(propertyName)
            results[paramName] = u"" if value is None else value

        dtstart = component.propertyValue("DTSTART")
        dtend = component.propertyValue("DTEND")
        if dtend is None:
            duration = component.propertyValue("DURATION")
            if duration is not None:
                dtend = dtstart + duration
            elif isDateOnly(dtstart):
                dtend = dtstart + datetime.timedelta(days=1)
            else:
                dtend = dtstart

        results["meeting_start"] = self._formatDateTime(l10n, dtstart)
        if isDateOnly(dtend):
            # DATE end values are exclusive
            dtend = dtend - datetime.timedelta(days=1)
        results["meeting_end"] = self._formatDateTime(l10n, dtend)

        return results


    def _formatDateTime(self, l10n, value):
        if isDateOnly(value):
            return l10n.dtDate(value)
        return u"%s %s" % (l10n.dtDate(value), l10n.dtTime(value),)



def makeIMipPlugin(config, mailer=None, clock=None):
    """
    Create an L{IMipPlugin} from the C{Scheduling.iMIP} configuration.

    @param config: the configuration
    @type config: L{twistedimip.config.Config}
    @param mailer: the L{twistedimip.interfaces.IMailer} to use; an
        L{SMTPSender} for C{Scheduling.iMIP.Sending} when C{None}.
    @return: the plugin, or C{None} when iMIP is disabled
    """
    settings = config.Scheduling.iMIP
    if not settings.Enabled:
        return None

    if mailer is None:
        sending = settings.Sending
        mailer = SMTPSender(sending.Username, sending.Password,
            sending.UseSSL, sending.Server, sending.Port)

    return IMipPlugin(
        settings.AppName,
        mailer,
        L10NFactory(config.Localization.LocalesDirectory),
        TemplateRenderer(settings.MailTemplatesDirectory or None),
        clock=clock,
        maxDate=settings.MaxDate,
        defaultLanguage=settings.DefaultLanguage or config.Localization.Language or "en",
        messageBuilder=MessageBuilder(settings.Sending.Address or None),
    )
