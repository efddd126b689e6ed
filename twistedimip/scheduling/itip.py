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
iTIP (RFC 5546) scheduling messages as handed to delivery services.
"""

__all__ = [
    "SchedulingMessage",
    "iTIPRequestStatus",
]


class iTIPRequestStatus(object):
    """
    String constants for the iTIP status codes written back by iMIP delivery.
    """

    NOT_SIGNIFICANT_CODE = "1.0"
    MESSAGE_SENT_CODE = "1.1"
    DELIVERY_FAILED_CODE = "5.0"

    NOT_SIGNIFICANT = NOT_SIGNIFICANT_CODE + ";We got the message, but it's not significant enough to warrant an email"
    MESSAGE_SENT = MESSAGE_SENT_CODE + "; Scheduling message is sent via iMip"
    DELIVERY_FAILED = DELIVERY_FAILED_CODE + "; EMail delivery failed"



class SchedulingMessage(object):
    """
    One iTIP transaction between an originator and a single recipient.

    @ivar method: the iTIP method (C{REQUEST}, C{REPLY}, C{CANCEL}, ...)
    @ivar sender: calendar user address of the originator
    @ivar recipient: calendar user address of the recipient
    @ivar senderName: display name of the originator, or C{None}
    @ivar recipientName: display name of the recipient, or C{None}
    @ivar significantChange: whether the change warrants notifying the
        recipient, as decided by whoever generated the message
    @ivar scheduleStatus: the iTIP request status set by delivery, C{None}
        until a delivery service acted on the message
    @ivar message: the iTIP calendar data
    @type message: L{twistedimip.ical.Component}
    """

    def __init__(self, method, sender, recipient, message, senderName=None,
                 recipientName=None, significantChange=True):
        self.method = method
        self.sender = sender
        self.recipient = recipient
        self.message = message
        self.senderName = senderName
        self.recipientName = recipientName
        self.significantChange = significantChange
        self.scheduleStatus = None


    def __repr__(self):
        return "<%s: %s %s -> %s>" % (
            self.__class__.__name__, self.method, self.sender, self.recipient,
        )
