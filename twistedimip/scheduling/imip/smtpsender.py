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
SMTP sending utility
"""

__all__ = [
    "SMTPSender",
]

from email.utils import getaddresses, parseaddr
from io import BytesIO

from twisted.internet import defer, ssl
from twisted.logger import Logger
from twisted.mail.smtp import ESMTPSenderFactory, SUCCESS
from zope.interface import implementer

from twistedimip.interfaces import IMailer

log = Logger()


def _asText(value):
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return str(value)



def failedRecipients(result):
    """
    Extract the rejected recipients from the result of an SMTP transfer.

    @param result: C{(numOk, addresses)} where C{addresses} holds
        C{(address, code, response)} tuples, as produced by
        L{twisted.mail.smtp.SMTPSenderFactory}.
    @return: a C{list} of the addresses that were not accepted.
    """
    _ignore_numOk, addresses = result
    return [
        _asText(address)
        for address, code, _ignore_resp in addresses
        if code not in SUCCESS
    ]



@implementer(IMailer)
class SMTPSender(object):

    def __init__(self, username, password, useSSL, server, port, reactor=None):
        if reactor is None:
            from twisted.internet import reactor
        self.username = username
        self.password = password
        self.useSSL = useSSL
        self.server = server
        self.port = port
        self.reactor = reactor


    def send(self, message):
        """
        Send C{message} to the addresses in its C{To} header.

        @return: a L{Deferred} firing with the list of rejected recipients
        """
        _ignore_name, fromAddr = parseaddr(message["From"])
        toAddrs = [addr for _ignore_name, addr in getaddresses(message.get_all("To", []))]
        msgId = message["Message-ID"]

        log.debug("Sending: {message}", message=message)

        def _success(result):
            failed = failedRecipients(result)
            log.info(
                "Sent IMIP message {id} from {fromAddr} to {toAddrs}",
                id=msgId, fromAddr=fromAddr, toAddrs=toAddrs,
            )
            return failed

        def _failure(failure):
            log.error(
                "Failed to send IMIP message {id} from {fromAddr} "
                "to {toAddrs} (Reason: {reason})",
                id=msgId, fromAddr=fromAddr, toAddrs=toAddrs,
                reason=failure.getErrorMessage(),
            )
            return failure

        deferred = defer.Deferred()

        if self.useSSL:
            contextFactory = ssl.optionsForClientTLS(self.server)
        else:
            contextFactory = None

        factory = ESMTPSenderFactory(
            self.username.encode("utf-8") if self.username else None,
            self.password.encode("utf-8") if self.password else None,
            fromAddr, toAddrs,
            BytesIO(message.as_bytes()), deferred,
            contextFactory=contextFactory,
            requireAuthentication=False,
            requireTransportSecurity=self.useSSL)

        # The factory retries, then fails the deferred, on lost connections
        self.reactor.connectTCP(self.server, self.port, factory)
        deferred.addCallbacks(_success, _failure)
        return deferred
