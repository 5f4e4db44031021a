#
# Licensed to the Apache Software Foundation (ASF) under one
# or more contributor license agreements.  See the NOTICE file
# distributed with this work for additional information
# regarding copyright ownership.  The ASF licenses this file
# to you under the Apache License, Version 2.0 (the
# "License"); you may not use this file except in compliance
# with the License.  You may obtain a copy of the License at
#
#   http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing,
# software distributed under the License is distributed on an
# "AS IS" BASIS, WITHOUT WARRANTIES OR CONDITIONS OF ANY
# KIND, either express or implied.  See the License for the
# specific language governing permissions and limitations
# under the License.
#

"""
Blocking request/reply.
"""

import logging
import uuid
from typing import List, Optional

from proton import Message, Timeout
from proton.handlers import IncomingMessageHandler
from proton.reactor import LinkOption
from proton.utils import BlockingConnection

from ._destinations import Capabilities, Destination, TemporaryQueue

log = logging.getLogger("brokersamples")


class Requestor(IncomingMessageHandler):
    """
    Sends requests to one destination and waits for the matching reply on
    a temporary queue owned by this requestor.

    :param connection: An open blocking connection.
    :param destination: Where requests go.
    :param timeout: Seconds to wait for each reply.
    :param options: Extra link options for the request sender, typically
        the factory's delivery guarantee.
    """

    def __init__(self, connection: BlockingConnection, destination: Destination,
                 timeout: float = 2.0, options: Optional[List[LinkOption]] = None) -> None:
        super(Requestor, self).__init__()
        self.connection = connection
        self.destination = destination
        self.timeout = timeout
        self.sender = connection.create_sender(destination.address,
                                               options=[destination.option()] + list(options or []))
        self.receiver = connection.create_receiver(None, dynamic=True, credit=1, handler=self,
                                                   options=Capabilities(TemporaryQueue.capability))
        self.reply_queue = TemporaryQueue(self.receiver.remote_source.address)
        self.response = None

    @property
    def reply_to(self) -> str:
        return self.reply_queue.address

    def request(self, msg: Message) -> Optional[Message]:
        """
        Send ``msg`` and return its reply, or ``None`` when no reply arrived
        within the timeout. Replies to earlier, timed out requests are
        dropped.
        """
        msg.reply_to = self.reply_to
        msg.correlation_id = correlation_id = str(uuid.uuid4())
        self.sender.send(msg)

        def wakeup():
            return self.response is not None and self.response.correlation_id == correlation_id

        try:
            self.connection.wait(wakeup, timeout=self.timeout, msg="Waiting for reply")
        except Timeout:
            log.debug("no reply to %s within %ss", correlation_id, self.timeout)
            return None
        response = self.response
        self.response = None
        return response

    def on_message(self, event):
        if self.response is not None:
            log.debug("dropping stale reply %s", self.response.correlation_id)
        self.response = event.message
        self.receiver.flow(1)
        self.connection.container.yield_()

    def close(self) -> None:
        self.sender.close()
        self.receiver.close()
