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
A small in-process AMQP broker for the integration tests: a queue per
address, dynamic reply queues and the anonymous relay.
"""

from __future__ import annotations

import contextlib
import threading
import uuid
from collections import deque
from typing import Optional

from proton import Condition, Delivery, Endpoint, Message, Sender, symbol
from proton.handlers import MessagingHandler
from proton.reactor import Container


class Queue:
    def __init__(self, name: str, dynamic: bool = False):
        self.name: str = name
        self.dynamic: bool = dynamic
        self.queue: deque[Message] = deque()
        self.consumers: list[Sender] = []

    def subscribe(self, consumer: Sender):
        self.consumers.append(consumer)

    def unsubscribe(self, consumer: Sender):
        if consumer in self.consumers:
            self.consumers.remove(consumer)

    def publish(self, message: Message):
        self.queue.append(message)
        self.dispatch()

    def dispatch(self, consumer: Optional[Sender] = None):
        consumers = [consumer] if consumer else self.consumers
        while self._deliver_to(consumers):
            pass

    def _deliver_to(self, consumers: list[Sender]):
        result = False
        for c in consumers:
            if c.credit and self.queue:
                c.send(self.queue.popleft())
                result = True
        return result


class Broker(MessagingHandler):
    """
    :param echo_settle_mode: Honour the settle mode consumers ask for, so
        at-most-once consumers get pre-settled deliveries.
    :param drop_at: Force the connection closed instead of accepting the
        message with this (1 based) number; the message is lost.
    """

    def __init__(self, url: str = "127.0.0.1:0", echo_settle_mode: bool = False,
                 drop_at: Optional[int] = None) -> None:
        super().__init__(auto_accept=False)
        self.url = url
        self.echo_settle_mode = echo_settle_mode
        self.drop_at = drop_at
        self.received = 0
        self.dropped = 0
        self.queues: dict[str, Queue] = {}
        self.connections = 0
        self.acceptor = None
        self._acceptor_opened = threading.Event()

    @property
    def address(self) -> str:
        self._acceptor_opened.wait()
        host, port = self.acceptor._selectable._delegate.getsockname()[:2]
        return "amqp://%s:%d" % (host, port)

    def queue(self, address: str, dynamic: bool = False) -> Queue:
        if address not in self.queues:
            self.queues[address] = Queue(address, dynamic)
        return self.queues[address]

    def on_start(self, event):
        self.acceptor = event.container.listen(self.url)
        self._acceptor_opened.set()

    def on_connection_opening(self, event):
        self.connections += 1
        event.connection.offered_capabilities = 'ANONYMOUS-RELAY'
        event.connection.properties = {symbol("product"): "test-broker", symbol("version"): "1.0"}

    def on_link_opening(self, event):
        link = event.link
        if link.is_sender:
            if self.echo_settle_mode:
                link.snd_settle_mode = link.remote_snd_settle_mode
            dynamic = link.remote_source.dynamic
            if dynamic or link.remote_source.address:
                address = str(uuid.uuid4()) if dynamic else link.remote_source.address
                link.source.address = address
                self.queue(address, dynamic).subscribe(link)
        elif link.remote_target.address:
            link.target.address = link.remote_target.address

    def _unsubscribe(self, link):
        if link.source.address in self.queues:
            self.queues[link.source.address].unsubscribe(link)

    def on_link_closing(self, event):
        if event.link.is_sender:
            self._unsubscribe(event.link)

    def on_connection_closing(self, event):
        self.remove_stale_consumers(event.connection)

    def on_disconnected(self, event):
        self.remove_stale_consumers(event.connection)

    def remove_stale_consumers(self, connection):
        link = connection.link_head(Endpoint.REMOTE_ACTIVE)
        while link:
            if link.is_sender:
                self._unsubscribe(link)
            link = link.next(Endpoint.REMOTE_ACTIVE)

    def on_sendable(self, event):
        self.queue(event.link.source.address).dispatch(event.link)

    def on_message(self, event):
        if event.connection.state & Endpoint.LOCAL_CLOSED:
            return
        self.received += 1
        if self.received == self.drop_at:
            self.dropped += 1
            event.connection.condition = Condition("amqp:connection:forced", "connection dropped")
            event.connection.close()
            return
        address = event.link.target.address or event.message.address
        if address:
            self.publish(event.message, address)
            event.delivery.update(Delivery.ACCEPTED)
        else:
            event.delivery.update(Delivery.REJECTED)
        event.delivery.settle()

    def publish(self, message, address):
        self.queue(address).publish(message)


@contextlib.contextmanager
def running_broker(**kwargs):
    broker = Broker(**kwargs)
    container = Container(broker)
    thread = threading.Thread(target=container.run)
    thread.daemon = True
    thread.start()
    try:
        yield broker
    finally:
        container.stop()
