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
Persistent publishing across broker failover.

The factory reconnects forever. Every message is kept in an unacked list
until the broker accepts it; deliveries that were outstanding when the
connection dropped are sent again once it comes back.
"""

import sys
import threading
from typing import List

from proton import Message
from proton.handlers import MessagingHandler
from proton.reactor import Container

from .. import DEFAULT_CF_NAME, ConnectionFactory, InitialContext, SupportedProperty, Topic
from .._messages import text_message
from .._options import SampleParser, add_connection_flags, configure_logging, environment, run_sample

TOPIC = "replication_topic"


class UnackedList(object):
    """Messages sent but not yet accepted, keyed by correlation id."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._messages: List[Message] = []

    def add(self, msg: Message) -> None:
        with self._lock:
            self._messages.append(msg)

    def remove(self, key: str) -> Message:
        with self._lock:
            for i, msg in enumerate(self._messages):
                if msg.correlation_id is not None and msg.correlation_id == key:
                    return self._messages.pop(i)
        raise KeyError('Message for key "%s" not found' % key)

    def get(self) -> List[Message]:
        with self._lock:
            return list(self._messages)

    def __len__(self) -> int:
        with self._lock:
            return len(self._messages)

    def __str__(self) -> str:
        with self._lock:
            if not self._messages:
                return "Unacked List Empty"
            return "UnackedList= " + ",".join(str(m.correlation_id) for m in self._messages)


def parse_args(argv=None):
    parser = SampleParser("Replication", description="Publish persistent messages through a broker failover.")
    add_connection_flags(parser, url_help="URL of the naming provider, e.g. amqp://192.168.1.10:5672")
    parser.add_argument("-n", dest="count", type=int, default=100000,
                        help="number of messages (default: %(default)s)")
    args = parser.parse_args(argv)
    parser.require(args, "-url", "-username")
    return args


class Replication(MessagingHandler):
    def __init__(self, factory: ConnectionFactory, topic: Topic, count: int) -> None:
        super(Replication, self).__init__()
        self.factory = factory
        self.topic = topic
        self.total = count
        self.unacked = UnackedList()
        self.deliveries = {}
        self.sent = 0
        self.confirmed = 0
        self.resent = 0
        self.disconnected = False

    def on_start(self, event):
        self.conn = self.factory.connect(event.container)
        self.sender = event.container.create_sender(self.conn, self.topic.address,
                                                    options=[self.topic.option(), self.factory.link_options()])

    def on_connection_opened(self, event):
        if not self.disconnected:
            print("Connection Event: connected to %s" % event.connection.connected_address)
            return
        self.disconnected = False
        print("Connection Event: reconnected to %s" % event.connection.connected_address)
        pending = self.unacked.get()
        if pending:
            self.resent += len(pending)
            print("Republish unacked messages event: %d message(s), %s" % (len(pending), self.unacked))
            for msg in pending:
                self.deliveries[self.sender.send(msg)] = msg.correlation_id

    def on_disconnected(self, event):
        self.disconnected = True
        # outstanding deliveries died with the transport; their messages stay unacked
        self.deliveries.clear()
        print("Connection Event: reconnecting")

    def on_sendable(self, event):
        while event.sender.credit and self.sent < self.total and not self.disconnected:
            key = "Message %d" % self.sent
            msg = text_message(key, correlation_id=key, durable=True)
            self.unacked.add(msg)
            self.deliveries[event.sender.send(msg)] = key
            self.sent += 1

    def on_accepted(self, event):
        key = self.deliveries.pop(event.delivery, None)
        if key is None:
            return
        try:
            self.unacked.remove(key)
        except KeyError:
            # a republished copy already confirmed it
            return
        self.confirmed += 1
        print("SENT: %s" % key)
        if self.confirmed == self.total:
            event.connection.close()

    def on_rejected(self, event):
        key = self.deliveries.pop(event.delivery, None)
        print("Message rejected: %s" % key)

    def on_transport_error(self, event):
        print("Connection Event: transport error %s" % event.transport.condition)


def run(args):
    env = environment(args)
    env[SupportedProperty.DIRECT_TRANSPORT] = False
    with InitialContext(env) as context:
        cf = context.lookup(DEFAULT_CF_NAME)
    cf.reconnect_retries = -1
    print(ConnectionFactory.metadata())
    handler = Replication(cf, Topic(TOPIC), args.count)
    Container(handler).run()
    if len(handler.unacked):
        sys.stderr.write("%d unacked messages\n" % len(handler.unacked))
        return 1
    print("Done: %d messages sent (with %d messages renumbered and resent)!" % (handler.total, handler.resent))
    return 0


def main(argv=None):
    args = parse_args(argv)
    configure_logging(args.debug)
    return run_sample(run, args)


if __name__ == "__main__":
    sys.exit(main())
