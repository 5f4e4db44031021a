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
Two consumers on the same exclusive queue, each on its own connection.
Only one of them is given messages at a time; the broker hands the flow to
the second consumer once the first goes away. Each consumer prints the
flow events it sees.
"""

import sys

from proton.handlers import MessagingHandler
from proton.reactor import Container

from .. import ConnectionFactory, InitialContext, Queue
from .._interactive import ConsoleInput
from .._options import (SampleParser, add_cf_flag, add_connection_flags, add_destination_flags, add_transport_flags,
                        configure_logging, destination, environment, lookup, run_sample)

FLOW_ACTIVE = "FLOW_ACTIVE"
FLOW_INACTIVE = "FLOW_INACTIVE"


def parse_args(argv=None):
    parser = SampleParser("SolJMSActiveFlowIndication", description="Show flow events of two queue consumers.")
    add_connection_flags(parser, url_help="URL of the naming provider, e.g. amqp://192.168.1.10:5672")
    add_cf_flag(parser)
    add_destination_flags(parser, topic=False)
    add_transport_flags(parser)
    args = parser.parse_args(argv)
    parser.require(args, "-url", "-username")
    parser.require_one_of(args, "-queue", "-physicalQueue")
    return args


class FlowConsumer(MessagingHandler):
    """
    Counts the messages of one receiver and reports its flow events. Only an
    active consumer is given credit; a standby one reports its flow as
    inactive until :meth:`activate` hands it the queue.
    """

    def __init__(self, label: str, window: int = 10, active: bool = True) -> None:
        super(FlowConsumer, self).__init__(prefetch=0)
        self.label = label
        self.window = window
        self.active = active
        self.standby = None
        self.link = None
        self.count = 0
        self.events = []

    def _event(self, kind, link):
        self.events.append(kind)
        print("From %s consumer : %s (%s)" % (self.label, kind, link.remote_source.address or link.source.address))

    def activate(self) -> None:
        if self.active:
            return
        self.active = True
        if self.link is not None:
            self.link.flow(self.window)
            self._event(FLOW_ACTIVE, self.link)

    def on_link_opened(self, event):
        self.link = event.link
        if self.active:
            event.link.flow(self.window)
            self._event(FLOW_ACTIVE, event.link)
        else:
            self._event(FLOW_INACTIVE, event.link)

    def on_link_closed(self, event):
        if self.active:
            self.active = False
            self._event(FLOW_INACTIVE, event.link)
        if self.standby is not None:
            self.standby.activate()

    def on_message(self, event):
        self.count += 1
        print("Got a message")
        event.receiver.flow(1)


class ActiveFlowIndication(MessagingHandler):
    def __init__(self, factory: ConnectionFactory, queue: Queue, console: ConsoleInput = None) -> None:
        super(ActiveFlowIndication, self).__init__()
        self.factory = factory
        self.queue = queue
        self.console = console or ConsoleInput()
        self.first = FlowConsumer("first")
        self.second = FlowConsumer("second", active=False)
        self.first.standby = self.second
        self.stage = 0

    def _receiver(self, container, handler):
        conn = self.factory.connect(container)
        return container.create_receiver(conn, self.queue.address, handler=handler,
                                         options=[self.queue.option(), self.factory.link_options()])

    def on_start(self, event):
        self.receiver1 = self._receiver(event.container, self.first)
        self.receiver2 = self._receiver(event.container, self.second)
        self.console.attach(event.container)
        print("Press enter to terminate the first consumer.")

    def on_connection_closed(self, event):
        if event.connection == self.receiver1.connection:
            self.second.activate()

    def on_enter(self, event):
        if self.stage == 0:
            print("Number of message received: %d" % self.first.count)
            self.receiver1.close()
            self.receiver1.connection.close()
            print("An active event should be received from the second consumer.")
            print("Press enter to exit.")
            self.stage = 1
        elif self.stage == 1:
            self.receiver2.close()
            self.receiver2.connection.close()
            self.console.close()
            self.stage = 2


def run(args):
    with InitialContext(environment(args)) as context:
        cf = lookup(context, args.cf, ConnectionFactory)
        queue = destination(args, context)
        print(ConnectionFactory.metadata())
        Container(ActiveFlowIndication(cf, queue)).run()


def main(argv=None):
    args = parse_args(argv)
    configure_logging(args.debug)
    return run_sample(run, args)


if __name__ == "__main__":
    sys.exit(main())
