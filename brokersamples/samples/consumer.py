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
Receives messages from a topic (optionally through a durable
subscription), a queue or a temporary destination and prints the kind of
each one, until interrupted with Ctrl+C.
"""

import sys

from proton.utils import BlockingConnection

from .. import ConnectionFactory, InitialContext, Topic
from .._destinations import Destination, DurableSubscription
from .._messages import acknowledge, message_type
from .._options import (SampleParser, add_cf_flag, add_connection_flags, add_destination_flags, add_transport_flags,
                        configure_logging, destination, environment, lookup, run_sample)

DESTINATION_FLAGS = ("-topic", "-physicalTopic", "-tempTopic", "-queue", "-physicalQueue", "-tempQueue")


def parse_args(argv=None):
    parser = SampleParser("SolJMSConsumer", description="Receive messages from a topic or a queue.")
    add_connection_flags(parser, url_help="URL of the naming provider, e.g. amqp://192.168.1.10:5672")
    add_cf_flag(parser)
    add_destination_flags(parser, temporary=True, durable=True)
    add_transport_flags(parser)
    parser.add_argument("-n", dest="count", type=int, default=0,
                        help="stop after this many messages, 0 to run until interrupted (default)")
    args = parser.parse_args(argv)
    parser.require(args, "-url", "-username")
    parser.require_one_of(args, *DESTINATION_FLAGS)
    return args


def open_consumer(connection: BlockingConnection, cf: ConnectionFactory, dest: Destination, durable_name=None):
    """
    A blocking receiver on ``dest``; temporary destinations are created by
    the broker and get their address filled in.
    """
    options = [dest.option(), cf.link_options()]
    if durable_name and isinstance(dest, Topic) and not dest.temporary:
        options.append(DurableSubscription(durable_name))
    else:
        durable_name = None
    receiver = connection.create_receiver(dest.address, credit=int(cf.receive_window), dynamic=dest.temporary,
                                          name=durable_name, options=options)
    if dest.temporary:
        dest.name = receiver.remote_source.address
        print("Created %s" % dest)
    return receiver


def consume(receiver, count: int = 0) -> int:
    print("Waiting for a message ... (press Ctrl+C) to terminate ")
    received = 0
    while not count or received < count:
        msg = receiver.receive(timeout=None)
        acknowledge(receiver)
        received += 1
        print("Received a JMS Message of type: %s" % message_type(msg))
    return received


def run(args):
    with InitialContext(environment(args)) as context:
        cf = lookup(context, args.cf, ConnectionFactory)
        connection = cf.create_connection()
        try:
            print(ConnectionFactory.metadata(connection))
            dest = destination(args, context)
            receiver = open_consumer(connection, cf, dest, args.durableSN)
            consume(receiver, args.count)
        finally:
            connection.close()


def main(argv=None):
    args = parse_args(argv)
    configure_logging(args.debug)
    return run_sample(run, args)


if __name__ == "__main__":
    sys.exit(main())
