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
Sends text messages to a topic or queue, looked up by name or given by
its physical name, one per second.
"""

import sys
import time

from .. import ConnectionFactory, InitialContext
from .._messages import PROP_DELIVER_TO_ONE, PROP_IS_XML, message_text, set_property, text_message
from .._options import (SampleParser, add_cf_flag, add_connection_flags, add_destination_flags, add_transport_flags,
                        configure_logging, destination, environment, lookup, run_sample)

DESTINATION_FLAGS = ("-topic", "-physicalTopic", "-queue", "-physicalQueue")


def parse_args(argv=None):
    parser = SampleParser("SolJMSProducer", description="Send text messages to a topic or a queue.")
    add_connection_flags(parser, url_help="URL of the naming provider, e.g. amqp://192.168.1.10:5672")
    add_cf_flag(parser)
    add_destination_flags(parser)
    parser.add_argument("-xml", action="store_true", help="send an XML payload, used with content routing")
    parser.add_argument("-dto", action="store_true", help="set the deliver to one flag (direct messaging only)")
    add_transport_flags(parser)
    parser.add_argument("-n", dest="count", type=int, default=10, help="number of messages (default: %(default)s)")
    parser.add_argument("-interval", type=float, default=1.0,
                        help="seconds between messages (default: %(default)s)")
    args = parser.parse_args(argv)
    parser.require(args, "-url", "-username")
    parser.require_one_of(args, *DESTINATION_FLAGS)
    return args


def produce(args):
    with InitialContext(environment(args)) as context:
        cf = lookup(context, args.cf, ConnectionFactory)
        connection = cf.create_connection()
        try:
            print(ConnectionFactory.metadata(connection))
            dest = destination(args, context)
            sender = connection.create_sender(dest.address, options=[dest.option(), cf.link_options()])
            if args.xml:
                msg = text_message("<title>Hello from SolJMSProducer</title>")
            else:
                msg = text_message("Hello from SolJMSProducer")
            set_property(msg, PROP_IS_XML, args.xml)
            if args.dto:
                set_property(msg, PROP_DELIVER_TO_ONE, True)
            print("About to send %d JMS Text Message(s)" % args.count)
            for _ in range(args.count):
                sender.send(msg)
                print("SENT: %s" % message_text(msg))
                time.sleep(args.interval)
            print("DONE")
        finally:
            connection.close()


def main(argv=None):
    args = parse_args(argv)
    configure_logging(args.debug)
    return run_sample(produce, args)


if __name__ == "__main__":
    sys.exit(main())
