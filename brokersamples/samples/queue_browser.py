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
Lists the messages on a queue without consuming them. Browsing stops once
no message has arrived for a while.
"""

import sys

from proton import Timeout
from proton.reactor import Copy

from .. import ConnectionFactory, InitialContext
from .._messages import acknowledge, dump_message, message_text
from .._options import (SampleParser, add_cf_flag, add_connection_flags, add_destination_flags, configure_logging,
                        destination, environment, lookup, run_sample)

IDLE_TIMEOUT = 10.0


def parse_args(argv=None):
    parser = SampleParser("SolJMSQueueBrowser", description="Browse the messages on a queue.")
    add_connection_flags(parser, url_help="URL of the naming provider, e.g. amqp://192.168.1.10:5672")
    add_cf_flag(parser)
    add_destination_flags(parser, topic=False)
    parser.add_argument("-timeout", type=float, default=IDLE_TIMEOUT,
                        help="stop after this many idle seconds (default: %(default)s)")
    args = parser.parse_args(argv)
    parser.require(args, "-url", "-username")
    parser.require_one_of(args, "-queue", "-physicalQueue")
    return args


def browse(receiver, timeout: float = IDLE_TIMEOUT) -> int:
    """Print every message offered on the browsing link; returns how many."""
    browsed = 0
    while True:
        try:
            msg = receiver.receive(timeout=timeout)
        except Timeout:
            break
        acknowledge(receiver)
        browsed += 1
        text = message_text(msg)
        if text is not None:
            print("RCVD: %s" % text)
        else:
            print("RCVD: %s" % dump_message(msg))
    return browsed


def run(args):
    with InitialContext(environment(args)) as context:
        cf = lookup(context, args.cf, ConnectionFactory)
        connection = cf.create_connection()
        try:
            print(ConnectionFactory.metadata(connection))
            queue = destination(args, context)
            receiver = connection.create_receiver(queue.address, credit=int(cf.receive_window),
                                                  options=[queue.option(), Copy()])
            browse(receiver, args.timeout)
        finally:
            connection.close()


def main(argv=None):
    args = parse_args(argv)
    configure_logging(args.debug)
    return run_sample(run, args)


if __name__ == "__main__":
    sys.exit(main())
