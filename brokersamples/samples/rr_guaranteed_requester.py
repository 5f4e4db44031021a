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
Sends arithmetic requests to a topic or a queue over guaranteed transport
and waits for each reply on a temporary queue. Each request uses its own
connection.
"""

import sys
import time

from .. import ConnectionFactory, InitialContext, Queue, Requestor, Topic
from .._options import (SampleParser, add_cf_flag, add_connection_flags, configure_logging, environment, lookup,
                        run_sample)
from ._request_reply import DIVIDE, MINUS, PLUS, TIMES, print_reply, request_message


def parse_args(argv=None):
    parser = SampleParser("SolJMSRRGuaranteedRequester", description="Send guaranteed arithmetic requests.")
    add_connection_flags(parser, url_help="URL of the naming provider, e.g. amqp://192.168.1.10:5672")
    add_cf_flag(parser)
    parser.add_argument("-rt", metavar="TOPIC_JNDI_NAME", help="name of the topic requests are sent to")
    parser.add_argument("-rq", metavar="QUEUE_JNDI_NAME", help="name of the queue requests are sent to")
    parser.add_argument("-timeout", type=float, default=None,
                        help="seconds to wait for each reply (default: wait forever)")
    parser.add_argument("-interval", type=float, default=1.0,
                        help="seconds between requests (default: %(default)s)")
    args = parser.parse_args(argv)
    parser.require(args, "-url", "-username")
    parser.require_one_of(args, "-rt", "-rq")
    return args


def do_request(cf: ConnectionFactory, dest, operation: int, left: int, right: int, timeout=None) -> None:
    connection = cf.create_connection()
    try:
        requestor = Requestor(connection, dest, timeout, [cf.link_options()])
        reply = requestor.request(request_message(operation, left, right))
    finally:
        connection.close()
    if reply is None:
        print("Request failed")
    else:
        print_reply(reply, operation, left, right)


def run(args):
    with InitialContext(environment(args)) as context:
        cf = lookup(context, args.cf, ConnectionFactory)
        if cf.direct_transport:
            print("Connection factory's direct transport option was enabled.  Overriding it to disabled.")
            cf.direct_transport = False
        if args.rt is not None:
            dest = lookup(context, args.rt, Topic)
        else:
            dest = lookup(context, args.rq, Queue)
        print(ConnectionFactory.metadata())
        for i, operation in enumerate((PLUS, MINUS, TIMES, DIVIDE)):
            if i:
                time.sleep(args.interval)
            do_request(cf, dest, operation, 5, 4, args.timeout)


def main(argv=None):
    args = parse_args(argv)
    configure_logging(args.debug)
    return run_sample(run, args)


if __name__ == "__main__":
    sys.exit(main())
