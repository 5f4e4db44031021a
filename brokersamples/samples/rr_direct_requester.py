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
Sends arithmetic requests to a topic over direct transport and waits a
short while for each reply on a temporary queue.
"""

import sys
import time

from .. import ConnectionFactory, InitialContext, Requestor, Topic
from .._options import (SampleParser, add_cf_flag, add_connection_flags, configure_logging, environment, lookup,
                        run_sample)
from ._request_reply import DIVIDE, MINUS, PLUS, TIMES, print_reply, request_message

TIMEOUT = 2.0


def parse_args(argv=None):
    parser = SampleParser("SolJMSRRDirectRequester", description="Send direct arithmetic requests.")
    add_connection_flags(parser, url_help="URL of the naming provider, e.g. amqp://192.168.1.10:5672")
    add_cf_flag(parser)
    parser.add_argument("-rt", metavar="REQUEST_TOPIC_JNDI_NAME", help="name of the topic requests are sent to")
    parser.add_argument("-compression", action="store_true", help="enable compression")
    parser.add_argument("-interval", type=float, default=1.0,
                        help="seconds between requests (default: %(default)s)")
    args = parser.parse_args(argv)
    parser.require(args, "-url", "-username")
    if args.rt is None:
        parser.missing("the request destination topic (REQUEST_TOPIC_JNDI_NAME)")
    return args


def do_request(requestor: Requestor, operation: int, left: int, right: int) -> None:
    reply = requestor.request(request_message(operation, left, right))
    if reply is None:
        print("Failed to receive a reply within %d msecs" % (requestor.timeout * 1000))
    else:
        print_reply(reply, operation, left, right)


def run(args):
    with InitialContext(environment(args)) as context:
        cf = lookup(context, args.cf, ConnectionFactory)
        if not cf.direct_transport:
            print("The specified connection factory is not using direct messaging.  "
                  "Overriding it to use direct messaging.")
            cf.direct_transport = True
        connection = cf.create_connection()
        try:
            print(ConnectionFactory.metadata(connection))
            topic = lookup(context, args.rt, Topic)
            requestor = Requestor(connection, topic, TIMEOUT, [cf.link_options()])
            for i, operation in enumerate((PLUS, MINUS, TIMES, DIVIDE)):
                if i:
                    time.sleep(args.interval)
                do_request(requestor, operation, 5, 4)
        finally:
            connection.close()


def main(argv=None):
    args = parse_args(argv)
    configure_logging(args.debug)
    return run_sample(run, args)


if __name__ == "__main__":
    sys.exit(main())
