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
Like the consumer sample, but the connection factory is created in code
instead of being looked up, and always uses guaranteed transport.
"""

import sys

from .. import ConnectionFactory
from .._options import SampleParser, add_destination_flags, configure_logging, destination, run_sample
from .consumer import consume, open_consumer

DESTINATION_FLAGS = ("-physicalTopic", "-tempTopic", "-physicalQueue", "-tempQueue")


def parse_args(argv=None):
    parser = SampleParser("SolJMSProgConsumer", description="Receive messages using a factory created in code.")
    parser.add_argument("-host", help="broker host, e.g. amqp://192.168.1.10:5672")
    parser.add_argument("-username", help="client username")
    parser.add_argument("-password", default="", help="client password (default: empty)")
    parser.add_argument("-vpn", help="message VPN (default: the broker's default VPN)")
    add_destination_flags(parser, jndi=False, temporary=True, durable=True)
    parser.add_argument("-n", dest="count", type=int, default=0,
                        help="stop after this many messages, 0 to run until interrupted (default)")
    args = parser.parse_args(argv)
    parser.require(args, "-host", "-username")
    parser.require_one_of(args, *DESTINATION_FLAGS)
    return args


def create_factory(args) -> ConnectionFactory:
    cf = ConnectionFactory()
    cf.host = args.host
    cf.username = args.username
    cf.password = args.password
    cf.direct_transport = False
    # amqps without a trust store
    cf.ssl_validate_certificate = False
    if args.vpn is not None:
        cf.vpn = args.vpn
    return cf


def run(args):
    cf = create_factory(args)
    connection = cf.create_connection()
    try:
        print(ConnectionFactory.metadata(connection))
        receiver = open_consumer(connection, cf, destination(args), args.durableSN)
        consume(receiver, args.count)
    finally:
        connection.close()


def main(argv=None):
    args = parse_args(argv)
    configure_logging(args.debug)
    return run_sample(run, args)


if __name__ == "__main__":
    sys.exit(main())
