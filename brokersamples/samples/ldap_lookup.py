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
Looks a connection factory and a destination up in an LDAP directory,
then sends one message to the destination and prints it as it comes back.
"""

import sys
import time

from proton import Timeout

from .. import ConnectionFactory, Context, Destination, InitialContext, Queue, Topic
from .._messages import acknowledge, message_text, text_message
from .._options import SampleParser, configure_logging, lookup, run_sample
from .consumer import open_consumer

LISTEN_TIME = 2.0


def parse_args(argv=None):
    parser = SampleParser("SolJMSLDAPLookup", description="Use administered objects stored in LDAP.")
    parser.add_argument("-routerIP", metavar="HOST", help="broker host, e.g. amqp://192.168.1.10:5672")
    parser.add_argument("-username", help="client username")
    parser.add_argument("-password", default="", help="client password (default: empty)")
    parser.add_argument("-vpn", help="message VPN (default: the broker's default VPN)")
    parser.add_argument("-durableSN", metavar="DURABLE_SUBSCRIPTION_NAME",
                        help="durable subscription name, topics only")
    parser.add_argument("-ldapURL", metavar="URL", help="LDAP server URL, e.g. ldap://192.168.1.20:389")
    parser.add_argument("-ldapUsername", metavar="USERNAME", help="DN to bind to the LDAP server with")
    parser.add_argument("-ldapPassword", metavar="PASSWORD", help="password of the LDAP user")
    parser.add_argument("-ldapCFDN", metavar="CONNECTION_FACTORY_DN", help="DN of the connection factory")
    parser.add_argument("-ldapDestDN", metavar="DESTINATION_DN", help="DN of the topic or queue")
    args = parser.parse_args(argv)
    parser.require(args, "-routerIP", "-username", "-ldapURL", "-ldapUsername", "-ldapPassword",
                   "-ldapCFDN", "-ldapDestDN")
    return args


def exchange(cf: ConnectionFactory, dest: Destination, durable_name=None, listen: float = LISTEN_TIME) -> int:
    """Send one message to ``dest`` and print what arrives there for ``listen`` seconds."""
    connection = cf.create_connection()
    try:
        print(ConnectionFactory.metadata(connection))
        receiver = open_consumer(connection, cf, dest, durable_name)
        sender = connection.create_sender(dest.address, options=[dest.option(), cf.link_options()])
        sender.send(text_message("SolJMSLDAPLookup Sample", address=dest.address))
        received = 0
        deadline = time.time() + listen
        while time.time() < deadline:
            try:
                msg = receiver.receive(timeout=max(deadline - time.time(), 0.01))
            except Timeout:
                break
            acknowledge(receiver)
            received += 1
            text = message_text(msg)
            if text is not None:
                print("Received Message: %s on destination %s" % (text, Destination.from_address(msg.address) or dest))
            else:
                print("Received Message: %s" % msg)
        return received
    finally:
        connection.close()


def perform(context, args) -> None:
    cf = lookup(context, args.ldapCFDN, ConnectionFactory)
    cf.host = args.routerIP
    cf.username = args.username
    cf.password = args.password
    cf.vpn = args.vpn
    dest = context.lookup(args.ldapDestDN)
    if not isinstance(dest, (Topic, Queue)):
        raise TypeError("Destination must be a topic or a queue, %s holds a %s" %
                        (args.ldapDestDN, type(dest).__name__))
    exchange(cf, dest, args.durableSN)


def run(args):
    env = {
        Context.PROVIDER_URL: args.ldapURL,
        Context.REFERRAL: "throw",
        Context.SECURITY_PRINCIPAL: args.ldapUsername,
        Context.SECURITY_CREDENTIALS: args.ldapPassword,
    }
    with InitialContext(env) as context:
        perform(context, args)


def main(argv=None):
    args = parse_args(argv)
    configure_logging(args.debug)
    return run_sample(run, args)


if __name__ == "__main__":
    sys.exit(main())
