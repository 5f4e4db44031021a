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
Sends text messages over a TLS connection. Certificate validation, the
trust and key stores and the authentication scheme are all set from the
command line.
"""

import sys
import time

from .. import ConnectionFactory, InitialContext, SupportedProperty, Topic
from .._messages import message_text, text_message
from .._options import (SampleParser, add_cf_flag, add_connection_flags, add_ssl_flags, add_transport_flags,
                        configure_logging, environment, lookup, run_sample)

TOPIC = "secure/session"


def parse_args(argv=None):
    parser = SampleParser("SolJMSSecureSession", description="Send text messages over a secure connection.")
    add_connection_flags(parser, url_help="amqps URL of the naming provider, e.g. amqps://192.168.1.10:5671")
    add_cf_flag(parser)
    add_ssl_flags(parser)
    add_transport_flags(parser, optimize_direct=False, schemes=list(SupportedProperty.AUTHENTICATION_SCHEMES))
    parser.add_argument("-n", dest="count", type=int, default=10, help="number of messages (default: %(default)s)")
    parser.add_argument("-interval", type=float, default=1.0,
                        help="seconds between messages (default: %(default)s)")
    args = parser.parse_args(argv)
    parser.require(args, "-url")
    if not args.url.lower().startswith("amqps://"):
        parser.missing('an amqps:// URL in "-url" for a secure session')
    if args.username is None and args.auth_scheme == SupportedProperty.AUTHENTICATION_SCHEME_BASIC:
        parser.missing('"-username" parameter, or -x client_certificate with -ks and -kspwd or -pkpwd '
                       'parameters to specify a client certificate.')
    if (args.auth_scheme == SupportedProperty.AUTHENTICATION_SCHEME_CLIENT_CERTIFICATE
            and (args.ks is None or (args.kspwd is None and args.pkpwd is None))):
        parser.missing("KEY_STORE (-ks) and KEY_STORE_PASSWORD (-kspwd) or PRIVATE_KEY_PASSWORD (-pkpwd) "
                       "when using the client_certificate authentication scheme.")
    return args


def secure_environment(args):
    env = environment(args)
    if args.compression:
        env[SupportedProperty.COMPRESSION_LEVEL] = 9
    return env


def run(args):
    with InitialContext(secure_environment(args)) as context:
        cf = lookup(context, args.cf, ConnectionFactory)
        connection = cf.create_connection()
        try:
            print(ConnectionFactory.metadata(connection))
            topic = Topic(TOPIC)
            sender = connection.create_sender(topic.address, options=[topic.option(), cf.link_options()])
            msg = text_message("Hello from SolJMSSecureSession")
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
    return run_sample(run, args)


if __name__ == "__main__":
    sys.exit(main())
