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
Answers arithmetic requests arriving on a topic over direct transport,
until Enter is pressed.
"""

import sys

from proton.reactor import Container

from .. import ConnectionFactory, InitialContext, Topic
from .._options import (SampleParser, add_cf_flag, add_connection_flags, configure_logging, environment, lookup,
                        run_sample)
from ._request_reply import Replier


def parse_args(argv=None):
    parser = SampleParser("SolJMSRRDirectReplier", description="Reply to direct arithmetic requests.")
    add_connection_flags(parser, url_help="URL of the naming provider, e.g. amqp://192.168.1.10:5672")
    add_cf_flag(parser)
    parser.add_argument("-rt", metavar="TOPIC_JNDI_NAME", help="name of the topic to listen on for requests")
    parser.add_argument("-compression", action="store_true", help="enable compression")
    args = parser.parse_args(argv)
    parser.require(args, "-url", "-username")
    if args.rt is None:
        parser.missing("the request destination topic (REQUEST_TOPIC_JNDI_NAME)")
    return args


def run(args):
    with InitialContext(environment(args)) as context:
        cf = lookup(context, args.cf, ConnectionFactory)
        if not cf.direct_transport:
            print("The specified connection factory is not using direct messaging.  "
                  "Overriding it to use direct messaging.")
            cf.direct_transport = True
        topic = lookup(context, args.rt, Topic)
        print(ConnectionFactory.metadata())
        Container(Replier(cf, topic)).run()


def main(argv=None):
    args = parse_args(argv)
    configure_logging(args.debug)
    return run_sample(run, args)


if __name__ == "__main__":
    sys.exit(main())
