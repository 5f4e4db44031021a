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

import sys

from ... import ConnectionFactory, Topic
from ..._messages import acknowledge, dump_message
from ..._options import configure_logging, lookup, run_sample
from . import initial_context, parse_args


def run(args):
    with initial_context(args) as context:
        cf = lookup(context, args.cf, ConnectionFactory)
        connection = cf.create_connection()
        try:
            source = lookup(context, args.destination, Topic)
            receiver = connection.create_receiver(source.address, credit=cf.receive_window,
                                                  options=[source.option(), cf.link_options()])
            print("Waiting for a message ... (press Ctrl+C) to terminate ")
            received = 0
            while not args.count or received < args.count:
                msg = receiver.receive(timeout=None)
                print("Received a JMS Message:\n%s" % dump_message(msg))
                acknowledge(receiver)
                received += 1
        finally:
            connection.close()


def main(argv=None):
    args = parse_args("SolJMSHelloWorldSub", "topic", argv, count=True)
    configure_logging(args.debug)
    return run_sample(run, args)


if __name__ == "__main__":
    sys.exit(main())
