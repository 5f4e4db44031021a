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
from ..._messages import message_text, text_message
from ..._options import configure_logging, lookup, run_sample
from . import initial_context, parse_args


def run(args):
    print("SolJMSHelloWorldPub initializing...")
    with initial_context(args) as context:
        cf = lookup(context, args.cf, ConnectionFactory)
        connection = cf.create_connection()
        try:
            destination = lookup(context, args.destination, Topic)
            sender = connection.create_sender(destination.address,
                                              options=[destination.option(), cf.link_options()])
            msg = text_message("Hello world!")
            print("Connected. About to send message '%s' to topic '%s'..." % (message_text(msg), destination.name))
            sender.send(msg)
            print("Message sent. Exiting.")
        finally:
            connection.close()


def main(argv=None):
    args = parse_args("SolJMSHelloWorldPub", "topic", argv)
    configure_logging(args.debug)
    return run_sample(run, args)


if __name__ == "__main__":
    sys.exit(main())
