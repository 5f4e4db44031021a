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
Sends large messages inside a transaction branch, commits it and reads one
of them back. A second branch without any work is then prepared, which
completes it with a read-only vote.

AMQP transactions have no prepare phase of their own: ``prepare`` only takes
the vote, so the first branch is prepared before its two phase commit.
"""

import sys

from proton import Timeout

from .. import DEFAULT_CF_NAME, InitialContext, Queue, SupportedProperty, XAResource, create_xid
from .._messages import acknowledge, dump_message, text_message
from .._options import SampleParser, add_connection_flags, configure_logging, environment, run_sample
from .._transactions import TMNOFLAGS, TMSUCCESS, XA_RDONLY

QUEUE = "q"
PAYLOAD_SIZE = 32000
MESSAGE_COUNT = 20
RECEIVE_TIMEOUT = 10.0


def parse_args(argv=None):
    parser = SampleParser("XATransactions", description="Send and commit messages in a transaction branch.")
    add_connection_flags(parser, url_help="URL of the naming provider, e.g. amqp://192.168.1.10:5672")
    args = parser.parse_args(argv)
    parser.require(args, "-url", "-username")
    return args


def run_branches(resource: XAResource, sender, receiver, timeout: float = RECEIVE_TIMEOUT) -> None:
    xid = create_xid(1)
    resource.start(xid, TMNOFLAGS)
    msg = text_message("Charles".ljust(PAYLOAD_SIZE))
    for _ in range(MESSAGE_COUNT):
        resource.send(sender, msg)
    resource.end(xid, TMSUCCESS)
    resource.prepare(xid)
    resource.commit(xid, False)

    try:
        received = receiver.receive(timeout=timeout)
        acknowledge(receiver)
        print(dump_message(received))
    except Timeout:
        print(None)

    xid = create_xid(1)
    resource.start(xid, TMNOFLAGS)
    resource.end(xid, TMSUCCESS)
    if resource.prepare(xid) != XA_RDONLY:
        resource.commit(xid, False)


def run(args):
    env = environment(args)
    env[SupportedProperty.DIRECT_TRANSPORT] = False
    with InitialContext(env) as context:
        cf = context.lookup(DEFAULT_CF_NAME)
    connection = cf.create_connection()
    try:
        queue = Queue(QUEUE)
        options = [queue.option(), cf.link_options()]
        sender = connection.create_sender(queue.address, options=options)
        receiver = connection.create_receiver(queue.address, options=options)
        run_branches(XAResource(connection), sender, receiver)
    finally:
        connection.close()
    print("DONE")


def main(argv=None):
    args = parse_args(argv)
    configure_logging(args.debug)
    return run_sample(run, args)


if __name__ == "__main__":
    sys.exit(main())
