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
The arithmetic service the request/reply samples talk.

A request is a stream message ``[operation, left, right]``; the reply is a
stream message ``[True, result]``, or ``[False]`` when the operation is
unknown or its result is not a finite number.
"""

import math
from typing import List, Optional, Tuple

from proton import Message, byte, int32
from proton.handlers import MessagingHandler

from .._destinations import Destination, DurableSubscription
from .._factory import ConnectionFactory
from .._interactive import ConsoleInput
from .._messages import (PROP_IS_REPLY_MESSAGE, STREAM_MESSAGE, dump_message, message_kind, set_property,
                         stream_message)

ARITHMETIC_EXPRESSION = "\t=================================\n\t  %d %s %d = %s  \t\n\t=================================\n"

PLUS = 1
MINUS = 2
TIMES = 3
DIVIDE = 4

OPERATIONS = {PLUS: "PLUS", MINUS: "MINUS", TIMES: "TIMES", DIVIDE: "DIVIDE"}


def compute(operation: int, left: int, right: int) -> Optional[float]:
    """The result of the operation, ``None`` when it has no finite result."""
    try:
        if operation == PLUS:
            result = float(left + right)
        elif operation == MINUS:
            result = float(left - right)
        elif operation == TIMES:
            result = float(left * right)
        elif operation == DIVIDE:
            result = float(left) / float(right)
        else:
            raise ValueError("Unknown operation value: %s" % operation)
    except (ZeroDivisionError, OverflowError):
        return None
    if math.isinf(result) or math.isnan(result):
        return None
    return result


def expression(left: int, operation: str, right: int, outcome: str) -> str:
    return ARITHMETIC_EXPRESSION % (left, operation, right, outcome)


def request_message(operation: int, left: int, right: int) -> Message:
    return stream_message([byte(operation), int32(left), int32(right)])


def parse_request(msg: Message) -> Tuple[int, int, int]:
    if message_kind(msg) != STREAM_MESSAGE or not isinstance(msg.body, list) or len(msg.body) < 3:
        raise ValueError("Not an arithmetic request")
    operation, left, right = msg.body[:3]
    return int(operation), int(left), int(right)


def reply_message(request: Message, result: Optional[float]) -> Message:
    if request.correlation_id is None:
        raise ValueError("Received a request with no correlation id, it is needed to match the reply")
    body: List = [True, float(result)] if result is not None else [False]
    reply = stream_message(body, correlation_id=request.correlation_id, address=request.reply_to)
    set_property(reply, PROP_IS_REPLY_MESSAGE, True)
    return reply


def print_reply(reply: Message, operation: int, left: int, right: int) -> None:
    name = OPERATIONS[operation]
    if message_kind(reply) != STREAM_MESSAGE or not reply.body:
        print("Request failed")
        return
    print("Got reply message")
    if not (reply.properties or {}).get(PROP_IS_REPLY_MESSAGE):
        print("Warning: Received a reply message without the isReplyMsg flag set.")
    if reply.body[0]:
        print(expression(left, name, right, str(float(reply.body[1]))))
    else:
        print(expression(left, name, right, "operation failed"))


class Replier(MessagingHandler):
    """
    Answers arithmetic requests arriving on ``destination`` until Enter is
    pressed. Replies go out on an anonymous sender, addressed to each
    request's ``reply_to``.
    """

    def __init__(self, factory: ConnectionFactory, destination: Destination,
                 durable_name: Optional[str] = None, console: Optional[ConsoleInput] = None) -> None:
        super(Replier, self).__init__()
        self.factory = factory
        self.destination = destination
        self.durable_name = durable_name
        self.console = console or ConsoleInput()
        self.replied = 0

    def on_start(self, event):
        self.container = event.container
        self.conn = self.factory.connect(event.container)
        options = [self.destination.option(), self.factory.link_options()]
        if self.durable_name:
            options.append(DurableSubscription(self.durable_name))
        self.receiver = event.container.create_receiver(self.conn, self.destination.address,
                                                        name=self.durable_name, options=options)
        self.sender = event.container.create_sender(self.conn, None, options=self.factory.link_options())
        self.console.attach(event.container)
        print("Listening for request messages ... Press enter to exit")

    def on_message(self, event):
        print("Received request message, trying to parse it")
        request = event.message
        try:
            operation, left, right = parse_request(request)
        except ValueError:
            print("Failed to parse the request message, here's a message dump:\n%s" % dump_message(request))
            return
        if not request.reply_to:
            print("Failed to parse the request message : Missing replyto destination.")
            print("Here's a message dump:\n%s" % dump_message(request))
            return
        name = OPERATIONS.get(operation)
        if name is None:
            print(expression(left, "UNKNOWN", right, "operation failed"))
            result = None
        else:
            print(expression(left, name, right, "?"))
            result = compute(operation, left, right)
            print(expression(left, name, right, "operation failed" if result is None else str(result)))
        try:
            reply = reply_message(request, result)
        except ValueError as e:
            print("Couldn't reply to request : %s" % e)
            return
        self.sender.send(reply)
        self.replied += 1

    def on_enter(self, event):
        self.console.close()
        self.conn.close()
