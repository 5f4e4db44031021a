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
Topics and queues.

Destinations map onto AMQP node addresses: topics are addressed as
``topic://<name>`` and queues as ``queue://<name>``. The node type is also
announced through the terminus capabilities, which is what lets a broker
tell a topic from a queue that happen to share a name.
"""

from typing import Optional

from proton import Link, Terminus, symbol
from proton.reactor import LinkOption, ReceiverOption

from ._reference import Reference

TOPIC_PREFIX = "topic://"
QUEUE_PREFIX = "queue://"


class Destination(object):
    prefix = ""
    capability = None
    temporary = False

    def __init__(self, name: str) -> None:
        if not name:
            raise ValueError("%s name must not be empty" % type(self).__name__)
        self.name = name

    @property
    def address(self) -> str:
        """The AMQP address of the node."""
        if self.name.startswith(self.prefix):
            return self.name
        return self.prefix + self.name

    def option(self) -> 'Capabilities':
        """Link option announcing the node type."""
        return Capabilities(self.capability)

    def to_reference(self) -> Reference:
        return Reference(type(self).__name__, "brokersamples.%s" % type(self).__name__,
                         [("Name", self.name)])

    @classmethod
    def from_reference(cls, ref: Reference) -> 'Destination':
        name = ref.get("Name")
        if name is None:
            raise ValueError("Reference %r has no Name address" % ref)
        return cls(name)

    @staticmethod
    def from_address(address: Optional[str]) -> Optional['Destination']:
        """
        Rebuild a destination from an address found on a message, e.g. its
        ``reply_to``. Addresses without a known prefix are taken to be queues.
        """
        if not address:
            return None
        if address.startswith(TOPIC_PREFIX):
            return Topic(address[len(TOPIC_PREFIX):])
        if address.startswith(QUEUE_PREFIX):
            return Queue(address[len(QUEUE_PREFIX):])
        return Queue(address)

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and self.name == other.name

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.name))

    def __str__(self) -> str:
        return "%s '%s'" % (type(self).__name__, self.name)

    __repr__ = __str__


class Topic(Destination):
    prefix = TOPIC_PREFIX
    capability = "topic"

    @property
    def topic_name(self) -> str:
        return self.name


class Queue(Destination):
    prefix = QUEUE_PREFIX
    capability = "queue"

    @property
    def queue_name(self) -> str:
        return self.name


class TemporaryTopic(Topic):
    """
    A topic created by the broker for the lifetime of a link. Until the
    broker assigned an address, ``name`` is ``None``.
    """

    capability = "temporary-topic"
    temporary = True

    def __init__(self, name: Optional[str] = None) -> None:
        self.name = name

    @property
    def address(self) -> Optional[str]:
        return self.name

    def to_reference(self) -> Reference:
        raise TypeError("Temporary destinations cannot be bound")


class TemporaryQueue(Queue):
    capability = "temporary-queue"
    temporary = True

    def __init__(self, name: Optional[str] = None) -> None:
        self.name = name

    @property
    def address(self) -> Optional[str]:
        return self.name

    def to_reference(self) -> Reference:
        raise TypeError("Temporary destinations cannot be bound")


class Capabilities(LinkOption):
    """
    Sets the node type capability on the terminus a link talks to: the
    source of a receiver, the target of a sender.
    """

    def __init__(self, *capabilities: Optional[str]) -> None:
        self.capabilities = [symbol(c) for c in capabilities if c]

    def apply(self, link: Link) -> None:
        if not self.capabilities:
            return
        terminus = link.source if link.is_receiver else link.target
        for c in self.capabilities:
            terminus.capabilities.put_symbol(c)


class DurableSubscription(ReceiverOption):
    """
    A named durable subscription on a topic: the subscription outlives the
    link, messages published while the consumer is away are kept for it.
    The subscription name is the link name, so reattaching with the same
    name resumes the same subscription.
    """

    def __init__(self, name: str) -> None:
        self.name = name

    def apply(self, receiver: Link) -> None:
        receiver.source.durability = Terminus.DELIVERIES
        receiver.source.expiry_policy = Terminus.EXPIRE_NEVER
