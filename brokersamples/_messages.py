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
JMS style message kinds on top of :class:`proton.Message`.

The kind of a message travels in the ``x-opt-jms-msg-type`` message
annotation, which is also what JMS clients talking AMQP 1.0 use. When the
annotation is missing the kind is inferred from the body.
"""

from typing import Any, Dict, List, Optional

from proton import Link, Message, byte, symbol

from ._destinations import Destination

JMS_MSG_TYPE = symbol("x-opt-jms-msg-type")

MESSAGE = 0
OBJECT_MESSAGE = 1
MAP_MESSAGE = 2
BYTES_MESSAGE = 3
STREAM_MESSAGE = 4
TEXT_MESSAGE = 5

KIND_NAMES = {
    MESSAGE: "Message",
    OBJECT_MESSAGE: "ObjectMessage",
    MAP_MESSAGE: "MapMessage",
    BYTES_MESSAGE: "BytesMessage",
    STREAM_MESSAGE: "StreamMessage",
    TEXT_MESSAGE: "TextMessage",
}

# vendor message properties, carried as application properties
PROP_IS_XML = "JMS_Solace_isXML"
PROP_DELIVER_TO_ONE = "JMS_Solace_DeliverToOne"
PROP_IS_REPLY_MESSAGE = "JMS_Solace_isReplyMsg"


def _message(kind: int, body: Any, **kwargs) -> Message:
    msg = Message(body=body, **kwargs)
    msg.annotations = {JMS_MSG_TYPE: byte(kind)}
    return msg


def text_message(text: Optional[str] = None, **kwargs) -> Message:
    return _message(TEXT_MESSAGE, text, **kwargs)


def bytes_message(data: bytes = b"", **kwargs) -> Message:
    return _message(BYTES_MESSAGE, data, **kwargs)


def map_message(values: Optional[Dict[str, Any]] = None, **kwargs) -> Message:
    return _message(MAP_MESSAGE, dict(values or {}), **kwargs)


def stream_message(values: Optional[List[Any]] = None, **kwargs) -> Message:
    return _message(STREAM_MESSAGE, list(values or []), **kwargs)


def object_message(obj: Any, **kwargs) -> Message:
    return _message(OBJECT_MESSAGE, obj, **kwargs)


def message_kind(msg: Message) -> int:
    annotations = msg.annotations or {}
    kind = annotations.get(JMS_MSG_TYPE, annotations.get(str(JMS_MSG_TYPE)))
    if kind is not None and int(kind) in KIND_NAMES:
        return int(kind)
    body = msg.body
    if body is None:
        return MESSAGE
    if isinstance(body, str):
        return TEXT_MESSAGE
    if isinstance(body, (bytes, bytearray, memoryview)):
        return BYTES_MESSAGE
    if isinstance(body, dict):
        return MAP_MESSAGE
    if isinstance(body, list):
        return STREAM_MESSAGE
    return OBJECT_MESSAGE


def message_type(msg: Message) -> str:
    """Name of the message kind, e.g. ``"TextMessage"``."""
    return KIND_NAMES[message_kind(msg)]


def message_text(msg: Message) -> Optional[str]:
    """The text of a text message, ``None`` for any other kind."""
    if message_kind(msg) == TEXT_MESSAGE:
        return msg.body
    return None


def set_property(msg: Message, name: str, value: Any) -> None:
    if msg.properties is None:
        msg.properties = {}
    msg.properties[name] = value


def acknowledge(receiver) -> None:
    """
    Accept the message last received on a blocking receiver. Deliveries on
    a link the broker pre-settles need no acknowledgement.
    """
    if receiver.link.remote_snd_settle_mode != Link.SND_SETTLED:
        receiver.accept()


def dump_message(msg: Message) -> str:
    """Multi-line, human readable rendering of a message."""
    lines = []

    def field(name, value):
        if value is not None and value != "":
            lines.append("%-28s%s" % (name + ":", value))

    field("Destination", Destination.from_address(msg.address))
    field("Message Type", message_type(msg))
    field("Message Id", msg.id)
    field("Correlation Id", msg.correlation_id)
    field("Reply To", Destination.from_address(msg.reply_to))
    field("Delivery Mode", "PERSISTENT" if msg.durable else "NON_PERSISTENT")
    field("Priority", msg.priority)
    if msg.expiry_time:
        field("Expiration", msg.expiry_time)
    if msg.ttl:
        field("Time To Live", msg.ttl)
    field("Subject", msg.subject)
    field("Redelivered", "true" if msg.delivery_count else None)
    if msg.properties:
        lines.append("User Property Map:")
        for k in sorted(msg.properties):
            lines.append("  %s: %r" % (k, msg.properties[k]))
    body = msg.body
    if isinstance(body, (bytes, bytearray, memoryview)):
        data = bytes(body)
        lines.append("Binary Attachment:          len=%d" % len(data))
        for offset in range(0, len(data), 16):
            chunk = data[offset:offset + 16]
            lines.append("  %s" % " ".join("%02x" % b for b in chunk))
    elif body is not None:
        lines.append("%-28s%r" % ("Body:", body))
    return "\n".join(lines)
