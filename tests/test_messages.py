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

import unittest

from proton import Link, Message

from brokersamples._messages import (BYTES_MESSAGE, JMS_MSG_TYPE, MAP_MESSAGE, MESSAGE, OBJECT_MESSAGE,
                                     STREAM_MESSAGE, TEXT_MESSAGE, acknowledge, bytes_message, dump_message,
                                     map_message, message_kind, message_text, message_type, object_message,
                                     set_property, stream_message, text_message)


class MessageKindTest(unittest.TestCase):

    def test_builders_annotate_kind(self):
        self.assertEqual(TEXT_MESSAGE, message_kind(text_message("hi")))
        self.assertEqual(BYTES_MESSAGE, message_kind(bytes_message(b"\x00")))
        self.assertEqual(MAP_MESSAGE, message_kind(map_message({"a": 1})))
        self.assertEqual(STREAM_MESSAGE, message_kind(stream_message([1, 2])))
        self.assertEqual(OBJECT_MESSAGE, message_kind(object_message(3.5)))
        self.assertEqual(5, text_message("x").annotations[JMS_MSG_TYPE])

    def test_inferred_from_body(self):
        self.assertEqual(MESSAGE, message_kind(Message()))
        self.assertEqual(TEXT_MESSAGE, message_kind(Message(body="x")))
        self.assertEqual(BYTES_MESSAGE, message_kind(Message(body=b"x")))
        self.assertEqual(MAP_MESSAGE, message_kind(Message(body={"k": "v"})))
        self.assertEqual(STREAM_MESSAGE, message_kind(Message(body=[1])))
        self.assertEqual(OBJECT_MESSAGE, message_kind(Message(body=12)))

    def test_unknown_annotation_falls_back_to_body(self):
        msg = Message(body="x")
        msg.annotations = {JMS_MSG_TYPE: 42}
        self.assertEqual(TEXT_MESSAGE, message_kind(msg))

    def test_type_names(self):
        self.assertEqual("TextMessage", message_type(text_message("x")))
        self.assertEqual("StreamMessage", message_type(stream_message()))
        self.assertEqual("Message", message_type(Message()))

    def test_text(self):
        self.assertEqual("hello", message_text(text_message("hello")))
        self.assertIsNone(message_text(bytes_message(b"hello")))

    def test_builder_kwargs(self):
        msg = text_message("x", correlation_id="c1", durable=True)
        self.assertEqual("c1", msg.correlation_id)
        self.assertTrue(msg.durable)

    def test_set_property(self):
        msg = text_message("x")
        set_property(msg, "a", True)
        set_property(msg, "b", 2)
        self.assertEqual({"a": True, "b": 2}, msg.properties)


class DumpMessageTest(unittest.TestCase):

    def test_text_message(self):
        msg = text_message("hello", address="topic://a/b", correlation_id="c1", reply_to="queue://r")
        set_property(msg, "flag", True)
        dump = dump_message(msg)
        self.assertIn("Destination:", dump)
        self.assertIn("Topic 'a/b'", dump)
        self.assertIn("Queue 'r'", dump)
        self.assertIn("TextMessage", dump)
        self.assertIn("c1", dump)
        self.assertIn("NON_PERSISTENT", dump)
        self.assertIn("User Property Map:", dump)
        self.assertIn("  flag: True", dump)
        self.assertIn("'hello'", dump)

    def test_binary_attachment(self):
        dump = dump_message(bytes_message(bytes(range(20)), durable=True))
        self.assertIn("PERSISTENT", dump)
        self.assertIn("Binary Attachment:          len=20", dump)
        self.assertIn("  00 01 02 03 04 05 06 07 08 09 0a 0b 0c 0d 0e 0f", dump)
        self.assertIn("  10 11 12 13", dump)
        self.assertNotIn("Body:", dump)


class FakeLink(object):
    def __init__(self, mode):
        self.remote_snd_settle_mode = mode


class FakeReceiver(object):
    def __init__(self, mode):
        self.link = FakeLink(mode)
        self.accepted = 0

    def accept(self):
        self.accepted += 1


class AcknowledgeTest(unittest.TestCase):

    def test_unsettled_link(self):
        for mode in (Link.SND_UNSETTLED, Link.SND_MIXED):
            receiver = FakeReceiver(mode)
            acknowledge(receiver)
            self.assertEqual(1, receiver.accepted)

    def test_pre_settled_link(self):
        receiver = FakeReceiver(Link.SND_SETTLED)
        acknowledge(receiver)
        self.assertEqual(0, receiver.accepted)
