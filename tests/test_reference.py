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

from brokersamples._reference import RefAddr, Reference


class ReferenceTest(unittest.TestCase):

    def test_get_first_of_type(self):
        ref = Reference("Topic", None, [("Name", "a"), ("Name", "b")])
        self.assertEqual("a", ref.get("Name"))
        self.assertIsNone(ref.get("Other"))

    def test_encode(self):
        ref = Reference("ConnectionFactory", "f", [("host", "h1"), RefAddr("vpn", None)])
        self.assertEqual(["#0#host#h1", "#1#vpn#"], ref.encode_addresses())

    def test_decode_orders_by_position(self):
        addrs = Reference.decode_addresses(["#1#vpn#default", "#0#host#amqp://h:5672"])
        self.assertEqual([RefAddr("host", "amqp://h:5672"), RefAddr("vpn", "default")], addrs)

    def test_decode_content_with_separator(self):
        addrs = Reference.decode_addresses(["#0#Name#a#b"])
        self.assertEqual("a#b", addrs[0].content)

    def test_decode_malformed(self):
        self.assertRaises(ValueError, Reference.decode_addresses, ["0#Name#x"])

    def test_equality_ignores_factory(self):
        self.assertEqual(Reference("Queue", "x", [("Name", "q")]), Reference("Queue", None, [("Name", "q")]))
        self.assertNotEqual(Reference("Queue", None, [("Name", "q")]), Reference("Topic", None, [("Name", "q")]))
