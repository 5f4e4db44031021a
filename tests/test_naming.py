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

import json
import os
import shutil
import tempfile
import unittest

from brokersamples import (ConfigurationException, ConnectionFactory, Context, InitialContext,
                           InvalidNameException, NameAlreadyBoundException, NameClassPair, NameNotFoundException,
                           Queue, Reference, SupportedProperty, Topic)
from brokersamples._naming import BrokerContext, _short_class_name, _strip_json_comments, object_of

BINDINGS = """\
// bindings used by the tests
{
  "connection_factories": {
    /* guaranteed messaging */
    "cf/guaranteed": {"direct_transport": false, "vpn": "file-vpn"}
  },
  "topics": {"T/greetings": "greetings/hello"},
  "queues": {"Q/work": "work//items"}
}
"""


class NamingTestBase(unittest.TestCase):

    def setUp(self):
        self.dir = tempfile.mkdtemp()
        self.path = os.path.join(self.dir, "naming.json")
        with open(self.path, "w") as f:
            f.write(BINDINGS)
        self.env = {Context.PROVIDER_URL: "amqp://broker:5672",
                    Context.SECURITY_PRINCIPAL: "user",
                    Context.NAMING_FILE: self.path}

    def tearDown(self):
        shutil.rmtree(self.dir)

    def bindings(self):
        with open(self.path) as f:
            return json.load(f)


class StripCommentsTest(unittest.TestCase):

    def test_comments_outside_strings(self):
        text = '{"a": "x//y", /* c */ "b": 1} // trailing'
        self.assertEqual({"a": "x//y", "b": 1}, json.loads(_strip_json_comments(text)))


class ClassNameTest(unittest.TestCase):

    def test_short_names(self):
        self.assertEqual("Topic", _short_class_name("com.example.jms.SolTopicImpl"))
        self.assertEqual("ConnectionFactory", _short_class_name("com.example.jms.SolConnectionFactoryImpl"))
        self.assertEqual("Queue", _short_class_name("Queue"))

    def test_unknown_class_stays_reference(self):
        ref = Reference("java.lang.String", None, [("x", "y")])
        self.assertIs(ref, object_of(ref))


class BrokerContextTest(NamingTestBase):

    def test_lookup_destinations(self):
        with InitialContext(self.env) as ctx:
            self.assertEqual(Topic("greetings/hello"), ctx.lookup("T/greetings"))
            self.assertEqual(Queue("work//items"), ctx.lookup("Q/work"))

    def test_lookup_factory_with_overrides(self):
        self.env[SupportedProperty.VPN] = "env-vpn"
        cf = InitialContext(self.env).lookup("cf/guaranteed")
        self.assertIsInstance(cf, ConnectionFactory)
        self.assertEqual("env-vpn", cf.vpn)
        self.assertEqual("user", cf.username)
        self.assertEqual("amqp://broker:5672", cf.host)
        self.assertFalse(cf.direct_transport)

    def test_file_values_kept_without_override(self):
        cf = InitialContext(self.env).lookup("cf/guaranteed")
        self.assertEqual("file-vpn", cf.vpn)

    def test_default_factory(self):
        cf = InitialContext(self.env).lookup("cf/default")
        self.assertEqual("amqp://broker:5672", cf.host)
        self.assertEqual("user", cf.username)

    def test_explicit_host_wins_over_provider_url(self):
        self.env[SupportedProperty.HOST] = "amqp://other:5672"
        self.assertEqual("amqp://other:5672", InitialContext(self.env).lookup("cf/default").host)

    def test_not_found(self):
        with self.assertRaises(NameNotFoundException) as cm:
            InitialContext(self.env).lookup("T/missing")
        self.assertEqual("T/missing", cm.exception.name)

    def test_invalid_name(self):
        self.assertRaises(InvalidNameException, InitialContext(self.env).lookup, "  ")

    def test_bind(self):
        ctx = InitialContext(self.env)
        ctx.bind("T/new", Topic("new/topic"))
        ctx.bind("cf/direct", ConnectionFactory(direct_transport=True))
        self.assertEqual("new/topic", self.bindings()["topics"]["T/new"])
        self.assertEqual({"direct_transport": "True"}, self.bindings()["connection_factories"]["cf/direct"])
        self.assertTrue(ctx.lookup("cf/direct").direct_transport)

    def test_bind_existing(self):
        ctx = InitialContext(self.env)
        self.assertRaises(NameAlreadyBoundException, ctx.bind, "T/greetings", Topic("x"))

    def test_rebind_changes_section(self):
        ctx = InitialContext(self.env)
        ctx.rebind("T/greetings", Queue("now/a/queue"))
        self.assertNotIn("T/greetings", self.bindings()["topics"])
        self.assertEqual(Queue("now/a/queue"), ctx.lookup("T/greetings"))

    def test_unbind(self):
        ctx = InitialContext(self.env)
        ctx.unbind("Q/work")
        self.assertRaises(NameNotFoundException, ctx.lookup, "Q/work")
        self.assertRaises(NameNotFoundException, ctx.unbind, "Q/work")

    def test_list(self):
        ctx = InitialContext(self.env)
        self.assertEqual([NameClassPair("Q/work", "Queue"),
                          NameClassPair("T/greetings", "Topic"),
                          NameClassPair("cf/guaranteed", "ConnectionFactory")], ctx.list())
        self.assertEqual([NameClassPair("guaranteed", "ConnectionFactory")], ctx.list("cf"))

    def test_cannot_bind_arbitrary_objects(self):
        from brokersamples import NamingException
        self.assertRaises(NamingException, InitialContext(self.env).bind, "x", object())

    def test_missing_file_is_empty(self):
        self.env[Context.NAMING_FILE] = os.path.join(self.dir, "absent.json")
        ctx = InitialContext(self.env)
        self.assertEqual([], ctx.list())
        ctx.bind("Q/first", Queue("first"))
        self.assertTrue(os.path.isfile(self.env[Context.NAMING_FILE]))

    def test_malformed_file(self):
        with open(self.path, "w") as f:
            f.write("[1, 2")
        self.assertRaises(ConfigurationException, InitialContext(self.env).lookup, "Q/work")

    def test_unexpected_section(self):
        with open(self.path, "w") as f:
            f.write('{"widgets": {}}')
        self.assertRaises(ConfigurationException, InitialContext(self.env).lookup, "Q/work")

    def test_environment_copy(self):
        ctx = InitialContext(self.env, referral="follow")
        env = ctx.environment
        env["extra"] = 1
        self.assertNotIn("extra", ctx.environment)
        self.assertEqual("follow", ctx.environment[Context.REFERRAL])

    def test_broker_context_used_for_amqp_urls(self):
        self.assertIsInstance(InitialContext(self.env)._delegate, BrokerContext)
