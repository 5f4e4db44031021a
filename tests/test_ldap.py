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

from ldap3 import MOCK_SYNC, Connection, Server

from brokersamples import (ConnectionFactory, Context, NameAlreadyBoundException, NameClassPair,
                           NameNotFoundException, NamingException, Queue, Topic)
from brokersamples._ldap import LdapContext, _rdn, _values
from brokersamples.samples import ldap_bind

ADMIN = "cn=admin,dc=example,dc=com"
BASE_DN = "ou=jndi,dc=example,dc=com"


def mock_connection():
    conn = Connection(Server("fake_ldap"), user=ADMIN, password="secret", client_strategy=MOCK_SYNC)
    conn.strategy.add_entry("dc=example,dc=com", {"objectClass": ["top", "domain"], "dc": "example"})
    conn.strategy.add_entry(ADMIN, {"objectClass": ["person"], "userPassword": "secret", "sn": "admin"})
    conn.strategy.add_entry(BASE_DN, {"objectClass": ["top", "organizationalUnit"], "ou": "jndi"})
    conn.bind()
    return conn


class HelpersTest(unittest.TestCase):

    def test_values(self):
        attrs = {"JavaClassName": [b"Topic"], "javaFactory": "f"}
        self.assertEqual(["Topic"], _values(attrs, "javaclassname"))
        self.assertEqual(["f"], _values(attrs, "javaFactory"))
        self.assertEqual([], _values(attrs, "missing"))

    def test_rdn(self):
        self.assertEqual("cn=T1", _rdn("cn=T1,ou=jndi,dc=example,dc=com"))


class LdapContextTest(unittest.TestCase):

    def setUp(self):
        self.ctx = LdapContext({Context.PROVIDER_URL: "ldap://fake_ldap"}, connection=mock_connection())

    def tearDown(self):
        self.ctx.close()

    def test_unknown_referral_mode(self):
        self.assertRaises(NamingException, LdapContext, {Context.REFERRAL: "sometimes"})

    def test_bind_and_lookup_topic(self):
        self.ctx.bind("cn=T1," + BASE_DN, Topic("greetings/hello"))
        self.assertEqual(Topic("greetings/hello"), self.ctx.lookup("cn=T1," + BASE_DN))

    def test_bind_and_lookup_factory(self):
        cf = ConnectionFactory(host="amqp://broker:5672", vpn="v", direct_transport=False)
        self.ctx.bind("cn=CF1," + BASE_DN, cf)
        found = self.ctx.lookup("cn=CF1," + BASE_DN)
        self.assertIsInstance(found, ConnectionFactory)
        self.assertEqual("amqp://broker:5672", found.host)
        self.assertEqual("v", found.vpn)
        self.assertFalse(found.direct_transport)

    def test_bind_existing(self):
        self.ctx.bind("cn=Q1," + BASE_DN, Queue("work"))
        self.assertRaises(NameAlreadyBoundException, self.ctx.bind, "cn=Q1," + BASE_DN, Queue("other"))

    def test_rebind(self):
        self.ctx.bind("cn=Q1," + BASE_DN, Queue("work"))
        self.ctx.rebind("cn=Q1," + BASE_DN, Topic("now/a/topic"))
        self.assertEqual(Topic("now/a/topic"), self.ctx.lookup("cn=Q1," + BASE_DN))

    def test_rebind_unbound(self):
        self.ctx.rebind("cn=Q2," + BASE_DN, Queue("fresh"))
        self.assertEqual(Queue("fresh"), self.ctx.lookup("cn=Q2," + BASE_DN))

    def test_unbind(self):
        self.ctx.bind("cn=Q1," + BASE_DN, Queue("work"))
        self.ctx.unbind("cn=Q1," + BASE_DN)
        self.assertRaises(NameNotFoundException, self.ctx.lookup, "cn=Q1," + BASE_DN)
        self.assertRaises(NameNotFoundException, self.ctx.unbind, "cn=Q1," + BASE_DN)

    def test_lookup_missing(self):
        self.assertRaises(NameNotFoundException, self.ctx.lookup, "cn=nothing," + BASE_DN)

    def test_lookup_entry_without_reference(self):
        self.assertRaises(NamingException, self.ctx.lookup, BASE_DN)

    def test_list(self):
        self.ctx.bind("cn=T1," + BASE_DN, Topic("a"))
        self.ctx.bind("cn=Q1," + BASE_DN, Queue("b"))
        pairs = sorted(self.ctx.list(BASE_DN), key=lambda p: p.name.lower())
        self.assertEqual([NameClassPair("cn=Q1", "Queue"), NameClassPair("cn=T1", "Topic")], pairs)

    def test_list_leaf(self):
        self.ctx.bind("cn=T1," + BASE_DN, Topic("a"))
        self.assertEqual([], self.ctx.list("cn=T1," + BASE_DN))

    def test_unbind_sample_on_leaf(self):
        self.ctx.bind("cn=T1," + BASE_DN, Topic("a"))
        self.ctx.bind("cn=T2," + BASE_DN, Topic("b"))
        args = ldap_bind.parse_args(["-ldapURL", "ldap://fake_ldap", "-ldapUsername", ADMIN, "-ldapPassword", "secret",
                                     "-operation", "UNBIND", "-dn", "cn=T1," + BASE_DN])
        ldap_bind.perform(self.ctx, args)
        self.assertRaises(NameNotFoundException, self.ctx.lookup, "cn=T1," + BASE_DN)
        self.assertEqual(Topic("b"), self.ctx.lookup("cn=T2," + BASE_DN))
