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

from proton import SSL, SSLDomain, symbol
from proton.reactor import AtLeastOnce, AtMostOnce

from brokersamples import ConnectionFactory, SupportedProperty
from brokersamples._factory import PROVIDER_NAME


class FakeConnection(object):
    def __init__(self, remote_properties=None):
        self.remote_properties = remote_properties


class PropertiesTest(unittest.TestCase):

    def test_defaults(self):
        cf = ConnectionFactory()
        self.assertEqual("localhost", cf.host)
        self.assertIsNone(cf.username)
        self.assertEqual("", cf.password)
        self.assertFalse(cf.direct_transport)
        self.assertEqual(255, cf.receive_window)
        self.assertEqual({}, cf.properties())

    def test_set_and_remove(self):
        cf = ConnectionFactory(host="amqp://h:5672", vpn="default")
        self.assertEqual("default", cf.get_property(SupportedProperty.VPN))
        cf.vpn = None
        self.assertIsNone(cf.get_property(SupportedProperty.VPN))
        self.assertNotIn(SupportedProperty.VPN, cf.properties())

    def test_unknown_property(self):
        self.assertRaises(ValueError, ConnectionFactory, {"colour": "blue"})
        self.assertRaises(ValueError, ConnectionFactory().get_property, "colour")

    def test_text_values_are_coerced(self):
        cf = ConnectionFactory({SupportedProperty.DIRECT_TRANSPORT: "true",
                                SupportedProperty.RECONNECT_RETRIES: "3",
                                SupportedProperty.RECONNECT_RETRY_WAIT: "0.5"})
        self.assertIs(True, cf.direct_transport)
        self.assertEqual(3, cf.reconnect_retries)
        self.assertEqual(0.5, cf.reconnect_retry_wait)

    def test_property_names(self):
        names = ConnectionFactory.property_names()
        self.assertIn(SupportedProperty.HOST, names)
        self.assertIn(SupportedProperty.SSL_TRUST_STORE, names)

    def test_reference_round_trip(self):
        cf = ConnectionFactory(host="amqp://h:5672", vpn="v", direct_transport=True, receive_window=10)
        ref = cf.to_reference()
        self.assertEqual("ConnectionFactory", ref.class_name)
        self.assertEqual("True", ref.get(SupportedProperty.DIRECT_TRANSPORT))
        copy = ConnectionFactory.from_reference(ref)
        self.assertEqual(cf.properties(), copy.properties())

    def test_repr_hides_passwords(self):
        cf = ConnectionFactory(username="u", password="secret", ssl_key_store_password="secret2")
        self.assertNotIn("secret", repr(cf))
        self.assertIn("'u'", repr(cf))


class ConnectOptionsTest(unittest.TestCase):

    def test_single_url(self):
        opts = ConnectionFactory(host="amqp://broker:5672").connect_options()
        self.assertEqual("amqp://broker:5672", opts["url"])
        self.assertNotIn("urls", opts)
        self.assertIs(False, opts["reconnect"])
        self.assertNotIn("user", opts)
        self.assertNotIn("ssl_domain", opts)

    def test_failover_urls(self):
        opts = ConnectionFactory(host="amqp://a:5672, amqp://b:5672").connect_options()
        self.assertEqual(["amqp://a:5672", "amqp://b:5672"], opts["urls"])
        self.assertNotIn("url", opts)

    def test_no_host(self):
        self.assertRaises(ValueError, ConnectionFactory(host=" , ").urls)

    def test_credentials_vpn_and_client_id(self):
        opts = ConnectionFactory(host="amqp://b:5672", username="user", vpn="finance",
                                 client_id="me", heartbeat=20).connect_options()
        self.assertEqual("user", opts["user"])
        self.assertEqual("", opts["password"])
        self.assertEqual("finance", opts["virtual_host"])
        self.assertEqual("me", opts["container_id"])
        self.assertEqual(20.0, opts["heartbeat"])

    def test_compression_is_ignored(self):
        with self.assertLogs("brokersamples", "WARNING"):
            opts = ConnectionFactory(host="amqp://b:5672", compression_level=9).connect_options()
        self.assertNotIn("compression_level", opts)

    def test_mechanisms(self):
        self.assertIsNone(ConnectionFactory().allowed_mechs())
        self.assertEqual("GSSAPI", ConnectionFactory(authentication_scheme="kerberos").allowed_mechs())
        self.assertEqual("EXTERNAL", ConnectionFactory(authentication_scheme="client_certificate").allowed_mechs())
        self.assertEqual("PLAIN", ConnectionFactory(allowed_mechanisms="PLAIN",
                                                    authentication_scheme="kerberos").allowed_mechs())
        self.assertRaises(ValueError, ConnectionFactory(authentication_scheme="magic").allowed_mechs)

    def test_kerberos_option(self):
        opts = ConnectionFactory(host="amqp://b:5672", authentication_scheme="kerberos").connect_options()
        self.assertEqual("GSSAPI", opts["allowed_mechs"])

    def test_link_options(self):
        self.assertIsInstance(ConnectionFactory().link_options(), AtLeastOnce)
        self.assertIsInstance(ConnectionFactory(direct_transport=True).link_options(), AtMostOnce)
        self.assertIsInstance(ConnectionFactory(optimize_direct=True).link_options(), AtMostOnce)


class BackoffTest(unittest.TestCase):

    def test_no_retries(self):
        self.assertIs(False, ConnectionFactory().backoff())

    def test_limited_retries(self):
        backoff = ConnectionFactory(reconnect_retries=2, reconnect_retry_wait=3).backoff()
        self.assertEqual([0.0, 3.0, 3.0], list(backoff))

    def test_retry_forever(self):
        backoff = ConnectionFactory(reconnect_retries=-1, reconnect_retry_wait=1.5).backoff()
        delays = iter(backoff)
        self.assertEqual([0.0, 1.5, 1.5, 1.5], [next(delays) for _ in range(4)])
        self.assertIsNone(backoff.kwargs.get("max_tries"))


@unittest.skipUnless(SSL.present(), "SSL not available")
class SSLDomainTest(unittest.TestCase):

    def test_no_validation(self):
        cf = ConnectionFactory(host="amqps://broker:5671", ssl_validate_certificate=False)
        opts = cf.connect_options()
        self.assertIsInstance(opts["ssl_domain"], SSLDomain)
        self.assertEqual("broker", opts["sni"])

    def test_validation_needs_trust_store(self):
        cf = ConnectionFactory(host="amqps://broker:5671")
        self.assertRaises(ValueError, cf.ssl_domain)

    def test_client_certificate_needs_key_store(self):
        cf = ConnectionFactory(host="amqps://broker:5671", ssl_validate_certificate=False,
                               authentication_scheme="client_certificate")
        self.assertRaises(ValueError, cf.ssl_domain)

    def test_unsupported_settings_are_logged(self):
        cf = ConnectionFactory(host="amqps://broker:5671", ssl_validate_certificate=False,
                               ssl_cipher_suites="AES", ssl_trust_store_format="JKS")
        with self.assertLogs("brokersamples", "WARNING") as logs:
            cf.ssl_domain()
        output = "\n".join(logs.output)
        self.assertIn(SupportedProperty.SSL_CIPHER_SUITES, output)
        self.assertIn("JKS", output)

    def test_trusted_common_names(self):
        cf = ConnectionFactory(ssl_trusted_common_name_list="a.example, b.example;c.example")
        self.assertEqual(["a.example", "b.example", "c.example"], cf.trusted_common_names())


class MetaDataTest(unittest.TestCase):

    def test_provider_only(self):
        md = ConnectionFactory.metadata()
        self.assertEqual(PROVIDER_NAME, md.provider_name)
        self.assertRegex(md.provider_version, r"^\d+\.\d+\.\d+$")
        self.assertEqual("%s %s" % (PROVIDER_NAME, md.provider_version), str(md))
        self.assertIsNone(md.broker_product)

    def test_broker_properties(self):
        conn = FakeConnection({symbol("product"): "broker", symbol("version"): "9.1"})
        md = ConnectionFactory.metadata(conn)
        self.assertEqual("broker", md.broker_product)
        self.assertEqual("9.1", md.broker_version)
