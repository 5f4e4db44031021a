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
Names of the properties understood by naming contexts and connection
factories.

An environment is a plain ``dict`` keyed by these names. The same keys are
the attribute names of :class:`brokersamples.ConnectionFactory`, so an
environment can be handed to a factory as-is.
"""

from typing import Any, Dict


class Context(object):
    """Naming environment keys."""

    PROVIDER_URL = "provider_url"
    SECURITY_PRINCIPAL = "username"
    SECURITY_CREDENTIALS = "password"
    REFERRAL = "referral"
    NAMING_FILE = "naming_file"


class SupportedProperty(object):
    """Connection factory properties."""

    HOST = "host"
    USERNAME = Context.SECURITY_PRINCIPAL
    PASSWORD = Context.SECURITY_CREDENTIALS
    VPN = "vpn"
    CLIENT_ID = "client_id"
    DIRECT_TRANSPORT = "direct_transport"
    OPTIMIZE_DIRECT = "optimize_direct"
    COMPRESSION_LEVEL = "compression_level"
    AUTHENTICATION_SCHEME = "authentication_scheme"
    ALLOWED_MECHANISMS = "allowed_mechanisms"
    HEARTBEAT = "heartbeat"
    CONNECT_TIMEOUT = "connect_timeout"
    RECONNECT_RETRIES = "reconnect_retries"
    RECONNECT_RETRY_WAIT = "reconnect_retry_wait"
    RECEIVE_WINDOW = "receive_window"

    SSL_VALIDATE_CERTIFICATE = "ssl_validate_certificate"
    SSL_VALIDATE_CERTIFICATE_DATE = "ssl_validate_certificate_date"
    SSL_TRUST_STORE = "ssl_trust_store"
    SSL_TRUST_STORE_FORMAT = "ssl_trust_store_format"
    SSL_TRUST_STORE_PASSWORD = "ssl_trust_store_password"
    SSL_TRUSTED_COMMON_NAME_LIST = "ssl_trusted_common_name_list"
    SSL_KEY_STORE = "ssl_key_store"
    SSL_KEY_STORE_FORMAT = "ssl_key_store_format"
    SSL_KEY_STORE_NORMALIZED_FORMAT = "ssl_key_store_normalized_format"
    SSL_KEY_STORE_PASSWORD = "ssl_key_store_password"
    SSL_PRIVATE_KEY = "ssl_private_key"
    SSL_PRIVATE_KEY_ALIAS = "ssl_private_key_alias"
    SSL_PRIVATE_KEY_PASSWORD = "ssl_private_key_password"
    SSL_CIPHER_SUITES = "ssl_cipher_suites"
    SSL_EXCLUDED_PROTOCOLS = "ssl_excluded_protocols"
    SSL_CONNECTION_DOWNGRADE_TO = "ssl_connection_downgrade_to"

    AUTHENTICATION_SCHEME_BASIC = "basic"
    AUTHENTICATION_SCHEME_CLIENT_CERTIFICATE = "client_certificate"
    AUTHENTICATION_SCHEME_GSS_KRB = "kerberos"

    AUTHENTICATION_SCHEMES = (AUTHENTICATION_SCHEME_BASIC,
                              AUTHENTICATION_SCHEME_CLIENT_CERTIFICATE,
                              AUTHENTICATION_SCHEME_GSS_KRB)


DEFAULT_CF_NAME = "cf/default"

DEFAULTS: Dict[str, Any] = {
    SupportedProperty.HOST: "localhost",
    SupportedProperty.USERNAME: None,
    SupportedProperty.PASSWORD: "",
    SupportedProperty.VPN: None,
    SupportedProperty.CLIENT_ID: None,
    SupportedProperty.DIRECT_TRANSPORT: False,
    SupportedProperty.OPTIMIZE_DIRECT: False,
    SupportedProperty.COMPRESSION_LEVEL: 0,
    SupportedProperty.AUTHENTICATION_SCHEME: SupportedProperty.AUTHENTICATION_SCHEME_BASIC,
    SupportedProperty.ALLOWED_MECHANISMS: None,
    SupportedProperty.HEARTBEAT: None,
    SupportedProperty.CONNECT_TIMEOUT: 30.0,
    SupportedProperty.RECONNECT_RETRIES: 0,
    SupportedProperty.RECONNECT_RETRY_WAIT: 3.0,
    SupportedProperty.RECEIVE_WINDOW: 255,
    SupportedProperty.SSL_VALIDATE_CERTIFICATE: True,
    SupportedProperty.SSL_VALIDATE_CERTIFICATE_DATE: True,
    SupportedProperty.SSL_TRUST_STORE: None,
    SupportedProperty.SSL_TRUST_STORE_FORMAT: "PEM",
    SupportedProperty.SSL_TRUST_STORE_PASSWORD: None,
    SupportedProperty.SSL_TRUSTED_COMMON_NAME_LIST: None,
    SupportedProperty.SSL_KEY_STORE: None,
    SupportedProperty.SSL_KEY_STORE_FORMAT: "PEM",
    SupportedProperty.SSL_KEY_STORE_NORMALIZED_FORMAT: None,
    SupportedProperty.SSL_KEY_STORE_PASSWORD: None,
    SupportedProperty.SSL_PRIVATE_KEY: None,
    SupportedProperty.SSL_PRIVATE_KEY_ALIAS: None,
    SupportedProperty.SSL_PRIVATE_KEY_PASSWORD: None,
    SupportedProperty.SSL_CIPHER_SUITES: None,
    SupportedProperty.SSL_EXCLUDED_PROTOCOLS: None,
    SupportedProperty.SSL_CONNECTION_DOWNGRADE_TO: None,
}


def is_true(value: Any) -> bool:
    """Interpret property values that may have been read back as text."""
    if isinstance(value, str):
        return value.strip().lower() in ("true", "yes", "on", "1")
    return bool(value)
