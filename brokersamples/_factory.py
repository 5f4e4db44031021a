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
Connection factories.

A :class:`ConnectionFactory` is an administered object: a bag of
connection properties that can be bound into a naming context, looked up
again later and turned into live connections. Connections themselves are
plain proton connections, either event driven (:meth:`connect`) or
blocking (:meth:`create_connection`).
"""

import logging
from typing import Any, Dict, List, Optional, Union

import proton
from proton import Connection, SSLDomain, Url, symbol
from proton.reactor import AtLeastOnce, AtMostOnce, Backoff, Container, LinkOption
from proton.utils import BlockingConnection

from ._properties import DEFAULTS, SupportedProperty, is_true
from ._reference import Reference

log = logging.getLogger("brokersamples")

PROVIDER_NAME = "Apache Qpid Proton"

# Properties the AMQP client has no counterpart for.
_UNSUPPORTED_SSL = (SupportedProperty.SSL_CIPHER_SUITES,
                    SupportedProperty.SSL_EXCLUDED_PROTOCOLS,
                    SupportedProperty.SSL_CONNECTION_DOWNGRADE_TO,
                    SupportedProperty.SSL_TRUST_STORE_PASSWORD,
                    SupportedProperty.SSL_KEY_STORE_NORMALIZED_FORMAT)


def _coerce(name: str, value: Any) -> Any:
    """Convert a property read back as text to the type of its default."""
    default = DEFAULTS[name]
    if value is None or not isinstance(value, str):
        return value
    if isinstance(default, bool):
        return is_true(value)
    if isinstance(default, int):
        return int(value)
    if isinstance(default, float):
        return float(value)
    return value


def _factory_property(name: str) -> property:
    def getter(self):
        return self.effective_property(name)

    def setter(self, value):
        self.set_property(name, value)

    return property(getter, setter, doc="The ``%s`` property." % name)


class ConnectionMetaData(object):
    def __init__(self, provider_name: str, provider_version: str,
                 broker_product: Optional[str] = None, broker_version: Optional[str] = None) -> None:
        self.provider_name = provider_name
        self.provider_version = provider_version
        self.broker_product = broker_product
        self.broker_version = broker_version

    def __str__(self) -> str:
        return "%s %s" % (self.provider_name, self.provider_version)


class ConnectionFactory(object):
    """
    :param properties: Initial property values, see
        :class:`brokersamples.SupportedProperty` for the names.
    """

    host = _factory_property(SupportedProperty.HOST)
    username = _factory_property(SupportedProperty.USERNAME)
    password = _factory_property(SupportedProperty.PASSWORD)
    vpn = _factory_property(SupportedProperty.VPN)
    client_id = _factory_property(SupportedProperty.CLIENT_ID)
    direct_transport = _factory_property(SupportedProperty.DIRECT_TRANSPORT)
    reconnect_retries = _factory_property(SupportedProperty.RECONNECT_RETRIES)
    reconnect_retry_wait = _factory_property(SupportedProperty.RECONNECT_RETRY_WAIT)
    receive_window = _factory_property(SupportedProperty.RECEIVE_WINDOW)
    authentication_scheme = _factory_property(SupportedProperty.AUTHENTICATION_SCHEME)
    ssl_validate_certificate = _factory_property(SupportedProperty.SSL_VALIDATE_CERTIFICATE)

    def __init__(self, properties: Optional[Dict[str, Any]] = None, **kwargs) -> None:
        self._properties: Dict[str, Any] = {}
        self.update(properties or {})
        self.update(kwargs)

    def update(self, properties: Dict[str, Any]) -> None:
        for name, value in properties.items():
            self.set_property(name, value)

    def set_property(self, name: str, value: Any) -> None:
        if name not in DEFAULTS:
            raise ValueError("Unknown connection factory property: %s" % name)
        if value is None:
            self._properties.pop(name, None)
        else:
            self._properties[name] = _coerce(name, value)

    def get_property(self, name: str) -> Any:
        """The value explicitly set for ``name``, or ``None``."""
        if name not in DEFAULTS:
            raise ValueError("Unknown connection factory property: %s" % name)
        return self._properties.get(name)

    def effective_property(self, name: str) -> Any:
        """The value set for ``name``, falling back to its default."""
        value = self.get_property(name)
        return DEFAULTS[name] if value is None else value

    @staticmethod
    def property_names() -> List[str]:
        return list(DEFAULTS)

    def properties(self) -> Dict[str, Any]:
        return dict(self._properties)

    def urls(self) -> List[str]:
        """
        The broker URLs to try, in order. ``host`` may hold a comma separated
        list for failover; entries without a scheme default to ``amqp``.
        """
        urls = []
        for entry in str(self.host).split(","):
            entry = entry.strip()
            if entry:
                urls.append(str(Url(entry)))
        if not urls:
            raise ValueError("No broker host configured")
        return urls

    def is_secure(self) -> bool:
        return any(Url(u).scheme == Url.AMQPS for u in self.urls())

    def allowed_mechs(self) -> Optional[str]:
        explicit = self.get_property(SupportedProperty.ALLOWED_MECHANISMS)
        if explicit:
            return explicit
        scheme = str(self.authentication_scheme).lower()
        if scheme == SupportedProperty.AUTHENTICATION_SCHEME_GSS_KRB:
            return "GSSAPI"
        if scheme == SupportedProperty.AUTHENTICATION_SCHEME_CLIENT_CERTIFICATE:
            return "EXTERNAL"
        if scheme != SupportedProperty.AUTHENTICATION_SCHEME_BASIC:
            raise ValueError("Unknown authentication scheme: %s" % scheme)
        return None

    def backoff(self) -> Union[bool, Backoff]:
        """Reconnect policy: ``False`` for none, -1 retries forever."""
        retries = int(self.reconnect_retries)
        if retries == 0:
            return False
        wait = float(self.reconnect_retry_wait)
        if retries < 0:
            return Backoff(initial=wait, factor=1.0, max_delay=wait)
        return Backoff(initial=wait, factor=1.0, max_delay=wait, max_tries=retries + 1)

    def ssl_domain(self) -> SSLDomain:
        """
        Client TLS settings. Certificate files are PEM; the key store holds
        the client certificate and, unless a separate private key file is
        configured, its private key too.
        """
        for name in _UNSUPPORTED_SSL:
            if self.get_property(name):
                log.warning("%s is not supported by the AMQP transport, ignoring it", name)
        for name in (SupportedProperty.SSL_TRUST_STORE_FORMAT, SupportedProperty.SSL_KEY_STORE_FORMAT):
            fmt = self.effective_property(name)
            if str(fmt).upper() != "PEM":
                log.warning("%s %s is not supported, the file is read as PEM", name, fmt)
        if not is_true(self.effective_property(SupportedProperty.SSL_VALIDATE_CERTIFICATE_DATE)):
            log.warning("certificate dates are always validated by the AMQP transport")

        domain = SSLDomain(SSLDomain.MODE_CLIENT)
        trust_store = self.get_property(SupportedProperty.SSL_TRUST_STORE)
        if trust_store:
            domain.set_trusted_ca_db(trust_store)

        key_store = self.get_property(SupportedProperty.SSL_KEY_STORE)
        if key_store:
            private_key = (self.get_property(SupportedProperty.SSL_PRIVATE_KEY)
                           or self.get_property(SupportedProperty.SSL_PRIVATE_KEY_ALIAS)
                           or key_store)
            key_password = (self.get_property(SupportedProperty.SSL_PRIVATE_KEY_PASSWORD)
                            or self.get_property(SupportedProperty.SSL_KEY_STORE_PASSWORD))
            domain.set_credentials(key_store, private_key, key_password)
        elif str(self.authentication_scheme).lower() == SupportedProperty.AUTHENTICATION_SCHEME_CLIENT_CERTIFICATE:
            raise ValueError("A key store is required for client certificate authentication")

        if not is_true(self.ssl_validate_certificate):
            domain.set_peer_authentication(SSLDomain.ANONYMOUS_PEER)
        elif not trust_store:
            raise ValueError("A trust store is required when certificate validation is enabled")
        elif self.trusted_common_names():
            domain.set_peer_authentication(SSLDomain.VERIFY_PEER_NAME, trust_store)
        else:
            domain.set_peer_authentication(SSLDomain.VERIFY_PEER, trust_store)
        return domain

    def trusted_common_names(self) -> List[str]:
        names = self.get_property(SupportedProperty.SSL_TRUSTED_COMMON_NAME_LIST) or ""
        return [n for n in (p.strip() for p in names.replace(";", ",").split(",")) if n]

    def connect_options(self) -> Dict[str, Any]:
        """Keyword arguments for ``Container.connect`` and ``BlockingConnection``."""
        if int(self.effective_property(SupportedProperty.COMPRESSION_LEVEL)) > 0:
            log.warning("compression is not supported by the AMQP transport, ignoring it")
        urls = self.urls()
        options: Dict[str, Any] = {}
        if len(urls) == 1:
            options["url"] = urls[0]
        else:
            options["urls"] = urls
        options["reconnect"] = self.backoff()
        if self.username:
            options["user"] = self.username
            options["password"] = self.password or ""
        if self.vpn:
            options["virtual_host"] = self.vpn
        if self.client_id:
            options["container_id"] = self.client_id
        heartbeat = self.get_property(SupportedProperty.HEARTBEAT)
        if heartbeat:
            options["heartbeat"] = float(heartbeat)
        mechs = self.allowed_mechs()
        if mechs:
            options["allowed_mechs"] = mechs
        if self.is_secure():
            options["ssl_domain"] = self.ssl_domain()
            # the virtual host carries the VPN name, so the TLS peer name
            # has to be given separately
            names = self.trusted_common_names()
            options["sni"] = names[0] if names else Url(urls[0]).host
        log.debug("connect options for %s: %s", urls,
                  dict((k, v) for k, v in options.items() if k != "password"))
        return options

    def link_options(self) -> LinkOption:
        """Delivery guarantee for links: direct is at-most-once, guaranteed at-least-once."""
        if is_true(self.direct_transport) or is_true(self.effective_property(SupportedProperty.OPTIMIZE_DIRECT)):
            return AtMostOnce()
        return AtLeastOnce()

    def connect(self, container: Container, handler=None) -> Connection:
        """Open an event driven connection on ``container``."""
        return container.connect(handler=handler, **self.connect_options())

    def create_connection(self, timeout: Optional[float] = None) -> BlockingConnection:
        """Open a blocking connection; the caller closes it."""
        if timeout is None:
            timeout = float(self.effective_property(SupportedProperty.CONNECT_TIMEOUT))
        return BlockingConnection(timeout=timeout, **self.connect_options())

    @staticmethod
    def metadata(connection: Optional[Connection] = None) -> ConnectionMetaData:
        """
        Provider information; when an open connection is given the broker's
        advertised product and version are included.
        """
        version = "%d.%d.%d" % (proton.VERSION_MAJOR, proton.VERSION_MINOR, proton.VERSION_POINT)
        product = broker_version = None
        if isinstance(connection, BlockingConnection):
            connection = connection.conn
        props = connection.remote_properties if connection is not None else None
        if props:
            product = props.get(symbol("product"))
            broker_version = props.get(symbol("version"))
        return ConnectionMetaData(PROVIDER_NAME, version, product, broker_version)

    def to_reference(self) -> Reference:
        return Reference("ConnectionFactory", "brokersamples.ConnectionFactory",
                         [(name, str(value)) for name, value in sorted(self._properties.items())])

    @classmethod
    def from_reference(cls, ref: Reference) -> 'ConnectionFactory':
        return cls(dict((name, value) for name, value in ref.items()
                        if name in DEFAULTS and value is not None))

    def __repr__(self) -> str:
        shown = dict((k, v) for k, v in self._properties.items() if "password" not in k)
        return "ConnectionFactory(%s)" % shown
