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
Command line handling shared by the sample programs.

The samples use single dash flags (``-username``, ``-physicalTopic`` ...);
:class:`SampleParser` is an :class:`argparse.ArgumentParser` set up for
that style, plus helpers for the flag groups most samples have in common
and for turning parsed flags into a naming environment.
"""

import argparse
import logging
import sys
import traceback
from typing import Any, Callable, Dict, List, Optional

from ._destinations import Destination, Queue, TemporaryQueue, TemporaryTopic, Topic
from ._properties import DEFAULT_CF_NAME, Context, SupportedProperty

log = logging.getLogger("brokersamples")


class SampleParser(argparse.ArgumentParser):
    def __init__(self, prog: str, description: Optional[str] = None, **kwargs) -> None:
        super(SampleParser, self).__init__(prog=prog, description=description, **kwargs)
        self.add_argument("-debug", action="store_true",
                          help="log the client library's activity to stderr")

    def _get_option_tuples(self, option_string):
        # flags are matched exactly: "-user" is not "-username"
        return []

    def missing(self, what: str) -> None:
        """Print usage and a ``Please specify`` line to stdout, then exit with status 2."""
        self.print_usage(sys.stdout)
        print("Please specify %s" % what)
        self.exit(2)

    def require(self, args: argparse.Namespace, *flags: str) -> None:
        """Each of ``flags`` must have been given."""
        for flag in flags:
            if getattr(args, _dest(flag)) is None:
                self.missing('"%s" parameter' % flag)

    def require_one_of(self, args: argparse.Namespace, *flags: str) -> str:
        """Exactly one of ``flags`` must have been given; returns that flag."""
        given = [f for f in flags if getattr(args, _dest(f), None) not in (None, False)]
        if len(given) != 1:
            self.missing("one of [%s]" % ", ".join(flags))
        return given[0]


def _dest(flag: str) -> str:
    return flag.lstrip("-").replace("-", "_")


def add_connection_flags(parser: SampleParser, url_flag: str = "-url",
                         url_help: str = "URL of the broker, e.g. amqp://192.168.1.10:5672") -> None:
    parser.add_argument(url_flag, metavar="URL", help=url_help)
    parser.add_argument("-username", help="client username")
    parser.add_argument("-password", default="", help="client password (default: empty)")
    parser.add_argument("-vpn", help="message VPN (default: the broker's default VPN)")


def add_cf_flag(parser: SampleParser) -> None:
    parser.add_argument("-cf", default=DEFAULT_CF_NAME, metavar="CONNECTION_FACTORY_JNDI_NAME",
                        help="connection factory name (default: %(default)s)")


def add_destination_flags(parser: SampleParser, topic: bool = True, queue: bool = True,
                          temporary: bool = False, jndi: bool = True, durable: bool = False) -> None:
    if topic:
        if jndi:
            parser.add_argument("-topic", metavar="TOPIC_JNDI_NAME", help="topic looked up by name")
        parser.add_argument("-physicalTopic", metavar="TOPIC", help="topic created from its name")
        if temporary:
            parser.add_argument("-tempTopic", action="store_true", help="use a temporary topic")
        if durable:
            parser.add_argument("-durableSN", metavar="DURABLE_SUBSCRIPTION_NAME",
                                help="durable subscription name, topics only")
    if queue:
        if jndi:
            parser.add_argument("-queue", metavar="QUEUE_JNDI_NAME", help="queue looked up by name")
        parser.add_argument("-physicalQueue", metavar="QUEUE", help="queue created from its name")
        if temporary:
            parser.add_argument("-tempQueue", action="store_true", help="use a temporary queue")


def add_transport_flags(parser: SampleParser, optimize_direct: bool = True, schemes: Optional[List[str]] = None) -> None:
    parser.add_argument("-compression", action="store_true", help="enable compression")
    if optimize_direct:
        parser.add_argument("-optDirect", action="store_true", help="optimize for direct transport")
    schemes = schemes or [SupportedProperty.AUTHENTICATION_SCHEME_BASIC,
                          SupportedProperty.AUTHENTICATION_SCHEME_GSS_KRB]
    parser.add_argument("-x", dest="auth_scheme", type=str.lower, choices=schemes,
                        default=SupportedProperty.AUTHENTICATION_SCHEME_BASIC,
                        help="authentication scheme (default: %(default)s)")


def add_ssl_flags(parser: SampleParser) -> None:
    group = parser.add_argument_group("TLS")
    group.add_argument("-exclprots", metavar="PROTOCOLS", help="comma separated protocols to exclude")
    group.add_argument("-ciphers", metavar="CIPHERS", help="comma separated cipher suites")
    group.add_argument("-ts", metavar="TRUST_STORE", help="PEM file of trusted CA certificates")
    group.add_argument("-tsfmt", metavar="FORMAT", help="trust store format (default: PEM)")
    group.add_argument("-tspwd", metavar="PASSWORD", help="trust store password")
    group.add_argument("-ks", metavar="KEY_STORE", help="PEM file holding the client certificate")
    group.add_argument("-ksfmt", metavar="FORMAT", help="key store format (default: PEM)")
    group.add_argument("-ksnfmt", metavar="FORMAT", help="key store normalized format")
    group.add_argument("-kspwd", metavar="PASSWORD", help="key store password")
    group.add_argument("-pk", metavar="PRIVATE_KEY", help="private key file (default: the key store)")
    group.add_argument("-pkpwd", metavar="PASSWORD", help="private key password (default: key store password)")
    group.add_argument("-no_validate_certificates", action="store_true", help="do not validate the broker certificate")
    group.add_argument("-no_validate_dates", action="store_true", help="do not validate certificate dates")
    group.add_argument("-cn", metavar="COMMON_NAMES", help="trusted common names of the broker certificate")
    group.add_argument("-d", metavar="PROTOCOL", help="downgrade the connection to PROTOCOL after authentication")


_SSL_FLAGS = {
    "exclprots": SupportedProperty.SSL_EXCLUDED_PROTOCOLS,
    "ciphers": SupportedProperty.SSL_CIPHER_SUITES,
    "ts": SupportedProperty.SSL_TRUST_STORE,
    "tsfmt": SupportedProperty.SSL_TRUST_STORE_FORMAT,
    "tspwd": SupportedProperty.SSL_TRUST_STORE_PASSWORD,
    "ks": SupportedProperty.SSL_KEY_STORE,
    "ksfmt": SupportedProperty.SSL_KEY_STORE_FORMAT,
    "ksnfmt": SupportedProperty.SSL_KEY_STORE_NORMALIZED_FORMAT,
    "kspwd": SupportedProperty.SSL_KEY_STORE_PASSWORD,
    "pk": SupportedProperty.SSL_PRIVATE_KEY,
    "pkpwd": SupportedProperty.SSL_PRIVATE_KEY_PASSWORD,
    "cn": SupportedProperty.SSL_TRUSTED_COMMON_NAME_LIST,
    "d": SupportedProperty.SSL_CONNECTION_DOWNGRADE_TO,
}


def environment(args: argparse.Namespace, url_flag: str = "url") -> Dict[str, Any]:
    """
    Build the naming environment for parsed flags. Certificate validation
    is off unless TLS flags were declared, so ``amqps`` URLs work without a
    trust store.
    """
    env: Dict[str, Any] = {
        Context.PROVIDER_URL: getattr(args, url_flag),
        Context.SECURITY_PRINCIPAL: args.username,
        Context.SECURITY_CREDENTIALS: args.password,
        SupportedProperty.SSL_VALIDATE_CERTIFICATE: False,
    }
    if args.vpn is not None:
        env[SupportedProperty.VPN] = args.vpn
    if getattr(args, "compression", False):
        env[SupportedProperty.COMPRESSION_LEVEL] = 1
    if getattr(args, "optDirect", False):
        env[SupportedProperty.OPTIMIZE_DIRECT] = True
    auth_scheme = getattr(args, "auth_scheme", None)
    if auth_scheme:
        env[SupportedProperty.AUTHENTICATION_SCHEME] = auth_scheme
    if hasattr(args, "no_validate_certificates"):
        env[SupportedProperty.SSL_VALIDATE_CERTIFICATE] = not args.no_validate_certificates
        env[SupportedProperty.SSL_VALIDATE_CERTIFICATE_DATE] = not args.no_validate_dates
        for flag, name in _SSL_FLAGS.items():
            value = getattr(args, flag)
            if value is not None:
                env[name] = value
    return env


def configure_logging(debug: bool) -> None:
    if debug:
        logging.basicConfig(level=logging.DEBUG,
                            format="%(asctime)s %(name)s %(levelname)s %(message)s")


def run_sample(target: Callable[..., Any], *args) -> int:
    """
    Run a sample body: a traceback and status 1 when it fails, status 0
    when it is interrupted from the keyboard, otherwise whatever status it
    returned (0 for none).
    """
    try:
        status = target(*args)
    except KeyboardInterrupt:
        return 0
    except Exception:
        traceback.print_exc()
        return 1
    return status or 0


def lookup(context, name: str, expected: type) -> Any:
    """Look ``name`` up and check the kind of object bound to it."""
    obj = context.lookup(name)
    if not isinstance(obj, expected):
        raise TypeError("%s is bound to a %s, expected a %s" % (name, type(obj).__name__, expected.__name__))
    return obj


def destination(args: argparse.Namespace, context=None) -> Destination:
    """The destination selected by the ``-topic``/``-queue`` family of flags."""
    if getattr(args, "topic", None):
        return lookup(context, args.topic, Topic)
    if getattr(args, "physicalTopic", None):
        return Topic(args.physicalTopic)
    if getattr(args, "tempTopic", False):
        return TemporaryTopic()
    if getattr(args, "queue", None):
        return lookup(context, args.queue, Queue)
    if getattr(args, "physicalQueue", None):
        return Queue(args.physicalQueue)
    if getattr(args, "tempQueue", False):
        return TemporaryQueue()
    raise ValueError("No destination given")
