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
LDAP directory as a naming context.

Objects are stored with the schema Java naming providers use for
references, so entries written here can be read by other clients and the
other way round:

    objectClass: top, javaContainer, javaObject, javaNamingReference
    javaClassName: <class name>
    javaFactory: <factory name>
    javaReferenceAddress: #<position>#<type>#<content>
"""

import logging
from typing import Any, Dict, List, Optional

from ldap3 import BASE, LEVEL, NONE, Connection, Server
from ldap3.core.exceptions import LDAPException
from ldap3.core.results import RESULT_ENTRY_ALREADY_EXISTS, RESULT_NO_SUCH_OBJECT
from ldap3.utils.dn import parse_dn, safe_dn

from ._naming import (NameAlreadyBoundException, NameClassPair, NameNotFoundException,
                      NamingException, object_of, reference_of)
from ._properties import Context
from ._reference import Reference

log = logging.getLogger("brokersamples")

OBJECT_CLASSES = ['top', 'javaContainer', 'javaObject', 'javaNamingReference']
REFERENCE_ATTRIBUTES = ['objectClass', 'javaClassName', 'javaFactory', 'javaReferenceAddress']

# values of the "referral" environment property
REFERRAL_FOLLOW = "follow"
REFERRAL_IGNORE = "ignore"
REFERRAL_THROW = "throw"


def _values(attributes: Dict[str, Any], name: str) -> List[str]:
    for key, value in attributes.items():
        if key.lower() == name.lower():
            if not isinstance(value, (list, tuple)):
                value = [value]
            return [v.decode('utf-8') if isinstance(v, bytes) else str(v) for v in value]
    return []


def _rdn(dn: str) -> str:
    attr, value, _ = parse_dn(dn)[0]
    return "%s=%s" % (attr, value)


class LdapContext(object):
    """
    :param env: Naming environment; ``provider_url`` is the LDAP server URL,
        ``username``/``password`` the bind DN and its password.
    :param connection: An existing :class:`ldap3.Connection` to use instead
        of opening one from the environment.
    """

    def __init__(self, env: Dict[str, Any], connection: Optional[Connection] = None) -> None:
        self._env = env
        referral = (env.get(Context.REFERRAL) or REFERRAL_IGNORE).lower()
        if referral not in (REFERRAL_FOLLOW, REFERRAL_IGNORE, REFERRAL_THROW):
            raise NamingException("Unknown referral mode: %s" % referral)
        try:
            if connection is None:
                server = Server(env[Context.PROVIDER_URL], get_info=NONE)
                connection = Connection(server,
                                        user=env.get(Context.SECURITY_PRINCIPAL),
                                        password=env.get(Context.SECURITY_CREDENTIALS),
                                        auto_referrals=(referral == REFERRAL_FOLLOW))
            if not connection.bound and not connection.bind():
                raise NamingException("LDAP bind failed: %s" % self._describe(connection))
        except LDAPException as e:
            raise NamingException("Cannot connect to %s: %s" % (env.get(Context.PROVIDER_URL), e)) from e
        self.connection = connection
        log.debug("bound to LDAP server %s", env.get(Context.PROVIDER_URL))

    @staticmethod
    def _describe(connection: Connection) -> str:
        result = connection.result or {}
        return "%s (%s)" % (result.get('description'), result.get('message') or result.get('result'))

    def _result_code(self) -> Optional[int]:
        return (self.connection.result or {}).get('result')

    def _search(self, dn: str, scope, attributes: List[str]) -> List[Dict[str, Any]]:
        try:
            found = self.connection.search(dn, '(objectClass=*)', search_scope=scope, attributes=attributes)
        except LDAPException as e:
            raise NamingException(str(e), dn) from e
        if not found:
            if self._result_code() == RESULT_NO_SUCH_OBJECT:
                raise NameNotFoundException("%s not found" % dn, dn)
            if self._result_code() not in (None, 0):
                raise NamingException("Search of %s failed: %s" % (dn, self._describe(self.connection)), dn)
            return []
        return [r for r in self.connection.response if r.get('type', 'searchResEntry') == 'searchResEntry']

    def lookup(self, name: str) -> Any:
        entries = self._search(name, BASE, REFERENCE_ATTRIBUTES)
        if not entries:
            raise NameNotFoundException("%s not found" % name, name)
        attributes = entries[0].get('attributes', {})
        class_names = _values(attributes, 'javaClassName')
        if not class_names:
            raise NamingException("%s does not hold a reference" % name, name)
        factories = _values(attributes, 'javaFactory')
        ref = Reference(class_names[0], factories[0] if factories else None,
                        Reference.decode_addresses(_values(attributes, 'javaReferenceAddress')))
        return object_of(ref)

    def bind(self, name: str, obj: Any) -> None:
        ref = reference_of(obj)
        rdn_attr, rdn_value, _ = parse_dn(name)[0]
        attributes: Dict[str, Any] = {rdn_attr: rdn_value, 'javaClassName': ref.class_name}
        if ref.factory:
            attributes['javaFactory'] = ref.factory
        if ref.addresses:
            attributes['javaReferenceAddress'] = ref.encode_addresses()
        try:
            added = self.connection.add(name, OBJECT_CLASSES, attributes)
        except LDAPException as e:
            raise NamingException(str(e), name) from e
        if not added:
            if self._result_code() == RESULT_ENTRY_ALREADY_EXISTS:
                raise NameAlreadyBoundException("%s is already bound" % name, name)
            raise NamingException("Cannot bind %s: %s" % (name, self._describe(self.connection)), name)

    def rebind(self, name: str, obj: Any) -> None:
        try:
            self.unbind(name)
        except NameNotFoundException:
            pass
        self.bind(name, obj)

    def unbind(self, name: str) -> None:
        try:
            deleted = self.connection.delete(name)
        except LDAPException as e:
            raise NamingException(str(e), name) from e
        if not deleted:
            if self._result_code() == RESULT_NO_SUCH_OBJECT:
                raise NameNotFoundException("%s not found" % name, name)
            raise NamingException("Cannot unbind %s: %s" % (name, self._describe(self.connection)), name)

    def list(self, name: str = "") -> List[NameClassPair]:
        """The entries directly below ``name``, by relative name."""
        pairs = []
        base = safe_dn(name).lower() if name else ""
        for entry in self._search(name, LEVEL, ['javaClassName']):
            # some servers return the base entry with its children
            if entry['dn'] and safe_dn(entry['dn']).lower() == base:
                continue
            class_names = _values(entry.get('attributes', {}), 'javaClassName')
            pairs.append(NameClassPair(_rdn(entry['dn']), class_names[0] if class_names else "javaContainer"))
        return pairs

    def close(self) -> None:
        if self.connection.bound:
            self.connection.unbind()
