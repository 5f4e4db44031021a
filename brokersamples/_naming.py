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
Naming contexts for administered objects.

An :class:`InitialContext` is the entry point: depending on the
``provider_url`` of its environment it talks to an LDAP directory or to a
bindings file kept next to the broker configuration. Either way objects are
stored as :class:`Reference` instances and rebuilt on lookup.
"""

import json
import logging
import os
import re
from typing import Any, Dict, List, Optional

from ._destinations import Queue, Topic
from ._factory import ConnectionFactory
from ._properties import DEFAULT_CF_NAME, DEFAULTS, Context, SupportedProperty
from ._reference import Reference

log = logging.getLogger("brokersamples")


class NamingException(Exception):
    """Root of the naming errors; ``name`` is the name being resolved, if any."""

    def __init__(self, message: str, name: Optional[str] = None) -> None:
        super(NamingException, self).__init__(message)
        self.name = name


class NameNotFoundException(NamingException):
    pass


class NameAlreadyBoundException(NamingException):
    pass


class InvalidNameException(NamingException):
    pass


class ConfigurationException(NamingException):
    pass


class NameClassPair(object):
    def __init__(self, name: str, class_name: str) -> None:
        self.name = name
        self.class_name = class_name

    def __eq__(self, other: object) -> bool:
        return (isinstance(other, NameClassPair)
                and (self.name, self.class_name) == (other.name, other.class_name))

    def __repr__(self) -> str:
        return "%s: %s" % (self.name, self.class_name)


_OBJECT_CLASSES = {
    "ConnectionFactory": ConnectionFactory,
    "Topic": Topic,
    "Queue": Queue,
}


def _short_class_name(class_name: str) -> str:
    # references written by other clients carry qualified implementation
    # names such as "com.example.jms.SolTopicImpl"
    name = class_name.rsplit(".", 1)[-1]
    if name.endswith("Impl"):
        name = name[:-4]
    if name not in _OBJECT_CLASSES and name.startswith("Sol"):
        name = name[3:]
    return name


def reference_of(obj: Any) -> Reference:
    """The reference to store for ``obj``."""
    if isinstance(obj, Reference):
        return obj
    to_reference = getattr(obj, "to_reference", None)
    if to_reference is None:
        raise NamingException("Cannot bind an object of type %s" % type(obj).__name__)
    return to_reference()


def object_of(ref: Reference) -> Any:
    """The administered object a reference stands for; unknown classes stay references."""
    cls = _OBJECT_CLASSES.get(_short_class_name(ref.class_name))
    if cls is None:
        return ref
    return cls.from_reference(ref)


def connection_properties(env: Dict[str, Any]) -> Dict[str, Any]:
    """The entries of ``env`` that are connection factory properties."""
    return dict((k, v) for k, v in env.items() if k in DEFAULTS and v is not None)


def _check_name(name: str) -> str:
    if not isinstance(name, str) or not name.strip():
        raise InvalidNameException("Invalid name: %r" % (name,), name)
    return name.strip()


def _strip_json_comments(json_text: str) -> str:
    """Remove ``//`` and ``/* */`` comments that are not inside strings."""
    def replacer(match):
        s = match.group(0)
        return " " if s.startswith('/') else s
    pattern = re.compile(r'//.*?$|/\*.*?\*/|\'(?:\\.|[^\\\'])*\'|"(?:\\.|[^\\"])*"', re.DOTALL | re.MULTILINE)
    return re.sub(pattern, replacer, json_text)


def find_naming_file() -> Optional[str]:
    """
    Locate the bindings file. The places looked at, in order:

    1.  The location set in the environment variable ``MESSAGING_NAMING_FILE``
    2.  ``./naming.json``
    3.  ``~/.config/messaging/naming.json``
    4.  ``/etc/messaging/naming.json``
    """
    env_file = os.environ.get('MESSAGING_NAMING_FILE')
    if env_file:
        return env_file
    for d in ['.', os.path.expanduser('~/.config/messaging'), '/etc/messaging']:
        f = os.path.join(d, 'naming.json')
        if os.path.isfile(f):
            return f
    return None


class BrokerContext(object):
    """
    Bindings kept in a JSON file::

        {
          "connection_factories": {"cf/secure": {"ssl_trust_store": "ca.pem"}},
          "topics": {"T/greetings": "greetings/hello"},
          "queues": {"Q/work": "work"}
        }

    Factories are stored as their properties, destinations as their physical
    name. Connection properties of the environment override whatever the file
    says, so the same file serves different users and brokers.
    """

    SECTIONS = {
        "ConnectionFactory": "connection_factories",
        "Topic": "topics",
        "Queue": "queues",
    }

    def __init__(self, env: Dict[str, Any]) -> None:
        self._env = env
        self.path = env.get(Context.NAMING_FILE) or find_naming_file()
        self._overrides = connection_properties(env)
        url = env.get(Context.PROVIDER_URL)
        if url and SupportedProperty.HOST not in self._overrides:
            self._overrides[SupportedProperty.HOST] = url

    def _load(self) -> Dict[str, Dict[str, Any]]:
        bindings: Dict[str, Dict[str, Any]] = dict((s, {}) for s in self.SECTIONS.values())
        if not self.path or not os.path.isfile(self.path):
            return bindings
        try:
            with open(self.path, 'r') as f:
                loaded = json.loads(_strip_json_comments(f.read()))
        except (OSError, ValueError) as e:
            raise ConfigurationException("Cannot read bindings file %s: %s" % (self.path, e))
        if not isinstance(loaded, dict):
            raise ConfigurationException("Bindings file %s does not hold an object" % self.path)
        for section, entries in loaded.items():
            if section not in bindings or not isinstance(entries, dict):
                raise ConfigurationException("Unexpected section %r in %s" % (section, self.path))
            bindings[section].update(entries)
        return bindings

    def _save(self, bindings: Dict[str, Dict[str, Any]]) -> None:
        if not self.path:
            self.path = 'naming.json'
        with open(self.path, 'w') as f:
            json.dump(bindings, f, indent=2, sort_keys=True)
        log.debug("bindings written to %s", self.path)

    @staticmethod
    def _find(bindings: Dict[str, Dict[str, Any]], name: str) -> Optional[str]:
        for section, entries in bindings.items():
            if name in entries:
                return section
        return None

    def lookup(self, name: str) -> Any:
        name = _check_name(name)
        bindings = self._load()
        section = self._find(bindings, name)
        if section == "connection_factories":
            cf = ConnectionFactory(bindings[section][name])
            cf.update(self._overrides)
            return cf
        if section == "topics":
            return Topic(bindings[section][name])
        if section == "queues":
            return Queue(bindings[section][name])
        if name == DEFAULT_CF_NAME:
            return ConnectionFactory(self._overrides)
        raise NameNotFoundException("%s not found" % name, name)

    def bind(self, name: str, obj: Any, replace: bool = False) -> None:
        name = _check_name(name)
        ref = reference_of(obj)
        section = self.SECTIONS.get(_short_class_name(ref.class_name))
        if section is None:
            raise NamingException("Cannot bind a %s" % ref.class_name, name)
        bindings = self._load()
        existing = self._find(bindings, name)
        if existing is not None:
            if not replace:
                raise NameAlreadyBoundException("%s is already bound" % name, name)
            del bindings[existing][name]
        if section == "connection_factories":
            bindings[section][name] = dict(ref.items())
        else:
            bindings[section][name] = ref.get("Name")
        self._save(bindings)

    def rebind(self, name: str, obj: Any) -> None:
        self.bind(name, obj, replace=True)

    def unbind(self, name: str) -> None:
        name = _check_name(name)
        bindings = self._load()
        section = self._find(bindings, name)
        if section is None:
            raise NameNotFoundException("%s not found" % name, name)
        del bindings[section][name]
        self._save(bindings)

    def list(self, name: str = "") -> List[NameClassPair]:
        """Bindings whose name starts with ``name/``, or all of them."""
        prefix = name.strip().rstrip("/") + "/" if name and name.strip() else ""
        classes = dict((v, k) for k, v in self.SECTIONS.items())
        pairs = []
        for section, entries in self._load().items():
            for n in entries:
                if n.startswith(prefix):
                    pairs.append(NameClassPair(n[len(prefix):], classes[section]))
        return sorted(pairs, key=lambda p: p.name)

    def close(self) -> None:
        pass


class InitialContext(object):
    """
    :param env: The naming environment, see :class:`brokersamples.Context`.
        Connection factory properties in it are applied to looked up
        factories by the broker context.
    """

    def __init__(self, env: Optional[Dict[str, Any]] = None, **kwargs) -> None:
        self._env = dict(env or {})
        self._env.update(kwargs)
        url = self._env.get(Context.PROVIDER_URL) or ""
        if url.lower().startswith(("ldap://", "ldaps://")):
            from ._ldap import LdapContext
            self._delegate = LdapContext(self._env)
        else:
            self._delegate = BrokerContext(self._env)
        log.debug("initial context for %r uses %s", url, type(self._delegate).__name__)

    @property
    def environment(self) -> Dict[str, Any]:
        return dict(self._env)

    def lookup(self, name: str) -> Any:
        return self._delegate.lookup(name)

    def bind(self, name: str, obj: Any) -> None:
        self._delegate.bind(name, obj)

    def rebind(self, name: str, obj: Any) -> None:
        self._delegate.rebind(name, obj)

    def unbind(self, name: str) -> None:
        self._delegate.unbind(name)

    def list(self, name: str = "") -> List[NameClassPair]:
        return self._delegate.list(name)

    def close(self) -> None:
        self._delegate.close()

    def __enter__(self) -> 'InitialContext':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
