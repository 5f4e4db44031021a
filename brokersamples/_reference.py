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
Serializable form of administered objects.

A :class:`Reference` is what naming contexts store: the class name of the
object, the name of the factory able to rebuild it and an ordered list of
typed addresses. Its text form follows the layout used for references kept
in LDAP directories, one ``#<position>#<type>#<content>`` string per address.
"""

from typing import Iterable, List, Optional, Tuple


class RefAddr(object):
    """A single (type, content) entry of a reference."""

    def __init__(self, addr_type: str, content: Optional[str]) -> None:
        self.type = addr_type
        self.content = content

    def __eq__(self, other: object) -> bool:
        return isinstance(other, RefAddr) and (self.type, self.content) == (other.type, other.content)

    def __repr__(self) -> str:
        return "RefAddr(%r, %r)" % (self.type, self.content)


class Reference(object):
    """
    :param class_name: Name of the referenced class, e.g. ``"Queue"``.
    :param factory: Name of the object factory, informational.
    :param addresses: ``(type, content)`` pairs or :class:`RefAddr` instances.
    """

    def __init__(self, class_name: str, factory: Optional[str] = None,
                 addresses: Optional[Iterable] = None) -> None:
        self.class_name = class_name
        self.factory = factory
        self.addresses: List[RefAddr] = []
        for a in addresses or []:
            self.add(a if isinstance(a, RefAddr) else RefAddr(*a))

    def add(self, addr: RefAddr) -> None:
        self.addresses.append(addr)

    def get(self, addr_type: str) -> Optional[str]:
        """Return the content of the first address of type ``addr_type``."""
        for a in self.addresses:
            if a.type == addr_type:
                return a.content
        return None

    def items(self) -> List[Tuple[str, Optional[str]]]:
        return [(a.type, a.content) for a in self.addresses]

    def encode_addresses(self) -> List[str]:
        """Encode addresses as ``#pos#type#content`` strings."""
        return ["#%d#%s#%s" % (i, a.type, "" if a.content is None else a.content)
                for i, a in enumerate(self.addresses)]

    @staticmethod
    def decode_addresses(values: Iterable[str]) -> List[RefAddr]:
        """Inverse of :meth:`encode_addresses`; entries are ordered by position."""
        decoded = []
        for value in values:
            if not value.startswith("#"):
                raise ValueError("Malformed reference address: %r" % value)
            # the separator is the first character, content may contain it
            pos, addr_type, content = value[1:].split(value[0], 2)
            decoded.append((int(pos), RefAddr(addr_type, content or None)))
        decoded.sort(key=lambda d: d[0])
        return [a for _, a in decoded]

    def __eq__(self, other: object) -> bool:
        return (isinstance(other, Reference) and self.class_name == other.class_name
                and self.addresses == other.addresses)

    def __repr__(self) -> str:
        return "Reference(%s, %s)" % (self.class_name, self.items())
