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
Sample programs for a message broker client API, on top of the AMQP 1.0
client in :mod:`proton`.

The package holds the pieces the samples share:

 - :class:`InitialContext`     -- Naming context for administered objects, backed by LDAP or a bindings file.
 - :class:`ConnectionFactory`  -- Administered object holding connection properties.
 - :class:`Topic`, :class:`Queue` -- Destinations and their AMQP addresses.
 - :class:`Requestor`          -- Blocking request/reply over a temporary queue.
 - :class:`XAResource`         -- XA style transaction branches.

The sample programs themselves live in :mod:`brokersamples.samples`.
"""

import logging
import logging.config
import os

from ._destinations import (Capabilities, Destination, DurableSubscription, Queue, TemporaryQueue,
                            TemporaryTopic, Topic)
from ._factory import ConnectionFactory, ConnectionMetaData
from ._messages import (bytes_message, dump_message, map_message, message_text, message_type, object_message,
                        stream_message, text_message)
from ._naming import (ConfigurationException, InitialContext, InvalidNameException, NameAlreadyBoundException,
                      NameClassPair, NameNotFoundException, NamingException)
from ._properties import DEFAULT_CF_NAME, Context, SupportedProperty
from ._reference import RefAddr, Reference
from ._requestor import Requestor
from ._transactions import XAException, XAResource, Xid, create_xid

__all__ = [
    "Capabilities",
    "ConfigurationException",
    "ConnectionFactory",
    "ConnectionMetaData",
    "Context",
    "DEFAULT_CF_NAME",
    "Destination",
    "DurableSubscription",
    "InitialContext",
    "InvalidNameException",
    "NameAlreadyBoundException",
    "NameClassPair",
    "NameNotFoundException",
    "NamingException",
    "Queue",
    "RefAddr",
    "Reference",
    "Requestor",
    "SupportedProperty",
    "TemporaryQueue",
    "TemporaryTopic",
    "Topic",
    "XAException",
    "XAResource",
    "Xid",
    "bytes_message",
    "create_xid",
    "dump_message",
    "map_message",
    "message_text",
    "message_type",
    "object_message",
    "stream_message",
    "text_message",
]

VERSION = (1, 0, 0)

handler = logging.NullHandler()

logconfigfile = os.getenv('BROKERSAMPLES_LOGGER_CONFIG', None)
if logconfigfile:
    logging.config.fileConfig(logconfigfile, None, False)
else:
    log = logging.getLogger("brokersamples")
    log.addHandler(handler)
