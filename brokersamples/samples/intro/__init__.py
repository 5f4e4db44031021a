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
The introductory samples: the least code needed to publish and subscribe.

All of them take the same positional arguments::

    <naming-provider-url> <vpn> <client-username> <connection-factory> <destination>
"""

import argparse

from ... import Context, InitialContext, SupportedProperty
from ..._options import SampleParser

GUARANTEED_NOTE = """\
Note: the client-username provided must have adequate permissions in its client
      profile to send and receive guaranteed messages, and to create endpoints.
      Also, the message-spool for the VPN must be configured with >0 capacity."""


def parse_args(prog, destination="topic", argv=None, count=False, epilog=None):
    parser = SampleParser(prog, epilog=epilog, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("url", help="URL of the naming provider")
    parser.add_argument("vpn", help="message VPN")
    parser.add_argument("username", help="client username")
    parser.add_argument("cf", help="name of the connection factory")
    parser.add_argument("destination", help="name of the %s" % destination)
    if count:
        parser.add_argument("-n", dest="count", type=int, default=0,
                            help="stop after this many messages, 0 to run until interrupted (default: %(default)s)")
    return parser.parse_args(argv)


def initial_context(args):
    return InitialContext({Context.PROVIDER_URL: args.url,
                           SupportedProperty.VPN: args.vpn,
                           Context.SECURITY_PRINCIPAL: args.username})
