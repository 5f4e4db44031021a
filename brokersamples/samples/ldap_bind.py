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
Manages administered objects in an LDAP directory: binds or rebinds a
connection factory, topic or queue under a DN, unbinds a DN (or all of its
children) and lists the children of a DN.
"""

import sys

from .. import ConnectionFactory, Context, InitialContext, Queue, Topic
from .._options import SampleParser, configure_logging, run_sample

OPERATIONS = ("BIND", "REBIND", "UNBIND", "LIST")


def parse_args(argv=None):
    parser = SampleParser("SolJMSLDAPBind", description="Bind administered objects in an LDAP directory.")
    parser.add_argument("-ldapURL", metavar="URL", help="LDAP server URL, e.g. ldap://192.168.1.20:389")
    parser.add_argument("-ldapUsername", metavar="USERNAME", help="DN to bind to the LDAP server with")
    parser.add_argument("-ldapPassword", metavar="PASSWORD", help="password of the LDAP user")
    parser.add_argument("-operation", type=str.upper, choices=OPERATIONS, help="what to do with the DN")
    parser.add_argument("-cf", action="store_true", help="bind a connection factory with default properties")
    parser.add_argument("-topic", metavar="TOPIC", help="bind a topic with this physical name")
    parser.add_argument("-queue", metavar="QUEUE", help="bind a queue with this physical name")
    parser.add_argument("-dn", metavar="DN", help="distinguished name to operate on")
    args = parser.parse_args(argv)
    parser.require(args, "-ldapURL", "-ldapUsername", "-ldapPassword", "-operation")
    if args.operation in ("BIND", "REBIND") and not (args.cf or args.topic or args.queue):
        parser.missing("one of [-cf, -topic, -queue]")
    parser.require(args, "-dn")
    return args


def default_factory() -> ConnectionFactory:
    """A factory with every property that has a default set explicitly."""
    cf = ConnectionFactory()
    for name in cf.property_names():
        value = cf.effective_property(name)
        if value is not None:
            cf.set_property(name, value)
    return cf


def perform(context, args) -> None:
    if args.operation == "UNBIND":
        children = context.list(args.dn)
        if children:
            for pair in children:
                context.unbind("%s,%s" % (pair.name, args.dn))
        else:
            context.unbind(args.dn)
        return
    if args.operation == "LIST":
        print("Listing of %s {" % args.dn)
        for pair in context.list(args.dn):
            print(pair.name)
        print("}\n")
        return
    if args.topic is not None:
        obj = Topic(args.topic)
    elif args.queue is not None:
        obj = Queue(args.queue)
    else:
        obj = default_factory()
    if args.operation == "BIND":
        context.bind(args.dn, obj)
    else:
        context.rebind(args.dn, obj)


def run(args):
    env = {
        Context.PROVIDER_URL: args.ldapURL,
        Context.REFERRAL: "throw",
        Context.SECURITY_PRINCIPAL: args.ldapUsername,
        Context.SECURITY_CREDENTIALS: args.ldapPassword,
    }
    with InitialContext(env) as context:
        perform(context, args)


def main(argv=None):
    args = parse_args(argv)
    configure_logging(args.debug)
    return run_sample(run, args)


if __name__ == "__main__":
    sys.exit(main())
