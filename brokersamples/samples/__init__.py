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
The sample programs, one module each. Every module has a ``main(argv)``
function returning the process exit status; :data:`SAMPLES` maps the names
they are started by to their modules.
"""

SAMPLES = {
    "SolJMSProducer": "producer",
    "SolJMSConsumer": "consumer",
    "SolJMSProgConsumer": "prog_consumer",
    "SolJMSQueueBrowser": "queue_browser",
    "SolJMSRRDirectRequester": "rr_direct_requester",
    "SolJMSRRDirectReplier": "rr_direct_replier",
    "SolJMSRRGuaranteedRequester": "rr_guaranteed_requester",
    "SolJMSRRGuaranteedReplier": "rr_guaranteed_replier",
    "SolJMSSecureSession": "secure_session",
    "SolJMSLDAPBind": "ldap_bind",
    "SolJMSLDAPLookup": "ldap_lookup",
    "SolJMSActiveFlowIndication": "active_flow_indication",
    "Replication": "replication",
    "XATransactions": "xa_transactions",
    "SolJMSHelloWorldPub": "intro.hello_world_pub",
    "SolJMSHelloWorldSub": "intro.hello_world_sub",
    "SolJMSHelloWorldQueuePub": "intro.hello_world_queue_pub",
    "SolJMSHelloWorldQueueSub": "intro.hello_world_queue_sub",
}
