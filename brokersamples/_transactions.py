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
XA style transaction branches on top of AMQP local transactions.

AMQP 1.0 brokers coordinate local transactions only: a transaction is
declared, work is done under it and it is discharged with a commit or an
abort. :class:`XAResource` drives one such transaction per branch through
the familiar XA states. There is no separate prepare phase on the wire, so
``prepare`` only records the vote and the work becomes durable when the
branch is committed.
"""

import logging
import random
from typing import Dict, List, Optional, Union

from proton import Link, Message, Timeout
from proton.handlers import TransactionHandler
from proton.utils import BlockingConnection, BlockingSender

log = logging.getLogger("brokersamples")

# start/end flags
TMNOFLAGS = 0x00000000
TMSUCCESS = 0x04000000
TMFAIL = 0x20000000
TMONEPHASE = 0x40000000

# prepare votes
XA_OK = 0
XA_RDONLY = 3

# error codes
XA_RBROLLBACK = 100
XAER_RMERR = -3
XAER_NOTA = -4
XAER_INVAL = -5
XAER_PROTO = -6
XAER_RMFAIL = -7
XAER_DUPID = -8

_ERROR_NAMES = {
    XA_RBROLLBACK: "XA_RBROLLBACK",
    XAER_RMERR: "XAER_RMERR",
    XAER_NOTA: "XAER_NOTA",
    XAER_INVAL: "XAER_INVAL",
    XAER_PROTO: "XAER_PROTO",
    XAER_RMFAIL: "XAER_RMFAIL",
    XAER_DUPID: "XAER_DUPID",
}


class XAException(Exception):
    def __init__(self, error_code: int, message: Optional[str] = None) -> None:
        name = _ERROR_NAMES.get(error_code, str(error_code))
        super(XAException, self).__init__("%s: %s" % (name, message) if message else name)
        self.error_code = error_code


class Xid(object):
    """Transaction branch identifier."""

    def __init__(self, format_id: int, global_transaction_id: bytes, branch_qualifier: bytes) -> None:
        if len(global_transaction_id) > 64 or len(branch_qualifier) > 64:
            raise ValueError("Xid parts are limited to 64 bytes")
        self.format_id = format_id
        self.global_transaction_id = bytes(global_transaction_id)
        self.branch_qualifier = bytes(branch_qualifier)

    def _key(self):
        return self.format_id, self.global_transaction_id, self.branch_qualifier

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Xid) and self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __repr__(self) -> str:
        return "Xid(%d, %s, %s)" % (self.format_id, self.global_transaction_id.hex(),
                                    self.branch_qualifier.hex())


def create_xid(gid: int, bid: Optional[int] = None) -> Xid:
    """A one byte global id and branch qualifier; a random branch when ``bid`` is not given."""
    if bid is None:
        bid = random.randrange(1000)
    return Xid(0, bytes([gid & 0xff]), bytes([bid & 0xff]))


class _Branch(object):
    ACTIVE = "active"
    ENDED = "ended"
    PREPARED = "prepared"

    def __init__(self, xid: Xid) -> None:
        self.xid = xid
        self.transaction = None
        self.declared = False
        self.declare_failed = False
        self.state = None
        self.rollback_only = False
        self.work = 0
        self.outcome = None


class XAResource(TransactionHandler):
    """
    Transaction branches on one blocking connection. Only one branch can be
    associated with the connection at a time.

    :param connection: The connection the transactional work is done on.
    :param timeout: Seconds to wait for the broker, ``False`` for the
        connection's own timeout.
    """

    def __init__(self, connection: BlockingConnection, timeout: Union[None, bool, float] = False) -> None:
        self.connection = connection
        self.timeout = timeout
        self._branches: Dict[Xid, _Branch] = {}
        self._active: Optional[_Branch] = None

    def _wait(self, condition, msg: str) -> None:
        try:
            self.connection.wait(condition, timeout=self.timeout, msg=msg)
        except Timeout as e:
            raise XAException(XAER_RMFAIL, str(e)) from e

    def _branch(self, xid: Xid) -> _Branch:
        branch = self._branches.get(xid)
        if branch is None:
            raise XAException(XAER_NOTA, "unknown branch %r" % (xid,))
        return branch

    def _for(self, transaction) -> Optional[_Branch]:
        for branch in self._branches.values():
            if branch.transaction is transaction:
                return branch
        return None

    def start(self, xid: Xid, flags: int = TMNOFLAGS) -> None:
        if flags != TMNOFLAGS:
            raise XAException(XAER_INVAL, "joining or resuming branches is not supported")
        if xid in self._branches:
            raise XAException(XAER_DUPID, "branch %r already exists" % (xid,))
        if self._active is not None:
            raise XAException(XAER_PROTO, "branch %r is still active" % (self._active.xid,))
        branch = _Branch(xid)
        self._branches[xid] = branch
        branch.transaction = self.connection.container.declare_transaction(self.connection.conn, handler=self)
        try:
            self._wait(lambda: branch.declared or branch.declare_failed, "Declaring transaction")
        except XAException:
            del self._branches[xid]
            raise
        if branch.declare_failed:
            del self._branches[xid]
            raise XAException(XAER_RMERR, "broker refused to declare a transaction")
        branch.state = _Branch.ACTIVE
        self._active = branch
        log.debug("started branch %r", xid)

    def send(self, sender: Union[BlockingSender, Link], msg: Message) -> None:
        """Send ``msg`` as part of the active branch."""
        if self._active is None:
            raise XAException(XAER_PROTO, "no active branch")
        link = sender.link if isinstance(sender, BlockingSender) else sender
        delivery = self._active.transaction.send(link, msg)
        self._active.work += 1
        if link.snd_settle_mode != Link.SND_SETTLED:
            self._wait(lambda: delivery.settled or delivery.remote_state, "Sending on sender %s" % link.name)
            delivery.settle()

    def end(self, xid: Xid, flags: int = TMSUCCESS) -> None:
        branch = self._branch(xid)
        if branch is not self._active:
            raise XAException(XAER_PROTO, "branch %r is not active" % (xid,))
        if flags == TMFAIL:
            branch.rollback_only = True
        elif flags != TMSUCCESS:
            raise XAException(XAER_INVAL, "unsupported end flags 0x%x" % flags)
        branch.state = _Branch.ENDED
        self._active = None

    def prepare(self, xid: Xid) -> int:
        """
        Vote on the branch. A branch without work is completed right away and
        reported as ``XA_RDONLY``; it must not be committed afterwards.
        """
        branch = self._branch(xid)
        if branch.state != _Branch.ENDED:
            raise XAException(XAER_PROTO, "branch %r is %s" % (xid, branch.state))
        if branch.rollback_only:
            self._discharge(branch, True)
            raise XAException(XA_RBROLLBACK, "branch %r was marked for rollback" % (xid,))
        if not branch.work:
            self._discharge(branch, False)
            return XA_RDONLY
        branch.state = _Branch.PREPARED
        return XA_OK

    def commit(self, xid: Xid, one_phase: bool = False) -> None:
        branch = self._branch(xid)
        expected = _Branch.ENDED if one_phase else _Branch.PREPARED
        if branch.state != expected:
            raise XAException(XAER_PROTO, "cannot commit branch %r in state %s%s" %
                              (xid, branch.state, " with one phase" if one_phase else ""))
        if branch.rollback_only:
            self._discharge(branch, True)
            raise XAException(XA_RBROLLBACK, "branch %r was marked for rollback" % (xid,))
        self._discharge(branch, False)
        if branch.outcome != "committed":
            raise XAException(XA_RBROLLBACK, "commit of branch %r failed" % (xid,))

    def rollback(self, xid: Xid) -> None:
        branch = self._branch(xid)
        if branch.state not in (_Branch.ENDED, _Branch.PREPARED):
            raise XAException(XAER_PROTO, "cannot roll back branch %r in state %s" % (xid, branch.state))
        self._discharge(branch, True)

    def recover(self) -> List[Xid]:
        """Branches prepared but not yet completed."""
        return [b.xid for b in self._branches.values() if b.state == _Branch.PREPARED]

    def _discharge(self, branch: _Branch, failed: bool) -> None:
        try:
            if failed:
                branch.transaction.abort()
            else:
                branch.transaction.commit()
            self._wait(lambda: branch.outcome is not None, "Discharging transaction")
        finally:
            del self._branches[branch.xid]
        log.debug("branch %r %s", branch.xid, branch.outcome)

    def on_transaction_declared(self, event):
        branch = self._for(event.transaction)
        if branch is not None:
            branch.declared = True

    def on_transaction_declare_failed(self, event):
        branch = self._for(event.transaction)
        if branch is not None:
            branch.declare_failed = True

    def on_transaction_committed(self, event):
        branch = self._for(event.transaction)
        if branch is not None:
            branch.outcome = "committed"

    def on_transaction_aborted(self, event):
        branch = self._for(event.transaction)
        if branch is not None:
            branch.outcome = "aborted"

    def on_transaction_commit_failed(self, event):
        branch = self._for(event.transaction)
        if branch is not None:
            branch.outcome = "failed"
