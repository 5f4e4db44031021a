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
Console input for event driven samples.

Samples that wait for the user to press Enter keep running their
container; a daemon thread reads standard input and hands each line to the
event loop as an :class:`proton.reactor.ApplicationEvent`, which the
container dispatches to its handler's ``on_<event type>`` method.
"""

import sys
import threading
from typing import IO, Optional

from proton.reactor import ApplicationEvent, Container, EventInjector


class ConsoleInput(object):
    """
    :param event_type: Type of the events triggered, ``"enter"`` makes the
        handler's ``on_enter`` run for every line.
    :param stream: Where lines are read from, standard input by default.
    """

    def __init__(self, event_type: str = "enter", stream: Optional[IO[str]] = None) -> None:
        self.event_type = event_type
        self.stream = stream or sys.stdin
        self.injector = EventInjector()
        self._thread = None

    def attach(self, container: Container) -> None:
        """Start delivering lines to ``container``; call from its event thread."""
        container.selectable(self.injector)
        self._thread = threading.Thread(target=self._read, name="console-input")
        self._thread.daemon = True
        self._thread.start()

    def _read(self) -> None:
        while True:
            line = self.stream.readline()
            if not line:
                break
            self.injector.trigger(ApplicationEvent(self.event_type, subject=line.rstrip("\n")))

    def close(self) -> None:
        """Stop delivering events so the container can finish."""
        self.injector.close()
