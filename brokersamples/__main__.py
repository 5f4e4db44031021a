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
Start a sample program by name::

    python -m brokersamples SolJMSProducer -url amqp://broker:5672 -username user -physicalTopic a/b
    python -m brokersamples intro.hello_world_pub amqp://broker:5672 default user cf/default my/topic
"""

import importlib
import sys
from typing import List, Optional

from .samples import SAMPLES


def usage(out=None) -> None:
    out = out or sys.stderr
    out.write("Usage: run <sample> [arguments]\n\nAvailable samples:\n")
    width = max(len(name) for name in SAMPLES)
    for name, module in sorted(SAMPLES.items()):
        out.write("  %-*s  (%s)\n" % (width, name, module))


def resolve(name: str) -> Optional[str]:
    """The module name of a sample, from either of the names it is known by."""
    if name in SAMPLES:
        return SAMPLES[name]
    if name in SAMPLES.values():
        return name
    return None


def main(argv: Optional[List[str]] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    if not argv or argv[0] in ("-h", "--help"):
        usage()
        return 2
    module = resolve(argv[0])
    if module is None:
        sys.stderr.write("Unknown sample: %s\n\n" % argv[0])
        usage()
        return 2
    sample = importlib.import_module(".samples." + module, __package__)
    return sample.main(argv[1:])


if __name__ == "__main__":
    sys.exit(main())
