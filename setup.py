#!/usr/bin/env python
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

"""
brokersamples setup script

The samples are plain python modules on top of the python-qpid-proton
client. Every sample can be started through the ``brokersamples-run``
dispatcher, e.g.::

    brokersamples-run SolJMSProducer -username user -url amqp://broker:5672 -physicalTopic a/b
"""

from setuptools import setup, find_packages

setup(name='brokersamples',
      version='1.0.0',
      description='Sample programs for a message broker client API over AMQP 1.0',
      license="Apache Software License",
      packages=find_packages(include=['brokersamples', 'brokersamples.*']),
      python_requires='>=3.8',
      install_requires=[
          'python-qpid-proton>=0.39',
          'ldap3>=2.9',
      ],
      extras_require={
          'test': ['pytest'],
      },
      entry_points={
          'console_scripts': [
              'brokersamples-run = brokersamples.__main__:main',
          ],
      },
      classifiers=[
          "License :: OSI Approved :: Apache Software License",
          "Intended Audience :: Developers",
          "Programming Language :: Python",
          "Programming Language :: Python :: 3",
      ])
