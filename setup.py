# Copyright (c) 2019 Iotic Labs Ltd. All rights reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     https://github.com/Iotic-Labs/py-ubjson/blob/master/LICENSE
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import os

from setuptools import setup

from pynbt import __version__ as version


def load_description(filename):
    script_dir = os.path.abspath(os.path.dirname(__file__))
    with open(os.path.join(script_dir, filename), 'r') as infile:
        return infile.read()


setup(
    name='py-nbt',
    version=version,
    description='Named Binary Tag (NBT) encoder/decoder',
    long_description=load_description('README.md'),
    long_description_content_type='text/markdown',
    license='Apache License 2.0',
    packages=['pynbt'],
    python_requires='>=3.7',
    extras_require={
        'test': [
            'hypothesis>=6.0'
        ],
        'dev': [
            'hypothesis>=6.0',
            'coverage>=5.0'
        ]
    },
    zip_safe=False,
    keywords=['nbt', 'named binary tag', 'modified utf-8'],
    classifiers=[
        'Development Status :: 4 - Beta',
        'License :: OSI Approved :: Apache Software License',
        'Intended Audience :: Developers',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Topic :: Software Development :: Libraries',
        'Topic :: Software Development :: Libraries :: Python Modules'
    ]
)
