# Copyright 2020 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#      http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

from setuptools import setup, find_packages


setup_args = dict(
    name="svgshrink",
    version="0.1.0",
    package_dir={'': 'src'},
    packages=find_packages(where='src'),
    entry_points={
        'console_scripts': [
            'svgshrink=svgshrink.svgshrink:main',
        ],
    },
    install_requires=[
        "absl-py>=0.9.0",
        "lxml>=4.0",
    ],
    extras_require={
        "dev": [
            "pytest",
            "pytest-clarity",
        ],
    },
    python_requires=">=3.7",

    # metadata to display on PyPI
    description=(
        "Shrinks svg files by removing redundant markup "
        "without changing how they render"
    ),
)


if __name__ == "__main__":
    setup(**setup_args)
