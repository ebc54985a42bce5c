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

"""Errors that abort a cleaning run.

Per-node validity failures inside a pass are not errors; they just leave the
node alone.
"""


class CleanerError(Exception):
    pass


class ParseError(CleanerError, ValueError):
    pass


class PassError(CleanerError):
    def __init__(self, pass_name: str, reason: str):
        super().__init__(f"{pass_name} failed: {reason}")
        self.pass_name = pass_name


class OutputGrewError(CleanerError):
    def __init__(self, input_size: int, output_size: int):
        super().__init__("cleaned file is bigger than original")
        self.input_size = input_size
        self.output_size = output_size


class IoError(CleanerError, OSError):
    pass
