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

"""Runs the cleaning passes over a document until it stops shrinking.

Every cycle parses from bytes, cleans, and serializes again. The tree is never
reused between cycles; some passes aren't safe to re-run on their own output
in place.
"""

from absl import logging
import dataclasses
import os
import shutil
import sys
from typing import Callable, NamedTuple, Optional, Tuple
from svgshrink.errors import (
    CleanerError,
    IoError,
    OutputGrewError,
    PassError,
)
from svgshrink.svg import SVG, ParseOptions, WriteOptions


# Give up chasing a fixed point after this many parse-clean-write cycles
MAX_CYCLES = 64


@dataclasses.dataclass(frozen=True)
class CleaningOptions:
    remove_comments: bool = True
    remove_title_meta_desc: bool = True
    remove_nonsvg_content: bool = True
    apply_transform_to_shapes: bool = True
    ungroup_groups: bool = True
    round_numbers: bool = True
    precision: int = 6
    multipass: bool = False
    allow_bigger_file: bool = False
    append_newline: bool = False
    copy_on_error: bool = False


# A stage mutates the tree in place and must not change how it renders.
# With nothing left to match it must leave the tree untouched.
Stage = Callable[[SVG, CleaningOptions], None]

# Fixed order; each entry is enabled by the CleaningOptions field of that name
PASSES: Tuple[Tuple[str, Stage], ...] = (
    ("remove_comments", lambda svg, _: svg.remove_comments(inplace=True)),
    ("remove_title_meta_desc", lambda svg, _: svg.remove_title_meta_desc(inplace=True)),
    ("remove_nonsvg_content", lambda svg, _: svg.remove_nonsvg_content(inplace=True)),
    (
        "apply_transform_to_shapes",
        lambda svg, _: svg.apply_transform_to_shapes(inplace=True),
    ),
    ("ungroup_groups", lambda svg, _: svg.ungroup_groups(inplace=True)),
    (
        "round_numbers",
        lambda svg, options: svg.round_floats(options.precision, inplace=True),
    ),
)


class CleanResult(NamedTuple):
    output: bytes
    input_size: int
    cycles: int

    def ratio(self) -> float:
        """Size reduction, in percent of the input."""
        if not self.input_size:
            return 0.0
        return 100.0 - len(self.output) / self.input_size * 100.0


def clean_svg(svg: SVG, options: CleaningOptions):
    for name, stage in PASSES:
        if not getattr(options, name):
            continue
        try:
            stage(svg, options)
        except ValueError as e:
            raise PassError(name, str(e)) from e


def clean(
    data: bytes,
    cleaning_options: CleaningOptions = CleaningOptions(),
    parse_options: ParseOptions = ParseOptions(),
    write_options: WriteOptions = WriteOptions(),
) -> CleanResult:
    """Clean data, repeating the whole cycle until size settles if multipass.

    Raises ParseError, PassError, or OutputGrewError if the result would be
    bigger than data and that isn't allowed.
    """
    input_size = len(data)
    buf = data
    prev_size = input_size
    cycles = 0

    while True:
        svg = SVG.fromstring(buf, parse_options)
        clean_svg(svg, cleaning_options)
        buf = svg.tobytes(write_options)
        cycles += 1
        logging.info("Cycle %d: %d bytes", cycles, len(buf))

        if not cleaning_options.multipass:
            break
        # length, not content, is the convergence signal
        if len(buf) == prev_size:
            break
        if cycles >= MAX_CYCLES:
            logging.warning("Size still changing after %d cycles, stopping", cycles)
            break
        prev_size = len(buf)

    if not cleaning_options.allow_bigger_file and len(buf) > input_size:
        raise OutputGrewError(input_size, len(buf))

    # after the size check; a newline the user asked for may grow the file
    if cleaning_options.append_newline:
        buf += b"\n"

    return CleanResult(buf, input_size, cycles)


def load_file(path: str) -> bytes:
    try:
        with open(path, "rb") as f:
            return f.read()
    except OSError as e:
        raise IoError(f"unable to read {path}: {e.strerror}") from e


def load_stdin() -> bytes:
    try:
        return sys.stdin.buffer.read()
    except OSError as e:
        raise IoError(f"unable to read stdin: {e.strerror}") from e


def save_file(data: bytes, path: str):
    try:
        with open(path, "wb") as f:
            f.write(data)
    except OSError as e:
        raise IoError(f"unable to write {path}: {e.strerror}") from e


def write_stdout(data: bytes):
    try:
        sys.stdout.buffer.write(data)
        sys.stdout.buffer.flush()
    except OSError as e:
        raise IoError(f"unable to write stdout: {e.strerror}") from e


def _is_file(path: Optional[str]) -> bool:
    return path is not None and path != "-"


def copy_original(input_path: Optional[str], output_path: Optional[str]) -> bool:
    """Copy the untouched input to the output, if both are distinct files."""
    if not (_is_file(input_path) and _is_file(output_path)):
        return False
    if os.path.abspath(input_path) == os.path.abspath(output_path):
        return False
    try:
        shutil.copyfile(input_path, output_path)
    except OSError as e:
        raise IoError(f"unable to copy {input_path} to {output_path}") from e
    logging.info("Copied %s to %s unchanged", input_path, output_path)
    return True


def clean_file(
    input_path: Optional[str],
    output_path: Optional[str],
    cleaning_options: CleaningOptions = CleaningOptions(),
    parse_options: ParseOptions = ParseOptions(),
    write_options: WriteOptions = WriteOptions(),
) -> CleanResult:
    """Clean one file (or stdin when input_path is None or '-').

    Output goes to output_path, or stdout when that is None or '-'. Nothing
    partially cleaned is ever written; if cleaning fails and copy_on_error is
    set the original is copied to output_path instead, then the error is
    re-raised.
    """
    if _is_file(input_path):
        if not os.path.exists(input_path):
            raise IoError(f"input file {input_path} does not exist")
        data = load_file(input_path)
    else:
        data = load_stdin()

    try:
        result = clean(data, cleaning_options, parse_options, write_options)
    except CleanerError as e:
        logging.error("Cleaning aborted: %s", e)
        if cleaning_options.copy_on_error:
            copy_original(input_path, output_path)
        raise

    if _is_file(output_path):
        save_file(result.output, output_path)
    else:
        write_stdout(result.output)
    return result
