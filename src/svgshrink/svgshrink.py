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

"""Shrink svg without changing how it renders.

Usage:
svgshrink.py --multipass icon.svg --output_file icon.min.svg
<cleaned svg dumped to stdout if no --output_file>
"""
from absl import app
from absl import flags
import sys
from svgshrink.cleaner import CleaningOptions, clean_file
from svgshrink.errors import CleanerError
from svgshrink.svg import ParseOptions, WriteOptions


FLAGS = flags.FLAGS


flags.DEFINE_string("output_file", "-", "Output SVG file ('-' means stdout)")
flags.DEFINE_bool("remove_comments", True, "Remove XML comments")
flags.DEFINE_bool("remove_title_meta_desc", True, "Remove title, desc and metadata")
flags.DEFINE_bool(
    "remove_nonsvg_content", True, "Remove elements and attributes in editor namespaces"
)
flags.DEFINE_bool(
    "apply_transform_to_shapes", True, "Fold transforms into basic shape geometry"
)
flags.DEFINE_bool("ungroup_groups", True, "Remove groups that do nothing")
flags.DEFINE_bool("round_numbers", True, "Round numbers to --precision digits")
flags.DEFINE_integer("precision", 6, "Decimal digits to keep", lower_bound=0)
flags.DEFINE_bool("multipass", False, "Clean repeatedly until the size stops changing")
flags.DEFINE_bool(
    "allow_bigger_file", False, "Write the result even if it is bigger than the input"
)
flags.DEFINE_bool("append_newline", False, "End the output with a newline")
flags.DEFINE_bool(
    "copy_on_error", False, "On failure copy the input file to --output_file as is"
)
flags.DEFINE_bool("keep_comments_on_parse", True, "Keep comments when parsing")
flags.DEFINE_bool("pretty_print", False, "Indent the output")
flags.DEFINE_bool("quiet", False, "Don't report how much smaller the file got")


def cleaning_options_from_flags() -> CleaningOptions:
    return CleaningOptions(
        remove_comments=FLAGS.remove_comments,
        remove_title_meta_desc=FLAGS.remove_title_meta_desc,
        remove_nonsvg_content=FLAGS.remove_nonsvg_content,
        apply_transform_to_shapes=FLAGS.apply_transform_to_shapes,
        ungroup_groups=FLAGS.ungroup_groups,
        round_numbers=FLAGS.round_numbers,
        precision=FLAGS.precision,
        multipass=FLAGS.multipass,
        allow_bigger_file=FLAGS.allow_bigger_file,
        append_newline=FLAGS.append_newline,
        copy_on_error=FLAGS.copy_on_error,
    )


def _run(argv):
    if len(argv) > 2:
        raise app.UsageError("Expected at most one input file")
    input_file = argv[1] if len(argv) > 1 else None

    try:
        result = clean_file(
            input_file,
            FLAGS.output_file,
            cleaning_options_from_flags(),
            ParseOptions(keep_comments=FLAGS.keep_comments_on_parse),
            WriteOptions(pretty_print=FLAGS.pretty_print),
        )
    except CleanerError as e:
        print(f"Error: {e}.", file=sys.stderr)
        return 1

    if not FLAGS.quiet:
        print(f"Your image is {result.ratio():.2f}% smaller now.", file=sys.stderr)
    return 0


def main(argv=None):
    # We don't seem to be __main__ when run as cli tool installed by setuptools
    app.run(_run, argv=argv)


if __name__ == "__main__":
    main()
