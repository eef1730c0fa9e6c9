"""
Export and format-listing CLI commands.
"""

import os

from quizexport.cli import load_quizzes
from quizexport.errors import ExportError
from quizexport.export import FORMAT_ALIASES, RENDERERS, export_quizzes
from quizexport.export_utils import sanitize_filename
from quizexport.models import PrintOptions


def register_export_commands(subparsers):
    """Register export-related subcommands."""

    # export
    p = subparsers.add_parser("export", help="Export quizzes from a JSON file.")
    p.add_argument("input", help="JSON file with a quiz or an array of quizzes.")
    p.add_argument(
        "--format",
        dest="fmt",
        choices=sorted(FORMAT_ALIASES),
        help="Export format (default: export.default_format from config).",
    )
    p.add_argument("--output", type=str, help="Output file path.")
    p.add_argument(
        "--preset",
        choices=["defaults", "compact", "teacher_edition"],
        help="Print options preset (default: export.default_print_options).",
    )
    p.add_argument("--group-by-type", action="store_true", help="Group questions by type.")
    p.add_argument("--hints", action="store_true", help="Include hints.")
    p.add_argument("--explanations", action="store_true", help="Include explanations.")
    p.add_argument("--no-cover", action="store_true", help="Omit the cover page.")
    p.add_argument("--scope", type=str, help="Scope name used in the filename.")

    # formats
    subparsers.add_parser("formats", help="List supported export formats.")


def build_print_options(config, args):
    """Resolve print options from the preset plus command-line overrides."""
    preset = args.preset or config["export"]["default_print_options"]
    options = PrintOptions.preset(preset)
    overrides = {}
    if args.group_by_type:
        overrides["group_questions_by_type"] = True
    if args.hints:
        overrides["include_hints"] = True
    if args.explanations:
        overrides["include_explanations"] = True
    if args.no_cover:
        overrides["include_cover"] = False
    return options.model_copy(update=overrides) if overrides else options


def handle_export(config, args):
    """Export quizzes to file. Returns a process exit code."""
    try:
        quizzes = load_quizzes(args.input)
    except (OSError, ValueError) as e:
        print(f"Error: could not read {args.input}: {e}")
        return 1

    if not quizzes:
        print(f"Error: {args.input} contains no quizzes.")
        return 1

    export_cfg = config["export"]
    fmt = args.fmt or export_cfg["default_format"]
    try:
        options = build_print_options(config, args)
        export_file = export_quizzes(
            quizzes,
            fmt,
            print_options=options,
            scope=args.scope or export_cfg["scope"],
            config=config,
        )
    except (ExportError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    if args.output:
        out_path = args.output
    else:
        stem, ext = os.path.splitext(export_file.filename)
        out_path = os.path.join(export_cfg["output_dir"], sanitize_filename(stem) + ext)
    try:
        with open(out_path, "wb") as f:
            f.write(export_file.read_bytes())
    except OSError as e:
        print(f"Error: could not write {out_path}: {e}")
        return 1

    print(f"[OK] Exported {len(quizzes)} quiz(zes) to: {out_path}")
    return 0


def handle_formats(config, args):
    """Print the supported formats with extension and mime type."""
    aliases = {fmt: alias for alias, fmt in FORMAT_ALIASES.items()}
    print(f"\n{'Alias':<6} {'Format':<15} {'Ext':<5} {'MIME type'}")
    print(f"{'---':<6} {'---':<15} {'---':<5} {'---'}")
    for fmt, renderer in RENDERERS.items():
        print(f"{aliases.get(fmt, ''):<6} {fmt.value:<15} {renderer.extension:<5} {renderer.mime_type}")
    return 0
